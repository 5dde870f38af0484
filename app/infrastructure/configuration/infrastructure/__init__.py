"""Infrastructure settings __init__ - exports all infrastructure settings."""

from infrastructure.configuration.infrastructure.web import WebSettings

__all__ = [
    "WebSettings",
]
