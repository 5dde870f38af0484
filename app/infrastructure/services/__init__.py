"""
Application services.

Provides the cached settings provider.
"""

from infrastructure.services.providers import get_settings

__all__ = [
    "get_settings",
]
