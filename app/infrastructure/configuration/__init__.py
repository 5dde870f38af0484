"""Infrastructure configuration module - public API.

This module provides centralized configuration management for the notifier
using Pydantic BaseSettings with domain-based organization.

Exports:
    settings: Singleton Settings instance (main configuration object)
    Settings: Main settings class (for testing/overrides)
    SlackSettings, NotificationFeatureSettings, WebSettings: section classes

Example:
    ```python
    from infrastructure.services import get_settings

    settings = get_settings()

    # Access settings
    team = settings.slack.SLACK_TEAM
    post_tags = settings.notifications.POST_TAGS
    base_url = settings.web.CANONICAL_URL

    # Check environment
    if settings.is_production:
        # Production-specific logic...
    ```
"""

from infrastructure.configuration.settings import Settings, settings
from infrastructure.configuration.integrations import SlackSettings
from infrastructure.configuration.features import NotificationFeatureSettings
from infrastructure.configuration.infrastructure import WebSettings

__all__ = [
    "Settings",
    "settings",
    "SlackSettings",
    "NotificationFeatureSettings",
    "WebSettings",
]
