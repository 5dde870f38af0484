"""Notifier configuration settings - main aggregator."""

from pydantic_settings import BaseSettings, SettingsConfigDict

# Integration settings
from infrastructure.configuration.integrations import SlackSettings

# Feature settings
from infrastructure.configuration.features import NotificationFeatureSettings

# Infrastructure settings
from infrastructure.configuration.infrastructure import WebSettings


class Settings(BaseSettings):
    """Notifier configuration settings - main aggregator.

    Aggregates all domain-specific settings into a single configuration object.
    Settings are organized by concern:

    - **Integrations**: the Slack incoming webhook
    - **Features**: which repository events are posted
    - **Infrastructure**: the host web interface (links, rendering bounds)

    Environment Variables:
        PREFIX: Environment prefix for non-production deployments
        LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR)
        GIT_SHA: Git commit SHA for deployment tracking

    Example:
        ```python
        from infrastructure.services import get_settings

        settings = get_settings()

        team = settings.slack.SLACK_TEAM
        if settings.notifications.USE_PROJECT_CHANNELS:
            ...
        base_url = settings.web.CANONICAL_URL
        ```
    """

    # Application-level settings
    PREFIX: str = ""
    LOG_LEVEL: str = "INFO"
    GIT_SHA: str = "Unknown"

    # Integration settings
    slack: SlackSettings

    # Feature settings
    notifications: NotificationFeatureSettings

    # Infrastructure settings
    web: WebSettings

    @property
    def is_production(self) -> bool:
        """Check if the application is running in production.

        Returns:
            True if PREFIX is empty (production), False otherwise.
        """
        return not bool(self.PREFIX)

    def __init__(self, **kwargs):
        """Initialize Settings with automatic subsettings instantiation.

        Args:
            **kwargs: Optional overrides for specific settings sections.
        """
        settings_map = {
            # Integrations
            "slack": SlackSettings,
            # Features
            "notifications": NotificationFeatureSettings,
            # Infrastructure
            "web": WebSettings,
        }

        for setting_name, setting_class in settings_map.items():
            if setting_name not in kwargs:
                kwargs[setting_name] = setting_class()

        super().__init__(**kwargs)

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )


# Create the singleton settings instance
settings = Settings()
