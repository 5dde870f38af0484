"""Notification feature settings."""

from infrastructure.configuration.base import FeatureSettings


class NotificationFeatureSettings(FeatureSettings):
    """Switches for which repository events are posted to Slack.

    Environment Variables:
        POST_BRANCHES: Post branch creation, updates and deletion (default: True)
        POST_TAGS: Post tag creation, moves and deletion (default: True)
        POST_TICKETS: Post ticket creation and updates (default: True)
        POST_TICKET_COMMENTS: Post ticket comments (default: True)
        POST_PERSONAL_REPOS: Post events of personal repositories (default: False)
        USE_PROJECT_CHANNELS: Route to a channel per project (default: False)
        ALLOW_USER_POSTS: Let non-admin users post messages (default: False)

    Example:
        ```python
        from infrastructure.services import get_settings

        settings = get_settings()

        if settings.notifications.POST_TAGS:
            ...
        ```
    """

    POST_BRANCHES: bool = True
    POST_TAGS: bool = True
    POST_TICKETS: bool = True
    POST_TICKET_COMMENTS: bool = True
    POST_PERSONAL_REPOS: bool = False
    USE_PROJECT_CHANNELS: bool = False
    ALLOW_USER_POSTS: bool = False
