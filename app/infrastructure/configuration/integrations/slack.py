"""Slack incoming-webhook settings."""

from infrastructure.configuration.base import IntegrationSettings


class SlackSettings(IntegrationSettings):
    """Slack incoming-webhook configuration.

    The webhook endpoint is derived from the team, token and hook path:
    ``https://{team}.slack.com/services/hooks/{hook}?token={token}``.

    Environment Variables:
        SLACK_TEAM: Slack team (workspace) subdomain
        SLACK_TOKEN: Incoming-webhook token
        SLACK_HOOK: Hook path (default: incoming-webhook)
        SLACK_DEFAULT_CHANNEL: Channel used when a payload names none
        SLACK_DEFAULT_EMOJI: Icon used when a payload sets none
        SLACK_GIT_EMOJI: Icon for branch and tag notifications
        SLACK_TICKET_EMOJI: Icon for ticket notifications
        SLACK_DISPATCH_MAX_WORKERS: Maximum concurrent delivery threads

    Example:
        ```python
        from infrastructure.services import get_settings

        settings = get_settings()

        team = settings.slack.SLACK_TEAM
        default_channel = settings.slack.SLACK_DEFAULT_CHANNEL
        ```
    """

    SLACK_TEAM: str = ""
    SLACK_TOKEN: str = ""
    SLACK_HOOK: str = "incoming-webhook"
    SLACK_DEFAULT_CHANNEL: str = ""
    SLACK_DEFAULT_EMOJI: str = ""
    SLACK_GIT_EMOJI: str = ""
    SLACK_TICKET_EMOJI: str = ""
    SLACK_DISPATCH_MAX_WORKERS: int = 32
