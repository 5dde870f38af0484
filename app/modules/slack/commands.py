"""Message logic behind the operator ``test`` and ``send`` commands."""

import hashlib
from typing import Optional

from pydantic import BaseModel

from infrastructure.configuration import NotificationFeatureSettings
from infrastructure.logging import get_module_logger
from integrations.slack import PRODUCT_NAME, SlackDispatcher, SlackError
from models.repositories import User
from models.slack import Payload

logger = get_module_logger()

FALLBACK_EMOJI = ":envelope:"
GRAVATAR_SIZE = 36


class CommandResult(BaseModel):
    exit_code: int = 0
    message: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.exit_code == 0


def can_post(is_admin: bool, features: NotificationFeatureSettings) -> bool:
    """Administrators may always post; other users only when allowed."""
    return is_admin or features.ALLOW_USER_POSTS


def gravatar_url(email: str, size: int = GRAVATAR_SIZE) -> str:
    digest = hashlib.md5(email.strip().lower().encode("utf-8")).hexdigest()
    return f"https://www.gravatar.com/avatar/{digest}?s={size}&d=identicon"


def send_test_message(
    dispatcher: SlackDispatcher, user: User, channel: Optional[str] = None
) -> CommandResult:
    """Send a test message and wait for Slack's answer.

    Returns:
        CommandResult with exit code 1 and the failure text when the message
        could not be delivered
    """
    payload = Payload(
        text=f"Test message sent from {PRODUCT_NAME}",
        channel=channel or None,
        username=user.display,
    )
    payload.set_icon_emoji(FALLBACK_EMOJI)

    try:
        dispatcher.send(payload)
    except SlackError as e:
        logger.warning(
            "slack_test_message_failed",
            user=user.username,
            channel=channel,
            error=str(e),
        )
        return CommandResult(exit_code=1, message=str(e))

    logger.info("slack_test_message_sent", user=user.username, channel=channel)
    return CommandResult(message="Test message sent")


def post_message(
    dispatcher: SlackDispatcher,
    user: User,
    message: str,
    channel: Optional[str] = None,
    emoji: Optional[str] = None,
) -> CommandResult:
    """Queue an operator message for asynchronous delivery.

    ``emoji`` is an icon URL when it contains ``://`` and an emoji code
    otherwise. Without it the user's Gravatar is used, or ``:envelope:`` when
    the user has no email address.
    """
    payload = Payload(
        text=message,
        channel=channel or None,
        username=user.display,
        unfurl_links=True,
    )

    if emoji:
        payload.set_icon(emoji)
    elif user.email_address:
        payload.set_icon_url(gravatar_url(user.email_address))
    else:
        payload.set_icon_emoji(FALLBACK_EMOJI)

    dispatcher.send_async(payload)
    logger.info("slack_message_queued", user=user.username, channel=channel)
    return CommandResult(message="Message queued")
