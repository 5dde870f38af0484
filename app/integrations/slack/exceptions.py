"""Errors raised while delivering messages to a Slack incoming webhook."""

from typing import Optional


class SlackError(Exception):
    """Base class for Slack delivery failures."""


class ConfigurationError(SlackError):
    """A setting required to build the webhook URL is missing.

    Raised before any network call is attempted.
    """

    def __init__(self, setting: str):
        self.setting = setting
        super().__init__(
            f"Could not send message to Slack because '{setting}' is not defined!"
        )


class TransportError(SlackError):
    """The webhook did not accept the message.

    Attributes:
        status_code: HTTP status returned by Slack, None when no response was
            received (connection failure, timeout)
        response_body: Body returned by Slack, if any
        payload: Outbound JSON document
    """

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        response_body: Optional[str] = None,
        payload: Optional[str] = None,
    ):
        self.status_code = status_code
        self.response_body = response_body
        self.payload = payload
        super().__init__(message)
