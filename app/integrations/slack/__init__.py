"""Slack Integration Package.

This package contains the Slack incoming-webhook integration. Contains:

- webhook: SlackDispatcher, synchronous and fire-and-forget delivery.
- exceptions: ConfigurationError and TransportError raised by delivery.
"""

from integrations.slack.exceptions import (
    ConfigurationError,
    SlackError,
    TransportError,
)
from integrations.slack.webhook import (
    PRODUCT_NAME,
    SlackDispatcher,
    normalize_channel,
)

__all__ = [
    "ConfigurationError",
    "SlackError",
    "TransportError",
    "PRODUCT_NAME",
    "SlackDispatcher",
    "normalize_channel",
]
