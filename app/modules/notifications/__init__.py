"""Repository event notifications for Slack.

Turns pushes and ticket changes into Slack payloads:

- markup: Markdown to Slack markup translation (MarkupTranslator)
- ref_changes / tickets: payload composers for each event family
- channels: project-scoped channel routing
- hooks: entry points called by the repository host
"""

from modules.notifications.channels import resolve_channel
from modules.notifications.exceptions import DataDependencyError, ParseTimeout
from modules.notifications.links import LinkBuilder
from modules.notifications.markup import MarkupTranslator
from modules.notifications.ref_changes import RefChangeComposer
from modules.notifications.tickets import TicketActivity, TicketComposer, classify
from modules.notifications.hooks import ReceiveHook, TicketHook

__all__ = [
    "resolve_channel",
    "DataDependencyError",
    "ParseTimeout",
    "LinkBuilder",
    "MarkupTranslator",
    "RefChangeComposer",
    "TicketActivity",
    "TicketComposer",
    "classify",
    "ReceiveHook",
    "TicketHook",
]
