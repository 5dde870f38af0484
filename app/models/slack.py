"""Slack incoming-webhook message models.

A ``Payload`` is built once per event, handed to the dispatcher and never
mutated by it (the dispatcher applies its defaults to a copy). ``to_wire``
produces the JSON document posted in the ``payload`` form field:

    { text, channel?, username?, icon_url?|icon_emoji?, unfurl_links,
      attachments?: [ { fallback, text?, pretext?, color?,
                        fields?: [ {title, value, short} ] } ] }
"""

import json
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


def normalize_emoji(emoji: Optional[str]) -> Optional[str]:
    """Wrap a bare emoji code in colons (``smile`` -> ``:smile:``)."""
    if not emoji:
        return emoji
    if not emoji.startswith(":"):
        emoji = ":" + emoji
    if not emoji.endswith(":") or len(emoji) == 1:
        emoji = emoji + ":"
    return emoji


class AttachmentColor(str, Enum):
    """Attachment side-bar colors understood by Slack."""

    DANGER = "danger"
    WARNING = "warning"
    GOOD = "good"
    NONE = "none"


class AttachmentField(BaseModel):
    """A title/value pair displayed in an attachment table.

    Attributes:
        title: Field label
        value: Field content
        is_short: Compact layout (Slack places two short fields per row)
        markup: Render the value as Slack markup
    """

    title: str
    value: Optional[str] = None
    is_short: bool = False
    markup: bool = False

    def to_wire(self) -> Dict[str, Any]:
        return {"title": self.title, "value": self.value, "short": self.is_short}


class Attachment(BaseModel):
    """Secondary, color-coded block of a message."""

    fallback: str
    text: Optional[str] = None
    pretext: Optional[str] = None
    color: AttachmentColor = AttachmentColor.NONE
    fields: List[AttachmentField] = Field(default_factory=list)

    def add_field(self, field: AttachmentField) -> "Attachment":
        self.fields.append(field)
        return self

    def to_wire(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"fallback": self.fallback}
        if self.text is not None:
            data["text"] = self.text
        if self.pretext is not None:
            data["pretext"] = self.pretext
        if self.color is not AttachmentColor.NONE:
            data["color"] = self.color.value
        if self.fields:
            data["fields"] = [field.to_wire() for field in self.fields]
            if any(field.markup for field in self.fields):
                data["mrkdwn_in"] = ["fields"]
        return data


class Payload(BaseModel):
    """Top-level Slack message.

    The icon is either an emoji code or an image URL, never both: the icon
    setters clear the other field.

    Example:
        payload = Payload(text="Deploy finished").set_icon("rocket")
        payload.icon_emoji  # ":rocket:"
    """

    text: str
    channel: Optional[str] = None
    username: Optional[str] = None
    icon_url: Optional[str] = None
    icon_emoji: Optional[str] = None
    unfurl_links: bool = False
    attachments: List[Attachment] = Field(default_factory=list)

    def set_icon_url(self, url: Optional[str]) -> "Payload":
        self.icon_emoji = None
        self.icon_url = url or None
        return self

    def set_icon_emoji(self, emoji: Optional[str]) -> "Payload":
        self.icon_url = None
        self.icon_emoji = normalize_emoji(emoji) or None
        return self

    def set_icon(self, icon: Optional[str]) -> "Payload":
        """Set the icon from a value that is either a URL or an emoji code.

        Empty values leave the current icon untouched.
        """
        if not icon:
            return self
        if "://" in icon:
            return self.set_icon_url(icon)
        return self.set_icon_emoji(icon)

    def add_attachment(self, attachment: Attachment) -> "Payload":
        self.attachments.append(attachment)
        return self

    @property
    def has_icon(self) -> bool:
        return bool(self.icon_url or self.icon_emoji)

    def to_wire(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"text": self.text}
        if self.channel:
            data["channel"] = self.channel
        if self.username:
            data["username"] = self.username
        if self.icon_url:
            data["icon_url"] = self.icon_url
        elif self.icon_emoji:
            data["icon_emoji"] = self.icon_emoji
        data["unfurl_links"] = self.unfurl_links
        if self.attachments:
            data["attachments"] = [a.to_wire() for a in self.attachments]
        return data

    def to_json(self) -> str:
        return json.dumps(self.to_wire())
