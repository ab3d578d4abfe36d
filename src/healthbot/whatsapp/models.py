"""WhatsApp message models."""

from dataclasses import dataclass
from typing import Literal

Provider = Literal["wasender", "whapi"]

# Multi-party chats use the g.us domain; one-to-one chats use s.whatsapp.net.
GROUP_JID_SUFFIX = "@g.us"


def is_group_jid(sender_id: str | None) -> bool:
    return bool(sender_id) and sender_id.endswith(GROUP_JID_SUFFIX)


@dataclass(frozen=True)
class NormalizedMessage:
    """Canonical inbound message, whatever gateway format it arrived in.

    PII: `sender_id`, `text` and `display_name` stay in memory for the
    duration of the webhook request. Never log them.
    """

    provider: Provider
    sender_id: str | None
    is_from_self: bool
    text: str | None
    display_name: str | None = None
    message_id: str | None = None

    @property
    def is_group_chat(self) -> bool:
        return is_group_jid(self.sender_id)


def phone_from_jid(sender_id: str) -> str:
    """Strip the WhatsApp domain: "5511999999999@s.whatsapp.net" -> "5511999999999"."""
    return sender_id.split("@")[0]
