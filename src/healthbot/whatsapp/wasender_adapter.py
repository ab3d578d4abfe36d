"""WasenderAPI adapter - normalize "messages.received" webhook payloads.

Payload shape:
    {
        "event": "messages.received",
        "data": {
            "messages": {
                "key": {"id": ..., "fromMe": false, "remoteJid": "...@s.whatsapp.net"},
                "remoteJid": "...",          # older payloads, flat
                "pushName": "Ada",
                "message": {
                    "conversation": "..."
                    | "extendedTextMessage": {"text": "..."}
                    | "imageMessage": {"caption": "..."}
                }
            }
        }
    }
"""

from typing import Any

from ._fields import as_dict, clean_text, non_empty_str
from .models import NormalizedMessage

MESSAGE_RECEIVED_EVENT = "messages.received"


def _extract_text(message: dict[str, Any]) -> str | None:
    # Priority: plain text, then extended text (links/replies), then image caption.
    # The first non-empty string wins even if it is only whitespace.
    candidates = (
        message.get("conversation"),
        as_dict(message.get("extendedTextMessage")).get("text"),
        as_dict(message.get("imageMessage")).get("caption"),
    )
    for candidate in candidates:
        if isinstance(candidate, str) and candidate:
            return clean_text(candidate)
    return None


def normalize(payload: dict[str, Any]) -> NormalizedMessage | None:
    """Normalize a WasenderAPI webhook body.

    Returns None when the body is not a received-message event or carries no
    message container. Missing sender or text is encoded in the result
    (sender_id=None / text=None), never raised.
    """
    if payload.get("event") != MESSAGE_RECEIVED_EVENT:
        return None

    messages = as_dict(payload.get("data")).get("messages")
    if not isinstance(messages, dict):
        return None

    key = as_dict(messages.get("key"))
    sender_id = non_empty_str(key.get("remoteJid")) or non_empty_str(messages.get("remoteJid"))

    return NormalizedMessage(
        provider="wasender",
        sender_id=sender_id,
        is_from_self=key.get("fromMe") is True,
        text=_extract_text(as_dict(messages.get("message"))),
        display_name=clean_text(messages.get("pushName")),
        message_id=non_empty_str(key.get("id")),
    )
