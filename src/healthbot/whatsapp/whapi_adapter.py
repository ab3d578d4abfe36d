"""Whapi.Cloud adapter - normalize "messages/post" webhook payloads.

Payload shape:
    {
        "event": {"type": "messages", "event": "post"},
        "messages": [
            {"id": "...", "from_me": false, "chat_id": "...@s.whatsapp.net",
             "from_name": "Ada", "type": "text", "text": {"body": "..."}}
        ]
    }
"""

from typing import Any

from ._fields import as_dict, clean_text, non_empty_str
from .models import NormalizedMessage


def _is_message_post(event: dict[str, Any]) -> bool:
    return event.get("type") == "messages" and event.get("event") == "post"


def normalize(payload: dict[str, Any]) -> NormalizedMessage | None:
    """Normalize a Whapi webhook body. Only the first message is handled.

    Returns None for non-message events or an empty messages list.
    """
    if not _is_message_post(as_dict(payload.get("event"))):
        return None

    messages = payload.get("messages")
    if not isinstance(messages, list) or not messages:
        return None

    first = messages[0]
    if not isinstance(first, dict):
        return None

    return NormalizedMessage(
        provider="whapi",
        sender_id=non_empty_str(first.get("chat_id")),
        is_from_self=first.get("from_me") is True,
        text=clean_text(as_dict(first.get("text")).get("body")),
        display_name=clean_text(first.get("from_name")),
        message_id=non_empty_str(first.get("id")),
    )
