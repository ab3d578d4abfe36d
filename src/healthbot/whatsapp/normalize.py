"""Route a raw webhook body to the adapter for its gateway format."""

from typing import Any

from . import wasender_adapter, whapi_adapter
from .models import NormalizedMessage, Provider


def detect_provider(payload: Any) -> Provider | None:
    """Tag the payload by the shape of its `event` field.

    WasenderAPI sends a string tag ("messages.received"); Whapi sends an
    object ({"type": ..., "event": ...}).
    """
    if not isinstance(payload, dict):
        return None
    event = payload.get("event")
    if isinstance(event, str):
        return "wasender"
    if isinstance(event, dict):
        return "whapi"
    return None


def normalize(payload: Any) -> NormalizedMessage | None:
    """Normalize any supported webhook body. None means "not a message event"."""
    provider = detect_provider(payload)
    if provider == "wasender":
        return wasender_adapter.normalize(payload)
    if provider == "whapi":
        return whapi_adapter.normalize(payload)
    return None
