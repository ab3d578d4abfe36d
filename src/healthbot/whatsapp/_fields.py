"""Field-presence helpers shared by the gateway adapters."""

from typing import Any


def as_dict(value: Any) -> dict[str, Any]:
    """Return value if it is a dict, else an empty one."""
    return value if isinstance(value, dict) else {}


def non_empty_str(value: Any) -> str | None:
    """Return value when it is a string with non-whitespace content."""
    if isinstance(value, str) and value.strip():
        return value
    return None


def clean_text(value: Any) -> str | None:
    """Trim message text; all-whitespace or non-string text is absent."""
    text = non_empty_str(value)
    return text.strip() if text is not None else None
