"""PII scrubbing for log fields.

WhatsApp sender ids are phone numbers and message text may describe a
patient's symptoms. Log lines carry hashes, lengths and structure only:
every `extra_fields` dict is built with `safe_log_context`.
"""

import hashlib
import re
from typing import Any

REDACTED = "[REDACTED]"
HASH_LENGTH = 12

# Longer free-text values (error bodies, reasons) are cut to this many chars.
MAX_LOGGED_STRING = 300

# Order matters: JIDs and e-mails contain digit runs the phone pattern would split.
_SCRUB_PATTERNS = (
    re.compile(r"[\w.+-]+@(?:s\.whatsapp\.net|c\.us|g\.us|lid)\b"),
    re.compile(r"[\w.%+-]+@[\w.-]+\.[A-Za-z]{2,}"),
    re.compile(r"\+?\d[\d\s\-()]{8,}\d"),
)


def hash_identifier(value: str) -> str:
    """Stable, non-reversible tag for following one sender through the logs."""
    return hashlib.sha256(value.encode("utf-8")).hexdigest()[:HASH_LENGTH]


def redact_string(value: str) -> str:
    for pattern in _SCRUB_PATTERNS:
        value = pattern.sub(REDACTED, value)
    if len(value) > MAX_LOGGED_STRING:
        value = value[:MAX_LOGGED_STRING] + "..."
    return value


def redact_value(value: Any) -> str:
    """Render one log field as a PII-free string."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, str):
        return redact_string(value)
    if isinstance(value, dict):
        return f"dict(keys={sorted(str(k) for k in value)})"
    if isinstance(value, (list, tuple)):
        return f"list(len={len(value)})"
    return f"<{type(value).__name__}>"


def safe_log_context(**fields: Any) -> dict[str, str]:
    return {name: redact_value(value) for name, value in fields.items()}
