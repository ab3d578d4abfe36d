"""Users: one row per WhatsApp phone number that has talked to the bot.

No message content or conversation state is stored.
"""

from typing import Any

from healthbot.infra.db import fetchone, txn
from healthbot.observability.logging import get_logger
from healthbot.observability.redaction import hash_identifier, safe_log_context

logger = get_logger(__name__)

_UPSERT_USER_SQL = """
INSERT INTO users (id, phone)
VALUES (gen_random_uuid(), %s)
ON CONFLICT (phone) DO UPDATE SET updated_at = now()
RETURNING id, (xmax = 0) AS inserted
"""


def upsert_user(cur: Any, *, phone: str) -> tuple[str, bool]:
    """Insert the user or touch updated_at.

    Returns:
        (user_id, inserted) where inserted is False for a returning user.
    """
    if not phone:
        raise ValueError("phone is required")
    row = fetchone(cur, _UPSERT_USER_SQL, (phone,))
    if row is None:
        raise RuntimeError("users upsert returned no row")
    return str(row[0]), bool(row[1])


class PostgresUserRegistry:
    """Records each sender in the users table, one short transaction per call."""

    def __init__(self, dsn: str) -> None:
        self.dsn = dsn

    def record_contact(self, phone: str) -> None:
        with txn(dsn=self.dsn) as cur:
            _, inserted = upsert_user(cur, phone=phone)
        if inserted:
            logger.info(
                "new user registered",
                extra={"extra_fields": safe_log_context(phone_hash=hash_identifier(phone))},
            )
