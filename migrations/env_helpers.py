"""Database URL helpers for Alembic migrations.

Kept apart from env.py so they can be tested without alembic.context.
"""

from __future__ import annotations

import os

_DRIVER_SCHEME = "postgresql+psycopg2"
_PLAIN_SCHEMES = ("postgres", "postgresql")


def to_sqlalchemy_url(url: str) -> str:
    """Pin the psycopg2 driver on postgres:// or postgresql:// URLs.

    Hosted Postgres providers (Neon, Heroku) hand out postgres:// URLs, which
    SQLAlchemy no longer accepts. URLs that already name a driver pass through.
    """
    scheme, sep, rest = url.partition("://")
    if not sep:
        raise ValueError("DATABASE_URL must be a URL (scheme://...)")
    if scheme in _PLAIN_SCHEMES:
        return f"{_DRIVER_SCHEME}://{rest}"
    return url


def _get_database_url() -> str:
    url = os.environ.get("DATABASE_URL", "").strip()
    if not url:
        raise RuntimeError("DATABASE_URL is required to run migrations")
    return to_sqlalchemy_url(url)
