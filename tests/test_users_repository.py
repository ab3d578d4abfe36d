"""Tests for the users repository."""

import os
import uuid
from unittest.mock import MagicMock, patch

import pytest

from healthbot.infra.repositories.users_repository import (
    PostgresUserRegistry,
    upsert_user,
)


class TestUpsertUser:
    def test_returns_id_and_inserted_flag(self):
        cur = MagicMock()
        cur.fetchone.return_value = ("6f1c0c3e-0000-0000-0000-000000000001", True)

        user_id, inserted = upsert_user(cur, phone="5511999999999")

        assert user_id == "6f1c0c3e-0000-0000-0000-000000000001"
        assert inserted is True
        sql, params = cur.execute.call_args[0]
        assert "ON CONFLICT (phone)" in sql
        assert params == ("5511999999999",)

    def test_empty_phone_rejected(self):
        with pytest.raises(ValueError):
            upsert_user(MagicMock(), phone="")


class TestPostgresUserRegistry:
    def test_record_contact_uses_transaction(self):
        cur = MagicMock()
        cur.fetchone.return_value = ("id-1", False)
        txn_cm = MagicMock()
        txn_cm.__enter__.return_value = cur

        with patch(
            "healthbot.infra.repositories.users_repository.txn", return_value=txn_cm
        ) as txn:
            PostgresUserRegistry("postgresql://test").record_contact("5511999999999")

        txn.assert_called_once_with(dsn="postgresql://test")
        assert cur.execute.call_args[0][1] == ("5511999999999",)


@pytest.mark.skipif(
    not os.environ.get("DATABASE_URL"),
    reason="DATABASE_URL not set - skipping users repository DB tests",
)
class TestUsersRepositoryDb:
    def test_upsert_is_idempotent_per_phone(self):
        from healthbot.infra.db import txn

        phone = f"test-{uuid.uuid4().hex[:10]}"
        try:
            with txn() as cur:
                first_id, first_inserted = upsert_user(cur, phone=phone)
            with txn() as cur:
                second_id, second_inserted = upsert_user(cur, phone=phone)
                cur.execute("SELECT id FROM users WHERE phone = %s", (phone,))
                assert str(cur.fetchone()[0]) == first_id

            assert first_inserted is True
            assert second_inserted is False
            assert first_id == second_id
        finally:
            with txn() as cur:
                cur.execute("DELETE FROM users WHERE phone = %s", (phone,))
