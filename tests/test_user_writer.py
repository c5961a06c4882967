from unittest.mock import AsyncMock

import pytest

from src.app.schemas.users import UserRecord
from src.ingest.adapters.writers import PostgresUserWriter, dedupe_by_phone


def _user(phone: str, name: str, email: str = "x@example.com", country: str = "KZ") -> UserRecord:
    return UserRecord(name=name, phone_number=phone, email=email, country=country)


@pytest.mark.asyncio
async def test_write_upserts_on_phone_number():
    session = AsyncMock()
    users = [_user("+1", "Alice"), _user("+2", "Bob", country="DE")]

    written = await PostgresUserWriter().write(session, users)

    assert written == 2
    session.execute.assert_awaited_once()
    stmt, payload = session.execute.await_args.args
    sql = " ".join(str(stmt).split())
    assert sql.startswith("INSERT INTO users (name, email, country, phone_number)")
    assert "ON CONFLICT (phone_number) DO UPDATE" in sql
    assert "name = EXCLUDED.name" in sql
    assert "email = EXCLUDED.email" in sql
    assert "country = EXCLUDED.country" in sql
    # id / created_at are never overwritten on conflict
    assert "id = EXCLUDED" not in sql
    assert "created_at" not in sql
    assert payload == [
        {"name": "Alice", "email": "x@example.com", "country": "KZ", "phone_number": "+1"},
        {"name": "Bob", "email": "x@example.com", "country": "DE", "phone_number": "+2"},
    ]


@pytest.mark.asyncio
async def test_existing_phone_in_batch_updates_instead_of_duplicating():
    session = AsyncMock()
    users = [
        _user("+1", "Alice", email="old@example.com"),
        _user("+2", "Bob"),
        _user("+1", "Alice Smith", email="new@example.com", country="US"),
    ]

    written = await PostgresUserWriter().write(session, users)

    assert written == 2
    _, payload = session.execute.await_args.args
    assert [p["phone_number"] for p in payload] == ["+2", "+1"]
    assert payload[1] == {
        "name": "Alice Smith",
        "email": "new@example.com",
        "country": "US",
        "phone_number": "+1",
    }


@pytest.mark.asyncio
async def test_empty_batch_is_noop():
    session = AsyncMock()

    assert await PostgresUserWriter().write(session, []) == 0
    session.execute.assert_not_awaited()


def test_dedupe_keeps_last_occurrence():
    users = [_user("+1", "a"), _user("+1", "b"), _user("+1", "c")]

    assert [u.name for u in dedupe_by_phone(users)] == ["c"]
