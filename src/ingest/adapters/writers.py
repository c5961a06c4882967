from __future__ import annotations

import logging
from typing import Sequence

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.app.core.constants import (
    USER_CONFLICT_COLUMN,
    USER_UPDATE_COLUMNS,
    USERS_TABLE,
)
from src.app.schemas.users import UserRecord
from src.ingest.ports.writer import UserWriter

logger = logging.getLogger("csv_ingest")


def _build_upsert_sql() -> str:
    columns = (*USER_UPDATE_COLUMNS, USER_CONFLICT_COLUMN)
    assignments = ",\n    ".join(f"{c} = EXCLUDED.{c}" for c in USER_UPDATE_COLUMNS)
    return (
        f"INSERT INTO {USERS_TABLE} ({', '.join(columns)})\n"
        f"VALUES ({', '.join(':' + c for c in columns)})\n"
        f"ON CONFLICT ({USER_CONFLICT_COLUMN}) DO UPDATE\n"
        f"SET\n    {assignments},\n    updated_at = NOW()"
    )


UPSERT_USERS_SQL = _build_upsert_sql()


def dedupe_by_phone(users: Sequence[UserRecord]) -> list[UserRecord]:
    """Collapse rows sharing a phone number; the last occurrence wins.

    Postgres refuses to touch the same row twice within one
    ``ON CONFLICT DO UPDATE`` statement.
    """
    by_phone: dict[str, UserRecord] = {}
    for user in users:
        by_phone.pop(user.phone_number, None)
        by_phone[user.phone_number] = user
    return list(by_phone.values())


class PostgresUserWriter:
    async def write(self, session: AsyncSession, users: Sequence[UserRecord]) -> int:
        if not users:
            return 0

        unique = dedupe_by_phone(users)
        if len(unique) != len(users):
            logger.info(
                "Collapsed %d duplicate phone number(s) in batch",
                len(users) - len(unique),
            )

        payload = [
            {
                "name": u.name,
                "email": u.email,
                "country": u.country,
                "phone_number": u.phone_number,
            }
            for u in unique
        ]
        await session.execute(text(UPSERT_USERS_SQL), payload)
        return len(payload)


def resolve_writer() -> UserWriter:
    """Пока единственный sink: Postgres."""
    return PostgresUserWriter()
