from __future__ import annotations

from typing import Protocol, Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from src.app.schemas.users import UserRecord


class UserWriter(Protocol):
    """Writer пишет батч пользователей в sink и возвращает число записанных строк."""

    async def write(self, session: AsyncSession, users: Sequence[UserRecord]) -> int:
        ...
