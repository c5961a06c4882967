from __future__ import annotations

from collections.abc import AsyncGenerator

from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncSession


async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """DI-зависимость для FastAPI: выдаёт AsyncSession.

    Фабрика сессий создаётся в lifespan приложения и лежит в app.state.
    """
    session_factory = request.app.state.session_factory
    async with session_factory() as session:
        yield session
