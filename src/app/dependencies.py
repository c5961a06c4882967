from __future__ import annotations

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.app.db import get_db_session
from src.app.services.ingestion import IngestionService
from src.config import Settings
from src.ingest.adapters.sources import resolve_source
from src.ingest.ports.source import ByteSource


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_byte_source(settings: Settings = Depends(get_app_settings)) -> ByteSource:
    return resolve_source(settings)


def get_ingestion_service(
    session: AsyncSession = Depends(get_db_session),
    source: ByteSource = Depends(get_byte_source),
    settings: Settings = Depends(get_app_settings),
) -> IngestionService:
    """Фабрика IngestionService для DI.

    Вынесена в отдельный модуль, чтобы в роутере не держать DI-логику.
    """
    return IngestionService(
        session=session,
        source=source,
        batch_size=settings.csv_batch_size,
    )
