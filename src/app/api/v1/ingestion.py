from __future__ import annotations

import logging

from fastapi import APIRouter, Depends

from src.app.api.helpers.errors import http_400
from src.app.core.exceptions import IngestionError
from src.app.dependencies import get_ingestion_service
from src.app.schemas.ingestion import IngestionOut
from src.app.services.ingestion import IngestionService

logger = logging.getLogger("csv_api")

router = APIRouter(prefix="/api/v1", tags=["ingestion"])


@router.get("/update_csv", response_model=IngestionOut)
async def update_csv_endpoint(
    service: IngestionService = Depends(get_ingestion_service),
) -> IngestionOut:
    """Загрузить CSV с пользователями и сделать upsert по phone_number."""
    try:
        result = await service.run()
    except IngestionError as exc:
        logger.warning("CSV ingestion failed kind=%s err=%s", type(exc).__name__, exc)
        raise http_400("error while ingesting csv")

    logger.info(
        "CSV ingestion finished batches=%d rows_written=%d",
        result.batches,
        result.rows_written,
    )
    return IngestionOut(message="success")
