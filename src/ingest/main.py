from __future__ import annotations

import asyncio
import logging
import sys

from infra.db import create_engine, create_session_factory, wait_for_db
from src.app.core.exceptions import IngestionError
from src.app.services.ingestion import IngestionResult, IngestionService
from src.config import Settings, get_settings, setup_logging
from src.ingest.adapters.sources import resolve_source

logger = logging.getLogger("csv_ingest")


async def run_once(settings: Settings) -> IngestionResult:
    """Один прогон загрузки вне HTTP: свой движок, своя сессия."""
    engine = create_engine(settings)
    session_factory = create_session_factory(engine)

    try:
        await wait_for_db(engine)
        async with session_factory() as session:
            service = IngestionService(
                session=session,
                source=resolve_source(settings),
                batch_size=settings.csv_batch_size,
            )
            return await service.run()
    finally:
        await engine.dispose()


def main() -> int:
    settings = get_settings()
    setup_logging(settings.log_level, component="ingest")
    logger.info("CSV ingestion run source=%s", settings.csv_source.value)

    try:
        result = asyncio.run(run_once(settings))
    except IngestionError:
        logger.exception("CSV ingestion failed")
        return 1

    logger.info(
        "CSV ingestion OK batches=%d rows_read=%d rows_written=%d",
        result.batches,
        result.rows_read,
        result.rows_written,
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
