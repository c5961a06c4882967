from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.app.core.constants import DEFAULT_BATCH_SIZE
from src.app.core.exceptions import PersistenceError
from src.app.schemas.users import UserRecord
from src.ingest.adapters.writers import resolve_writer
from src.ingest.ports.source import ByteSource
from src.ingest.ports.writer import UserWriter
from src.ingest.reader import BatchedRecordReader

logger = logging.getLogger("csv_ingest")


@dataclass(frozen=True, slots=True)
class IngestionResult:
    rows_read: int
    rows_written: int
    batches: int


class IngestionService:
    """Загрузка CSV с пользователями: source -> reader батчами -> upsert."""

    def __init__(
        self,
        session: AsyncSession,
        source: ByteSource,
        writer: UserWriter | None = None,
        batch_size: int = DEFAULT_BATCH_SIZE,
    ) -> None:
        self.session = session
        self.source = source
        self.writer = writer or resolve_writer()
        self.batch_size = batch_size

    async def run(self) -> IngestionResult:
        """Прогнать один файл целиком.

        Каждый батч коммитится отдельно; при ошибке откатываем только
        текущую транзакцию, уже записанные батчи остаются.
        """
        raw = await self.source.fetch()
        reader = BatchedRecordReader(batch_size=self.batch_size, raw_data=raw)

        logger.info("CSV ingestion start bytes=%d batch_size=%d", len(raw), self.batch_size)

        batch_no = 0
        total_read = 0
        total_written = 0

        try:
            while not reader.is_end_of_data():
                users = reader.parse_next_batch(UserRecord)
                if not users:
                    continue

                batch_no += 1
                total_read += len(users)

                written = await self.writer.write(self.session, users)
                await self.session.commit()
                total_written += int(written or 0)

                logger.info(
                    "CSV batch=%d read=%d written=%d total_written=%d",
                    batch_no,
                    len(users),
                    written,
                    total_written,
                )
        except SQLAlchemyError as exc:
            await self.session.rollback()
            raise PersistenceError(f"error while upserting batch {batch_no}: {exc}") from exc
        except Exception:
            await self.session.rollback()
            raise

        logger.info(
            "CSV ingestion done batches=%d total_read=%d total_written=%d",
            batch_no,
            total_read,
            total_written,
        )
        return IngestionResult(rows_read=total_read, rows_written=total_written, batches=batch_no)
