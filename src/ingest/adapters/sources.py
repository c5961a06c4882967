from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from src.app.core.constants import DEFAULT_S3_REGION
from src.app.core.enums import SourceType
from src.app.core.exceptions import SourceError
from src.config.settings import Settings
from src.ingest.ports.source import ByteSource

logger = logging.getLogger("csv_ingest")


# ----------------------------
# Local disk
# ----------------------------

class LocalFileSource:
    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    async def fetch(self) -> bytes:
        try:
            data = await asyncio.to_thread(self._path.read_bytes)
        except OSError as exc:
            raise SourceError(f"error reading local file {str(self._path)!r}: {exc}") from exc

        logger.info("Read local CSV path=%s bytes=%d", self._path, len(data))
        return data


# ----------------------------
# S3
# ----------------------------

@dataclass(frozen=True, slots=True)
class S3Config:
    bucket: str
    key: str
    region: str = DEFAULT_S3_REGION
    endpoint_url: str | None = None


class S3Source:
    """Download the whole object with ``get_object``.

    boto3 is synchronous, so the download runs in a worker thread.
    """

    def __init__(self, cfg: S3Config, client: Any | None = None) -> None:
        self._cfg = cfg
        self._client = client

    def _make_client(self) -> Any:
        return boto3.client(
            "s3",
            region_name=self._cfg.region,
            endpoint_url=self._cfg.endpoint_url,
        )

    def _download(self) -> bytes:
        client = self._client or self._make_client()
        obj = client.get_object(Bucket=self._cfg.bucket, Key=self._cfg.key)
        body = obj["Body"]
        try:
            return body.read()
        finally:
            body.close()

    async def fetch(self) -> bytes:
        if not self._cfg.key or not self._cfg.bucket:
            raise SourceError("object key or bucket is missing")

        try:
            data = await asyncio.to_thread(self._download)
        except (BotoCoreError, ClientError) as exc:
            raise SourceError(
                f"error downloading s3://{self._cfg.bucket}/{self._cfg.key}: {exc}"
            ) from exc

        logger.info(
            "Downloaded CSV from s3://%s/%s bytes=%d",
            self._cfg.bucket,
            self._cfg.key,
            len(data),
        )
        return data


# ----------------------------
# Resolver
# ----------------------------

def resolve_source(settings: Settings) -> ByteSource:
    if settings.csv_source == SourceType.S3:
        return S3Source(
            S3Config(
                bucket=settings.csv_s3_bucket or "",
                key=settings.csv_s3_key or "",
                region=settings.csv_s3_region,
                endpoint_url=settings.csv_s3_endpoint_url,
            )
        )

    return LocalFileSource(settings.csv_local_path)
