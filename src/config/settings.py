from functools import lru_cache

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from src.app.core.constants import DEFAULT_BATCH_SIZE, MAX_BATCH_SIZE
from src.app.core.enums import SourceType


class Settings(BaseSettings):
    app_env: str = "local"
    log_level: str = "INFO"

    db_host: str = "localhost"
    db_port: int = 5432
    db_name: str = "csv_ingest"
    db_user: str = "csv_user"
    db_password: str = "csv_password"

    # откуда берём CSV: локальный файл или S3
    csv_source: SourceType = SourceType.LOCAL
    csv_local_path: str = "orders_update.csv"

    csv_s3_bucket: str | None = None
    csv_s3_key: str | None = None
    csv_s3_region: str = "eu-central-1"
    csv_s3_endpoint_url: str | None = None

    csv_batch_size: int = Field(default=DEFAULT_BATCH_SIZE, ge=1, le=MAX_BATCH_SIZE)

    @property
    def database_url(self) -> str:
        # asyncpg + SQLAlchemy 2.x
        return (
            f"postgresql+asyncpg://{self.db_user}:{self.db_password}"
            f"@{self.db_host}:{self.db_port}/{self.db_name}"
        )

    @model_validator(mode="after")
    def _s3_requires_location(self) -> "Settings":
        if self.csv_source == SourceType.S3:
            missing = [
                name
                for name in ("csv_s3_bucket", "csv_s3_key")
                if not (getattr(self, name) or "").strip()
            ]
            if missing:
                raise ValueError(f"CSV_SOURCE=s3 requires {', '.join(missing)}")
        return self

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


@lru_cache
def get_settings() -> Settings:
    return Settings()
