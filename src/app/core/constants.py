from __future__ import annotations

DEFAULT_BATCH_SIZE = 100
MAX_BATCH_SIZE = 100_000

DEFAULT_S3_REGION = "eu-central-1"

# upsert users: уникальный ключ и колонки, которые перезаписываем при конфликте
USERS_TABLE = "users"
USER_CONFLICT_COLUMN = "phone_number"
USER_UPDATE_COLUMNS: tuple[str, ...] = ("name", "email", "country")
