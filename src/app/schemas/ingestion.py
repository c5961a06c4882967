from __future__ import annotations

from pydantic import BaseModel


class IngestionOut(BaseModel):
    """Ответ триггера загрузки: только признак успеха."""

    message: str = "success"
