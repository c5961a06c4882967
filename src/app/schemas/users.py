from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class UserRecord(BaseModel):
    """Строка CSV с пользователем после декодирования.

    Поля сопоставляются по имени колонки; лишние колонки (например, id)
    игнорируются.
    """

    model_config = ConfigDict(extra="ignore", str_strip_whitespace=True)

    name: str | None = None
    phone_number: str = Field(min_length=1)
    email: str | None = None
    country: str | None = None
