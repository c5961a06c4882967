from __future__ import annotations

from typing import Protocol


class ByteSource(Protocol):
    """Источник отдаёт содержимое CSV-файла целиком."""

    async def fetch(self) -> bytes:
        """Вернуть сырые байты файла или бросить SourceError."""
        ...
