from __future__ import annotations

from .constants import DEFAULT_BATCH_SIZE
from .enums import SourceType
from .exceptions import (
    ConstructionError,
    DecodeError,
    IngestionError,
    ParseError,
    PersistenceError,
    SourceError,
)

__all__ = [
    "DEFAULT_BATCH_SIZE",
    "SourceType",
    "IngestionError",
    "ConstructionError",
    "ParseError",
    "DecodeError",
    "SourceError",
    "PersistenceError",
]
