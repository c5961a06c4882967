from __future__ import annotations

from functools import lru_cache
from typing import Any, Sequence, TypeVar

from pydantic import TypeAdapter, ValidationError

from src.app.core.exceptions import DecodeError, ParseError

T = TypeVar("T")

Headers = tuple[str, ...]
Record = list[str]
RecordBatch = list[Record]


def rows_to_maps(headers: Sequence[str], rows: Sequence[Record]) -> list[dict[str, str]]:
    """Zip every row with the header names into a column -> value mapping."""
    maps: list[dict[str, str]] = []
    for idx, row in enumerate(rows):
        if len(row) != len(headers):
            raise ParseError(
                f"row {idx} has {len(row)} fields, expected {len(headers)}"
            )
        maps.append(dict(zip(headers, row)))
    return maps


@lru_cache(maxsize=64)
def _list_adapter(target: Any) -> TypeAdapter:
    return TypeAdapter(list[target])


def decode_rows(headers: Sequence[str], rows: Sequence[Record], target: type[T]) -> list[T]:
    """Decode raw rows into ``target`` instances.

    Two steps: rows -> header-keyed dicts -> ``list[target]`` via pydantic.
    Fields are matched by name (or alias), so the target does not have to
    declare its fields in column order.
    """
    if not rows:
        return []

    maps = rows_to_maps(headers, rows)
    try:
        return _list_adapter(target).validate_python(maps)
    except ValidationError as exc:
        raise DecodeError(
            f"cannot decode {len(maps)} row(s) into {getattr(target, '__name__', target)}: "
            f"{exc.error_count()} error(s), first={exc.errors()[0]['msg']!r} "
            f"at {exc.errors()[0]['loc']}"
        ) from exc
