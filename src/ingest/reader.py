from __future__ import annotations

import csv
import io
import logging
from typing import Iterator, Sequence, TypeVar

from src.app.core.constants import DEFAULT_BATCH_SIZE
from src.app.core.exceptions import ConstructionError, ParseError
from src.ingest.records import Headers, Record, RecordBatch, decode_rows

logger = logging.getLogger("csv_ingest")

T = TypeVar("T")


class BatchedRecordReader:
    """Stateful CSV reader that hands out fixed-size batches.

    Lifecycle: bytes are bound with :meth:`initialize`, the header row is
    parsed once, then :meth:`read_next_batch` / :meth:`parse_next_batch`
    return up to ``batch_size`` rows per call until :meth:`is_end_of_data`
    turns true. "No more data" is never an error: an exhausted reader just
    returns empty batches.

    If ``headers`` are passed to the constructor the source is treated as
    header-less and every row must have exactly ``len(headers)`` fields.

    Not safe for concurrent use.
    """

    def __init__(
        self,
        *,
        batch_size: int = DEFAULT_BATCH_SIZE,
        headers: Sequence[str] | None = None,
        raw_data: bytes | None = None,
        delimiter: str = ",",
    ) -> None:
        if isinstance(batch_size, bool) or not isinstance(batch_size, int) or batch_size < 1:
            raise ConstructionError(f"batch_size must be a positive int, got {batch_size!r}")

        if headers is not None:
            if isinstance(headers, str) or not headers:
                raise ConstructionError("headers must be a non-empty sequence of column names")
            if not all(isinstance(h, str) for h in headers):
                raise ConstructionError(f"headers must be strings, got {list(headers)!r}")

        if not isinstance(delimiter, str) or len(delimiter) != 1:
            raise ConstructionError(f"delimiter must be a single character, got {delimiter!r}")

        self._batch_size = batch_size
        self._delimiter = delimiter
        self._fixed_headers: Headers | None = tuple(headers) if headers is not None else None

        self._rows: Iterator[list[str]] | None = None
        self._headers: Headers | None = self._fixed_headers
        self._expected_fields: int | None = None
        self._eof = False

        # look-ahead: следующая строка (или отложенная ошибка), чтобы EOF
        # выставлялся тем же вызовом, который вернул последнюю строку
        self._primed = False
        self._next_row: Record | None = None
        self._next_error: ParseError | None = None
        self._fatal_error: ParseError | None = None

        if raw_data is not None:
            self.initialize(raw_data)

    @property
    def batch_size(self) -> int:
        return self._batch_size

    @property
    def headers(self) -> Headers | None:
        return self._headers

    def initialize(self, raw_data: bytes) -> None:
        """Bind a fresh cursor over ``raw_data`` and reset reading state.

        The whole buffer is decoded up front; undecodable bytes make the
        reader fail on the first read and stay failed.
        """
        if not isinstance(raw_data, (bytes, bytearray, memoryview)):
            raise ConstructionError(
                f"raw_data must be bytes, got {type(raw_data).__name__}"
            )

        self._fatal_error = None
        try:
            content = bytes(raw_data).decode("utf-8-sig")
        except UnicodeDecodeError as exc:
            content = ""
            self._fatal_error = ParseError(
                f"error reading CSV: source is not valid UTF-8 at byte {exc.start}"
            )
            self._fatal_error.__cause__ = exc

        self._rows = csv.reader(io.StringIO(content, newline=""), delimiter=self._delimiter, strict=True)
        self._headers = self._fixed_headers
        self._expected_fields = len(self._fixed_headers) if self._fixed_headers else None
        self._eof = False
        self._primed = False
        self._next_row = None
        self._next_error = None

        logger.debug("CSV reader initialized bytes=%d batch_size=%d", len(raw_data), self._batch_size)

    def is_end_of_data(self) -> bool:
        if self._rows is None:
            return True
        return self._eof

    def parse_headers(self) -> Headers:
        """Return the header row, reading it from the source on first call.

        A broken header row (or undecodable source) stops the reader: every
        later call raises the same ParseError.
        """
        self._require_initialized()

        if self._fatal_error is not None:
            self._eof = True
            raise self._fatal_error

        if self._headers is None:
            try:
                row = self._read_row()
            except ParseError as exc:
                self._fatal_error = exc
                self._eof = True
                raise
            if row is None:
                self._eof = True
                raise ParseError("error reading CSV headers: source is empty")
            self._headers = tuple(row)
            logger.debug("CSV headers parsed: %s", self._headers)

        if not self._primed:
            self._primed = True
            self._advance()

        return self._headers

    def read_next_batch(self) -> RecordBatch:
        """Read up to ``batch_size`` raw rows.

        Raises ParseError on a malformed row; rows collected during the
        failing call are dropped.
        """
        self.parse_headers()

        batch: RecordBatch = []
        while len(batch) < self._batch_size and not self._eof:
            batch.append(self._take())
        return batch

    def parse_next_batch(self, target: type[T]) -> list[T]:
        """Read the next batch and decode it into ``target`` instances."""
        headers = self.parse_headers()
        rows = self.read_next_batch()
        return decode_rows(headers, rows, target)

    # ---------- internals ----------

    def _require_initialized(self) -> None:
        if self._rows is None:
            raise ConstructionError("reader has no source: call initialize() with raw bytes first")

    def _read_row(self) -> Record | None:
        self._require_initialized()
        while True:
            try:
                row = next(self._rows)
            except StopIteration:
                return None
            except csv.Error as exc:
                raise ParseError(f"error reading CSV record: {exc}") from exc

            # пустые строки пропускаем
            if not row:
                continue

            if self._expected_fields is None:
                self._expected_fields = len(row)
            elif len(row) != self._expected_fields:
                raise ParseError(
                    f"error reading CSV record: wrong number of fields "
                    f"(got {len(row)}, expected {self._expected_fields})"
                )
            return row

    def _advance(self) -> None:
        self._next_row = None
        self._next_error = None
        try:
            row = self._read_row()
        except ParseError as exc:
            self._next_error = exc
            return

        if row is None:
            self._eof = True
        else:
            self._next_row = row

    def _take(self) -> Record:
        if self._next_error is not None:
            exc = self._next_error
            self._advance()
            raise exc

        row = self._next_row or []
        self._advance()
        return row
