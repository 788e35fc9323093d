"""
CSV Ingestion Service - turns an uploaded CSV into a capped Dataset

Two modes:
1. Streaming - chunked reading with pandas; each batch is delivered to an
   optional callback and the reader is closed as soon as the row cap is
   reached, so rows beyond the cap are never buffered.
2. One-shot - parses an in-memory text blob and keeps the first rows up
   to the cap.

Every value is kept as the raw string; classification happens later in the
statistical profiler.
"""

import asyncio
import codecs
import io
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import BinaryIO, Callable, Iterator, List, Optional, TextIO, Union

import pandas as pd

from ..core.config import settings
from ..core.errors import EncodingError, InputFormatError
from ..models import Dataset, Row

logger = logging.getLogger("csvinsights.ingestion")

CsvSource = Union[str, os.PathLike, BinaryIO, TextIO]


# ============================================================================
# Data Classes
# ============================================================================

@dataclass
class BatchUpdate:
    """One batch of accepted rows, delivered while streaming."""
    batch_index: int
    rows: List[Row]
    columns: List[str]
    rows_total: int
    capped: bool = False


@dataclass
class _RowAccumulator:
    """Collects batches and enforces the hard row cap."""
    max_rows: int
    columns: List[str] = field(default_factory=list)
    rows: List[Row] = field(default_factory=list)
    capped: bool = False

    @property
    def remaining(self) -> int:
        return max(self.max_rows - len(self.rows), 0)

    def push(self, columns: List[str], batch: List[Row]) -> List[Row]:
        """Append a batch, returning the rows that were kept."""
        if not self.columns:
            self.columns = list(columns)
        accepted = batch[:self.remaining]
        self.rows.extend(accepted)
        if len(self.rows) >= self.max_rows:
            self.capped = True
        return accepted


# ============================================================================
# CSV Ingestion Service
# ============================================================================

class CsvIngestionService:
    """
    Parses CSV sources into Datasets.

    The first non-empty line is the header. Quoted fields may contain
    delimiters and newlines. Blank lines are skipped and short rows are
    padded with empty strings.
    """

    def __init__(
        self,
        max_rows: int = None,
        chunk_size_rows: int = None,
        delimiter: str = None,
        encodings: List[str] = None,
        extensions: List[str] = None,
    ):
        self.max_rows = max_rows if max_rows is not None else settings.MAX_ROWS
        self.chunk_size_rows = chunk_size_rows or settings.INGEST_CHUNK_ROWS
        self.delimiter = delimiter or settings.CSV_DELIMITER
        self.encodings = list(encodings or settings.CSV_ENCODINGS)
        self.extensions = [e.lower() for e in (extensions or settings.CSV_EXTENSIONS)]

    def validate_source_name(self, filename: Optional[str]) -> None:
        """Reject sources whose name lacks a recognized CSV extension."""
        name = (filename or "").lower()
        if not any(name.endswith(ext) for ext in self.extensions):
            raise InputFormatError(
                f"Unsupported file '{filename}': expected one of {', '.join(self.extensions)}"
            )

    # ------------------------------------------------------------------
    # Streaming mode
    # ------------------------------------------------------------------

    def ingest_stream(
        self,
        source: CsvSource,
        filename: Optional[str] = None,
        on_batch: Optional[Callable[[BatchUpdate], None]] = None,
    ) -> Dataset:
        """
        Stream-ingest a CSV file path or file handle.

        Batches are delivered to `on_batch` as they are parsed. Once the
        cumulative row count reaches the cap the reader is cancelled once
        and the remaining input is dropped.
        """
        if filename is None and isinstance(source, (str, os.PathLike)):
            filename = os.fspath(source)
        self.validate_source_name(filename)

        logger.info("Streaming CSV ingestion: %s (cap=%d)", filename, self.max_rows)

        acc = _RowAccumulator(max_rows=self.max_rows)
        batch_index = 0
        header: Optional[List[str]] = None

        with self._open_text(source) as text:
            reader = self._read_csv(text, chunksize=self.chunk_size_rows)
            if reader is None:
                logger.info("Streaming CSV complete: %s is empty", filename)
                return Dataset(source_name=filename)

            cancelled = False
            try:
                for chunk_df in self._chunks(reader):
                    if header is None:
                        if chunk_df.empty:
                            continue
                        header = _header_names(chunk_df.iloc[0])
                        chunk_df = chunk_df.iloc[1:]
                    batch = _frame_to_rows(chunk_df, header)
                    if not batch:
                        continue

                    accepted = acc.push(header, batch)
                    batch_index += 1
                    logger.debug("Batch %d: %d rows accepted, %d total",
                                 batch_index, len(accepted), len(acc.rows))

                    if on_batch:
                        on_batch(BatchUpdate(
                            batch_index=batch_index,
                            rows=accepted,
                            columns=list(acc.columns),
                            rows_total=len(acc.rows),
                            capped=acc.capped,
                        ))

                    if acc.capped:
                        logger.info("Row cap %d reached after batch %d, cancelling reader",
                                    self.max_rows, batch_index)
                        reader.close()
                        cancelled = True
                        break
            finally:
                if not cancelled:
                    reader.close()

        logger.info("Streaming CSV complete: %d rows in %d batches", len(acc.rows), batch_index)
        return Dataset(
            columns=acc.columns if acc.rows else [],
            rows=acc.rows,
            source_name=filename,
            capped=acc.capped,
        )

    async def ingest_stream_async(
        self,
        source: CsvSource,
        filename: Optional[str] = None,
        on_batch: Optional[Callable[[BatchUpdate], None]] = None,
    ) -> Dataset:
        """Run streaming ingestion on a worker thread so the event loop stays free."""
        return await asyncio.to_thread(self.ingest_stream, source, filename, on_batch)

    # ------------------------------------------------------------------
    # One-shot mode
    # ------------------------------------------------------------------

    def ingest_text(self, text: str, source_name: Optional[str] = None) -> Dataset:
        """Parse an in-memory CSV text blob in one pass, keeping the first rows up to the cap."""
        frame = self._read_csv(io.StringIO(text))
        if frame is None or frame.empty:
            return Dataset(source_name=source_name)

        columns = _header_names(frame.iloc[0])
        rows = _frame_to_rows(frame.iloc[1:], columns)
        capped = len(rows) >= self.max_rows
        rows = rows[:self.max_rows]
        logger.info("One-shot CSV ingestion: %d rows kept (capped=%s)", len(rows), capped)
        return Dataset(
            columns=columns if rows else [],
            rows=rows,
            source_name=source_name,
            capped=capped,
        )

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _read_csv(self, text: TextIO, chunksize: Optional[int] = None):
        """
        Open a pandas reader with every field kept as a raw string.

        The header is read as an ordinary row so its names come through as
        written. Selecting columns makes the parser cut rows wider than the
        header down to the header width instead of rejecting them.
        """
        try:
            return pd.read_csv(
                text,
                sep=self.delimiter,
                header=None,
                usecols=_every_column,
                dtype=str,
                keep_default_na=False,
                na_filter=False,
                skip_blank_lines=True,
                index_col=False,
                chunksize=chunksize,
            )
        except pd.errors.EmptyDataError:
            return None
        except pd.errors.ParserError as exc:
            raise InputFormatError(f"CSV parse error: {exc}") from exc
        except UnicodeDecodeError as exc:
            raise EncodingError(f"Unable to decode CSV data: {exc}") from exc

    def _chunks(self, reader) -> Iterator[pd.DataFrame]:
        """
        Iterate a chunked reader, translating parser failures.

        The first chunk carries the header row on top of a full batch.
        """
        size = self.chunk_size_rows + 1
        while True:
            try:
                chunk = reader.get_chunk(size)
            except StopIteration:
                return
            except pd.errors.ParserError as exc:
                logger.warning("Malformed CSV record: %s", exc)
                raise InputFormatError(f"CSV parse error: {exc}") from exc
            except UnicodeDecodeError as exc:
                raise EncodingError(f"Unable to decode CSV data: {exc}") from exc
            yield chunk
            size = self.chunk_size_rows

    def _open_text(self, source: CsvSource) -> "_TextSource":
        if isinstance(source, (str, os.PathLike)):
            path = Path(source)
            handle = open(path, "rb")
            try:
                encoding = self._detect_encoding(handle)
            except EncodingError:
                handle.close()
                raise
            return _TextSource(handle, encoding, owns_handle=True)

        first = source.read(0)
        if isinstance(first, str):
            return _TextSource(source, None, owns_handle=False)
        return _TextSource(source, self._detect_encoding(source), owns_handle=False)

    def _detect_encoding(self, handle: BinaryIO) -> str:
        """Pick the first candidate encoding that decodes a leading byte sample."""
        sample = handle.read(settings.ENCODING_SAMPLE_BYTES)
        handle.seek(0)
        final = len(sample) < settings.ENCODING_SAMPLE_BYTES
        for encoding in self.encodings:
            try:
                codecs.getincrementaldecoder(encoding)().decode(sample, final=final)
            except (UnicodeDecodeError, LookupError):
                continue
            logger.info("Detected encoding=%s", encoding)
            return encoding
        raise EncodingError(
            f"Unable to decode CSV data with any of: {', '.join(self.encodings)}"
        )


class _TextSource:
    """Context manager exposing a binary or text handle as decoded text."""

    def __init__(self, handle, encoding: Optional[str], owns_handle: bool):
        self._handle = handle
        self._encoding = encoding
        self._owns_handle = owns_handle
        self._wrapper: Optional[io.TextIOWrapper] = None

    def __enter__(self) -> TextIO:
        if self._encoding is None:
            return self._handle
        self._wrapper = io.TextIOWrapper(self._handle, encoding=self._encoding, errors="strict", newline="")
        return self._wrapper

    def __exit__(self, exc_type, exc, tb) -> None:
        if self._wrapper is not None:
            if self._owns_handle:
                self._wrapper.close()
            else:
                # Leave the caller's handle open
                self._wrapper.detach()
        elif self._owns_handle:
            self._handle.close()


def _every_column(_position) -> bool:
    return True


def _header_names(header_row: pd.Series) -> List[str]:
    """
    Column names as written in the header row.

    Blank names stay blank. A repeated name gets a `_1`, `_2`, ... suffix
    so every column keeps its own key in each row.
    """
    names: List[str] = []
    seen = set()
    for raw in header_row.fillna(""):
        base = name = str(raw)
        suffix = 0
        while name in seen:
            suffix += 1
            name = f"{base}_{suffix}"
        seen.add(name)
        names.append(name)
    return names


def _frame_to_rows(frame: pd.DataFrame, header: List[str]) -> List[Row]:
    """Convert a string-typed chunk into rows keyed by header, padding short rows with ''."""
    if frame.empty:
        return []
    frame = frame.fillna("")
    return [
        {col: str(val) for col, val in zip(header, values)}
        for values in frame.itertuples(index=False, name=None)
    ]


ingestion_service = CsvIngestionService()
