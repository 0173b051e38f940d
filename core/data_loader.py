# core/data_loader.py
"""
╔════════════════════════════════════════════════════════════════════════════╗
║  TrackLens - Record Loader                                                ║
║  ─────────────────────────────────────────────────────────────────────────  ║
║  ✓ Delimited Text (CSV / TSV / ; / |) with Header-Based Detection         ║
║  ✓ Encoding Fallback (UTF-8 → Latin-1)                                    ║
║  ✓ Explicit Schema (required columns, typed fields)                       ║
║  ✓ Sync & Async Loading                                                  ║
╚════════════════════════════════════════════════════════════════════════════╝

Contract:
    load(source) -> List[TrackRecord]

    Raises DataSourceError when the source is missing or unparseable and
    SchemaValidationError (a DataSourceError) when required columns are
    absent. Cell-level coercion failures never raise: the field becomes NaN
    and the record is filtered later by the consuming view.

Usage:
```python
    from core.data_loader import load_records, load_records_or_empty

    records = load_records("data/spotify_tracks.csv")
    records = load_records_or_empty("missing.csv")   # -> []
```

Dependencies:
    • pandas
"""

from __future__ import annotations

import asyncio
import io
from pathlib import Path
from typing import IO, List, Optional, Union

import pandas as pd
from loguru import logger

from config.constants import CSV_DELIMITERS, CSV_ENCODINGS, NUMERIC_COLUMNS, REQUIRED_COLUMNS
from config.logging_config import log_execution_time
from core.exceptions import DataSourceError, SchemaValidationError, wrap_exceptions
from core.schema import TrackRecord
from core.utils import clean_column_names, df_overview, safe_to_numeric

__all__ = [
    "RecordLoader",
    "get_record_loader",
    "load_records",
    "load_records_or_empty",
    "load_records_async",
]

Source = Union[str, Path, IO[str], IO[bytes]]


class RecordLoader:
    """
    📦 **Record Loader**

    Reads the track dataset into validated `TrackRecord`s. Purely a read:
    the loader keeps no state between calls.
    """

    def __init__(self, required_columns: Optional[List[str]] = None):
        self.required_columns = list(required_columns or REQUIRED_COLUMNS)
        self.logger = logger.bind(component="RecordLoader")

    # ───────────────────────────────────────────────────────────────────
    # Public API
    # ───────────────────────────────────────────────────────────────────

    @log_execution_time
    def load(self, source: Source) -> List[TrackRecord]:
        """Load and validate all rows of `source`."""
        df = self.read_frame(source)
        records = [TrackRecord.from_row(row) for row in df.to_dict(orient="records")]
        self.logger.info(f"Loaded {len(records)} records from {self._describe(source)}")
        return records

    def read_frame(self, source: Source) -> pd.DataFrame:
        """
        Read `source` into a DataFrame with required columns checked and
        numeric columns coerced (invalid cells -> NaN).
        """
        text = self._read_text(source)
        if not text.strip():
            raise DataSourceError(
                "Dataset is empty",
                details={"source": self._describe(source)}
            )

        sep = self._detect_delimiter(text)
        df = self._parse(text, sep)
        df = clean_column_names(df)

        missing = [col for col in self.required_columns if col not in df.columns]
        if missing:
            raise SchemaValidationError(
                f"Dataset is missing required columns: {missing}",
                details={"missing": missing, "found": df.columns.tolist()},
                context={"source": self._describe(source)}
            )

        self.logger.debug(f"Frame overview: {df_overview(df)}")

        for col in NUMERIC_COLUMNS:
            if col in df.columns:
                raw = df[col]
                df[col] = safe_to_numeric(raw)
                invalid = int((df[col].isna() & raw.astype(str).str.strip().ne("")).sum())
                if invalid:
                    self.logger.debug(f"Column '{col}': {invalid} non-numeric cells coerced to NaN")

        return df

    # ───────────────────────────────────────────────────────────────────
    # Internals
    # ───────────────────────────────────────────────────────────────────

    @wrap_exceptions(
        to=DataSourceError,
        message="Failed to read dataset",
        catch=(OSError, UnicodeError),
        log=False,
    )
    def _read_text(self, source: Source) -> str:
        if isinstance(source, (str, Path)):
            path = Path(source)
            if not path.is_file():
                raise DataSourceError(
                    f"Dataset not found: {path}",
                    details={"source": str(path)}
                )
            return self._decode(path.read_bytes())

        content = source.read()
        if isinstance(content, bytes):
            return self._decode(content)
        return content

    def _decode(self, payload: bytes) -> str:
        for encoding in CSV_ENCODINGS[:-1]:
            try:
                return payload.decode(encoding)
            except UnicodeDecodeError:
                self.logger.warning(f"Failed with {encoding}, trying {CSV_ENCODINGS[-1]}")
        return payload.decode(CSV_ENCODINGS[-1])

    def _detect_delimiter(self, text: str) -> str:
        """Pick the delimiter whose header split exposes the most required columns."""
        header = text.lstrip("\ufeff").splitlines()[0]
        best, best_hits = CSV_DELIMITERS[0], -1
        for sep in CSV_DELIMITERS:
            names = {name.strip().strip('"') for name in header.split(sep)}
            hits = sum(1 for col in self.required_columns if col in names)
            if hits > best_hits:
                best, best_hits = sep, hits
        if best != CSV_DELIMITERS[0]:
            self.logger.info(f"Detected delimiter: {best!r}")
        return best

    @wrap_exceptions(
        to=DataSourceError,
        message="Failed to parse dataset",
        catch=(pd.errors.ParserError, pd.errors.EmptyDataError, ValueError),
        log=False,
    )
    def _parse(self, text: str, sep: str) -> pd.DataFrame:
        return pd.read_csv(
            io.StringIO(text),
            sep=sep,
            dtype=str,
            keep_default_na=False,
            on_bad_lines="skip",
            skipinitialspace=True,
        )

    @staticmethod
    def _describe(source: Source) -> str:
        if isinstance(source, (str, Path)):
            return str(source)
        return getattr(source, "name", type(source).__name__)


def get_record_loader() -> RecordLoader:
    """Return a fresh loader (no shared state between components)."""
    return RecordLoader()


def load_records(source: Source) -> List[TrackRecord]:
    """Load records or raise DataSourceError."""
    return get_record_loader().load(source)


def load_records_or_empty(source: Source) -> List[TrackRecord]:
    """
    Load records, surfacing any DataSourceError as an empty list.

    "Load failed" and "no data yet" are the same state downstream.
    """
    try:
        return load_records(source)
    except DataSourceError as e:
        logger.bind(component="RecordLoader").warning(f"Dataset unavailable, using empty data: {e.message}")
        return []


async def load_records_async(source: Source) -> List[TrackRecord]:
    """Run the blocking read in a worker thread; empty list on failure."""
    return await asyncio.to_thread(load_records_or_empty, source)
