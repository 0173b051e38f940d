# core/schema.py
"""
TrackLens - Record Schema
Explicit, validated row model for the track dataset.

Every row of the CSV becomes one immutable `TrackRecord`. Coercion happens
here, once, at load time:

- numeric measures: anything that is not a finite number becomes NaN
  (the field is then invalid for filtering, the row is kept)
- `explicit`: True only for the string "True" (case-insensitive)
- `artist_genres`: normalized token tuple, see `parse_genres`
"""

from __future__ import annotations

import math
import re
from typing import Any, Mapping, Tuple

from pydantic import BaseModel, ConfigDict, field_validator

from config.constants import (
    COL_ARTIST_FOLLOWERS,
    COL_ARTIST_GENRES,
    COL_ARTIST_NAME,
    COL_ARTIST_POPULARITY,
    COL_EXPLICIT,
    COL_TRACK_DURATION_MS,
    COL_TRACK_NAME,
    COL_TRACK_POPULARITY,
    NUMERIC_COLUMNS,
)

__all__ = ["TrackRecord", "coerce_number", "parse_explicit", "parse_genres"]

_GENRE_PUNCTUATION = re.compile(r"[\[\]'\"]")
_GENRE_SEPARATORS = re.compile(r"[,/]")


# ---------------------------------------------------------------------
# Field parsers
# ---------------------------------------------------------------------
def coerce_number(value: Any) -> float:
    """Convert to float; non-convertible or non-finite values become NaN."""
    if value is None or isinstance(value, bool):
        return math.nan
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return math.nan
    try:
        number = float(value)
    except (TypeError, ValueError):
        return math.nan
    return number if math.isfinite(number) else math.nan


def parse_explicit(value: Any) -> bool:
    """Boolean-like flag: only "True" (any case) counts as explicit."""
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip().lower() == "true"
    return False


def parse_genres(raw: Any) -> Tuple[str, ...]:
    """
    Normalize a genre list embedded in a string.

    Strips bracket/quote punctuation, splits on commas or slashes, trims
    whitespace and drops empty tokens. Duplicates within one value collapse
    to their first occurrence.

    >>> parse_genres("['pop' / 'rock']")
    ('pop', 'rock')
    """
    if isinstance(raw, (list, tuple)):
        raw = ",".join(str(item) for item in raw)
    if not isinstance(raw, str):
        return ()

    cleaned = _GENRE_PUNCTUATION.sub("", raw)
    tokens = (token.strip() for token in _GENRE_SEPARATORS.split(cleaned))
    return tuple(dict.fromkeys(token for token in tokens if token))


# ---------------------------------------------------------------------
# Record model
# ---------------------------------------------------------------------
class TrackRecord(BaseModel):
    """One validated dataset row."""

    model_config = ConfigDict(frozen=True)

    track_name: str = ""
    artist_name: str = ""
    track_popularity: float = math.nan
    artist_popularity: float = math.nan
    artist_followers: float = math.nan
    track_duration_ms: float = math.nan
    explicit: bool = False
    artist_genres: Tuple[str, ...] = ()

    @field_validator(COL_TRACK_NAME, COL_ARTIST_NAME, mode="before")
    @classmethod
    def _strip_text(cls, v: Any) -> str:
        if v is None or (isinstance(v, float) and math.isnan(v)):
            return ""
        return str(v).strip()

    @field_validator(*NUMERIC_COLUMNS, mode="before")
    @classmethod
    def _coerce_measure(cls, v: Any) -> float:
        return coerce_number(v)

    @field_validator(COL_EXPLICIT, mode="before")
    @classmethod
    def _coerce_explicit(cls, v: Any) -> bool:
        return parse_explicit(v)

    @field_validator(COL_ARTIST_GENRES, mode="before")
    @classmethod
    def _coerce_genres(cls, v: Any) -> Tuple[str, ...]:
        return parse_genres(v)

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "TrackRecord":
        """Build a record from a column->value mapping, ignoring extra columns."""
        return cls(
            track_name=row.get(COL_TRACK_NAME),
            artist_name=row.get(COL_ARTIST_NAME),
            track_popularity=row.get(COL_TRACK_POPULARITY),
            artist_popularity=row.get(COL_ARTIST_POPULARITY),
            artist_followers=row.get(COL_ARTIST_FOLLOWERS),
            track_duration_ms=row.get(COL_TRACK_DURATION_MS),
            explicit=row.get(COL_EXPLICIT),
            artist_genres=row.get(COL_ARTIST_GENRES),
        )

    def measure(self, name: str) -> float:
        """Numeric measure by column name (`explicit` reads as 0.0/1.0)."""
        if name == COL_EXPLICIT:
            return 1.0 if self.explicit else 0.0
        if name not in NUMERIC_COLUMNS:
            raise KeyError(f"Unknown measure: {name}")
        return getattr(self, name)
