# pipeline/filters.py
"""
TrackLens - Record Filtering
Drops records a consumer cannot use. Records are never repaired.

A `Requirement` lists the measures a view needs (must be finite), the
measures that must be strictly positive (follower counts used as a size or
intensity encoding) and whether the record must carry at least one genre.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Sequence, Tuple

from loguru import logger

from core.schema import TrackRecord
from core.utils import is_finite_number

__all__ = ["Requirement", "is_valid", "filter_records"]


@dataclass(frozen=True)
class Requirement:
    """Validity rule for one consumer."""
    measures: Tuple[str, ...] = ()
    positive: Tuple[str, ...] = ()
    needs_genres: bool = False

    @classmethod
    def of(
        cls,
        *measures: str,
        positive: Sequence[str] = (),
        needs_genres: bool = False,
    ) -> "Requirement":
        return cls(tuple(measures), tuple(positive), needs_genres)


def is_valid(record: TrackRecord, requirement: Requirement) -> bool:
    for name in requirement.measures:
        if not is_finite_number(record.measure(name)):
            return False
    for name in requirement.positive:
        value = record.measure(name)
        if not is_finite_number(value) or value <= 0:
            return False
    if requirement.needs_genres and not record.artist_genres:
        return False
    return True


def filter_records(records: Iterable[TrackRecord], requirement: Requirement) -> List[TrackRecord]:
    """Keep valid records in input order. Idempotent."""
    source = list(records)
    kept = [r for r in source if is_valid(r, requirement)]
    dropped = len(source) - len(kept)
    if dropped:
        logger.bind(component="filters").debug(
            f"Dropped {dropped}/{len(source)} records failing {requirement}"
        )
    return kept
