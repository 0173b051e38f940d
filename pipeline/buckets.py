# pipeline/buckets.py
"""
TrackLens - Popularity Tiers & Flow Links

Tiers are half-open bands checked with strict `<`:

    value < 34 -> "Low"      value < 67 -> "Medium"      otherwise -> "High"

so 34 is Medium and 67 is High.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple

from config.constants import TIER_HIGH, TIER_ORDER, TIER_THRESHOLDS
from core.schema import TrackRecord
from core.utils import is_finite_number

__all__ = ["SankeyLink", "classify_popularity", "sankey_links"]


@dataclass(frozen=True)
class SankeyLink:
    source: str
    target: str
    value: int


def classify_popularity(value: float) -> Optional[str]:
    """Tier label for a popularity value; None for non-finite input."""
    if not is_finite_number(value):
        return None
    for upper, label in TIER_THRESHOLDS:
        if value < upper:
            return label
    return TIER_HIGH


def sankey_links(
    records: Iterable[TrackRecord],
    source_metric: str,
    target_metric: str,
) -> List[SankeyLink]:
    """
    Co-occurrence counts of (source tier, target tier) pairs.

    Links come out in Low/Medium/High order on both sides; zero-weight
    pairs are omitted.
    """
    counts: Dict[Tuple[str, str], int] = {}
    for record in records:
        source = classify_popularity(record.measure(source_metric))
        target = classify_popularity(record.measure(target_metric))
        if source is None or target is None:
            continue
        counts[(source, target)] = counts.get((source, target), 0) + 1

    return [
        SankeyLink(source, target, counts[(source, target)])
        for source in TIER_ORDER
        for target in TIER_ORDER
        if counts.get((source, target), 0) > 0
    ]
