# pipeline/ranking.py
"""
TrackLens - Selector / Ranker

`rank` orders summaries descending by a metric and keeps the first `limit`.
The sort is stable (ties keep input order) so re-rendering unchanged input
always yields the same order. NaN metric values sort after every number.
"""

from __future__ import annotations

import math
from typing import List, Sequence

from pipeline.aggregation import GroupSummary

__all__ = ["rank"]


def rank(summaries: Sequence[GroupSummary], metric: str, limit: int) -> List[GroupSummary]:
    if limit < 0:
        raise ValueError("limit must be >= 0")

    def sort_key(summary: GroupSummary):
        value = summary.metric(metric)
        if math.isnan(value):
            return (1, 0.0)
        return (0, -value)

    # sorted() is stable
    return sorted(summaries, key=sort_key)[:limit]
