# pipeline/aggregation.py
"""
TrackLens - Group-By Aggregation

Contract:
    aggregate(records, key_fn, metrics, correlate=None) -> List[GroupSummary]

- `key_fn` maps one record to one or more group keys. Multi-valued fields
  (genres) put a record in several groups; a record never counts twice in
  the same group.
- `metrics` maps a metric name to an accessor. Each group tracks count,
  mean, min, max and the contributing values (input order).
- `correlate=(x, y)` adds a Pearson r between two metrics per group.

Groups come out in first-seen key order and are built fresh on every call.
Empty groups are never emitted.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Callable, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

from config.constants import COL_ARTIST_NAME
from core.schema import TrackRecord
from core.utils import is_finite_number
from pipeline.buckets import classify_popularity
from pipeline.statistics import mean, pearson

__all__ = [
    "GroupSummary",
    "aggregate",
    "measure_accessors",
    "by_artist",
    "by_genre",
    "by_bucket",
]

KeyFn = Callable[[TrackRecord], Union[str, Iterable[str], None]]
Accessor = Callable[[TrackRecord], float]

COUNT = "count"
CORRELATION = "correlation"


@dataclass(frozen=True)
class GroupSummary:
    """Summary of one group. Read-only for every consumer."""
    key: str
    count: int
    means: Mapping[str, float] = field(default_factory=dict)
    minimums: Mapping[str, float] = field(default_factory=dict)
    maximums: Mapping[str, float] = field(default_factory=dict)
    values: Mapping[str, Tuple[float, ...]] = field(default_factory=dict)
    correlation: float = math.nan

    def mean(self, metric: str) -> float:
        return self.means.get(metric, math.nan)

    def metric(self, name: str) -> float:
        """Rankable value: "count", "correlation" or a tracked mean."""
        if name == COUNT:
            return float(self.count)
        if name == CORRELATION:
            return self.correlation
        return self.mean(name)

    def as_dict(self) -> Dict[str, object]:
        row: Dict[str, object] = {"key": self.key, COUNT: self.count}
        for name, value in self.means.items():
            row[name] = value
            row[f"{name}_min"] = self.minimums.get(name, math.nan)
            row[f"{name}_max"] = self.maximums.get(name, math.nan)
        row[CORRELATION] = self.correlation
        return row


class _GroupAccumulator:
    """Mutable fold state for one key; private to a single `aggregate` call."""

    __slots__ = ("count", "values", "pairs")

    def __init__(self, metric_names: Sequence[str]) -> None:
        self.count = 0
        self.values: Dict[str, List[float]] = {name: [] for name in metric_names}
        self.pairs: Tuple[List[float], List[float]] = ([], [])

    def add(
        self,
        record: TrackRecord,
        metrics: Mapping[str, Accessor],
        correlate: Optional[Tuple[str, str]],
    ) -> None:
        self.count += 1
        observed: Dict[str, float] = {}
        for name, accessor in metrics.items():
            value = accessor(record)
            if is_finite_number(value):
                observed[name] = float(value)
                self.values[name].append(float(value))

        if correlate is not None:
            x_name, y_name = correlate
            if x_name in observed and y_name in observed:
                self.pairs[0].append(observed[x_name])
                self.pairs[1].append(observed[y_name])

    def freeze(self, key: str, correlate: Optional[Tuple[str, str]]) -> GroupSummary:
        means = {name: mean(vals) for name, vals in self.values.items()}
        minimums = {name: (min(vals) if vals else math.nan) for name, vals in self.values.items()}
        maximums = {name: (max(vals) if vals else math.nan) for name, vals in self.values.items()}
        values = {name: tuple(vals) for name, vals in self.values.items()}
        r = pearson(*self.pairs) if correlate is not None else math.nan
        return GroupSummary(
            key=key,
            count=self.count,
            means=MappingProxyType(means),
            minimums=MappingProxyType(minimums),
            maximums=MappingProxyType(maximums),
            values=MappingProxyType(values),
            correlation=r,
        )


def _keys_of(record: TrackRecord, key_fn: KeyFn) -> Tuple[str, ...]:
    keys = key_fn(record)
    if keys is None:
        return ()
    if isinstance(keys, str):
        keys = (keys,)
    return tuple(dict.fromkeys(k for k in keys if k))


def aggregate(
    records: Iterable[TrackRecord],
    key_fn: KeyFn,
    metrics: Mapping[str, Accessor],
    correlate: Optional[Tuple[str, str]] = None,
) -> List[GroupSummary]:
    """
    Fold records into per-key summaries.

    Means are sum/count over the finite values of each metric; with filtered
    input that is the group count. Correlation metrics must be in `metrics`.
    """
    if correlate is not None:
        unknown = [name for name in correlate if name not in metrics]
        if unknown:
            raise ValueError(f"Correlated metrics must be tracked: {unknown}")

    names = list(metrics)
    groups: Dict[str, _GroupAccumulator] = {}

    for record in records:
        for key in _keys_of(record, key_fn):
            acc = groups.get(key)
            if acc is None:
                acc = groups[key] = _GroupAccumulator(names)
            acc.add(record, metrics, correlate)

    return [acc.freeze(key, correlate) for key, acc in groups.items() if acc.count > 0]


# ---------------------------------------------------------------------
# Accessors & key functions
# ---------------------------------------------------------------------
def measure_accessors(*names: str) -> Dict[str, Accessor]:
    """Accessor map reading `TrackRecord.measure(name)` for each name."""
    return {name: (lambda record, _name=name: record.measure(_name)) for name in names}


def by_artist(record: TrackRecord) -> Tuple[str, ...]:
    name = getattr(record, COL_ARTIST_NAME)
    return (name,) if name else ()


def by_genre(record: TrackRecord) -> Tuple[str, ...]:
    return record.artist_genres


def by_bucket(metric: str) -> KeyFn:
    """Key function placing a record in the popularity tier of `metric`."""
    def key_fn(record: TrackRecord) -> Tuple[str, ...]:
        tier = classify_popularity(record.measure(metric))
        return (tier,) if tier is not None else ()

    key_fn.__name__ = f"by_bucket_{metric}"
    return key_fn
