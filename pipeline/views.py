# pipeline/views.py
"""
TrackLens - Chart Views
One pure builder per visualization: records -> ChartData.

Each builder runs the full pipeline for its chart:

    filter -> aggregate -> rank -> derive domains

| view            | key    | ranked by        | limit | requires                                  |
|-----------------|--------|------------------|-------|-------------------------------------------|
| bar_view        | artist | count / a mean   | 15    | track popularity (+ metric's own measure) |
| bubble_view     | genre  | count            | 25    | both popularities, followers > 0, genres  |
| treemap_view    | genre  | count            | 40    | track popularity, genres                  |
| sankey_view     | tiers  | n/a              | n/a   | both popularities                         |
| parallel_view   | artist | count            | 25    | all four measures, followers > 0          |
| sparkline_view  | genre  | count            | 15    | track popularity, duration, genres        |

Builders never mutate their input and keep no state between calls.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Tuple

from loguru import logger

from config.constants import (
    BAR_TOP_N,
    BUBBLE_TOP_N,
    COL_ARTIST_FOLLOWERS,
    COL_ARTIST_POPULARITY,
    COL_EXPLICIT,
    COL_TRACK_DURATION_MS,
    COL_TRACK_POPULARITY,
    PARALLEL_TOP_N,
    SPARKLINE_BINS,
    SPARKLINE_TOP_N,
    TREEMAP_TOP_N,
)
from core.schema import TrackRecord
from pipeline.aggregation import (
    COUNT,
    CORRELATION,
    GroupSummary,
    aggregate,
    by_artist,
    by_genre,
    measure_accessors,
)
from pipeline.buckets import sankey_links
from pipeline.domains import DomainBundle, derive_domain, derive_domains
from pipeline.filters import Requirement, filter_records
from pipeline.ranking import rank
from pipeline.statistics import histogram

__all__ = [
    "ChartKind",
    "BarMetric",
    "ChartData",
    "bar_view",
    "bubble_view",
    "treemap_view",
    "sankey_view",
    "parallel_view",
    "sparkline_view",
    "VIEW_BUILDERS",
    "summaries_frame_rows",
]


class ChartKind(str, Enum):
    BAR = "bar"
    BUBBLE = "bubble"
    TREEMAP = "treemap"
    SANKEY = "sankey"
    PARALLEL = "parallel"
    SPARKLINE = "sparkline"


class BarMetric(str, Enum):
    """Selectable bar lengths for the top-artists chart."""
    COUNT = "count"
    AVG_POPULARITY = "avg_popularity"
    AVG_DURATION = "avg_duration"
    AVG_FOLLOWERS = "avg_followers"
    EXPLICIT_SHARE = "explicit_share"


# BarMetric -> (summary metric, extra requirement on top of track popularity)
_BAR_METRICS: Dict[BarMetric, Tuple[str, Requirement]] = {
    BarMetric.COUNT: (COUNT, Requirement.of(COL_TRACK_POPULARITY)),
    BarMetric.AVG_POPULARITY: (COL_TRACK_POPULARITY, Requirement.of(COL_TRACK_POPULARITY)),
    BarMetric.AVG_DURATION: (
        COL_TRACK_DURATION_MS,
        Requirement.of(COL_TRACK_POPULARITY, COL_TRACK_DURATION_MS, positive=(COL_TRACK_DURATION_MS,)),
    ),
    BarMetric.AVG_FOLLOWERS: (
        COL_ARTIST_FOLLOWERS,
        Requirement.of(COL_TRACK_POPULARITY, COL_ARTIST_FOLLOWERS, positive=(COL_ARTIST_FOLLOWERS,)),
    ),
    BarMetric.EXPLICIT_SHARE: (COL_EXPLICIT, Requirement.of(COL_TRACK_POPULARITY)),
}

_ALL_MEASURES = (COL_TRACK_POPULARITY, COL_ARTIST_POPULARITY, COL_ARTIST_FOLLOWERS, COL_TRACK_DURATION_MS)


@dataclass(frozen=True)
class ChartData:
    """
    Finalized bundle handed to the renderer.

    `items` holds GroupSummary objects (or SankeyLink objects for the Sankey
    view). `series` carries per-key sparkline points.
    """
    kind: ChartKind
    items: Tuple[Any, ...] = ()
    domains: DomainBundle = field(default_factory=dict)
    metric: Optional[str] = None
    limit: Optional[int] = None
    n_records: int = 0
    series: Mapping[str, Tuple[float, ...]] = field(default_factory=dict)

    @property
    def is_empty(self) -> bool:
        return len(self.items) == 0


def _summary_metric(summary: GroupSummary, metric: str) -> float:
    return summary.metric(metric)


def _log_view(kind: ChartKind, n_valid: int, n_total: int, n_items: int) -> None:
    logger.bind(component="views").debug(
        f"{kind.value}: {n_valid}/{n_total} valid records -> {n_items} items"
    )


# ═══════════════════════════════════════════════════════════════════════════
# Builders
# ═══════════════════════════════════════════════════════════════════════════

def bar_view(
    records: Sequence[TrackRecord],
    metric: BarMetric = BarMetric.COUNT,
    limit: int = BAR_TOP_N,
) -> ChartData:
    """Top artists, bar length = `metric`. Duration comes from track_duration_ms."""
    metric = BarMetric(metric)
    summary_metric, requirement = _BAR_METRICS[metric]

    valid = filter_records(records, requirement)
    summaries = aggregate(
        valid,
        by_artist,
        measure_accessors(COL_TRACK_POPULARITY, COL_TRACK_DURATION_MS, COL_ARTIST_FOLLOWERS, COL_EXPLICIT),
    )
    ranked = rank(summaries, summary_metric, limit)
    domains = derive_domains(ranked, [summary_metric], _summary_metric, include_zero=True)

    _log_view(ChartKind.BAR, len(valid), len(records), len(ranked))
    return ChartData(
        kind=ChartKind.BAR,
        items=tuple(ranked),
        domains=domains,
        metric=summary_metric,
        limit=limit,
        n_records=len(valid),
    )


def bubble_view(records: Sequence[TrackRecord], limit: int = BUBBLE_TOP_N) -> ChartData:
    """
    Genres as bubbles: x = avg artist popularity, y = avg track popularity,
    size = avg followers, colour = artist-vs-track popularity correlation.
    """
    requirement = Requirement.of(
        COL_ARTIST_POPULARITY,
        COL_TRACK_POPULARITY,
        COL_ARTIST_FOLLOWERS,
        positive=(COL_ARTIST_FOLLOWERS,),
        needs_genres=True,
    )
    valid = filter_records(records, requirement)
    summaries = aggregate(
        valid,
        by_genre,
        measure_accessors(COL_ARTIST_POPULARITY, COL_TRACK_POPULARITY, COL_ARTIST_FOLLOWERS),
        correlate=(COL_ARTIST_POPULARITY, COL_TRACK_POPULARITY),
    )
    ranked = rank(summaries, COUNT, limit)
    domains = derive_domains(
        ranked,
        [COL_ARTIST_POPULARITY, COL_TRACK_POPULARITY, COL_ARTIST_FOLLOWERS],
        _summary_metric,
    )
    domains[CORRELATION] = derive_domain(s.correlation for s in ranked)

    _log_view(ChartKind.BUBBLE, len(valid), len(records), len(ranked))
    return ChartData(
        kind=ChartKind.BUBBLE,
        items=tuple(ranked),
        domains=domains,
        metric=COUNT,
        limit=limit,
        n_records=len(valid),
    )


def treemap_view(records: Sequence[TrackRecord], limit: int = TREEMAP_TOP_N) -> ChartData:
    """Genres sized by track count, coloured by average track popularity."""
    valid = filter_records(records, Requirement.of(COL_TRACK_POPULARITY, needs_genres=True))
    summaries = aggregate(valid, by_genre, measure_accessors(COL_TRACK_POPULARITY))
    ranked = rank(summaries, COUNT, limit)
    domains = derive_domains(ranked, [COL_TRACK_POPULARITY], _summary_metric)

    _log_view(ChartKind.TREEMAP, len(valid), len(records), len(ranked))
    return ChartData(
        kind=ChartKind.TREEMAP,
        items=tuple(ranked),
        domains=domains,
        metric=COUNT,
        limit=limit,
        n_records=len(valid),
    )


def sankey_view(
    records: Sequence[TrackRecord],
    source_metric: str = COL_ARTIST_POPULARITY,
    target_metric: str = COL_TRACK_POPULARITY,
) -> ChartData:
    """Flow from artist-popularity tier to track-popularity tier."""
    valid = filter_records(records, Requirement.of(source_metric, target_metric))
    links = sankey_links(valid, source_metric, target_metric)

    _log_view(ChartKind.SANKEY, len(valid), len(records), len(links))
    return ChartData(
        kind=ChartKind.SANKEY,
        items=tuple(links),
        domains={},
        metric=f"{source_metric}->{target_metric}",
        n_records=len(valid),
    )


def parallel_view(records: Sequence[TrackRecord], limit: int = PARALLEL_TOP_N) -> ChartData:
    """Artist profiles across the four numeric measures."""
    requirement = Requirement.of(*_ALL_MEASURES, positive=(COL_ARTIST_FOLLOWERS,))
    valid = filter_records(records, requirement)
    summaries = aggregate(valid, by_artist, measure_accessors(*_ALL_MEASURES))
    ranked = rank(summaries, COUNT, limit)
    domains = derive_domains(ranked, _ALL_MEASURES, _summary_metric)

    _log_view(ChartKind.PARALLEL, len(valid), len(records), len(ranked))
    return ChartData(
        kind=ChartKind.PARALLEL,
        items=tuple(ranked),
        domains=domains,
        metric=COUNT,
        limit=limit,
        n_records=len(valid),
    )


def sparkline_view(
    records: Sequence[TrackRecord],
    limit: int = SPARKLINE_TOP_N,
    bins: int = SPARKLINE_BINS,
) -> ChartData:
    """
    Top genres with a popularity-distribution sparkline each.

    The histogram domain comes from all valid records, so every sparkline
    shares one x-scale.
    """
    requirement = Requirement.of(COL_TRACK_POPULARITY, COL_TRACK_DURATION_MS, needs_genres=True)
    valid = filter_records(records, requirement)
    summaries = aggregate(valid, by_genre, measure_accessors(COL_TRACK_POPULARITY, COL_TRACK_DURATION_MS))
    ranked = rank(summaries, COUNT, limit)

    popularity_domain = derive_domain(r.track_popularity for r in valid)
    series = {
        s.key: tuple(float(c) for c in histogram(s.values[COL_TRACK_POPULARITY], bins, popularity_domain))
        for s in ranked
    }
    domains: DomainBundle = {COL_TRACK_POPULARITY: popularity_domain}
    domains[COUNT] = derive_domain((c for points in series.values() for c in points), include_zero=True)

    _log_view(ChartKind.SPARKLINE, len(valid), len(records), len(ranked))
    return ChartData(
        kind=ChartKind.SPARKLINE,
        items=tuple(ranked),
        domains=domains,
        metric=COUNT,
        limit=limit,
        n_records=len(valid),
        series=series,
    )


VIEW_BUILDERS: Dict[ChartKind, Callable[[Sequence[TrackRecord]], ChartData]] = {
    ChartKind.BAR: bar_view,
    ChartKind.BUBBLE: bubble_view,
    ChartKind.TREEMAP: treemap_view,
    ChartKind.SANKEY: sankey_view,
    ChartKind.PARALLEL: parallel_view,
    ChartKind.SPARKLINE: sparkline_view,
}


def summaries_frame_rows(data: ChartData) -> List[Dict[str, Any]]:
    """Tabular rows for the dashboard's data table."""
    rows: List[Dict[str, Any]] = []
    for item in data.items:
        if isinstance(item, GroupSummary):
            rows.append(item.as_dict())
        else:
            rows.append(asdict(item))
    return rows
