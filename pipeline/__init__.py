# pipeline/__init__.py
"""
TrackLens - Pipeline Package (lazy exports)

```
    pipeline/
    ├── filters.py       # Requirement + filter_records
    ├── aggregation.py   # GroupSummary + aggregate
    ├── statistics.py    # mean / pearson / extent / histogram
    ├── buckets.py       # popularity tiers + Sankey links
    ├── ranking.py       # rank (stable, NaN last)
    ├── domains.py       # derive_domain(s)
    └── views.py         # one builder per chart
```

Usage:
```python
    from pipeline import bar_view, BarMetric
```
"""

from __future__ import annotations

from importlib import import_module
from typing import Any, Dict, List, Tuple

_LAZY_EXPORTS: Dict[str, Tuple[str, str]] = {
    "Requirement": ("pipeline.filters", "Requirement"),
    "filter_records": ("pipeline.filters", "filter_records"),
    "GroupSummary": ("pipeline.aggregation", "GroupSummary"),
    "aggregate": ("pipeline.aggregation", "aggregate"),
    "pearson": ("pipeline.statistics", "pearson"),
    "classify_popularity": ("pipeline.buckets", "classify_popularity"),
    "rank": ("pipeline.ranking", "rank"),
    "derive_domain": ("pipeline.domains", "derive_domain"),
    "ChartData": ("pipeline.views", "ChartData"),
    "ChartKind": ("pipeline.views", "ChartKind"),
    "BarMetric": ("pipeline.views", "BarMetric"),
    "bar_view": ("pipeline.views", "bar_view"),
    "bubble_view": ("pipeline.views", "bubble_view"),
    "treemap_view": ("pipeline.views", "treemap_view"),
    "sankey_view": ("pipeline.views", "sankey_view"),
    "parallel_view": ("pipeline.views", "parallel_view"),
    "sparkline_view": ("pipeline.views", "sparkline_view"),
    "VIEW_BUILDERS": ("pipeline.views", "VIEW_BUILDERS"),
}

__all__ = tuple(_LAZY_EXPORTS)


def __getattr__(name: str) -> Any:
    if name in _LAZY_EXPORTS:
        module_name, symbol_name = _LAZY_EXPORTS[name]
        obj = getattr(import_module(module_name), symbol_name)
        globals()[name] = obj
        return obj

    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")


def __dir__() -> List[str]:
    return sorted(set(list(globals().keys()) + list(_LAZY_EXPORTS.keys())))
