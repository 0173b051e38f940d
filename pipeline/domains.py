# pipeline/domains.py
"""
TrackLens - Domain Deriver
Numeric [min, max] domains that parameterize the chart scales.

Domains are computed per render pass and never cached: a stale domain would
silently mis-scale new data. Empty input yields the (0, 1) fallback so a
still-loading dataset renders without errors.
"""

from __future__ import annotations

from typing import Callable, Dict, Iterable, Sequence, Tuple, TypeVar

from pipeline.statistics import extent

__all__ = ["Domain", "DomainBundle", "EMPTY_DOMAIN", "derive_domain", "derive_domains"]

T = TypeVar("T")

Domain = Tuple[float, float]
DomainBundle = Dict[str, Domain]

EMPTY_DOMAIN: Domain = (0.0, 1.0)


def derive_domain(values: Iterable[float], *, include_zero: bool = False) -> Domain:
    """
    (min, max) over the finite values.

    `include_zero` stretches the domain to contain 0 (bar lengths).
    """
    bounds = extent(list(values))
    if bounds is None:
        return EMPTY_DOMAIN
    low, high = bounds
    if include_zero:
        low, high = min(low, 0.0), max(high, 0.0)
    return (low, high)


def derive_domains(
    items: Sequence[T],
    metrics: Iterable[str],
    accessor: Callable[[T, str], float],
    *,
    include_zero: bool = False,
) -> DomainBundle:
    """One domain per metric, read from `items` through `accessor(item, metric)`."""
    return {
        metric: derive_domain((accessor(item, metric) for item in items), include_zero=include_zero)
        for metric in metrics
    }
