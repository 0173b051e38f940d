"""
TrackLens - Chart Component
One self-contained chart: its own records, its own viewport, its own target.

    records ──┐
              ├──> view(records) ──> target.render(data, viewport)
    viewport ─┘        (debounced on resize)

Components never share state: two components loading the same file read it
twice and hold separate record lists.

Usage:
    target = RenderTarget()
    component = ChartComponent(bar_view, target)
    await component.load("data/spotify_tracks.csv")
    component.resize(960, 540)
    ...
    component.close()
"""

from __future__ import annotations

from typing import Callable, List, Optional, Sequence, Tuple

import plotly.graph_objects as go

from config.logging_config import get_logger
from config.settings import settings
from core.data_loader import Source, load_records_async
from core.reactive import Debouncer, Observable, Subscription
from core.schema import TrackRecord
from frontend.components.charts import RenderTarget, ViewportSize
from pipeline.views import ChartData

__all__ = ["ChartComponent"]

ViewFn = Callable[[Sequence[TrackRecord]], ChartData]


class ChartComponent:
    """Re-runs view -> render whenever records or viewport change."""

    def __init__(
        self,
        view: ViewFn,
        target: RenderTarget,
        debounce_s: Optional[float] = None,
        viewport: ViewportSize = ViewportSize(0, 0),
    ) -> None:
        self._view = view
        self.target = target
        self.records: Observable[Tuple[TrackRecord, ...]] = Observable(())
        self.viewport: Observable[ViewportSize] = Observable(viewport)
        self.last_data: Optional[ChartData] = None
        self._closed = False

        delay = settings.resize_debounce_s if debounce_s is None else debounce_s
        self._resize = Debouncer(delay, self.viewport.set)
        self._subscriptions: List[Subscription] = [
            self.records.subscribe(lambda _records: self.refresh()),
            self.viewport.subscribe(lambda _viewport: self.refresh()),
        ]
        self._log = get_logger(__name__, component=getattr(view, "__name__", "ChartComponent"))

    @property
    def closed(self) -> bool:
        return self._closed

    # ---------- inputs ----------

    async def load(self, source: Source) -> int:
        """Read `source` off the loop and publish it; failures publish []."""
        records = await load_records_async(source)
        if self._closed:
            return 0
        self.set_records(records)
        self._log.info(f"Loaded {len(records)} records")
        return len(records)

    def set_records(self, records: Sequence[TrackRecord]) -> None:
        if self._closed:
            return
        self.records.set(tuple(records))

    def resize(self, width: int, height: int) -> None:
        """Debounced viewport update; only the last size in a burst is applied."""
        if self._closed:
            return
        self._resize.trigger(ViewportSize(width, height))

    def flush(self) -> None:
        """Apply a pending resize immediately."""
        self._resize.flush()

    def set_view(self, view: ViewFn) -> None:
        """Swap the pipeline (e.g. another bar metric) and re-render."""
        if self._closed:
            return
        self._view = view
        self.refresh()

    # ---------- pipeline ----------

    def refresh(self) -> Optional[go.Figure]:
        """Run the pipeline on the current snapshot and render it."""
        if self._closed:
            return None
        data = self._view(self.records.value)
        self.last_data = data
        return self.target.render(data, self.viewport.value)

    def close(self) -> None:
        """Detach from both observables and drop pending resize work."""
        if self._closed:
            return
        self._resize.cancel()
        for subscription in self._subscriptions:
            subscription.unsubscribe()
        self._subscriptions.clear()
        self._closed = True
