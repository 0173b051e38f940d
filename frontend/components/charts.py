"""
TrackLens - Charts
Plotly figures for every chart view, plus the render boundary.

Usage:
    from frontend.components.charts import ChartFactory as CF, ViewportSize

    fig = CF.figure(bar_view(records), ViewportSize(960, 540))
    CF.save_figure(fig, "reports/figs/top_artists.html")

Every factory method returns a fresh `plotly.graph_objects.Figure`; nothing
is appended to a previous figure.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Sequence, Union

import plotly.graph_objects as go
from loguru import logger
from plotly.subplots import make_subplots

from config.constants import (
    COL_ARTIST_FOLLOWERS,
    COL_ARTIST_POPULARITY,
    COL_EXPLICIT,
    COL_TRACK_DURATION_MS,
    COL_TRACK_POPULARITY,
    COLOR_PALETTE_PRIMARY,
    CORRELATION_COLORSCALE,
    METRIC_LABELS,
    NEUTRAL_COLOR,
    TIER_COLORS,
    TIER_ORDER,
)
from core.exceptions import RenderError
from core.utils import format_duration_ms, format_number, format_percentage, is_finite_number, ms_to_minutes
from pipeline.aggregation import COUNT, GroupSummary
from pipeline.buckets import SankeyLink
from pipeline.domains import EMPTY_DOMAIN, Domain
from pipeline.views import ChartData, ChartKind

__all__ = ["ViewportSize", "ChartFactory", "CF", "RenderTarget"]

BUBBLE_MAX_PX = 48.0
BUBBLE_MIN_PX = 6.0


@dataclass(frozen=True)
class ViewportSize:
    """Container size in pixels. A zero dimension means "not laid out yet"."""
    width: int
    height: int

    @property
    def is_zero(self) -> bool:
        return self.width <= 0 or self.height <= 0


# =========================
# Layout
# =========================

def _get_base_layout() -> Dict[str, Any]:
    return dict(
        template="plotly_white",
        paper_bgcolor="white",
        plot_bgcolor="white",
        font=dict(family="Inter, Segoe UI, Arial, sans-serif", size=12, color="#2c3e50"),
        margin=dict(l=60, r=30, t=60, b=60),
        hoverlabel=dict(bgcolor="white", font_size=12),
    )


def _apply_layout(fig: go.Figure, title: Optional[str], viewport: ViewportSize) -> go.Figure:
    """Base layout + title + viewport size."""
    fig.update_layout(**_get_base_layout())
    if title:
        fig.update_layout(title=dict(text=title, x=0.01, xanchor="left"))
    fig.update_layout(width=viewport.width, height=viewport.height)
    return fig


def _label(metric: str) -> str:
    return METRIC_LABELS.get(metric, metric)


def _display_value(metric: str, value: float) -> float:
    """Unit conversion for axes: durations are shown in minutes."""
    if metric == COL_TRACK_DURATION_MS:
        return ms_to_minutes(value)
    return value


def _display_domain(metric: str, domain: Domain) -> List[float]:
    return [_display_value(metric, domain[0]), _display_value(metric, domain[1])]


def _format_value(metric: str, value: float) -> str:
    if metric == COL_TRACK_DURATION_MS:
        return format_duration_ms(value)
    if metric == COL_EXPLICIT:
        return format_percentage(value)
    return format_number(value, decimals=1)


def _sqrt_size(value: float, domain: Domain) -> float:
    """Area-proportional marker diameter (sqrt scale anchored at zero)."""
    high = domain[1]
    if not is_finite_number(value) or high <= 0:
        return BUBBLE_MIN_PX
    return max(BUBBLE_MIN_PX, BUBBLE_MAX_PX * math.sqrt(max(value, 0.0) / high))


def _as_path(path: Union[str, Path]) -> Path:
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    return p


def _summaries(data: ChartData) -> List[GroupSummary]:
    return [item for item in data.items if isinstance(item, GroupSummary)]


# =========================
# Chart factory
# =========================

class ChartFactory:
    """Static builders, one per chart kind."""

    TITLES: Dict[ChartKind, str] = {
        ChartKind.BAR: "Top Artists",
        ChartKind.BUBBLE: "Genres: Artist vs Track Popularity",
        ChartKind.TREEMAP: "Genre Landscape",
        ChartKind.SANKEY: "Artist Tier to Track Tier",
        ChartKind.PARALLEL: "Artist Profiles",
        ChartKind.SPARKLINE: "Popularity Distribution by Genre",
    }

    @staticmethod
    def figure(data: ChartData, viewport: ViewportSize) -> go.Figure:
        """Dispatch on chart kind; empty data gets the "No data" figure."""
        title = ChartFactory.TITLES.get(data.kind, data.kind.value)
        if data.is_empty:
            return ChartFactory.empty(title, viewport)

        builders: Dict[ChartKind, Callable[[ChartData, ViewportSize], go.Figure]] = {
            ChartKind.BAR: ChartFactory.bar,
            ChartKind.BUBBLE: ChartFactory.bubble,
            ChartKind.TREEMAP: ChartFactory.treemap,
            ChartKind.SANKEY: ChartFactory.sankey,
            ChartKind.PARALLEL: ChartFactory.parcoords,
            ChartKind.SPARKLINE: ChartFactory.sparklines,
        }
        builder = builders.get(data.kind)
        if builder is None:
            raise RenderError(f"No renderer for chart kind '{data.kind}'")
        return builder(data, viewport)

    @staticmethod
    def empty(title: str, viewport: ViewportSize, text: str = "No data") -> go.Figure:
        fig = go.Figure()
        fig.add_annotation(
            text=text,
            xref="paper",
            yref="paper",
            x=0.5,
            y=0.5,
            showarrow=False,
        )
        fig.update_xaxes(visible=False)
        fig.update_yaxes(visible=False)
        return _apply_layout(fig, title, viewport)

    # ---------- Bar ----------

    @staticmethod
    def bar(data: ChartData, viewport: ViewportSize) -> go.Figure:
        metric = data.metric or COUNT
        items = _summaries(data)
        values = [_display_value(metric, s.metric(metric)) for s in items]
        domain = data.domains.get(metric, EMPTY_DOMAIN)

        fig = go.Figure(
            data=go.Bar(
                x=values,
                y=[s.key for s in items],
                orientation="h",
                marker_color=COLOR_PALETTE_PRIMARY[0],
                text=[_format_value(metric, s.metric(metric)) for s in items],
                textposition="auto",
                hovertemplate="%{y}<br>%{text}<extra></extra>",
            )
        )
        fig.update_xaxes(title_text=_label(metric), range=_display_domain(metric, domain))
        # Rank 1 on top
        fig.update_yaxes(title_text="Artist", autorange="reversed")
        title = f"{ChartFactory.TITLES[ChartKind.BAR]} by {_label(metric)}"
        return _apply_layout(fig, title, viewport)

    # ---------- Bubble ----------

    @staticmethod
    def bubble(data: ChartData, viewport: ViewportSize) -> go.Figure:
        items = _summaries(data)
        size_domain = data.domains.get(COL_ARTIST_FOLLOWERS, EMPTY_DOMAIN)
        defined = [s for s in items if is_finite_number(s.correlation)]
        undefined = [s for s in items if not is_finite_number(s.correlation)]

        def _trace(group: Sequence[GroupSummary], name: str, color: Any, **marker: Any) -> go.Scatter:
            return go.Scatter(
                x=[s.mean(COL_ARTIST_POPULARITY) for s in group],
                y=[s.mean(COL_TRACK_POPULARITY) for s in group],
                mode="markers",
                name=name,
                text=[s.key for s in group],
                customdata=[
                    [s.count, format_number(s.mean(COL_ARTIST_FOLLOWERS), 0), format_number(s.correlation, 2)]
                    for s in group
                ],
                hovertemplate=(
                    "%{text}<br>tracks: %{customdata[0]}<br>followers: %{customdata[1]}"
                    "<br>r: %{customdata[2]}<extra></extra>"
                ),
                marker=dict(
                    size=[_sqrt_size(s.mean(COL_ARTIST_FOLLOWERS), size_domain) for s in group],
                    color=color,
                    line=dict(width=1, color="white"),
                    opacity=0.85,
                    **marker,
                ),
            )

        fig = go.Figure()
        if defined:
            fig.add_trace(
                _trace(
                    defined,
                    "r defined",
                    [s.correlation for s in defined],
                    colorscale=CORRELATION_COLORSCALE,
                    cmin=-1.0,
                    cmax=1.0,
                    showscale=True,
                    colorbar=dict(title="r"),
                )
            )
        if undefined:
            fig.add_trace(_trace(undefined, "r undefined", NEUTRAL_COLOR))

        fig.update_xaxes(
            title_text=_label(COL_ARTIST_POPULARITY),
            range=list(data.domains.get(COL_ARTIST_POPULARITY, EMPTY_DOMAIN)),
        )
        fig.update_yaxes(
            title_text=_label(COL_TRACK_POPULARITY),
            range=list(data.domains.get(COL_TRACK_POPULARITY, EMPTY_DOMAIN)),
        )
        fig.update_layout(showlegend=False)
        return _apply_layout(fig, ChartFactory.TITLES[ChartKind.BUBBLE], viewport)

    # ---------- Treemap ----------

    @staticmethod
    def treemap(data: ChartData, viewport: ViewportSize) -> go.Figure:
        items = _summaries(data)
        domain = data.domains.get(COL_TRACK_POPULARITY, EMPTY_DOMAIN)
        fig = go.Figure(
            data=go.Treemap(
                labels=[s.key for s in items],
                parents=[""] * len(items),
                values=[s.count for s in items],
                marker=dict(
                    colors=[s.mean(COL_TRACK_POPULARITY) for s in items],
                    colorscale="Greens",
                    cmin=domain[0],
                    cmax=domain[1],
                    showscale=True,
                    colorbar=dict(title="popularity"),
                ),
                hovertemplate="%{label}<br>tracks: %{value}<br>avg popularity: %{color:.1f}<extra></extra>",
            )
        )
        return _apply_layout(fig, ChartFactory.TITLES[ChartKind.TREEMAP], viewport)

    # ---------- Sankey ----------

    @staticmethod
    def sankey(data: ChartData, viewport: ViewportSize) -> go.Figure:
        links = [item for item in data.items if isinstance(item, SankeyLink)]
        sources = [f"Artist: {tier}" for tier in TIER_ORDER]
        targets = [f"Track: {tier}" for tier in TIER_ORDER]
        index = {tier: i for i, tier in enumerate(TIER_ORDER)}
        offset = len(TIER_ORDER)

        fig = go.Figure(
            data=go.Sankey(
                arrangement="fixed",
                node=dict(
                    label=sources + targets,
                    color=[TIER_COLORS[t] for t in TIER_ORDER] * 2,
                    pad=18,
                    thickness=16,
                ),
                link=dict(
                    source=[index[link.source] for link in links],
                    target=[offset + index[link.target] for link in links],
                    value=[link.value for link in links],
                ),
            )
        )
        return _apply_layout(fig, ChartFactory.TITLES[ChartKind.SANKEY], viewport)

    # ---------- Parallel coordinates ----------

    @staticmethod
    def parcoords(data: ChartData, viewport: ViewportSize) -> go.Figure:
        items = _summaries(data)
        metrics = [COL_TRACK_POPULARITY, COL_ARTIST_POPULARITY, COL_ARTIST_FOLLOWERS, COL_TRACK_DURATION_MS]
        dimensions = [
            dict(
                label=_label(metric),
                values=[_display_value(metric, s.mean(metric)) for s in items],
                range=_display_domain(metric, data.domains.get(metric, EMPTY_DOMAIN)),
            )
            for metric in metrics
        ]
        popularity = data.domains.get(COL_TRACK_POPULARITY, EMPTY_DOMAIN)
        fig = go.Figure(
            data=go.Parcoords(
                line=dict(
                    color=[s.mean(COL_TRACK_POPULARITY) for s in items],
                    colorscale="Viridis",
                    cmin=popularity[0],
                    cmax=popularity[1],
                    showscale=True,
                ),
                dimensions=dimensions,
            )
        )
        return _apply_layout(fig, ChartFactory.TITLES[ChartKind.PARALLEL], viewport)

    # ---------- Sparklines ----------

    @staticmethod
    def sparklines(data: ChartData, viewport: ViewportSize) -> go.Figure:
        items = _summaries(data)
        low, high = data.domains.get(COL_TRACK_POPULARITY, EMPTY_DOMAIN)
        y_range = list(data.domains.get(COUNT, EMPTY_DOMAIN))

        fig = make_subplots(
            rows=len(items),
            cols=1,
            shared_xaxes=True,
            vertical_spacing=0.02,
            subplot_titles=[f"{s.key} ({s.count})" for s in items],
        )
        for row, summary in enumerate(items, start=1):
            points = data.series.get(summary.key, ())
            width = (high - low) / len(points) if points else 0.0
            centers = [low + width * (i + 0.5) for i in range(len(points))]
            fig.add_trace(
                go.Scatter(
                    x=centers,
                    y=list(points),
                    mode="lines",
                    line=dict(width=2, color=COLOR_PALETTE_PRIMARY[0]),
                    fill="tozeroy",
                    hoverinfo="skip",
                    showlegend=False,
                ),
                row=row,
                col=1,
            )
            fig.update_yaxes(visible=False, range=y_range, row=row, col=1)
        fig.update_xaxes(showticklabels=False)
        fig.update_xaxes(showticklabels=True, title_text=_label(COL_TRACK_POPULARITY), row=len(items), col=1)
        fig.update_annotations(font_size=10, x=0.0, xanchor="left")
        return _apply_layout(fig, ChartFactory.TITLES[ChartKind.SPARKLINE], viewport)

    # ---------- Saving ----------

    @staticmethod
    def save_figure(fig: go.Figure, path: Union[str, Path]) -> Path:
        """Write the figure to standalone HTML."""
        out = _as_path(path).with_suffix(".html")
        fig.write_html(out, include_plotlyjs="cdn", full_html=True)
        logger.success(f"Chart saved: {out}")
        return out


CF = ChartFactory


# =========================
# Render target
# =========================

class RenderTarget:
    """
    Owns the currently displayed figure of one chart.

    `render` replaces the figure wholesale. A zero-sized viewport is a no-op:
    the previous figure stays in place and None is returned.
    """

    def __init__(self, on_render: Optional[Callable[[go.Figure], None]] = None) -> None:
        self._on_render = on_render
        self.figure: Optional[go.Figure] = None
        self.render_count = 0

    def render(self, data: ChartData, viewport: ViewportSize) -> Optional[go.Figure]:
        if viewport.is_zero:
            return None
        try:
            fig = ChartFactory.figure(data, viewport)
        except RenderError:
            raise
        except (ValueError, KeyError, TypeError) as e:
            raise RenderError(
                f"Failed to build {data.kind.value} chart",
                details={"original_error": str(e)},
                context={"kind": data.kind.value, "items": len(data.items)},
                cause=e,
            ) from e

        self.figure = fig
        self.render_count += 1
        if self._on_render is not None:
            self._on_render(fig)
        return fig

    def clear(self) -> None:
        self.figure = None

