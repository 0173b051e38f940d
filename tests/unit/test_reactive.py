"""
TrackLens - Unit Tests for Reactive Primitives and the Chart Component
"""

import asyncio

import pytest

from core.reactive import Debouncer, Observable
from frontend.components.chart_component import ChartComponent
from frontend.components.charts import RenderTarget, ViewportSize
from pipeline.views import BarMetric, bar_view, treemap_view


class TestObservable:
    """Tests for Observable"""

    def test_notifies_on_change(self):
        seen = []
        obs = Observable(1)
        obs.subscribe(seen.append)
        assert obs.set(2) is True
        assert seen == [2]
        assert obs.value == 2

    def test_equal_value_is_not_published(self):
        seen = []
        obs = Observable((1, 2))
        obs.subscribe(seen.append)
        assert obs.set((1, 2)) is False
        assert seen == []

    def test_force(self):
        seen = []
        obs = Observable("a")
        obs.subscribe(seen.append)
        obs.set("a", force=True)
        assert seen == ["a"]

    def test_unsubscribe(self):
        seen = []
        obs = Observable(0)
        sub = obs.subscribe(seen.append)
        sub.unsubscribe()
        sub.unsubscribe()
        obs.set(1)
        assert seen == []
        assert not sub.active
        assert obs.observer_count == 0

    def test_unsubscribe_during_notification(self):
        obs = Observable(0)
        seen = []
        subs = []
        subs.append(obs.subscribe(lambda v: subs[0].unsubscribe()))
        obs.subscribe(seen.append)
        obs.set(1)
        assert seen == [1]
        assert obs.observer_count == 1


class TestDebouncer:
    """Tests for Debouncer"""

    def test_zero_delay_is_synchronous(self):
        calls = []
        Debouncer(0, calls.append).trigger("x")
        assert calls == ["x"]

    def test_without_loop_calls_immediately(self):
        calls = []
        Debouncer(0.5, calls.append).trigger("x")
        assert calls == ["x"]

    def test_negative_delay(self):
        with pytest.raises(ValueError):
            Debouncer(-1, print)

    def test_coalesces_bursts(self):
        calls = []

        async def scenario():
            debouncer = Debouncer(0.02, calls.append)
            for size in (1, 2, 3):
                debouncer.trigger(size)
            assert debouncer.pending
            await asyncio.sleep(0.1)
            assert not debouncer.pending

        asyncio.run(scenario())
        assert calls == [3]

    def test_flush_and_cancel(self):
        calls = []

        async def scenario():
            debouncer = Debouncer(10, calls.append)
            debouncer.trigger("flushed")
            debouncer.flush()
            debouncer.trigger("cancelled")
            debouncer.cancel()
            await asyncio.sleep(0)

        asyncio.run(scenario())
        assert calls == ["flushed"]


class TestChartComponent:
    """Tests for ChartComponent"""

    def test_zero_resize_before_load(self, sample_records):
        target = RenderTarget()
        component = ChartComponent(bar_view, target, debounce_s=0)
        component.resize(0, 0)
        assert target.figure is None

        component.set_records(sample_records)
        assert target.figure is None

        component.resize(640, 320)
        shown = target.figure
        assert shown is not None
        assert shown.layout.width == 640

        component.resize(0, 0)
        assert target.figure is shown

    def test_records_change_rerenders(self, sample_records):
        target = RenderTarget()
        component = ChartComponent(bar_view, target, debounce_s=0, viewport=ViewportSize(400, 300))
        component.set_records(sample_records)
        assert target.render_count == 1
        assert list(target.figure.data[0].y) == ["A", "B", "C"]

        component.set_records(sample_records[:1])
        assert target.render_count == 2
        assert list(target.figure.data[0].y) == ["A"]

    def test_same_records_do_not_rerender(self, sample_records):
        target = RenderTarget()
        component = ChartComponent(bar_view, target, debounce_s=0, viewport=ViewportSize(400, 300))
        component.set_records(sample_records)
        component.set_records(sample_records)
        assert target.render_count == 1

    def test_set_view(self, sample_records):
        target = RenderTarget()
        component = ChartComponent(bar_view, target, debounce_s=0, viewport=ViewportSize(400, 300))
        component.set_records(sample_records)
        component.set_view(lambda records: bar_view(records, BarMetric.AVG_POPULARITY))
        assert list(target.figure.data[0].y) == ["B", "C", "A"]

    def test_debounced_resize_renders_last_size(self, sample_records):
        target = RenderTarget()

        async def scenario():
            component = ChartComponent(bar_view, target, debounce_s=0.02)
            component.set_records(sample_records)
            for width in (100, 200, 300):
                component.resize(width, 150)
            assert target.render_count == 0
            await asyncio.sleep(0.1)

        asyncio.run(scenario())
        assert target.render_count == 1
        assert target.figure.layout.width == 300

    def test_async_load(self, tracks_csv):
        target = RenderTarget()
        component = ChartComponent(treemap_view, target, debounce_s=0, viewport=ViewportSize(400, 300))
        assert asyncio.run(component.load(tracks_csv)) == 4
        assert len(component.records.value) == 4
        assert target.figure is not None

    def test_failed_load_renders_empty_chart(self, tmp_path):
        target = RenderTarget()
        component = ChartComponent(bar_view, target, debounce_s=0, viewport=ViewportSize(400, 300))
        assert asyncio.run(component.load(tmp_path / "missing.csv")) == 0
        component.refresh()
        assert component.last_data.is_empty
        assert target.figure.layout.annotations[0].text == "No data"

    def test_close_detaches(self, sample_records):
        target = RenderTarget()

        async def scenario():
            component = ChartComponent(bar_view, target, debounce_s=0.02)
            component.resize(300, 200)
            component.close()
            component.set_records(sample_records)
            component.resize(500, 200)
            await asyncio.sleep(0.1)
            return component

        component = asyncio.run(scenario())
        assert component.closed
        assert component.records.observer_count == 0
        assert component.viewport.observer_count == 0
        assert component.refresh() is None
        assert target.figure is None

    def test_delay_without_loop_resizes_at_once(self, sample_records):
        target = RenderTarget()
        component = ChartComponent(bar_view, target, debounce_s=0.15)
        component.set_records(sample_records)
        component.resize(640, 320)
        assert target.figure.layout.width == 640

    def test_components_do_not_share_state(self, sample_records):
        first = ChartComponent(bar_view, RenderTarget(), debounce_s=0)
        second = ChartComponent(bar_view, RenderTarget(), debounce_s=0)
        first.set_records(sample_records)
        assert second.records.value == ()
