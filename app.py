# app.py - Streamlit dashboard: six independent charts over the track dataset
import asyncio
import io
from functools import partial

import pandas as pd
import streamlit as st

from config.constants import METRIC_LABELS
from config.logging_config import set_log_level, setup_logging
from config.settings import settings
from core.data_loader import RecordLoader
from core.data_validator import DataValidator
from core.exceptions import DataSourceError, RenderError, handle_exception
from frontend.components.chart_component import ChartComponent
from frontend.components.charts import ChartFactory, RenderTarget
from pipeline.views import VIEW_BUILDERS, BarMetric, ChartKind, bar_view, summaries_frame_rows

setup_logging()
if settings.DEBUG:
    set_log_level("DEBUG")

st.set_page_config(
    layout="wide",
    page_title=f"{settings.APP_NAME} - Track Explorer",
    page_icon="🎧",
)

BAR_METRIC_LABELS = {
    BarMetric.COUNT: "Track count",
    BarMetric.AVG_POPULARITY: "Average popularity",
    BarMetric.AVG_DURATION: "Average duration",
    BarMetric.AVG_FOLLOWERS: "Average followers",
    BarMetric.EXPLICIT_SHARE: "Explicit share",
}


def _source_from_upload(uploaded):
    """Uploaded files are re-wrapped per component so each one reads its own copy."""
    payload = uploaded.getvalue()
    return lambda: io.BytesIO(payload)


def _source_from_path(path):
    return lambda: path


def build_components(make_source):
    """One component per chart; each loads the dataset on its own."""
    components = {}
    for kind, view in VIEW_BUILDERS.items():
        # Reruns have no running loop, so resizes apply at once; the configured
        # delay only kicks in when a loop drives the component.
        component = ChartComponent(view, RenderTarget(), debounce_s=settings.resize_debounce_s)
        asyncio.run(component.load(make_source()))
        component.resize(settings.DEFAULT_CHART_WIDTH, settings.DEFAULT_CHART_HEIGHT)
        components[kind] = component
    return components


@st.cache_data(show_spinner=False)
def validation_summary(payload: bytes):
    frame = RecordLoader().read_frame(io.BytesIO(payload))
    return DataValidator().validate(frame).model_dump()


def close_components():
    for component in st.session_state.get("components", {}).values():
        component.close()
    st.session_state.components = {}


def main():
    st.title(f"🎧 {settings.APP_NAME}")
    st.caption(f"v{settings.APP_VERSION} · {settings.ENVIRONMENT}")

    if "components" not in st.session_state:
        st.session_state.components = {}
    if "source_id" not in st.session_state:
        st.session_state.source_id = None

    with st.sidebar:
        st.header("Dataset")
        uploaded = st.file_uploader("Upload a tracks CSV", type=["csv", "tsv", "txt"])
        st.caption(f"Default: `{settings.dataset_path}`")
        metric = st.selectbox(
            "Bar chart metric",
            options=list(BarMetric),
            format_func=lambda m: BAR_METRIC_LABELS[m],
        )
        width = st.slider("Chart width", 0, 1600, settings.DEFAULT_CHART_WIDTH, step=40)
        height = st.slider("Chart height", 0, 1000, settings.DEFAULT_CHART_HEIGHT, step=20)

    source_id = (uploaded.name, uploaded.size) if uploaded is not None else str(settings.dataset_path)
    if st.session_state.source_id != source_id:
        close_components()
        make_source = _source_from_upload(uploaded) if uploaded is not None else _source_from_path(settings.dataset_path)
        with st.spinner("Loading dataset..."):
            st.session_state.components = build_components(make_source)
        st.session_state.source_id = source_id

    components = st.session_state.components

    # Data quality
    if uploaded is not None:
        try:
            report = validation_summary(uploaded.getvalue())
        except DataSourceError as e:
            st.error(handle_exception(e, "validation"))
        else:
            with st.expander("Data quality", expanded=not report["is_valid"]):
                cols = st.columns(4)
                cols[0].metric("Rows", report["info"].get("n_rows", 0))
                cols[1].metric("Columns", report["info"].get("n_columns", 0))
                cols[2].metric("Genres", report["info"].get("n_genres", 0))
                cols[3].metric("Warnings", len(report["warnings"]))
                for message in report["errors"]:
                    st.error(message)
                for message in report["warnings"]:
                    st.warning(message)

    tabs = st.tabs([ChartFactory.TITLES[kind] for kind in components])
    for tab, (kind, component) in zip(tabs, components.items()):
        with tab:
            try:
                if kind is ChartKind.BAR:
                    component.set_view(partial(bar_view, metric=metric))
                component.resize(width, height)
                component.flush()
            except RenderError as e:
                st.error(handle_exception(e, kind.value))
                continue

            fig = component.target.figure
            if fig is None or component.viewport.value.is_zero:
                st.info("Chart hidden: width or height is 0.")
                continue
            st.plotly_chart(fig, use_container_width=False)

            data = component.last_data
            if data is not None and not data.is_empty:
                with st.expander(f"Data ({data.n_records} records)"):
                    frame = pd.DataFrame(summaries_frame_rows(data))
                    st.dataframe(frame.rename(columns=METRIC_LABELS), use_container_width=True)


if __name__ == "__main__":
    main()
