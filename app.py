import altair as alt
import pandas as pd
import streamlit as st
from contextlib import contextmanager
from typing import Optional

from brfss import charts
from brfss.dashboard import GROUPED_DIM_LABELS, DashboardController
from brfss.data import DATA_DIR, FILE_GLOB, load_record_store
from brfss.filters import FilterState
from brfss.metrics_debug import compute_debug

alt.data_transformers.disable_max_rows()

ABOUT_TEXT = (
    "This dashboard explores CDC Behavioral Risk Factor Surveillance System (BRFSS) indicators "
    "related to Alzheimer's Disease and Healthy Aging. Select a question to compare trends over time "
    "and differences across demographics. Click a year, a demographic, or a state to filter all views."
)


# ---------- UI / layout helpers ----------
def inject_base_styles():
    if st.session_state.get("_base_css_injected"):
        return
    st.markdown(
        """
        <style>
        .card {border: 1px solid #e5e7eb;border-radius: 12px;padding: 16px;background: #ffffff;
               box-shadow: 0 1px 2px rgba(0,0,0,0.04); margin-bottom: 12px;}
        .card-title {font-weight: 600;font-size: 1.0rem;color: #111827;margin-bottom: 8px;}
        .chip-row {display: flex;flex-wrap: wrap;gap: 6px;margin-top: 6px;}
        .chip {background: #f3f4f6;border: 1px solid #e5e7eb;border-radius: 14px;padding: 4px 10px;font-size: 0.85rem;color: #374151;}
        </style>
        """,
        unsafe_allow_html=True,
    )
    st.session_state["_base_css_injected"] = True


@contextmanager
def card(title: str):
    container = st.container()
    container.markdown(f"<div class='card'><div class='card-title'>{title}</div>", unsafe_allow_html=True)
    body = container.container()
    with body:
        yield body
    container.markdown("</div>", unsafe_allow_html=True)


def format_filter_summary(state: FilterState) -> str:
    s = state.summary()
    chips = [f"Year: {s['year']}", f"Demographic: {s['stratification']}", f"State: {s['state']}"]
    return "<div class='chip-row'>" + "".join(f"<span class='chip'>{c}</span>" for c in chips) + "</div>"


def show_chart(chart: Optional[alt.TopLevelMixin], empty_message: str):
    if chart is None:
        st.info(empty_message)
    else:
        st.altair_chart(chart, use_container_width=True)


def action(fn, *args):
    fn(*args)
    st.rerun()


st.set_page_config(page_title="Healthy Aging Dashboard", layout="wide")
inject_base_styles()
st.title("Alzheimer's Disease & Healthy Aging")
st.caption(ABOUT_TEXT)

store = load_record_store()
if store.empty:
    st.error(f"No data found. Place {FILE_GLOB} files in {DATA_DIR}.")
    st.stop()

if "filters" not in st.session_state:
    st.session_state["filters"] = FilterState()
controller = DashboardController(store, st.session_state["filters"])
state = controller.state
st.metric("Survey records", f"{len(store):,}")

# ----- Sidebar: question + active filters -----
with st.sidebar:
    questions = store.questions()
    if not questions:
        st.error("No survey questions found in the loaded files.")
        st.stop()
    question = st.selectbox("Question", questions, index=questions.index(state.question))
    if question != state.question:
        action(controller.select_question, question)

    modes = list(GROUPED_DIM_LABELS)
    mode = st.radio("Group bars by", modes, index=modes.index(state.grouped_mode), format_func=GROUPED_DIM_LABELS.get)
    if mode != state.grouped_mode:
        action(controller.set_grouped_mode, mode)

    st.markdown("---")
    st.markdown("### Active filters")
    st.markdown(format_filter_summary(state), unsafe_allow_html=True)
    summary = state.summary()
    if st.button(f"Year: {summary['year']}", disabled=state.selected_year is None):
        action(controller.reset_year)
    if st.button(f"Demographic: {summary['stratification']}", disabled=state.selected_stratification is None):
        action(controller.reset_stratification)
    if st.button(f"State: {summary['state']}", disabled=state.selected_state is None):
        action(controller.reset_state)

payload = controller.update(include_charts=False)
data = payload["data"]

left, right = st.columns(2)
with left:
    with card("Trend over time"):
        show_chart(charts.line_chart(data["yearly"], state.selected_year), "No yearly data for this selection.")
        years = [row["year"] for row in data["yearly"]]
        if years:
            picked = st.select_slider("Year", options=years, value=state.selected_year if state.selected_year in years else years[-1], key="year_pick")
            if st.button("Toggle year filter"):
                action(controller.click_point, picked)
with right:
    with card("Demographic breakdown"):
        show_chart(charts.radar_chart(data["radar"], state.selected_stratification), "No demographic data.")
        labels = [row["label"] for row in data["radar"]]
        if labels:
            cols = st.columns(min(4, len(labels)))
            for i, label in enumerate(labels):
                if cols[i % len(cols)].button(label, key=f"strat_{label}", type="primary" if label == state.selected_stratification else "secondary"):
                    action(controller.click_radar_label, label)

left, right = st.columns(2)
with left:
    with card("Value distribution"):
        show_chart(charts.histogram_chart(data["histogram"]), "No values to bin.")
with right:
    with card("Adults 65+ by state"):
        show_chart(charts.choropleth_chart(data["choropleth"], state.selected_state), "No state-level data.")
        state_names = store.state_names()
        options = [r["state_abbr"] for r in data["choropleth"]]
        if options:
            picked_state = st.selectbox("State", options, format_func=lambda a: state_names.get(a, a), key="state_pick")
            if st.button("Toggle state filter"):
                action(controller.click_map_state, picked_state)

with card(f"Age group by {GROUPED_DIM_LABELS[state.grouped_mode].lower()}"):
    show_chart(
        charts.grouped_bar_chart(data["grouped_bar"], GROUPED_DIM_LABELS[state.grouped_mode]),
        "No age-group data for this selection.",
    )

with st.expander("Data quality", expanded=False):
    dq = compute_debug(state, store)
    st.write(dq["row_counts"])
    if dq["question_coverage"]:
        st.dataframe(pd.DataFrame(dq["question_coverage"]), hide_index=True)
