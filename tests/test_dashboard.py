from __future__ import annotations

from brfss.dashboard import DashboardController, compute_dashboard, run_queries
from brfss.data import RecordStore
from brfss.filters import FilterState
from brfss.metrics_debug import compute_debug
from tests.conftest import Q1, rec


def test_controller_defaults_to_first_question(store):
    controller = DashboardController(store)
    assert controller.state.question == "Q1"


def test_update_without_question_returns_none():
    controller = DashboardController(RecordStore())
    assert controller.state.question is None
    assert controller.update() is None


def test_update_runs_every_query(store):
    payload = DashboardController(store).update()
    assert set(payload["data"]) == {"yearly", "radar", "histogram", "choropleth", "grouped_bar", "histogram_bins"}
    assert set(payload["charts"]) == {"yearly", "radar", "histogram", "choropleth", "grouped_bar"}
    assert payload["filters"]["question"] == Q1
    assert payload["summary"] == {"year": "–", "stratification": "–", "state": "–"}


def test_click_point_toggles_year_and_reruns(store):
    controller = DashboardController(store)
    payload = controller.click_point(2015)
    assert controller.state.selected_year == 2015
    assert payload["data"]["histogram"] == [10.0, 20.0, 50.0]
    controller.click_point(2015)
    assert controller.state.selected_year is None


def test_click_radar_label_toggles(store):
    controller = DashboardController(store)
    payload = controller.click_radar_label("Male")
    assert payload["data"]["choropleth"] == [{"state_abbr": "TX", "value": 80.0}]
    controller.click_radar_label("Male")
    assert controller.state.selected_stratification is None


def test_click_map_state_selects_then_clears_drilldown():
    store = RecordStore.from_records(
        [rec(year=2015, value=10.0, location_desc="California", stratification2="Female")]
    )
    controller = DashboardController(store)
    controller.click_point(2015)
    controller.click_radar_label("Female")
    controller.click_map_state("CA")
    assert controller.state.selected_state == "CA"
    assert controller.state.selected_state_name == "California"
    assert controller.state.selected_year == 2015

    controller.click_map_state("CA")
    assert controller.state.selected_state is None
    assert controller.state.selected_year is None
    assert controller.state.selected_stratification is None


def test_reset_state_keeps_other_selections(store):
    controller = DashboardController(store, FilterState(question=Q1, selected_year=2015))
    controller.click_map_state("CA", "California")
    controller.reset_state()
    assert controller.state.selected_state is None
    assert controller.state.selected_year == 2015


def test_choropleth_ignores_selected_state(store):
    everywhere = run_queries(store, FilterState(question=Q1))
    scoped = run_queries(store, FilterState(question=Q1, selected_state="CA"))
    assert scoped["choropleth"] == everywhere["choropleth"]
    assert scoped["histogram"] == [10.0, 20.0, 30.0]


def test_grouped_mode_switch(store):
    controller = DashboardController(store)
    payload = controller.set_grouped_mode("ethnicity")
    assert payload["data"]["grouped_bar"]["categories"] == ["Hispanic"]


def test_compute_dashboard_without_charts(store):
    payload = compute_dashboard(FilterState(question="missing"), store, include_charts=False)
    assert payload["charts"] == {}
    assert payload["data"]["grouped_bar"] == {"age_groups": [], "categories": [], "values": []}
    assert payload["data"]["histogram_bins"] == []


def test_compute_debug_counts(store):
    dq = compute_debug(FilterState(), store)
    assert dq["row_counts"]["records"] == 12
    assert dq["row_counts"]["percent_eligible"] == 10
    assert dq["row_counts"]["missing_value"] == 1
    assert dq["questions"] == 2
    assert dq["year_range"] == [2015, 2016]
    assert [row["question"] for row in dq["question_coverage"]] == ["Q1", "Q2"]
