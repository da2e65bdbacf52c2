from __future__ import annotations

import logging
from dataclasses import asdict
from typing import Any, Dict, Optional

from brfss.charts import (
    bin_values,
    choropleth_chart,
    grouped_bar_chart,
    histogram_chart,
    line_chart,
    radar_chart,
    to_vega_spec,
)
from brfss.data import RecordStore
from brfss.filters import FilterState
from brfss.queries import choropleth_data, grouped_bar_data, histogram_values, radar_data, yearly_averages

logger = logging.getLogger(__name__)

GROUPED_DIM_LABELS = {"sex": "Sex", "ethnicity": "Ethnicity"}


def run_queries(store: RecordStore, state: FilterState) -> Dict[str, Any]:
    """Evaluate all five chart queries for the current selection."""
    q = state.question or ""
    return {
        "yearly": yearly_averages(
            store,
            q,
            selected_state=state.selected_state,
            selected_stratification=state.selected_stratification,
        ),
        "radar": radar_data(store, q, selected_state=state.selected_state, year=state.selected_year),
        "histogram": histogram_values(
            store,
            q,
            selected_state=state.selected_state,
            year=state.selected_year,
            selected_stratification=state.selected_stratification,
        ),
        "choropleth": choropleth_data(
            store,
            q,
            year=state.selected_year,
            selected_stratification=state.selected_stratification,
        ),
        "grouped_bar": grouped_bar_data(
            store,
            q,
            mode=state.grouped_mode,
            selected_state=state.selected_state,
            year=state.selected_year,
        ),
    }


def build_charts(results: Dict[str, Any], state: FilterState) -> Dict[str, Any]:
    charts = {
        "yearly": line_chart(results["yearly"], state.selected_year),
        "radar": radar_chart(results["radar"], state.selected_stratification),
        "histogram": histogram_chart(results["histogram"]),
        "choropleth": choropleth_chart(results["choropleth"], state.selected_state),
        "grouped_bar": grouped_bar_chart(results["grouped_bar"], GROUPED_DIM_LABELS[state.grouped_mode]),
    }
    return {name: (to_vega_spec(chart) if chart is not None else None) for name, chart in charts.items()}


def compute_dashboard(state: FilterState, store: RecordStore, *, include_charts: bool = True) -> Dict[str, Any]:
    results = run_queries(store, state)
    return {
        "filters": asdict(state),
        "summary": state.summary(),
        "data": {**results, "histogram_bins": bin_values(results["histogram"])},
        "charts": build_charts(results, state) if include_charts else {},
    }


class DashboardController:
    """Owns the filter state and re-runs every query after each user action."""

    def __init__(self, store: RecordStore, state: Optional[FilterState] = None) -> None:
        self.store = store
        self.state = state if state is not None else FilterState()
        if self.state.question is None:
            questions = store.questions()
            self.state.question = questions[0] if questions else None

    def update(self, *, include_charts: bool = True) -> Optional[Dict[str, Any]]:
        """Full re-render payload, or None before any question is selected."""
        if not self.state.question:
            return None
        logger.debug("Re-running queries for %s", self.state)
        return compute_dashboard(self.state, self.store, include_charts=include_charts)

    def select_question(self, question: str) -> Optional[Dict[str, Any]]:
        self.state.question = question
        return self.update()

    def set_grouped_mode(self, mode: str) -> Optional[Dict[str, Any]]:
        self.state.set_grouped_mode(mode)
        return self.update()

    def click_point(self, year: int) -> Optional[Dict[str, Any]]:
        self.state.toggle_year(year)
        return self.update()

    def click_radar_label(self, label: str) -> Optional[Dict[str, Any]]:
        self.state.toggle_stratification(label)
        return self.update()

    def click_map_state(self, abbr: str, name: Optional[str] = None) -> Optional[Dict[str, Any]]:
        # Deselecting the current state clears the whole drill-down.
        if not self.state.toggle_state(abbr, name or self.store.state_names().get(abbr)):
            self.state.reset_year()
            self.state.reset_stratification()
        return self.update()

    def reset_year(self) -> Optional[Dict[str, Any]]:
        self.state.reset_year()
        return self.update()

    def reset_stratification(self) -> Optional[Dict[str, Any]]:
        self.state.reset_stratification()
        return self.update()

    def reset_state(self) -> Optional[Dict[str, Any]]:
        self.state.reset_state()
        return self.update()
