from __future__ import annotations

import pytest

from brfss.filters import FilterState, normalize_filters


def test_defaults():
    state = FilterState()
    assert state.question is None
    assert state.selected_year is None
    assert state.selected_stratification is None
    assert state.selected_state is None
    assert state.grouped_mode == "sex"


def test_toggle_year_sets_then_clears():
    state = FilterState()
    state.toggle_year(2015)
    assert state.selected_year == 2015
    state.toggle_year(2016)
    assert state.selected_year == 2016
    state.toggle_year(2016)
    assert state.selected_year is None


def test_toggle_stratification_is_a_toggle_not_a_set():
    state = FilterState()
    state.toggle_stratification("Female")
    state.toggle_stratification("Female")
    assert state.selected_stratification is None


def test_toggle_state_tracks_name_and_reports_deselect():
    state = FilterState()
    assert state.toggle_state("CA", "California") is True
    assert state.selected_state_name == "California"
    assert state.toggle_state("CA", "California") is False
    assert state.selected_state is None
    assert state.selected_state_name is None


def test_resets():
    state = FilterState(selected_year=2015, selected_stratification="Male", selected_state="TX", selected_state_name="Texas")
    state.reset_year()
    state.reset_stratification()
    state.reset_state()
    assert (state.selected_year, state.selected_stratification, state.selected_state, state.selected_state_name) == (
        None,
        None,
        None,
        None,
    )


def test_set_grouped_mode_rejects_unknown():
    state = FilterState()
    state.set_grouped_mode("ethnicity")
    assert state.grouped_mode == "ethnicity"
    with pytest.raises(ValueError):
        state.set_grouped_mode("income")


def test_summary_prefers_state_name():
    assert FilterState().summary() == {"year": "–", "stratification": "–", "state": "–"}
    state = FilterState(selected_year=2016, selected_state="CA")
    assert state.summary()["state"] == "CA"
    state.selected_state_name = "California"
    assert state.summary() == {"year": "2016", "stratification": "–", "state": "California"}


def test_normalize_filters_coerces_and_falls_back():
    state = normalize_filters(
        {
            "question": "  Q1 ",
            "selected_year": "2015",
            "selected_stratification": "",
            "selected_state": "ca",
            "selected_state_name": "California",
            "grouped_mode": "bogus",
        }
    )
    assert state.question == "Q1"
    assert state.selected_year == 2015
    assert state.selected_stratification is None
    assert state.selected_state == "CA"
    assert state.selected_state_name == "California"
    assert state.grouped_mode == "sex"


def test_normalize_filters_drops_bad_year_and_orphan_name():
    state = normalize_filters({"selected_year": "twenty", "selected_state_name": "Nowhere"})
    assert state.selected_year is None
    assert state.selected_state_name is None
