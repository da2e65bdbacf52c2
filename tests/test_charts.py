from __future__ import annotations

import pytest

from brfss.charts import (
    bin_values,
    choropleth_chart,
    grouped_bar_chart,
    histogram_chart,
    line_chart,
    radar_chart,
    to_vega_spec,
    zero_fill_grouped,
)
from brfss.geo import FIPS_TO_ABBR, abbr_for_fips, with_fips


def test_bin_values_uses_ten_equal_width_bins():
    bins = bin_values([0.0, 1.0, 2.5, 9.9, 10.0])
    assert len(bins) == 10
    assert bins[0]["x0"] == 0.0
    assert bins[-1]["x1"] == 10.0
    assert all(b["x1"] - b["x0"] == pytest.approx(1.0) for b in bins)
    # max value lands in the last, right-closed bin
    assert bins[-1]["count"] == 2
    assert sum(b["count"] for b in bins) == 5


def test_bin_values_edge_cases():
    assert bin_values([]) == []
    assert bin_values([4.0, 4.0]) == [{"x0": 4.0, "x1": 4.0, "count": 2}]


def test_empty_inputs_produce_no_chart():
    assert line_chart([]) is None
    assert radar_chart([]) is None
    assert histogram_chart([]) is None
    assert choropleth_chart([]) is None
    assert grouped_bar_chart({"age_groups": [], "categories": [], "values": []}) is None


def test_chart_specs_are_vega_lite_dicts():
    yearly = [{"year": 2015, "value": 15.0}, {"year": 2016, "value": 30.0}]
    spec = to_vega_spec(line_chart(yearly, selected_year=2016))
    assert spec["$schema"].startswith("https://vega.github.io/schema/vega-lite/")
    assert "layer" in spec

    radar = to_vega_spec(radar_chart([{"label": "Female", "value": 35.0}], "Female"))
    assert radar["mark"]["type"] == "arc"

    hist = to_vega_spec(histogram_chart([1.0, 2.0, 3.0]))
    assert hist["mark"]["type"] == "bar"

    geo = to_vega_spec(choropleth_chart([{"state_abbr": "CA", "value": 50.0}], selected_state="CA"))
    assert [layer["projection"]["type"] for layer in geo["layer"]] == ["albersUsa", "albersUsa"]


def test_zero_fill_grouped_fills_missing_pairs_for_rendering():
    grouped = {
        "age_groups": ["50-64 years", "65 years or older"],
        "categories": ["Female", "Male"],
        "values": [{"age_group": "50-64 years", "category": "Female", "value": 3.0}],
    }
    df = zero_fill_grouped(grouped)
    assert len(df) == 4
    assert df["value"].tolist() == [3.0, 0.0, 0.0, 0.0]
    assert grouped_bar_chart(grouped, "Sex") is not None


def test_fips_lookup():
    assert len(FIPS_TO_ABBR) == 51
    assert abbr_for_fips(6) == "CA"
    assert abbr_for_fips("06") == "CA"
    assert abbr_for_fips("11") == "DC"
    assert abbr_for_fips("72") is None
    assert abbr_for_fips(None) is None
    assert abbr_for_fips("x") is None


def test_with_fips_drops_rows_without_geometry():
    rows = [{"state_abbr": "CA", "value": 1.0}, {"state_abbr": "GU", "value": 2.0}]
    assert with_fips(rows) == [{"state_abbr": "CA", "value": 1.0, "id": 6}]
