from __future__ import annotations

from typing import Any, Dict, List, Optional

import altair as alt
import numpy as np
import pandas as pd

from brfss.geo import with_fips

alt.data_transformers.disable_max_rows()

HISTOGRAM_BINS = 10
NEUTRAL_FILL = "#eee"
US_STATES_TOPOJSON = "https://cdn.jsdelivr.net/npm/vega-datasets@v1.29.0/data/us-10m.json"


def to_vega_spec(chart: alt.TopLevelMixin) -> Dict[str, Any]:
    """Convert an Altair chart into a Vega-Lite spec dict (JSON-serializable)."""
    return chart.to_dict()


def bin_values(values: List[float], bins: int = HISTOGRAM_BINS) -> List[Dict[str, Any]]:
    """Equal-width bins spanning the observed min/max; the last bin is right-closed."""
    if not values:
        return []
    arr = np.asarray(values, dtype=float)
    lo, hi = float(arr.min()), float(arr.max())
    if lo == hi:
        return [{"x0": lo, "x1": hi, "count": int(arr.size)}]
    counts, edges = np.histogram(arr, bins=bins, range=(lo, hi))
    return [
        {"x0": float(edges[i]), "x1": float(edges[i + 1]), "count": int(counts[i])}
        for i in range(len(counts))
    ]


def line_chart(yearly: List[Dict[str, Any]], selected_year: Optional[int] = None) -> Optional[alt.LayerChart]:
    if not yearly:
        return None
    df = pd.DataFrame(yearly)
    df["selected"] = df["year"] == selected_year
    base = alt.Chart(df).encode(
        x=alt.X("year:O", title="Year"),
        y=alt.Y("value:Q", title="Average Percentage"),
    )
    line = base.mark_line()
    points = base.mark_point(filled=True, size=80).encode(
        color=alt.condition(alt.datum.selected, alt.value("orange"), alt.value("steelblue")),
        tooltip=["year", alt.Tooltip("value:Q", format=".1f")],
    )
    return (line + points).properties(height=260)


def radar_chart(radar: List[Dict[str, Any]], selected_label: Optional[str] = None) -> Optional[alt.Chart]:
    """Radial chart: one equal-angle wedge per demographic label, radius by value."""
    if not radar:
        return None
    df = pd.DataFrame(radar)
    df["slice"] = 1
    df["selected"] = df["label"] == selected_label
    return (
        alt.Chart(df)
        .mark_arc(innerRadius=10, stroke="#fff")
        .encode(
            theta=alt.Theta("slice:Q", stack=True),
            radius=alt.Radius("value:Q", scale=alt.Scale(type="sqrt", zero=True, rangeMin=20)),
            color=alt.Color("label:N", legend=alt.Legend(title=None)),
            opacity=alt.condition(alt.datum.selected, alt.value(1), alt.value(0.6)),
            tooltip=["label", alt.Tooltip("value:Q", format=".1f")],
        )
        .properties(height=300)
    )


def histogram_chart(values: List[float], bins: int = HISTOGRAM_BINS) -> Optional[alt.Chart]:
    binned = bin_values(values, bins=bins)
    if not binned:
        return None
    return (
        alt.Chart(pd.DataFrame(binned))
        .mark_bar(color="steelblue")
        .encode(
            x=alt.X("x0:Q", title="Percentage"),
            x2="x1:Q",
            y=alt.Y("count:Q", title="Number of Surveys"),
            tooltip=[
                alt.Tooltip("x0:Q", format=".1f", title="From"),
                alt.Tooltip("x1:Q", format=".1f", title="To"),
                "count",
            ],
        )
        .properties(height=260)
    )


def choropleth_chart(
    state_rows: List[Dict[str, Any]],
    selected_state: Optional[str] = None,
    topojson_url: str = US_STATES_TOPOJSON,
) -> Optional[alt.LayerChart]:
    """State map colored by mean value; states without data keep the neutral fill."""
    rows = with_fips(state_rows)
    if not rows:
        return None
    states = alt.topo_feature(topojson_url, "states")
    background = alt.Chart(states).mark_geoshape(fill=NEUTRAL_FILL, stroke="#fff", strokeWidth=0.8).project("albersUsa")
    colored = (
        alt.Chart(states)
        .mark_geoshape(stroke="#fff")
        .transform_lookup(lookup="id", from_=alt.LookupData(pd.DataFrame(rows), "id", ["state_abbr", "value"]))
        .transform_filter("isValid(datum.value)")
        .encode(
            color=alt.Color("value:Q", scale=alt.Scale(scheme="blues"), title="%"),
            strokeWidth=alt.condition(alt.datum.state_abbr == (selected_state or ""), alt.value(2.5), alt.value(0.8)),
            tooltip=["state_abbr:N", alt.Tooltip("value:Q", format=".1f")],
        )
        .project("albersUsa")
    )
    return (background + colored).properties(height=360)


def zero_fill_grouped(grouped: Dict[str, List[Any]]) -> pd.DataFrame:
    observed = {(v["age_group"], v["category"]): v["value"] for v in grouped.get("values", [])}
    return pd.DataFrame(
        [
            {"age_group": age, "category": cat, "value": observed.get((age, cat), 0.0)}
            for age in grouped.get("age_groups", [])
            for cat in grouped.get("categories", [])
        ],
        columns=["age_group", "category", "value"],
    )


def grouped_bar_chart(grouped: Dict[str, List[Any]], dim_label: str = "Sex") -> Optional[alt.Chart]:
    df = zero_fill_grouped(grouped)
    if df.empty:
        return None
    return (
        alt.Chart(df)
        .mark_bar()
        .encode(
            x=alt.X("age_group:N", title="Age Group"),
            xOffset="category:N",
            y=alt.Y("value:Q", title="Average Percentage"),
            color=alt.Color("category:N", title=dim_label),
            tooltip=["age_group", "category", alt.Tooltip("value:Q", format=".1f")],
        )
        .properties(height=300)
    )
