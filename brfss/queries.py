"""Chart queries over the record store.

Every query is a pure function of a ``RecordStore`` and explicit filter
arguments. None of them mutates its inputs, and each returns a well-formed
empty result (``[]`` or ``EMPTY_GROUPED``) when nothing matches.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import pandas as pd

from brfss.data import RecordStore

OVERALL = "Overall"
PERCENT_UNITS = ("Percent", "%")
PERCENT_TYPE_MARKER = "Percent"
AGE_65_PLUS = "65 years or older"
AGE_GROUP_CATEGORY = "Age Group"
SEX_CATEGORY = "Sex"
# Case-sensitive substring rule: "Race/Ethnicity" and similar category names.
ETHNICITY_MARKERS = ("Race", "Ethnic")

EMPTY_GROUPED: Dict[str, List[Any]] = {"age_groups": [], "categories": [], "values": []}


def _eq(series: pd.Series, value: object) -> pd.Series:
    return (series == value).fillna(False).astype(bool)


def _contains_any(series: pd.Series, needles) -> pd.Series:
    mask = pd.Series(False, index=series.index)
    for needle in needles:
        mask |= series.str.contains(needle, regex=False, na=False).astype(bool)
    return mask


def percent_eligible(df: pd.DataFrame) -> pd.Series:
    """Boolean mask of rows holding a usable percentage observation."""
    unit_ok = df["value_unit"].isin(PERCENT_UNITS).fillna(False).astype(bool)
    type_ok = _contains_any(df["value_type"], [PERCENT_TYPE_MARKER])
    return df["value"].notna() & (unit_ok | type_ok)


def base_filter(store: RecordStore, question: str, selected_state: Optional[str] = None) -> pd.DataFrame:
    df = store.df
    mask = _eq(df["question"], question) & percent_eligible(df)
    if selected_state:
        mask &= _eq(df["location_abbr"], selected_state)
    return df[mask]


def _filter_year(df: pd.DataFrame, year: Optional[int]) -> pd.DataFrame:
    if year is None:
        return df
    return df[_eq(df["year"], int(year))]


def _filter_stratification(df: pd.DataFrame, selected_stratification: Optional[str]) -> pd.DataFrame:
    if not selected_stratification:
        return df
    return df[_eq(df["stratification2"], selected_stratification)]


def _mean_by(df: pd.DataFrame, keys: List[str]) -> pd.DataFrame:
    return df.groupby(keys, sort=True, dropna=True)["value"].mean().reset_index()


def yearly_averages(
    store: RecordStore,
    question: str,
    selected_state: Optional[str] = None,
    selected_stratification: Optional[str] = None,
) -> List[Dict[str, Any]]:
    """Mean value per year over unstratified rows, ascending by year."""
    df = base_filter(store, question, selected_state)
    df = df[df["stratification1"].isna() | _eq(df["stratification1"], OVERALL)]
    df = _filter_stratification(df, selected_stratification)
    df = df.dropna(subset=["year"])
    if df.empty:
        return []
    grouped = _mean_by(df, ["year"])
    return sorted(
        ({"year": int(r.year), "value": float(r.value)} for r in grouped.itertuples(index=False)),
        key=lambda d: d["year"],
    )


def radar_data(
    store: RecordStore,
    question: str,
    selected_state: Optional[str] = None,
    year: Optional[int] = None,
) -> List[Dict[str, Any]]:
    df = base_filter(store, question, selected_state)
    df = df[df["stratification2"].notna()]
    df = _filter_year(df, year)
    if df.empty:
        return []
    grouped = _mean_by(df, ["stratification2"])
    return sorted(
        ({"label": str(r.stratification2), "value": float(r.value)} for r in grouped.itertuples(index=False)),
        key=lambda d: d["label"],
    )


def histogram_values(
    store: RecordStore,
    question: str,
    selected_state: Optional[str] = None,
    year: Optional[int] = None,
    selected_stratification: Optional[str] = None,
) -> List[float]:
    """Unaggregated values of the matching overall rows, in source order."""
    df = base_filter(store, question, selected_state)
    df = df[_eq(df["stratification1"], OVERALL)]
    df = _filter_year(df, year)
    df = _filter_stratification(df, selected_stratification)
    return [float(v) for v in df["value"].tolist()]


def choropleth_data(
    store: RecordStore,
    question: str,
    year: Optional[int] = None,
    selected_stratification: Optional[str] = None,
) -> List[Dict[str, Any]]:
    """Mean value per state for the 65+ age group.

    Takes no state argument: the map always covers every state. Only
    two-letter location codes qualify, which drops national and regional
    aggregates.
    """
    df = store.df
    mask = (
        _eq(df["question"], question)
        & df["value"].notna()
        & df["value_unit"].isin(PERCENT_UNITS).fillna(False).astype(bool)
        & _eq(df["stratification1"], AGE_65_PLUS)
        & _eq(df["location_abbr"].str.len(), 2)
    )
    df = df[mask]
    df = _filter_year(df, year)
    df = _filter_stratification(df, selected_stratification)
    if df.empty:
        return []
    grouped = _mean_by(df, ["location_abbr"])
    return [{"state_abbr": str(r.location_abbr), "value": float(r.value)} for r in grouped.itertuples(index=False)]


def _demographic_mask(df: pd.DataFrame, mode: str) -> pd.Series:
    if mode == "sex":
        return _eq(df["stratification_category2"], SEX_CATEGORY)
    return _contains_any(df["stratification_category2"], ETHNICITY_MARKERS)


def grouped_bar_data(
    store: RecordStore,
    question: str,
    mode: str = "sex",
    selected_state: Optional[str] = None,
    year: Optional[int] = None,
) -> Dict[str, List[Any]]:
    """Mean value per (age group, demographic category) pair.

    ``values`` only holds observed pairs; zero-filling missing pairs is left
    to the chart.
    """
    if mode not in ("sex", "ethnicity"):
        raise ValueError(f"mode must be 'sex' or 'ethnicity', got {mode!r}")

    df = base_filter(store, question, selected_state)
    df = _filter_year(df, year)
    df = df[
        _eq(df["stratification_category1"], AGE_GROUP_CATEGORY)
        & df["stratification1"].notna()
        & ~_eq(df["stratification1"], OVERALL)
    ]
    df = df[_demographic_mask(df, mode) & df["stratification2"].notna()]
    if df.empty:
        return {key: [] for key in EMPTY_GROUPED}

    grouped = _mean_by(df, ["stratification1", "stratification2"])
    values = sorted(
        (
            {"age_group": str(r.stratification1), "category": str(r.stratification2), "value": float(r.value)}
            for r in grouped.itertuples(index=False)
        ),
        key=lambda d: (d["age_group"], d["category"]),
    )
    return {
        "age_groups": sorted({v["age_group"] for v in values}),
        "categories": sorted({v["category"] for v in values}),
        "values": values,
    }
