from __future__ import annotations

from dataclasses import asdict
from typing import Any, Dict

import pandas as pd

from brfss.data import RecordStore
from brfss.filters import FilterState
from brfss.queries import percent_eligible


def compute_debug(state: FilterState, store: RecordStore) -> Dict[str, Any]:
    df: pd.DataFrame = store.df
    eligible = percent_eligible(df) if not df.empty else pd.Series(dtype=bool)
    payload = {
        "filters": asdict(state),
        "row_counts": {
            "records": int(len(df)),
            "percent_eligible": int(eligible.sum()),
            "missing_value": int(df["value"].isna().sum()),
            "non_numeric_value": int(store.invalid_value_rows),
            "missing_year": int(df["year"].isna().sum()),
        },
        "questions": len(store.questions()),
        "year_range": [],
        "units": [],
        "question_coverage": [],
    }
    years = store.years()
    if years:
        payload["year_range"] = [years[0], years[-1]]

    if not df.empty:
        units = df["value_unit"].fillna("<missing>").value_counts().reset_index()
        units.columns = ["value_unit", "count"]
        payload["units"] = units.to_dict(orient="records")

        cov = (
            df.assign(eligible=eligible)
            .groupby("question")
            .agg(records=("eligible", "size"), eligible=("eligible", "sum"), states=("location_abbr", "nunique"))
            .reset_index()
            .sort_values("question")
        )
        payload["question_coverage"] = cov.to_dict(orient="records")
    return payload
