from __future__ import annotations

import logging
import math
from dataclasses import asdict
from typing import Literal, Optional

import numpy as np
import pandas as pd
from fastapi import Depends, FastAPI, Query
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response

from api.schemas import FilterStateModel
from brfss.dashboard import DashboardController, compute_dashboard
from brfss.data import RecordStore, load_record_store
from brfss.filters import FilterState, normalize_filters
from brfss.metrics_debug import compute_debug
from brfss.queries import choropleth_data, grouped_bar_data, histogram_values, radar_data, yearly_averages


app = FastAPI(title="BRFSS Healthy Aging Dashboard API", version="0.1.0")
logger = logging.getLogger(__name__)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:3000", "http://127.0.0.1:3000"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def get_store() -> RecordStore:
    return load_record_store()


def _filters_from_model(model: FilterStateModel, store: RecordStore) -> FilterState:
    state = normalize_filters(model.model_dump())
    if state.question is None:
        # Same default the dashboard applies on startup.
        state = DashboardController(store, state).state
    return state


def _error(name: str, exc: Exception) -> JSONResponse:
    logger.exception("%s failed", name)
    return JSONResponse(status_code=500, content={"error": str(exc), "type": type(exc).__name__})


def _json(data: object) -> JSONResponse:
    """Return JSON with safe encoding for pandas/numpy objects."""

    def _safe_float(value: object) -> float | None:
        try:
            out = float(value)  # type: ignore[arg-type]
        except Exception:
            return None
        if math.isnan(out) or math.isinf(out):
            return None
        return out

    return JSONResponse(
        content=jsonable_encoder(
            data,
            custom_encoder={
                type(pd.NA): lambda _: None,
                np.integer: int,
                float: _safe_float,
                np.floating: _safe_float,
                np.bool_: bool,
                np.ndarray: lambda arr: arr.tolist(),
            },
        )
    )


@app.get("/meta/questions")
def meta_questions(store: RecordStore = Depends(get_store)):
    try:
        return _json({"questions": store.questions()})
    except Exception as exc:
        return _error("meta_questions", exc)


@app.get("/meta/years")
def meta_years(store: RecordStore = Depends(get_store)):
    try:
        return _json({"years": store.years()})
    except Exception as exc:
        return _error("meta_years", exc)


@app.get("/meta/states")
def meta_states(store: RecordStore = Depends(get_store)):
    try:
        names = store.state_names()
        return _json({"states": [{"abbr": abbr, "name": names[abbr]} for abbr in sorted(names)]})
    except Exception as exc:
        return _error("meta_states", exc)


@app.post("/dashboard")
def dashboard(
    filters: FilterStateModel,
    include_charts: bool = Query(default=True),
    store: RecordStore = Depends(get_store),
):
    try:
        f = _filters_from_model(filters, store)
        if not f.question:
            return _json({"filters": asdict(f), "data": None, "charts": {}})
        return _json(compute_dashboard(f, store, include_charts=include_charts))
    except Exception as exc:
        return _error("dashboard", exc)


@app.post("/yearly")
def yearly(filters: FilterStateModel, store: RecordStore = Depends(get_store)):
    try:
        f = _filters_from_model(filters, store)
        return _json(
            yearly_averages(
                store,
                f.question or "",
                selected_state=f.selected_state,
                selected_stratification=f.selected_stratification,
            )
        )
    except Exception as exc:
        return _error("yearly", exc)


@app.post("/radar")
def radar(filters: FilterStateModel, store: RecordStore = Depends(get_store)):
    try:
        f = _filters_from_model(filters, store)
        return _json(radar_data(store, f.question or "", selected_state=f.selected_state, year=f.selected_year))
    except Exception as exc:
        return _error("radar", exc)


@app.post("/histogram")
def histogram(filters: FilterStateModel, store: RecordStore = Depends(get_store)):
    try:
        f = _filters_from_model(filters, store)
        return _json(
            histogram_values(
                store,
                f.question or "",
                selected_state=f.selected_state,
                year=f.selected_year,
                selected_stratification=f.selected_stratification,
            )
        )
    except Exception as exc:
        return _error("histogram", exc)


@app.post("/choropleth")
def choropleth(filters: FilterStateModel, store: RecordStore = Depends(get_store)):
    try:
        f = _filters_from_model(filters, store)
        return _json(
            choropleth_data(
                store,
                f.question or "",
                year=f.selected_year,
                selected_stratification=f.selected_stratification,
            )
        )
    except Exception as exc:
        return _error("choropleth", exc)


@app.post("/grouped-bar")
def grouped_bar(
    filters: FilterStateModel,
    mode: Optional[Literal["sex", "ethnicity"]] = Query(default=None),
    store: RecordStore = Depends(get_store),
):
    try:
        f = _filters_from_model(filters, store)
        return _json(
            grouped_bar_data(
                store,
                f.question or "",
                mode=mode or f.grouped_mode,
                selected_state=f.selected_state,
                year=f.selected_year,
            )
        )
    except Exception as exc:
        return _error("grouped_bar", exc)


@app.post("/debug")
def debug(filters: FilterStateModel, store: RecordStore = Depends(get_store)):
    try:
        return _json(compute_debug(normalize_filters(filters.model_dump()), store))
    except Exception as exc:
        return _error("debug", exc)


@app.post("/export/{view}")
def export_view(view: str, filters: FilterStateModel, store: RecordStore = Depends(get_store)):
    f = _filters_from_model(filters, store)
    q = f.question or ""

    export_df = None
    filename = f"{view}.csv"
    if view == "yearly":
        export_df = pd.DataFrame(
            yearly_averages(store, q, selected_state=f.selected_state, selected_stratification=f.selected_stratification),
            columns=["year", "value"],
        )
    elif view == "radar":
        export_df = pd.DataFrame(
            radar_data(store, q, selected_state=f.selected_state, year=f.selected_year),
            columns=["label", "value"],
        )
    elif view == "histogram":
        export_df = pd.DataFrame(
            {
                "value": histogram_values(
                    store,
                    q,
                    selected_state=f.selected_state,
                    year=f.selected_year,
                    selected_stratification=f.selected_stratification,
                )
            }
        )
    elif view == "choropleth":
        export_df = pd.DataFrame(
            choropleth_data(store, q, year=f.selected_year, selected_stratification=f.selected_stratification),
            columns=["state_abbr", "value"],
        )
    elif view == "grouped-bar":
        grouped = grouped_bar_data(store, q, mode=f.grouped_mode, selected_state=f.selected_state, year=f.selected_year)
        export_df = pd.DataFrame(grouped["values"], columns=["age_group", "category", "value"])
        filename = "grouped_bar.csv"
    else:
        export_df = pd.DataFrame()

    csv_bytes = export_df.to_csv(index=False).encode("utf-8")
    return Response(content=csv_bytes, media_type="text/csv", headers={"Content-Disposition": f"attachment; filename={filename}"})
