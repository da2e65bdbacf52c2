from __future__ import annotations

import logging
import os
import re
from dataclasses import asdict, dataclass, fields
from functools import lru_cache
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple

import pandas as pd

logger = logging.getLogger(__name__)

DATA_DIR = Path(os.environ.get("BRFSS_DATA_DIR", str(Path(__file__).resolve().parents[1] / "data")))
FILE_GLOB = "health_part*.csv"

COLUMNS = {
    "Question": "question",
    "YearStart": "year",
    "Data_Value": "value",
    "Data_Value_Unit": "value_unit",
    "Data_Value_Type": "value_type",
    "LocationAbbr": "location_abbr",
    "LocationDesc": "location_desc",
    "StratificationCategory1": "stratification_category1",
    "Stratification1": "stratification1",
    "StratificationCategory2": "stratification_category2",
    "Stratification2": "stratification2",
}


@dataclass(frozen=True)
class Record:
    question: str
    year: Optional[int] = None
    value: Optional[float] = None
    value_unit: Optional[str] = None
    value_type: Optional[str] = None
    location_abbr: Optional[str] = None
    location_desc: Optional[str] = None
    stratification_category1: Optional[str] = None
    stratification1: Optional[str] = None
    stratification_category2: Optional[str] = None
    stratification2: Optional[str] = None


RECORD_FIELDS = [f.name for f in fields(Record)]
STRING_FIELDS = [c for c in RECORD_FIELDS if c not in ("year", "value")]


def get_source_files(data_dir: Optional[Path] = None) -> List[Path]:
    data_dir = Path(data_dir) if data_dir is not None else DATA_DIR
    return sorted(data_dir.glob(FILE_GLOB), key=lambda p: (parse_part_number(p.name) or 0, p.name))


def file_signature(files: List[Path]) -> Tuple[Tuple[str, float], ...]:
    return tuple((f.name, f.stat().st_mtime) for f in files)


def parse_part_number(filename: str) -> Optional[int]:
    """Parse the partition index from a name like ``health_part12.csv``."""
    match = re.search(r"part(\d+)", filename)
    if not match:
        return None
    return int(match.group(1))


def coerce_str_safe(df: pd.DataFrame, cols: Iterable[str]) -> pd.DataFrame:
    for col in cols:
        if col in df.columns:
            series = df[col].astype("string").str.strip()
            series = series.replace({"nan": pd.NA, "None": pd.NA, "": pd.NA})
            df[col] = series
    return df


def _numeric(series: pd.Series) -> pd.Series:
    return pd.to_numeric(series.astype("string").str.strip().fillna("").astype(str), errors="coerce").astype("float64")


def coerce_year(series: pd.Series) -> pd.Series:
    years = _numeric(series)
    # Fractional years are malformed rather than truncated.
    years = years.where(years == years.round())
    return years.astype("Int64")


class RecordStore:
    """Normalized flat survey dataset; one row per observation.

    Holds no query logic. ``year`` is a nullable integer column and ``value`` a
    float column where NaN marks a missing or non-numeric measurement.
    """

    def __init__(self, df: Optional[pd.DataFrame] = None) -> None:
        raw = pd.DataFrame(columns=RECORD_FIELDS) if df is None else df.rename(columns=COLUMNS).copy()
        for col in RECORD_FIELDS:
            if col not in raw.columns:
                raw[col] = pd.NA
        raw = raw[RECORD_FIELDS].reset_index(drop=True)
        raw = coerce_str_safe(raw, STRING_FIELDS)

        raw_value = raw["value"].astype("string").str.strip().replace({"nan": pd.NA, "": pd.NA})
        value = _numeric(raw["value"])
        self.invalid_value_rows = int((raw_value.notna() & value.isna()).sum())

        raw["year"] = coerce_year(raw["year"])
        raw["value"] = value
        self.df: pd.DataFrame = raw

    @classmethod
    def from_records(cls, records: Iterable[Record]) -> "RecordStore":
        return cls(pd.DataFrame([asdict(r) for r in records], columns=RECORD_FIELDS))

    def __len__(self) -> int:
        return len(self.df)

    @property
    def empty(self) -> bool:
        return self.df.empty

    def questions(self) -> List[str]:
        return sorted(self.df["question"].dropna().astype(str).unique().tolist())

    def years(self) -> List[int]:
        return sorted(int(y) for y in self.df["year"].dropna().unique())

    def state_names(self) -> Dict[str, str]:
        states = self.df.dropna(subset=["location_abbr", "location_desc"])
        states = states[states["location_abbr"].str.len() == 2]
        pairs = states.drop_duplicates(subset=["location_abbr"])[["location_abbr", "location_desc"]]
        return {str(a): str(d) for a, d in pairs.itertuples(index=False)}


def read_partition(path: Path) -> pd.DataFrame:
    df = pd.read_csv(path, dtype=str)
    return df[[c for c in COLUMNS if c in df.columns]]


@lru_cache(maxsize=4)
def _load_store_cached(data_dir: str, files_sig: Tuple[Tuple[str, float], ...]) -> RecordStore:
    frames = [read_partition(Path(data_dir) / name) for name, _ in files_sig]
    store = RecordStore(pd.concat(frames, ignore_index=True)) if frames else RecordStore()
    logger.info("Loaded %d records from %d files in %s", len(store), len(frames), data_dir)
    if store.invalid_value_rows:
        logger.info("%d records have a non-numeric value and are excluded from aggregates", store.invalid_value_rows)
    return store


def load_record_store(data_dir: Optional[Path] = None) -> RecordStore:
    data_dir = Path(data_dir) if data_dir is not None else DATA_DIR
    files = get_source_files(data_dir)
    if not files:
        logger.warning("No %s files found in %s", FILE_GLOB, data_dir)
        return RecordStore()
    return _load_store_cached(str(data_dir), file_signature(files))
