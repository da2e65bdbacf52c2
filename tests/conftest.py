from __future__ import annotations

import pytest

from brfss.data import Record, RecordStore

Q1 = "Q1"


def rec(**kwargs) -> Record:
    base = {"question": Q1, "value_unit": "Percent", "location_abbr": "CA", "stratification1": "Overall"}
    base.update(kwargs)
    return Record(**base)


@pytest.fixture
def store() -> RecordStore:
    """A small mixed dataset covering every chart query."""
    return RecordStore.from_records(
        [
            # Overall rows, two states, two years
            rec(year=2015, value=10.0, stratification_category2="Sex", stratification2="Female"),
            rec(year=2015, value=20.0, stratification_category2="Sex", stratification2="Male"),
            rec(year=2016, value=30.0, stratification_category2="Sex", stratification2="Female"),
            rec(year=2015, value=50.0, location_abbr="TX", stratification_category2="Sex", stratification2="Male"),
            # Age-group rows
            rec(year=2015, value=40.0, stratification_category1="Age Group", stratification1="65 years or older",
                stratification_category2="Sex", stratification2="Female"),
            rec(year=2015, value=60.0, stratification_category1="Age Group", stratification1="65 years or older",
                stratification_category2="Sex", stratification2="Female"),
            rec(year=2016, value=70.0, stratification_category1="Age Group", stratification1="50-64 years",
                stratification_category2="Race/Ethnicity", stratification2="Hispanic"),
            rec(year=2016, value=80.0, location_abbr="TX", value_unit="%", stratification_category1="Age Group",
                stratification1="65 years or older", stratification_category2="Sex", stratification2="Male"),
            # Ineligible: non-percent unit, missing value, other question, national aggregate
            rec(year=2015, value=99.0, value_unit="Number"),
            rec(year=2015, value=None),
            rec(question="Q2", year=2015, value=5.0),
            rec(year=2015, value=1.0, location_abbr="MDW", stratification_category1="Age Group",
                stratification1="65 years or older"),
        ]
    )
