from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Optional

GroupedMode = Literal["sex", "ethnicity"]
GROUPED_MODES = ("sex", "ethnicity")
EMPTY_LABEL = "–"


@dataclass
class FilterState:
    """Cross-filter selections shared by every view.

    Only user actions mutate this object; queries receive its fields as plain
    arguments. Every click selection toggles: selecting the value that is
    already selected clears it.
    """

    question: Optional[str] = None
    selected_year: Optional[int] = None
    selected_stratification: Optional[str] = None
    selected_state: Optional[str] = None
    selected_state_name: Optional[str] = None
    grouped_mode: GroupedMode = "sex"

    def toggle_year(self, year: int) -> None:
        self.selected_year = None if self.selected_year == year else year

    def toggle_stratification(self, label: str) -> None:
        self.selected_stratification = None if self.selected_stratification == label else label

    def toggle_state(self, abbr: str, name: Optional[str] = None) -> bool:
        """Select ``abbr``; returns False when the click deselected it instead."""
        if self.selected_state == abbr:
            self.reset_state()
            return False
        self.selected_state = abbr
        self.selected_state_name = name
        return True

    def reset_year(self) -> None:
        self.selected_year = None

    def reset_stratification(self) -> None:
        self.selected_stratification = None

    def reset_state(self) -> None:
        self.selected_state = None
        self.selected_state_name = None

    def set_grouped_mode(self, mode: str) -> None:
        if mode not in GROUPED_MODES:
            raise ValueError(f"grouped_mode must be one of {GROUPED_MODES}, got {mode!r}")
        self.grouped_mode = mode  # type: ignore[assignment]

    def summary(self) -> dict:
        return {
            "year": str(self.selected_year) if self.selected_year is not None else EMPTY_LABEL,
            "stratification": self.selected_stratification or EMPTY_LABEL,
            "state": self.selected_state_name or self.selected_state or EMPTY_LABEL,
        }


def _as_optional_int(value: object) -> Optional[int]:
    if value is None or value == "":
        return None
    try:
        return int(value)  # type: ignore[arg-type]
    except Exception:
        return None


def _as_optional_str(value: object) -> Optional[str]:
    if value is None:
        return None
    s = str(value).strip()
    return s or None


def normalize_filters(raw: dict) -> FilterState:
    state = _as_optional_str(raw.get("selected_state"))
    if state is not None:
        state = state.upper()

    grouped_mode = str(raw.get("grouped_mode") or "sex").strip().lower()
    if grouped_mode not in GROUPED_MODES:
        grouped_mode = "sex"

    return FilterState(
        question=_as_optional_str(raw.get("question")),
        selected_year=_as_optional_int(raw.get("selected_year")),
        selected_stratification=_as_optional_str(raw.get("selected_stratification")),
        selected_state=state,
        selected_state_name=_as_optional_str(raw.get("selected_state_name")) if state else None,
        grouped_mode=grouped_mode,  # type: ignore[arg-type]
    )
