from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel


class FilterStateModel(BaseModel):
    question: Optional[str] = None
    selected_year: Optional[int] = None
    selected_stratification: Optional[str] = None
    selected_state: Optional[str] = None
    selected_state_name: Optional[str] = None
    grouped_mode: Literal["sex", "ethnicity"] = "sex"
