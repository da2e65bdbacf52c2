from __future__ import annotations

from typing import Dict, List, Optional, Union

# Two-digit FIPS state code -> USPS abbreviation (50 states + DC).
FIPS_TO_ABBR: Dict[str, str] = {
    "01": "AL", "02": "AK", "04": "AZ", "05": "AR", "06": "CA", "08": "CO",
    "09": "CT", "10": "DE", "11": "DC", "12": "FL", "13": "GA", "15": "HI",
    "16": "ID", "17": "IL", "18": "IN", "19": "IA", "20": "KS", "21": "KY",
    "22": "LA", "23": "ME", "24": "MD", "25": "MA", "26": "MI", "27": "MN",
    "28": "MS", "29": "MO", "30": "MT", "31": "NE", "32": "NV", "33": "NH",
    "34": "NJ", "35": "NM", "36": "NY", "37": "NC", "38": "ND", "39": "OH",
    "40": "OK", "41": "OR", "42": "PA", "44": "RI", "45": "SC", "46": "SD",
    "47": "TN", "48": "TX", "49": "UT", "50": "VT", "51": "VA", "53": "WA",
    "54": "WV", "55": "WI", "56": "WY",
}
ABBR_TO_FIPS: Dict[str, str] = {abbr: code for code, abbr in FIPS_TO_ABBR.items()}


def abbr_for_fips(code: Union[int, str, None]) -> Optional[str]:
    """Map a numeric region code (``6``, ``"6"`` or ``"06"``) to a state abbreviation."""
    if code is None:
        return None
    s = str(code).strip()
    if not s.isdigit():
        return None
    return FIPS_TO_ABBR.get(s.zfill(2))


def with_fips(state_rows: List[dict]) -> List[dict]:
    """Attach the integer FIPS id used by the state boundary geometry.

    Rows for codes outside the lookup (territories) are dropped since they have
    no polygon to color.
    """
    out = []
    for row in state_rows:
        code = ABBR_TO_FIPS.get(row.get("state_abbr"))
        if code is None:
            continue
        out.append({**row, "id": int(code)})
    return out
