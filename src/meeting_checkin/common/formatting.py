"""Normalisation applied to property records before they are stored."""
from __future__ import annotations

import re
from typing import Optional

_STATE_CODES = (
    "AK|AL|AR|AZ|CA|CO|CT|DC|DE|FL|GA|HI|IA|ID|IL|IN|KS|KY|LA|MA|MD|ME|MI|MN|MO|MS|MT|"
    "NC|ND|NE|NH|NJ|NM|NV|NY|OH|OK|OR|PA|RI|SC|SD|TN|TX|UT|VA|VT|WA|WI|WV|WY"
)
_RUN_TOGETHER = re.compile(rf"^([A-Z]+)({_STATE_CODES})([0-9]+)$")


def upper_text(value: Optional[str]) -> str:
    return value.strip().upper() if value else ""


def format_account(account: str) -> str:
    """Pad a bare account number to the district's ``0000000001-00`` form."""

    account = account.strip()
    if "-" in account:
        return account
    return account.zfill(10) + "-00"


def format_city_state_zip(value: Optional[str]) -> str:
    if not value:
        return ""

    formatted = re.sub(r"\s+", " ", value.replace(",", " ")).strip().upper()

    # e.g. MINOTND58701 -> MINOT ND 58701
    if " " not in formatted:
        match = _RUN_TOGETHER.match(formatted)
        if match:
            city, state, zip_code = match.groups()
            formatted = f"{city} {state} {zip_code}"

    return formatted
