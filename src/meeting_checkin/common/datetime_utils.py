from __future__ import annotations

from datetime import date, datetime


def parse_iso_datetime(value: str) -> datetime:
    """Parse ``YYYY-MM-DD`` or a full ISO timestamp."""
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    if len(text) == 10:
        return datetime.combine(date.fromisoformat(text), datetime.min.time())
    return datetime.fromisoformat(text)


def now_local() -> datetime:
    """Current local time; services take it as their default clock."""
    return datetime.now()
