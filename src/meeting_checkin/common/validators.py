from __future__ import annotations

from typing import Any, Optional

from ..core.constants import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from ..core.exceptions import ValidationError


def require_non_empty(value: Any, field_name: str) -> str:
    if value is None or not str(value).strip():
        raise ValidationError(f"{field_name} is required")
    return str(value).strip()


def optional_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def parse_positive_int(value: Any, field_name: str, *, default: Optional[int] = None) -> int:
    if value is None or value == "":
        if default is None:
            raise ValidationError(f"{field_name} is required")
        return default
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be a whole number")
    if number < 1:
        raise ValidationError(f"{field_name} must be at least 1")
    return number


def parse_page(page: Any, limit: Any) -> tuple[int, int]:
    page_no = parse_positive_int(page, "page", default=1)
    size = parse_positive_int(limit, "limit", default=DEFAULT_PAGE_SIZE)
    return page_no, min(size, MAX_PAGE_SIZE)


def parse_optional_bool(value: Any, field_name: str) -> Optional[bool]:
    """Parse a tri-state flag from a query string or JSON value.

    Missing or empty means "no filter"; anything else must be a recognisable
    boolean.
    """

    if value is None or value == "":
        return None
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in {"true", "1", "yes"}:
        return True
    if text in {"false", "0", "no"}:
        return False
    raise ValidationError(f"{field_name} must be true or false")
