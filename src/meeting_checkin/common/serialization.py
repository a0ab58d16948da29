from __future__ import annotations

from dataclasses import asdict, is_dataclass
from datetime import date, datetime
from enum import Enum
from typing import Any


def to_camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.capitalize() for part in rest)


def _json_value(value: Any) -> Any:
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, Enum):
        return value.value
    return value


def camelize(record: Any) -> dict:
    """Map a dataclass or snake_case dict onto the camelCase response shape."""

    data = asdict(record) if is_dataclass(record) else dict(record)
    return {to_camel(key): _json_value(value) for key, value in data.items()}
