from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import CheckInAction


@dataclass(frozen=True)
class Signature:
    image: str
    hash: str


@dataclass(frozen=True)
class CheckInResult:
    shareholder_id: str
    action: CheckInAction
    properties_updated: int
    meeting_id: Optional[str] = None


@dataclass(frozen=True)
class MeetingCounters:
    meeting_id: int
    total_shareholders: int
    checked_in: int
