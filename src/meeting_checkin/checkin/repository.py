from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol

from .model import MeetingCounters, Signature


class CheckInRepository(Protocol):
    def property_counts(self, shareholder_id: str) -> tuple[int, int]:
        """Return ``(total, checked_in)`` property counts for a shareholder."""
        ...

    def meeting_id_for(self, shareholder_id: str) -> Optional[str]:
        ...

    def mark_checked_in(
        self,
        shareholder_id: str,
        *,
        checked_in_at: datetime,
        signature: Optional[Signature],
    ) -> int:
        ...

    def clear_check_in(self, shareholder_id: str, *, was_checked_in: bool) -> int:
        ...

    def reset_all(self) -> int:
        ...

    def meeting_counters(self, meeting_id: str) -> Optional[MeetingCounters]:
        ...
