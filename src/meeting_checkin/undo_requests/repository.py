from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import UndoRequestStatus
from .model import UndoRequest


class UndoRequestRepository(Protocol):
    def create(self, *, shareholder_id: str, shareholder_name: str, requested_by: str, reason: Optional[str]) -> int:
        ...

    def get(self, request_id: int) -> Optional[UndoRequest]:
        ...

    def list_by_status(self, *, status: Optional[UndoRequestStatus] = None) -> Sequence[UndoRequest]:
        ...

    def decide(
        self,
        *,
        request_id: int,
        status: UndoRequestStatus,
        decided_by: str,
        decided_at: datetime,
    ) -> bool:
        ...
