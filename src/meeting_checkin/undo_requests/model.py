from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import UndoRequestStatus


@dataclass(frozen=True)
class UndoRequest:
    id: int
    shareholder_id: str
    shareholder_name: str
    requested_by: str
    requested_at: datetime
    status: UndoRequestStatus
    approved_by: Optional[str] = None
    approved_at: Optional[datetime] = None
    reason: Optional[str] = None
