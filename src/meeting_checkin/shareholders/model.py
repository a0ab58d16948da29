from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class Shareholder:
    id: int
    shareholder_id: str
    name: str
    meeting_id: Optional[str]
    owner_mailing_address: Optional[str]
    owner_city_state_zip: Optional[str]
    is_new: bool
    designee: Optional[str]
    comment: Optional[str]
    checked_in_at: Optional[datetime]
    signature_hash: Optional[str]
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class NewShareholder:
    shareholder_id: str
    name: str
    meeting_id: Optional[str] = None
    owner_mailing_address: Optional[str] = None
    owner_city_state_zip: Optional[str] = None
    is_new: bool = False
