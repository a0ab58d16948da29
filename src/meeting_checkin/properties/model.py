from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class PropertyFields:
    """Editable columns of a property, already normalised for storage."""

    account: str
    shareholder_id: str
    num_of: Optional[str] = None
    customer_name: str = ""
    customer_mailing_address: str = ""
    city_state_zip: str = ""
    owner_name: str = ""
    owner_mailing_address: str = ""
    owner_city_state_zip: str = ""
    resident_name: str = ""
    resident_mailing_address: str = ""
    resident_city_state_zip: str = ""
    service_address: str = ""


@dataclass(frozen=True)
class Property:
    id: int
    account: str
    shareholder_id: str
    checked_in: bool
    num_of: Optional[str] = None
    customer_name: Optional[str] = None
    customer_mailing_address: Optional[str] = None
    city_state_zip: Optional[str] = None
    owner_name: Optional[str] = None
    owner_mailing_address: Optional[str] = None
    owner_city_state_zip: Optional[str] = None
    resident_name: Optional[str] = None
    resident_mailing_address: Optional[str] = None
    resident_city_state_zip: Optional[str] = None
    service_address: Optional[str] = None
    created_at: Optional[datetime] = None
