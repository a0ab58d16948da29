from __future__ import annotations

import logging
from dataclasses import asdict
from typing import Any, Optional

import mysql.connector

from ..common.formatting import format_account, format_city_state_zip, upper_text
from ..common.serialization import camelize, to_camel
from ..common.validators import require_non_empty
from ..core.exceptions import NotFoundError
from ..listing.query_builder import ListingQuery, pagination
from ..shareholders.repository import ShareholderRepository
from .model import Property, PropertyFields
from .repository import PropertyRepository

logger = logging.getLogger(__name__)

_TEXT_FIELDS = (
    "customer_name",
    "customer_mailing_address",
    "owner_name",
    "owner_mailing_address",
    "resident_name",
    "resident_mailing_address",
    "service_address",
)
_CITY_STATE_ZIP_FIELDS = ("city_state_zip", "owner_city_state_zip", "resident_city_state_zip")


def normalize_property(body: dict, *, existing: Optional[Property] = None) -> PropertyFields:
    """Build storable fields from a camelCase request body.

    On update (``existing`` given) any field the body leaves out or sends
    empty keeps its stored value.
    """

    def sent(field: str) -> Any:
        value = body.get(to_camel(field))
        if isinstance(value, str):
            value = value.strip()
        return value if value not in (None, "") else None

    def keep(field: str) -> Any:
        return getattr(existing, field) if existing is not None else None

    account = sent("account")
    shareholder_id = sent("shareholder_id")
    if existing is None:
        account = require_non_empty(account, "account")
        shareholder_id = require_non_empty(shareholder_id, "shareholderId")

    values: dict[str, Any] = {
        "account": format_account(str(account)) if account is not None else keep("account"),
        "shareholder_id": str(shareholder_id) if shareholder_id is not None else keep("shareholder_id"),
    }

    num_of = sent("num_of")
    values["num_of"] = str(num_of) if num_of is not None else keep("num_of")

    for field in _TEXT_FIELDS:
        value = sent(field)
        values[field] = upper_text(str(value)) if value is not None else (keep(field) or "")
    for field in _CITY_STATE_ZIP_FIELDS:
        value = sent(field)
        values[field] = format_city_state_zip(str(value)) if value is not None else (keep(field) or "")

    return PropertyFields(**values)


class PropertyService:
    def __init__(self, properties: PropertyRepository, shareholders: ShareholderRepository):
        self._properties = properties
        self._shareholders = shareholders

    def list_properties(self, q: ListingQuery) -> dict:
        try:
            rows = [camelize(p) for p in self._properties.list_page(q)]
            total = self._properties.count(q)
        except mysql.connector.Error:
            logger.exception("Property listing failed (page=%s, search=%r)", q.page, q.search_term)
            rows, total = [], 0

        return {"properties": rows, "totalProperties": total, "pagination": pagination(q, total)}

    def get_property(self, property_id: int) -> Property:
        prop = self._properties.get(int(property_id))
        if not prop:
            raise NotFoundError("Property not found")
        return prop

    def create_property(self, body: dict) -> Property:
        fields = normalize_property(body)
        if not self._shareholders.exists(fields.shareholder_id):
            raise NotFoundError("Shareholder not found")

        property_id = self._properties.create(fields)
        logger.info("Created property %s for shareholder %s", fields.account, fields.shareholder_id)
        return self.get_property(property_id)

    def update_property(self, property_id: int, body: dict) -> Property:
        existing = self.get_property(property_id)
        fields = normalize_property(body, existing=existing)
        if fields.shareholder_id != existing.shareholder_id and not self._shareholders.exists(fields.shareholder_id):
            raise NotFoundError("Shareholder not found")

        checked_in = body.get("checkedIn") is True
        self._properties.update(existing.id, fields, checked_in=checked_in)
        if checked_in != existing.checked_in:
            logger.info("Property %s checked-in flag set to %s", existing.id, checked_in)
        return Property(**{**asdict(existing), **asdict(fields), "checked_in": checked_in})

    def delete_property(self, property_id: int) -> None:
        existing = self.get_property(property_id)
        self._properties.delete(existing.id)
        logger.info("Deleted property %s", existing.id)
