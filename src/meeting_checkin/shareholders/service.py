from __future__ import annotations

import logging
from typing import Any, Optional

import mysql.connector

from ..common.serialization import camelize
from ..common.validators import optional_text, parse_optional_bool, require_non_empty
from ..core.exceptions import NotFoundError, ValidationError
from ..listing.query_builder import ListingQuery, pagination
from ..properties.repository import PropertyRepository
from .model import NewShareholder, Shareholder
from .repository import ShareholderRepository

logger = logging.getLogger(__name__)


class ShareholderService:
    def __init__(self, shareholders: ShareholderRepository, properties: PropertyRepository):
        self._shareholders = shareholders
        self._properties = properties

    def _require(self, shareholder_id: str) -> Shareholder:
        shareholder = self._shareholders.get(require_non_empty(shareholder_id, "shareholderId"))
        if not shareholder:
            raise NotFoundError("Shareholder not found")
        return shareholder

    def list_shareholders(self, q: ListingQuery) -> dict:
        try:
            rows = [camelize(r) for r in self._shareholders.list_page(q)]
            total = self._shareholders.count(q)
        except mysql.connector.Error:
            logger.exception("Shareholder listing failed (page=%s, search=%r)", q.page, q.search_term)
            rows, total = [], 0

        return {"shareholders": rows, "totalShareholders": total, "pagination": pagination(q, total)}

    def create_shareholder(self, body: dict) -> Shareholder:
        data = NewShareholder(
            shareholder_id=require_non_empty(body.get("shareholderId"), "shareholderId"),
            name=require_non_empty(body.get("name"), "name"),
            meeting_id=optional_text(body.get("meetingId")),
            owner_mailing_address=optional_text(body.get("ownerMailingAddress")),
            owner_city_state_zip=optional_text(body.get("ownerCityStateZip")),
            is_new=bool(parse_optional_bool(body.get("isNew"), "isNew")),
        )
        if self._shareholders.exists(data.shareholder_id):
            raise ValidationError("A shareholder with this ID already exists")

        self._shareholders.create(data)
        logger.info("Created shareholder %s", data.shareholder_id)
        return self._require(data.shareholder_id)

    def get_shareholder_details(self, shareholder_id: str) -> dict[str, Any]:
        shareholder = self._require(shareholder_id)
        properties = list(self._properties.list_for_shareholder(shareholder.shareholder_id))
        return {
            "shareholder": camelize(shareholder),
            "properties": [camelize(p) for p in properties],
            "totalProperties": len(properties),
            "checkedInProperties": sum(1 for p in properties if p.checked_in),
        }

    def update_name(self, shareholder_id: str, name: Any) -> Shareholder:
        shareholder = self._require(shareholder_id)
        self._shareholders.update_name(shareholder.shareholder_id, require_non_empty(name, "name"))
        return self._require(shareholder.shareholder_id)

    def delete_shareholder(self, shareholder_id: str) -> int:
        shareholder = self._require(shareholder_id)
        removed = self._shareholders.delete_with_properties(shareholder.shareholder_id)
        logger.info("Deleted shareholder %s and %d properties", shareholder.shareholder_id, removed)
        return removed

    # -------- Designee --------
    def get_designee(self, shareholder_id: str) -> Optional[str]:
        return self._require(shareholder_id).designee

    def set_designee(self, shareholder_id: str, designee: Any) -> str:
        name = require_non_empty(designee, "designee")
        shareholder = self._require(shareholder_id)
        self._shareholders.set_designee(shareholder.shareholder_id, name)
        logger.info("Designee set for shareholder %s", shareholder.shareholder_id)
        return name

    def clear_designee(self, shareholder_id: str) -> None:
        shareholder = self._require(shareholder_id)
        self._shareholders.set_designee(shareholder.shareholder_id, None)
        logger.info("Designee cleared for shareholder %s", shareholder.shareholder_id)

    # -------- Comment --------
    def get_comment(self, shareholder_id: str) -> str:
        return self._require(shareholder_id).comment or ""

    def set_comment(self, shareholder_id: str, comment: Any) -> str:
        shareholder = self._require(shareholder_id)
        text = "" if comment is None else str(comment)
        self._shareholders.set_comment(shareholder.shareholder_id, text)
        return text
