from __future__ import annotations

import logging
from typing import Any, Callable, Optional

from sqlalchemy import func, select
from sqlalchemy.orm import aliased

from ..common.datetime_utils import now_local
from ..common.serialization import camelize
from ..common.validators import optional_text, require_non_empty
from ..core.exceptions import NotFoundError, ValidationError
from ..database.orm import Property, PropertyTransfer, Shareholder, as_dict, db, transaction

logger = logging.getLogger(__name__)


class PropertyTransferService:
    """Move a property to another shareholder and keep an append-only trail."""

    def __init__(self, *, clock: Callable = now_local):
        self._clock = clock

    def transfer(
        self,
        property_id: int,
        *,
        new_shareholder_id: Any,
        new_owner_name: Any = None,
        new_customer_name: Any = None,
        new_resident_name: Any = None,
        created_by: Optional[str] = None,
    ) -> dict:
        target_id = require_non_empty(new_shareholder_id, "newShareholderId")

        with transaction() as session:
            prop = session.get(Property, int(property_id))
            if prop is None:
                raise NotFoundError("Property not found")

            target = session.execute(
                select(Shareholder).where(Shareholder.shareholder_id == target_id)
            ).scalar_one_or_none()
            if target is None:
                raise NotFoundError("Target shareholder not found")

            previous_id = prop.shareholder_id
            if previous_id == target.shareholder_id:
                raise ValidationError("Property already belongs to this shareholder")

            now = self._clock()
            session.add(
                PropertyTransfer(
                    property_id=prop.id,
                    from_shareholder_id=previous_id,
                    to_shareholder_id=target.shareholder_id,
                    transfer_date=now,
                    meeting_id=target.meeting_id,
                    created_by=created_by,
                    created_at=now,
                )
            )

            # Resident address follows the new owner's existing property when
            # it has one, otherwise this property's service address and city.
            sibling = session.execute(
                select(Property)
                .where(Property.shareholder_id == target.shareholder_id, Property.id != prop.id)
                .order_by(Property.account)
                .limit(1)
            ).scalar_one_or_none()

            prop.shareholder_id = target.shareholder_id
            owner_name = optional_text(new_owner_name)
            prop.owner_name = (owner_name or target.name).upper()
            prop.customer_name = (optional_text(new_customer_name) or owner_name or target.name).upper()
            prop.resident_name = (optional_text(new_resident_name) or owner_name or target.name).upper()
            prop.resident_mailing_address = (sibling and sibling.resident_mailing_address) or prop.service_address
            prop.resident_city_state_zip = (sibling and sibling.resident_city_state_zip) or prop.city_state_zip
            session.flush()

            remaining = session.scalar(
                select(func.count(Property.id)).where(Property.shareholder_id == previous_id)
            )
            previous_removed = False
            if not remaining:
                old = session.execute(
                    select(Shareholder).where(Shareholder.shareholder_id == previous_id)
                ).scalar_one_or_none()
                if old is not None:
                    session.delete(old)
                    previous_removed = True

            result = camelize(as_dict(prop))

        logger.info(
            "Transferred property %s from %s to %s%s",
            property_id,
            previous_id,
            target_id,
            " (previous shareholder removed)" if previous_removed else "",
        )
        return {"property": result, "previousShareholderRemoved": previous_removed}

    def history(self, property_id: int) -> list[dict]:
        if db.session.get(Property, int(property_id)) is None:
            raise NotFoundError("Property not found")

        source = aliased(Shareholder)
        dest = aliased(Shareholder)
        rows = db.session.execute(
            select(PropertyTransfer, source.name, dest.name)
            .outerjoin(source, source.shareholder_id == PropertyTransfer.from_shareholder_id)
            .outerjoin(dest, dest.shareholder_id == PropertyTransfer.to_shareholder_id)
            .where(PropertyTransfer.property_id == int(property_id))
            .order_by(PropertyTransfer.transfer_date.asc(), PropertyTransfer.id.asc())
        ).all()

        out = []
        for transfer, from_name, to_name in rows:
            item = camelize(as_dict(transfer))
            item["fromShareholderName"] = from_name
            item["toShareholderName"] = to_name
            out.append(item)
        return out
