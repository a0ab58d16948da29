from __future__ import annotations

import logging
import random
from typing import IO, Any, Optional

import pandas as pd
from sqlalchemy import delete, select

from ..common.formatting import format_account, format_city_state_zip, upper_text
from ..core.constants import SHAREHOLDER_ID_MAX, SHAREHOLDER_ID_MIN
from ..core.exceptions import ValidationError
from ..database.orm import Property, Shareholder, transaction
from .service import MeetingService
from .snapshots import SnapshotService

logger = logging.getLogger(__name__)

PROPERTY_FIELDS = (
    "account",
    "num_of",
    "customer_name",
    "customer_mailing_address",
    "city_state_zip",
    "owner_name",
    "owner_mailing_address",
    "owner_city_state_zip",
    "resident_name",
    "resident_mailing_address",
    "resident_city_state_zip",
    "service_address",
)
_CITY_STATE_ZIP_FIELDS = {"city_state_zip", "owner_city_state_zip", "resident_city_state_zip"}


def read_property_sheet(stream: IO[bytes], filename: str) -> pd.DataFrame:
    """Load a CSV or Excel property list with normalised snake_case headers.

    Every cell is read as text; rows with no values at all are dropped.
    """

    name = (filename or "").lower()
    try:
        if name.endswith(".csv"):
            df = pd.read_csv(stream, dtype=str, keep_default_na=False)
        elif name.endswith((".xlsx", ".xls")):
            df = pd.read_excel(stream, dtype=str, keep_default_na=False)
        else:
            raise ValidationError("Upload must be a .csv or .xlsx file")
    except ValueError as e:
        raise ValidationError(f"Could not read {filename}: {e}")

    df.columns = [str(c).strip().lower().replace(" ", "_") for c in df.columns]
    if "account" not in df.columns:
        raise ValidationError("Upload is missing the 'account' column")

    df = df.fillna("").astype(str).apply(lambda col: col.str.strip())
    return df[(df != "").any(axis=1)].reset_index(drop=True)


def normalize_row(row: dict[str, Any]) -> dict[str, str]:
    out: dict[str, str] = {}
    for field in PROPERTY_FIELDS:
        value = str(row.get(field) or "").strip()
        if field == "account":
            out[field] = format_account(value) if value else ""
        elif field == "num_of":
            out[field] = value
        elif field in _CITY_STATE_ZIP_FIELDS:
            out[field] = format_city_state_zip(value)
        else:
            out[field] = upper_text(value)
    return out


class ShareholderImportService:
    """Replace a meeting's shareholders and properties from an uploaded list.

    Rows sharing an owner mailing address and owner city/state/zip belong to
    one shareholder, who gets a fresh random six-digit id.
    """

    def __init__(
        self,
        meetings: MeetingService,
        snapshots: SnapshotService,
        *,
        rng: Optional[random.Random] = None,
    ):
        self._meetings = meetings
        self._snapshots = snapshots
        self._rng = rng or random.Random()

    def _new_id(self, taken: set[str]) -> str:
        if len(taken) > SHAREHOLDER_ID_MAX - SHAREHOLDER_ID_MIN:
            raise ValidationError("No shareholder ids left to assign")
        while True:
            candidate = str(self._rng.randint(SHAREHOLDER_ID_MIN, SHAREHOLDER_ID_MAX))
            if candidate not in taken:
                taken.add(candidate)
                return candidate

    def import_dataframe(self, meeting_id: Any, df: pd.DataFrame) -> dict:
        meeting = self._meetings.get_meeting(meeting_id)
        key = str(meeting.id)
        rows = [normalize_row(r) for r in df.to_dict(orient="records")]
        skipped = sum(1 for r in rows if not r["account"])
        rows = [r for r in rows if r["account"]]

        with transaction() as session:
            owner_ids = select(Shareholder.shareholder_id).where(Shareholder.meeting_id == key)
            session.execute(
                delete(Property).where(Property.shareholder_id.in_(owner_ids)).execution_options(synchronize_session=False)
            )
            session.execute(
                delete(Shareholder).where(Shareholder.meeting_id == key).execution_options(synchronize_session=False)
            )

            taken = set(session.execute(select(Shareholder.shareholder_id)).scalars())
            owners: dict[tuple[str, str], str] = {}

            for row in rows:
                owner_key = (row["owner_mailing_address"], row["owner_city_state_zip"])
                shareholder_id = owners.get(owner_key)
                if shareholder_id is None:
                    shareholder_id = self._new_id(taken)
                    owners[owner_key] = shareholder_id
                    session.add(
                        Shareholder(
                            shareholder_id=shareholder_id,
                            name=row["owner_name"] or "UNKNOWN",
                            meeting_id=key,
                            owner_mailing_address=row["owner_mailing_address"],
                            owner_city_state_zip=row["owner_city_state_zip"],
                            is_new=False,
                        )
                    )
                session.add(Property(shareholder_id=shareholder_id, checked_in=False, **{**row, "num_of": row["num_of"] or None}))

            meeting.total_shareholders = len(owners)
            meeting.checked_in = 0
            meeting.has_initial_data = True
            session.flush()
            change_count = len(self._snapshots.record(key).changes or [])

        logger.info(
            "Imported %d properties into %d shareholders for meeting %s (%d rows skipped)",
            len(rows),
            len(owners),
            key,
            skipped,
        )
        return {
            "totalRecords": len(rows),
            "totalShareholders": len(owners),
            "skippedRows": skipped,
            "changes": change_count,
        }

    def import_upload(self, meeting_id: Any, stream: IO[bytes], filename: str) -> dict:
        return self.import_dataframe(meeting_id, read_property_sheet(stream, filename))
