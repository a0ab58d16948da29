from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Callable, Optional

from sqlalchemy import delete, distinct, func, select

from ..common.datetime_utils import now_local, parse_iso_datetime
from ..common.serialization import camelize
from ..core.enums import DataSource
from ..core.exceptions import NotFoundError, ValidationError
from ..database.orm import Meeting, Property, Shareholder, Snapshot, as_dict, db, transaction

logger = logging.getLogger(__name__)


def meeting_to_dict(meeting: Meeting) -> dict:
    return camelize(as_dict(meeting))


class MeetingService:
    def __init__(self, *, clock: Callable = now_local):
        self._clock = clock

    def get_meeting(self, meeting_id: Any) -> Meeting:
        try:
            pk = int(meeting_id)
        except (TypeError, ValueError):
            raise ValidationError("meetingId must be a whole number")
        meeting = db.session.get(Meeting, pk)
        if meeting is None:
            raise NotFoundError("Meeting not found")
        return meeting

    def list_meetings(self) -> list[dict]:
        rows = db.session.execute(select(Meeting).order_by(Meeting.date.desc(), Meeting.id.desc())).scalars()
        return [meeting_to_dict(m) for m in rows]

    def create_meeting(self, *, year: Any, date: Any, data_source: Any) -> dict:
        try:
            year_no = int(year)
        except (TypeError, ValueError):
            raise ValidationError("year must be a whole number")
        if not date:
            raise ValidationError("date is required")
        try:
            meeting_date = parse_iso_datetime(str(date))
        except ValueError:
            raise ValidationError("date must be an ISO date")
        try:
            source = DataSource(str(data_source or DataSource.EXCEL.value).strip().lower())
        except ValueError:
            raise ValidationError("dataSource must be 'excel' or 'database'")

        with transaction() as session:
            meeting = Meeting(
                year=year_no,
                date=meeting_date,
                data_source=source.value,
                total_shareholders=0,
                checked_in=0,
                has_initial_data=False,
                mailers_generated=False,
                created_at=self._clock(),
            )
            session.add(meeting)

        logger.info("Created meeting %s for %s", meeting.id, year_no)
        return meeting_to_dict(meeting)

    def delete_meeting(self, meeting_id: Any) -> dict:
        """Remove a meeting together with its shareholders, their properties
        and its snapshots, in one transaction."""

        meeting = self.get_meeting(meeting_id)
        key = str(meeting.id)

        with transaction() as session:
            owner_ids = select(Shareholder.shareholder_id).where(Shareholder.meeting_id == key)
            removed_properties = session.execute(
                delete(Property).where(Property.shareholder_id.in_(owner_ids)).execution_options(synchronize_session=False)
            ).rowcount
            removed_shareholders = session.execute(
                delete(Shareholder).where(Shareholder.meeting_id == key).execution_options(synchronize_session=False)
            ).rowcount
            session.execute(delete(Snapshot).where(Snapshot.meeting_id == key).execution_options(synchronize_session=False))
            session.delete(meeting)

        logger.info(
            "Deleted meeting %s (%d shareholders, %d properties)", key, removed_shareholders, removed_properties
        )
        return {"shareholders": removed_shareholders, "properties": removed_properties}

    def get_stats(self) -> dict:
        total_shareholders = db.session.scalar(select(func.count(Shareholder.id))) or 0
        checked_in_properties = db.session.scalar(
            select(func.count(Property.id)).where(Property.checked_in.is_(True))
        ) or 0
        checked_in_shareholders = db.session.scalar(
            select(func.count(distinct(Property.shareholder_id))).where(Property.checked_in.is_(True))
        ) or 0
        upcoming: Optional[Meeting] = db.session.execute(
            select(Meeting).where(Meeting.date >= self._clock()).order_by(Meeting.date.asc()).limit(1)
        ).scalar_one_or_none()

        return {
            "totalShareholders": int(total_shareholders),
            "checkedInShareholders": int(checked_in_shareholders),
            "checkedInProperties": int(checked_in_properties),
            "nextMeeting": meeting_to_dict(upcoming) if upcoming else None,
        }

    def mark_mailers_generated(self, meeting_id: Any, *, when: Optional[datetime] = None) -> None:
        with transaction():
            meeting = self.get_meeting(meeting_id)
            meeting.mailers_generated = True
            meeting.mailer_generation_date = when or self._clock()
