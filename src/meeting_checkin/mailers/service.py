from __future__ import annotations

import logging
from typing import Any, Optional

from sqlalchemy import select

from ..common.validators import parse_positive_int
from ..core.constants import MAILER_BATCH_SIZE
from ..core.exceptions import ValidationError
from ..database.orm import Shareholder, db
from ..meetings.service import MeetingService
from ..progress.broker import ProgressBroker
from .renderer import MailerRecipient, render_page, write_pdf
from .storage import MailerStorage

logger = logging.getLogger(__name__)


class MailerService:
    def __init__(self, meetings: MeetingService, storage: MailerStorage, progress: ProgressBroker):
        self._meetings = meetings
        self._storage = storage
        self._progress = progress

    def recipients(self, meeting_id: str) -> list[MailerRecipient]:
        rows = db.session.execute(
            select(Shareholder)
            .where(Shareholder.meeting_id == str(meeting_id))
            .order_by(Shareholder.name, Shareholder.shareholder_id)
        ).scalars()
        return [
            MailerRecipient(
                shareholder_id=s.shareholder_id,
                name=s.name,
                mailing_address=s.owner_mailing_address,
                city_state_zip=s.owner_city_state_zip,
            )
            for s in rows
        ]

    def generate(self, meeting_id: Any, *, batch_size: Optional[Any] = None) -> dict:
        meeting = self._meetings.get_meeting(meeting_id)
        key = str(meeting.id)
        size = parse_positive_int(batch_size, "batchSize", default=MAILER_BATCH_SIZE)

        recipients = self.recipients(key)
        if not recipients:
            raise ValidationError("This meeting has no shareholders to mail")

        label = f"{meeting.year} Annual Shareholder Meeting - {meeting.date:%B %d, %Y}"
        total = len(recipients)
        files = []

        removed = self._storage.delete(key)
        if removed:
            logger.info("Meeting %s: removed %d previous mailer file(s)", key, removed)

        for start in range(0, total, size):
            batch_no = start // size + 1
            chunk = recipients[start:start + size]
            path = self._storage.path_for(key, f"mailers-batch-{batch_no}.pdf")
            write_pdf([render_page(r, meeting_label=label) for r in chunk], path)
            files.append(path.name)

            processed = start + len(chunk)
            logger.info("Meeting %s mailer batch %d written (%d/%d)", key, batch_no, processed, total)
            self._progress.publish(
                {"type": "mailers", "meetingId": key, "batch": batch_no, "processed": processed, "total": total}
            )

        self._meetings.mark_mailers_generated(key)
        self._progress.publish({"type": "mailers", "meetingId": key, "done": True, "total": total})
        return {"meetingId": key, "files": files, "totalShareholders": total}
