from __future__ import annotations

import hashlib
import logging
from typing import Any, Callable, Optional

from ..common.datetime_utils import now_local
from ..common.validators import require_non_empty
from ..core.constants import ALREADY_CHECKED_IN_MESSAGE
from ..core.enums import CheckInAction
from ..core.exceptions import AlreadyCheckedInError, NotFoundError, ValidationError
from .model import CheckInResult, MeetingCounters, Signature
from .repository import CheckInRepository

logger = logging.getLogger(__name__)


def build_signature(image: Any, signature_hash: Any = None) -> Optional[Signature]:
    """Validate a signature data URL and pair it with its SHA-256 digest."""

    if image in (None, ""):
        return None
    if not isinstance(image, str) or not image.startswith("data:image/"):
        raise ValidationError("signatureImage must be an image data URL")

    digest = str(signature_hash).strip() if signature_hash else ""
    if not digest:
        digest = hashlib.sha256(image.encode("utf-8")).hexdigest()
    return Signature(image=image, hash=digest)


class CheckInService:
    def __init__(self, repo: CheckInRepository, *, clock: Callable = now_local):
        self._repo = repo
        self._clock = clock

    def check_in(self, shareholder_id: Any, *, signature: Optional[Signature] = None) -> CheckInResult:
        sid = require_non_empty(shareholder_id, "shareholderId")

        total, checked_in = self._repo.property_counts(sid)
        if total == 0:
            raise NotFoundError("No properties found for this shareholder")
        if checked_in > 0:
            logger.warning("Repeat check-in attempt for shareholder %s", sid)
            raise AlreadyCheckedInError(ALREADY_CHECKED_IN_MESSAGE)

        updated = self._repo.mark_checked_in(sid, checked_in_at=self._clock(), signature=signature)
        logger.info("Checked in shareholder %s (%d properties)", sid, updated)
        return CheckInResult(
            shareholder_id=sid,
            action=CheckInAction.CHECKIN,
            properties_updated=updated,
            meeting_id=self._repo.meeting_id_for(sid),
        )

    def undo(self, shareholder_id: Any) -> CheckInResult:
        sid = require_non_empty(shareholder_id, "shareholderId")

        _, checked_in = self._repo.property_counts(sid)
        updated = self._repo.clear_check_in(sid, was_checked_in=checked_in > 0)
        logger.info("Undid check-in for shareholder %s (%d properties)", sid, updated)
        return CheckInResult(
            shareholder_id=sid,
            action=CheckInAction.UNDO,
            properties_updated=updated,
            meeting_id=self._repo.meeting_id_for(sid),
        )

    def apply(self, shareholder_id: Any, action: Any, *, signature: Optional[Signature] = None) -> CheckInResult:
        try:
            parsed = CheckInAction(str(action or "").strip().lower())
        except ValueError:
            raise ValidationError("action must be 'checkin' or 'undo'")

        if parsed == CheckInAction.CHECKIN:
            return self.check_in(shareholder_id, signature=signature)
        return self.undo(shareholder_id)

    def bulk_uncheck_in(self) -> int:
        updated = self._repo.reset_all()
        logger.info("Bulk uncheck-in reset %d properties", updated)
        return updated

    def meeting_counters(self, meeting_id: Optional[str]) -> Optional[MeetingCounters]:
        if not meeting_id:
            return None
        return self._repo.meeting_counters(meeting_id)
