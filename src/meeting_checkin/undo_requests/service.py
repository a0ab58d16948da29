from __future__ import annotations

import logging
from typing import Any, Callable, Optional, Sequence

from ..checkin.service import CheckInService
from ..common.datetime_utils import now_local
from ..common.validators import optional_text, require_non_empty
from ..core.enums import UndoRequestStatus
from ..core.exceptions import NotFoundError, ValidationError
from .model import UndoRequest
from .repository import UndoRequestRepository

logger = logging.getLogger(__name__)

_ACTIONS = {"approve": UndoRequestStatus.APPROVED, "reject": UndoRequestStatus.REJECTED}


class UndoRequestService:
    """Staff ask for a check-in to be reversed; an admin approves or rejects."""

    def __init__(self, requests: UndoRequestRepository, checkin: CheckInService, *, clock: Callable = now_local):
        self._requests = requests
        self._checkin = checkin
        self._clock = clock

    def create_request(self, *, shareholder_id: Any, shareholder_name: Any, requested_by: str, reason: Any = None) -> UndoRequest:
        request_id = self._requests.create(
            shareholder_id=require_non_empty(shareholder_id, "shareholderId"),
            shareholder_name=require_non_empty(shareholder_name, "shareholderName"),
            requested_by=require_non_empty(requested_by, "requestedBy"),
            reason=optional_text(reason),
        )
        logger.info("Undo request %s filed for shareholder %s", request_id, shareholder_id)
        created = self._requests.get(request_id)
        if created is None:
            raise NotFoundError("Undo request not found")
        return created

    def list_requests(self, status: Optional[str] = None) -> Sequence[UndoRequest]:
        parsed = None
        if status:
            try:
                parsed = UndoRequestStatus(status.strip().lower())
            except ValueError:
                raise ValidationError("status must be pending, approved or rejected")
        return self._requests.list_by_status(status=parsed)

    def decide(self, *, request_id: int, action: Any, admin: str) -> UndoRequest:
        status = _ACTIONS.get(str(action or "").strip().lower())
        if status is None:
            raise ValidationError("action must be 'approve' or 'reject'")

        req = self._requests.get(int(request_id))
        if not req:
            raise NotFoundError("Undo request not found")
        if req.status != UndoRequestStatus.PENDING:
            raise ValidationError("Undo request has already been processed")

        if status == UndoRequestStatus.APPROVED:
            self._checkin.undo(req.shareholder_id)

        if not self._requests.decide(
            request_id=req.id,
            status=status,
            decided_by=admin,
            decided_at=self._clock(),
        ):
            raise ValidationError("Undo request has already been processed")

        logger.info("Undo request %s %s by %s", req.id, status.value, admin)
        decided = self._requests.get(req.id)
        if decided is None:
            raise NotFoundError("Undo request not found")
        return decided
