from __future__ import annotations

from enum import Enum


class DataSource(str, Enum):
    """Where a meeting's initial shareholder data comes from."""

    EXCEL = "excel"
    DATABASE = "database"


class CheckInAction(str, Enum):
    CHECKIN = "checkin"
    UNDO = "undo"


class UndoRequestStatus(str, Enum):
    """Review state of a request to reverse a check-in."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class ChangeType(str, Enum):
    ADD = "add"
    REMOVE = "remove"
    MODIFY = "modify"
