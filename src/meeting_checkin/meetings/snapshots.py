"""Per-meeting snapshots of imported property data and the changes between
consecutive imports."""
from __future__ import annotations

from datetime import datetime
from typing import Any, Callable, Optional

from sqlalchemy import select

from ..common.datetime_utils import now_local
from ..core.enums import ChangeType
from ..database.orm import Property, Shareholder, Snapshot, db

# Columns compared between snapshots. Shareholder ids are regenerated on
# every import, so they are not part of the comparison.
TRACKED_FIELDS = (
    "owner_name",
    "owner_mailing_address",
    "owner_city_state_zip",
    "customer_name",
    "customer_mailing_address",
    "resident_name",
    "service_address",
)


def diff_snapshots(previous: dict[str, dict], current: dict[str, dict], *, timestamp: datetime) -> list[dict]:
    stamp = timestamp.isoformat()
    changes: list[dict] = []

    for account in sorted(current.keys() - previous.keys()):
        changes.append(
            {
                "type": ChangeType.ADD.value,
                "account": account,
                "ownerName": current[account].get("owner_name") or "",
                "details": "New property added",
                "timestamp": stamp,
            }
        )

    for account in sorted(previous.keys() - current.keys()):
        changes.append(
            {
                "type": ChangeType.REMOVE.value,
                "account": account,
                "ownerName": previous[account].get("owner_name") or "",
                "details": "Property removed",
                "timestamp": stamp,
            }
        )

    for account in sorted(current.keys() & previous.keys()):
        before, after = previous[account], current[account]
        edits = [
            f"{field}: {before.get(field) or ''} -> {after.get(field) or ''}"
            for field in TRACKED_FIELDS
            if (before.get(field) or "") != (after.get(field) or "")
        ]
        if edits:
            changes.append(
                {
                    "type": ChangeType.MODIFY.value,
                    "account": account,
                    "ownerName": after.get("owner_name") or "",
                    "details": "; ".join(edits),
                    "timestamp": stamp,
                }
            )

    return changes


class SnapshotService:
    def __init__(self, *, clock: Callable = now_local):
        self._clock = clock

    def current_data(self, meeting_id: str) -> dict[str, dict[str, Any]]:
        rows = db.session.execute(
            select(Property)
            .join(Shareholder, Shareholder.shareholder_id == Property.shareholder_id)
            .where(Shareholder.meeting_id == str(meeting_id))
            .order_by(Property.account)
        ).scalars()
        return {p.account: {field: getattr(p, field) for field in TRACKED_FIELDS} for p in rows}

    def latest(self, meeting_id: str, *, count: int = 1) -> list[Snapshot]:
        return list(
            db.session.execute(
                select(Snapshot)
                .where(Snapshot.meeting_id == str(meeting_id))
                .order_by(Snapshot.created_at.desc(), Snapshot.id.desc())
                .limit(count)
            ).scalars()
        )

    def record(self, meeting_id: str) -> Snapshot:
        """Add a snapshot of the meeting's current properties to the session.

        The caller owns the transaction.
        """

        now = self._clock()
        data = self.current_data(meeting_id)
        previous = self.latest(meeting_id)
        changes = diff_snapshots(previous[0].data or {}, data, timestamp=now) if previous else []

        snapshot = Snapshot(
            meeting_id=str(meeting_id),
            snapshot_date=now,
            data=data,
            changes=changes,
            created_at=now,
        )
        db.session.add(snapshot)
        db.session.flush()
        return snapshot

    def latest_changes(self, meeting_id: str) -> dict[str, Optional[Any]]:
        snapshots = self.latest(meeting_id, count=2)
        if len(snapshots) < 2:
            return {"changes": [], "snapshotDate": None}
        current = snapshots[0]
        return {"changes": current.changes or [], "snapshotDate": current.snapshot_date.isoformat()}
