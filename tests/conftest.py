from __future__ import annotations

from datetime import datetime
from typing import Optional

import httpx
import pytest
from flask import Flask

from meeting_checkin.checkin.model import MeetingCounters
from meeting_checkin.checkin.service import CheckInService
from meeting_checkin.container import Container
from meeting_checkin.core.enums import UndoRequestStatus
from meeting_checkin.database.orm import db
from meeting_checkin.identity.keycloak import KeycloakClient
from meeting_checkin.identity.service import AuthService, UserAdminService
from meeting_checkin.mailers.service import MailerService
from meeting_checkin.mailers.storage import MailerStorage
from meeting_checkin.main import create_app
from meeting_checkin.meetings.importer import ShareholderImportService
from meeting_checkin.meetings.service import MeetingService
from meeting_checkin.meetings.snapshots import SnapshotService
from meeting_checkin.progress.broker import ProgressBroker
from meeting_checkin.properties.model import Property
from meeting_checkin.properties.service import PropertyService
from meeting_checkin.reports.service import CheckInReportService
from meeting_checkin.shareholders.model import Shareholder
from meeting_checkin.shareholders.service import ShareholderService
from meeting_checkin.transfers.service import PropertyTransferService
from meeting_checkin.undo_requests.model import UndoRequest
from meeting_checkin.undo_requests.service import UndoRequestService

FIXED_NOW = datetime(2026, 3, 14, 9, 30, 0)


def fixed_clock() -> datetime:
    return FIXED_NOW


class InMemoryStore:
    """Rows shared by the in-memory repositories below."""

    def __init__(self):
        self.shareholders: dict[str, dict] = {}
        self.properties: dict[int, dict] = {}
        self.meetings: dict[int, dict] = {}
        self._next_property_id = 1
        self._next_shareholder_pk = 1

    def add_meeting(self, meeting_id: int, *, total_shareholders: int = 0, checked_in: int = 0) -> None:
        self.meetings[meeting_id] = {"total_shareholders": total_shareholders, "checked_in": checked_in}

    def add_shareholder(
        self,
        shareholder_id: str,
        name: str,
        *,
        meeting_id: Optional[str] = "1",
        designee: Optional[str] = None,
        comment: Optional[str] = None,
    ) -> None:
        self.shareholders[shareholder_id] = {
            "id": self._next_shareholder_pk,
            "shareholder_id": shareholder_id,
            "name": name,
            "meeting_id": meeting_id,
            "owner_mailing_address": None,
            "owner_city_state_zip": None,
            "is_new": False,
            "designee": designee,
            "comment": comment,
            "checked_in_at": None,
            "signature_image": None,
            "signature_hash": None,
        }
        self._next_shareholder_pk += 1

    def add_property(self, shareholder_id: str, account: str, *, checked_in: bool = False, **fields) -> int:
        pid = self._next_property_id
        self._next_property_id += 1
        row = {f: None for f in Property.__dataclass_fields__}
        row.update(fields)
        row.update({"id": pid, "account": account, "shareholder_id": shareholder_id, "checked_in": checked_in})
        self.properties[pid] = row
        return pid

    def properties_of(self, shareholder_id: str) -> list[dict]:
        return [p for p in self.properties.values() if p["shareholder_id"] == shareholder_id]


def _matches(row: dict, columns, term: Optional[str]) -> bool:
    if term is None:
        return True
    needle = term.lower()
    return any(needle in str(row.get(c) or "").lower() for c in columns)


class InMemoryShareholderRepo:
    def __init__(self, store: InMemoryStore):
        self.store = store

    def _filtered(self, q):
        rows = []
        for s in self.store.shareholders.values():
            props = self.store.properties_of(s["shareholder_id"])
            checked = sum(1 for p in props if p["checked_in"])
            if not _matches(s, ("name", "shareholder_id"), q.search_term):
                continue
            if q.checked_in is not None and (checked > 0) != q.checked_in:
                continue
            if q.shareholder_id and s["shareholder_id"] != q.shareholder_id:
                continue
            rows.append({**s, "total_properties": len(props), "checked_in_properties": checked})
        return sorted(rows, key=lambda r: (r["name"], r["id"]))

    def list_page(self, q):
        rows = self._filtered(q)
        return [
            {k: v for k, v in r.items() if k not in {"signature_image", "comment", "signature_hash"}}
            for r in rows[q.offset:q.offset + q.page_size]
        ]

    def count(self, q):
        return len(self._filtered(q))

    def get(self, shareholder_id):
        s = self.store.shareholders.get(shareholder_id)
        if not s:
            return None
        return Shareholder(**{k: v for k, v in s.items() if k != "signature_image"})

    def exists(self, shareholder_id):
        return shareholder_id in self.store.shareholders

    def create(self, data):
        self.store.add_shareholder(data.shareholder_id, data.name, meeting_id=data.meeting_id)
        row = self.store.shareholders[data.shareholder_id]
        row.update(
            owner_mailing_address=data.owner_mailing_address,
            owner_city_state_zip=data.owner_city_state_zip,
            is_new=data.is_new,
        )
        return row["id"]

    def update_name(self, shareholder_id, name):
        self.store.shareholders[shareholder_id]["name"] = name

    def delete_with_properties(self, shareholder_id):
        doomed = [pid for pid, p in self.store.properties.items() if p["shareholder_id"] == shareholder_id]
        for pid in doomed:
            del self.store.properties[pid]
        self.store.shareholders.pop(shareholder_id, None)
        return len(doomed)

    def set_designee(self, shareholder_id, designee):
        self.store.shareholders[shareholder_id]["designee"] = designee

    def set_comment(self, shareholder_id, comment):
        self.store.shareholders[shareholder_id]["comment"] = comment


class InMemoryPropertyRepo:
    search_columns = ("account", "service_address", "customer_name", "owner_name", "resident_name")

    def __init__(self, store: InMemoryStore):
        self.store = store

    def _filtered(self, q):
        rows = [
            p
            for p in self.store.properties.values()
            if _matches(p, self.search_columns, q.search_term)
            and (q.checked_in is None or p["checked_in"] == q.checked_in)
            and (not q.shareholder_id or p["shareholder_id"] == q.shareholder_id)
        ]
        return sorted(rows, key=lambda p: p["account"])

    def list_page(self, q):
        return [Property(**p) for p in self._filtered(q)[q.offset:q.offset + q.page_size]]

    def count(self, q):
        return len(self._filtered(q))

    def get(self, property_id):
        p = self.store.properties.get(int(property_id))
        return Property(**p) if p else None

    def list_for_shareholder(self, shareholder_id):
        return [Property(**p) for p in sorted(self.store.properties_of(shareholder_id), key=lambda p: p["account"])]

    def create(self, fields):
        data = dict(fields.__dict__)
        account = data.pop("account")
        shareholder_id = data.pop("shareholder_id")
        return self.store.add_property(shareholder_id, account, **data)

    def update(self, property_id, fields, *, checked_in):
        self.store.properties[int(property_id)].update(fields.__dict__, checked_in=checked_in)

    def delete(self, property_id):
        self.store.properties.pop(int(property_id), None)


class InMemoryCheckInRepo:
    def __init__(self, store: InMemoryStore):
        self.store = store

    def property_counts(self, shareholder_id):
        props = self.store.properties_of(shareholder_id)
        return len(props), sum(1 for p in props if p["checked_in"])

    def meeting_id_for(self, shareholder_id):
        s = self.store.shareholders.get(shareholder_id)
        return s["meeting_id"] if s else None

    def _meeting(self, shareholder_id):
        meeting_id = self.meeting_id_for(shareholder_id)
        if meeting_id and meeting_id.isdigit():
            return self.store.meetings.get(int(meeting_id))
        return None

    def mark_checked_in(self, shareholder_id, *, checked_in_at, signature):
        updated = 0
        for p in self.store.properties_of(shareholder_id):
            if not p["checked_in"]:
                p["checked_in"] = True
                updated += 1
        s = self.store.shareholders.get(shareholder_id)
        if s:
            s["checked_in_at"] = checked_in_at
            if signature:
                s["signature_image"] = signature.image
                s["signature_hash"] = signature.hash
        meeting = self._meeting(shareholder_id)
        if meeting is not None and updated:
            meeting["checked_in"] += 1
        return updated

    def clear_check_in(self, shareholder_id, *, was_checked_in):
        props = self.store.properties_of(shareholder_id)
        for p in props:
            p["checked_in"] = False
        s = self.store.shareholders.get(shareholder_id)
        if s:
            s.update(checked_in_at=None, signature_image=None, signature_hash=None)
        meeting = self._meeting(shareholder_id)
        if meeting is not None and was_checked_in:
            meeting["checked_in"] = max(meeting["checked_in"] - 1, 0)
        return len(props)

    def reset_all(self):
        updated = 0
        for p in self.store.properties.values():
            if p["checked_in"]:
                p["checked_in"] = False
                updated += 1
        for s in self.store.shareholders.values():
            s.update(checked_in_at=None, signature_image=None, signature_hash=None)
        for m in self.store.meetings.values():
            m["checked_in"] = 0
        return updated

    def meeting_counters(self, meeting_id):
        m = self.store.meetings.get(int(meeting_id)) if str(meeting_id).isdigit() else None
        if m is None:
            return None
        return MeetingCounters(
            meeting_id=int(meeting_id),
            total_shareholders=m["total_shareholders"],
            checked_in=m["checked_in"],
        )


class InMemoryUndoRequestRepo:
    def __init__(self):
        self.rows: dict[int, UndoRequest] = {}
        self._next_id = 1

    def create(self, *, shareholder_id, shareholder_name, requested_by, reason):
        rid = self._next_id
        self._next_id += 1
        self.rows[rid] = UndoRequest(
            id=rid,
            shareholder_id=shareholder_id,
            shareholder_name=shareholder_name,
            requested_by=requested_by,
            requested_at=datetime(2026, 3, 14, 9, 0, rid),
            status=UndoRequestStatus.PENDING,
            reason=reason,
        )
        return rid

    def get(self, request_id):
        return self.rows.get(int(request_id))

    def list_by_status(self, *, status=None):
        rows = [r for r in self.rows.values() if status is None or r.status == status]
        return sorted(rows, key=lambda r: r.requested_at, reverse=True)

    def decide(self, *, request_id, status, decided_by, decided_at):
        req = self.rows.get(int(request_id))
        if not req or req.status != UndoRequestStatus.PENDING:
            return False
        self.rows[req.id] = UndoRequest(
            id=req.id,
            shareholder_id=req.shareholder_id,
            shareholder_name=req.shareholder_name,
            requested_by=req.requested_by,
            requested_at=req.requested_at,
            status=status,
            approved_by=decided_by,
            approved_at=decided_at,
            reason=req.reason,
        )
        return True


@pytest.fixture
def store() -> InMemoryStore:
    s = InMemoryStore()
    s.add_meeting(1, total_shareholders=2)
    s.add_shareholder("100001", "ALICE ANDERSON", designee="BOB ANDERSON", comment="Prefers email")
    s.add_property("100001", "0000000001-00", service_address="1 MAIN ST", owner_name="ALICE ANDERSON")
    s.add_property("100001", "0000000002-00", service_address="3 ELM ST", owner_name="ALICE ANDERSON")
    s.add_shareholder("100002", "CARL CARTER")
    s.add_property("100002", "0000000003-00", service_address="5 OAK AVE", owner_name="CARL CARTER")
    return s


@pytest.fixture
def shareholders_repo(store) -> InMemoryShareholderRepo:
    return InMemoryShareholderRepo(store)


@pytest.fixture
def properties_repo(store) -> InMemoryPropertyRepo:
    return InMemoryPropertyRepo(store)


@pytest.fixture
def checkin_repo(store) -> InMemoryCheckInRepo:
    return InMemoryCheckInRepo(store)


@pytest.fixture
def undo_requests_repo() -> InMemoryUndoRequestRepo:
    return InMemoryUndoRequestRepo()


@pytest.fixture
def checkin_service(checkin_repo) -> CheckInService:
    return CheckInService(checkin_repo, clock=fixed_clock)


@pytest.fixture
def shareholder_service(shareholders_repo, properties_repo) -> ShareholderService:
    return ShareholderService(shareholders_repo, properties_repo)


@pytest.fixture
def orm_app():
    """A Flask app bound to an empty in-memory SQLite database."""

    app = Flask(__name__)
    app.config["SQLALCHEMY_DATABASE_URI"] = "sqlite://"
    app.config["TESTING"] = True
    db.init_app(app)
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


class KeycloakStub:
    """Answers the handful of Keycloak endpoints the app calls."""

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self.users = [
            {"id": "u-1", "username": "jdoe", "firstName": "Jane", "lastName": "Doe", "email": "jdoe@example.com",
             "attributes": {"role": ["admin"]}},
        ]

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        if path.endswith("/protocol/openid-connect/token"):
            form = dict(httpx.QueryParams(request.content.decode()))
            if form.get("grant_type") == "password" and form.get("password") != "secret":
                return httpx.Response(401, json={"error": "invalid_grant", "error_description": "Invalid user credentials"})
            return httpx.Response(200, json={"access_token": "header.e30.sig"})
        if path.endswith("/protocol/openid-connect/userinfo"):
            return httpx.Response(
                200, json={"sub": "u-1", "name": "Jane Doe", "email": "jdoe@example.com", "isAdmin": "true"}
            )
        if path.endswith("/users") and request.method == "GET":
            return httpx.Response(200, json=self.users)
        if path.endswith("/users") and request.method == "POST":
            return httpx.Response(201, headers={"Location": f"{request.url}/u-2"})
        if "/users/" in path:
            return httpx.Response(204)
        return httpx.Response(404)


@pytest.fixture
def keycloak_stub() -> KeycloakStub:
    return KeycloakStub()


@pytest.fixture
def keycloak_client(keycloak_stub) -> KeycloakClient:
    return KeycloakClient(
        issuer="http://keycloak.test/realms/test-realm",
        realm="test-realm",
        client_id="meeting-checkin",
        client_secret="test-client-secret",
        transport=httpx.MockTransport(keycloak_stub),
    )


@pytest.fixture
def container(
    shareholders_repo, properties_repo, checkin_repo, undo_requests_repo, keycloak_client, tmp_path
) -> Container:
    checkin_service = CheckInService(checkin_repo, clock=fixed_clock)
    meeting_service = MeetingService(clock=fixed_clock)
    snapshot_service = SnapshotService(clock=fixed_clock)
    storage = MailerStorage(str(tmp_path / "mailers"))
    progress = ProgressBroker(keepalive_seconds=1)
    return Container(
        db_config={"host": "localhost", "user": "test", "password": "", "database": "test"},
        shareholders_repo=shareholders_repo,
        properties_repo=properties_repo,
        checkin_repo=checkin_repo,
        undo_requests_repo=undo_requests_repo,
        shareholder_service=ShareholderService(shareholders_repo, properties_repo),
        property_service=PropertyService(properties_repo, shareholders_repo),
        checkin_service=checkin_service,
        undo_request_service=UndoRequestService(undo_requests_repo, checkin_service, clock=fixed_clock),
        meeting_service=meeting_service,
        snapshot_service=snapshot_service,
        import_service=ShareholderImportService(meeting_service, snapshot_service),
        transfer_service=PropertyTransferService(clock=fixed_clock),
        report_service=CheckInReportService(),
        mailer_service=MailerService(meeting_service, storage, progress),
        mailer_storage=storage,
        progress=progress,
        auth_service=AuthService(keycloak_client),
        user_admin_service=UserAdminService(keycloak_client),
    )


@pytest.fixture
def app(container):
    app = create_app(settings_module="config.testing", container=container)
    with app.app_context():
        db.create_all()
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


def _sign_in(client, *, admin: bool) -> None:
    with client.session_transaction() as sess:
        sess["user"] = {"id": "u-1", "name": "Jane Doe", "email": "jdoe@example.com", "isAdmin": admin}


@pytest.fixture
def staff_client(client):
    _sign_in(client, admin=False)
    return client


@pytest.fixture
def admin_client(client):
    _sign_in(client, admin=True)
    return client
