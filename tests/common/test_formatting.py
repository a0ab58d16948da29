from datetime import datetime

import pytest

from meeting_checkin.common.datetime_utils import parse_iso_datetime
from meeting_checkin.common.formatting import format_account, format_city_state_zip, upper_text
from meeting_checkin.common.serialization import camelize, to_camel
from meeting_checkin.core.enums import UndoRequestStatus
from meeting_checkin.undo_requests.model import UndoRequest


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("1", "0000000001-00"),
        (" 12345 ", "0000012345-00"),
        ("0000000007-01", "0000000007-01"),
    ],
)
def test_format_account(raw, expected):
    assert format_account(raw) == expected


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("MINOTND58701", "MINOT ND 58701"),
        ("minot, nd   58701", "MINOT ND 58701"),
        ("Bismarck ND 58501", "BISMARCK ND 58501"),
        ("", ""),
        (None, ""),
        ("UNKNOWNXX12345", "UNKNOWNXX12345"),
    ],
)
def test_format_city_state_zip(raw, expected):
    assert format_city_state_zip(raw) == expected


def test_upper_text():
    assert upper_text("  jane doe ") == "JANE DOE"
    assert upper_text(None) == ""


def test_to_camel():
    assert to_camel("owner_city_state_zip") == "ownerCityStateZip"
    assert to_camel("id") == "id"


def test_camelize_dataclass_converts_dates_and_enums():
    req = UndoRequest(
        id=1,
        shareholder_id="100001",
        shareholder_name="ALICE",
        requested_by="staff@example.com",
        requested_at=datetime(2026, 3, 14, 9, 0),
        status=UndoRequestStatus.PENDING,
    )

    out = camelize(req)

    assert out["shareholderId"] == "100001"
    assert out["requestedAt"] == "2026-03-14T09:00:00"
    assert out["status"] == "pending"
    assert out["approvedBy"] is None


def test_parse_iso_datetime_accepts_date_and_timestamp():
    assert parse_iso_datetime("2026-05-01") == datetime(2026, 5, 1)
    assert parse_iso_datetime("2026-05-01T18:30:00") == datetime(2026, 5, 1, 18, 30)
    assert parse_iso_datetime("2026-05-01T18:30:00Z").utcoffset().total_seconds() == 0
