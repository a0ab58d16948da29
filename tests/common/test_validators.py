import pytest

from meeting_checkin.common.validators import (
    optional_text,
    parse_optional_bool,
    parse_page,
    parse_positive_int,
    require_non_empty,
)
from meeting_checkin.core.exceptions import ValidationError


def test_require_non_empty_strips_and_rejects_blank():
    assert require_non_empty("  100001 ", "shareholderId") == "100001"
    with pytest.raises(ValidationError, match="shareholderId is required"):
        require_non_empty("   ", "shareholderId")
    with pytest.raises(ValidationError):
        require_non_empty(None, "name")


def test_optional_text():
    assert optional_text(None) is None
    assert optional_text("  ") is None
    assert optional_text(" note ") == "note"


def test_parse_positive_int():
    assert parse_positive_int("7", "limit") == 7
    assert parse_positive_int(None, "limit", default=25) == 25
    with pytest.raises(ValidationError):
        parse_positive_int("0", "limit")
    with pytest.raises(ValidationError):
        parse_positive_int("x", "limit")
    with pytest.raises(ValidationError):
        parse_positive_int("", "limit")


def test_parse_page_caps_page_size():
    assert parse_page(None, None) == (1, 25)
    assert parse_page("3", "500") == (3, 100)


@pytest.mark.parametrize(
    "raw,expected",
    [(None, None), ("", None), (True, True), ("true", True), ("1", True), ("No", False), ("0", False)],
)
def test_parse_optional_bool(raw, expected):
    assert parse_optional_bool(raw, "checkedIn") is expected


def test_parse_optional_bool_rejects_unknown():
    with pytest.raises(ValidationError):
        parse_optional_bool("sometimes", "checkedIn")
