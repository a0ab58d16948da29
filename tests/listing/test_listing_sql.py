"""Run the generated listing statements against SQLite to check what they
actually return."""
import pytest
from sqlalchemy import create_engine

from meeting_checkin.database.orm import Property, Shareholder, db
from meeting_checkin.listing.query_builder import ListingQuery, build_property_listing, build_shareholder_listing


@pytest.fixture
def engine():
    engine = create_engine("sqlite://")
    db.metadata.create_all(engine)
    with engine.begin() as conn:
        conn.execute(
            Shareholder.__table__.insert(),
            [
                {"shareholder_id": "100001", "name": "ALICE ANDERSON", "meeting_id": "1", "is_new": False},
                {"shareholder_id": "100002", "name": "BOB BAKER", "meeting_id": "1", "is_new": False},
                {"shareholder_id": "100003", "name": "CARL CARTER", "meeting_id": "1", "is_new": False},
            ],
        )
        conn.execute(
            Property.__table__.insert(),
            [
                {"account": f"{n:010d}-00", "shareholder_id": sid, "checked_in": checked,
                 "service_address": addr, "owner_name": owner}
                for n, sid, checked, addr, owner in [
                    (1, "100001", True, "1 MAIN ST", "ALICE ANDERSON"),
                    (2, "100001", True, "3 MAIN ST", "ALICE ANDERSON"),
                    (3, "100002", False, "5 ELM ST", "BOB BAKER"),
                    (4, "100003", False, "7 OAK AVE", "CARL CARTER"),
                    (5, "100003", False, "9 MAIN ST", "CARL CARTER"),
                ]
            ],
        )
    yield engine
    engine.dispose()


def _run(engine, sql, params):
    with engine.connect() as conn:
        return conn.exec_driver_sql(sql.replace("%s", "?"), tuple(params)).mappings().all()


def _page(engine, stmt):
    return _run(engine, stmt.page_sql, stmt.page_params)


def _count(engine, stmt):
    return _run(engine, stmt.count_sql, stmt.count_params)[0]["total"]


@pytest.mark.parametrize("search", [None, "main", "MAIN", "anderson", "nothing-matches"])
@pytest.mark.parametrize("checked_in", [None, True, False])
def test_property_count_covers_every_page(engine, search, checked_in):
    seen = []
    for page in range(1, 6):
        stmt = build_property_listing(ListingQuery(page=page, page_size=2, search=search, checked_in=checked_in))
        rows = _page(engine, stmt)
        assert _count(engine, stmt) >= len(rows)
        seen.extend(r["account"] for r in rows)

    stmt = build_property_listing(ListingQuery(search=search, checked_in=checked_in))
    assert _count(engine, stmt) == len(seen)
    assert seen == sorted(seen)


def test_property_search_matches_any_column(engine):
    rows = _page(engine, build_property_listing(ListingQuery(search="main")))

    assert [r["account"] for r in rows] == ["0000000001-00", "0000000002-00", "0000000005-00"]


def test_property_filter_by_shareholder(engine):
    stmt = build_property_listing(ListingQuery(shareholder_id="100003"))

    assert _count(engine, stmt) == 2
    assert {r["shareholder_id"] for r in _page(engine, stmt)} == {"100003"}


def test_shareholder_rows_carry_property_counts(engine):
    rows = _page(engine, build_shareholder_listing(ListingQuery()))

    assert [(r["name"], r["total_properties"], r["checked_in_properties"]) for r in rows] == [
        ("ALICE ANDERSON", 2, 2),
        ("BOB BAKER", 1, 0),
        ("CARL CARTER", 2, 0),
    ]


def test_shareholder_checked_in_filter(engine):
    checked = build_shareholder_listing(ListingQuery(checked_in=True))
    waiting = build_shareholder_listing(ListingQuery(checked_in=False))

    assert [r["shareholder_id"] for r in _page(engine, checked)] == ["100001"]
    assert _count(engine, waiting) == 2


def test_shareholder_search_by_id(engine):
    stmt = build_shareholder_listing(ListingQuery(search="100002"))

    assert [r["name"] for r in _page(engine, stmt)] == ["BOB BAKER"]
    assert _count(engine, stmt) == 1
