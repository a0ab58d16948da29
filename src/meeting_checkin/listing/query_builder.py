"""Filtered, paginated listing statements for properties and shareholders.

Each builder returns a page statement and a count statement that share the
same WHERE clause and parameter list, so the count always covers every row
any page of the listing can return.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Optional

from ..common.validators import parse_optional_bool, parse_page
from ..core.constants import DEFAULT_PAGE_SIZE
from ..core.exceptions import ValidationError

PROPERTY_COLUMNS = (
    "id",
    "account",
    "num_of",
    "customer_name",
    "customer_mailing_address",
    "city_state_zip",
    "owner_name",
    "owner_mailing_address",
    "owner_city_state_zip",
    "resident_name",
    "resident_mailing_address",
    "resident_city_state_zip",
    "service_address",
    "checked_in",
    "shareholder_id",
    "created_at",
)

PROPERTY_SEARCH_COLUMNS = ("account", "service_address", "customer_name", "owner_name", "resident_name")
SHAREHOLDER_SEARCH_COLUMNS = ("name", "shareholder_id")


@dataclass(frozen=True)
class ListingQuery:
    page: int = 1
    page_size: int = DEFAULT_PAGE_SIZE
    search: Optional[str] = None
    checked_in: Optional[bool] = None
    shareholder_id: Optional[str] = None

    def __post_init__(self):
        if self.page < 1:
            raise ValidationError("page must be at least 1")
        if self.page_size < 1:
            raise ValidationError("limit must be at least 1")

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size

    @property
    def search_term(self) -> Optional[str]:
        term = (self.search or "").strip()
        return term or None


@dataclass(frozen=True)
class ListingStatements:
    page_sql: str
    page_params: tuple[Any, ...]
    count_sql: str
    count_params: tuple[Any, ...]


def _search_clause(alias: str, columns: tuple[str, ...], term: str, params: list[Any]) -> str:
    pattern = f"%{term}%"
    parts = []
    for col in columns:
        parts.append(f"LOWER({alias}.{col}) LIKE LOWER(%s)")
        params.append(pattern)
    return "(" + " OR ".join(parts) + ")"


def _where(clauses: list[str]) -> str:
    return ("WHERE " + " AND ".join(clauses)) if clauses else ""


def build_property_listing(q: ListingQuery) -> ListingStatements:
    clauses: list[str] = []
    params: list[Any] = []

    if q.search_term is not None:
        clauses.append(_search_clause("p", PROPERTY_SEARCH_COLUMNS, q.search_term, params))
    if q.checked_in is not None:
        clauses.append("p.checked_in = %s")
        params.append(bool(q.checked_in))
    if q.shareholder_id:
        clauses.append("p.shareholder_id = %s")
        params.append(q.shareholder_id)

    where = _where(clauses)
    columns = ", ".join(f"p.{c}" for c in PROPERTY_COLUMNS)

    page_sql = f"SELECT {columns} FROM properties p {where} ORDER BY p.account ASC LIMIT %s OFFSET %s"
    count_sql = f"SELECT COUNT(*) AS total FROM properties p {where}"

    return ListingStatements(
        page_sql=page_sql,
        page_params=tuple(params + [q.page_size, q.offset]),
        count_sql=count_sql,
        count_params=tuple(params),
    )


def build_shareholder_listing(q: ListingQuery) -> ListingStatements:
    clauses: list[str] = []
    params: list[Any] = []

    if q.search_term is not None:
        clauses.append(_search_clause("s", SHAREHOLDER_SEARCH_COLUMNS, q.search_term, params))
    if q.checked_in is not None:
        exists = (
            "EXISTS (SELECT 1 FROM properties cp "
            "WHERE cp.shareholder_id = s.shareholder_id AND cp.checked_in = TRUE)"
        )
        clauses.append(exists if q.checked_in else f"NOT {exists}")
    if q.shareholder_id:
        clauses.append("s.shareholder_id = %s")
        params.append(q.shareholder_id)

    where = _where(clauses)

    page_sql = f"""
        SELECT s.id, s.shareholder_id, s.name, s.meeting_id,
               s.owner_mailing_address, s.owner_city_state_zip, s.is_new,
               s.designee, s.checked_in_at, s.created_at,
               (SELECT COUNT(*) FROM properties tp
                 WHERE tp.shareholder_id = s.shareholder_id) AS total_properties,
               (SELECT COUNT(*) FROM properties ip
                 WHERE ip.shareholder_id = s.shareholder_id AND ip.checked_in = TRUE) AS checked_in_properties
        FROM shareholders s
        {where}
        ORDER BY s.name ASC, s.id ASC
        LIMIT %s OFFSET %s
    """
    count_sql = f"SELECT COUNT(*) AS total FROM shareholders s {where}"

    return ListingStatements(
        page_sql=page_sql,
        page_params=tuple(params + [q.page_size, q.offset]),
        count_sql=count_sql,
        count_params=tuple(params),
    )


def total_pages(total: int, page_size: int) -> int:
    return math.ceil(total / page_size) if total else 0


def pagination(q: ListingQuery, total: int) -> dict:
    return {
        "page": q.page,
        "limit": q.page_size,
        "total": total,
        "totalPages": total_pages(total, q.page_size),
    }


def listing_query_from_args(args) -> ListingQuery:
    """Read ``page``, ``limit``, ``search``, ``checkedIn`` and ``shareholderId``
    from a query-string mapping."""

    page, page_size = parse_page(args.get("page"), args.get("limit"))
    return ListingQuery(
        page=page,
        page_size=page_size,
        search=args.get("search"),
        checked_in=parse_optional_bool(args.get("checkedIn"), "checkedIn"),
        shareholder_id=(args.get("shareholderId") or "").strip() or None,
    )
