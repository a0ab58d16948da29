from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, query, query_one
from ..listing.query_builder import ListingQuery, build_shareholder_listing
from .model import NewShareholder, Shareholder
from .repository import ShareholderRepository


def _row_to_shareholder(r: dict) -> Shareholder:
    return Shareholder(
        id=int(r["id"]),
        shareholder_id=str(r["shareholder_id"]),
        name=r["name"],
        meeting_id=r.get("meeting_id"),
        owner_mailing_address=r.get("owner_mailing_address"),
        owner_city_state_zip=r.get("owner_city_state_zip"),
        is_new=bool(r.get("is_new")),
        designee=r.get("designee"),
        comment=r.get("comment"),
        checked_in_at=r.get("checked_in_at"),
        signature_hash=r.get("signature_hash"),
        created_at=r.get("created_at"),
    )


class MySQLShareholderRepository(ShareholderRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_page(self, q: ListingQuery) -> Sequence[dict]:
        stmts = build_shareholder_listing(q)
        rows = query(self._conn_factory, stmts.page_sql, stmts.page_params)
        for r in rows:
            r["is_new"] = bool(r.get("is_new"))
            r["total_properties"] = int(r.get("total_properties") or 0)
            r["checked_in_properties"] = int(r.get("checked_in_properties") or 0)
        return rows

    def count(self, q: ListingQuery) -> int:
        stmts = build_shareholder_listing(q)
        row = query_one(self._conn_factory, stmts.count_sql, stmts.count_params)
        return int(row["total"]) if row else 0

    def get(self, shareholder_id: str) -> Optional[Shareholder]:
        r = query_one(
            self._conn_factory,
            """
            SELECT id, shareholder_id, name, meeting_id, owner_mailing_address,
                   owner_city_state_zip, is_new, designee, comment, checked_in_at,
                   signature_hash, created_at
            FROM shareholders
            WHERE shareholder_id=%s
            """,
            (shareholder_id,),
        )
        return _row_to_shareholder(r) if r else None

    def exists(self, shareholder_id: str) -> bool:
        r = query_one(
            self._conn_factory,
            "SELECT 1 AS found FROM shareholders WHERE shareholder_id=%s",
            (shareholder_id,),
        )
        return r is not None

    def create(self, data: NewShareholder) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO shareholders(
                    shareholder_id, name, meeting_id, owner_mailing_address, owner_city_state_zip, is_new
                )
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (
                    data.shareholder_id,
                    data.name,
                    data.meeting_id,
                    data.owner_mailing_address,
                    data.owner_city_state_zip,
                    bool(data.is_new),
                ),
            )
            return int(cur.lastrowid)

    def update_name(self, shareholder_id: str, name: str) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE shareholders SET name=%s WHERE shareholder_id=%s", (name, shareholder_id))

    def delete_with_properties(self, shareholder_id: str) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM properties WHERE shareholder_id=%s", (shareholder_id,))
            removed = int(cur.rowcount)
            cur.execute("DELETE FROM shareholders WHERE shareholder_id=%s", (shareholder_id,))
            return removed

    def set_designee(self, shareholder_id: str, designee: Optional[str]) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE shareholders SET designee=%s WHERE shareholder_id=%s", (designee, shareholder_id))

    def set_comment(self, shareholder_id: str, comment: Optional[str]) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE shareholders SET comment=%s WHERE shareholder_id=%s", (comment, shareholder_id))
