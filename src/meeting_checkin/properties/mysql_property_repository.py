from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, query, query_one
from ..listing.query_builder import PROPERTY_COLUMNS, ListingQuery, build_property_listing
from .model import Property, PropertyFields
from .repository import PropertyRepository

_SELECT = "SELECT " + ", ".join(PROPERTY_COLUMNS) + " FROM properties"


def _row_to_property(r: dict) -> Property:
    return Property(
        id=int(r["id"]),
        account=r["account"],
        shareholder_id=str(r["shareholder_id"]),
        checked_in=bool(r.get("checked_in")),
        num_of=r.get("num_of"),
        customer_name=r.get("customer_name"),
        customer_mailing_address=r.get("customer_mailing_address"),
        city_state_zip=r.get("city_state_zip"),
        owner_name=r.get("owner_name"),
        owner_mailing_address=r.get("owner_mailing_address"),
        owner_city_state_zip=r.get("owner_city_state_zip"),
        resident_name=r.get("resident_name"),
        resident_mailing_address=r.get("resident_mailing_address"),
        resident_city_state_zip=r.get("resident_city_state_zip"),
        service_address=r.get("service_address"),
        created_at=r.get("created_at"),
    )


def _field_values(fields: PropertyFields) -> tuple:
    return (
        fields.account,
        fields.shareholder_id,
        fields.num_of,
        fields.customer_name,
        fields.customer_mailing_address,
        fields.city_state_zip,
        fields.owner_name,
        fields.owner_mailing_address,
        fields.owner_city_state_zip,
        fields.resident_name,
        fields.resident_mailing_address,
        fields.resident_city_state_zip,
        fields.service_address,
    )


class MySQLPropertyRepository(PropertyRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_page(self, q: ListingQuery) -> Sequence[Property]:
        stmts = build_property_listing(q)
        return [_row_to_property(r) for r in query(self._conn_factory, stmts.page_sql, stmts.page_params)]

    def count(self, q: ListingQuery) -> int:
        stmts = build_property_listing(q)
        row = query_one(self._conn_factory, stmts.count_sql, stmts.count_params)
        return int(row["total"]) if row else 0

    def get(self, property_id: int) -> Optional[Property]:
        r = query_one(self._conn_factory, f"{_SELECT} WHERE id=%s", (int(property_id),))
        return _row_to_property(r) if r else None

    def list_for_shareholder(self, shareholder_id: str) -> Sequence[Property]:
        rows = query(
            self._conn_factory,
            f"{_SELECT} WHERE shareholder_id=%s ORDER BY account ASC",
            (shareholder_id,),
        )
        return [_row_to_property(r) for r in rows]

    def create(self, fields: PropertyFields) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO properties(
                    account, shareholder_id, num_of, customer_name, customer_mailing_address,
                    city_state_zip, owner_name, owner_mailing_address, owner_city_state_zip,
                    resident_name, resident_mailing_address, resident_city_state_zip,
                    service_address, checked_in
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,FALSE)
                """,
                _field_values(fields),
            )
            return int(cur.lastrowid)

    def update(self, property_id: int, fields: PropertyFields, *, checked_in: bool) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE properties
                SET account=%s, shareholder_id=%s, num_of=%s, customer_name=%s,
                    customer_mailing_address=%s, city_state_zip=%s, owner_name=%s,
                    owner_mailing_address=%s, owner_city_state_zip=%s, resident_name=%s,
                    resident_mailing_address=%s, resident_city_state_zip=%s,
                    service_address=%s, checked_in=%s
                WHERE id=%s
                """,
                _field_values(fields) + (bool(checked_in), int(property_id)),
            )

    def delete(self, property_id: int) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM properties WHERE id=%s", (int(property_id),))
