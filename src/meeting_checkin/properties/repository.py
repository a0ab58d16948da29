from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..listing.query_builder import ListingQuery
from .model import Property, PropertyFields


class PropertyRepository(Protocol):
    def list_page(self, q: ListingQuery) -> Sequence[Property]:
        ...

    def count(self, q: ListingQuery) -> int:
        ...

    def get(self, property_id: int) -> Optional[Property]:
        ...

    def list_for_shareholder(self, shareholder_id: str) -> Sequence[Property]:
        ...

    def create(self, fields: PropertyFields) -> int:
        ...

    def update(self, property_id: int, fields: PropertyFields, *, checked_in: bool) -> None:
        ...

    def delete(self, property_id: int) -> None:
        ...
