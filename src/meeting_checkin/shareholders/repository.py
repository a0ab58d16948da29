from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..listing.query_builder import ListingQuery
from .model import NewShareholder, Shareholder


class ShareholderRepository(Protocol):
    def list_page(self, q: ListingQuery) -> Sequence[dict]:
        ...

    def count(self, q: ListingQuery) -> int:
        ...

    def get(self, shareholder_id: str) -> Optional[Shareholder]:
        ...

    def exists(self, shareholder_id: str) -> bool:
        ...

    def create(self, data: NewShareholder) -> int:
        ...

    def update_name(self, shareholder_id: str, name: str) -> None:
        ...

    def delete_with_properties(self, shareholder_id: str) -> int:
        ...

    def set_designee(self, shareholder_id: str, designee: Optional[str]) -> None:
        ...

    def set_comment(self, shareholder_id: str, comment: Optional[str]) -> None:
        ...
