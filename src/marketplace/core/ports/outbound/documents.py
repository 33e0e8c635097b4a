from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, ContextManager, Mapping, Protocol, Sequence

from returns.result import Result

from marketplace.core.domain.model.errors import MarketplaceError


class DocumentName(str, Enum):
    PRODUCTS = "products"
    ORDERS = "orders"


@dataclass(frozen=True)
class Document:
    updated_at: str | None
    items: tuple[Mapping[str, Any], ...]

    def find(self, item_id: str) -> Mapping[str, Any] | None:
        return next((it for it in self.items if it.get("id") == item_id), None)

    def to_dict(self) -> dict[str, Any]:
        return {"updatedAt": self.updated_at, "items": [dict(it) for it in self.items]}


class DocumentStore(Protocol):
    """
    Whole-document persistence for ``products`` and ``orders``.

    ``load`` never fails: a missing or corrupt document reads as empty.
    A missing document has no ``updated_at``; a corrupt one reports the
    time its file was last modified.
    ``save`` replaces the document atomically and stamps ``updatedAt``.
    Read-modify-write sequences hold ``lock(name)`` so that writers inside
    one process do not overwrite each other.
    """

    def load(self, name: DocumentName) -> Document: ...

    def save(
        self, name: DocumentName, items: Sequence[Mapping[str, Any]]
    ) -> Result[Document, MarketplaceError]: ...

    def ensure(
        self, name: DocumentName, items: Sequence[Mapping[str, Any]]
    ) -> Document:
        """Create the document with ``items`` unless it already exists."""
        ...

    def lock(self, name: DocumentName) -> ContextManager[None]: ...
