from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Protocol

from returns.maybe import Maybe, Nothing
from returns.result import Result

from marketplace.core.domain.model.errors import MarketplaceError
from marketplace.core.ports.outbound.documents import Document


@dataclass(frozen=True)
class ProductDraft:
    name: object
    price: object
    logo: object = ""
    description: object = ""


@dataclass(frozen=True)
class ProductPatch:
    # Nothing = field absent from the request, keep the stored value
    product_id: str
    name: Maybe[object] = Nothing
    price: Maybe[object] = Nothing
    logo: Maybe[object] = Nothing
    description: Maybe[object] = Nothing


class CatalogUseCase(Protocol):
    def list_products(self) -> Document: ...

    def get_product(
        self, product_id: str
    ) -> Result[Mapping[str, Any], MarketplaceError]: ...

    def create_product(
        self, draft: ProductDraft
    ) -> Result[Mapping[str, Any], MarketplaceError]: ...

    def update_product(
        self, patch: ProductPatch
    ) -> Result[Mapping[str, Any], MarketplaceError]: ...

    def delete_product(self, product_id: str) -> Result[None, MarketplaceError]: ...
