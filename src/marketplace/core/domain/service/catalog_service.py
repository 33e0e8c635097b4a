from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping

from returns.maybe import Maybe
from returns.result import Failure, Result, Success

from marketplace.core.domain.model.errors import (
    InvalidProductField,
    MarketplaceError,
    ProductNotFound,
)
from marketplace.core.domain.model.money import Money, normalize_money
from marketplace.core.domain.model.product import (
    DESCRIPTION_MAX,
    LOGO_MAX,
    NAME_MAX,
    Product,
    ProductId,
    product_id_of,
)
from marketplace.core.domain.model.text import sanitize_text
from marketplace.core.ports.inbound.catalog import (
    CatalogUseCase,
    ProductDraft,
    ProductPatch,
)
from marketplace.core.ports.outbound.documents import (
    Document,
    DocumentName,
    DocumentStore,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CatalogDeps:
    documents: DocumentStore


@dataclass(frozen=True)
class CatalogService(CatalogUseCase):
    deps: CatalogDeps

    def list_products(self) -> Document:
        return self.deps.documents.load(DocumentName.PRODUCTS)

    def get_product(self, product_id: str) -> Result[Mapping[str, Any], MarketplaceError]:
        found = self.list_products().find(product_id)
        if found is None:
            return Failure(_not_found(product_id))
        return Success(found)

    def create_product(
        self, draft: ProductDraft
    ) -> Result[Mapping[str, Any], MarketplaceError]:
        name = sanitize_text(draft.name, NAME_MAX)
        validated = _validate_fields(name=name, price=draft.price)
        if isinstance(validated, Failure):
            return validated

        product = Product(
            product_id=ProductId.new(),
            name=name,
            price=validated.unwrap(),
            logo=sanitize_text(draft.logo, LOGO_MAX),
            description=sanitize_text(draft.description, DESCRIPTION_MAX),
        )
        item = product.to_dict()

        with self.deps.documents.lock(DocumentName.PRODUCTS):
            current = self.deps.documents.load(DocumentName.PRODUCTS)
            saved = self.deps.documents.save(
                DocumentName.PRODUCTS, (item, *current.items)
            )

        return saved.map(lambda _: _log_change("created", item))

    def update_product(
        self, patch: ProductPatch
    ) -> Result[Mapping[str, Any], MarketplaceError]:
        with self.deps.documents.lock(DocumentName.PRODUCTS):
            current = self.deps.documents.load(DocumentName.PRODUCTS)
            index = _index_of(current, patch.product_id)
            if index is None:
                return Failure(_not_found(patch.product_id))

            stored = current.items[index]
            name = _patched_text(patch.name, NAME_MAX, stored.get("name"))
            raw_price = patch.price.value_or(stored.get("price"))
            logo = _patched_text(patch.logo, LOGO_MAX, stored.get("logo"))
            description = _patched_text(
                patch.description, DESCRIPTION_MAX, stored.get("description")
            )

            validated = _validate_fields(name=name, price=raw_price)
            if isinstance(validated, Failure):
                return validated

            item = {
                **stored,
                "name": name,
                "price": validated.unwrap().to_json(),
                "logo": logo,
                "description": description,
            }
            items = list(current.items)
            items[index] = item
            saved = self.deps.documents.save(DocumentName.PRODUCTS, items)

        return saved.map(lambda _: _log_change("updated", item))

    def delete_product(self, product_id: str) -> Result[None, MarketplaceError]:
        with self.deps.documents.lock(DocumentName.PRODUCTS):
            current = self.deps.documents.load(DocumentName.PRODUCTS)
            remaining = [p for p in current.items if product_id_of(p) != product_id]
            if len(remaining) == len(current.items):
                # nothing removed: leave the document (and updatedAt) alone
                return Failure(_not_found(product_id))
            saved = self.deps.documents.save(DocumentName.PRODUCTS, remaining)

        logger.info("product deleted: %s", product_id)
        return saved.map(lambda _: None)


def _validate_fields(name: str, price: object) -> Result[Money, MarketplaceError]:
    if not name:
        return Failure(
            InvalidProductField(message="Invalid product field: name", field="name")
        )
    money = normalize_money(price).value_or(None)
    if money is None or money.is_negative():
        return Failure(
            InvalidProductField(message="Invalid product field: price", field="price")
        )
    return Success(money)


def _patched_text(value: Maybe[object], max_len: int, stored: Any) -> str:
    # a stored value is kept verbatim; only submitted values are sanitized
    return value.map(lambda v: sanitize_text(v, max_len)).value_or(
        stored if isinstance(stored, str) else ""
    )


def _index_of(document: Document, product_id: str) -> int | None:
    return next(
        (i for i, p in enumerate(document.items) if product_id_of(p) == product_id),
        None,
    )


def _not_found(product_id: str) -> ProductNotFound:
    return ProductNotFound(message="Not found", product_id=product_id)


def _log_change(action: str, item: Mapping[str, Any]) -> Mapping[str, Any]:
    logger.info("product %s: %s (%s)", action, item["id"], item["name"])
    return item
