from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping, Tuple

from returns.pipeline import flow
from returns.pointfree import bind, map_
from returns.result import Failure, Result, Success

from marketplace.core.domain.model.errors import (
    AmountOutOfRange,
    EmptyCart,
    InvalidCartItem,
    InvalidQuantity,
    MarketplaceError,
    MissingCustomerField,
    UnknownProduct,
)
from marketplace.core.domain.model.money import normalize_money
from marketplace.core.domain.model.order import (
    QTY_MAX,
    QTY_MIN,
    Customer,
    LineItem,
    Order,
    OrderId,
    now_utc,
)
from marketplace.core.domain.model.product import product_id_of
from marketplace.core.domain.model.text import sanitize_text
from marketplace.core.ports.inbound.place_order import (
    OrderReceipt,
    PlaceOrderCommand,
    PlaceOrderLine,
    PlaceOrderUseCase,
)
from marketplace.core.ports.outbound.documents import DocumentName, DocumentStore
from marketplace.core.ports.outbound.events import EventPublisher, OrderPlaced

logger = logging.getLogger(__name__)

# (request field, max length)
CUSTOMER_FIELDS: Tuple[Tuple[str, int], ...] = (
    ("customerName", 120),
    ("customerEmail", 200),
    ("customerPhone", 60),
    ("customerAddress", 400),
)


@dataclass(frozen=True)
class PlaceOrderDeps:
    documents: DocumentStore
    events: EventPublisher


@dataclass(frozen=True)
class PlaceOrderContext:
    customer: Customer
    lines: Tuple[PlaceOrderLine, ...]


@dataclass(frozen=True)
class PlaceOrderService(PlaceOrderUseCase):
    deps: PlaceOrderDeps

    def place_order(
        self, command: PlaceOrderCommand
    ) -> Result[OrderReceipt, MarketplaceError]:
        return flow(
            command,
            _validate_command,
            bind(self._price_against_catalog),
            bind(self._persist),
            map_(self._publish),
            map_(_to_receipt),
        )

    def _price_against_catalog(
        self, ctx: PlaceOrderContext
    ) -> Result[Order, MarketplaceError]:
        catalog = self.deps.documents.load(DocumentName.PRODUCTS)
        products_by_id = {product_id_of(p): p for p in catalog.items}
        return _build_order(ctx, products_by_id)

    def _persist(self, order: Order) -> Result[Order, MarketplaceError]:
        with self.deps.documents.lock(DocumentName.ORDERS):
            orders = self.deps.documents.load(DocumentName.ORDERS)
            return self.deps.documents.save(
                DocumentName.ORDERS, (order.to_dict(), *orders.items)
            ).map(lambda _: order)

    def _publish(self, order: Order) -> Order:
        event = OrderPlaced(order.order_id, order.total(), len(order.items))
        published = self.deps.events.publish(event)
        if isinstance(published, Failure):
            # the order is already stored; a lost event must not fail checkout
            logger.error(
                "order %s stored but event not published: %s",
                order.order_id.value,
                published.failure(),
            )
        return order


# ---- pure helpers ----------------------------------------------------------


def _validate_command(
    cmd: PlaceOrderCommand,
) -> Result[PlaceOrderContext, MarketplaceError]:
    raw = (
        cmd.customer_name,
        cmd.customer_email,
        cmd.customer_phone,
        cmd.customer_address,
    )
    values = []
    for (field, max_len), value in zip(CUSTOMER_FIELDS, raw):
        text = sanitize_text(value, max_len)
        if not text:
            return Failure(
                MissingCustomerField(
                    message=f"Missing required customer field: {field}", field=field
                )
            )
        values.append(text)

    if not cmd.lines:
        return Failure(EmptyCart(message="Cart is empty"))

    return Success(PlaceOrderContext(customer=Customer(*values), lines=tuple(cmd.lines)))


def _parse_qty(raw: object) -> int | None:
    if isinstance(raw, bool):
        return None
    if isinstance(raw, float) and raw.is_integer():
        raw = int(raw)
    if not isinstance(raw, int):
        return None
    if not QTY_MIN <= raw <= QTY_MAX:
        return None
    return raw


def _build_order(
    ctx: PlaceOrderContext, products_by_id: Mapping[str, Mapping[str, Any]]
) -> Result[Order, MarketplaceError]:
    items = []
    for i, ln in enumerate(ctx.lines):
        qty = _parse_qty(ln.qty)
        if qty is None:
            return Failure(
                InvalidQuantity(
                    message=f"items[{i}].qty must be an integer between {QTY_MIN} and {QTY_MAX}",
                    index=i,
                )
            )

        pid = (ln.product_id or "").strip()
        if not pid:
            return Failure(
                InvalidCartItem(message=f"items[{i}].productId is required", index=i)
            )

        product = products_by_id.get(pid)
        unit_price = (
            normalize_money(product.get("price")).value_or(None)
            if product is not None
            else None
        )
        if product is None or unit_price is None:
            return Failure(
                UnknownProduct(message=f"Product not found: {pid}", product_id=pid)
            )

        items.append(
            LineItem(
                product_id=pid,
                name=str(product.get("name") or ""),
                unit_price=unit_price,
                qty=qty,
            )
        )

    order = Order(
        order_id=OrderId.new(),
        customer=ctx.customer,
        items=tuple(items),
        created_at=now_utc(),
    )
    amounts = [it.line_total() for it in order.items] + [order.total()]
    if not all(m.is_representable() for m in amounts):
        return Failure(AmountOutOfRange(message="Order total is out of range"))
    return Success(order)


def _to_receipt(order: Order) -> OrderReceipt:
    return OrderReceipt(order_id=order.order_id, total=order.total())
