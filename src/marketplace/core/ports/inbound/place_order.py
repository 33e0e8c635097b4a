from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, Sequence

from returns.result import Result

from marketplace.core.domain.model.errors import MarketplaceError
from marketplace.core.domain.model.money import Money
from marketplace.core.domain.model.order import OrderId


@dataclass(frozen=True)
class PlaceOrderLine:
    product_id: str
    qty: int | float | None


@dataclass(frozen=True)
class PlaceOrderCommand:
    customer_name: str | None
    customer_email: str | None
    customer_phone: str | None
    customer_address: str | None
    lines: Sequence[PlaceOrderLine]


@dataclass(frozen=True)
class OrderReceipt:
    order_id: OrderId
    total: Money


class PlaceOrderUseCase(Protocol):
    def place_order(
        self, command: PlaceOrderCommand
    ) -> Result[OrderReceipt, MarketplaceError]: ...
