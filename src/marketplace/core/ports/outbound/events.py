from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, Union

from returns.result import Result

from marketplace.core.domain.model.errors import MarketplaceError
from marketplace.core.domain.model.money import Money
from marketplace.core.domain.model.order import OrderId, OrderStatus


@dataclass(frozen=True)
class OrderPlaced:
    order_id: OrderId
    total: Money
    line_count: int


@dataclass(frozen=True)
class OrderStatusChanged:
    order_id: OrderId
    status: OrderStatus


Event = Union[OrderPlaced, OrderStatusChanged]


class EventPublisher(Protocol):
    def publish(self, event: Event) -> Result[None, MarketplaceError]: ...
