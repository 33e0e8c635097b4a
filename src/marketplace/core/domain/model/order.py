from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Iterable, Mapping, Tuple
from uuid import uuid4

from marketplace.core.domain.model.money import Money

QTY_MIN = 1
QTY_MAX = 999


@dataclass(frozen=True)
class OrderId:
    value: str

    @staticmethod
    def new() -> "OrderId":
        return OrderId(str(uuid4()))


class OrderStatus(str, Enum):
    NEW = "NEW"
    PROCESSING = "PROCESSING"
    FULFILLED = "FULFILLED"
    CANCELLED = "CANCELLED"

    @classmethod
    def parse(cls, raw: object) -> "OrderStatus | None":
        text = str(raw if raw is not None else "").strip().upper()
        try:
            return cls(text)
        except ValueError:
            return None


@dataclass(frozen=True)
class Customer:
    name: str
    email: str
    phone: str
    address: str


@dataclass(frozen=True)
class LineItem:
    """Priced snapshot of a product at checkout time."""

    product_id: str
    name: str
    unit_price: Money
    qty: int

    def line_total(self) -> Money:
        return self.unit_price * self.qty

    def to_dict(self) -> dict[str, Any]:
        return {
            "productId": self.product_id,
            "name": self.name,
            "unitPrice": self.unit_price.to_json(),
            "qty": self.qty,
            "lineTotal": self.line_total().to_json(),
        }


@dataclass(frozen=True)
class Order:
    order_id: OrderId
    customer: Customer
    items: Tuple[LineItem, ...]
    created_at: datetime
    status: OrderStatus = OrderStatus.NEW

    def total(self) -> Money:
        return fold_money(it.line_total() for it in self.items)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.order_id.value,
            "createdAt": to_iso(self.created_at),
            "status": self.status.value,
            "customer": {
                "name": self.customer.name,
                "email": self.customer.email,
                "phone": self.customer.phone,
                "address": self.customer.address,
            },
            "items": [it.to_dict() for it in self.items],
            "total": self.total().to_json(),
        }


def with_status(
    raw: Mapping[str, Any], status: OrderStatus, at: datetime
) -> dict[str, Any]:
    """Copy of a stored order with a new status; every other field is kept as is."""
    return {**raw, "status": status.value, "updatedAt": to_iso(at)}


def fold_money(values: Iterable[Money]) -> Money:
    total = Money.zero()
    for v in values:
        total = total + v
    return total


def now_utc() -> datetime:
    return datetime.now(timezone.utc)


def to_iso(at: datetime) -> str:
    # 2024-06-01T12:00:00.000Z
    return at.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace(
        "+00:00", "Z"
    )


def now_iso() -> str:
    return to_iso(now_utc())
