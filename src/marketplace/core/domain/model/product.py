from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping
from uuid import uuid4

from marketplace.core.domain.model.money import Money

NAME_MAX = 120
LOGO_MAX = 600
DESCRIPTION_MAX = 2000


@dataclass(frozen=True)
class ProductId:
    value: str

    @staticmethod
    def new() -> "ProductId":
        return ProductId(str(uuid4()))


@dataclass(frozen=True)
class Product:
    product_id: ProductId
    name: str
    price: Money
    logo: str
    description: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.product_id.value,
            "name": self.name,
            "price": self.price.to_json(),
            "logo": self.logo,
            "description": self.description,
        }


def product_id_of(raw: Mapping[str, Any]) -> str:
    return str(raw.get("id") or "")


# Demo catalog written when the products document does not exist yet.
DEMO_PRODUCTS: tuple[tuple[str, str, str, str], ...] = (
    (
        "Aurora Headphones",
        "129.99",
        "https://images.unsplash.com/photo-1518441902117-f0a06e2e2f93?auto=format&fit=crop&w=800&q=80",
        "Premium over-ear headphones with warm bass and long battery life.",
    ),
    (
        "Nebula Keyboard",
        "89.50",
        "https://images.unsplash.com/photo-1517336714731-489689fd1ca8?auto=format&fit=crop&w=800&q=80",
        "Mechanical keyboard with a clean, minimal aesthetic and satisfying switches.",
    ),
    (
        "Prism Smart Lamp",
        "54.00",
        "https://images.unsplash.com/photo-1504197885-609741792ce7?auto=format&fit=crop&w=800&q=80",
        "Mood lighting with scenes and schedules. Perfect for desks and bedrooms.",
    ),
)


def demo_products() -> tuple[Product, ...]:
    return tuple(
        Product(ProductId.new(), name, Money.of(price), logo, description)
        for name, price, logo, description in DEMO_PRODUCTS
    )
