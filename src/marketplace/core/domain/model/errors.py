from __future__ import annotations

from dataclasses import dataclass


@dataclass(eq=False)
class MarketplaceError(Exception):
    message: str

    def __str__(self) -> str:
        return self.message


# ---- 400 -------------------------------------------------------------------


@dataclass(eq=False)
class ValidationError(MarketplaceError):
    pass


@dataclass(eq=False)
class MissingCustomerField(ValidationError):
    field: str


@dataclass(eq=False)
class EmptyCart(ValidationError):
    pass


@dataclass(eq=False)
class InvalidQuantity(ValidationError):
    index: int


@dataclass(eq=False)
class InvalidCartItem(ValidationError):
    index: int


@dataclass(eq=False)
class UnknownProduct(ValidationError):
    product_id: str


@dataclass(eq=False)
class AmountOutOfRange(ValidationError):
    pass


@dataclass(eq=False)
class InvalidProductField(ValidationError):
    field: str


@dataclass(eq=False)
class InvalidStatus(ValidationError):
    status: str


# ---- 404 -------------------------------------------------------------------


@dataclass(eq=False)
class NotFound(MarketplaceError):
    pass


@dataclass(eq=False)
class ProductNotFound(NotFound):
    product_id: str


@dataclass(eq=False)
class OrderNotFound(NotFound):
    order_id: str


# ---- auth ------------------------------------------------------------------


@dataclass(eq=False)
class AuthError(MarketplaceError):
    pass


@dataclass(eq=False)
class InvalidCredentials(AuthError):
    pass


@dataclass(eq=False)
class MissingToken(AuthError):
    pass


@dataclass(eq=False)
class InvalidToken(AuthError):
    pass


@dataclass(eq=False)
class Forbidden(AuthError):
    pass


# ---- boundary / infrastructure ---------------------------------------------


@dataclass(eq=False)
class RateLimited(MarketplaceError):
    retry_after: int


@dataclass(eq=False)
class PersistenceError(MarketplaceError):
    pass


@dataclass(eq=False)
class PublishError(MarketplaceError):
    pass
