from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Protocol

from returns.result import Result

from marketplace.core.domain.model.errors import MarketplaceError
from marketplace.core.ports.outbound.documents import Document


@dataclass(frozen=True)
class UpdateOrderStatusCommand:
    order_id: str
    status: object  # raw input, trimmed and upper-cased before validation


class OrderAdminUseCase(Protocol):
    def list_orders(self) -> Document: ...

    def update_status(
        self, command: UpdateOrderStatusCommand
    ) -> Result[Mapping[str, Any], MarketplaceError]: ...
