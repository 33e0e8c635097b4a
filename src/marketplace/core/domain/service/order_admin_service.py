from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping

from returns.result import Failure, Result

from marketplace.core.domain.model.errors import (
    InvalidStatus,
    MarketplaceError,
    OrderNotFound,
)
from marketplace.core.domain.model.order import (
    OrderId,
    OrderStatus,
    now_utc,
    with_status,
)
from marketplace.core.ports.inbound.order_admin import (
    OrderAdminUseCase,
    UpdateOrderStatusCommand,
)
from marketplace.core.ports.outbound.documents import (
    Document,
    DocumentName,
    DocumentStore,
)
from marketplace.core.ports.outbound.events import EventPublisher, OrderStatusChanged

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OrderAdminDeps:
    documents: DocumentStore
    events: EventPublisher


@dataclass(frozen=True)
class OrderAdminService(OrderAdminUseCase):
    """
    Admin view of orders.

    Status changes are permissive: any of the four statuses may be set from
    any current status, including the same one and back to NEW.
    """

    deps: OrderAdminDeps

    def list_orders(self) -> Document:
        return self.deps.documents.load(DocumentName.ORDERS)

    def update_status(
        self, command: UpdateOrderStatusCommand
    ) -> Result[Mapping[str, Any], MarketplaceError]:
        status = OrderStatus.parse(command.status)
        if status is None:
            return Failure(
                InvalidStatus(message="Invalid status", status=str(command.status))
            )

        with self.deps.documents.lock(DocumentName.ORDERS):
            current = self.deps.documents.load(DocumentName.ORDERS)
            index = next(
                (
                    i
                    for i, o in enumerate(current.items)
                    if o.get("id") == command.order_id
                ),
                None,
            )
            if index is None:
                return Failure(
                    OrderNotFound(message="Not found", order_id=command.order_id)
                )

            item = with_status(current.items[index], status, now_utc())
            items = list(current.items)
            items[index] = item
            saved = self.deps.documents.save(DocumentName.ORDERS, items)

        return saved.map(lambda _: self._announce(item, status))

    def _announce(
        self, item: Mapping[str, Any], status: OrderStatus
    ) -> Mapping[str, Any]:
        published = self.deps.events.publish(
            OrderStatusChanged(OrderId(str(item["id"])), status)
        )
        if isinstance(published, Failure):
            logger.error(
                "status of order %s saved but event not published: %s",
                item["id"],
                published.failure(),
            )
        return item
