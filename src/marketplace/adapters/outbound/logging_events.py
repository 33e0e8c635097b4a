from __future__ import annotations

import logging
from dataclasses import dataclass

from returns.result import Failure, Result, Success

from marketplace.core.domain.model.errors import MarketplaceError, PublishError
from marketplace.core.ports.outbound.events import (
    Event,
    EventPublisher,
    OrderPlaced,
    OrderStatusChanged,
)

logger = logging.getLogger(__name__)


@dataclass
class LoggingEventPublisher(EventPublisher):
    fail: bool = False

    def publish(self, event: Event) -> Result[None, MarketplaceError]:
        if self.fail:
            return Failure(PublishError(message="publisher is down"))

        if isinstance(event, OrderPlaced):
            logger.info(
                "[event] order_placed: %s total=%s lines=%d",
                event.order_id.value,
                event.total.amount,
                event.line_count,
            )
        elif isinstance(event, OrderStatusChanged):
            logger.info(
                "[event] order_status_changed: %s -> %s",
                event.order_id.value,
                event.status.value,
            )
        return Success(None)
