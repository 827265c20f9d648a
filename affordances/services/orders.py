from __future__ import annotations

import itertools
import logging
from datetime import datetime, timezone
from typing import Dict, List, Optional

from affordances.models.order import Order, OrderCreate, OrderStatus

logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# Store
# -----------------------------------------------------------------------------
class OrderStore:
    """In-memory order storage backing the example service."""

    def __init__(self) -> None:
        self._orders: Dict[int, Order] = {}
        self._ids = itertools.count(1)

    def add(self, order_in: OrderCreate) -> Order:
        order = Order(
            id=next(self._ids),
            item=order_in.item,
            quantity=order_in.quantity,
            status=OrderStatus.PLACED,
            created_at=datetime.now(timezone.utc),
        )
        self._orders[order.id] = order
        logger.info("Placed order %s", order.id)
        return order

    def get(self, order_id: int) -> Optional[Order]:
        return self._orders.get(order_id)

    def list(self) -> List[Order]:
        return list(self._orders.values())

    def save(self, order: Order) -> Order:
        self._orders[order.id] = order
        return order


# -----------------------------------------------------------------------------
# Dependency
# -----------------------------------------------------------------------------
_store = OrderStore()

def get_store() -> OrderStore:
    """
    FastAPI dependency to provide the order store.
    Override it in tests through ``app.dependency_overrides``.
    """
    return _store
