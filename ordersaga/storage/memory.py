"""
In-memory order store

Provides a simple in-memory storage backend for development and testing.
Not suitable for production use as state is lost on process restart.
"""

import asyncio
import dataclasses
from datetime import UTC, datetime
from typing import Any

from ordersaga.core.exceptions import InvalidOrderError, NotFoundError
from ordersaga.storage.base import OrderStore
from ordersaga.types import Order, OrderStatus


class InMemoryOrderStore(OrderStore):
    """
    In-memory implementation of the order store

    Orders are immutable values, so replacing a dict entry under the lock is
    an atomic write: readers always get a complete Order.
    """

    def __init__(self):
        self._orders: dict[str, Order] = {}
        self._lock = asyncio.Lock()

    async def save(self, order: Order) -> None:
        """Save order to memory"""
        async with self._lock:
            self._orders[order.order_id] = order

    async def find_by_id(self, order_id: str) -> Order:
        """Load order from memory"""
        async with self._lock:
            order = self._orders.get(order_id)
            if order is None:
                msg = f"Order {order_id} not found"
                raise NotFoundError(msg, item_type="order", item_id=order_id)
            return order

    async def update_status(
        self,
        order_id: str,
        new_status: OrderStatus,
        *,
        expected_status: OrderStatus | None = None,
        paid_at: datetime | None = None,
    ) -> bool:
        """Compare-and-swap the order status"""
        async with self._lock:
            order = self._orders.get(order_id)
            if order is None:
                msg = f"Order {order_id} not found"
                raise NotFoundError(msg, item_type="order", item_id=order_id)

            if expected_status is not None and order.status is not expected_status:
                return False

            if new_status is OrderStatus.PAID and paid_at is None:
                paid_at = order.paid_at
                if paid_at is None:
                    msg = f"Order {order_id} cannot become paid without a payment timestamp"
                    raise InvalidOrderError(msg, field="paid_at")

            # replace() re-runs validation, so an illegal paid_at never lands
            self._orders[order_id] = dataclasses.replace(
                order, status=new_status, paid_at=paid_at
            )
            return True

    async def list_orders(
        self,
        status: OrderStatus | None = None,
        user_id: str | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> list[Order]:
        """List orders with filtering, newest first"""
        async with self._lock:
            results = [
                order
                for order in self._orders.values()
                if self._matches_filters(order, status, user_id)
            ]
            results.sort(key=lambda o: o.created_at, reverse=True)
            return results[offset : offset + limit]

    def _matches_filters(
        self, order: Order, status: OrderStatus | None, user_id: str | None
    ) -> bool:
        """Check if order matches the given filters."""
        if status is not None and order.status is not status:
            return False
        return user_id is None or order.user_id == user_id

    async def health_check(self) -> dict[str, Any]:
        """Check storage health"""
        async with self._lock:
            by_status: dict[str, int] = {}
            for order in self._orders.values():
                by_status[order.status.value] = by_status.get(order.status.value, 0) + 1

            return {
                "status": "healthy",
                "storage_type": "in_memory",
                "total_orders": len(self._orders),
                "by_status": by_status,
                "timestamp": datetime.now(UTC).isoformat(),
            }

    async def count(self) -> int:
        """Count total orders."""
        async with self._lock:
            return len(self._orders)

    async def clear_all(self) -> int:
        """
        Clear all orders (for testing purposes)

        Returns:
            Number of orders deleted
        """
        async with self._lock:
            count = len(self._orders)
            self._orders.clear()
            return count
