"""
Order store interface.

The store is the single source of truth for order state. The coordinator
never caches orders between calls: it reads through find_by_id() and
finalizes orders with the conditional update_status() write.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any

from ordersaga.types import Order, OrderStatus


class OrderStore(ABC):
    """
    Abstract base class for order persistence.

    Implementations must never change order fields on their own; they only
    record what the coordinator hands them.

    Errors:
        NotFoundError: order id not present (find_by_id, update_status)
        PersistenceFailure: any storage-layer failure
    """

    @abstractmethod
    async def save(self, order: Order) -> None:
        """
        Persist the full state of an order, creating or overwriting it.

        The write must be atomic for the order: concurrent readers see either
        the previous state or the new one, never a mix.

        Args:
            order: Order to store
        """

    @abstractmethod
    async def find_by_id(self, order_id: str) -> Order:
        """
        Load an order.

        Args:
            order_id: Order identifier

        Returns:
            The stored order

        Raises:
            NotFoundError: If no order has this id
        """

    @abstractmethod
    async def update_status(
        self,
        order_id: str,
        new_status: OrderStatus,
        *,
        expected_status: OrderStatus | None = None,
        paid_at: datetime | None = None,
    ) -> bool:
        """
        Atomically change the status of an order.

        With expected_status set this is a compare-and-swap: the write only
        happens if the stored status still equals expected_status.

        Args:
            order_id: Order identifier
            new_status: Status to write
            expected_status: Required current status, or None for unconditional
            paid_at: Payment timestamp written together with the status

        Returns:
            True if the status was written, False if expected_status did
            not match the stored status

        Raises:
            NotFoundError: If no order has this id
            InvalidOrderError: If new_status is PAID and no payment timestamp
                is given or already stored
        """

    async def health_check(self) -> dict[str, Any]:
        """
        Check storage health.

        Override for backends with a real connection to probe.
        """
        return {"status": "healthy", "storage_type": type(self).__name__}

    # ==========================================================================
    # Context Manager Support
    # ==========================================================================

    async def __aenter__(self) -> "OrderStore":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def close(self) -> None:
        """
        Close the store and release resources.

        Override if your backend needs cleanup.
        """
