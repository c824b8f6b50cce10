"""
Order coordinator - the order state machine and its saga with inventory.

State Diagram:

                 confirm_pay()
    ┌─────────┐ ───────────────► ┌──────┐
    │ PENDING │                  │ PAID │      (terminal)
    └────┬────┘                  └──────┘
         │ cancel_order()
         ▼
    ┌──────────┐
    │ CANCELED │                               (terminal)
    └──────────┘

Each finalizing operation runs load → decide → inventory call → conditional
status write. The inventory call comes first so a failure leaves the order
PENDING and the whole operation can be retried; the inventory participant's
idempotency makes the repeated call harmless. The status write is a
compare-and-swap on PENDING, so of several concurrent callers exactly one
performs the transition and the others observe it.

Usage:
    >>> coordinator = OrderCoordinator(InMemoryOrderStore(), inventory)
    >>> order = await coordinator.create_order("1", "42", "f-1", 500)
    >>> order = await coordinator.confirm_pay(order.order_id)
    >>> order.status
    <OrderStatus.PAID: 'paid'>
"""

import dataclasses
import inspect
from collections.abc import Awaitable, Callable
from datetime import UTC, datetime
from typing import Any, TypeVar

from ordersaga.core.exceptions import (
    ConflictStatusError,
    DependencyFailure,
    OrderError,
    PersistenceFailure,
)
from ordersaga.core.ids import IdGenerator, uuid_generator
from ordersaga.core.logger import get_logger
from ordersaga.inventory.base import InventoryParticipant
from ordersaga.monitoring.logging import bind_order_context
from ordersaga.storage.base import OrderStore
from ordersaga.types import Order, OrderStatus

logger = get_logger(__name__)

T = TypeVar("T")


def _utc_now() -> datetime:
    return datetime.now(UTC)


def _as_id(value: Any) -> Any:
    """Integer user/item ids are stored in their decimal string form."""
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    return value


class OrderCoordinator:
    """
    Creates orders and drives them to PAID or CANCELED.

    The coordinator keeps no per-order state: the store is the source of
    truth and is read on every call. One instance can serve any number of
    concurrent callers.

    Args:
        store: Order persistence
        inventory: Saga counterpart holding the freezes
        id_generator: Produces new order ids (default: random UUID4 strings)
        clock: Returns the current time (default: aware UTC now)
        listeners: Lifecycle listeners, see ordersaga.listeners
    """

    def __init__(
        self,
        store: OrderStore,
        inventory: InventoryParticipant,
        *,
        id_generator: IdGenerator | None = None,
        clock: Callable[[], datetime] | None = None,
        listeners: list | None = None,
    ):
        self._store = store
        self._inventory = inventory
        self._id_generator = id_generator or uuid_generator()
        self._clock = clock or _utc_now
        self._listeners = list(listeners or [])

    # ==========================================================================
    # Operations
    # ==========================================================================

    async def create_order(
        self, user_id: str | int, item_id: str | int, freeze_id: str, price: int
    ) -> Order:
        """
        Place a new PENDING order backed by an existing freeze.

        Integer user and item ids are accepted and normalized to strings,
        so create_order(1, 42, "f-1", 500) stores user_id "1" and item_id "42".

        Raises:
            InvalidOrderError: If a field is empty or the price is negative
            PersistenceFailure: If the store write failed; the order may not exist
        """
        order = Order(
            order_id=self._id_generator(),
            user_id=_as_id(user_id),
            item_id=_as_id(item_id),
            freeze_id=freeze_id,
            price=price,
            status=OrderStatus.PENDING,
            created_at=self._clock(),
        )

        with bind_order_context(order.order_id, "create_order"):
            await self._store_call("save", order.order_id, self._store.save(order))
            logger.info(
                f"Order {order.order_id} created for item {order.item_id} (freeze {freeze_id})"
            )
            await self._notify_listeners("on_order_created", order)

        return order

    async def get_order(self, order_id: str) -> Order:
        """Read the current state of an order from the store."""
        return await self._store_call("find_by_id", order_id, self._store.find_by_id(order_id))

    async def confirm_pay(self, order_id: str) -> Order:
        """
        Confirm the freeze and mark the order PAID.

        Already finalized orders are returned unchanged without touching
        inventory. On any failure the order stays PENDING and the call can
        be retried as is.

        Raises:
            NotFoundError: If the order does not exist
            DependencyFailure: If the inventory confirm failed
            PersistenceFailure: If the store failed; inventory may already be confirmed
            ConflictStatusError: If a concurrent cancel won the status write
        """
        return await self._finalize(order_id, "confirm_pay", OrderStatus.PAID)

    async def cancel_order(self, order_id: str) -> Order:
        """
        Release the freeze and mark the order CANCELED.

        Mirror image of confirm_pay(), using the compensating release.

        Raises:
            NotFoundError: If the order does not exist
            DependencyFailure: If the inventory release failed
            PersistenceFailure: If the store failed; inventory may already be released
            ConflictStatusError: If a concurrent confirm won the status write
        """
        return await self._finalize(order_id, "cancel_order", OrderStatus.CANCELED)

    # ==========================================================================
    # Saga steps
    # ==========================================================================

    async def _finalize(self, order_id: str, operation: str, target: OrderStatus) -> Order:
        with bind_order_context(order_id, operation):
            try:
                return await self._run_transition(order_id, target)
            except OrderError as e:
                await self._notify_listeners("on_transition_failed", order_id, target, e)
                raise

    async def _run_transition(self, order_id: str, target: OrderStatus) -> Order:
        order = await self.get_order(order_id)

        if not order.is_pending:
            logger.debug(
                f"Order {order_id} already {order.status.value}, "
                f"skipping transition to {target.value}"
            )
            await self._notify_listeners("on_transition_skipped", order, target)
            return order

        await self._call_inventory(order, target)

        paid_at = self._clock() if target is OrderStatus.PAID else None
        applied = await self._store_call(
            "update_status",
            order_id,
            self._store.update_status(
                order_id, target, expected_status=OrderStatus.PENDING, paid_at=paid_at
            ),
        )

        if not applied:
            return await self._resolve_lost_race(order_id, target)

        updated = dataclasses.replace(order, status=target, paid_at=paid_at)
        logger.info(f"Order {order_id} transitioned pending → {target.value}")
        await self._notify_listeners("on_order_transitioned", updated, OrderStatus.PENDING)
        return updated

    async def _call_inventory(self, order: Order, target: OrderStatus) -> None:
        """Confirm or release the freeze behind the order."""
        if target is OrderStatus.PAID:
            operation, call = "confirm", self._inventory.confirm
        else:
            operation, call = "release", self._inventory.release

        try:
            await call(order.item_id, order.freeze_id)
        except DependencyFailure as e:
            logger.warning(f"Inventory {operation} failed for order {order.order_id}: {e}")
            raise
        except OrderError:
            raise
        except Exception as e:
            logger.warning(f"Inventory {operation} failed for order {order.order_id}: {e!r}")
            msg = f"Inventory {operation} failed: {e}"
            raise DependencyFailure(
                msg,
                operation=operation,
                item_id=order.item_id,
                freeze_id=order.freeze_id,
            ) from e

    async def _resolve_lost_race(self, order_id: str, target: OrderStatus) -> Order:
        """
        Handle a conditional write that found the order no longer PENDING.

        Another caller finalized the order between our load and our write.
        Reaching the same status is an idempotent success; reaching the
        opposite one means inventory and order disagree.
        """
        current = await self.get_order(order_id)

        if current.status is target:
            logger.debug(f"Order {order_id} was concurrently moved to {target.value}")
            await self._notify_listeners("on_transition_skipped", current, target)
            return current

        logger.error(
            f"Order {order_id} became {current.status.value} while {target.value} "
            f"was in flight; inventory and order state disagree"
        )
        raise ConflictStatusError(order_id, current.status, target)

    # ==========================================================================
    # Helpers
    # ==========================================================================

    async def _store_call(self, operation: str, order_id: str, call: Awaitable[T]) -> T:
        """Await a store call, normalizing unexpected errors to PersistenceFailure."""
        try:
            return await call
        except OrderError as e:
            if isinstance(e, PersistenceFailure):
                logger.warning(f"Store {operation} failed for order {order_id}: {e}")
            raise
        except Exception as e:
            logger.warning(f"Store {operation} failed for order {order_id}: {e!r}")
            msg = f"Order store {operation} failed: {e}"
            raise PersistenceFailure(msg, operation=operation, order_id=order_id) from e

    async def _notify_listeners(self, event_name: str, *args: Any) -> None:
        """Notify all listeners of an event."""
        for listener in self._listeners:
            try:
                handler = getattr(listener, event_name, None)
                if handler:
                    result = handler(*args)
                    if inspect.iscoroutine(result):
                        await result
            except Exception as e:
                logger.warning(f"Listener {type(listener).__name__}.{event_name} error: {e}")
