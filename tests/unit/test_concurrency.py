"""
Concurrent confirm/cancel calls for the same order.

A slow inventory participant forces both callers past the PENDING check
before either writes, so the conditional status write is what decides.
"""

import asyncio

import pytest

from ordersaga import (
    ConflictStatusError,
    DependencyFailure,
    InMemoryInventoryParticipant,
    InventoryParticipant,
    OrderCoordinator,
    OrderStatus,
)
from ordersaga.core.ids import SequentialIdGenerator


class SlowInventory(InMemoryInventoryParticipant):
    """Yields to the event loop before every call."""

    def __init__(self, delay: float = 0.01):
        super().__init__()
        self.delay = delay

    async def confirm(self, item_id, freeze_id):
        await asyncio.sleep(self.delay)
        await super().confirm(item_id, freeze_id)

    async def release(self, item_id, freeze_id):
        await asyncio.sleep(self.delay)
        await super().release(item_id, freeze_id)


class PermissiveInventory(InventoryParticipant):
    """Accepts every call, even a release after a confirm."""

    def __init__(self, delay: float = 0.01):
        self.delay = delay
        self.calls = []

    async def confirm(self, item_id, freeze_id):
        await asyncio.sleep(self.delay)
        self.calls.append(("confirm", item_id, freeze_id))

    async def release(self, item_id, freeze_id):
        await asyncio.sleep(self.delay)
        self.calls.append(("release", item_id, freeze_id))


def build(store, inventory, recorder):
    return OrderCoordinator(
        store,
        inventory,
        id_generator=SequentialIdGenerator(),
        listeners=[recorder],
    )


class TestConcurrentConfirm:
    """Duplicate confirmation requests."""

    @pytest.mark.asyncio
    async def test_duplicate_confirms_transition_once(self, store, recorder):
        inventory = SlowInventory()
        inventory.add_freeze("42", "f-1")
        coordinator = build(store, inventory, recorder)
        order = await coordinator.create_order("1", "42", "f-1", 500)

        results = await asyncio.gather(
            coordinator.confirm_pay(order.order_id),
            coordinator.confirm_pay(order.order_id),
            coordinator.confirm_pay(order.order_id),
        )

        assert all(r.status == OrderStatus.PAID for r in results)
        assert len({r.paid_at for r in results}) == 1
        assert len(recorder.of_kind("transitioned")) == 1
        assert len(recorder.of_kind("skipped")) == 2
        assert (await store.find_by_id(order.order_id)).status == OrderStatus.PAID

    @pytest.mark.asyncio
    async def test_duplicate_cancels_transition_once(self, store, recorder):
        inventory = SlowInventory()
        inventory.add_freeze("42", "f-1")
        coordinator = build(store, inventory, recorder)
        order = await coordinator.create_order("1", "42", "f-1", 500)

        results = await asyncio.gather(
            coordinator.cancel_order(order.order_id),
            coordinator.cancel_order(order.order_id),
        )

        assert all(r.status == OrderStatus.CANCELED for r in results)
        assert len(recorder.of_kind("transitioned")) == 1


class TestConfirmRacingCancel:
    """A confirmation and a cancellation for the same order."""

    @pytest.mark.asyncio
    async def test_inventory_rejects_the_loser(self, store, recorder):
        inventory = SlowInventory()
        inventory.add_freeze("42", "f-1")
        coordinator = build(store, inventory, recorder)
        order = await coordinator.create_order("1", "42", "f-1", 500)

        confirmed, canceled = await asyncio.gather(
            coordinator.confirm_pay(order.order_id),
            coordinator.cancel_order(order.order_id),
            return_exceptions=True,
        )

        assert confirmed.status == OrderStatus.PAID
        assert isinstance(canceled, DependencyFailure)
        assert (await store.find_by_id(order.order_id)).status == OrderStatus.PAID

    @pytest.mark.asyncio
    async def test_conditional_write_detects_conflict(self, store, recorder):
        inventory = PermissiveInventory()
        coordinator = build(store, inventory, recorder)
        order = await coordinator.create_order("1", "42", "f-1", 500)

        confirmed, canceled = await asyncio.gather(
            coordinator.confirm_pay(order.order_id),
            coordinator.cancel_order(order.order_id),
            return_exceptions=True,
        )

        # Both reached inventory, only the first status write lands
        assert len(inventory.calls) == 2
        assert confirmed.status == OrderStatus.PAID
        assert isinstance(canceled, ConflictStatusError)
        assert canceled.current_status == OrderStatus.PAID
        assert canceled.requested_status == OrderStatus.CANCELED

        stored = await store.find_by_id(order.order_id)
        assert stored.status == OrderStatus.PAID
        assert stored.paid_at is not None
        assert recorder.of_kind("failed") == [
            ("failed", order.order_id, OrderStatus.CANCELED, ConflictStatusError)
        ]


class TestIndependentOrders:
    """One coordinator serves many orders at once."""

    @pytest.mark.asyncio
    async def test_parallel_orders(self, store, recorder):
        inventory = SlowInventory(delay=0.001)
        for i in range(10):
            inventory.add_freeze("42", f"f-{i}")
        coordinator = build(store, inventory, recorder)

        orders = [
            await coordinator.create_order(str(i), "42", f"f-{i}", 100 * i) for i in range(10)
        ]
        await asyncio.gather(
            *(
                coordinator.confirm_pay(o.order_id) if i % 2 == 0 else coordinator.cancel_order(o.order_id)
                for i, o in enumerate(orders)
            )
        )

        for i, o in enumerate(orders):
            expected = OrderStatus.PAID if i % 2 == 0 else OrderStatus.CANCELED
            assert (await store.find_by_id(o.order_id)).status == expected
