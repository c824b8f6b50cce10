"""
Tests for lifecycle listeners and how the coordinator notifies them.
"""

import logging

import pytest

from ordersaga import (
    DependencyFailure,
    LoggingOrderListener,
    MetricsOrderListener,
    NotFoundError,
    Order,
    OrderCoordinator,
    OrderListener,
    OrderStatus,
)
from ordersaga.core.ids import SequentialIdGenerator
from ordersaga.monitoring.metrics import OrderMetrics


class ExplodingListener(OrderListener):
    async def on_order_created(self, order):
        raise RuntimeError("listener bug")

    async def on_order_transitioned(self, order, previous_status):
        raise RuntimeError("listener bug")


class SyncListener:
    """Duck-typed listener with plain methods and only one hook."""

    def __init__(self):
        self.created = []

    def on_order_created(self, order):
        self.created.append(order.order_id)


class TestCoordinatorNotifications:
    """Which hooks fire for which outcome."""

    @pytest.mark.asyncio
    async def test_full_lifecycle_events(self, coordinator, recorder):
        order = await coordinator.create_order("1", "42", "f-1", 500)
        await coordinator.confirm_pay(order.order_id)
        await coordinator.confirm_pay(order.order_id)

        assert recorder.events == [
            ("created", "order-1"),
            ("transitioned", "order-1", OrderStatus.PENDING, OrderStatus.PAID),
            ("skipped", "order-1", OrderStatus.PAID),
        ]

    @pytest.mark.asyncio
    async def test_failure_events(self, coordinator, recorder, inventory):
        order = await coordinator.create_order("1", "42", "f-1", 500)
        inventory.fail_next("release")

        with pytest.raises(DependencyFailure):
            await coordinator.cancel_order(order.order_id)
        with pytest.raises(NotFoundError):
            await coordinator.confirm_pay("missing")

        assert recorder.of_kind("failed") == [
            ("failed", "order-1", OrderStatus.CANCELED, DependencyFailure),
            ("failed", "missing", OrderStatus.PAID, NotFoundError),
        ]

    @pytest.mark.asyncio
    async def test_listener_errors_do_not_break_operations(self, store, inventory, recorder):
        coordinator = OrderCoordinator(
            store,
            inventory,
            id_generator=SequentialIdGenerator(),
            listeners=[ExplodingListener(), recorder],
        )

        order = await coordinator.create_order("1", "42", "f-1", 500)
        paid = await coordinator.confirm_pay(order.order_id)

        assert paid.status == OrderStatus.PAID
        assert len(recorder.events) == 2

    @pytest.mark.asyncio
    async def test_sync_and_partial_listeners(self, store, inventory):
        listener = SyncListener()
        coordinator = OrderCoordinator(
            store, inventory, id_generator=SequentialIdGenerator(), listeners=[listener]
        )

        order = await coordinator.create_order("1", "42", "f-1", 500)
        await coordinator.confirm_pay(order.order_id)

        assert listener.created == ["order-1"]


class TestMetricsOrderListener:
    """Metrics listener feeding OrderMetrics."""

    @pytest.mark.asyncio
    async def test_counts_lifecycle(self, store, inventory):
        metrics = OrderMetrics()
        inventory.add_freeze("42", "f-2")
        coordinator = OrderCoordinator(
            store, inventory, listeners=[MetricsOrderListener(metrics)]
        )

        first = await coordinator.create_order("1", "42", "f-1", 500)
        second = await coordinator.create_order("1", "42", "f-2", 500)
        await coordinator.confirm_pay(first.order_id)
        await coordinator.confirm_pay(first.order_id)
        inventory.fail_next("release")
        with pytest.raises(DependencyFailure):
            await coordinator.cancel_order(second.order_id)
        await coordinator.cancel_order(second.order_id)

        snapshot = metrics.get_metrics()
        assert snapshot["total_created"] == 2
        assert snapshot["total_paid"] == 1
        assert snapshot["total_canceled"] == 1
        assert snapshot["total_skipped"] == 1
        assert snapshot["errors_by_type"] == {"DependencyFailure": 1}
        assert snapshot["confirmation_rate"] == "50.00%"

    def test_defaults_to_in_memory_metrics(self):
        assert isinstance(MetricsOrderListener().metrics, OrderMetrics)


class TestLoggingOrderListener:
    """Logging listener output."""

    @pytest.mark.asyncio
    async def test_logs_transitions(self, store, inventory, caplog):
        coordinator = OrderCoordinator(
            store,
            inventory,
            id_generator=SequentialIdGenerator(),
            listeners=[LoggingOrderListener()],
        )

        with caplog.at_level(logging.INFO, logger="ordersaga.lifecycle"):
            order = await coordinator.create_order("1", "42", "f-1", 500)
            await coordinator.confirm_pay(order.order_id)

        messages = [r.getMessage() for r in caplog.records if r.name == "ordersaga.lifecycle"]
        assert "Order created: order-1" in messages
        assert "Order order-1: pending → paid" in messages

    @pytest.mark.asyncio
    async def test_logs_failures_as_warning(self, store, inventory, caplog):
        listener = LoggingOrderListener()

        with caplog.at_level(logging.WARNING, logger="ordersaga.lifecycle"):
            await listener.on_transition_failed(
                "order-1", OrderStatus.PAID, DependencyFailure("freeze expired")
            )

        record = caplog.records[-1]
        assert record.levelno == logging.WARNING
        assert record.error_type == "DependencyFailure"
        assert "paid failed" in record.getMessage()

    @pytest.mark.asyncio
    async def test_custom_logger(self):
        class Collecting:
            def __init__(self):
                self.lines = []

            def info(self, msg, *args, **kwargs):
                self.lines.append(msg)

        custom = Collecting()
        listener = LoggingOrderListener(logger=custom)
        await listener.on_order_created(
            Order(order_id="o", user_id="u", item_id="i", freeze_id="f", price=1)
        )
        assert custom.lines == ["Order created: o"]
