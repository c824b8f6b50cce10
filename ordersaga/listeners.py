"""
Order lifecycle listeners

Listeners observe the coordinator without taking part in it. Each hook may be
a plain or an async method; exceptions raised by a listener are logged and
never change the outcome of the operation that triggered it.

Usage:
    >>> from ordersaga.listeners import LoggingOrderListener, MetricsOrderListener
    >>> coordinator = OrderCoordinator(
    ...     store,
    ...     inventory,
    ...     listeners=[LoggingOrderListener(), MetricsOrderListener()],
    ... )
"""

from typing import Any

from ordersaga.core.logger import get_logger
from ordersaga.monitoring.metrics import OrderMetrics
from ordersaga.types import Order, OrderStatus


class OrderListener:
    """
    Base listener with no-op hooks. Override the ones you need.
    """

    async def on_order_created(self, order: Order) -> None:
        """Called after a new order was persisted."""

    async def on_order_transitioned(self, order: Order, previous_status: OrderStatus) -> None:
        """Called after an order left PENDING."""

    async def on_transition_skipped(self, order: Order, requested_status: OrderStatus) -> None:
        """Called when confirm/cancel found the order already finalized."""

    async def on_transition_failed(
        self, order_id: str, requested_status: OrderStatus, error: Exception
    ) -> None:
        """Called when confirm/cancel raised."""


class LoggingOrderListener(OrderListener):
    """Logs order lifecycle events."""

    def __init__(self, logger: Any = None):
        self.logger = logger or get_logger("ordersaga.lifecycle")

    async def on_order_created(self, order: Order) -> None:
        self.logger.info(
            f"Order created: {order.order_id}",
            extra={"order_id": order.order_id, "status": order.status.value},
        )

    async def on_order_transitioned(self, order: Order, previous_status: OrderStatus) -> None:
        self.logger.info(
            f"Order {order.order_id}: {previous_status.value} → {order.status.value}",
            extra={
                "order_id": order.order_id,
                "status": order.status.value,
                "previous_status": previous_status.value,
            },
        )

    async def on_transition_skipped(self, order: Order, requested_status: OrderStatus) -> None:
        self.logger.debug(
            f"Order {order.order_id} already {order.status.value}, "
            f"{requested_status.value} skipped",
            extra={"order_id": order.order_id, "status": order.status.value},
        )

    async def on_transition_failed(
        self, order_id: str, requested_status: OrderStatus, error: Exception
    ) -> None:
        self.logger.warning(
            f"Order {order_id}: {requested_status.value} failed - {error!s}",
            extra={"order_id": order_id, "error_type": type(error).__name__},
        )


class MetricsOrderListener(OrderListener):
    """
    Feeds lifecycle events into a metrics collector.

    Works with OrderMetrics (default) or PrometheusOrderMetrics; any object
    with record_created/record_transition/record_skipped/record_error fits.
    """

    def __init__(self, metrics: Any = None):
        self.metrics = metrics if metrics is not None else OrderMetrics()

    async def on_order_created(self, order: Order) -> None:
        self.metrics.record_created()

    async def on_order_transitioned(self, order: Order, previous_status: OrderStatus) -> None:
        self.metrics.record_transition(order.status)

    async def on_transition_skipped(self, order: Order, requested_status: OrderStatus) -> None:
        self.metrics.record_skipped(requested_status)

    async def on_transition_failed(
        self, order_id: str, requested_status: OrderStatus, error: Exception
    ) -> None:
        self.metrics.record_error(requested_status, error)
