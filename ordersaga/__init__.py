# ============================================
# FILE: ordersaga/__init__.py
# ============================================

"""
ordersaga - reservation-backed order lifecycle

An order is created against a previously frozen inventory unit, then either
confirmed (finalizing the freeze) or canceled (releasing it). The
OrderCoordinator runs this as a small saga with the inventory service:
- Idempotent confirm/cancel: finalized orders are never processed twice
- Conditional status writes so concurrent callers cannot double-transition
- Pluggable order store and inventory participant (in-memory ones included)
- Lifecycle listeners for logging and metrics (in-memory or Prometheus)

Usage:
    >>> from ordersaga import OrderCoordinator, InMemoryOrderStore
    >>>
    >>> coordinator = OrderCoordinator(InMemoryOrderStore(), inventory_client)
    >>> order = await coordinator.create_order("1", "42", "f-1", 500)
    >>> await coordinator.confirm_pay(order.order_id)

With configuration:
    >>> from ordersaga import OrderConfig
    >>> coordinator = OrderConfig.from_env().build_coordinator()
"""

from ordersaga.coordinator import OrderCoordinator
from ordersaga.core.config import OrderConfig, configure, get_config
from ordersaga.core.exceptions import (
    ConflictStatusError,
    DependencyFailure,
    InvalidOrderError,
    NotFoundError,
    OrderError,
    PersistenceFailure,
)
from ordersaga.core.ids import SequentialIdGenerator, uuid_generator
from ordersaga.inventory import (
    FreezeState,
    InMemoryInventoryParticipant,
    InventoryParticipant,
)
from ordersaga.listeners import LoggingOrderListener, MetricsOrderListener, OrderListener
from ordersaga.storage import InMemoryOrderStore, OrderStore
from ordersaga.types import TERMINAL_STATUSES, Order, OrderStatus

__version__ = "0.1.0"

__all__ = [
    "TERMINAL_STATUSES",
    # Errors
    "ConflictStatusError",
    "DependencyFailure",
    "FreezeState",
    "InMemoryInventoryParticipant",
    "InMemoryOrderStore",
    "InvalidOrderError",
    "InventoryParticipant",
    "LoggingOrderListener",
    "MetricsOrderListener",
    "NotFoundError",
    # Core
    "Order",
    # Configuration
    "OrderConfig",
    "OrderCoordinator",
    "OrderError",
    "OrderListener",
    "OrderStatus",
    "OrderStore",
    "PersistenceFailure",
    "SequentialIdGenerator",
    "configure",
    "get_config",
    "uuid_generator",
]
