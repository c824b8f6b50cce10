"""
Pytest configuration and shared fixtures for order coordinator tests
"""

from datetime import UTC, datetime, timedelta

import pytest

from ordersaga.coordinator import OrderCoordinator
from ordersaga.core.ids import SequentialIdGenerator
from ordersaga.core.logger import set_logger
from ordersaga.inventory.memory import InMemoryInventoryParticipant
from ordersaga.listeners import OrderListener
from ordersaga.storage.memory import InMemoryOrderStore

CREATED_AT = datetime(2024, 1, 1, 12, 0, tzinfo=UTC)


class FakeClock:
    """Clock that advances one second per reading."""

    def __init__(self, start: datetime = CREATED_AT):
        self.now = start

    def __call__(self) -> datetime:
        current = self.now
        self.now = current + timedelta(seconds=1)
        return current


class RecordingListener(OrderListener):
    """Listener that records every hook call."""

    def __init__(self):
        self.events = []

    async def on_order_created(self, order):
        self.events.append(("created", order.order_id))

    async def on_order_transitioned(self, order, previous_status):
        self.events.append(("transitioned", order.order_id, previous_status, order.status))

    async def on_transition_skipped(self, order, requested_status):
        self.events.append(("skipped", order.order_id, requested_status))

    async def on_transition_failed(self, order_id, requested_status, error):
        self.events.append(("failed", order_id, requested_status, type(error)))

    def of_kind(self, kind):
        return [e for e in self.events if e[0] == kind]


# ============================================
# AUTO-USE FIXTURES
# ============================================


@pytest.fixture(autouse=True)
def reset_custom_logger():
    """Make sure a custom logger set by one test never leaks into another."""
    yield
    set_logger(None)


# ============================================
# COORDINATOR FIXTURES
# ============================================


@pytest.fixture
def store():
    return InMemoryOrderStore()


@pytest.fixture
def inventory():
    """Inventory holding the freeze used by most tests: item 42, freeze f-1."""
    participant = InMemoryInventoryParticipant()
    participant.add_freeze("42", "f-1")
    return participant


@pytest.fixture
def created_at():
    """Time the fake clock starts at, i.e. the created_at of the first order."""
    return CREATED_AT


@pytest.fixture
def clock(created_at):
    return FakeClock(created_at)


@pytest.fixture
def recorder():
    return RecordingListener()


@pytest.fixture
def coordinator(store, inventory, clock, recorder):
    return OrderCoordinator(
        store,
        inventory,
        id_generator=SequentialIdGenerator("order-"),
        clock=clock,
        listeners=[recorder],
    )
