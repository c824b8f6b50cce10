"""
In-memory inventory participant

Tracks freezes in a dictionary so the coordinator can be exercised without a
real inventory service. Used by the default configuration and by the tests.
"""

import asyncio
from enum import Enum

from ordersaga.core.exceptions import DependencyFailure
from ordersaga.core.logger import get_logger
from ordersaga.inventory.base import InventoryParticipant

logger = get_logger(__name__)


class FreezeState(Enum):
    """Lifecycle of a single inventory freeze."""

    FROZEN = "frozen"
    CONFIRMED = "confirmed"
    RELEASED = "released"


class InMemoryInventoryParticipant(InventoryParticipant):
    """
    In-memory freeze registry.

    Transitions:
        FROZEN → CONFIRMED  (confirm)
        FROZEN → RELEASED   (release)

    Repeating the call that produced the current state is a no-op; the
    opposite call on a finalized freeze raises DependencyFailure.

    Example:
        >>> inventory = InMemoryInventoryParticipant()
        >>> inventory.add_freeze("42", "f-1")
        >>> await inventory.confirm("42", "f-1")
        >>> inventory.state_of("42", "f-1")
        <FreezeState.CONFIRMED: 'confirmed'>
    """

    def __init__(self):
        self._freezes: dict[tuple[str, str], FreezeState] = {}
        self._pending_failures: dict[str, list[Exception]] = {"confirm": [], "release": []}
        self._lock = asyncio.Lock()
        self.confirm_calls = 0
        self.release_calls = 0

    def add_freeze(self, item_id: str, freeze_id: str) -> None:
        """Register a freeze in FROZEN state."""
        self._freezes[(item_id, freeze_id)] = FreezeState.FROZEN

    def expire(self, item_id: str, freeze_id: str) -> None:
        """Forget a freeze, as if its reservation timed out."""
        self._freezes.pop((item_id, freeze_id), None)

    def state_of(self, item_id: str, freeze_id: str) -> FreezeState | None:
        return self._freezes.get((item_id, freeze_id))

    def fail_next(self, operation: str, error: Exception | None = None) -> None:
        """
        Make the next call of an operation fail (for testing purposes).

        Args:
            operation: "confirm" or "release"
            error: Exception to raise, defaults to a DependencyFailure
        """
        if operation not in self._pending_failures:
            msg = f"Unknown inventory operation: {operation}"
            raise ValueError(msg)
        self._pending_failures[operation].append(
            error or DependencyFailure("Injected failure", operation=operation)
        )

    async def confirm(self, item_id: str, freeze_id: str) -> None:
        self.confirm_calls += 1
        await self._transition("confirm", item_id, freeze_id, FreezeState.CONFIRMED)

    async def release(self, item_id: str, freeze_id: str) -> None:
        self.release_calls += 1
        await self._transition("release", item_id, freeze_id, FreezeState.RELEASED)

    async def _transition(
        self, operation: str, item_id: str, freeze_id: str, target: FreezeState
    ) -> None:
        async with self._lock:
            if self._pending_failures[operation]:
                raise self._pending_failures[operation].pop(0)

            key = (item_id, freeze_id)
            current = self._freezes.get(key)

            if current is None:
                msg = f"Freeze {freeze_id} for item {item_id} is unknown or expired"
                raise DependencyFailure(
                    msg, operation=operation, item_id=item_id, freeze_id=freeze_id
                )

            if current is target:
                logger.debug(f"Freeze {freeze_id} already {target.value}, {operation} is a no-op")
                return

            if current is not FreezeState.FROZEN:
                msg = f"Freeze {freeze_id} for item {item_id} is already {current.value}"
                raise DependencyFailure(
                    msg,
                    operation=operation,
                    item_id=item_id,
                    freeze_id=freeze_id,
                    freeze_state=current.value,
                )

            self._freezes[key] = target
            logger.debug(f"Freeze {freeze_id} for item {item_id} is now {target.value}")
