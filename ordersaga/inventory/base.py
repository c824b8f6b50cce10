"""
Inventory participant interface.

The inventory service is the other side of the order saga. A freeze was
created before the order existed; the coordinator only ever finalizes it
(confirm) or compensates it (release).
"""

from abc import ABC, abstractmethod


class InventoryParticipant(ABC):
    """
    Saga counterpart owning the frozen inventory unit.

    Both operations are keyed by (item_id, freeze_id) and MUST be idempotent:
    the coordinator may call them again after a crash between the inventory
    call and the order status write.

    Errors:
        DependencyFailure: freeze unknown, expired, or in a conflicting state
    """

    @abstractmethod
    async def confirm(self, item_id: str, freeze_id: str) -> None:
        """
        Commit the frozen unit to its order.

        Calling it again for an already confirmed freeze succeeds without
        side effect.
        """

    @abstractmethod
    async def release(self, item_id: str, freeze_id: str) -> None:
        """
        Return the frozen unit to available inventory (compensating action).

        Calling it again for an already released freeze succeeds without
        side effect.
        """
