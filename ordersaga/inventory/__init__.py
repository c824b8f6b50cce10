"""
Inventory participant port and its in-memory implementation.
"""

from .base import InventoryParticipant
from .memory import FreezeState, InMemoryInventoryParticipant

__all__ = [
    "FreezeState",
    "InMemoryInventoryParticipant",
    "InventoryParticipant",
]
