"""
Order storage.

Usage:
    >>> from ordersaga.storage import InMemoryOrderStore
    >>> store = InMemoryOrderStore()
    >>> await store.save(order)
    >>> await store.find_by_id(order.order_id)
"""

from .base import OrderStore
from .memory import InMemoryOrderStore

__all__ = [
    "InMemoryOrderStore",
    "OrderStore",
]
