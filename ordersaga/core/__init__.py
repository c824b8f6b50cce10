"""
Core building blocks shared by every ordersaga component: the error
hierarchy, logger access and identifier generation.

Configuration lives in ordersaga.core.config and is imported from there
directly, since it wires storage and inventory backends together.
"""

from .exceptions import (
    ConflictStatusError,
    DependencyFailure,
    InvalidOrderError,
    NotFoundError,
    OrderError,
    PersistenceFailure,
)
from .ids import IdGenerator, SequentialIdGenerator, uuid_generator
from .logger import configure_default_logging, get_logger, set_logger

__all__ = [
    "ConflictStatusError",
    "DependencyFailure",
    "IdGenerator",
    "InvalidOrderError",
    "NotFoundError",
    "OrderError",
    "PersistenceFailure",
    "SequentialIdGenerator",
    "configure_default_logging",
    "get_logger",
    "set_logger",
    "uuid_generator",
]
