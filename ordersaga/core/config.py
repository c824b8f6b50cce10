"""
OrderConfig - Unified configuration for ordersaga.

Wires together:
- Order store (order persistence)
- Inventory participant (saga counterpart)
- Observability (logging and metrics listeners)
- Order id generation

Example:
    >>> from ordersaga import OrderConfig, configure
    >>>
    >>> config = OrderConfig(
    ...     store=my_store,
    ...     inventory=my_inventory_client,
    ...     metrics=True,
    ...     id_prefix="ord-",
    ... )
    >>> configure(config)
    >>> coordinator = config.build_coordinator()

Configuration can also come from the environment or a YAML file:
    >>> config = OrderConfig.from_env()
    >>> config = OrderConfig.from_file("ordersaga.yaml")
"""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any

import yaml

from ordersaga.core.env import get_env

if TYPE_CHECKING:
    from ordersaga.coordinator import OrderCoordinator
    from ordersaga.inventory.base import InventoryParticipant
    from ordersaga.listeners import OrderListener
    from ordersaga.storage.base import OrderStore

logger = logging.getLogger(__name__)

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
_METRICS_BACKENDS = ("memory", "prometheus")


@dataclass
class OrderConfig:
    """
    Unified configuration for ordersaga.

    Attributes:
        store: Order store (default: InMemoryOrderStore)
        inventory: Inventory participant (default: InMemoryInventoryParticipant)
        metrics: Enable metrics (True/False or an OrderListener instance)
        logging: Enable lifecycle logging (True/False or an OrderListener instance)
        metrics_backend: "memory" (OrderMetrics) or "prometheus"
        log_level: Level for setup_logging()
        json_logs: Emit JSON records from setup_logging()
        id_prefix: Prefix for generated order ids

    Example:
        >>> # Minimal config (in-memory, for development)
        >>> config = OrderConfig()
    """

    store: OrderStore | None = None
    inventory: InventoryParticipant | None = None

    # Observability - can be bool or actual listener instance
    metrics: bool | OrderListener = True
    logging: bool | OrderListener = True
    metrics_backend: str = "memory"
    log_level: str = "INFO"
    json_logs: bool = False

    id_prefix: str = ""

    # Internal: cached listeners list
    _listeners: list[OrderListener] = field(default_factory=list, repr=False)

    def __post_init__(self) -> None:
        """Validate settings, default the backends and build listeners."""
        self.log_level = self.log_level.upper()
        if self.log_level not in _LOG_LEVELS:
            msg = f"Invalid log level: {self.log_level}. Use one of {', '.join(_LOG_LEVELS)}"
            raise ValueError(msg)

        self.metrics_backend = self.metrics_backend.lower()
        if self.metrics_backend not in _METRICS_BACKENDS:
            msg = f"Invalid metrics backend: {self.metrics_backend}. Use 'memory' or 'prometheus'"
            raise ValueError(msg)

        if self.store is None:
            from ordersaga.storage.memory import InMemoryOrderStore

            self.store = InMemoryOrderStore()
            logger.debug("Using default InMemoryOrderStore")

        if self.inventory is None:
            from ordersaga.inventory.memory import InMemoryInventoryParticipant

            self.inventory = InMemoryInventoryParticipant()
            logger.debug("Using default InMemoryInventoryParticipant")

        self._listeners = self._build_listeners()

    def _build_listeners(self) -> list[OrderListener]:
        """Build listeners list from configuration."""
        from ordersaga.listeners import (
            LoggingOrderListener,
            MetricsOrderListener,
            OrderListener,
        )

        listeners: list[OrderListener] = []

        if isinstance(self.logging, OrderListener):
            listeners.append(self.logging)
        elif self.logging:
            listeners.append(LoggingOrderListener())

        if isinstance(self.metrics, OrderListener):
            listeners.append(self.metrics)
        elif self.metrics:
            listeners.append(MetricsOrderListener(self._build_metrics_collector()))

        return listeners

    def _build_metrics_collector(self) -> Any:
        if self.metrics_backend == "prometheus":
            from ordersaga.monitoring.prometheus import get_default_prometheus_metrics

            return get_default_prometheus_metrics()

        from ordersaga.monitoring.metrics import OrderMetrics

        return OrderMetrics()

    @property
    def listeners(self) -> list[OrderListener]:
        """Get configured listeners list."""
        return self._listeners

    def build_coordinator(self) -> OrderCoordinator:
        """Create an OrderCoordinator wired with this configuration."""
        from ordersaga.coordinator import OrderCoordinator
        from ordersaga.core.ids import uuid_generator

        return OrderCoordinator(
            self.store,
            self.inventory,
            id_generator=uuid_generator(self.id_prefix),
            listeners=self.listeners,
        )

    def setup_logging(self, include_console: bool = True) -> logging.Logger:
        """Install the ordersaga log handler with this config's level and format."""
        from ordersaga.monitoring.logging import setup_order_logging

        return setup_order_logging(
            log_level=self.log_level,
            json_format=self.json_logs,
            include_console=include_console,
        )

    def with_store(self, store: OrderStore) -> OrderConfig:
        """Create a new config with a different store (immutable update)."""
        return dataclasses.replace(self, store=store)

    def with_inventory(self, inventory: InventoryParticipant) -> OrderConfig:
        """Create a new config with a different inventory participant (immutable update)."""
        return dataclasses.replace(self, inventory=inventory)

    @classmethod
    def from_env(cls, load_dotenv: bool = True) -> OrderConfig:
        """
        Create configuration from environment variables.

        Environment variables:
            ORDERSAGA_METRICS: Enable metrics (true/false)
            ORDERSAGA_METRICS_BACKEND: memory or prometheus
            ORDERSAGA_LOGGING: Enable lifecycle logging (true/false)
            ORDERSAGA_LOG_LEVEL: DEBUG, INFO, WARNING, ERROR
            ORDERSAGA_JSON_LOGS: Emit JSON log records (true/false)
            ORDERSAGA_ID_PREFIX: Prefix for generated order ids

        Args:
            load_dotenv: If True, loads .env file before reading variables
        """
        env = get_env()
        if load_dotenv:
            env.load()

        return cls(
            metrics=env.get_bool("ORDERSAGA_METRICS", True),
            metrics_backend=env.get("ORDERSAGA_METRICS_BACKEND", "memory"),
            logging=env.get_bool("ORDERSAGA_LOGGING", True),
            log_level=env.get("ORDERSAGA_LOG_LEVEL", "INFO"),
            json_logs=env.get_bool("ORDERSAGA_JSON_LOGS", False),
            id_prefix=env.get("ORDERSAGA_ID_PREFIX", ""),
        )

    @classmethod
    def from_file(cls, file_path: str | Path, substitute_env: bool = True) -> OrderConfig:
        """
        Load configuration from a YAML file.

        Supports environment variable substitution using ${VAR} syntax.

        Example:
            # In ordersaga.yaml:
            # orders:
            #   id_prefix: ${ORDER_PREFIX:-ord-}
            # storage:
            #   type: memory
            # observability:
            #   metrics:
            #     enabled: true
            #     backend: memory
            #   logging:
            #     enabled: true
            #     level: INFO
            #     json: false
        """
        path = Path(file_path)
        if not path.exists():
            msg = f"Configuration file not found: {file_path}"
            raise FileNotFoundError(msg)

        with path.open() as f:
            data = yaml.safe_load(f)

        if not data:
            return cls()

        if substitute_env:
            env = get_env()
            env.load()
            data = env.substitute_dict(data)

        cls._check_backend(data.get("storage") or {}, "storage")
        cls._check_backend(data.get("inventory") or {}, "inventory")

        orders = data.get("orders") or {}
        obs_data = data.get("observability") or {}
        metrics_data = obs_data.get("metrics") or {}
        logging_data = obs_data.get("logging") or {}

        return cls(
            metrics=_as_bool(metrics_data.get("enabled", True)),
            metrics_backend=metrics_data.get("backend", "memory"),
            logging=_as_bool(logging_data.get("enabled", True)),
            log_level=logging_data.get("level", "INFO"),
            json_logs=_as_bool(logging_data.get("json", False)),
            id_prefix=str(orders.get("id_prefix", "")),
        )

    @staticmethod
    def _check_backend(section: dict, name: str) -> None:
        """Only in-memory backends can be built from a file; others are injected."""
        backend_type = section.get("type", "memory")
        if backend_type != "memory":
            msg = (
                f"Unsupported {name} type in config file: {backend_type}. "
                f"Build the {name} in code and pass it to OrderConfig."
            )
            raise ValueError(msg)


def _as_bool(value: Any) -> bool:
    """YAML gives real booleans, env substitution gives strings."""
    if isinstance(value, str):
        return value.strip().lower() in ("true", "1", "yes", "on")
    return bool(value)


# Global configuration
_global_config: OrderConfig | None = None


def configure(config: OrderConfig) -> None:
    """Set the process-wide default configuration."""
    global _global_config
    _global_config = config
    logger.info(f"ordersaga configured with {type(config.store).__name__}")


def get_config() -> OrderConfig:
    """Get the process-wide configuration, creating a default one if needed."""
    global _global_config
    if _global_config is None:
        _global_config = OrderConfig()
    return _global_config
