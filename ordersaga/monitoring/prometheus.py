# ============================================
# FILE: ordersaga/monitoring/prometheus.py
# ============================================

"""
Prometheus metrics integration for ordersaga.

Quick Start:
    >>> from ordersaga.monitoring.prometheus import PrometheusOrderMetrics, start_metrics_server
    >>>
    >>> start_metrics_server(port=8000)
    >>> metrics = PrometheusOrderMetrics()
    >>>
    >>> # Feed it through the metrics listener
    >>> from ordersaga.listeners import MetricsOrderListener
    >>> coordinator = OrderCoordinator(store, inventory, listeners=[MetricsOrderListener(metrics)])
"""

from prometheus_client import REGISTRY, CollectorRegistry, Counter, start_http_server

from ordersaga.core.logger import get_logger
from ordersaga.types import OrderStatus

logger = get_logger(__name__)


class PrometheusOrderMetrics:
    """
    Prometheus-compatible metrics collector for order operations.

    Exposes the following metrics:
        - order_created_total: Counter of created orders
        - order_transitions_total: Counter of transitions by target status
        - order_skipped_total: Counter of idempotent no-ops by requested status
        - order_errors_total: Counter of failed attempts by requested status and error type
    """

    def __init__(self, prefix: str = "order", registry: CollectorRegistry | None = None):
        """
        Initialize Prometheus metrics.

        Args:
            prefix: Metric name prefix (default: "order")
            registry: Registry to publish into (default: the global registry)
        """
        self._prefix = prefix
        registry = registry if registry is not None else REGISTRY

        self._created_total = Counter(
            f"{prefix}_created_total",
            "Total orders created",
            registry=registry,
        )

        self._transitions_total = Counter(
            f"{prefix}_transitions_total",
            "Total order transitions out of pending",
            ["status"],
            registry=registry,
        )

        self._skipped_total = Counter(
            f"{prefix}_skipped_total",
            "Confirm/cancel calls on already finalized orders",
            ["requested_status"],
            registry=registry,
        )

        self._errors_total = Counter(
            f"{prefix}_errors_total",
            "Failed confirm/cancel attempts",
            ["requested_status", "error_type"],
            registry=registry,
        )

    def record_created(self) -> None:
        self._created_total.inc()

    def record_transition(self, status: OrderStatus) -> None:
        self._transitions_total.labels(status=status.value).inc()

    def record_skipped(self, requested_status: OrderStatus) -> None:
        self._skipped_total.labels(requested_status=requested_status.value).inc()

    def record_error(self, requested_status: OrderStatus, error: Exception) -> None:
        self._errors_total.labels(
            requested_status=requested_status.value,
            error_type=type(error).__name__,
        ).inc()


_default_collectors: dict[str, PrometheusOrderMetrics] = {}


def get_default_prometheus_metrics(prefix: str = "order") -> PrometheusOrderMetrics:
    """
    Get the collector publishing into the global registry for a prefix.

    Counters can be registered in a registry only once, so every config that
    asks for Prometheus metrics shares this instance.
    """
    if prefix not in _default_collectors:
        _default_collectors[prefix] = PrometheusOrderMetrics(prefix=prefix)
    return _default_collectors[prefix]


def start_metrics_server(port: int = 8000, addr: str = "0.0.0.0") -> None:  # pragma: no cover
    """
    Start the Prometheus metrics HTTP server.

    Args:
        port: Port to expose metrics on (default: 8000)
        addr: Address to bind to (default: all interfaces)
    """
    start_http_server(port, addr)
    logger.info(f"Prometheus metrics server started on http://{addr}:{port}/metrics")
