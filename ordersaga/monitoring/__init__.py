"""
Order monitoring and observability utilities

Quick Start:
    >>> from ordersaga.monitoring import setup_order_logging
    >>> setup_order_logging(json_format=True)

    # Prometheus metrics
    >>> from ordersaga.monitoring import PrometheusOrderMetrics, start_metrics_server
    >>> start_metrics_server(port=8000)
    >>> metrics = PrometheusOrderMetrics()
"""

from .logging import (
    OrderContextFilter,
    OrderJsonFormatter,
    bind_order_context,
    order_context,
    setup_order_logging,
)
from .metrics import OrderMetrics
from .prometheus import (
    PrometheusOrderMetrics,
    get_default_prometheus_metrics,
    start_metrics_server,
)

__all__ = [
    "OrderContextFilter",
    "OrderJsonFormatter",
    "OrderMetrics",
    "PrometheusOrderMetrics",
    "bind_order_context",
    "get_default_prometheus_metrics",
    "order_context",
    "setup_order_logging",
    "start_metrics_server",
]
