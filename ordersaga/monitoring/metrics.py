# ============================================
# FILE: ordersaga/monitoring/metrics.py
# ============================================

"""
Metrics collection for order operations
"""

from typing import Any

from ordersaga.types import OrderStatus


class OrderMetrics:
    """Collect and expose order metrics"""

    def __init__(self):
        self.metrics = {
            "total_created": 0,
            "total_paid": 0,
            "total_canceled": 0,
            "total_failed": 0,
            "total_skipped": 0,
            "errors_by_type": {},
        }

    def record_created(self) -> None:
        self.metrics["total_created"] += 1

    def record_transition(self, status: OrderStatus) -> None:
        """Record a completed transition out of PENDING"""
        counter = {
            OrderStatus.PAID: "total_paid",
            OrderStatus.CANCELED: "total_canceled",
            OrderStatus.FAILED: "total_failed",
        }.get(status)
        if counter:
            self.metrics[counter] += 1

    def record_skipped(self, requested_status: OrderStatus) -> None:
        """Record an idempotent no-op on an already finalized order"""
        self.metrics["total_skipped"] += 1

    def record_error(self, requested_status: OrderStatus, error: Exception) -> None:
        """Record a failed confirm/cancel attempt"""
        error_type = type(error).__name__
        errors = self.metrics["errors_by_type"]
        errors[error_type] = errors.get(error_type, 0) + 1

    def get_metrics(self) -> dict[str, Any]:
        """Get all metrics"""
        finalized = self.metrics["total_paid"] + self.metrics["total_canceled"]
        confirmation_rate = (
            self.metrics["total_paid"] / finalized * 100 if finalized > 0 else 0
        )

        return {
            **self.metrics,
            "errors_by_type": dict(self.metrics["errors_by_type"]),
            "confirmation_rate": f"{confirmation_rate:.2f}%",
        }
