"""
Observability module.
Contains logging, metrics, and tracing setup.
"""

from worker_integrity.observability.logging import (
    bind_worker_context,
    setup_logging,
)
from worker_integrity.observability.metrics import (
    MetricsCollector,
    get_metrics,
    setup_metrics,
)
from worker_integrity.observability.tracing import get_tracer, setup_tracing

__all__ = [
    "setup_logging",
    "bind_worker_context",
    "setup_metrics",
    "get_metrics",
    "MetricsCollector",
    "setup_tracing",
    "get_tracer",
]
