"""
Prometheus metrics collection.
"""

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    REGISTRY,
    CollectorRegistry,
    Counter,
    Gauge,
    Histogram,
    generate_latest,
)

from worker_integrity.constants import (
    METRIC_API_LATENCY,
    METRIC_API_REQUESTS,
    METRIC_BUILD_INFO,
    METRIC_REGISTRATIONS,
)

# Global metrics instance
_metrics: "MetricsCollector | None" = None


class MetricsCollector:
    """
    Prometheus metrics collector for worker integrity.

    Collects metrics for:
    - Build identity of the running worker
    - Version registration outcomes
    - API requests
    """

    def __init__(self, registry: CollectorRegistry | None = None):
        """
        Initialize the metrics collector.

        Args:
            registry: Optional custom registry. Uses default if not provided.
        """
        self._registry = registry or REGISTRY

        # Constant 1, labelled with the build identity
        self.build_info = Gauge(
            METRIC_BUILD_INFO,
            "Build identity of the running worker",
            ["worker_role", "git_sha", "build_date"],
            registry=self._registry,
        )

        self.registrations = Counter(
            METRIC_REGISTRATIONS,
            "Total number of version registration attempts",
            ["worker_role", "outcome"],
            registry=self._registry,
        )

        self.api_requests = Counter(
            METRIC_API_REQUESTS,
            "Total number of API requests",
            ["method", "endpoint", "status"],
            registry=self._registry,
        )

        self.api_latency = Histogram(
            METRIC_API_LATENCY,
            "API request latency in seconds",
            ["method", "endpoint"],
            buckets=(0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0),
            registry=self._registry,
        )

    def record_build_info(self, role: str, git_sha: str, build_date: str | None) -> None:
        """Publish the build identity of this worker."""
        self.build_info.labels(
            worker_role=role,
            git_sha=git_sha,
            build_date=build_date or "",
        ).set(1)

    def record_registration(self, role: str, outcome: str) -> None:
        """Record a version registration attempt."""
        self.registrations.labels(worker_role=role, outcome=outcome).inc()

    def record_api_request(
        self,
        method: str,
        endpoint: str,
        status: int,
        duration_seconds: float,
    ) -> None:
        """Record an API request."""
        self.api_requests.labels(
            method=method,
            endpoint=endpoint,
            status=str(status),
        ).inc()
        self.api_latency.labels(method=method, endpoint=endpoint).observe(
            duration_seconds
        )

    def get_metrics(self) -> bytes:
        """Get all metrics in Prometheus format."""
        return generate_latest(self._registry)

    def get_content_type(self) -> str:
        """Get the content type for metrics response."""
        return CONTENT_TYPE_LATEST


def setup_metrics() -> MetricsCollector:
    """
    Set up and return the metrics collector.

    Returns:
        MetricsCollector: The metrics collector instance.
    """
    global _metrics
    if _metrics is None:
        _metrics = MetricsCollector()
    return _metrics


def get_metrics() -> MetricsCollector:
    """
    Get the metrics collector instance, creating it on first use.

    Returns:
        MetricsCollector: The metrics collector instance.
    """
    if _metrics is None:
        return setup_metrics()
    return _metrics
