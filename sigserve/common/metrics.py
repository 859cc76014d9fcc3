"""Metrics collection for the serving shim.

Provides a thin convenience wrapper around ``prometheus_client`` so the
service consistently records HTTP and prediction metrics.

Design notes
- Metrics and labels are predeclared to avoid cardinality explosions
- A single registry is kept per collector (can be injected for testing)
- A decorator is provided for quick timing instrumentation
"""

import time
from typing import Any, Callable, Optional
from functools import wraps
from prometheus_client import Counter, Histogram, Gauge, CollectorRegistry, generate_latest
import structlog

logger = structlog.get_logger("metrics")


class MetricsCollector:
    """Centralized metrics collection.

    Parameters
    - service_name: Logical name used for scoping
    - registry: Optional custom ``CollectorRegistry`` (e.g. for testing)

    Exposes typed helpers for common events to keep label sets consistent.
    """

    def __init__(self, service_name: str, registry: Optional[CollectorRegistry] = None):
        self.service_name = service_name
        self.registry = registry or CollectorRegistry()

        self.request_count = Counter(
            'http_requests_total',
            'Total HTTP requests',
            ['method', 'endpoint', 'status'],
            registry=self.registry
        )

        self.request_duration = Histogram(
            'http_request_duration_seconds',
            'HTTP request duration',
            ['method', 'endpoint'],
            registry=self.registry
        )

        self.inference_requests = Counter(
            'ml_inference_requests_total',
            'Total prediction requests per signature',
            ['signature', 'status'],
            registry=self.registry
        )

        self.inference_duration = Histogram(
            'ml_inference_duration_seconds',
            'Prediction duration per signature',
            ['signature'],
            registry=self.registry
        )

        self.inference_instances = Counter(
            'ml_inference_instances_total',
            'Total instances received per signature',
            ['signature'],
            registry=self.registry
        )

        self.signatures_loaded = Gauge(
            'ml_model_signatures_loaded',
            'Number of signatures exposed by the loaded model',
            registry=self.registry
        )

    def record_http_request(
        self,
        method: str,
        endpoint: str,
        status: int,
        duration: float
    ) -> None:
        """Record HTTP request metrics.

        duration is expected in seconds to match Prometheus histogram units.
        """
        self.request_count.labels(method=method, endpoint=endpoint, status=status).inc()
        self.request_duration.labels(method=method, endpoint=endpoint).observe(duration)

    def record_inference(
        self,
        signature: str,
        duration: float,
        instance_count: int,
        status: str = "success"
    ) -> None:
        """Record prediction metrics for one request."""
        self.inference_requests.labels(signature=signature, status=status).inc()
        self.inference_duration.labels(signature=signature).observe(duration)
        self.inference_instances.labels(signature=signature).inc(instance_count)

    def set_signatures_loaded(self, count: int) -> None:
        """Set the number of signatures exposed by the loaded model."""
        self.signatures_loaded.set(count)

    def get_metrics(self) -> str:
        """Get metrics in Prometheus exposition format for scraping."""
        return generate_latest(self.registry).decode('utf-8')


def measure_time(operation: str, **labels: Any) -> Callable:
    """Decorator to measure function execution time.

    Example
    >>> @measure_time("assemble_document")
    ... def build(signatures):
    ...     ...
    """
    def decorator(func: Callable) -> Callable:
        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            start_time = time.time()
            try:
                result = func(*args, **kwargs)
                duration = time.time() - start_time
                logger.info(
                    f"Operation {operation} completed",
                    operation=operation,
                    duration_ms=duration * 1000,
                    **labels
                )
                return result
            except Exception as e:
                duration = time.time() - start_time
                logger.error(
                    f"Operation {operation} failed",
                    operation=operation,
                    duration_ms=duration * 1000,
                    error=str(e),
                    **labels
                )
                raise
        return wrapper
    return decorator
