"""Metrics service for tracking catalog traffic.

Singleton service counting requests per operation, featured-cache hits and
misses, and failed best-effort side effects.
"""

import threading
from collections import defaultdict
from typing import Dict


class MetricsService:
    """Singleton service for tracking API metrics.

    Thread-safe counters and latency tracking for catalog requests.
    """

    _instance = None
    _lock = threading.Lock()

    def __new__(cls):
        """Create singleton instance."""
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = super(MetricsService, cls).__new__(cls)
                    cls._instance._initialized = False
        return cls._instance

    def __init__(self):
        """Initialize metrics counters."""
        if self._initialized:
            return

        self._lock = threading.Lock()
        self._reset_counters()
        self._initialized = True

    def _reset_counters(self) -> None:
        self._requests: Dict[str, int] = defaultdict(int)
        self._errors: Dict[str, int] = defaultdict(int)
        self._total_latency_ms = 0.0
        self._request_count = 0
        self._cache_hits = 0
        self._cache_misses = 0
        self._side_effect_failures: Dict[str, int] = defaultdict(int)

    def record_request(self, operation: str, status_code: int, latency_ms: float) -> None:
        """Record a handled request.

        Args:
            operation: Catalog operation name, e.g. "list_featured"
            status_code: HTTP status code returned
            latency_ms: Latency in milliseconds
        """
        with self._lock:
            self._requests[operation] += 1
            self._request_count += 1
            self._total_latency_ms += latency_ms
            if status_code >= 500:
                self._errors[operation] += 1

    def record_cache_lookup(self, hit: bool) -> None:
        """Record a featured-products cache lookup."""
        with self._lock:
            if hit:
                self._cache_hits += 1
            else:
                self._cache_misses += 1

    def record_side_effect_failure(self, operation: str) -> None:
        """Record a swallowed cache-write or image-delete failure."""
        with self._lock:
            self._side_effect_failures[operation] += 1

    def get_metrics(self) -> Dict:
        """Get current metrics.

        Returns:
            Dictionary with metrics including:
            - requests: Handled requests per operation
            - server_errors: 5xx responses per operation
            - average_latency_ms: Average request latency in milliseconds
            - cache_hits / cache_misses: Featured-cache lookups
            - side_effect_failures: Swallowed failures per side effect
        """
        with self._lock:
            avg_latency = (
                self._total_latency_ms / self._request_count
                if self._request_count > 0
                else 0.0
            )

            return {
                "requests": dict(self._requests),
                "server_errors": dict(self._errors),
                "average_latency_ms": round(avg_latency, 2),
                "cache_hits": self._cache_hits,
                "cache_misses": self._cache_misses,
                "side_effect_failures": dict(self._side_effect_failures),
            }

    def reset(self) -> None:
        """Reset all metrics (useful for testing)."""
        with self._lock:
            self._reset_counters()


# Global singleton instance
metrics_service = MetricsService()
