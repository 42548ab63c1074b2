"""
Prometheus Metrics Export for Scout

Exports Scout-specific metrics for monitoring:
- Traders analyzed and per-reason fetch failures
- Swap candidates extracted vs. dropped as incomplete
- Analysis duration
- Leaderboard size
"""

import logging
from typing import Optional

from prometheus_client import CollectorRegistry, Counter, Gauge, Histogram, start_http_server

from ..config import ScoutConfig

logger = logging.getLogger(__name__)


class ScoutMetrics:
    """
    Prometheus metrics exporter for Scout.

    Each instance owns its CollectorRegistry, so several instances (tests,
    embedded use) never collide on metric names.

    Metrics exported:
    - scout_traders_analyzed_total: Traders whose history was aggregated (Counter)
    - scout_fetch_failures_total: Failed fetches by reason (Counter with label)
    - scout_swaps_extracted_total: Swap records built (Counter)
    - scout_swaps_dropped_total: Swap candidates dropped as incomplete (Counter)
    - scout_analysis_duration_seconds: Time per analysis call (Histogram)
    - scout_leaderboard_size: Entries in the last ranked leaderboard (Gauge)
    """

    def __init__(self, port: int = 8081, registry: Optional[CollectorRegistry] = None):
        """
        Initialize metrics exporter.

        Args:
            port: Port to expose metrics on (default 8081)
            registry: Registry to register into (default: a fresh one)
        """
        self.port = port
        self.metrics_started = False
        self.registry = registry or CollectorRegistry()

        self.traders_analyzed = Counter(
            'scout_traders_analyzed_total',
            'Total number of traders analyzed',
            registry=self.registry,
        )

        self.fetch_failures = Counter(
            'scout_fetch_failures_total',
            'Failed transaction-history fetches',
            ['reason'],
            registry=self.registry,
        )

        self.swaps_extracted = Counter(
            'scout_swaps_extracted_total',
            'Swap records extracted from raw transactions',
            registry=self.registry,
        )

        self.swaps_dropped = Counter(
            'scout_swaps_dropped_total',
            'Swap candidates dropped because a field could not be resolved',
            registry=self.registry,
        )

        self.analysis_duration = Histogram(
            'scout_analysis_duration_seconds',
            'Time taken to analyze traders',
            buckets=[0.1, 0.5, 1, 2, 5, 10, 30, 60, 120],
            registry=self.registry,
        )

        self.leaderboard_size = Gauge(
            'scout_leaderboard_size',
            'Number of entries in the last ranked leaderboard',
            registry=self.registry,
        )

    def start_server(self):
        """Start Prometheus metrics HTTP server."""
        if self.metrics_started:
            return

        try:
            start_http_server(self.port, registry=self.registry)
            self.metrics_started = True
            logger.info(f"Prometheus metrics server started on port {self.port}")
        except OSError as e:
            logger.warning(f"Failed to start Prometheus metrics server: {e}")

    def record_swaps(self, extracted: int, dropped: int = 0):
        """
        Record the outcome of one swap-history build.

        Args:
            extracted: Swap records kept
            dropped: Candidates discarded as incomplete
        """
        if extracted:
            self.swaps_extracted.inc(extracted)
        if dropped:
            self.swaps_dropped.inc(dropped)

    def increment_traders_analyzed(self, count: int = 1):
        self.traders_analyzed.inc(count)

    def record_fetch_failure(self, reason: str):
        """
        Count a failed fetch.

        Args:
            reason: Short failure class, e.g. "not_found", "server", "network"
        """
        self.fetch_failures.labels(reason=reason).inc()

    def record_analysis_duration(self, duration_seconds: float):
        self.analysis_duration.observe(duration_seconds)

    def set_leaderboard_size(self, size: int):
        self.leaderboard_size.set(size)

    def value(self, name: str, labels: Optional[dict] = None) -> Optional[float]:
        """Current sample value from this instance's registry (None if absent)."""
        return self.registry.get_sample_value(name, labels or {})


# Global metrics instance
_metrics_instance: Optional[ScoutMetrics] = None


def get_metrics() -> ScoutMetrics:
    """Get or create global metrics instance."""
    global _metrics_instance

    if _metrics_instance is None:
        _metrics_instance = ScoutMetrics(port=ScoutConfig.get_metrics_port())

        # Auto-start if enabled
        if ScoutConfig.get_metrics_enabled():
            _metrics_instance.start_server()

    return _metrics_instance
