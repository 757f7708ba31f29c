"""
magink/metrics.py

Prometheus metrics collection for magink.

Counts era starts, successful claims and rejected claims, and exposes them
in Prometheus text format.
"""

import time
import logging
from typing import TYPE_CHECKING, Any, Dict, List, Optional

if TYPE_CHECKING:
    from .protocol.profiles import ClaimError

logger = logging.getLogger("magink.metrics")


class BadgeMetrics:
    """
    Prometheus metrics collector for badge claiming.

    Usage:
        from magink.metrics import BadgeMetrics
        from magink.protocol.profiles import ProfileStore

        metrics = BadgeMetrics()
        store = ProfileStore(env.block_number, metrics=metrics)

        # Get metrics in Prometheus format
        prometheus_output = metrics.collect(profile_count=len(store))
    """

    # Metric definitions
    METRICS = {
        "magink_starts_total": {
            "type": "counter",
            "help": "Total number of era starts",
        },
        "magink_claims_total": {
            "type": "counter",
            "help": "Total number of successful badge claims",
        },
        "magink_claims_rejected_total": {
            "type": "counter",
            "help": "Total number of rejected badge claims by reason",
        },
        "magink_profiles": {
            "type": "gauge",
            "help": "Number of stored profiles",
        },
        "magink_uptime_seconds": {
            "type": "counter",
            "help": "Collector uptime in seconds",
        },
    }

    def __init__(self):
        self._start_time = time.time()
        self._starts = 0
        self._claims = 0
        self._rejected: Dict[str, int] = {}

    def record_start(self) -> None:
        """Record an era start."""
        self._starts += 1

    def record_claim(self) -> None:
        """Record a successful claim."""
        self._claims += 1

    def record_rejected(self, error: "ClaimError") -> None:
        """Record a rejected claim."""
        reason = error.value
        self._rejected[reason] = self._rejected.get(reason, 0) + 1

    def collect(self, profile_count: Optional[int] = None) -> str:
        """
        Collect all metrics and return in Prometheus format.

        Args:
            profile_count: Number of stored profiles, if known

        Returns:
            Prometheus-formatted metrics string
        """
        lines: List[str] = []

        def add_header(name: str):
            metric_def = self.METRICS[name]
            lines.append(f"# HELP {name} {metric_def['help']}")
            lines.append(f"# TYPE {name} {metric_def['type']}")

        def add_metric(name: str, value: float):
            add_header(name)
            lines.append(f"{name} {value}")

        add_metric("magink_starts_total", self._starts)
        add_metric("magink_claims_total", self._claims)

        add_header("magink_claims_rejected_total")
        for reason in sorted(self._rejected):
            lines.append(
                f'magink_claims_rejected_total{{reason="{reason}"}} {self._rejected[reason]}'
            )

        if profile_count is not None:
            add_metric("magink_profiles", profile_count)

        add_metric("magink_uptime_seconds", time.time() - self._start_time)

        return "\n".join(lines) + "\n"

    def get_stats(self) -> Dict[str, Any]:
        """Get counters as a dictionary."""
        return {
            "starts": self._starts,
            "claims": self._claims,
            "rejected": dict(self._rejected),
            "rejected_total": sum(self._rejected.values()),
            "uptime_seconds": time.time() - self._start_time,
        }

    def reset(self) -> None:
        """Reset all counters."""
        self._start_time = time.time()
        self._starts = 0
        self._claims = 0
        self._rejected.clear()
        logger.debug("Metrics reset")
