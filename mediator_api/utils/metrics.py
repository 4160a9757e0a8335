"""
In-process counters for the mediation service, exposed at /metrics.
"""

import threading
import time
from collections import defaultdict
from datetime import datetime, timezone
from typing import Any, Callable, Dict

COUNTERS = (
    "sessions_created_total",
    "messages_recorded_total",
    "stage_advances_total",
    "stage_transitions_rejected_total",
    "invites_generated_total",
    "session_joins_total",
    "session_join_rejections_total",
    "broadcast_failures_total",
    "mediation_errors_total",
)


class MetricsCollector:
    """Collects counters and timers for the mediation service."""

    def __init__(self):
        self.metrics = defaultdict(int)
        self.timers = defaultdict(float)
        self.lock = threading.Lock()

        for name in COUNTERS:
            self.metrics[name] = 0

    def increment_counter(self, metric_name: str, value: int = 1):
        """Increment a counter metric."""
        with self.lock:
            self.metrics[metric_name] += value

    def record_timer(self, metric_name: str, duration: float):
        """Accumulate time spent in an operation."""
        with self.lock:
            self.timers[metric_name] += duration

    def get_metrics(self) -> Dict[str, Any]:
        """Snapshot of all counters and timers."""
        with self.lock:
            return {
                "counters": dict(self.metrics),
                "timers": dict(self.timers),
                "timestamp": datetime.now(timezone.utc).isoformat(),
            }

    def reset(self):
        with self.lock:
            self.metrics.clear()
            self.timers.clear()
            for name in COUNTERS:
                self.metrics[name] = 0

    def time_operation(self, metric_name: str) -> Callable:
        """Decorator recording how long the wrapped call took, including failures."""
        def decorator(func):
            def wrapper(*args, **kwargs):
                start_time = time.time()
                try:
                    return func(*args, **kwargs)
                finally:
                    self.record_timer(metric_name, time.time() - start_time)
            return wrapper
        return decorator


# Global metrics instance
metrics_collector = MetricsCollector()
