"""Lightweight in-process metrics aggregation for search sessions."""

from __future__ import annotations

import threading
from dataclasses import dataclass

from streamgrep.types import SearchExecutionResult


@dataclass
class AggregatedMetrics:
    """Aggregated counters across finished searches."""

    searches_total: int = 0
    searches_failed: int = 0
    duration_ms_total: float = 0.0
    lines_total: int = 0
    records_total: int = 0
    diagnostics_total: int = 0
    files_total: int = 0

    def as_dict(self) -> dict[str, float | int]:
        failure_rate = (self.searches_failed / self.searches_total) if self.searches_total else 0.0
        avg_duration = (self.duration_ms_total / self.searches_total) if self.searches_total else 0.0
        return {
            "searches_total": self.searches_total,
            "searches_failed": self.searches_failed,
            "failure_rate": failure_rate,
            "duration_ms_total": self.duration_ms_total,
            "avg_duration_ms": avg_duration,
            "lines_total": self.lines_total,
            "records_total": self.records_total,
            "diagnostics_total": self.diagnostics_total,
            "files_total": self.files_total,
        }


class MetricsRegistry:
    """Thread-safe accumulator for search execution metrics."""

    def __init__(self) -> None:
        self._metrics = AggregatedMetrics()
        self._lock = threading.RLock()

    def record(self, result: SearchExecutionResult) -> None:
        with self._lock:
            self._metrics.searches_total += 1
            if not result.ok:
                self._metrics.searches_failed += 1
            self._metrics.duration_ms_total += max(0.0, result.duration_ms)
            self._metrics.lines_total += result.lines
            self._metrics.records_total += result.records
            self._metrics.diagnostics_total += result.diagnostics
            self._metrics.files_total += result.files

    def snapshot(self) -> AggregatedMetrics:
        with self._lock:
            return AggregatedMetrics(
                searches_total=self._metrics.searches_total,
                searches_failed=self._metrics.searches_failed,
                duration_ms_total=self._metrics.duration_ms_total,
                lines_total=self._metrics.lines_total,
                records_total=self._metrics.records_total,
                diagnostics_total=self._metrics.diagnostics_total,
                files_total=self._metrics.files_total,
            )


_GLOBAL_METRICS = MetricsRegistry()


def get_metrics_registry() -> MetricsRegistry:
    return _GLOBAL_METRICS


def reset_metrics() -> None:
    global _GLOBAL_METRICS
    _GLOBAL_METRICS = MetricsRegistry()


__all__ = ["AggregatedMetrics", "MetricsRegistry", "get_metrics_registry", "reset_metrics"]
