"""
Metrics Collection System

Lightweight in-memory metrics for ECIES operations: counts, latency and
failures per operation, backend and error code.

Author: ECIES Core Project
Date: October 2026
"""

from collections import defaultdict
from dataclasses import dataclass, field
from datetime import datetime, timezone
from threading import Lock
from typing import Dict, List, Optional


@dataclass
class MetricsSample:
    """Single engine operation"""
    timestamp: datetime
    operation: str
    backend: str
    success: bool
    latency_ms: float
    error_code: Optional[str] = None


@dataclass
class MetricsStats:
    """Aggregated statistics"""
    total_operations: int = 0
    successful_operations: int = 0
    failed_operations: int = 0
    avg_latency_ms: float = 0.0
    min_latency_ms: float = 0.0
    max_latency_ms: float = 0.0
    error_rate: float = 0.0

    operations: Dict[str, int] = field(default_factory=dict)
    backends: Dict[str, int] = field(default_factory=dict)
    error_codes: Dict[str, int] = field(default_factory=dict)


class MetricsCollector:
    """
    Collects and aggregates ECIES operation metrics.

    Thread-safe; samples are kept in a bounded FIFO.
    """

    def __init__(self, max_samples: int = 10000):
        """
        Args:
            max_samples: Maximum number of samples to keep in memory
        """
        self.max_samples = max_samples
        self._samples: List[MetricsSample] = []
        self._lock = Lock()
        self._start_time = datetime.now(timezone.utc)
        self._counters = self._empty_counters()

    @staticmethod
    def _empty_counters() -> Dict[str, int]:
        return {
            'total_operations': 0,
            'successful_operations': 0,
            'failed_operations': 0,
            'encrypt_operations': 0,
            'decrypt_operations': 0,
            'mac_mismatches': 0,
        }

    def record_operation(
        self,
        operation: str,
        backend: str,
        success: bool,
        latency_ms: float,
        error_code: Optional[str] = None,
    ):
        """
        Record a single engine operation

        Args:
            operation: "encrypt" or "decrypt"
            backend: Backend name ("native", "software")
            success: Whether the call returned normally
            latency_ms: Wall-clock latency in milliseconds
            error_code: ECIESErrorCode value if the call failed
        """
        with self._lock:
            self._samples.append(MetricsSample(
                timestamp=datetime.now(timezone.utc),
                operation=operation,
                backend=backend,
                success=success,
                latency_ms=latency_ms,
                error_code=error_code,
            ))
            if len(self._samples) > self.max_samples:
                self._samples.pop(0)

            self._counters['total_operations'] += 1
            if success:
                self._counters['successful_operations'] += 1
            else:
                self._counters['failed_operations'] += 1

            key = f'{operation}_operations'
            if key in self._counters:
                self._counters[key] += 1
            if error_code == 'MAC_MISMATCH':
                self._counters['mac_mismatches'] += 1

    def get_stats(self) -> MetricsStats:
        """Aggregate statistics over the retained samples."""
        with self._lock:
            samples = list(self._samples)

        if not samples:
            return MetricsStats()

        total = len(samples)
        successful = sum(1 for s in samples if s.success)
        failed = total - successful
        latencies = [s.latency_ms for s in samples]

        operations = defaultdict(int)
        backends = defaultdict(int)
        error_codes = defaultdict(int)
        for sample in samples:
            operations[sample.operation] += 1
            backends[sample.backend] += 1
            if sample.error_code:
                error_codes[sample.error_code] += 1

        return MetricsStats(
            total_operations=total,
            successful_operations=successful,
            failed_operations=failed,
            avg_latency_ms=sum(latencies) / total,
            min_latency_ms=min(latencies),
            max_latency_ms=max(latencies),
            error_rate=failed / total * 100,
            operations=dict(operations),
            backends=dict(backends),
            error_codes=dict(error_codes),
        )

    def get_counters(self) -> Dict[str, int]:
        """Get real-time counters"""
        with self._lock:
            return self._counters.copy()

    def get_uptime_seconds(self) -> float:
        return (datetime.now(timezone.utc) - self._start_time).total_seconds()

    def get_recent_errors(self, limit: int = 10) -> List[MetricsSample]:
        """Most recent failures, newest first"""
        with self._lock:
            errors = [s for s in self._samples if not s.success]
            return list(reversed(errors[-limit:]))

    def reset(self):
        """Reset all metrics (useful for testing)"""
        with self._lock:
            self._samples.clear()
            self._counters = self._empty_counters()
            self._start_time = datetime.now(timezone.utc)

    def export_prometheus_format(self) -> str:
        """
        Export metrics in Prometheus text format

        Returns:
            Prometheus-compatible metrics string
        """
        stats = self.get_stats()
        counters = self.get_counters()

        lines = []

        lines.append('# HELP ecies_operations_total Total number of ECIES operations')
        lines.append('# TYPE ecies_operations_total counter')
        lines.append(f'ecies_operations_total {counters["total_operations"]}')

        lines.append('# HELP ecies_operations_failed Total number of failed ECIES operations')
        lines.append('# TYPE ecies_operations_failed counter')
        lines.append(f'ecies_operations_failed {counters["failed_operations"]}')

        lines.append('# HELP ecies_mac_mismatch_total Total MAC verification failures')
        lines.append('# TYPE ecies_mac_mismatch_total counter')
        lines.append(f'ecies_mac_mismatch_total {counters["mac_mismatches"]}')

        lines.append('# HELP ecies_operations_by_type_total Operations per type')
        lines.append('# TYPE ecies_operations_by_type_total counter')
        lines.append(f'ecies_operations_by_type_total{{operation="encrypt"}} {counters["encrypt_operations"]}')
        lines.append(f'ecies_operations_by_type_total{{operation="decrypt"}} {counters["decrypt_operations"]}')

        lines.append('# HELP ecies_latency_avg_ms Average operation latency in milliseconds')
        lines.append('# TYPE ecies_latency_avg_ms gauge')
        lines.append(f'ecies_latency_avg_ms {stats.avg_latency_ms}')

        lines.append('# HELP ecies_error_rate Current error rate percentage')
        lines.append('# TYPE ecies_error_rate gauge')
        lines.append(f'ecies_error_rate {stats.error_rate}')

        return '\n'.join(lines) + '\n'


# Global metrics collector instance
_metrics_collector: Optional[MetricsCollector] = None


def get_metrics_collector(max_samples: int = 10000) -> MetricsCollector:
    """Get or create global metrics collector (max_samples applies on creation only)"""
    global _metrics_collector
    if _metrics_collector is None:
        _metrics_collector = MetricsCollector(max_samples=max_samples)
    return _metrics_collector


def reset_metrics_collector():
    """Reset global metrics collector (for testing)"""
    global _metrics_collector
    if _metrics_collector:
        _metrics_collector.reset()
