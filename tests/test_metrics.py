"""
Test per MetricsCollector
"""

from utils.metrics import MetricsCollector, get_metrics_collector, reset_metrics_collector


class TestMetricsCollector:
    """Test raccolta metriche"""

    def _populate(self, collector):
        collector.record_operation("encrypt", "native", True, 1.5)
        collector.record_operation("decrypt", "native", True, 2.5)
        collector.record_operation("decrypt", "software", False, 4.0, error_code="MAC_MISMATCH")
        collector.record_operation("decrypt", "software", False, 3.0, error_code="INVALID_KEY")

    def test_counters(self):
        collector = MetricsCollector()
        self._populate(collector)
        counters = collector.get_counters()
        assert counters["total_operations"] == 4
        assert counters["successful_operations"] == 2
        assert counters["failed_operations"] == 2
        assert counters["encrypt_operations"] == 1
        assert counters["decrypt_operations"] == 3
        assert counters["mac_mismatches"] == 1

    def test_stats(self):
        collector = MetricsCollector()
        self._populate(collector)
        stats = collector.get_stats()
        assert stats.total_operations == 4
        assert stats.avg_latency_ms == 2.75
        assert stats.min_latency_ms == 1.5
        assert stats.max_latency_ms == 4.0
        assert stats.error_rate == 50.0
        assert stats.operations == {"encrypt": 1, "decrypt": 3}
        assert stats.backends == {"native": 2, "software": 2}
        assert stats.error_codes == {"MAC_MISMATCH": 1, "INVALID_KEY": 1}

    def test_empty_stats(self):
        assert MetricsCollector().get_stats().total_operations == 0

    def test_bounded_samples(self):
        collector = MetricsCollector(max_samples=3)
        for _ in range(5):
            collector.record_operation("encrypt", "native", True, 1.0)
        assert collector.get_stats().total_operations == 3
        assert collector.get_counters()["total_operations"] == 5

    def test_recent_errors_newest_first(self):
        collector = MetricsCollector()
        self._populate(collector)
        errors = collector.get_recent_errors(limit=5)
        assert [e.error_code for e in errors] == ["INVALID_KEY", "MAC_MISMATCH"]

    def test_prometheus_export(self):
        collector = MetricsCollector()
        self._populate(collector)
        text = collector.export_prometheus_format()
        assert "ecies_operations_total 4" in text
        assert "ecies_mac_mismatch_total 1" in text
        assert 'ecies_operations_by_type_total{operation="decrypt"} 3' in text
        assert text.endswith("\n")

    def test_reset(self):
        collector = MetricsCollector()
        self._populate(collector)
        collector.reset()
        assert collector.get_counters()["total_operations"] == 0
        assert collector.get_uptime_seconds() >= 0

    def test_global_collector(self):
        collector = get_metrics_collector()
        assert get_metrics_collector() is collector
        collector.record_operation("encrypt", "native", True, 1.0)
        reset_metrics_collector()
        assert collector.get_counters()["total_operations"] == 0
