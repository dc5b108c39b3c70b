"""
Unit Tests for PerformanceMonitor
"""

import pytest

from core.pipeline.performance import PerformanceMonitor


class TestPerformanceMonitor:

    def test_accumulates_stages(self):
        monitor = PerformanceMonitor(warn_seconds=60)
        monitor.record("analysis", 0.5)
        monitor.record("analysis", 0.25)
        monitor.record("sanitize", 0.1)

        assert monitor.timings() == {"analysis": 0.75, "sanitize": 0.1}
        assert monitor.stages["analysis"].calls == 2
        assert monitor.stages["analysis"].slowest == 0.5
        assert monitor.total_seconds == pytest.approx(0.85)
        assert monitor.warnings == []

    def test_measure_records_even_on_error(self):
        monitor = PerformanceMonitor()
        with pytest.raises(ValueError):
            with monitor.measure("transform"):
                raise ValueError("boom")
        assert monitor.stages["transform"].calls == 1

    def test_slow_stage_warns(self):
        monitor = PerformanceMonitor(warn_seconds=0.1)
        monitor.record("assembly", 0.5)
        assert len(monitor.warnings) == 1
        assert "assembly" in monitor.warnings[0]

    def test_report(self):
        monitor = PerformanceMonitor()
        monitor.record("analysis", 0.01)
        report = monitor.report()
        assert report["stages"]["analysis"]["calls"] == 1
        assert report["memory_mb"] > 0
