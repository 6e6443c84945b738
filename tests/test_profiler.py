"""Tests for the performance profiler."""

import json

import pytest

from dynamic_json.profiler import OperationRecord, PerformanceProfiler


class TestPerformanceProfiler:
    """Tests for PerformanceProfiler class."""

    def setup_method(self):
        """Set up test fixtures."""
        self.profiler = PerformanceProfiler()

    def test_profile_operation_records_call(self):
        """Test the context manager records one entry per call."""
        with self.profiler.profile_operation("diff", input_size=2048) as record:
            record.output_size = 100
            record.nodes_visited = 3

        assert len(self.profiler.history) == 1
        recorded = self.profiler.history[0]
        assert isinstance(recorded, OperationRecord)
        assert recorded.operation == "diff"
        assert recorded.input_size == 2048
        assert recorded.output_size == 100
        assert recorded.nodes_visited == 3
        assert recorded.duration >= 0
        assert not recorded.failed

    def test_failed_operation_is_recorded(self):
        """Test that an exception still records the call and is re-raised."""
        with pytest.raises(RuntimeError):
            with self.profiler.profile_operation("merge"):
                raise RuntimeError("boom")

        assert self.profiler.history[0].failed
        assert self.profiler.stats["merge"].failures == 1

    def test_stats_aggregate_by_operation(self):
        """Test running totals per operation name."""
        for nodes in (2, 5):
            with self.profiler.profile_operation("diff") as record:
                record.nodes_visited = nodes
        with self.profiler.profile_operation("merge"):
            pass

        diff_stats = self.profiler.stats["diff"]
        assert diff_stats.calls == 2
        assert diff_stats.total_nodes == 7
        assert diff_stats.max_duration >= diff_stats.mean_duration
        assert list(self.profiler.stats) == ["diff", "merge"]

    def test_summary(self):
        """Test aggregated summary."""
        assert self.profiler.get_performance_summary() == {"total_operations": 0}

        for name in ("diff", "merge", "diff"):
            with self.profiler.profile_operation(name, input_size=10) as record:
                record.nodes_visited = 2

        summary = self.profiler.get_performance_summary()
        assert summary["total_operations"] == 3
        assert summary["total_nodes_visited"] == 6
        assert [(op["name"], op["calls"]) for op in summary["operations"]] == [("diff", 2), ("merge", 1)]

    def test_history_limit(self):
        """Test that only the most recent records are kept for export."""
        profiler = PerformanceProfiler(history_limit=2)
        for name in ("a", "b", "c"):
            with profiler.profile_operation(name):
                pass

        assert [record.operation for record in profiler.history] == ["b", "c"]
        assert profiler.get_performance_summary()["total_operations"] == 3

    def test_reset(self):
        """Test clearing history and totals."""
        with self.profiler.profile_operation("loads"):
            pass

        self.profiler.reset()

        assert self.profiler.get_performance_summary() == {"total_operations": 0}

    def test_export_formats(self):
        """Test JSON, CSV and summary exports."""
        with self.profiler.profile_operation("loads", input_size=1):
            pass

        exported = json.loads(self.profiler.export_metrics("json"))
        assert exported[0]["operation"] == "loads"
        assert "throughput_mbps" in exported[0]

        csv_lines = self.profiler.export_metrics("csv").splitlines()
        assert csv_lines[0].startswith("operation,duration")
        assert csv_lines[1].startswith("loads,")

        summary = self.profiler.export_metrics("summary")
        assert "Total Operations: 1" in summary
        assert "loads: 1 call(s)" in summary

    def test_export_summary_without_history(self):
        """Test the summary export before any operation."""
        assert "Total Operations: 0" in self.profiler.export_metrics("summary")

    def test_export_unknown_format(self):
        """Test unsupported export formats."""
        with pytest.raises(ValueError, match="Unsupported export format"):
            self.profiler.export_metrics("xml")
