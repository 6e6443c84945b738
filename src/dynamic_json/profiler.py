"""Per-operation timing and memory accounting for the facade."""

import csv
import io
import json
import logging
import time
from collections import deque
from contextlib import contextmanager
from dataclasses import asdict, dataclass
from typing import Any, Deque, Dict, Iterator, Optional

import psutil

_MB = 1024 * 1024


@dataclass
class OperationRecord:
    """
    One profiled call.

    The facade fills in ``output_size`` and ``nodes_visited`` while the
    operation runs; ``duration`` and ``rss_delta_mb`` are set on exit.
    """
    operation: str
    input_size: int = 0
    output_size: int = 0
    nodes_visited: int = 0
    duration: float = 0.0
    rss_delta_mb: float = 0.0
    failed: bool = False

    @property
    def throughput_mbps(self) -> float:
        if self.duration <= 0:
            return 0.0
        return self.input_size / _MB / self.duration


@dataclass
class OperationStats:
    """Running totals for every call of one operation."""
    calls: int = 0
    failures: int = 0
    total_duration: float = 0.0
    max_duration: float = 0.0
    total_input: int = 0
    total_nodes: int = 0

    @property
    def mean_duration(self) -> float:
        return self.total_duration / self.calls if self.calls else 0.0

    def add(self, record: OperationRecord) -> None:
        self.calls += 1
        self.failures += int(record.failed)
        self.total_duration += record.duration
        self.max_duration = max(self.max_duration, record.duration)
        self.total_input += record.input_size
        self.total_nodes += record.nodes_visited


class PerformanceProfiler:
    """
    Collects an :class:`OperationRecord` per facade call.

    Keeps the most recent ``history_limit`` records for export and running
    :class:`OperationStats` per operation name, in first-seen order.
    Resident memory is read from ``psutil`` once before and once after each
    call.
    """

    def __init__(self, logger: Optional[logging.Logger] = None, history_limit: int = 1000):
        """
        Initialize the performance profiler.

        Args:
            logger: Optional logger instance
            history_limit: Number of records kept for export
        """
        self.logger = logger or logging.getLogger(__name__)
        self.history: Deque[OperationRecord] = deque(maxlen=history_limit)
        self.stats: Dict[str, OperationStats] = {}
        self._process = psutil.Process()

    @contextmanager
    def profile_operation(self, operation: str, input_size: int = 0) -> Iterator[OperationRecord]:
        """
        Time the enclosed block and record it, also when it raises.

        Args:
            operation: Operation name
            input_size: Input size in bytes

        Yields:
            The record being filled in
        """
        record = OperationRecord(operation, input_size)
        rss_before = self._rss_mb()
        started = time.perf_counter()
        try:
            yield record
        except BaseException:
            record.failed = True
            raise
        finally:
            record.duration = time.perf_counter() - started
            rss_after = self._rss_mb()
            if rss_before is not None and rss_after is not None:
                record.rss_delta_mb = rss_after - rss_before
            self.record(record)

    def record(self, record: OperationRecord) -> None:
        """Add a finished record to the history and the running totals."""
        self.history.append(record)
        self.stats.setdefault(record.operation, OperationStats()).add(record)
        self.logger.debug(
            f"{record.operation}: {record.duration * 1000:.3f}ms, "
            f"{record.nodes_visited} node(s), rss {record.rss_delta_mb:+.2f}MB"
        )

    def reset(self) -> None:
        self.history.clear()
        self.stats.clear()

    def _rss_mb(self) -> Optional[float]:
        try:
            return self._process.memory_info().rss / _MB
        except psutil.Error as e:
            self.logger.warning(f"Memory sampling failed: {e}")
            return None

    def get_performance_summary(self) -> Dict[str, Any]:
        """
        Summarize every operation seen so far.

        Returns:
            ``{"total_operations": 0}`` before the first call, otherwise totals
            and one entry per operation name
        """
        total = sum(stats.calls for stats in self.stats.values())
        if not total:
            return {"total_operations": 0}

        return {
            "total_operations": total,
            "total_failures": sum(stats.failures for stats in self.stats.values()),
            "total_duration": sum(stats.total_duration for stats in self.stats.values()),
            "total_nodes_visited": sum(stats.total_nodes for stats in self.stats.values()),
            "operations": [
                {
                    "name": name,
                    "calls": stats.calls,
                    "failures": stats.failures,
                    "mean_duration": stats.mean_duration,
                    "max_duration": stats.max_duration,
                    "nodes": stats.total_nodes,
                }
                for name, stats in self.stats.items()
            ],
        }

    def export_metrics(self, format: str = "json") -> str:
        """
        Export the recorded history.

        Args:
            format: ``json`` or ``csv`` for one row per call, ``summary`` for
                a per-operation table

        Raises:
            ValueError: For an unknown format
        """
        if format == "json":
            rows = [dict(asdict(record), throughput_mbps=record.throughput_mbps)
                    for record in self.history]
            return json.dumps(rows, indent=2)

        if format == "csv":
            buffer = io.StringIO()
            writer = csv.writer(buffer, lineterminator="\n")
            writer.writerow(["operation", "duration", "input_size", "output_size",
                             "nodes_visited", "rss_delta_mb", "failed"])
            for record in self.history:
                writer.writerow([record.operation, f"{record.duration:.6f}", record.input_size,
                                 record.output_size, record.nodes_visited,
                                 f"{record.rss_delta_mb:.3f}", record.failed])
            return buffer.getvalue()

        if format == "summary":
            summary = self.get_performance_summary()
            lines = ["Performance Summary:", f"  Total Operations: {summary['total_operations']}"]
            for op in summary.get("operations", []):
                lines.append(
                    f"  {op['name']}: {op['calls']} call(s), "
                    f"mean {op['mean_duration'] * 1000:.3f}ms, "
                    f"max {op['max_duration'] * 1000:.3f}ms, {op['nodes']} node(s)"
                )
            return "\n".join(lines)

        raise ValueError(f"Unsupported export format: {format}")
