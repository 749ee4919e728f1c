"""
Operation profiling for tables.

ProfiledTable records how long each table operation takes and samples the
process memory footprint so population of large tables can be benchmarked.
"""

import logging
import threading
import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional

import psutil

from .row import Row
from .concurrent_table import ConcurrentTable
from .table import RowLike


@dataclass
class OperationMetrics:
    """Timing statistics for one kind of table operation."""
    count: int = 0
    total_seconds: float = 0.0
    min_seconds: Optional[float] = None
    max_seconds: float = 0.0

    def record(self, seconds: float) -> None:
        self.count += 1
        self.total_seconds += seconds
        if self.min_seconds is None or seconds < self.min_seconds:
            self.min_seconds = seconds
        if seconds > self.max_seconds:
            self.max_seconds = seconds

    @property
    def average_seconds(self) -> float:
        return self.total_seconds / self.count if self.count else 0.0


@dataclass
class ProfilingSnapshot:
    """Point-in-time copy of the profiler state."""
    operations: Dict[str, OperationMetrics] = field(default_factory=dict)
    start_memory_mb: float = 0.0
    peak_memory_mb: float = 0.0


class OperationProfiler:
    """
    Collects per-operation timings and process memory readings.

    Safe to use from several threads at once.
    """

    def __init__(self):
        self.logger = logging.getLogger(__name__)
        self._lock = threading.Lock()
        self._process = psutil.Process()
        self._operations: Dict[str, OperationMetrics] = {}
        self._start_memory_mb = self._get_current_memory_mb()
        self._peak_memory_mb = self._start_memory_mb
        self.enabled = True

    @contextmanager
    def profile(self, operation: str):
        """Time the enclosed block and record it under the operation name."""
        if not self.enabled:
            yield
            return
        start = time.perf_counter()
        try:
            yield
        finally:
            self.record(operation, time.perf_counter() - start)

    def record(self, operation: str, seconds: float) -> None:
        with self._lock:
            self._operations.setdefault(operation, OperationMetrics()).record(seconds)

    def sample_memory(self) -> float:
        """Read the current RSS in megabytes and update the peak."""
        memory_mb = self._get_current_memory_mb()
        with self._lock:
            if memory_mb > self._peak_memory_mb:
                self._peak_memory_mb = memory_mb
        return memory_mb

    def get_metrics(self, operation: str) -> OperationMetrics:
        with self._lock:
            metrics = self._operations.get(operation, OperationMetrics())
            return OperationMetrics(metrics.count, metrics.total_seconds,
                                    metrics.min_seconds, metrics.max_seconds)

    def snapshot(self) -> ProfilingSnapshot:
        with self._lock:
            operations = {name: OperationMetrics(m.count, m.total_seconds, m.min_seconds, m.max_seconds)
                          for name, m in self._operations.items()}
            return ProfilingSnapshot(operations, self._start_memory_mb, self._peak_memory_mb)

    def reset(self) -> None:
        with self._lock:
            self._operations.clear()
            self._start_memory_mb = self._get_current_memory_mb()
            self._peak_memory_mb = self._start_memory_mb

    def generate_report(self, title: str = "Table Profiling Report") -> str:
        snapshot = self.snapshot()
        lines = [f"=== {title} ==="]
        for name in sorted(snapshot.operations):
            metrics = snapshot.operations[name]
            lines.append(
                f"{name}: count={metrics.count} total={metrics.total_seconds * 1000:.3f}ms "
                f"avg={metrics.average_seconds * 1000:.4f}ms "
                f"min={(metrics.min_seconds or 0.0) * 1000:.4f}ms max={metrics.max_seconds * 1000:.4f}ms"
            )
        lines.append(f"memory: start={snapshot.start_memory_mb:.1f}MB peak={snapshot.peak_memory_mb:.1f}MB")
        return "\n".join(lines)

    def _get_current_memory_mb(self) -> float:
        try:
            return self._process.memory_info().rss / 1024 / 1024
        except psutil.Error as e:
            self.logger.warning(f"Unable to read process memory: {e}")
            return 0.0


class ProfiledTable(ConcurrentTable):
    """
    Concurrent table that records timing for its main operations.

    Args:
        name: Optional table name
        create_default_value: Missing-column policy (see Table)
        expected_rows: Optional sizing hint
        profiler: Profiler to record into; a new one is created when omitted
    """

    MEMORY_SAMPLE_INTERVAL = 1000

    def __init__(self, name: str = "", create_default_value: bool = True,
                 expected_rows: Optional[int] = None, profiler: Optional[OperationProfiler] = None):
        super().__init__(name, create_default_value, expected_rows)
        self.profiler = profiler or OperationProfiler()

    def set_columns(self, columns: Mapping[str, Any]) -> None:
        with self.profiler.profile("set_columns"):
            super().set_columns(columns)

    def add_row(self, row: RowLike) -> None:
        with self.profiler.profile("add_row"):
            super().add_row(row)
        if self.get_row_count() % self.MEMORY_SAMPLE_INTERVAL == 0:
            self.profiler.sample_memory()

    def get_row(self, index: int) -> Row:
        with self.profiler.profile("get_row"):
            return super().get_row(index)

    def get_value_at(self, row_index: int, column_name: str) -> str:
        with self.profiler.profile("get_value_at"):
            return super().get_value_at(row_index, column_name)

    def set_value_at(self, row_index: int, column_name: str, value: Optional[str]) -> None:
        with self.profiler.profile("set_value_at"):
            super().set_value_at(row_index, column_name, value)

    def generate_profiling_report(self) -> str:
        self.profiler.sample_memory()
        return self.profiler.generate_report(f"Profiling report for table '{self.name}'")

    def reset_profiling(self) -> None:
        self.profiler.reset()
