"""
Tests for ConcurrentTable and ProfiledTable.
"""

import threading
import unittest
from concurrent.futures import ThreadPoolExecutor

from table_unify.core.column import create_column
from table_unify.core.concurrent_table import ConcurrentTable
from table_unify.core.profiled_table import OperationProfiler, ProfiledTable
from table_unify.exceptions import ConversionError, SchemaError


class TestConcurrentTable(unittest.TestCase):
    """Test parallel row insertion."""

    THREADS = 8
    ROWS_PER_THREAD = 250

    def setUp(self):
        self.table = ConcurrentTable("parallel", expected_rows=self.THREADS * self.ROWS_PER_THREAD)
        self.table.set_columns({"worker": "int", "seq": "int", "label": "string"})
        self.table.freeze_schema()

    def _insert(self, worker):
        for seq in range(self.ROWS_PER_THREAD):
            self.table.add_row({"worker": str(worker), "seq": str(seq), "label": f"w{worker}-{seq}"})

    def test_every_row_visible_exactly_once(self):
        with ThreadPoolExecutor(max_workers=self.THREADS) as executor:
            list(executor.map(self._insert, range(self.THREADS)))

        self.assertEqual(self.table.get_row_count(), self.THREADS * self.ROWS_PER_THREAD)
        seen = {(row.get_value("worker"), row.get_value("seq")) for row in self.table.rows}
        self.assertEqual(len(seen), self.THREADS * self.ROWS_PER_THREAD)

    def test_rows_keep_cells_together(self):
        with ThreadPoolExecutor(max_workers=self.THREADS) as executor:
            list(executor.map(self._insert, range(self.THREADS)))

        for index in range(self.table.get_row_count()):
            worker = self.table.get_value_at(index, "worker")
            seq = self.table.get_value_at(index, "seq")
            self.assertEqual(self.table.get_value_at(index, "label"), f"w{worker}-{seq}")

    def test_rejected_rows_have_no_effect(self):
        errors = []

        def insert_bad():
            try:
                self.table.add_row({"worker": "x"})
            except ConversionError as e:
                errors.append(e)

        threads = [threading.Thread(target=insert_bad) for _ in range(4)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        self.assertEqual(len(errors), 4)
        self.assertEqual(self.table.get_row_count(), 0)

    def test_frozen_schema_rejects_changes(self):
        self.assertTrue(self.table.schema_frozen)
        with self.assertRaises(SchemaError):
            self.table.add_column(create_column("extra", "string"))
        with self.assertRaises(SchemaError):
            self.table.set_columns({"other": "string"})

    def test_set_value_at_under_lock(self):
        self.table.add_row({"worker": "1", "seq": "1", "label": "a"})
        self.table.set_value_at(0, "label", "b")
        self.assertEqual(self.table.get_value_at(0, "label"), "b")

    def test_negative_expected_rows(self):
        with self.assertRaises(ValueError):
            ConcurrentTable(expected_rows=-1)


class TestProfiledTable(unittest.TestCase):
    """Test operation profiling."""

    def setUp(self):
        self.table = ProfiledTable("profiled")
        self.table.set_columns({"id": "int", "name": "string"})

    def test_operations_are_counted(self):
        for i in range(5):
            self.table.add_row({"id": str(i), "name": f"n{i}"})
        self.table.set_value_at(0, "name", "changed")

        profiler = self.table.profiler
        self.assertEqual(profiler.get_metrics("add_row").count, 5)
        self.assertEqual(profiler.get_metrics("set_columns").count, 1)
        self.assertEqual(profiler.get_metrics("set_value_at").count, 1)
        self.assertGreaterEqual(profiler.get_metrics("add_row").total_seconds, 0.0)

    def test_report_lists_operations(self):
        self.table.add_row({"id": "1", "name": "a"})
        self.table.get_value_at(0, "name")

        report = self.table.generate_profiling_report()
        self.assertIn("profiled", report)
        self.assertIn("add_row: count=1", report)
        self.assertIn("get_value_at: count=1", report)
        self.assertIn("memory:", report)

    def test_reset(self):
        self.table.add_row({"id": "1", "name": "a"})
        self.table.reset_profiling()
        self.assertEqual(self.table.profiler.get_metrics("add_row").count, 0)

    def test_disabled_profiler_records_nothing(self):
        profiler = OperationProfiler()
        profiler.enabled = False
        table = ProfiledTable(profiler=profiler)
        table.set_columns({"id": "int"})
        table.add_row({"id": "1"})
        self.assertEqual(profiler.get_metrics("add_row").count, 0)
        self.assertEqual(table.get_row_count(), 1)

    def test_metrics_statistics(self):
        profiler = OperationProfiler()
        profiler.record("op", 0.5)
        profiler.record("op", 1.5)
        metrics = profiler.get_metrics("op")
        self.assertEqual(metrics.count, 2)
        self.assertEqual(metrics.min_seconds, 0.5)
        self.assertEqual(metrics.max_seconds, 1.5)
        self.assertEqual(metrics.average_seconds, 1.0)


if __name__ == '__main__':
    unittest.main()
