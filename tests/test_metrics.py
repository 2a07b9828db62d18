import unittest

from partition_memory import AllocationEngine, MetricsReporter


class MetricsReporterTests(unittest.TestCase):
    def setUp(self) -> None:
        self.engine = AllocationEngine([10, 4, 8])

    def test_empty_pool_metrics_are_zero(self) -> None:
        pool = self.engine.pool
        self.assertEqual(MetricsReporter.total_internal_fragmentation(pool), 0)
        self.assertEqual(MetricsReporter.average_internal_fragmentation(pool), 0.0)
        self.assertEqual(MetricsReporter.utilization(pool), 0.0)

    def test_fragmentation_and_partition_weighted_utilization(self) -> None:
        self.engine.submit(4)
        self.engine.submit(7)
        pool = self.engine.pool
        self.assertEqual(MetricsReporter.total_internal_fragmentation(pool), 1)
        self.assertAlmostEqual(MetricsReporter.average_internal_fragmentation(pool), 0.5)
        # (100% + 87.5% + 0%) / 3 partitions, not weighted by capacity
        self.assertAlmostEqual(MetricsReporter.utilization(pool), 62.5)

    def test_format_status_table(self) -> None:
        self.engine.submit(4)
        self.engine.submit(7)
        self.engine.submit(50)
        released = self.engine.release(1)
        self.assertEqual(released.partition_id, 2)

        text = MetricsReporter.format_status(self.engine.pool, self.engine.waiting_queue, self.engine.history)
        lines = text.splitlines()
        self.assertTrue(lines[1].startswith("Part. ID"))
        self.assertIn("Int.Fragment", lines[1])
        self.assertEqual(lines[3].split(), ["1", "10", "FREE", "FREE", "FREE", "0"])
        self.assertEqual(lines[5].split(), ["3", "8", "USED", "2", "7", "1"])
        self.assertIn("Total: 1", text)
        self.assertIn("Waiting Queue: [Job 3 (50)]", text)
        self.assertIn("Deallocated Jobs: [Job 1]", text)
        self.assertIn("Average Internal Fragmentation: 1.00", text)
        self.assertIn("Memory Utilization: 29.17 %", text)

    def test_format_status_with_nothing_queued(self) -> None:
        text = self.engine.format_status()
        self.assertIn("Waiting Queue: None", text)
        self.assertIn("Deallocated Jobs: None", text)
        self.assertIn("Memory Utilization: 0.00 %", text)

    def test_as_dict_summary(self) -> None:
        self.engine.submit(4)
        self.engine.submit(50)
        summary = MetricsReporter.as_dict(self.engine.report())
        self.assertEqual(summary["partitions"], 3)
        self.assertEqual(summary["occupied"], 1)
        self.assertEqual(summary["free"], 2)
        self.assertEqual(summary["waiting"], 1)


if __name__ == "__main__":
    unittest.main()
