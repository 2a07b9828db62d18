import unittest

from partition_memory import InvalidConfiguration, Job, PartitionPool, PlacementError
from partition_memory.partition_pool import Free, Occupied


class PartitionPoolTests(unittest.TestCase):
    def test_create_assigns_ids_in_order_and_starts_free(self) -> None:
        pool = PartitionPool.create([100, 500, 200])
        self.assertEqual([p.id for p in pool.partitions()], [1, 2, 3])
        self.assertEqual([p.capacity for p in pool.partitions()], [100, 500, 200])
        self.assertTrue(all(isinstance(p.state, Free) for p in pool.partitions()))
        self.assertTrue(all(p.internal_fragment == 0 for p in pool.partitions()))

    def test_create_rejects_empty_and_non_positive_sizes(self) -> None:
        for sizes in ([], [10, 0], [-5], [10, True]):
            with self.subTest(sizes=sizes):
                with self.assertRaises(InvalidConfiguration):
                    PartitionPool.create(sizes)

    def test_best_fit_prefers_smallest_leftover(self) -> None:
        pool = PartitionPool.create([10, 4, 8])
        self.assertEqual(pool.find_best_fit(4).capacity, 4)

    def test_best_fit_tie_goes_to_lowest_id(self) -> None:
        pool = PartitionPool.create([6, 6])
        self.assertEqual(pool.find_best_fit(6).id, 1)

    def test_best_fit_returns_none_when_nothing_fits(self) -> None:
        pool = PartitionPool.create([5])
        self.assertIsNone(pool.find_best_fit(10))

    def test_best_fit_skips_occupied_partitions(self) -> None:
        pool = PartitionPool.create([4, 8])
        pool.place(pool.partitions()[0], Job(1, 4))
        self.assertEqual(pool.find_best_fit(3).id, 2)

    def test_place_sets_occupant_and_fragment(self) -> None:
        pool = PartitionPool.create([10])
        partition = pool.partitions()[0]
        job = Job(1, 7)
        pool.place(partition, job)
        self.assertEqual(partition.state, Occupied(job))
        self.assertIs(partition.occupant, job)
        self.assertEqual(partition.internal_fragment, 3)

    def test_place_rejects_occupied_or_too_small_partition(self) -> None:
        pool = PartitionPool.create([5])
        partition = pool.partitions()[0]
        with self.assertRaises(PlacementError):
            pool.place(partition, Job(1, 6))
        pool.place(partition, Job(2, 5))
        with self.assertRaises(PlacementError):
            pool.place(partition, Job(3, 1))

    def test_release_frees_partition_and_returns_job(self) -> None:
        pool = PartitionPool.create([10, 20])
        job = Job(1, 15)
        pool.place(pool.partitions()[1], job)
        released = pool.release(1)
        self.assertEqual(released.partition_id, 2)
        self.assertIs(released.job, job)
        self.assertTrue(pool.partitions()[1].is_free)
        self.assertEqual(pool.partitions()[1].internal_fragment, 0)
        self.assertIsNone(pool.release(1))

    def test_snapshot_rows_in_id_order(self) -> None:
        pool = PartitionPool.create([10, 20])
        pool.place(pool.partitions()[1], Job(1, 15))
        rows = pool.snapshot()
        self.assertEqual([row.partition_id for row in rows], [1, 2])
        self.assertFalse(rows[0].occupied)
        self.assertIsNone(rows[0].job_number)
        self.assertEqual((rows[1].job_number, rows[1].job_size, rows[1].internal_fragment), (1, 15, 5))


if __name__ == "__main__":
    unittest.main()
