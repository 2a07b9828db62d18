from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Tuple

from .history import DeallocationHistory
from .job import Job
from .partition_pool import PartitionPool, PartitionView
from .waiting_queue import WaitingQueue

# Column widths of the status table: id, size, status, job no., job size, fragment.
COLUMN_WIDTHS = (12, 12, 12, 12, 12, 18)
COLUMN_GAP = 2
HEADERS = ("Part. ID", "Size", "Status", "Job No.", "Job Size", "Int.Fragment")


@dataclass(frozen=True)
class StatusReport:
    rows: Tuple[PartitionView, ...]
    waiting: Tuple[Job, ...]
    deallocated: Tuple[Job, ...]
    total_internal_fragmentation: int
    average_internal_fragmentation: float
    utilization: float


class MetricsReporter:
    """
    Read-only figures and the text status table for a partition pool.

    Nothing here mutates the pool, queue, or history, so reporting twice in a
    row yields the same output.
    """

    @staticmethod
    def total_internal_fragmentation(pool: PartitionPool) -> int:
        return sum(partition.internal_fragment for partition in pool.occupied())

    @staticmethod
    def average_internal_fragmentation(pool: PartitionPool) -> float:
        occupied = pool.occupied()
        if not occupied:
            return 0.0
        return MetricsReporter.total_internal_fragmentation(pool) / len(occupied)

    @staticmethod
    def utilization(pool: PartitionPool) -> float:
        """
        Mean of the per-partition fill percentages, free partitions counting
        as 0%. Every partition carries the same weight regardless of capacity.
        """
        partitions = pool.partitions()
        if not partitions:
            return 0.0
        total = 0.0
        for partition in partitions:
            job = partition.occupant
            if job is not None:
                total += job.size / partition.capacity * 100
        return total / len(partitions)

    @classmethod
    def snapshot(
        cls,
        pool: PartitionPool,
        waiting_queue: WaitingQueue,
        history: DeallocationHistory,
    ) -> StatusReport:
        return StatusReport(
            rows=tuple(pool.snapshot()),
            waiting=waiting_queue.contents(),
            deallocated=history.contents(),
            total_internal_fragmentation=cls.total_internal_fragmentation(pool),
            average_internal_fragmentation=cls.average_internal_fragmentation(pool),
            utilization=cls.utilization(pool),
        )

    @classmethod
    def format_status(
        cls,
        pool: PartitionPool,
        waiting_queue: WaitingQueue,
        history: DeallocationHistory,
    ) -> str:
        return render_report(cls.snapshot(pool, waiting_queue, history))

    @staticmethod
    def as_dict(report: StatusReport) -> Dict[str, float]:
        occupied = sum(1 for row in report.rows if row.occupied)
        return {
            "partitions": len(report.rows),
            "occupied": occupied,
            "free": len(report.rows) - occupied,
            "waiting": len(report.waiting),
            "deallocated": len(report.deallocated),
            "total_internal_fragmentation": report.total_internal_fragmentation,
            "avg_internal_fragmentation": report.average_internal_fragmentation,
            "utilization": report.utilization,
        }


def _format_row(cells: Tuple[object, ...]) -> str:
    parts = [str(cell).ljust(width) for cell, width in zip(cells, COLUMN_WIDTHS)]
    return (" " * COLUMN_GAP).join(parts).rstrip()


def render_report(report: StatusReport) -> str:
    table_width = sum(COLUMN_WIDTHS) + COLUMN_GAP * (len(COLUMN_WIDTHS) - 1)
    lines: List[str] = ["=" * table_width, _format_row(HEADERS), "-" * table_width]
    for row in report.rows:
        if row.occupied:
            cells = (row.partition_id, row.capacity, "USED", row.job_number, row.job_size, row.internal_fragment)
        else:
            cells = (row.partition_id, row.capacity, "FREE", "FREE", "FREE", 0)
        lines.append(_format_row(cells))
    lines.append("-" * table_width)
    total_offset = sum(COLUMN_WIDTHS[:-1]) + COLUMN_GAP * (len(COLUMN_WIDTHS) - 1)
    lines.append(" " * total_offset + f"Total: {report.total_internal_fragmentation}")
    lines.append("=" * table_width)
    lines.append("")

    if report.waiting:
        waiting = " ".join(f"[Job {job.number} ({job.size})]" for job in report.waiting)
    else:
        waiting = "None"
    if report.deallocated:
        deallocated = " ".join(f"[Job {job.number}]" for job in report.deallocated)
    else:
        deallocated = "None"
    lines.append(f"Waiting Queue: {waiting}")
    lines.append(f"Deallocated Jobs: {deallocated}")
    lines.append(f"Average Internal Fragmentation: {report.average_internal_fragmentation:.2f}")
    lines.append(f"Memory Utilization: {report.utilization:.2f} %")
    lines.append("=" * table_width)
    return "\n".join(lines)
