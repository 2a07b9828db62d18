from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, List, Tuple

from .job import Job

if TYPE_CHECKING:
    from .partition_pool import PartitionPool


@dataclass(frozen=True, slots=True)
class Placement:
    job: Job
    partition_id: int


@dataclass(slots=True)
class RetrySweep:
    placements: List[Placement] = field(default_factory=list)
    still_waiting: List[Job] = field(default_factory=list)


class WaitingQueue:
    """
    Jobs that could not be placed when they were submitted, in arrival order.

    Retries happen in sweeps: every queued job gets one attempt per sweep, in
    queue order, and a job that still does not fit never blocks the jobs
    behind it.
    """

    def __init__(self) -> None:
        self._jobs: List[Job] = []

    def enqueue(self, job: Job) -> None:
        self._jobs.append(job)

    def drain_retry(self, pool: "PartitionPool") -> RetrySweep:
        sweep = RetrySweep()
        try:
            for job in list(self._jobs):
                partition = pool.find_best_fit(job.size)
                if partition is None:
                    sweep.still_waiting.append(job)
                    continue
                pool.place(partition, job)
                sweep.placements.append(Placement(job=job, partition_id=partition.id))
        finally:
            # Placed jobs leave the queue even if a later placement fails.
            placed = {placement.job.number for placement in sweep.placements}
            self._jobs = [job for job in self._jobs if job.number not in placed]
        return sweep

    def is_empty(self) -> bool:
        return not self._jobs

    def contents(self) -> Tuple[Job, ...]:
        return tuple(self._jobs)

    def __len__(self) -> int:
        return len(self._jobs)

    def __contains__(self, job_number: object) -> bool:
        return any(job.number == job_number for job in self._jobs)
