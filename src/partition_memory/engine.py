from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Dict, Iterable, List, Optional

from .allocators import PlacementPolicy
from .errors import InvalidJobSize, JobNotFound
from .history import DeallocationHistory
from .job import Job, is_positive_size
from .locks import EngineLock
from .metrics import MetricsReporter, StatusReport, render_report
from .partition_pool import PartitionPool
from .waiting_queue import Placement, WaitingQueue

if TYPE_CHECKING:
    from simulations.instrumentation import EventRecorder

logger = logging.getLogger(__name__)


class JobState(str, Enum):
    PLACED = "placed"
    WAITING = "waiting"
    RELEASED = "released"


@dataclass(frozen=True)
class SubmitResult:
    job: Job
    partition_id: Optional[int] = None

    @property
    def placed(self) -> bool:
        return self.partition_id is not None

    @property
    def waiting(self) -> bool:
        return self.partition_id is None


@dataclass(frozen=True)
class ReleaseResult:
    job: Job
    partition_id: int
    retried: List[Placement] = field(default_factory=list)


class AllocationEngine:
    """
    Fixed-partition allocator with a waiting queue.

    Submitted jobs go to the partition the placement policy picks (Best Fit
    unless configured otherwise) or, when nothing fits, to the back of the
    waiting queue. Every successful release is followed by exactly one retry
    sweep over the whole queue, so freed space is handed out again before
    the release returns.

    The engine owns all state: pool, waiting queue, history and the job
    counter. It never prints; results come back as values and recoverable
    problems as ``PartitionMemoryError`` subclasses.
    """

    def __init__(
        self,
        partition_sizes: Iterable[int],
        *,
        policy: Optional[PlacementPolicy] = None,
        recorder: Optional["EventRecorder"] = None,
        thread_safe: bool = False,
    ) -> None:
        self._pool = PartitionPool.create(partition_sizes, policy=policy)
        self._waiting = WaitingQueue()
        self._history = DeallocationHistory()
        self._next_job_number = 1
        self.recorder = recorder
        self._lock = EngineLock() if thread_safe else None

    # -- State -----------------------------------------------------------------------
    @property
    def pool(self) -> PartitionPool:
        return self._pool

    @property
    def waiting_queue(self) -> WaitingQueue:
        return self._waiting

    @property
    def history(self) -> DeallocationHistory:
        return self._history

    @property
    def next_job_number(self) -> int:
        return self._next_job_number

    # -- Submission ------------------------------------------------------------------
    def submit(self, size: int) -> SubmitResult:
        """Admit a new job, placing it immediately if any free partition fits."""
        if not is_positive_size(size):
            raise InvalidJobSize(size)

        def write_op() -> SubmitResult:
            job = Job(number=self._next_job_number, size=size)
            self._next_job_number += 1
            partition = self._pool.find_best_fit(job.size)
            if partition is None:
                self._waiting.enqueue(job)
                logger.debug("Job %d (size %d) queued; %d waiting", job.number, job.size, len(self._waiting))
                self._record("waiting", {"job": job.number, "size": job.size, "queue_length": len(self._waiting)})
                return SubmitResult(job=job)
            self._pool.place(partition, job)
            logger.debug("Job %d (size %d) placed in partition %d", job.number, job.size, partition.id)
            self._record(
                "placed",
                {
                    "job": job.number,
                    "size": job.size,
                    "partition": partition.id,
                    "capacity": partition.capacity,
                    "internal_fragment": partition.internal_fragment,
                },
            )
            return SubmitResult(job=job, partition_id=partition.id)

        if self._lock:
            with self._lock.exclusive():
                return write_op()
        return write_op()

    # -- Release ---------------------------------------------------------------------
    def release(self, job_number: int) -> ReleaseResult:
        """
        Free the partition holding ``job_number`` and retry the waiting queue.

        Raises JobNotFound, without touching the queue, when no partition
        holds that job (including jobs that are still waiting).
        """

        def write_op() -> ReleaseResult:
            released = self._pool.release(job_number)
            if released is None:
                logger.debug("Release of job %s ignored: not resident", job_number)
                self._record("release_miss", {"job": job_number})
                raise JobNotFound(job_number)
            self._history.append(released.job)
            logger.debug("Job %d released from partition %d", released.job.number, released.partition_id)
            self._record(
                "released",
                {"job": released.job.number, "size": released.job.size, "partition": released.partition_id},
            )
            retried = self._reclaim()
            return ReleaseResult(job=released.job, partition_id=released.partition_id, retried=retried)

        if self._lock:
            with self._lock.exclusive():
                return write_op()
        return write_op()

    def _reclaim(self) -> List[Placement]:
        if self._waiting.is_empty():
            return []
        sweep = self._waiting.drain_retry(self._pool)
        for placement in sweep.placements:
            logger.debug("Waiting job %d placed in partition %d", placement.job.number, placement.partition_id)
            self._record(
                "retry_placed",
                {"job": placement.job.number, "size": placement.job.size, "partition": placement.partition_id},
            )
        self._record("retry_sweep", {"placed": len(sweep.placements), "still_waiting": len(sweep.still_waiting)})
        return sweep.placements

    # -- Introspection ---------------------------------------------------------------
    def job_state(self, job_number: int) -> JobState:
        def read_op() -> JobState:
            if self._pool.locate(job_number) is not None:
                return JobState.PLACED
            if job_number in self._waiting:
                return JobState.WAITING
            if job_number in self._history:
                return JobState.RELEASED
            raise JobNotFound(job_number)

        if self._lock:
            with self._lock.shared():
                return read_op()
        return read_op()

    def report(self) -> StatusReport:
        def read_op() -> StatusReport:
            return MetricsReporter.snapshot(self._pool, self._waiting, self._history)

        if self._lock:
            with self._lock.shared():
                return read_op()
        return read_op()

    def format_status(self) -> str:
        return render_report(self.report())

    def stats(self) -> Dict[str, Any]:
        def read_op() -> Dict[str, Any]:
            report = MetricsReporter.snapshot(self._pool, self._waiting, self._history)
            stats: Dict[str, Any] = MetricsReporter.as_dict(report)
            stats["jobs_submitted"] = self._next_job_number - 1
            return stats

        if self._lock:
            with self._lock.shared():
                stats = read_op()
            stats["thread_safe"] = 1.0
        else:
            stats = read_op()
        stats["policy"] = self._pool.policy.name
        return stats

    def _record(self, event_type: str, payload: Dict[str, object]) -> None:
        if self.recorder:
            self.recorder.record_event(event_type, payload)
