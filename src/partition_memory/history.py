from __future__ import annotations

from typing import List, Tuple

from .job import Job


class DeallocationHistory:
    """Append-only audit trail of released jobs, oldest first."""

    def __init__(self) -> None:
        self._jobs: List[Job] = []

    def append(self, job: Job) -> None:
        self._jobs.append(job)

    def contents(self) -> Tuple[Job, ...]:
        return tuple(self._jobs)

    def __len__(self) -> int:
        return len(self._jobs)

    def __contains__(self, job_number: object) -> bool:
        return any(job.number == job_number for job in self._jobs)
