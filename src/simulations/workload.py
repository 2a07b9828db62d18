from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Iterator, List, Optional, Sequence

SUBMIT = "submit"
RELEASE = "release"


@dataclass(frozen=True)
class Command:
    kind: str
    value: int


class WorkloadGenerator:
    """
    Produce a reproducible stream of submit/release commands.

    Job sizes are drawn uniformly from ``size_range``. A release names a job
    number handed out earlier and not released by this generator before; if
    that job is still waiting the engine reports it as not found.
    """

    def __init__(
        self,
        *,
        seed: Optional[int] = None,
        size_range: Sequence[int] = (10, 500),
        release_probability: float = 0.35,
    ) -> None:
        low, high = size_range
        if low <= 0 or high < low:
            raise ValueError(f"size_range must be positive and ordered, got {tuple(size_range)!r}")
        if not 0.0 <= release_probability <= 1.0:
            raise ValueError("release_probability must lie in [0, 1]")
        self.random = random.Random(seed)
        self.size_range = (low, high)
        self.release_probability = release_probability
        self._issued = 0
        self._releasable: List[int] = []

    def next_command(self) -> Command:
        if self._releasable and self.random.random() < self.release_probability:
            index = self.random.randrange(len(self._releasable))
            return Command(RELEASE, self._releasable.pop(index))
        self._issued += 1
        self._releasable.append(self._issued)
        return Command(SUBMIT, self.random.randint(*self.size_range))

    def commands(self, steps: int) -> Iterator[Command]:
        for _ in range(steps):
            yield self.next_command()
