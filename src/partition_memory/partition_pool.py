from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Union

from .allocators import BestFitPolicy, PlacementPolicy
from .errors import InvalidConfiguration, PlacementError
from .job import Job, is_positive_size


@dataclass(frozen=True, slots=True)
class Free:
    pass


@dataclass(frozen=True, slots=True)
class Occupied:
    job: Job


PartitionState = Union[Free, Occupied]
FREE = Free()


class Partition:
    """
    One fixed-size block of simulated memory.

    Occupancy is a tagged variant (``Free`` or ``Occupied``), so a partition
    can never be half-assigned. Identity and capacity are fixed at creation;
    only the owning ``PartitionPool`` changes the state.
    """

    __slots__ = ("_id", "_capacity", "_state")

    def __init__(self, partition_id: int, capacity: int) -> None:
        self._id = partition_id
        self._capacity = capacity
        self._state: PartitionState = FREE

    @property
    def id(self) -> int:
        return self._id

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def state(self) -> PartitionState:
        return self._state

    @property
    def is_free(self) -> bool:
        return isinstance(self._state, Free)

    @property
    def occupant(self) -> Optional[Job]:
        if isinstance(self._state, Occupied):
            return self._state.job
        return None

    @property
    def internal_fragment(self) -> int:
        job = self.occupant
        return self._capacity - job.size if job else 0

    def fits(self, size: int) -> bool:
        return self.is_free and self._capacity >= size

    def __repr__(self) -> str:
        job = self.occupant
        state = f"Job {job.number}/{job.size}" if job else "FREE"
        return f"Partition(id={self._id}, capacity={self._capacity}, {state})"


@dataclass(frozen=True, slots=True)
class PartitionView:
    partition_id: int
    capacity: int
    occupied: bool
    job_number: Optional[int]
    job_size: Optional[int]
    internal_fragment: int


@dataclass(frozen=True, slots=True)
class Release:
    partition_id: int
    job: Job


class PartitionPool:
    """
    The fixed set of partitions making up simulated memory.

    Partitions are kept in id order, which is also the scan order for every
    search, so placement decisions are deterministic.
    """

    def __init__(self, partitions: Sequence[Partition], *, policy: Optional[PlacementPolicy] = None) -> None:
        self._partitions: List[Partition] = list(partitions)
        self.policy = policy or BestFitPolicy()

    @classmethod
    def create(cls, sizes: Iterable[int], *, policy: Optional[PlacementPolicy] = None) -> "PartitionPool":
        sizes = list(sizes)
        if not sizes:
            raise InvalidConfiguration("At least one partition is required")
        for index, size in enumerate(sizes, start=1):
            if not is_positive_size(size):
                raise InvalidConfiguration(f"Partition {index} size must be a positive integer, got {size!r}")
        partitions = [Partition(index, size) for index, size in enumerate(sizes, start=1)]
        return cls(partitions, policy=policy)

    def __len__(self) -> int:
        return len(self._partitions)

    def partitions(self) -> List[Partition]:
        return list(self._partitions)

    def occupied(self) -> List[Partition]:
        return [partition for partition in self._partitions if not partition.is_free]


    def find_best_fit(self, request_size: int) -> Optional[Partition]:
        """Return the partition the placement policy picks, or None if nothing fits."""
        return self.policy.select(self._partitions, request_size)

    def locate(self, job_number: int) -> Optional[Partition]:
        for partition in self._partitions:
            job = partition.occupant
            if job is not None and job.number == job_number:
                return partition
        return None

    def place(self, partition: Partition, job: Job) -> None:
        if partition not in self._partitions:
            raise PlacementError(f"{partition!r} does not belong to this pool")
        if not partition.is_free:
            raise PlacementError(f"Partition {partition.id} is already occupied")
        if partition.capacity < job.size:
            raise PlacementError(
                f"Job {job.number} (size {job.size}) does not fit partition {partition.id} "
                f"(capacity {partition.capacity})"
            )
        partition._state = Occupied(job)

    def release(self, job_number: int) -> Optional[Release]:
        partition = self.locate(job_number)
        if partition is None:
            return None
        job = partition.occupant
        partition._state = FREE
        return Release(partition_id=partition.id, job=job)

    def snapshot(self) -> List[PartitionView]:
        """Read-only rows for reporting, in id order."""
        views: List[PartitionView] = []
        for partition in self._partitions:
            job = partition.occupant
            views.append(
                PartitionView(
                    partition_id=partition.id,
                    capacity=partition.capacity,
                    occupied=job is not None,
                    job_number=job.number if job else None,
                    job_size=job.size if job else None,
                    internal_fragment=partition.internal_fragment,
                )
            )
        return views
