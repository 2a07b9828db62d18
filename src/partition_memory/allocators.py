from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Dict, Iterable, Optional, Type

from .errors import InvalidConfiguration

if TYPE_CHECKING:
    from .partition_pool import Partition


class PlacementPolicy(ABC):
    """Strategy that picks a free partition for a request of a given size."""

    name = "abstract"

    @abstractmethod
    def select(self, partitions: Iterable["Partition"], size: int) -> Optional["Partition"]:
        ...


class BestFitPolicy(PlacementPolicy):
    """
    Best-fit placement: choose the free partition that leaves the least unused
    space behind. Partitions are scanned in id order and the current best is
    only replaced on a strict improvement, so ties go to the lowest id.

    Keeps large partitions available for large jobs at the cost of scattering
    many small internal fragments.
    """

    name = "best-fit"

    def select(self, partitions: Iterable["Partition"], size: int) -> Optional["Partition"]:
        best: Optional["Partition"] = None
        best_leftover: Optional[int] = None
        for partition in partitions:
            if not partition.fits(size):
                continue
            leftover = partition.capacity - size
            if best_leftover is None or leftover < best_leftover:
                best = partition
                best_leftover = leftover
        return best


class FirstFitPolicy(PlacementPolicy):
    """First-fit placement: the lowest-id free partition that is large enough."""

    name = "first-fit"

    def select(self, partitions: Iterable["Partition"], size: int) -> Optional["Partition"]:
        for partition in partitions:
            if partition.fits(size):
                return partition
        return None


class WorstFitPolicy(PlacementPolicy):
    """Worst-fit placement: the free partition with the largest leftover."""

    name = "worst-fit"

    def select(self, partitions: Iterable["Partition"], size: int) -> Optional["Partition"]:
        worst: Optional["Partition"] = None
        worst_leftover = -1
        for partition in partitions:
            if not partition.fits(size):
                continue
            leftover = partition.capacity - size
            if leftover > worst_leftover:
                worst = partition
                worst_leftover = leftover
        return worst


POLICIES: Dict[str, Type[PlacementPolicy]] = {
    BestFitPolicy.name: BestFitPolicy,
    FirstFitPolicy.name: FirstFitPolicy,
    WorstFitPolicy.name: WorstFitPolicy,
}


def get_policy(name: str) -> PlacementPolicy:
    try:
        return POLICIES[name]()
    except KeyError:
        known = ", ".join(sorted(POLICIES))
        raise InvalidConfiguration(f"Unknown placement policy {name!r} (expected one of: {known})") from None
