from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Job:
    """
    A request for memory submitted to the simulator.

    Jobs are plain values: the same instance travels from submission into a
    partition or the waiting queue and finally into the deallocation history.
    Numbers are handed out by the engine and never reused.
    """

    number: int
    size: int


def is_positive_size(value: object) -> bool:
    """True for integers greater than zero (``bool`` is rejected)."""
    return isinstance(value, int) and not isinstance(value, bool) and value > 0
