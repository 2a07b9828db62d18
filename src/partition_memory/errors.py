from __future__ import annotations


class PartitionMemoryError(Exception):
    """Base class for every error raised by the allocation core."""


class InvalidConfiguration(PartitionMemoryError, ValueError):
    """Partition sizes (or a policy name) cannot be used to build a pool."""


class InvalidJobSize(PartitionMemoryError, ValueError):
    def __init__(self, size: object) -> None:
        super().__init__(f"Job size must be a positive integer, got {size!r}")
        self.size = size


class JobNotFound(PartitionMemoryError, LookupError):
    def __init__(self, job_number: int) -> None:
        super().__init__(f"Job {job_number} is not occupying any partition")
        self.job_number = job_number


class PlacementError(PartitionMemoryError, RuntimeError):
    """
    Raised when a placement violates the pool's preconditions.

    This signals a bug in the caller, not bad user input: the engine only
    places jobs into partitions its own search returned.
    """
