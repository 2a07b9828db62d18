"""
Fixed-partition memory simulator with Best-Fit placement.

Expose the engine and its building blocks for drivers and experiments.
"""

from .allocators import BestFitPolicy, FirstFitPolicy, PlacementPolicy, WorstFitPolicy, get_policy
from .engine import AllocationEngine, JobState, ReleaseResult, SubmitResult
from .errors import (
    InvalidConfiguration,
    InvalidJobSize,
    JobNotFound,
    PartitionMemoryError,
    PlacementError,
)
from .history import DeallocationHistory
from .job import Job
from .metrics import MetricsReporter, StatusReport
from .partition_pool import Partition, PartitionPool, PartitionView
from .waiting_queue import Placement, RetrySweep, WaitingQueue

__all__ = [
    "AllocationEngine",
    "BestFitPolicy",
    "DeallocationHistory",
    "FirstFitPolicy",
    "InvalidConfiguration",
    "InvalidJobSize",
    "Job",
    "JobNotFound",
    "JobState",
    "MetricsReporter",
    "Partition",
    "PartitionMemoryError",
    "PartitionPool",
    "PartitionView",
    "Placement",
    "PlacementError",
    "PlacementPolicy",
    "ReleaseResult",
    "RetrySweep",
    "StatusReport",
    "SubmitResult",
    "WaitingQueue",
    "WorstFitPolicy",
    "get_policy",
]
