from __future__ import annotations

import argparse
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

from partition_memory import AllocationEngine, JobNotFound, get_policy
from simulations.instrumentation import LOG_LEVELS, EventRecorder
from simulations.workload import RELEASE, WorkloadGenerator

logger = logging.getLogger(__name__)


@dataclass
class SimulationConfig:
    """
    Parameters for a scripted (non-interactive) simulation run.

    partition_sizes: capacities of partitions 1..N, in order.
    size_range: inclusive bounds for generated job sizes.
    release_probability: chance that a step releases an earlier job instead of submitting.
    """

    partition_sizes: List[int] = field(default_factory=lambda: [100, 500, 200, 300, 600])
    steps: int = 40
    seed: Optional[int] = 42
    size_range: Tuple[int, int] = (50, 450)
    release_probability: float = 0.35
    policy: str = "best-fit"
    label: str = "simulation"


def run_simulation(
    config: SimulationConfig,
    *,
    recorder: Optional[EventRecorder] = None,
    verbose: bool = False,
) -> Dict[str, object]:
    engine = AllocationEngine(config.partition_sizes, policy=get_policy(config.policy), recorder=recorder)
    workload = WorkloadGenerator(
        seed=config.seed,
        size_range=config.size_range,
        release_probability=config.release_probability,
    )

    placed_on_submit = 0
    queued_on_submit = 0
    releases = 0
    release_misses = 0
    retry_placements = 0
    fragmentation_sum = 0.0
    utilization_sum = 0.0

    for step, command in enumerate(workload.commands(config.steps), start=1):
        if command.kind == RELEASE:
            try:
                result = engine.release(command.value)
            except JobNotFound:
                release_misses += 1
                if verbose:
                    print(f"[step {step}] Job {command.value} not found.")
            else:
                releases += 1
                retry_placements += len(result.retried)
                if verbose:
                    print(f"[step {step}] Job {result.job.number} deallocated from Partition {result.partition_id}")
                    for placement in result.retried:
                        print(
                            f"[step {step}] Waiting Job {placement.job.number} "
                            f"allocated to Partition {placement.partition_id}."
                        )
        else:
            outcome = engine.submit(command.value)
            if outcome.placed:
                placed_on_submit += 1
            else:
                queued_on_submit += 1
            if verbose:
                where = f"Partition {outcome.partition_id}" if outcome.placed else "waiting queue"
                print(f"[step {step}] Job {outcome.job.number} ({outcome.job.size}) -> {where}")

        report = engine.report()
        fragmentation_sum += report.average_internal_fragmentation
        utilization_sum += report.utilization

    steps = max(config.steps, 1)
    summary: Dict[str, object] = {
        "config": config.label,
        "policy": config.policy,
        "seed": config.seed,
        "steps": config.steps,
        "placed_on_submit": placed_on_submit,
        "queued_on_submit": queued_on_submit,
        "releases": releases,
        "release_misses": release_misses,
        "retry_placements": retry_placements,
        "mean_avg_fragmentation": fragmentation_sum / steps,
        "mean_utilization": utilization_sum / steps,
    }
    summary.update({f"final_{key}": value for key, value in engine.stats().items() if key != "policy"})
    logger.info("Run %s finished: %s", config.label, summary)
    if verbose:
        print(engine.format_status())
    return summary


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run a scripted fixed-partition allocation simulation.")
    parser.add_argument(
        "--partitions",
        type=int,
        nargs="+",
        default=[100, 500, 200, 300, 600],
        help="Partition capacities, in id order.",
    )
    parser.add_argument("--steps", type=int, default=40, help="Number of submit/release commands to generate.")
    parser.add_argument("--seed", type=int, default=42, help="Random seed for the workload.")
    parser.add_argument("--min-size", type=int, default=50, help="Smallest generated job size.")
    parser.add_argument("--max-size", type=int, default=450, help="Largest generated job size.")
    parser.add_argument("--release-probability", type=float, default=0.35, help="Chance a step releases a job.")
    parser.add_argument("--policy", type=str, default="best-fit", help="Placement policy name.")
    parser.add_argument("--profile-dir", type=str, default=None, help="Write JSONL/CSV event logs here.")
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=LOG_LEVELS,
        default="WARNING",
        help="Logging level for diagnostics.",
    )
    return parser.parse_args(argv)


def main() -> None:
    args = parse_args()
    logging.basicConfig(level=args.log_level, format="%(levelname)s %(name)s: %(message)s")
    config = SimulationConfig(
        partition_sizes=args.partitions,
        steps=args.steps,
        seed=args.seed,
        size_range=(args.min_size, args.max_size),
        release_probability=args.release_probability,
        policy=args.policy,
    )
    recorder = EventRecorder(run_id=f"{config.policy}_seed{config.seed}", output_dir=args.profile_dir)
    summary = run_simulation(config, recorder=recorder, verbose=True)
    recorder.flush()
    print("Summary:", summary)


if __name__ == "__main__":
    main()
