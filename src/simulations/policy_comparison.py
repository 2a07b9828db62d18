from __future__ import annotations

import argparse
import csv
import os
from dataclasses import replace
from typing import Dict, List, Sequence

from partition_memory.allocators import POLICIES
from simulations.run_simulation import SimulationConfig, run_simulation


def compare_policies(
    base: SimulationConfig,
    seeds: Sequence[int],
    policies: Sequence[str] = tuple(POLICIES),
) -> List[Dict[str, object]]:
    """Replay the same seeded workloads under each placement policy."""
    summaries: List[Dict[str, object]] = []
    for policy in policies:
        for seed in seeds:
            config = replace(base, policy=policy, seed=seed, label=f"{policy}_seed{seed}")
            summaries.append(run_simulation(config))
    return summaries


def write_summary(path: str, records: List[Dict[str, object]]) -> None:
    if not records:
        return
    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)
    with open(path, "w", newline="") as handle:
        writer = csv.DictWriter(handle, fieldnames=list(records[0].keys()))
        writer.writeheader()
        writer.writerows(records)


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Compare placement policies on identical workloads.")
    parser.add_argument("--partitions", type=int, nargs="+", default=[100, 500, 200, 300, 600])
    parser.add_argument("--steps", type=int, default=200, help="Commands per run.")
    parser.add_argument("--seeds", type=int, default=5, help="Number of random seeds to evaluate.")
    parser.add_argument("--seed-offset", type=int, default=0, help="Offset applied to generated seeds.")
    parser.add_argument("--min-size", type=int, default=50)
    parser.add_argument("--max-size", type=int, default=450)
    parser.add_argument("--release-probability", type=float, default=0.35)
    parser.add_argument("--output", type=str, default="results/policy_comparison.csv", help="CSV summary path.")
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    base = SimulationConfig(
        partition_sizes=args.partitions,
        steps=args.steps,
        size_range=(args.min_size, args.max_size),
        release_probability=args.release_probability,
    )
    seeds = [args.seed_offset + index for index in range(args.seeds)]
    summaries = compare_policies(base, seeds)
    write_summary(args.output, summaries)

    for summary in summaries:
        print(
            f"[{summary['config']}] placed={summary['placed_on_submit']} "
            f"queued={summary['queued_on_submit']} retried={summary['retry_placements']} "
            f"avg_fragmentation={summary['mean_avg_fragmentation']:.2f} "
            f"utilization={summary['mean_utilization']:.2f}%"
        )


if __name__ == "__main__":
    main()
