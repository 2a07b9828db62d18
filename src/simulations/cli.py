from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional, Sequence, TextIO

from partition_memory import (
    AllocationEngine,
    InvalidConfiguration,
    InvalidJobSize,
    JobNotFound,
    PlacementPolicy,
    get_policy,
)
from simulations.instrumentation import LOG_LEVELS, EventRecorder

MENU = """
========== BEST FIT MENU ==========
1. Add Job
2. Deallocate Job
3. Show Status
4. Exit"""


class MenuShell:
    """
    Interactive front end for an AllocationEngine.

    Reads partition sizes once, then loops over menu commands until the user
    exits or input runs out. All recoverable engine errors are reported and
    the user is asked again; nothing here changes an allocation decision.
    """

    def __init__(
        self,
        *,
        stdin: Optional[TextIO] = None,
        stdout: Optional[TextIO] = None,
        policy: Optional[PlacementPolicy] = None,
        recorder: Optional[EventRecorder] = None,
    ) -> None:
        self.stdin = stdin or sys.stdin
        self.stdout = stdout or sys.stdout
        self.policy = policy
        self.recorder = recorder
        self.engine: Optional[AllocationEngine] = None

    # -- I/O helpers -----------------------------------------------------------------
    def write(self, text: str = "") -> None:
        self.stdout.write(text + "\n")

    def ask_int(self, prompt: str) -> int:
        """Prompt until the user types an integer; EOFError when input is exhausted."""
        while True:
            self.stdout.write(prompt)
            self.stdout.flush()
            line = self.stdin.readline()
            if not line:
                raise EOFError
            try:
                return int(line.strip())
            except ValueError:
                self.write("Invalid input. Try again.")

    # -- Setup -----------------------------------------------------------------------
    def prompt_partition_sizes(self) -> List[int]:
        while True:
            count = self.ask_int("Enter number of partitions: ")
            if count > 0:
                break
            self.write("Invalid number of partitions. Try again.")
        sizes: List[int] = []
        for index in range(1, count + 1):
            while True:
                size = self.ask_int(f"Enter size of Partition {index}: ")
                if size > 0:
                    sizes.append(size)
                    break
                self.write("Invalid size. Try again.")
        return sizes

    def setup(self, partitions: Optional[Sequence[int]] = None) -> AllocationEngine:
        sizes = list(partitions) if partitions else None
        while True:
            if sizes is None:
                sizes = self.prompt_partition_sizes()
            try:
                self.engine = AllocationEngine(sizes, policy=self.policy, recorder=self.recorder)
                return self.engine
            except InvalidConfiguration as exc:
                self.write(f"{exc}. Try again.")
                sizes = None

    # -- Commands --------------------------------------------------------------------
    def add_job(self) -> None:
        while True:
            size = self.ask_int("Enter job size: ")
            try:
                result = self.engine.submit(size)
                break
            except InvalidJobSize:
                self.write("Invalid size. Try again.")
        if result.placed:
            title = self.engine.pool.policy.name.replace("-", " ").title()
            self.write(f"\nJob {result.job.number} allocated to Partition {result.partition_id} ({title}).")
        else:
            self.write(f"\nNo available partition for Job {result.job.number} -> Added to waiting queue.")

    def deallocate_job(self) -> None:
        job_number = self.ask_int("Enter job number to deallocate: ")
        try:
            result = self.engine.release(job_number)
        except JobNotFound:
            self.write("\nJob not found.")
            return
        self.write(f"\nJob {result.job.number} deallocated from Partition {result.partition_id}")
        for placement in result.retried:
            self.write(f"\nWaiting Job {placement.job.number} allocated to Partition {placement.partition_id}.")

    def show_status(self) -> None:
        self.write()
        self.write(self.engine.format_status())

    def run(self, partitions: Optional[Sequence[int]] = None) -> int:
        try:
            self.setup(partitions)
            while True:
                self.write(MENU)
                choice = self.ask_int("Choose: ")
                if choice == 1:
                    self.add_job()
                elif choice == 2:
                    self.deallocate_job()
                elif choice == 3:
                    self.show_status()
                elif choice == 4:
                    return 0
                else:
                    self.write("Invalid choice.")
        except EOFError:
            self.write()
            return 0


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Interactive fixed-partition Best-Fit memory simulator.")
    parser.add_argument(
        "--partitions",
        type=int,
        nargs="+",
        default=None,
        help="Partition capacities in id order; prompted for when omitted.",
    )
    parser.add_argument("--policy", type=str, default="best-fit", help="Placement policy name.")
    parser.add_argument(
        "--profile-dir",
        type=str,
        default=None,
        help="Stream JSONL event logs here; CSV is written on exit.",
    )
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=LOG_LEVELS,
        default="WARNING",
        help="Logging level for diagnostics.",
    )
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(level=args.log_level, format="%(levelname)s %(name)s: %(message)s")
    try:
        policy = get_policy(args.policy)
    except InvalidConfiguration as exc:
        print(exc, file=sys.stderr)
        return 2
    recorder = None
    if args.profile_dir:
        # Stream events so an interrupted session still leaves its log behind.
        recorder = EventRecorder(run_id="interactive", output_dir=args.profile_dir, write_immediately=True)
    shell = MenuShell(policy=policy, recorder=recorder)
    try:
        return shell.run(args.partitions)
    except KeyboardInterrupt:
        print(file=sys.stderr)
        return 130
    finally:
        if recorder:
            recorder.flush()


if __name__ == "__main__":
    sys.exit(main())
