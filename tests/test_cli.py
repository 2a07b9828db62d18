import contextlib
import io
import json
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from simulations.cli import MenuShell, main, parse_args


def run_shell(script: str, partitions=None) -> str:
    stdout = io.StringIO()
    shell = MenuShell(stdin=io.StringIO(script), stdout=stdout)
    status = shell.run(partitions)
    assert status == 0
    return stdout.getvalue()


class InterruptedInput:
    """Feeds the given lines, then behaves like a user pressing Ctrl-C."""

    def __init__(self, lines) -> None:
        self._lines = list(lines)

    def readline(self) -> str:
        if self._lines:
            return self._lines.pop(0)
        raise KeyboardInterrupt


class MenuShellTests(unittest.TestCase):
    def test_interactive_session(self) -> None:
        script = "\n".join(
            [
                "2", "0", "10", "4",  # two partitions, one invalid size re-prompted
                "1", "4",             # job 1 -> partition 2
                "1", "-1", "20",      # invalid size, then job 2 queued
                "2", "7",             # unknown job
                "3",
                "2", "1",             # release job 1
                "4",
            ]
        ) + "\n"
        output = run_shell(script)
        self.assertIn("Invalid size. Try again.", output)
        self.assertIn("Job 1 allocated to Partition 2 (Best Fit).", output)
        self.assertIn("No available partition for Job 2 -> Added to waiting queue.", output)
        self.assertIn("Job not found.", output)
        self.assertIn("Waiting Queue: [Job 2 (20)]", output)
        self.assertIn("Job 1 deallocated from Partition 2", output)

    def test_waiting_job_allocated_after_release(self) -> None:
        script = "1\n5\n1\n5\n2\n1\n4\n"
        output = run_shell(script, partitions=[5])
        self.assertIn("Job 1 allocated to Partition 1 (Best Fit).", output)
        self.assertIn("Waiting Job 2 allocated to Partition 1.", output)

    def test_bad_partitions_argument_falls_back_to_prompt(self) -> None:
        output = run_shell("1\n8\n4\n", partitions=[5, -1])
        self.assertIn("Try again.", output)
        self.assertIn("Enter size of Partition 1: ", output)

    def test_non_numeric_input_and_eof(self) -> None:
        output = run_shell("abc\n1\n5\n9\n")
        self.assertIn("Invalid input. Try again.", output)
        self.assertIn("Invalid choice.", output)

    def test_main_rejects_unknown_policy(self) -> None:
        self.assertEqual(main(["--policy", "next-fit"]), 2)

    def test_interrupted_session_keeps_event_log(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            with mock.patch("sys.stdin", InterruptedInput(["1\n", "4\n"])), \
                    mock.patch("sys.stdout", io.StringIO()), \
                    mock.patch("sys.stderr", io.StringIO()):
                status = main(["--partitions", "5", "--profile-dir", tmpdir])

            self.assertEqual(status, 130)
            jsonl_path = Path(tmpdir) / "interactive.jsonl"
            self.assertTrue(jsonl_path.exists())
            events = [json.loads(line) for line in jsonl_path.read_text(encoding="utf-8").splitlines()]
            self.assertEqual([event["event"] for event in events], ["placed"])
            self.assertEqual((events[0]["job"], events[0]["partition"]), (1, 1))
            self.assertTrue((Path(tmpdir) / "interactive.csv").exists())

    def test_log_level_is_validated(self) -> None:
        self.assertEqual(parse_args(["--log-level", "debug"]).log_level, "DEBUG")
        with contextlib.redirect_stderr(io.StringIO()):
            with self.assertRaises(SystemExit):
                parse_args(["--log-level", "foo"])


if __name__ == "__main__":
    unittest.main()
