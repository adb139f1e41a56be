"""Tests for executor module."""

import os
import subprocess
import unittest
from unittest.mock import patch

from helpers.logging import RecordingLogger
from helpers.process_runner import FakeProcessRunner
from forge.executor import (
    DEFAULT_SHELL,
    CommandExecutionError,
    DryRunExecutor,
    ShellExecutor,
)
from forge.forgefile import ResolvedTarget, TargetDefinition
from forge.logging import LogLevel


def make_target(name="t", commands=(), environment=None) -> ResolvedTarget:
    return ResolvedTarget(
        name=name,
        definition=TargetDefinition(commands=commands, environment=environment or {}),
    )


class TestShellExecutor(unittest.TestCase):
    def test_runs_each_command_in_its_own_shell(self):
        """Test every command becomes a separate `sh -c` invocation, in order."""
        process_runner = FakeProcessRunner()
        executor = ShellExecutor(process_runner=process_runner)

        executor.execute(make_target(commands=["cd /tmp", "pwd", "?echo hi"]))

        self.assertEqual(
            [cmd for cmd, _ in process_runner.calls],
            [
                [DEFAULT_SHELL, "-c", "cd /tmp"],
                [DEFAULT_SHELL, "-c", "pwd"],
                [DEFAULT_SHELL, "-c", "echo hi"],
            ],
        )

    def test_custom_shell(self):
        """Test the configured shell is used."""
        process_runner = FakeProcessRunner()
        ShellExecutor(shell="/bin/bash", process_runner=process_runner).execute(
            make_target(commands=["echo"])
        )
        self.assertEqual(process_runner.calls[0][0][0], "/bin/bash")

    def test_no_commands(self):
        """Test a target without commands runs nothing."""
        process_runner = FakeProcessRunner()
        ShellExecutor(process_runner=process_runner).execute(make_target())
        self.assertEqual(process_runner.calls, [])

    def test_environment_extends_inherited(self):
        """Test the target environment is added to, and overrides, os.environ."""
        process_runner = FakeProcessRunner()
        executor = ShellExecutor(process_runner=process_runner)

        with patch.dict(os.environ, {"FORGE_INHERITED": "yes", "FORGE_OVERRIDE": "old"}):
            executor.execute(
                make_target(
                    commands=["env"],
                    environment={"FORGE_OVERRIDE": "new", "FORGE_DECLARED": "1"},
                )
            )
            env = process_runner.calls[0][1]["env"]

            self.assertEqual(env["FORGE_INHERITED"], "yes")
            self.assertEqual(env["FORGE_OVERRIDE"], "new")
            self.assertEqual(env["FORGE_DECLARED"], "1")
            # The process environment itself is untouched
            self.assertEqual(os.environ["FORGE_OVERRIDE"], "old")
            self.assertNotIn("FORGE_DECLARED", os.environ)

    def test_failing_command_aborts_target(self):
        """Test a non-zero exit stops the remaining commands."""
        process_runner = FakeProcessRunner({"false": 1})
        executor = ShellExecutor(process_runner=process_runner)

        with self.assertRaises(CommandExecutionError) as ctx:
            executor.execute(make_target("b", ["echo one", "false", "?exit 1", "echo done"]))

        self.assertEqual(process_runner.commands, ["echo one", "false"])
        error = ctx.exception
        self.assertEqual(error.target_name, "b")
        self.assertEqual(error.command_index, 1)
        self.assertIsInstance(error.cause, subprocess.CalledProcessError)
        self.assertEqual(error.cause.returncode, 1)
        self.assertIn("index 1", str(error))
        self.assertIn("'b'", str(error))

    def test_ignored_failure_continues(self):
        """Test a marked command's non-zero exit is swallowed."""
        process_runner = FakeProcessRunner({"exit 3": 3})
        logger = RecordingLogger()
        executor = ShellExecutor(process_runner=process_runner, logger=logger)

        executor.execute(make_target(commands=["?exit 3", "echo after"]))

        self.assertEqual(process_runner.commands, ["exit 3", "echo after"])
        self.assertTrue(any("Ignoring exit code 3" in m for m in logger.at(LogLevel.DEBUG)))

    def test_launch_failure_is_never_ignored(self):
        """Test an error starting the shell fails even for marked commands."""
        missing = FileNotFoundError(2, "No such file or directory", "/no/shell")
        process_runner = FakeProcessRunner({"echo hi": missing})
        executor = ShellExecutor(shell="/no/shell", process_runner=process_runner)

        with self.assertRaises(CommandExecutionError) as ctx:
            executor.execute(make_target(commands=["?echo hi", "echo never"]))

        self.assertIs(ctx.exception.cause, missing)
        self.assertEqual(ctx.exception.command_index, 0)
        self.assertEqual(process_runner.commands, ["echo hi"])

    def test_rejected_arguments_are_never_ignored(self):
        """Test a ValueError from the process runner fails even marked commands."""
        rejected = ValueError("embedded null byte")
        process_runner = FakeProcessRunner({"echo hi": rejected})
        executor = ShellExecutor(process_runner=process_runner)

        with self.assertRaises(CommandExecutionError) as ctx:
            executor.execute(make_target(commands=["?echo hi", "echo never"]))

        self.assertIs(ctx.exception.cause, rejected)
        self.assertIn("embedded null byte", str(ctx.exception))
        self.assertEqual(process_runner.commands, ["echo hi"])

    def test_real_shell_rejects_nul_byte_in_command(self):
        """Test a NUL byte in a command becomes a CommandExecutionError."""
        with self.assertRaises(CommandExecutionError) as ctx:
            ShellExecutor().execute(make_target(commands=["?echo \0"]))

        self.assertEqual(ctx.exception.target_name, "t")
        self.assertIsInstance(ctx.exception.cause, ValueError)

    def test_real_shell_rejects_illegal_environment_name(self):
        """Test an environment name containing '=' becomes a CommandExecutionError."""
        with self.assertRaises(CommandExecutionError) as ctx:
            ShellExecutor().execute(make_target(commands=["true"], environment={"X=Y": "1"}))

        self.assertIsInstance(ctx.exception.cause, ValueError)

    def test_real_shell_commands_are_independent(self):
        """Test shell state does not carry over between commands."""
        executor = ShellExecutor()
        target = make_target(
            commands=["FORGE_VAR=set", 'test -z "$FORGE_VAR"'],
        )
        # Would fail with exit 1 if the variable leaked into the second shell
        executor.execute(target)

    def test_real_shell_sees_declared_environment(self):
        """Test declared variables reach the real shell."""
        executor = ShellExecutor()
        executor.execute(
            make_target(commands=['test "$FORGE_GREETING" = hello'], environment={"FORGE_GREETING": "hello"})
        )

    def test_real_shell_failure(self):
        """Test a real failing command raises."""
        with self.assertRaises(CommandExecutionError):
            ShellExecutor().execute(make_target(commands=["exit 7"]))


class TestDryRunExecutor(unittest.TestCase):
    def test_logs_stripped_commands_in_order(self):
        """Test every command text is logged at info level without markers."""
        logger = RecordingLogger()
        executor = DryRunExecutor(logger)

        executor.execute(make_target(commands=["echo a", "?false", "rm -rf build"]))

        self.assertEqual(logger.at(LogLevel.INFO), ["echo a", "false", "rm -rf build"])

    @patch("subprocess.run")
    def test_never_spawns_processes(self, mock_run):
        """Test dry run does not call subprocess."""
        DryRunExecutor(RecordingLogger()).execute(make_target(commands=["exit 1"]))
        mock_run.assert_not_called()

    def test_default_logger(self):
        """Test dry run works without a logger."""
        DryRunExecutor().execute(make_target(commands=["echo a"]))


if __name__ == "__main__":
    unittest.main()
