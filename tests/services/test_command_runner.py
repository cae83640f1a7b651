import sys

import pytest

from pgprovisioner.errors import CommandTimeoutError, ExecutionError, ProcessSpawnError
from pgprovisioner.services.command_runner import CommandRunner


class DummyLogger:
    def __init__(self):
        self.messages = []

    def debug(self, message, *args, **_kwargs):
        self.messages.append(message % args)

    def warning(self, *_args, **_kwargs):
        return None


def test_run_raises_execution_error_with_exit_code():
    runner = CommandRunner(logger=DummyLogger())

    with pytest.raises(ExecutionError, match=r"Command failed \(4\)") as excinfo:
        runner.run([sys.executable, "-c", "import sys; sys.exit(4)"])

    assert excinfo.value.exit_code == 4
    assert excinfo.value.command[0] == sys.executable


def test_run_returns_none_on_success():
    runner = CommandRunner(logger=DummyLogger())

    assert runner.run([sys.executable, "-c", "pass"]) is None


def test_run_capture_returns_exit_code_and_output_without_raising():
    runner = CommandRunner(logger=DummyLogger())

    result = runner.run_capture(
        [sys.executable, "-c", "import sys; print('1'); sys.exit(2)"],
    )

    assert result.exit_code == 2
    assert result.output.strip() == "1"
    assert result.ok is False


def test_run_capture_passes_input_text_on_stdin():
    runner = CommandRunner(logger=DummyLogger())

    result = runner.run_capture(
        [sys.executable, "-c", "import sys; print(sys.stdin.read().upper())"],
        input_text="select 1;",
    )

    assert result.ok
    assert result.output.strip() == "SELECT 1;"


def test_missing_binary_raises_spawn_error():
    runner = CommandRunner(logger=DummyLogger())

    with pytest.raises(ProcessSpawnError, match="Required command not found"):
        runner.run_capture(["pgprovisioner-no-such-binary-xyz"])


def test_timeout_raises_timeout_error():
    runner = CommandRunner(logger=DummyLogger(), default_timeout=0.1)

    with pytest.raises(CommandTimeoutError, match="timed out"):
        runner.run([sys.executable, "-c", "import time; time.sleep(2)"])


def test_secrets_are_masked_in_logs_and_errors():
    logger = DummyLogger()
    runner = CommandRunner(logger=logger, secrets=["s3cret"])

    with pytest.raises(ExecutionError) as excinfo:
        runner.run([sys.executable, "-c", "import sys; sys.exit(1)", "password=s3cret"])

    assert "s3cret" not in str(excinfo.value)
    assert all("s3cret" not in message for message in logger.messages)
    assert "password=********" in str(excinfo.value)


def test_password_matching_command_words_does_not_mangle_the_command():
    logger = DummyLogger()
    runner = CommandRunner(logger=logger, secrets=["psql"])

    with pytest.raises(ExecutionError) as excinfo:
        runner.run([sys.executable, "-c", "import sys; sys.exit(1)", "psql", "-v", "password=psql"])

    assert excinfo.value.command[-3:] == ("psql", "-v", "password=********")
    assert excinfo.value.command[1:3] == ("-c", "import sys; sys.exit(1)")


def test_timeout_error_is_an_execution_error_without_exit_code():
    runner = CommandRunner(logger=DummyLogger(), default_timeout=0.1)

    with pytest.raises(ExecutionError) as excinfo:
        runner.run_capture([sys.executable, "-c", "import time; time.sleep(2)"])

    assert isinstance(excinfo.value, CommandTimeoutError)
    assert excinfo.value.exit_code is None
    assert excinfo.value.timeout == 0.1
