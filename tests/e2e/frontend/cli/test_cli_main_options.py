"""End-to-end tests for the options on the top-level ``sturdy`` command.

Each test runs the ``log-demo`` command under different verbosity, debug,
logger-level and flight-recorder settings and inspects the console output or
the flight-recorder file.
"""

import re
from pathlib import Path

import pytest

from sturdy.entrypoints.cli.main import sturdy

# pylint: disable=unused-argument

LOG_FILE = "flight_recorder.log"


def assert_in_output(pattern: str, output: str) -> None:
    """Fail unless regex *pattern* occurs in *output*."""
    if not re.search(pattern, output, re.MULTILINE):
        raise AssertionError(f"Pattern '{pattern}' not found in output:\n{output}")


def assert_not_in_output(pattern: str, output: str) -> None:
    """Fail if regex *pattern* occurs in *output*."""
    if re.search(pattern, output, re.MULTILINE):
        raise AssertionError(f"Pattern '{pattern}' found in output:\n{output}")


def read_log(path: str = LOG_FILE) -> str:
    return Path(path).read_text(encoding="utf-8")


# ============================================================================
#                               Console verbosity
# ============================================================================


@pytest.mark.parametrize(
    "args, shown, hidden",
    [
        ([], "WARNING", "INFO"),
        (["-v"], "INFO", "DEBUG"),
        (["-vv"], "DEBUG", None),
        (["-q"], "ERROR", "WARNING"),
        (["-qq"], "CRITICAL", "ERROR"),
    ],
    ids=["default", "v", "vv", "q", "qq"],
)
def test_verbosity(registered_log_demo, runner, fs, args, shown, hidden):
    """Each -v lowers the console threshold one level, each -q raises it."""
    result = runner.invoke(sturdy, [*args, "log-demo"])
    assert result.exit_code == 0
    assert_in_output(shown, result.output)
    if hidden is not None:
        assert_not_in_output(hidden, result.output)


@pytest.mark.parametrize(
    "env, cli_args",
    [
        ({}, ["-vv", "-L", "some.thirdparty=INFO"]),
        ({"STURDY_LOGGER_LEVELS": "some.thirdparty=INFO"}, ["-vv"]),
    ],
    ids=["cli-flag", "env-var"],
)
def test_logger_level_override(registered_log_demo, runner, fs, env, cli_args):
    """A per-logger level hides that logger's DEBUG but keeps its INFO."""
    result = runner.invoke(sturdy, [*cli_args, "log-demo"], env=env)
    assert result.exit_code == 0
    assert_not_in_output("debug-level third-party", result.output)
    assert_in_output("info-level third-party", result.output)
    assert_in_output("This is a debug-level test message", result.output)


def test_bad_logger_level_is_a_usage_error(registered_log_demo, runner, fs):
    """A malformed -L value stops the CLI with a usage error."""
    result = runner.invoke(sturdy, ["-L", "sturdy=LOUD", "log-demo"])
    assert result.exit_code == 2
    assert "Invalid log level" in result.output


def test_third_party_records_are_prefixed(registered_log_demo, runner, fs):
    """Outside debug mode, other packages' messages carry their package name."""
    result = runner.invoke(sturdy, ["log-demo"])
    assert result.exit_code == 0
    assert_in_output(r"\[some\] This is a warning-level third-party", result.output)


def test_debug_mode_shows_paths(registered_log_demo, runner, fs):
    """--debug adds source locations to console records."""
    result = runner.invoke(sturdy, ["--debug", "log-demo"])
    assert result.exit_code == 0
    assert_in_output(r"conftest\.py:\d+\b", result.output)
    assert_in_output("sturdy.demo", result.output)


def test_debug_mode_is_off_by_default(registered_log_demo, runner, fs):
    """Without --debug there are no source locations."""
    result = runner.invoke(sturdy, ["log-demo"])
    assert result.exit_code == 0
    assert_not_in_output(r"conftest\.py:\d+\b", result.output)


# ============================================================================
#                               Flight recorder
# ============================================================================


def test_flight_recorder_flushes_on_warning(registered_log_demo, runner, fs):
    """Buffered DEBUG records are written once a WARNING arrives."""
    result = runner.invoke(
        sturdy, ["--log-path", LOG_FILE, "-L", "some.thirdparty=INFO", "log-demo"]
    )
    assert result.exit_code == 0
    content = read_log()
    assert_in_output("This is a debug-level test message.", content)
    assert_in_output("This is a warning-level test message.", content)
    assert_in_output("This is a critical-level test message.", content)
    assert_in_output("This is an info-level third-party test message.", content)
    assert_not_in_output("This is a debug-level third-party test message.", content)
    # still buffered when the command ends
    assert_not_in_output("This is a final debug-level test message.", content)


@pytest.mark.parametrize(
    "env, cli_args",
    [({}, ["--force-flush"]), ({"STURDY_FORCE_FLUSH_FLIGHT_RECORDER": "true"}, [])],
    ids=["cli-flag", "env-var"],
)
def test_flight_recorder_force_flush(registered_log_demo, runner, fs, env, cli_args):
    """Force-flush writes the remaining buffer on exit."""
    result = runner.invoke(
        sturdy, ["--log-path", LOG_FILE, *cli_args, "log-demo"], env=env
    )
    assert result.exit_code == 0
    assert_in_output("This is a final debug-level test message.", read_log())


@pytest.mark.parametrize(
    "env, cli_args",
    [({}, ["--no-flight-recorder"]), ({"STURDY_FLIGHT_RECORDER": "0"}, [])],
    ids=["cli-flag", "env-var"],
)
def test_flight_recorder_can_be_disabled(
    registered_log_demo, runner, fs, env, cli_args
):
    """With the recorder off, no log file is created."""
    result = runner.invoke(
        sturdy, ["--log-path", LOG_FILE, *cli_args, "log-demo"], env=env
    )
    assert result.exit_code == 0
    assert not Path(LOG_FILE).exists()


def test_log_path_from_environment(registered_log_demo, runner, fs):
    """STURDY_LOG_PATH chooses the flight-recorder file."""
    result = runner.invoke(sturdy, ["log-demo"], env={"STURDY_LOG_PATH": "env.log"})
    assert result.exit_code == 0
    assert_in_output("warning-level test message", read_log("env.log"))


def test_flight_recorder_truncates_between_runs(registered_log_demo, runner, fs):
    """Each run starts a fresh file."""
    sizes = []
    for _ in range(2):
        result = runner.invoke(sturdy, ["--log-path", LOG_FILE, "log-demo"])
        assert result.exit_code == 0
        sizes.append(len(read_log().splitlines()))
    assert sizes[0] == sizes[1]


def test_startup_logging(registered_log_demo, runner, fs):
    """The recorder captures the startup summary and environment details."""
    result = runner.invoke(
        sturdy, ["--log-path", "startup.log", "--force-flush", "log-demo"]
    )
    assert result.exit_code == 0
    content = read_log("startup.log")
    assert_in_output(r"STURDY \d+\.\d+\.\d+ - console=WARNING, flight-recorder=ON", content)
    assert_in_output(r"Python: \d+\.\d+\.\d+", content)
    assert_in_output(r"Platform: .+", content)
    assert_in_output(r"PID: \d+", content)
    assert_in_output(r"CWD: .+", content)
    assert_in_output(r"PyYAML: \d+\.\d+", content)
    assert_in_output(r"Click: \d+\.\d+", content)
    assert_in_output(r"Handlers: \['RichHandler', 'MemoryHandler'\]", content)
    assert_in_output(
        r"Flight recorder: path=startup\.log, capacity=2000, flush_on_close=True",
        content,
    )
    assert_in_output(r"Per-logger overrides: \{'click_extra': 'WARNING'\}", content)
