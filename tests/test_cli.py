"""End-to-end tests: run `python -m multirun` as a real process."""

import os
import sys
import time
import signal
import subprocess
from pathlib import Path

import pytest

REPO_ROOT = Path(__file__).resolve().parent.parent


def _env(**overrides):
    env = dict(os.environ)
    env["PYTHONPATH"] = os.pathsep.join(filter(None, [str(REPO_ROOT), env.get("PYTHONPATH")]))
    env.update(overrides)
    return env


def run_multirun(*args, timeout=20, **env_overrides) -> subprocess.CompletedProcess:
    return subprocess.run(
        [sys.executable, "-m", "multirun", *args],
        capture_output=True, text=True, timeout=timeout, env=_env(**env_overrides),
    )


def test_failing_command_stops_the_rest():
    start = time.monotonic()
    result = run_multirun("-v", "sleep 5", 'sh -c "exit 1"')
    duration = time.monotonic() - start

    assert result.returncode == 1
    assert duration < 4
    assert "one or more of the provided commands ended abnormally" in result.stderr
    assert "exited abnormally" in result.stdout


def test_forwarded_sigterm_exits_cleanly():
    proc = subprocess.Popen(
        [sys.executable, "-m", "multirun", "-v", "sleep 5", "sleep 5"],
        stdout=subprocess.PIPE, stderr=subprocess.PIPE, text=True, env=_env(),
    )
    try:
        launched = 0
        while launched < 2:
            line = proc.stdout.readline()
            assert line, "multirun exited before launching both commands"
            if "launched command" in line:
                launched += 1

        proc.send_signal(signal.SIGTERM)
        start = time.monotonic()
        out, err = proc.communicate(timeout=10)
    finally:
        if proc.poll() is None:
            proc.kill()
            proc.wait()

    assert proc.returncode == 0, err
    assert time.monotonic() - start < 4
    assert "received signal SIGTERM, propagating to all subprocesses" in out
    assert "all subprocesses exited without errors" in out


@pytest.mark.parametrize("commands", [
    ["echo hello && echo world"],
    ["echo hello; echo world"],
    ["echo hello | grep hello"],
    ["sleep 1 &"],
    ["echo hello", "sleep 1 && sleep 1"],
])
def test_chained_commands_are_rejected(commands):
    result = run_multirun(*commands)

    assert result.returncode == 2
    assert "multirun: error: chained commands are not supported." in result.stderr
    assert "hello" not in result.stdout


@pytest.mark.parametrize("command, expected", [
    ('echo "hello&world"', "hello&world"),
    ("echo 'hello|world'", "hello|world"),
    ('echo "hello;world"', "hello;world"),
    ('echo "a\\"b&c\\"d"', 'a"b&c"d'),
])
def test_quoted_operators_are_accepted(command, expected):
    result = run_multirun(command)

    assert result.returncode == 0, result.stderr
    assert expected in result.stdout


def test_no_commands_is_usage_error():
    result = run_multirun()
    assert result.returncode == 2
    assert "usage:" in result.stderr


def test_nothing_started_exits_one():
    result = run_multirun("sleep 5", MULTIRUN_SHELL="/nonexistent/multirun-shell")

    assert result.returncode == 1
    assert "error starting command 'sleep 5'" in result.stderr
    assert "no processes were successfully started." in result.stderr


def test_quiet_by_default():
    result = run_multirun("true")
    assert result.returncode == 0
    assert result.stdout == ""
    assert result.stderr == ""
