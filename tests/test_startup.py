"""Tests for subreaper registration and signal routing."""

import os
import signal
import sys

import pytest

from multirun.supervisor import ProcessManager
from multirun.supervisor.models import SignalReceived
from multirun.supervisor.startup import (
    LinuxSubreaper, NoopSubreaper, get_subreaper, install_signal_handlers,
    register_subreaper, restore_signal_handlers,
)


class _FakeSubreaper:
    def __init__(self, succeed: bool, errno: int = 0):
        self.succeed = succeed
        self.errno = errno
        self.calls = 0

    def register(self) -> bool:
        self.calls += 1
        return self.succeed


class TestRegisterSubreaper:

    def test_success_is_logged(self, caplog):
        caplog.set_level("INFO")
        fake = _FakeSubreaper(succeed=True)
        assert register_subreaper(fake) is True
        assert fake.calls == 1
        assert "successfully registered as subreaper." in caplog.text

    def test_failure_is_logged_not_raised(self, caplog):
        caplog.set_level("INFO")
        assert register_subreaper(_FakeSubreaper(succeed=False, errno=1)) is False
        assert "failed to register as subreaper (errno: 1)" in caplog.text

    def test_unsupported_platform_is_silent(self, caplog):
        caplog.set_level("DEBUG")
        assert register_subreaper(NoopSubreaper()) is False
        assert "subreaper" not in caplog.text

    def test_platform_selection(self):
        expected = LinuxSubreaper if sys.platform.startswith("linux") else NoopSubreaper
        assert isinstance(get_subreaper(), expected)

    @pytest.mark.skipif(not sys.platform.startswith("linux"), reason="prctl is Linux only")
    def test_linux_registration_does_not_raise(self):
        assert isinstance(LinuxSubreaper().register(), bool)


class TestSignalHandlers:

    @pytest.mark.parametrize("sig", [signal.SIGTERM, signal.SIGINT])
    def test_signal_becomes_event(self, sig):
        manager = ProcessManager()
        previous = install_signal_handlers(manager)
        try:
            os.kill(os.getpid(), sig)
            event = manager.events.get(timeout=5)
        finally:
            restore_signal_handlers(previous)

        assert event == SignalReceived(sig)

    def test_previous_handlers_are_restored(self):
        before = signal.getsignal(signal.SIGTERM)
        previous = install_signal_handlers(ProcessManager())
        assert signal.getsignal(signal.SIGTERM) is not before
        restore_signal_handlers(previous)
        assert signal.getsignal(signal.SIGTERM) == before
