"""Shared fixtures for the multirun test suite."""

import logging
from unittest.mock import MagicMock

import pytest

from multirun.config import effective_settings
from multirun.log.setup import MainFormatter
from multirun.supervisor.models import Subprocess


@pytest.fixture(autouse=True)
def _restore_config_and_logging():
    """Undo runtime overrides and root logger changes made by a test."""
    root_logger = logging.getLogger()
    level = root_logger.level
    yield
    effective_settings.reset()
    for handler in list(root_logger.handlers):
        if isinstance(handler.formatter, MainFormatter):
            root_logger.removeHandler(handler)
    root_logger.setLevel(level)


def make_subprocess(pid: int, command: str = "sleep 5") -> Subprocess:
    """A Subprocess entry backed by a fake process handle."""
    process = MagicMock()
    process.pid = pid
    return Subprocess(command=command, process=process)


@pytest.fixture
def fake_subprocess():
    return make_subprocess
