import os
import signal
import logging
from typing import Iterable, Union

from multirun.supervisor.models import Subprocess

log = logging.getLogger(__name__)


def _signal_group(proc: Subprocess, sig: Union[signal.Signals, int]) -> bool:
    """
    Sends a signal to every process in the child's group.

    :return: True if delivered or the group is already gone, False on any other failure.
    """
    try:
        log.debug(f"Sending {getattr(sig, 'name', sig)} to process group {proc.pgid} (\"{proc.command}\")")
        os.killpg(proc.pgid, sig)
    except ProcessLookupError:
        # Already exited.
        pass
    except OSError as e:
        log.error(f"error killing process group {proc.pgid}: {e}")
        return False
    return True


def broadcast(subprocesses: Iterable[Subprocess], sig: Union[signal.Signals, int]) -> int:
    """
    Sends the given signal to the process group of every child still alive.

    Targets that no longer exist are silently skipped and any other delivery
    failure is reported without aborting the broadcast to the rest.

    :param subprocesses: The supervisor's subprocess entries.
    :param sig: The signal to deliver.
    :return: The number of groups that failed to receive the signal.
    """
    failures = 0
    for proc in subprocesses:
        if proc.alive and not _signal_group(proc, sig):
            failures += 1
    return failures
