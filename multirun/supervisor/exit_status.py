import signal
from typing import Optional

from multirun.config import effective_settings as config
from multirun.supervisor.models import Exited, Outcome, Signaled, Termination, UnknownTermination


def termination_from_returncode(returncode: Optional[int]) -> Termination:
    """
    Decodes a Popen return code into termination info.

    A negative return code means the child was killed by that signal.

    :param returncode: The value returned by `Popen.wait()`.
    :return: Exited, Signaled or UnknownTermination.
    """
    if not isinstance(returncode, int) or isinstance(returncode, bool):
        return UnknownTermination()
    if returncode >= 0:
        return Exited(returncode)
    try:
        return Signaled(signal.Signals(-returncode))
    except ValueError:
        return Signaled(-returncode)


def is_normal_exit(termination: Termination) -> bool:
    """
    Decides whether a child ended normally.

    Exit code 0 is normal, and so is death by one of the signals the
    supervisor relays for shutdown. Anything else is abnormal.
    """
    if isinstance(termination, Exited):
        return termination.code == 0
    if isinstance(termination, Signaled):
        return termination.signum in config.NORMAL_EXIT_SIGNALS
    return False


def classify(termination: Termination) -> Outcome:
    return Outcome.NORMAL if is_normal_exit(termination) else Outcome.ABNORMAL


def describe(termination: Termination) -> str:
    """Human-readable termination cause for log messages."""
    if isinstance(termination, Exited):
        return f"exit code {termination.code}"
    if isinstance(termination, Signaled):
        name = getattr(termination.signum, "name", str(termination.signum))
        return f"signal {name}"
    return "unknown cause"
