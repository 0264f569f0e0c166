import psutil
import logging
import threading
from typing import TYPE_CHECKING, List, Optional

from multirun.config import effective_settings as config
from multirun.supervisor.exit_status import termination_from_returncode
from multirun.supervisor.models import ChildExited, Subprocess

if TYPE_CHECKING:
    from .supervisor import ProcessManager

log = logging.getLogger(__name__)


#* --- Process Creation ---
def get_process_args(command: str, shell: Optional[str] = None) -> List[str]:
    """
    Returns the argument vector that runs a command through the shell.

    The command is prefixed with `exec` so the shell replaces itself with the
    command instead of lingering as an extra process layer.

    :param command: The opaque command line given by the user.
    :param shell: Path to the shell. Defaults to the configured SHELL_PATH.
    :return: The argument list for Popen.
    """
    return [shell or config.SHELL_PATH, "-c", f"exec {command}"]


def _wait_for_exit(manager: "ProcessManager", proc: Subprocess) -> None:
    """Target function for waiter threads. Blocks until the child terminates."""
    try:
        returncode = proc.process.wait()
    except Exception as e:
        log.debug(f"Waiter for pid {proc.pid} failed: {e}")
        returncode = None
    manager.events.put(ChildExited(proc.pid, termination_from_returncode(returncode)))


def start_waiter(manager: "ProcessManager", proc: Subprocess) -> threading.Thread:
    """
    Starts the background thread that reports the child's termination.

    :param manager: The ProcessManager whose event queue receives the result.
    :param proc: The subprocess to wait for.
    :return: The started daemon thread.
    """
    waiter = threading.Thread(
        target=_wait_for_exit,
        args=(manager, proc),
        daemon=True,
        name=f"Waiter-{proc.pid}"
    )
    waiter.start()
    return waiter


def launch_process(manager: "ProcessManager", command: str) -> Optional[Subprocess]:
    """
    Launches a single command and adds it to the manager's tracking dictionary.

    The child gets its own session (and thus its own process group, led by
    itself) and inherits the supervisor's stdout and stderr file descriptors.
    A failure to spawn is reported and leaves the command unsupervised.

    :param manager: The ProcessManager instance.
    :param command: The command line to run.
    :return: The new Subprocess entry, or None if the command could not be started.
    """
    args = get_process_args(command, manager.shell)
    try:
        p = psutil.Popen(args, start_new_session=True)
    except (OSError, ValueError) as e:
        log.error(f"error starting command '{command}': {e}")
        return None

    proc = Subprocess(command=command, process=p)
    manager.subprocesses[proc.pid] = proc
    log.info(f"launched command \"{command}\" with pid {proc.pid}")

    start_waiter(manager, proc)
    return proc
