import queue
import signal
import logging
from typing import Dict, Iterable, Optional, Union

from multirun.config import effective_settings as config
from multirun.exceptions import ChainedCommandError, NoProcessesStartedError
from multirun.supervisor import exit_status, process_utils, shutdown, startup
from multirun.supervisor.models import ChildExited, Event, LoopState, Outcome, SignalReceived, Subprocess
from multirun.supervisor.validation import is_chained

log = logging.getLogger(__name__)


class ProcessManager:
    """
    Launches a fixed set of commands and supervises them as one unit.

    The first child to exit (or the first SIGINT/SIGTERM received by the
    supervisor) triggers a single shutdown broadcast to every other child's
    process group; the manager then waits until every child has been reaped.

    All state is owned by the thread running `supervision_loop`. Waiter
    threads and the signal handler only push immutable events onto `events`.
    """

    def __init__(self, shell: Optional[str] = None) -> None:
        """Initializes the ProcessManager state."""
        self.shell = shell or config.SHELL_PATH
        self.subprocesses: Dict[int, Subprocess] = {}
        self.events: "queue.SimpleQueue[Event]" = queue.SimpleQueue()
        self.running = 0
        self.shutdown_triggered = False
        self.state = LoopState.RUNNING

    def start_all(self, commands: Iterable[str]) -> int:
        """
        Starts every command as a child in its own process group.

        A chained command aborts the launch phase; children started for earlier
        commands are left running. A command that fails to spawn is skipped.

        :param commands: The command lines to run.
        :return: The number of children successfully started.
        :raises ChainedCommandError: If a command contains an unquoted control operator.
        """
        for command in commands:
            if is_chained(command):
                raise ChainedCommandError(command)
            if process_utils.launch_process(self, command) is not None:
                self.running += 1
        return self.running

    def stop_all(self, sig: Union[signal.Signals, int], reason: str) -> None:
        """
        Issues the shutdown broadcast, unless one was already issued.

        :param sig: The signal to send to every live child group.
        :param reason: Log message describing what triggered the shutdown.
        """
        if self.shutdown_triggered:
            return
        self.shutdown_triggered = True
        self.state = LoopState.DRAINING
        log.info(reason)
        shutdown.broadcast(self.subprocesses.values(), sig)

    def handle_event(self, event: Event) -> None:
        """Applies a single event to the supervisor state."""
        if isinstance(event, ChildExited):
            self._handle_child_exit(event)
        elif isinstance(event, SignalReceived):
            self.stop_all(
                event.signum,
                f"received signal {event.signum.name}, propagating to all subprocesses",
            )
        else:
            log.warning(f"Ignoring unexpected event: {event!r}")

    def _handle_child_exit(self, event: ChildExited) -> None:
        proc = self.subprocesses.get(event.pid)
        if proc is None or not proc.alive:
            log.warning(f"Ignoring exit event for unknown or already reaped pid {event.pid}")
            return

        proc.alive = False
        proc.termination = event.termination
        proc.outcome = exit_status.classify(event.termination)
        self.running -= 1

        cause = exit_status.describe(event.termination)
        if proc.outcome is Outcome.ABNORMAL:
            log.info(f"command \"{proc.command}\" with pid {proc.pid} exited abnormally ({cause})")
        else:
            log.info(f"command \"{proc.command}\" with pid {proc.pid} exited normally ({cause})")

        self.stop_all(
            config.SHUTDOWN_SIGNAL,
            f"one process exited, sending {config.SHUTDOWN_SIGNAL.name} to all other processes",
        )
        if self.running == 0:
            self.state = LoopState.DONE

    def had_errors(self) -> bool:
        return any(p.outcome is Outcome.ABNORMAL for p in self.subprocesses.values())

    def supervision_loop(self) -> bool:
        """
        Processes exit and signal events until no child is left alive.

        :return: True if any child ended abnormally.
        :raises NoProcessesStartedError: If there is nothing to supervise.
        """
        if self.running == 0:
            raise NoProcessesStartedError()

        while self.running > 0:
            self.handle_event(self.events.get())

        self.state = LoopState.DONE
        return self.had_errors()

    def run(self, commands: Iterable[str]) -> bool:
        """
        Starts the commands and supervises them to completion.

        Signal handlers are installed before the first child is launched so a
        stop request arriving during startup is still forwarded.

        :param commands: The command lines to run.
        :return: True if any child ended abnormally.
        """
        previous_handlers = startup.install_signal_handlers(self)
        try:
            self.start_all(commands)
            return self.supervision_loop()
        finally:
            startup.restore_signal_handlers(previous_handlers)
