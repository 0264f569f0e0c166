import signal
from enum import Enum
from dataclasses import dataclass, field
from typing import Optional, Union

import psutil


#* --- Termination Info ---
@dataclass(frozen=True)
class Exited:
    """The child exited on its own with a status code."""
    code: int


@dataclass(frozen=True)
class Signaled:
    """The child was terminated by a signal."""
    signum: Union[signal.Signals, int]


@dataclass(frozen=True)
class UnknownTermination:
    """The termination cause could not be decoded."""


Termination = Union[Exited, Signaled, UnknownTermination]


#* --- Events ---
@dataclass(frozen=True)
class ChildExited:
    """Pushed by a waiter thread once its child has terminated."""
    pid: int
    termination: Termination


@dataclass(frozen=True)
class SignalReceived:
    """Pushed by the signal handler when the supervisor itself is asked to stop."""
    signum: signal.Signals


Event = Union[ChildExited, SignalReceived]


#* --- Supervisor State ---
class Outcome(Enum):
    """Classified result of a child process."""
    PENDING = "pending"
    NORMAL = "normal"
    ABNORMAL = "abnormal"


class LoopState(Enum):
    """State of the supervision loop."""
    RUNNING = "running"      # Children alive, no shutdown issued
    DRAINING = "draining"    # Shutdown issued, waiting for remaining exits
    DONE = "done"            # Every child has been reaped


@dataclass
class Subprocess:
    """Bookkeeping for one launched child."""
    command: str
    process: psutil.Popen
    alive: bool = True
    outcome: Outcome = Outcome.PENDING
    termination: Optional[Termination] = field(default=None)

    @property
    def pid(self) -> int:
        return self.process.pid

    @property
    def pgid(self) -> int:
        # Each child leads the fresh group it was started in.
        return self.process.pid
