import sys
import ctypes
import signal
import logging
from typing import TYPE_CHECKING, Any, Dict, Optional

from multirun.config import effective_settings as config
from multirun.supervisor.models import SignalReceived

if TYPE_CHECKING:
    from .supervisor import ProcessManager

log = logging.getLogger(__name__)


#* --- Subreaper Registration ---
class LinuxSubreaper:
    """Registers the current process as child subreaper through prctl(2)."""

    libc_name = "libc.so.6"

    def register(self) -> bool:
        """
        Attempts the registration.

        :return: True on success. On failure `self.errno` holds the reason.
        """
        self.errno = 0
        try:
            libc = ctypes.CDLL(self.libc_name, use_errno=True)
        except OSError as e:
            self.errno = e.errno or 0
            return False
        if libc.prctl(config.PR_SET_CHILD_SUBREAPER, 1, 0, 0, 0) != 0:
            self.errno = ctypes.get_errno()
            return False
        return True


class NoopSubreaper:
    """Stand-in for platforms without the subreaper concept."""

    errno = 0

    def register(self) -> bool:
        return False


def get_subreaper():
    return LinuxSubreaper() if sys.platform.startswith("linux") else NoopSubreaper()


def register_subreaper(subreaper: Optional[Any] = None) -> bool:
    """
    Makes a single best-effort attempt to adopt orphaned grandchildren.

    The outcome is only logged; it never affects control flow. Platforms
    without subreaper support are skipped silently.

    :param subreaper: An object with a `register() -> bool` method. Defaults to the platform's.
    :return: True if the registration succeeded.
    """
    subreaper = subreaper or get_subreaper()
    if isinstance(subreaper, NoopSubreaper):
        return False

    if subreaper.register():
        log.info("successfully registered as subreaper.")
        return True
    log.info(
        f"failed to register as subreaper (errno: {getattr(subreaper, 'errno', 0)}), "
        "subchildren exit status might be ignored."
    )
    return False


#* --- Signal Handling ---
def install_signal_handlers(manager: "ProcessManager") -> Dict[int, Any]:
    """
    Routes the forwarded signals into the manager's event queue.

    Must be called from the main thread. The handler only enqueues an event;
    SimpleQueue.put is reentrant, so it is safe even if the handler interrupts
    the coordinator while it is inside the queue.

    :param manager: The ProcessManager instance.
    :return: The previous handlers, to be passed to restore_signal_handlers.
    """
    def _on_signal(signum, frame):
        manager.events.put(SignalReceived(signal.Signals(signum)))

    previous = {}
    for sig in config.FORWARDED_SIGNALS:
        previous[sig] = signal.signal(sig, _on_signal)
    return previous


def restore_signal_handlers(previous: Dict[int, Any]) -> None:
    for sig, handler in previous.items():
        signal.signal(sig, handler if handler is not None else signal.SIG_DFL)
