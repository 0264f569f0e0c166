import logging
import sys

from multirun.config import effective_settings as config


class DiagnosticsFilter(logging.Filter):
    """
    This filter keeps warnings and errors off the diagnostics stream,
    since they are always written to stderr by their own handler.
    """
    def filter(self, record):
        return record.levelno < logging.WARNING


class MainFormatter(logging.Formatter):
    """A formatter that prefixes every message with the program name."""

    def __init__(self, prefix: str = "") -> None:
        super().__init__('%(message)s')
        self.prefix = prefix

    def format(self, record):
        formatted_message = super().format(record)
        if self.prefix:
            return f"{self.prefix}: {formatted_message}"
        return formatted_message


def setup_logging(verbose: bool = False) -> None:
    """
    Configures the root logger for the supervisor.
    Diagnostics go to stdout only when verbose; warnings and errors always go
    to stderr. Any previously configured handlers are cleared to prevent duplication.

    :param verbose: If True, diagnostic (DEBUG and INFO) messages are printed to stdout.
    """
    root_logger = logging.getLogger()
    # Set root level to lowest to capture all messages for handler filtering
    root_logger.setLevel(logging.DEBUG)

    # Clear any existing handlers to prevent re-adding them on re-runs
    if root_logger.hasHandlers():
        root_logger.handlers.clear()

    formatter = MainFormatter(prefix=config.LOG_PREFIX)

    # --- Diagnostics Handler (stdout, verbose only) ---
    if verbose:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(logging.DEBUG)
        console_handler.addFilter(DiagnosticsFilter())
        console_handler.setFormatter(formatter)
        root_logger.addHandler(console_handler)

    # --- Error Handler (stderr, always enabled) ---
    error_handler = logging.StreamHandler(sys.stderr)
    error_handler.setLevel(logging.WARNING)
    error_handler.setFormatter(formatter)
    root_logger.addHandler(error_handler)
