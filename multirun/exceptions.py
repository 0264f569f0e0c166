"""Exceptions raised while starting the supervised commands.

Everything derives from :class:`MultirunError` so the command-line entry
point can map the whole family to exit codes with a single clause.
"""


class MultirunError(Exception):
    """Base exception for all multirun errors."""


class ChainedCommandError(MultirunError):
    """A command string contains an unquoted shell control operator."""

    def __init__(self, command: str) -> None:
        super().__init__(
            "error: chained commands are not supported. "
            "Please provide each command as a separate argument "
            f"(offending command: '{command}')"
        )
        self.command = command


class NoProcessesStartedError(MultirunError):
    """None of the given commands could be launched."""

    def __init__(self, message: str = "no processes were successfully started.") -> None:
        super().__init__(message)
