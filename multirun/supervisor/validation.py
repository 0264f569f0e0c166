import logging
from typing import Iterable

from multirun.exceptions import ChainedCommandError

log = logging.getLogger(__name__)

QUOTE_CHARS = ("'", '"')
CONTROL_OPERATORS = (";", "|", "&")


def is_chained(command: str) -> bool:
    """
    Checks whether a command string contains an unquoted shell control operator.

    This is a conservative lexical scan, not a shell grammar. A backslash
    escapes the next character (and is never an operator itself); inside a
    quoted span only the matching quote character ends the span.

    :param command: The command line as given by the user.
    :return: True if `;`, `|` or `&` appears outside quotes and unescaped.
    """
    in_quote = None
    escaped = False
    for char in command:
        if escaped:
            escaped = False
            continue
        if char == "\\":
            escaped = True
            continue
        if in_quote:
            if char == in_quote:
                in_quote = None
        elif char in QUOTE_CHARS:
            in_quote = char
        elif char in CONTROL_OPERATORS:
            return True
    return False


def check_commands(commands: Iterable[str]) -> None:
    """
    Validates a whole batch of commands before anything is spawned.

    :param commands: The command strings to validate.
    :raises ChainedCommandError: On the first chained command found.
    """
    for command in commands:
        if is_chained(command):
            log.debug(f"Rejected chained command: {command!r}")
            raise ChainedCommandError(command)
