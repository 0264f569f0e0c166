"""
This module contains the default configuration settings for multirun.
It defines the shell used to run commands, the signals the supervisor relays,
the exit codes it reports and the logging defaults.
Values marked in MODIFIABLE_SETTINGS may be overridden at runtime (see config.py).
"""

import os
import signal
from dotenv import load_dotenv

# Load environment variables from a .env file, if one exists
load_dotenv()


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ('true', '1', 't', 'yes', 'y')


#* --- Process Identity ---
PROCESS_TITLE = "multirun"
LOG_PREFIX = "multirun"

#* --- Command Execution ---
# Each command runs as `<SHELL_PATH> -c "exec <command>"` so the shell replaces itself.
SHELL_PATH = os.getenv("MULTIRUN_SHELL", "/bin/sh")

#* --- Signals ---
# The single "please exit" signal broadcast when a child exits on its own.
SHUTDOWN_SIGNAL = signal.SIGTERM
# Signals the supervisor catches and forwards verbatim to every child group.
FORWARDED_SIGNALS = (signal.SIGINT, signal.SIGTERM)
# A child killed by one of these is considered to have exited normally.
NORMAL_EXIT_SIGNALS = frozenset(FORWARDED_SIGNALS)

#* --- Exit Codes ---
EXIT_OK = 0
EXIT_ABNORMAL = 1   # a child ended abnormally, or nothing could be started
EXIT_USAGE = 2      # no commands given, or a chained command was rejected

#* --- Logging ---
VERBOSE_LOGGING = _env_flag("MULTIRUN_VERBOSE", "False")

#* --- Platform ---
# Best-effort registration as child subreaper (Linux only).
SUBREAPER_ENABLED = _env_flag("MULTIRUN_SUBREAPER", "True")
PR_SET_CHILD_SUBREAPER = 36  # from linux/prctl.h

#* --- Runtime Overrides ---
# Only these keys may be changed after startup (e.g. by command-line flags).
MODIFIABLE_SETTINGS = {
    "VERBOSE_LOGGING", "SHELL_PATH", "SUBREAPER_ENABLED",
}
