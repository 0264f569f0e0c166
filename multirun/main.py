import sys
import logging
import argparse
from typing import List, Optional

import setproctitle

from multirun.config import effective_settings as config
from multirun.exceptions import ChainedCommandError, NoProcessesStartedError
from multirun.log.setup import setup_logging
from multirun.supervisor import ProcessManager
from multirun.supervisor.startup import register_subreaper
from multirun.supervisor.validation import check_commands

log = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="multirun",
        usage="%(prog)s <options> command...",
        description=(
            "Run several commands side by side. When any of them exits, "
            "the others are stopped; exits once all of them are gone."
        ),
    )
    parser.add_argument("-v", "--verbose", action="store_true", default=None, help="verbose mode")
    parser.add_argument("commands", nargs="*", metavar="command", help="a shell command line, run as a single unit")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """
    The main entry point for the supervisor.

    :param argv: Command-line arguments (defaults to sys.argv[1:]).
    :return: The process exit code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    config.apply_overrides({"VERBOSE_LOGGING": args.verbose})
    setup_logging(config.VERBOSE_LOGGING)
    setproctitle.setproctitle(config.PROCESS_TITLE)

    if config.SUBREAPER_ENABLED:
        register_subreaper()

    if not args.commands:
        parser.print_usage(sys.stderr)
        return config.EXIT_USAGE

    try:
        # Reject the whole batch before anything is spawned.
        check_commands(args.commands)
        had_errors = ProcessManager().run(args.commands)
    except ChainedCommandError as e:
        log.error(str(e))
        return config.EXIT_USAGE
    except NoProcessesStartedError as e:
        log.error(str(e))
        return config.EXIT_ABNORMAL

    if had_errors:
        log.error("one or more of the provided commands ended abnormally")
        return config.EXIT_ABNORMAL

    log.info("all subprocesses exited without errors")
    return config.EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
