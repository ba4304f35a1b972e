"""Command line entry point (``preloader`` or ``python -m preloader``).

Global options are parsed here; everything after the command name that the
global parser does not recognise is handed to the command untouched.
"""

import argparse
import logging
import logging.config
import sys
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path
from typing import Optional

from .commands import CommandContext, get_registered_commands
from .errors import PreloaderError
from .utils import expanded_path

logger = logging.getLogger(__name__)

PROG = "preloader"

LOG_LEVELS = (logging.WARNING, logging.INFO, logging.DEBUG)
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DEBUG_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(filename)s:%(lineno)d - %(message)s"

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_INTERRUPTED = 130


def available_commands() -> dict[str, str]:
    """Registered command names mapped to their one-line description."""
    return {
        name: command_class().description
        for name, command_class in sorted(get_registered_commands().items())
    }


def create_parser() -> argparse.ArgumentParser:
    epilog = ["Available commands:"]
    epilog += [f"  {name:12} {description}" for name, description in available_commands().items()]
    epilog.append(f"\nUse '{PROG} <command> --help' for more information about a command.")

    parser = argparse.ArgumentParser(
        prog=PROG,
        description=f"{PROG} - opcode cache preload manifest builder and loader",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="\n".join(epilog),
        # -h is routed to the command when one is given
        add_help=False,
    )
    parser.add_argument("-h", "--help", action="store_true", help="Show this help message and exit")
    parser.add_argument("command", nargs="?", metavar="COMMAND", help="Command to execute")
    parser.add_argument("args", nargs="*", metavar="ARGS", help="Command arguments")
    parser.add_argument(
        "-c", "--config-path",
        type=Path,
        help="Preload configuration file (YAML/JSON, default: ./preload.yaml)",
    )
    parser.add_argument("--logging-config", type=Path, help="Logging configuration file (.ini)")
    parser.add_argument(
        "-v", "--verbose",
        action="count",
        default=0,
        help="Verbosity level: -v (INFO), -vv (DEBUG)",
    )
    parser.add_argument("--version", action="store_true", help="Show version information")
    return parser


def configure_logging(verbose: int = 0, logging_config: Optional[Path] = None) -> None:
    """Use ``logging_config`` when it exists, otherwise a level picked by ``verbose``."""
    if logging_config is not None and logging_config.exists():
        logging.config.fileConfig(logging_config, disable_existing_loggers=False)
        return

    verbose = min(verbose, len(LOG_LEVELS) - 1)
    logging.basicConfig(
        level=LOG_LEVELS[verbose],
        format=DEBUG_LOG_FORMAT if verbose >= 2 else LOG_FORMAT,
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def _package_version() -> str:
    try:
        return version(PROG)
    except PackageNotFoundError:
        return "unknown"


def _unknown_command(command_name: str) -> int:
    print(f"Unknown command: {command_name}")
    print(f"Available commands: {', '.join(available_commands())}")
    print(f"Use '{PROG} --help' for more information.")
    return EXIT_FAILURE


def print_help(parser: argparse.ArgumentParser, command_name: Optional[str] = None) -> int:
    """Print the help of ``command_name``, or the global help without one."""
    if command_name is None:
        parser.print_help()
        return EXIT_OK

    command_class = get_registered_commands().get(command_name)
    if command_class is None:
        return _unknown_command(command_name)

    print(command_class().help_text)
    return EXIT_OK


def dispatch_command(command_name: str, ctx: CommandContext) -> int:
    """
    Run a registered command.

    A ``PreloaderError`` is a fatal but expected condition; it is reported as
    its one-line message and exit status 1.
    """
    command_class = get_registered_commands().get(command_name)
    if command_class is None:
        logger.error("Unknown command: %s", command_name)
        return _unknown_command(command_name)

    try:
        return command_class().execute(ctx)
    except PreloaderError as e:
        logger.debug("%s failed", command_name, exc_info=True)
        print(e)
        return EXIT_FAILURE


def main(argv: Optional[list[str]] = None) -> int:
    parser = create_parser()
    args, remaining = parser.parse_known_args(argv)

    if args.version:
        print(f"{PROG} version {_package_version()}")
        return EXIT_OK

    command_args = args.args + remaining

    if args.command is None:
        print_help(parser)
        return EXIT_OK if args.help else EXIT_FAILURE

    if args.help or "-h" in command_args or "--help" in command_args:
        return print_help(parser, args.command)

    configure_logging(
        verbose=args.verbose,
        logging_config=expanded_path(args.logging_config) if args.logging_config else None,
    )

    ctx = CommandContext(
        command=args.command,
        args=command_args,
        verbose=args.verbose,
        config_path=str(expanded_path(args.config_path)) if args.config_path else None,
    )

    try:
        return dispatch_command(args.command, ctx)
    except KeyboardInterrupt:
        print("\nInterrupted")
        return EXIT_INTERRUPTED
    except Exception:
        logger.exception("Error executing %s", args.command)
        return EXIT_FAILURE


if __name__ == "__main__":
    sys.exit(main())
