"""Command-line entry point for getcputime."""

import argparse
import logging
import re
import sys
from collections.abc import Sequence
from pathlib import Path

from getcputime import __version__
from getcputime.config import Settings
from getcputime.errors import GetCpuTimeError, NoProcessesFoundError, UsageError
from getcputime.log import setup_logger
from getcputime.monitor import CpuTimeMonitor
from getcputime.resolver import RESOLVERS, get_resolver
from getcputime.sampler import ProcStatReader

logger = logging.getLogger("getcputime")

_DURATION_RE = re.compile(r"[0-9]+")

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_INTERRUPTED = 130


def parse_duration(text: str) -> int:
    """
    Parse the sleep duration argument.

    Only plain ASCII digits are accepted and the value must be at least 1.

    Raises:
        UsageError: If text is not a positive whole number of seconds.
    """
    if not _DURATION_RE.fullmatch(text) or int(text) == 0:
        raise UsageError("sleep_duration must be a positive integer")
    return int(text)


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="getcputime",
        description=(
            "Output CPU usage statistics (user and system) for all processes "
            "matching the given name, measured over sleep_duration seconds."
        ),
        epilog="Example: getcputime nginx 2",
    )
    parser.add_argument("process_name", help="name of the process to monitor")
    parser.add_argument(
        "sleep_duration",
        help="seconds to sleep between the two CPU time samples",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="log sampling details to stderr",
    )
    parser.add_argument(
        "--resolver",
        choices=sorted(RESOLVERS),
        default=None,
        help="how to find processes by name (default: psutil)",
    )
    parser.add_argument(
        "--proc-root",
        type=Path,
        default=None,
        help="mount point of the proc filesystem (default: /proc)",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="also write detailed logs to this file",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point for the getcputime command. Returns the exit status."""
    args = build_parser().parse_args(argv)
    level = logging.DEBUG if args.verbose else logging.WARNING
    setup_logger(level=level)

    try:
        settings = Settings.from_env().with_overrides(
            proc_root=args.proc_root,
            resolver=args.resolver,
            log_file=args.log_file,
        )
        if settings.log_file:
            setup_logger(level=level, log_file=settings.log_file)

        if not args.process_name:
            raise UsageError("process_name must not be empty")
        seconds = parse_duration(args.sleep_duration)

        monitor = CpuTimeMonitor(
            resolver=get_resolver(settings.resolver),
            reader=ProcStatReader(settings.proc_root),
        )
        report = monitor.sample(args.process_name, seconds)

    except NoProcessesFoundError as exc:
        # Nothing to measure is not a fault, so it goes to stdout
        print(exc)
        return EXIT_FAILURE
    except GetCpuTimeError as exc:
        logger.error("%s", exc)
        return EXIT_FAILURE
    except KeyboardInterrupt:
        logger.warning("Interrupted, no report produced")
        return EXIT_INTERRUPTED

    print(report.format())
    sys.stdout.flush()
    return EXIT_OK


if __name__ == "__main__":
    raise SystemExit(main())
