"""Process name to pid resolution."""

import logging
import os
import subprocess
from typing import Protocol

import psutil

from getcputime.errors import ConfigurationError, ResolverUnavailableError

logger = logging.getLogger(__name__)


class PidResolver(Protocol):
    """Anything that maps an executable name to the pids running it."""

    def resolve(self, name: str) -> set[int]:
        """Return the pids currently matching ``name``; may be empty."""
        ...


class PsutilResolver:
    """
    Resolve pids by walking the process table with psutil.

    A process matches when its name or the basename of its ``argv[0]`` equals
    the requested name, which is the rule ``pidof`` applies. Zombies and the
    calling process are never part of the result.
    """

    def resolve(self, name: str) -> set[int]:
        """Return the set of pids whose executable name is ``name``."""
        own_pid = os.getpid()
        pids: set[int] = set()

        for proc in psutil.process_iter(attrs=["pid", "name", "cmdline", "status"]):
            try:
                info = proc.info
                if info["pid"] == own_pid:
                    continue
                # pidof only reports running processes
                if info.get("status") == psutil.STATUS_ZOMBIE:
                    continue

                cmdline = info.get("cmdline") or []
                argv0 = os.path.basename(cmdline[0]) if cmdline else ""

                if info.get("name") == name or argv0 == name:
                    pids.add(info["pid"])

            except (psutil.NoSuchProcess, psutil.AccessDenied, psutil.ZombieProcess):
                # Process exited or is hidden from us while iterating
                continue

        logger.debug("psutil resolved %r to %s", name, sorted(pids))
        return pids


class PidofResolver:
    """Resolve pids by running the system ``pidof`` command."""

    def __init__(self, command: str = "pidof") -> None:
        """
        Initialize the PidofResolver.

        Args:
            command: Name or path of the pidof executable.
        """
        self._command = command

    def resolve(self, name: str) -> set[int]:
        """Return the set of pids reported by ``pidof name``."""
        try:
            result = subprocess.run(
                [self._command, name],
                capture_output=True,
                text=True,
                check=False,
            )
        except FileNotFoundError as exc:
            raise ResolverUnavailableError(f"'{self._command}' command not found") from exc
        except OSError as exc:
            raise ResolverUnavailableError(f"Cannot run '{self._command}': {exc}") from exc

        # pidof exits with 1 when nothing matches
        if result.returncode == 1:
            return set()
        if result.returncode != 0:
            raise ResolverUnavailableError(
                f"'{self._command}' failed with exit status {result.returncode}: "
                f"{result.stderr.strip()}"
            )

        try:
            pids = {int(token) for token in result.stdout.split()}
        except ValueError as exc:
            raise ResolverUnavailableError(
                f"Unexpected output from '{self._command}': {result.stdout.strip()!r}"
            ) from exc
        logger.debug("pidof resolved %r to %s", name, sorted(pids))
        return pids


RESOLVERS: dict[str, type[PsutilResolver] | type[PidofResolver]] = {
    "psutil": PsutilResolver,
    "pidof": PidofResolver,
}


def get_resolver(kind: str) -> PidResolver:
    """Build the resolver registered under ``kind``."""
    try:
        return RESOLVERS[kind]()
    except KeyError:
        choices = ", ".join(sorted(RESOLVERS))
        raise ConfigurationError(f"Unknown resolver '{kind}' (choose from: {choices})") from None
