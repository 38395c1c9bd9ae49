"""Reading per-process CPU ticks from procfs."""

import logging
import os
from collections.abc import Iterable
from pathlib import Path
from typing import Protocol

from getcputime.errors import ClockTickUnavailableError, ProcessUnreadableError
from getcputime.models import CpuSnapshot, CpuTimes

logger = logging.getLogger(__name__)

# 1-indexed field positions in /proc/<pid>/stat, see proc(5)
COMM_FIELD = 2
UTIME_FIELD = 14
STIME_FIELD = 15

DEFAULT_PROC_ROOT = Path("/proc")


def clock_ticks() -> int:
    """
    Return the host's clock ticks per second (``CLK_TCK``).

    Raises:
        ClockTickUnavailableError: If the value is missing or not positive.
    """
    try:
        value = os.sysconf("SC_CLK_TCK")
    except (ValueError, OSError) as exc:
        raise ClockTickUnavailableError("Could not determine CLK_TCK") from exc

    if value <= 0:
        raise ClockTickUnavailableError("Could not determine CLK_TCK")
    return value


def parse_stat(text: str) -> CpuTimes:
    """
    Extract user and system ticks from the text of a stat record.

    The command name (field 2) is wrapped in parentheses and may itself contain
    spaces or parentheses, so the remaining fields are split after the last
    closing parenthesis.

    Raises:
        ValueError: If the record is truncated or the tick fields are not
            non-negative integers.
    """
    close = text.rfind(")")
    if close == -1:
        raise ValueError("missing command name")

    # Tokens after comm start at field 3
    rest = text[close + 1 :].split()
    offset = COMM_FIELD + 1
    if len(rest) <= STIME_FIELD - offset:
        raise ValueError(f"expected at least {STIME_FIELD} fields")

    utime = rest[UTIME_FIELD - offset]
    stime = rest[STIME_FIELD - offset]
    if not (utime.isascii() and utime.isdigit() and stime.isascii() and stime.isdigit()):
        raise ValueError(f"non-numeric tick fields: {utime!r} {stime!r}")

    return CpuTimes(user_ticks=int(utime), system_ticks=int(stime))


class StatReader(Protocol):
    """Anything that reads the CPU ticks of a single process."""

    def read(self, pid: int) -> CpuTimes:
        """Return the current ticks of ``pid`` or raise ProcessUnreadableError."""
        ...


class ProcStatReader:
    """Read ``<proc_root>/<pid>/stat`` records."""

    def __init__(self, proc_root: Path | str = DEFAULT_PROC_ROOT) -> None:
        """
        Initialize the ProcStatReader.

        Args:
            proc_root: Mount point of the proc filesystem. Default /proc.
        """
        self._proc_root = Path(proc_root)

    @property
    def proc_root(self) -> Path:
        """Get the procfs mount point."""
        return self._proc_root

    def stat_path(self, pid: int) -> Path:
        """Path of the stat record for ``pid``."""
        return self._proc_root / str(pid) / "stat"

    def read(self, pid: int) -> CpuTimes:
        """
        Read the user and system ticks of one process.

        Raises:
            ProcessUnreadableError: If the record is missing, not readable, or
                malformed.
        """
        path = self.stat_path(pid)
        try:
            text = path.read_text(encoding="ascii", errors="replace")
            return parse_stat(text)
        except (OSError, ValueError) as exc:
            raise ProcessUnreadableError(pid, str(path), str(exc)) from exc


def take_snapshot(pids: Iterable[int], reader: StatReader) -> CpuSnapshot:
    """
    Read the ticks of every pid once.

    Processes that cannot be read are logged and left out of the snapshot.
    """
    snapshot: CpuSnapshot = {}
    for pid in pids:
        try:
            snapshot[pid] = reader.read(pid)
        except ProcessUnreadableError as exc:
            logger.warning("%s", exc)
            if exc.reason:
                logger.debug("pid %d unreadable: %s", pid, exc.reason)
    return snapshot
