"""Sampling engine for getcputime."""

import logging
import time
from collections.abc import Callable

from getcputime.aggregator import aggregate
from getcputime.errors import NoProcessesFoundError, UsageError
from getcputime.models import CpuReport
from getcputime.resolver import PidResolver, PsutilResolver
from getcputime.sampler import ProcStatReader, StatReader, clock_ticks, take_snapshot

logger = logging.getLogger(__name__)


class CpuTimeMonitor:
    """
    Measure the CPU usage of every process matching a name.

    One call to ``sample`` resolves the name, reads the tick counters of each
    pid, blocks for the requested number of seconds, reads them again and
    aggregates the difference. Processes that disappear between the two reads
    are dropped with a warning.
    """

    def __init__(
        self,
        resolver: PidResolver | None = None,
        reader: StatReader | None = None,
        clock_ticks_source: Callable[[], int] = clock_ticks,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        """
        Initialize the CpuTimeMonitor.

        Args:
            resolver: Maps a process name to pids. Default PsutilResolver.
            reader: Reads per-process ticks. Default ProcStatReader on /proc.
            clock_ticks_source: Returns the host's clock ticks per second.
            sleep: Blocking wait between the two snapshots.
        """
        self._resolver = resolver if resolver is not None else PsutilResolver()
        self._reader = reader if reader is not None else ProcStatReader()
        self._clock_ticks_source = clock_ticks_source
        self._sleep = sleep

    @property
    def resolver(self) -> PidResolver:
        """Get the pid resolver."""
        return self._resolver

    @property
    def reader(self) -> StatReader:
        """Get the stat reader."""
        return self._reader

    def sample(self, name: str, seconds: int) -> CpuReport:
        """
        Run one sampling window and return the aggregate report.

        Args:
            name: Executable name to match.
            seconds: Length of the sampling window in whole seconds.

        Raises:
            UsageError: If name is empty or seconds is not positive.
            ClockTickUnavailableError: If the clock-tick rate is unavailable.
            NoProcessesFoundError: If nothing matches ``name``.
        """
        if not name:
            raise UsageError("process_name must not be empty")
        if isinstance(seconds, bool) or not isinstance(seconds, int) or seconds <= 0:
            raise UsageError("sleep_duration must be a positive integer")

        ticks = self._clock_ticks_source()

        pids = sorted(self._resolver.resolve(name))
        if not pids:
            raise NoProcessesFoundError(name)
        logger.debug("Sampling %d process(es) named %r: %s", len(pids), name, pids)

        initial = take_snapshot(pids, self._reader)
        started = time.monotonic()
        self._sleep(seconds)
        elapsed = time.monotonic() - started
        final = take_snapshot(pids, self._reader)

        # Normalization uses the nominal window, not the measured one
        logger.debug("Requested %ds window, measured %.3fs", seconds, elapsed)

        report = aggregate(initial, final, ticks, seconds)
        logger.debug(
            "%d of %d process(es) sampled: %d user ticks, %d system ticks at %d Hz",
            report.process_count,
            len(pids),
            report.user_ticks,
            report.system_ticks,
            ticks,
        )
        return report
