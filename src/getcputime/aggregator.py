"""Delta computation and percentage normalization."""

import logging

from getcputime.models import CpuReport, CpuSnapshot, CpuTimes

logger = logging.getLogger(__name__)


def compute_deltas(initial: CpuSnapshot, final: CpuSnapshot) -> CpuSnapshot:
    """
    Per-process tick deltas between two snapshots.

    Only pids present in both snapshots are kept; a process seen in just one
    of them contributes nothing. Tick counters never decrease for a live
    process, so a negative delta means the pid was reused by another process
    during the window and that pid is dropped as well.
    """
    deltas: CpuSnapshot = {}
    for pid in sorted(initial.keys() & final.keys()):
        delta = final[pid] - initial[pid]
        if delta.user_ticks < 0 or delta.system_ticks < 0:
            logger.warning(
                "CPU ticks of pid %d went backwards (%s -> %s); pid reused, skipping it",
                pid,
                initial[pid],
                final[pid],
            )
            continue
        deltas[pid] = delta
    return deltas


def aggregate(
    initial: CpuSnapshot,
    final: CpuSnapshot,
    clock_ticks: int,
    seconds: int,
) -> CpuReport:
    """
    Sum the deltas of all surviving processes into a CpuReport.

    Percentages are relative to one CPU over ``seconds`` and are not capped,
    so a multi-threaded group may exceed 100%.

    Args:
        initial: Snapshot taken before the sampling window.
        final: Snapshot taken after the sampling window.
        clock_ticks: Clock ticks per second of the host.
        seconds: Nominal length of the sampling window.

    Raises:
        ValueError: If clock_ticks or seconds is not positive.
    """
    if clock_ticks <= 0:
        raise ValueError(f"clock_ticks must be positive, got {clock_ticks}")
    if seconds <= 0:
        raise ValueError(f"seconds must be positive, got {seconds}")

    deltas = compute_deltas(initial, final)
    total = CpuTimes(
        user_ticks=sum(delta.user_ticks for delta in deltas.values()),
        system_ticks=sum(delta.system_ticks for delta in deltas.values()),
    )

    window = clock_ticks * seconds
    return CpuReport(
        user_percent=100 * total.user_ticks / window,
        system_percent=100 * total.system_ticks / window,
        user_ticks=total.user_ticks,
        system_ticks=total.system_ticks,
        clock_ticks=clock_ticks,
        seconds=seconds,
        process_count=len(deltas),
    )
