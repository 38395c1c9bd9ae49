"""Data models for getcputime."""

from dataclasses import dataclass
from typing import TypeAlias


@dataclass(slots=True, frozen=True)
class CpuTimes:
    """Cumulative CPU time of one process, in clock ticks."""

    user_ticks: int
    system_ticks: int

    def __sub__(self, other: "CpuTimes") -> "CpuTimes":
        if not isinstance(other, CpuTimes):
            return NotImplemented
        return CpuTimes(
            user_ticks=self.user_ticks - other.user_ticks,
            system_ticks=self.system_ticks - other.system_ticks,
        )


# pid -> ticks, captured in a single pass
CpuSnapshot: TypeAlias = dict[int, CpuTimes]


@dataclass(slots=True, frozen=True)
class CpuReport:
    """Aggregate CPU usage of a process group over one sampling window."""

    user_percent: float
    system_percent: float
    user_ticks: int
    system_ticks: int
    clock_ticks: int
    seconds: int
    process_count: int

    @property
    def total_percent(self) -> float:
        """User plus system percentage."""
        return self.user_percent + self.system_percent

    def format(self) -> str:
        """Render the single-line report."""
        return (
            f"cpu:{self.total_percent:.2f}% "
            f"us_cpu:{self.user_percent:.2f}% "
            f"sy_cpu:{self.system_percent:.2f}%"
        )

    def as_dict(self) -> dict[str, float | int]:
        """Return the report as a plain mapping."""
        return {
            "cpu_percent": self.total_percent,
            "user_percent": self.user_percent,
            "system_percent": self.system_percent,
            "user_ticks": self.user_ticks,
            "system_ticks": self.system_ticks,
            "clock_ticks": self.clock_ticks,
            "seconds": self.seconds,
            "process_count": self.process_count,
        }
