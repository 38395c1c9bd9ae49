"""getcputime - sample aggregate CPU usage of processes by name."""

from getcputime.models import CpuReport, CpuSnapshot, CpuTimes
from getcputime.monitor import CpuTimeMonitor

__all__ = ["CpuReport", "CpuSnapshot", "CpuTimeMonitor", "CpuTimes"]

__version__ = "0.1.0"
