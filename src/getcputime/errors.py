"""Exceptions raised by getcputime."""


class GetCpuTimeError(Exception):
    """Base class for all getcputime errors."""


class UsageError(GetCpuTimeError):
    """Invalid or missing command-line arguments."""


class ConfigurationError(GetCpuTimeError):
    """Invalid settings, e.g. an unknown resolver name."""


class ClockTickUnavailableError(GetCpuTimeError):
    """The host did not report a usable clock-tick rate."""


class ResolverUnavailableError(GetCpuTimeError):
    """The process-name lookup could not be performed at all."""


class NoProcessesFoundError(GetCpuTimeError):
    """No running process matches the requested name."""

    def __init__(self, name: str) -> None:
        super().__init__(f"No processes found with name '{name}'")
        self.name = name


class ProcessUnreadableError(GetCpuTimeError):
    """A process's stat record could not be read or parsed.

    Recovered by the sampler: the process is dropped from the snapshot.
    """

    def __init__(self, pid: int, path: str, reason: str = "") -> None:
        super().__init__(f"Cannot read {path}. Process may have terminated.")
        self.pid = pid
        self.path = path
        self.reason = reason
