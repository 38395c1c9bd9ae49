"""Runtime settings for getcputime."""

import os
from collections.abc import Mapping
from dataclasses import dataclass, replace
from pathlib import Path

from getcputime.errors import ConfigurationError
from getcputime.resolver import RESOLVERS
from getcputime.sampler import DEFAULT_PROC_ROOT

ENV_PROC_ROOT = "GETCPUTIME_PROC_ROOT"
ENV_RESOLVER = "GETCPUTIME_RESOLVER"
ENV_LOG_FILE = "GETCPUTIME_LOG_FILE"


@dataclass(slots=True, frozen=True)
class Settings:
    """Settings shared by the CLI and library callers."""

    proc_root: Path = DEFAULT_PROC_ROOT
    resolver: str = "psutil"
    log_file: Path | None = None

    def __post_init__(self) -> None:
        if self.resolver not in RESOLVERS:
            choices = ", ".join(sorted(RESOLVERS))
            raise ConfigurationError(
                f"Unknown resolver '{self.resolver}' (choose from: {choices})"
            )

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "Settings":
        """
        Build settings from environment variables.

        Unset or empty variables keep their defaults.

        Args:
            environ: Mapping to read from. Default os.environ.
        """
        env = os.environ if environ is None else environ

        proc_root = env.get(ENV_PROC_ROOT) or None
        log_file = env.get(ENV_LOG_FILE) or None

        return cls().with_overrides(
            proc_root=Path(proc_root) if proc_root else None,
            resolver=env.get(ENV_RESOLVER) or None,
            log_file=Path(log_file) if log_file else None,
        )

    def with_overrides(self, **overrides: object) -> "Settings":
        """Return a copy with every non-None override applied."""
        changes = {key: value for key, value in overrides.items() if value is not None}
        return replace(self, **changes)
