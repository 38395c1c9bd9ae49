"""Tests for process name resolution."""

import os
import shutil
import subprocess
import sys

import psutil
import pytest

from getcputime import resolver as resolver_module
from getcputime.errors import ConfigurationError, ResolverUnavailableError
from getcputime.resolver import PidofResolver, PsutilResolver, get_resolver


class FakeProcess:
    """Stand-in for psutil.Process with pre-fetched info."""

    def __init__(self, pid, name, cmdline=None, error=None, status=psutil.STATUS_SLEEPING):
        self._info = {"pid": pid, "name": name, "cmdline": cmdline, "status": status}
        self._error = error

    @property
    def info(self):
        if self._error is not None:
            raise self._error
        return self._info


def fake_process_table(monkeypatch, processes):
    monkeypatch.setattr(resolver_module.psutil, "process_iter", lambda attrs=None: iter(processes))


class TestPsutilResolver:
    """Tests for PsutilResolver."""

    def test_matches_by_name(self, monkeypatch):
        """Test processes are matched on their executable name."""
        fake_process_table(
            monkeypatch,
            [
                FakeProcess(10, "nginx", ["nginx: master process"]),
                FakeProcess(11, "nginx", ["nginx: worker process"]),
                FakeProcess(12, "bash", ["/bin/bash"]),
            ],
        )

        assert PsutilResolver().resolve("nginx") == {10, 11}

    def test_matches_by_argv0_basename(self, monkeypatch):
        """Test the basename of argv[0] also matches, as pidof does."""
        fake_process_table(
            monkeypatch,
            [
                FakeProcess(20, "python3", ["/usr/local/bin/my-daemon", "--flag"]),
                FakeProcess(21, "python3", ["/usr/bin/python3", "other.py"]),
            ],
        )

        assert PsutilResolver().resolve("my-daemon") == {20}

    def test_no_match(self, monkeypatch):
        """Test an empty set when nothing matches."""
        fake_process_table(monkeypatch, [FakeProcess(1, "init", ["/sbin/init"])])

        assert PsutilResolver().resolve("nginx") == set()

    def test_excludes_calling_process(self, monkeypatch):
        """Test the resolver never returns its own pid."""
        fake_process_table(
            monkeypatch,
            [FakeProcess(os.getpid(), "getcputime"), FakeProcess(30, "getcputime")],
        )

        assert PsutilResolver().resolve("getcputime") == {30}

    def test_handles_missing_cmdline(self, monkeypatch):
        """Test kernel threads without a command line are handled."""
        fake_process_table(monkeypatch, [FakeProcess(2, "kthreadd", None)])

        assert PsutilResolver().resolve("kthreadd") == {2}

    def test_skips_zombies(self, monkeypatch):
        """Test exited but unreaped processes are not reported, as with pidof."""
        fake_process_table(
            monkeypatch,
            [
                FakeProcess(50, "sleep", ["/bin/sleep", "0"], status=psutil.STATUS_ZOMBIE),
                FakeProcess(51, "sleep", ["/bin/sleep", "30"], status=psutil.STATUS_RUNNING),
            ],
        )

        assert PsutilResolver().resolve("sleep") == {51}

    def test_only_zombie_matches(self, monkeypatch):
        """Test a name matched only by a zombie resolves to nothing."""
        fake_process_table(
            monkeypatch,
            [FakeProcess(50, "sleep", ["/bin/sleep", "0"], status=psutil.STATUS_ZOMBIE)],
        )

        assert PsutilResolver().resolve("sleep") == set()

    @pytest.mark.parametrize(
        "error",
        [psutil.NoSuchProcess(40), psutil.AccessDenied(40), psutil.ZombieProcess(40)],
    )
    def test_skips_processes_that_fail(self, monkeypatch, error):
        """Test processes dying or denied mid-iteration are skipped."""
        fake_process_table(
            monkeypatch,
            [FakeProcess(40, "nginx", error=error), FakeProcess(41, "nginx")],
        )

        assert PsutilResolver().resolve("nginx") == {41}


class TestPidofResolver:
    """Tests for PidofResolver."""

    def test_parses_pids(self, monkeypatch):
        """Test pidof output is parsed into a set."""
        calls = []

        def fake_run(args, **kwargs):
            calls.append(args)
            return subprocess.CompletedProcess(args, 0, stdout="456 123\n", stderr="")

        monkeypatch.setattr(resolver_module.subprocess, "run", fake_run)

        assert PidofResolver().resolve("nginx") == {123, 456}
        assert calls == [["pidof", "nginx"]]

    def test_no_match(self, monkeypatch):
        """Test exit status 1 means no process matched."""
        monkeypatch.setattr(
            resolver_module.subprocess,
            "run",
            lambda args, **kwargs: subprocess.CompletedProcess(args, 1, stdout="", stderr=""),
        )

        assert PidofResolver().resolve("nginx") == set()

    def test_unexpected_failure(self, monkeypatch):
        """Test other exit statuses are reported as unavailable."""
        monkeypatch.setattr(
            resolver_module.subprocess,
            "run",
            lambda args, **kwargs: subprocess.CompletedProcess(args, 2, stdout="", stderr="boom"),
        )

        with pytest.raises(ResolverUnavailableError):
            PidofResolver().resolve("nginx")

    def test_non_numeric_output(self, monkeypatch):
        """Test unexpected pidof output is reported as unavailable."""
        monkeypatch.setattr(
            resolver_module.subprocess,
            "run",
            lambda args, **kwargs: subprocess.CompletedProcess(
                args, 0, stdout="123 oops\n", stderr=""
            ),
        )

        with pytest.raises(ResolverUnavailableError, match="Unexpected output"):
            PidofResolver().resolve("nginx")

    def test_command_not_executable(self, monkeypatch):
        """Test a pidof that cannot be executed is reported as unavailable."""

        def fake_run(args, **kwargs):
            raise PermissionError(13, "Permission denied")

        monkeypatch.setattr(resolver_module.subprocess, "run", fake_run)

        with pytest.raises(ResolverUnavailableError, match="Cannot run"):
            PidofResolver().resolve("nginx")

    def test_missing_command(self):
        """Test a missing pidof binary raises ResolverUnavailableError."""
        resolver = PidofResolver(command="/nonexistent/pidof-for-tests")

        with pytest.raises(ResolverUnavailableError):
            resolver.resolve("nginx")


class TestGetResolver:
    """Tests for get_resolver."""

    def test_known_resolvers(self):
        """Test both registered resolvers can be built."""
        assert isinstance(get_resolver("psutil"), PsutilResolver)
        assert isinstance(get_resolver("pidof"), PidofResolver)

    def test_unknown_resolver(self):
        """Test an unknown name is a configuration error."""
        with pytest.raises(ConfigurationError):
            get_resolver("ps")


@pytest.mark.skipif(
    not sys.platform.startswith("linux") or shutil.which("sleep") is None,
    reason="requires Linux and a sleep binary",
)
class TestLiveResolution:
    """Resolution against real processes."""

    def test_finds_child_process(self):
        """Test a spawned child is resolved by name."""
        child = subprocess.Popen(["sleep", "30"])
        try:
            assert child.pid in PsutilResolver().resolve("sleep")
        finally:
            child.kill()
            child.wait()

    def test_resolution_is_idempotent(self):
        """Test two resolutions with no process changes agree."""
        children = [subprocess.Popen(["sleep", "30"]) for _ in range(3)]
        try:
            resolver = PsutilResolver()
            first = resolver.resolve("sleep")
            second = resolver.resolve("sleep")

            child_pids = {child.pid for child in children}
            assert first & child_pids == child_pids
            assert second & child_pids == child_pids
        finally:
            for child in children:
                child.kill()
            for child in children:
                child.wait()
