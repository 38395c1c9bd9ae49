"""Shared pytest fixtures."""

import logging

import pytest

from getcputime.config import ENV_LOG_FILE, ENV_PROC_ROOT, ENV_RESOLVER


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Keep tests independent of the caller's GETCPUTIME_* variables."""
    for name in (ENV_PROC_ROOT, ENV_RESOLVER, ENV_LOG_FILE):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Drop handlers the CLI attached so they do not outlive captured streams."""
    yield
    logger = logging.getLogger("getcputime")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)
