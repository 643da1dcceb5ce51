"""Shared fixtures for stime tests."""

import locale
import logging
import os
import time

import pytest

from stime.core.base_format import ConversionMode


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch, tmp_path):
    """Keep user config and display settings out of the tests."""
    for name in list(os.environ):
        if name.startswith("STIME_") or name == "SLURM_TIME_FORMAT":
            monkeypatch.delenv(name)
    monkeypatch.setenv("STIME_CONFIG_DIR", str(tmp_path / "config"))
    monkeypatch.setenv("LC_ALL", "C")


@pytest.fixture(autouse=True)
def utc(monkeypatch):
    """Run every test in UTC so local times are predictable."""
    monkeypatch.setenv("TZ", "UTC")
    time.tzset()


@pytest.fixture(autouse=True)
def c_locale():
    """Pin the calendar locale; the CLI switches to the environment's locale."""
    saved = locale.setlocale(locale.LC_ALL)
    locale.setlocale(locale.LC_ALL, "C")
    yield
    locale.setlocale(locale.LC_ALL, saved)


@pytest.fixture
def timestamp_mode():
    return ConversionMode()


@pytest.fixture
def duration_mode():
    return ConversionMode(duration=True)


@pytest.fixture
def reals_mode():
    return ConversionMode(reals=True)


@pytest.fixture(autouse=True)
def restore_root_logging():
    """The CLI reconfigures the root logger; put it back after each test."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


NOW = 1700000000  # Tue 2023-11-14 22:13:20 UTC


@pytest.fixture
def now():
    return NOW
