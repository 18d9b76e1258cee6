"""Pytest configuration and fixtures for xees tests."""

import shutil
import subprocess
from collections.abc import Generator

import pytest


@pytest.fixture(autouse=True)
def isolate_config(monkeypatch, tmp_path) -> None:
    """Point every test at an empty config directory with no env overrides."""
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    for var in (
        "XEES_TICK_INTERVAL",
        "XEES_DEFAULT_DURATION",
        "XEES_SCREENSAVER_COMMAND",
        "XEES_SCREENSAVER_TIMEOUT",
        "XEES_CLIENT_TIMEOUT",
    ):
        monkeypatch.delenv(var, raising=False)

    # load_config() caches per process
    monkeypatch.setattr("xees.config._cached_config", None)


@pytest.fixture
def session_bus(monkeypatch) -> Generator[str]:
    """Start a private dbus-daemon and make it the session bus for the test."""
    dbus_daemon = shutil.which("dbus-daemon")
    if dbus_daemon is None:
        pytest.skip("dbus-daemon not available")

    process = subprocess.Popen(
        [dbus_daemon, "--session", "--nofork", "--print-address=1"],
        stdout=subprocess.PIPE,
        stderr=subprocess.DEVNULL,
        text=True,
    )
    address = process.stdout.readline().strip()
    if not address:
        process.kill()
        process.wait()
        pytest.skip("dbus-daemon did not report an address")

    monkeypatch.setenv("DBUS_SESSION_BUS_ADDRESS", address)

    yield address

    process.terminate()
    try:
        process.wait(timeout=5)
    except subprocess.TimeoutExpired:
        process.kill()
        process.wait()
