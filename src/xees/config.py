"""Configuration management for xees.

Loads configuration from $XDG_CONFIG_HOME/xees/config.toml.
Priority chain: CLI flags > env vars > config file > built-in defaults.
"""

import os
import sys
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import NoReturn

DEFAULT_TICK_INTERVAL = 10.0
DEFAULT_DURATION = 3600
DEFAULT_SCREENSAVER_COMMAND = "xscreensaver-command"
DEFAULT_SCREENSAVER_TIMEOUT = 5.0
DEFAULT_CLIENT_TIMEOUT = 2.0

DEFAULT_CONFIG = """\
# xees configuration

[daemon]
# Seconds between two checks of the screensaver while suppression is active
tick_interval = 10

# Seconds a bare `xees disable` keeps the screensaver suppressed
default_duration = 3600

[screensaver]
# Tool queried with `-time` and poked with `-deactivate`
command = "xscreensaver-command"

# Seconds to wait for the tool before giving up on a tick
timeout = 5

[client]
# Seconds the CLI waits for a daemon reply
timeout = 2
"""


@dataclass(frozen=True)
class DaemonConfig:
    """Daemon loop configuration."""

    tick_interval: float
    default_duration: int


@dataclass(frozen=True)
class ScreensaverConfig:
    """External screensaver tool configuration."""

    command: str
    timeout: float


@dataclass(frozen=True)
class ClientConfig:
    """CLI client configuration."""

    timeout: float


@dataclass(frozen=True)
class XeesConfig:
    """Top-level xees configuration."""

    daemon: DaemonConfig
    screensaver: ScreensaverConfig
    client: ClientConfig


_cached_config: XeesConfig | None = None


def get_config_dir() -> Path:
    """Get XDG-compliant configuration directory.

    Priority:
    1. $XDG_CONFIG_HOME/xees/
    2. ~/.config/xees/

    Returns:
        Path to configuration directory (not created)
    """
    config_home = os.environ.get("XDG_CONFIG_HOME")
    if config_home:
        return Path(config_home) / "xees"
    return Path.home() / ".config" / "xees"


def get_config_path() -> Path:
    """Get path to the config file."""
    return get_config_dir() / "config.toml"


def generate_config() -> Path:
    """Generate default config file, keeping an existing one untouched."""
    path = get_config_path()
    if path.exists():
        return path
    path.parent.mkdir(parents=True, exist_ok=True, mode=0o700)
    path.write_text(DEFAULT_CONFIG)
    return path


def _fail(message: str) -> NoReturn:
    print(message, file=sys.stderr)
    print(f"Edit {get_config_path()} or delete it to use defaults.", file=sys.stderr)
    raise SystemExit(1)


def _number(name: str, env_var: str, file_value: object, cast: type) -> float | int:
    raw = os.getenv(env_var)
    value = raw if raw is not None else file_value
    if isinstance(value, bool):
        _fail(f"Invalid value for {name}: {value!r}")
    # int() would silently truncate 3600.7 from the file
    if cast is int and isinstance(value, float) and not value.is_integer():
        _fail(f"Invalid value for {name}: {value!r}")
    try:
        return cast(value)
    except (TypeError, ValueError):
        _fail(f"Invalid value for {name}: {value!r}")


def load_config() -> XeesConfig:
    """Load configuration from config file with env var overrides.

    A missing config file is not an error: built-in defaults apply.

    Returns:
        Loaded and validated XeesConfig.

    Raises:
        SystemExit: If the config file or an env var holds invalid values.
    """
    global _cached_config
    if _cached_config is not None:
        return _cached_config

    data: dict = {}
    path = get_config_path()
    if path.exists():
        try:
            with open(path, "rb") as f:
                data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            _fail(f"Cannot parse {path}: {e}")

    daemon = data.get("daemon", {})
    screensaver = data.get("screensaver", {})
    client = data.get("client", {})

    tick_interval = _number(
        "daemon.tick_interval",
        "XEES_TICK_INTERVAL",
        daemon.get("tick_interval", DEFAULT_TICK_INTERVAL),
        float,
    )
    default_duration = _number(
        "daemon.default_duration",
        "XEES_DEFAULT_DURATION",
        daemon.get("default_duration", DEFAULT_DURATION),
        int,
    )
    tool_timeout = _number(
        "screensaver.timeout",
        "XEES_SCREENSAVER_TIMEOUT",
        screensaver.get("timeout", DEFAULT_SCREENSAVER_TIMEOUT),
        float,
    )
    client_timeout = _number(
        "client.timeout",
        "XEES_CLIENT_TIMEOUT",
        client.get("timeout", DEFAULT_CLIENT_TIMEOUT),
        float,
    )
    command = os.getenv(
        "XEES_SCREENSAVER_COMMAND",
        screensaver.get("command", DEFAULT_SCREENSAVER_COMMAND),
    )

    # Validate ranges
    invalid = []
    if tick_interval <= 0:
        invalid.append("daemon.tick_interval")
    if default_duration < 0:
        invalid.append("daemon.default_duration")
    if tool_timeout <= 0:
        invalid.append("screensaver.timeout")
    if client_timeout <= 0:
        invalid.append("client.timeout")
    if not isinstance(command, str) or not command.strip():
        invalid.append("screensaver.command")

    if invalid:
        _fail(f"Invalid config values: {', '.join(invalid)}")

    _cached_config = XeesConfig(
        daemon=DaemonConfig(
            tick_interval=tick_interval,
            default_duration=default_duration,
        ),
        screensaver=ScreensaverConfig(command=command, timeout=tool_timeout),
        client=ClientConfig(timeout=client_timeout),
    )

    return _cached_config
