"""Enable/Disable/Status/Quit request handling for the daemon."""

import logging
from collections.abc import Callable
from datetime import timedelta
from typing import Any

from .scheduler import ExpiryScheduler
from .state import SuppressionState

logger = logging.getLogger(__name__)

# Durations past this are treated like no duration at all
MAX_DURATION = int(timedelta(days=36500).total_seconds())


def parse_duration(value: Any) -> int | None:
    """Interpret a Disable duration leniently.

    Accepts a non-negative integer or a string of ASCII digits, possibly
    wrapped in a D-Bus variant. Anything else means "no duration", which
    disables the screensaver until the next Enable.

    Args:
        value: Raw argument received over the bus

    Returns:
        Number of seconds, or None for an indefinite disable
    """
    # dbus_next.Variant and friends carry the payload in .value
    if hasattr(value, "signature") and hasattr(value, "value"):
        value = value.value

    if isinstance(value, bool):
        return None
    if isinstance(value, str):
        text = value.strip()
        if not (text.isascii() and text.isdigit()):
            return None
        value = int(text)
    if not isinstance(value, int) or value < 0 or value > MAX_DURATION:
        return None
    return value


class Controller:
    """Translates control requests into state changes and timer arming."""

    def __init__(
        self,
        state: SuppressionState,
        scheduler: ExpiryScheduler,
        on_quit: Callable[[], None] | None = None,
    ) -> None:
        self.state = state
        self.scheduler = scheduler
        self.on_quit = on_quit

    def enable(self) -> str:
        logger.info("=== Enable")
        self.state.enable()
        self.scheduler.cancel()
        return "ok"

    def disable(self, duration: Any = None) -> str:
        seconds = parse_duration(duration)
        if seconds is None and duration is not None:
            logger.debug(f"Unusable duration {duration!r}, disabling indefinitely")
        logger.info(f"=== Disable {seconds if seconds is not None else 'indefinitely'}")

        episode = self.state.disable(seconds)
        if seconds is None:
            self.scheduler.cancel()
        else:
            self.scheduler.arm(seconds, episode)
        return "ok"

    def status(self) -> str:
        return self.state.snapshot().status

    def quit(self) -> str:
        logger.info("=== Quit")
        self.state.request_shutdown()
        self.scheduler.cancel()
        if self.on_quit is not None:
            self.on_quit()
        return "quitting"
