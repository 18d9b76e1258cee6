"""Shared suppression state of the daemon."""

import threading
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timedelta


@dataclass(frozen=True)
class StateSnapshot:
    """Consistent copy of the suppression state taken under the lock."""

    active: bool
    expiry: datetime | None
    shutdown_requested: bool
    episode: int

    @property
    def status(self) -> str:
        return "Disabled" if self.active else "Enabled"


class SuppressionState:
    """Whether the screensaver is suppressed and until when.

    Every read and write goes through one lock so that `active` and
    `expiry` always change together. `episode` grows on each enable or
    disable; an expiry only applies to the episode it was armed for.
    """

    def __init__(self, clock: Callable[[], datetime] = datetime.now) -> None:
        self._lock = threading.Lock()
        self._clock = clock
        self._active = False
        self._expiry: datetime | None = None
        self._shutdown_requested = False
        self._episode = 0

    def snapshot(self) -> StateSnapshot:
        with self._lock:
            return StateSnapshot(
                active=self._active,
                expiry=self._expiry,
                shutdown_requested=self._shutdown_requested,
                episode=self._episode,
            )

    @property
    def active(self) -> bool:
        with self._lock:
            return self._active

    @property
    def shutdown_requested(self) -> bool:
        with self._lock:
            return self._shutdown_requested

    def enable(self) -> int:
        """Stop suppressing. Returns the new episode number."""
        with self._lock:
            self._active = False
            self._expiry = None
            self._episode += 1
            return self._episode

    def disable(self, duration: int | None) -> int:
        """Start suppressing, for `duration` seconds or indefinitely.

        Replaces any previous expiry. Returns the new episode number,
        which the caller hands to the expiry timer.
        """
        with self._lock:
            self._active = True
            if duration is None:
                self._expiry = None
            else:
                self._expiry = self._clock() + timedelta(seconds=duration)
            self._episode += 1
            return self._episode

    def expire(self, episode: int) -> bool:
        """Clear suppression if `episode` is still the current one.

        Returns:
            True if the state changed, False for a stale or redundant expiry
        """
        with self._lock:
            if episode != self._episode or not self._active:
                return False
            self._active = False
            self._expiry = None
            return True

    def request_shutdown(self) -> None:
        with self._lock:
            self._shutdown_requested = True
