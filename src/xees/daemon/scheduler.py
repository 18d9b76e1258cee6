"""Single pending expiry timer for the suppression state."""

import asyncio
import logging

from .state import SuppressionState

logger = logging.getLogger(__name__)


class ExpiryScheduler:
    """Holds at most one armed expiry on the event loop.

    Arming always cancels the previous handle first, so only the most
    recent disable can ever expire.
    """

    def __init__(
        self,
        state: SuppressionState,
        loop: asyncio.AbstractEventLoop | None = None,
    ) -> None:
        self.state = state
        self._loop = loop
        self._handle: asyncio.TimerHandle | None = None

    @property
    def pending(self) -> bool:
        """Whether an expiry is currently armed."""
        return self._handle is not None

    def arm(self, delay: float, episode: int) -> None:
        """Cancel any armed expiry and arm a new one for `episode`."""
        self.cancel()
        loop = self._loop or asyncio.get_running_loop()
        self._handle = loop.call_later(delay, self._fire, episode)
        logger.debug(f"Expiry armed in {delay}s for episode {episode}")

    def cancel(self) -> None:
        """Cancel the armed expiry, if any."""
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _fire(self, episode: int) -> None:
        self._handle = None
        if self.state.expire(episode):
            logger.info("Suppression expired, screensaver enabled again")
        else:
            logger.debug(f"Ignoring stale expiry for episode {episode}")
