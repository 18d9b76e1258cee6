"""Background loop keeping the screen unlocked while suppression is active."""

import asyncio
import enum
import logging
from typing import Protocol

from ..errors import ScreensaverError
from .state import SuppressionState

logger = logging.getLogger(__name__)


class Screensaver(Protocol):
    async def is_locked(self) -> bool: ...

    async def deactivate(self) -> None: ...


class TickOutcome(enum.Enum):
    """What a single reassertion tick did."""

    IDLE = "idle"
    LOCKED = "locked"
    DEACTIVATED = "deactivated"
    FAILED = "failed"


class ReassertionLoop:
    """Periodically pokes the screensaver while suppression is active.

    A screen that is already locked is left alone: a manual lock during
    suppression is the user's choice. Tool failures are logged and the
    tick is skipped.
    """

    def __init__(
        self,
        state: SuppressionState,
        screensaver: Screensaver,
        tick_interval: float,
        stop_event: asyncio.Event,
    ) -> None:
        self.state = state
        self.screensaver = screensaver
        self.tick_interval = tick_interval
        self.stop_event = stop_event

    async def tick(self) -> TickOutcome:
        """Run one check. External calls happen outside the state lock."""
        if not self.state.active:
            return TickOutcome.IDLE

        try:
            if await self.screensaver.is_locked():
                logger.debug("Screen is locked, leaving it alone")
                return TickOutcome.LOCKED

            # Enable may have landed while the probe was running
            if not self.state.active:
                return TickOutcome.IDLE

            await self.screensaver.deactivate()
        except ScreensaverError as e:
            logger.warning(f"Screensaver tool failed, skipping tick: {e}")
            return TickOutcome.FAILED

        logger.debug("Screensaver deactivated")
        return TickOutcome.DEACTIVATED

    async def run(self) -> None:
        """Tick until shutdown is requested."""
        logger.info(f"Reassertion loop started (tick {self.tick_interval}s)")
        while True:
            if self.state.shutdown_requested or self.stop_event.is_set():
                break

            try:
                await self.tick()
            except Exception as e:
                logger.error(f"Error in reassertion tick: {e!r}")

            try:
                await asyncio.wait_for(self.stop_event.wait(), self.tick_interval)
            except TimeoutError:
                continue
        logger.info("Reassertion loop stopped")
