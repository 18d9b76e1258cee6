"""D-Bus daemon server for xees."""

import asyncio
import contextlib
import logging
import os

from dbus_next import BusType, NameFlag, RequestNameReply
from dbus_next.aio import MessageBus

from ..config import XeesConfig, load_config
from ..errors import BusRegistrationError
from ..screensaver import XScreenSaver
from .control import Controller
from .reassert import ReassertionLoop, Screensaver
from .scheduler import ExpiryScheduler
from .service import BUS_NAME, OBJECT_PATH, XeesInterface
from .state import SuppressionState

logger = logging.getLogger(__name__)


class XeesDaemon:
    """Owns the bus name and runs the reassertion loop until Quit."""

    def __init__(
        self,
        config: XeesConfig | None = None,
        screensaver: Screensaver | None = None,
        bus_type: BusType = BusType.SESSION,
    ) -> None:
        """Initialize daemon state; nothing touches the bus yet."""
        self.config = config or load_config()
        self.bus_type = bus_type
        self.bus: MessageBus | None = None
        self.screensaver = screensaver or XScreenSaver(
            command=self.config.screensaver.command,
            timeout=self.config.screensaver.timeout,
        )

        self.state = SuppressionState()
        self.scheduler = ExpiryScheduler(self.state)
        self.stop_event = asyncio.Event()
        self.controller = Controller(
            self.state, self.scheduler, on_quit=self.stop_event.set
        )
        self.interface = XeesInterface(self.controller)
        self.reassertion = ReassertionLoop(
            self.state,
            self.screensaver,
            self.config.daemon.tick_interval,
            self.stop_event,
        )

    def request_shutdown(self) -> None:
        """Stop the daemon the same way a Quit call does."""
        self.controller.quit()

    async def connect(self) -> MessageBus:
        """Connect to the bus, export the interface and claim the name.

        Raises:
            BusRegistrationError: If the bus is unreachable or the name is taken
        """
        try:
            bus = await MessageBus(bus_type=self.bus_type).connect()
        except Exception as e:
            raise BusRegistrationError(f"Cannot connect to D-Bus: {e}", e) from e

        bus.export(OBJECT_PATH, self.interface)
        bus.add_message_handler(self.interface.handle_disable_message)

        try:
            reply = await bus.request_name(BUS_NAME, NameFlag.DO_NOT_QUEUE)
        except Exception as e:
            bus.disconnect()
            raise BusRegistrationError(f"Cannot request {BUS_NAME}: {e}", e) from e

        if reply not in (
            RequestNameReply.PRIMARY_OWNER,
            RequestNameReply.ALREADY_OWNER,
        ):
            bus.disconnect()
            raise BusRegistrationError(
                f"{BUS_NAME} is already owned by another process ({reply.name})"
            )

        self.bus = bus
        logger.info(f"✓ Registered {BUS_NAME} on the {self.bus_type.name.lower()} bus")
        return bus

    async def start(self) -> None:
        """Run until Quit or request_shutdown()."""
        logger.info("Starting xees daemon...")
        await self.connect()
        logger.info(f"✓ PID: {os.getpid()}")

        loop_task = asyncio.create_task(self.reassertion.run())
        try:
            await self.stop_event.wait()
            logger.info("Shutdown requested")
        finally:
            self.scheduler.cancel()
            await self._stop_loop(loop_task)
            await self._release_bus()

    async def _stop_loop(self, task: asyncio.Task[None]) -> None:
        self.stop_event.set()
        try:
            await asyncio.wait_for(task, self.config.screensaver.timeout + 1)
        except TimeoutError:
            logger.warning("Reassertion loop did not stop in time, cancelling")
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task

    async def _release_bus(self) -> None:
        if self.bus is None:
            return
        # The round trip also flushes the pending "quitting" reply
        try:
            await self.bus.release_name(BUS_NAME)
        except Exception as e:
            logger.debug(f"Failed to release {BUS_NAME}: {e}")
        self.bus.disconnect()
        with contextlib.suppress(Exception):
            await self.bus.wait_for_disconnect()
        self.bus = None
        logger.info("Released bus connection")
