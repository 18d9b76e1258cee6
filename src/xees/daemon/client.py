"""D-Bus client for communicating with the xees daemon."""

import asyncio
import logging
from typing import Any

from dbus_next import BusType, Message, MessageType
from dbus_next.aio import MessageBus

from ..errors import DaemonCallError, DaemonUnavailableError, XeesError
from .control import MAX_DURATION
from .service import BUS_NAME, INTERFACE_NAME, OBJECT_PATH

logger = logging.getLogger(__name__)

# Error replies meaning nobody owns the daemon's bus name
UNAVAILABLE_ERRORS = (
    "org.freedesktop.DBus.Error.ServiceUnknown",
    "org.freedesktop.DBus.Error.NameHasNoOwner",
)


class XeesClient:
    """Client for calling the daemon's control methods over D-Bus."""

    def __init__(self, timeout: float = 2.0, bus_type: BusType = BusType.SESSION) -> None:
        """Initialize client with a per-call timeout in seconds."""
        self.timeout = timeout
        self.bus_type = bus_type

    async def call(self, member: str, signature: str = "", body: list[Any] | None = None) -> str:
        """Call a daemon method and return its string reply.

        Args:
            member: Method name (e.g., "Enable", "Status")
            signature: D-Bus signature of the arguments
            body: Method arguments

        Returns:
            The string returned by the daemon

        Raises:
            DaemonUnavailableError: When the bus or the daemon cannot be reached
            DaemonCallError: When the daemon is running but rejects the call
        """
        try:
            return await asyncio.wait_for(
                self._call(member, signature, body or []), self.timeout
            )
        except XeesError:
            raise
        except TimeoutError as e:
            raise DaemonUnavailableError(
                f"Daemon did not answer {member} within {self.timeout}s", e
            ) from e
        except Exception as e:
            raise DaemonUnavailableError(f"Communication error: {e}", e) from e

    async def _call(self, member: str, signature: str, body: list[Any]) -> str:
        bus = await MessageBus(bus_type=self.bus_type).connect()
        try:
            reply = await bus.call(
                Message(
                    destination=BUS_NAME,
                    path=OBJECT_PATH,
                    interface=INTERFACE_NAME,
                    member=member,
                    signature=signature,
                    body=body,
                )
            )
        finally:
            bus.disconnect()

        if reply.message_type == MessageType.ERROR:
            detail = reply.body[0] if reply.body else reply.error_name
            logger.debug(f"{member} failed: {reply.error_name}")
            if reply.error_name in UNAVAILABLE_ERRORS:
                raise DaemonUnavailableError(f"Daemon not available: {detail}")
            raise DaemonCallError(
                f"Daemon rejected {member}: {reply.error_name}: {detail}",
                reply.error_name,
            )

        return reply.body[0]

    async def enable(self) -> str:
        return await self.call("Enable")

    async def disable(self, seconds: int | None = None) -> str:
        """Suppress the screensaver for `seconds`, or indefinitely if None.

        Raises:
            ValueError: If seconds is negative or beyond MAX_DURATION
        """
        if seconds is None:
            return await self.call("Disable")
        if not 0 <= seconds <= MAX_DURATION:
            raise ValueError(f"Duration must be between 0 and {MAX_DURATION} seconds")
        return await self.call("Disable", "t", [seconds])

    async def status(self) -> str:
        return await self.call("Status")

    async def quit(self) -> str:
        return await self.call("Quit")
