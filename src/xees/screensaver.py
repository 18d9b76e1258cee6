"""Access to the external screen-lock tool (xscreensaver-command)."""

import asyncio
import contextlib
import logging

from .errors import ScreensaverError

logger = logging.getLogger(__name__)

# `xscreensaver-command -time` prints e.g.
#   XScreenSaver 5.40: screen locked since Tue Dec  4 11:38:46 2018 (hack #212)
LOCKED_MARKER = "screen locked"


class XScreenSaver:
    """Thin async wrapper around the screensaver command line tool."""

    def __init__(self, command: str = "xscreensaver-command", timeout: float = 5.0) -> None:
        """Initialize with tool name and per-call timeout in seconds."""
        self.command = command
        self.timeout = timeout

    async def _run(self, *args: str) -> tuple[int, str]:
        """Run the tool with arguments and return (returncode, stdout).

        Raises:
            ScreensaverError: If the tool cannot be spawned or times out
        """
        argv = [self.command, *args]
        logger.debug(f"Running {' '.join(argv)}")
        try:
            process = await asyncio.create_subprocess_exec(
                *argv,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.DEVNULL,
            )
        except OSError as e:
            raise ScreensaverError(f"Failed to run '{' '.join(argv)}': {e}", None, e) from e

        try:
            stdout, _ = await asyncio.wait_for(process.communicate(), self.timeout)
        except TimeoutError as e:
            # The child may exit on its own right at the deadline
            with contextlib.suppress(ProcessLookupError):
                process.kill()
            await process.wait()
            raise ScreensaverError(
                f"'{' '.join(argv)}' did not finish within {self.timeout}s", None, e
            ) from e

        return process.returncode, stdout.decode(errors="replace")

    async def is_locked(self) -> bool:
        """Ask the tool whether the screen is currently locked.

        Only the stdout substring "screen locked" counts as locked; the
        exit code is not inspected.
        """
        _, output = await self._run("-time")
        return LOCKED_MARKER in output

    async def deactivate(self) -> None:
        """Ask the tool to deactivate (reset its idle timer).

        Raises:
            ScreensaverError: On spawn failure, timeout or non-zero exit
        """
        returncode, _ = await self._run("-deactivate")
        if returncode != 0:
            raise ScreensaverError(
                f"'{self.command} -deactivate' exited with status {returncode}",
                returncode,
            )
