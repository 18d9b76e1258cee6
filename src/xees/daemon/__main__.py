"""Entry point for the xees daemon server."""

import asyncio
import logging
import signal
import sys

from ..errors import BusRegistrationError
from .server import XeesDaemon

logger = logging.getLogger(__name__)


def setup_logging(debug: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


async def main() -> None:
    """Run the daemon server."""
    daemon = XeesDaemon()

    # SIGTERM and SIGINT go through the same path as a Quit call
    loop = asyncio.get_running_loop()

    def handle_signal() -> None:
        logger.info("Received shutdown signal")
        daemon.request_shutdown()

    loop.add_signal_handler(signal.SIGTERM, handle_signal)
    loop.add_signal_handler(signal.SIGINT, handle_signal)

    await daemon.start()
    logger.info("Daemon shutdown complete")


def run(debug: bool = False) -> None:
    """Run the daemon until it is told to quit, exiting 1 on startup failure."""
    setup_logging(debug)
    try:
        asyncio.run(main())
    except BusRegistrationError as e:
        logger.error(f"Failed to start daemon: {e}")
        sys.exit(1)
    except Exception as e:
        logger.error(f"Fatal error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    run()
