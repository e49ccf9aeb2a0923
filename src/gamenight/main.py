"""
Main entry point for Game Night.

Loads .env, configures logging and opens the desktop wheel window.
"""

import asyncio
import logging
import sys

from dotenv import load_dotenv

from gamenight.config.settings import get_settings


def setup_logging(debug: bool = False) -> None:
    """Configure logging."""
    level = logging.DEBUG if debug else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S"
    )


async def run_simulator() -> None:
    """Run the pygame host window."""
    from gamenight.simulator.window import SimulatorWindow

    window = SimulatorWindow(settings=get_settings())
    await window.run()


def main() -> None:
    """Main entry point."""
    load_dotenv()

    settings = get_settings()
    setup_logging(settings.debug)

    logger = logging.getLogger(__name__)
    logger.info("Game Night starting...")

    try:
        asyncio.run(run_simulator())
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
    except Exception as e:
        logger.exception(f"Fatal error: {e}")
        sys.exit(1)

    logger.info("Game Night stopped")


if __name__ == "__main__":
    main()
