"""Blitz: Main entry point."""

import asyncio
import logging
from typing import Optional

from .config import BlitzSettings, load_settings
from .communication.telegram import TelegramChannel

_log_format = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

logger = logging.getLogger("blitz")


def setup_logging(debug: bool = False, log_file: Optional[str] = None):
    """Configure root logging: stderr always, plus ``log_file`` when set."""
    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if log_file:
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))
    logging.basicConfig(level=logging.INFO, format=_log_format, handlers=handlers, force=True)
    if debug:
        logging.getLogger("blitz").setLevel(logging.DEBUG)
    # python-telegram-bot polls every few seconds through httpx
    logging.getLogger("httpx").setLevel(logging.WARNING)


async def run(settings: Optional[BlitzSettings] = None) -> int:
    """Main run loop. Returns the process exit code."""
    settings = settings or load_settings()

    if not settings.telegram_bot_token:
        logger.error(
            "Error: TELEGRAM_BOT_TOKEN is not set. Set it in your .env file (locally) "
            "or in your hosting platform's environment variables."
        )
        return 1

    telegram = TelegramChannel(settings)
    try:
        await telegram.start()
        logger.info("Blitz is running. Press Ctrl+C to stop.")
        while True:
            await asyncio.sleep(1)
    except (KeyboardInterrupt, asyncio.CancelledError):
        pass
    except Exception as e:
        logger.critical(f"Fatal error: {type(e).__name__}: {e}", exc_info=True)
        return 1
    finally:
        await telegram.stop()
    return 0


def main():
    """Entry point."""
    settings = load_settings()
    setup_logging(settings.debug, settings.log_file)
    raise SystemExit(asyncio.run(run(settings)))


if __name__ == "__main__":
    main()
