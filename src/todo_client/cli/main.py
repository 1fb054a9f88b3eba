# src/todo_client/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState, restores the stored session, then runs
the console REPL until /exit (or EOF).
"""

from __future__ import annotations

import asyncio
import logging

from ..cli.bootstrap import create_initial_state
from ..config import get_settings
from ..connectors.console_connector import run_console_loop
from ..logging_setup import setup_logging

logger = logging.getLogger(__name__)


async def _run(settings) -> None:
    state = create_initial_state(settings=settings)
    try:
        await state.session.restore_session()
        if state.session.is_authenticated and state.session.user is not None:
            logger.info("Session restored for %s", state.session.user.email)

        if settings.console_enabled:
            await run_console_loop(state)
        else:
            logger.info("Console disabled; nothing else to run.")
    finally:
        await state.aclose()


def main() -> None:
    settings = get_settings()

    level_name = str(getattr(settings, "log_level", "INFO")).upper()
    console_level = getattr(logging, level_name, logging.INFO)

    setup_logging(log_dir=settings.data_dir, console_level=console_level)

    # Keep the HTTP stack readable.
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)

    logger.info("Starting %s...", settings.app_name)

    try:
        asyncio.run(_run(settings))
    except KeyboardInterrupt:
        logger.info("Interrupted.")
    logger.info("Bye.")


if __name__ == "__main__":
    main()
