# src/todo_client/connectors/console_connector.py

from __future__ import annotations

import asyncio
import logging
from datetime import datetime

from ..api.client import ApiError, friendly_api_error_message
from ..cli.commands import registry as command_registry
from ..core.errors import SessionRequiredError, TaskNotFoundError
from ..core.state import AppState

logger = logging.getLogger(__name__)


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}")


async def run_console_loop(state: AppState) -> None:
    """
    Interactive REPL on top of the session/task core.

    input() runs in a worker thread so pending network work (e.g. the task
    refresh after login) keeps progressing while the prompt is open.
    """
    logger.info("Console connector started.")
    _print_ts("[CONSOLE] Type /help for commands. Use /exit to quit.\n")

    def emit(text: str) -> None:
        # Immediate feedback for operations that wait on the network.
        print(f"[{_ts_local()}] {text}", flush=True)

    while True:
        try:
            user_input = (await asyncio.to_thread(input, ">>> ")).strip()
        except EOFError:
            logger.info("Console EOF received, exiting.")
            break
        except KeyboardInterrupt:
            logger.info("Console KeyboardInterrupt, exiting.")
            print()
            break

        if not user_input:
            continue

        if user_input.lower() in ("/exit", "/quit"):
            logger.info("Console exit command received.")
            break

        try:
            reply = await command_registry.handle(state, user_input, emit=emit)
        except ApiError as e:
            logger.info("API error: %s", e)
            reply = f"[API] {friendly_api_error_message(e)}"
        except (SessionRequiredError, TaskNotFoundError, ValueError) as e:
            reply = str(e)
        except Exception:
            logger.exception("Command handler crashed.")
            reply = "Internal error while handling a command."

        if reply is None:
            reply = "Commands start with '/'. Use /help to list them."
        _print_ts(reply)

    logger.info("Console connector finished.")
