# src/osai_core/connectors/console_connector.py

from __future__ import annotations

import asyncio
import logging
import threading
from collections.abc import Callable
from datetime import datetime

from ..cli.commands import CommandRegistry
from ..cli.commands import registry as command_registry
from ..core.state import AppState

logger = logging.getLogger(__name__)

EXIT_COMMANDS = ("exit", "quit", "/exit", "/quit")

PROMPT = "Command:> "


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}", flush=True)


async def read_line_async(read_line: Callable[[str], str], prompt: str) -> str:
    """
    Run a blocking read_line(prompt) in a daemon thread and await the result.

    A read still blocked in input() must not keep the process alive after exit.
    """
    loop = asyncio.get_running_loop()
    fut: asyncio.Future[str] = loop.create_future()

    def _deliver(result: str | None, exc: BaseException | None) -> None:
        if fut.done():
            return
        if exc is not None:
            fut.set_exception(exc)
        else:
            fut.set_result(result or "")

    def _worker() -> None:
        try:
            line = read_line(prompt)
        except BaseException as e:
            loop.call_soon_threadsafe(_deliver, None, e)
        else:
            loop.call_soon_threadsafe(_deliver, line, None)

    threading.Thread(target=_worker, name="console-stdin", daemon=True).start()
    return await fut


async def run_console_loop(
    state: AppState,
    *,
    registry: CommandRegistry = command_registry,
    read_line: Callable[[str], str] = input,
) -> None:
    """
    Interactive command loop.

    stdin is read in a daemon thread so the scheduler task keeps running
    while the prompt waits. Returns on exit/quit, EOF or Ctrl+C.
    """
    logger.info("Console connector started.")
    print("--- OSAI CLI Interface ---")
    print("Commands: task <date:time:name>, show_tasks, ai <query>, speak <text>, play, status, help, exit")

    while True:
        try:
            user_input = (await read_line_async(read_line, PROMPT)).strip()
        except EOFError:
            logger.info("Console EOF received, exiting.")
            break
        except KeyboardInterrupt:
            logger.info("Console KeyboardInterrupt, exiting.")
            print()
            break

        if not user_input:
            continue

        if user_input.lower() in EXIT_COMMANDS:
            logger.info("Console exit command received.")
            break

        try:
            cmd_response = await registry.handle(state, user_input, emit=_print_ts)
        except Exception:
            logger.exception("Command handler crashed.")
            cmd_response = "Internal error while handling a command."

        if cmd_response is not None:
            _print_ts(cmd_response)

    logger.info("Console connector finished.")
