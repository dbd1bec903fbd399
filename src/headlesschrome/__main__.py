"""Entry point: ``python -m headlesschrome``."""

from __future__ import annotations

import asyncio
import logging
import sys
import threading
from typing import TextIO

from headlesschrome.console import print_banner, print_output
from headlesschrome.session import QUIT_COMMAND, ChromeSession
from headlesschrome.settings import ChromeSettings


def _configure_logging() -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s  %(levelname)-8s  %(name)s  %(message)s",
        datefmt="%H:%M:%S",
    )
    logging.getLogger("asyncio").setLevel(logging.WARNING)


def _start_line_reader(stream: TextIO) -> asyncio.Queue[str]:
    """Read *stream* on a daemon thread; ``""`` on the queue marks EOF.

    A daemon thread blocked in ``readline`` does not hold up interpreter
    shutdown, so Ctrl-C exits without waiting for another line.
    """
    loop = asyncio.get_running_loop()
    queue: asyncio.Queue[str] = asyncio.Queue()

    def _reader() -> None:
        while True:
            line = stream.readline()
            try:
                loop.call_soon_threadsafe(queue.put_nowait, line)
            except RuntimeError:
                # event loop already closed
                return
            if not line:
                return

    threading.Thread(target=_reader, name="stdin-reader", daemon=True).start()
    return queue


async def _async_main() -> None:
    settings = ChromeSettings.from_yaml()
    print_banner(settings.url)
    session = await ChromeSession.create(settings.url, settings)
    printer = asyncio.create_task(print_output(session))
    commands = _start_line_reader(sys.stdin)
    try:
        while True:
            command = await commands.get()
            if not command:
                break
            command = command.rstrip("\n")
            if command.strip() == QUIT_COMMAND:
                break
            if command:
                await session.write(command)
    finally:
        await session.exit()
        await session.wait()
        await printer


def main() -> None:
    _configure_logging()
    try:
        asyncio.run(_async_main())
    except KeyboardInterrupt:
        logging.info("Interrupted by user.")
        sys.exit(130)


if __name__ == "__main__":
    main()
