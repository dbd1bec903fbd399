"""Interactive console session with one headless Chrome instance."""

from __future__ import annotations

import asyncio
import logging
from typing import AsyncIterator, Awaitable, Callable, Sequence

from headlesschrome import scripts
from headlesschrome.exceptions import SessionClosedError, StartupError
from headlesschrome.models import LaunchSpec
from headlesschrome.process.base import InteractiveProcess
from headlesschrome.process.subprocess_process import SubprocessProcess
from headlesschrome.router import OutputRouter
from headlesschrome.settings import ChromeSettings

logger = logging.getLogger(__name__)

EXPECTED_FIRST_LINE = 'Type a Javascript expression to evaluate or "quit" to exit.'
QUIT_COMMAND = "quit"

SpawnFn = Callable[[Sequence[str]], Awaitable[InteractiveProcess]]


class ChromeSession:
    """Drives the ``--repl`` console of a single headless Chrome page.

    Use :meth:`create` rather than the constructor: it spawns the browser,
    starts the output router and performs the greeting handshake.
    Results of commands arrive asynchronously on :attr:`output`.
    """

    def __init__(
        self,
        process: InteractiveProcess,
        settings: ChromeSettings,
    ) -> None:
        self._process = process
        self._settings = settings
        self._closed = False
        self.output: asyncio.Queue[str | None] = asyncio.Queue(
            maxsize=settings.output_capacity
        )
        self._router = OutputRouter(process.raw_output, self.output)
        self._router_task = asyncio.create_task(self._router.run())

    # --- lifecycle ---

    @classmethod
    async def create(
        cls,
        url: str,
        settings: ChromeSettings | None = None,
        *,
        spawn: SpawnFn | None = None,
    ) -> "ChromeSession":
        """Launch Chrome on *url* and return a live session.

        Raises :class:`StartupError` if the process cannot be spawned. An
        unexpected greeting is only logged.
        """
        settings = settings or ChromeSettings()
        argv = LaunchSpec(settings.chrome_path, tuple(settings.args)).argv(url)
        spawn = spawn or SubprocessProcess.spawn
        try:
            process = await spawn(argv)
        except OSError as exc:
            raise StartupError(f"Failed to start {settings.chrome_path}: {exc}") from exc

        session = cls(process, settings)
        await session._handshake()
        return session

    async def _handshake(self) -> None:
        try:
            first_line = await asyncio.wait_for(
                self.read_line(), timeout=self._settings.handshake_timeout
            )
        except asyncio.TimeoutError:
            logger.warning(
                "No greeting from headless Chrome console after %ss.",
                self._settings.handshake_timeout,
            )
            return

        if first_line is None:
            logger.warning("Headless Chrome console closed before sending a greeting.")
        elif EXPECTED_FIRST_LINE not in first_line:
            logger.warning(
                "Unexpected first line when initializing headless Chrome console: %r",
                first_line,
            )

    async def exit(self) -> None:
        """Ask the console to quit and release the session.

        Does not wait for the browser process to terminate.
        """
        if self._closed:
            return
        try:
            await self.write(QUIT_COMMAND)
        except SessionClosedError:
            logger.debug("Console input already closed; skipping quit command.")
        self._closed = True
        self._router.stop_event.set()
        await self._process.exit()
        logger.info("Chrome session exited (pid=%s).", self._process.pid)

    async def force_close(self) -> None:
        """Kill the browser without the quit handshake."""
        self._closed = True
        self._router.stop_event.set()
        await self._process.force_close()
        logger.info("Chrome session force-closed (pid=%s).", self._process.pid)

    async def wait(self) -> int:
        """Block until the browser process has terminated."""
        return await self._process.wait()

    async def __aenter__(self) -> "ChromeSession":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.exit()

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def raw_output(self) -> asyncio.Queue[str | None]:
        """Unfiltered console lines, including echoed prompts."""
        return self._process.raw_output

    @property
    def router(self) -> OutputRouter:
        return self._router

    # --- output ---

    async def read_line(self) -> str | None:
        """Return the next filtered line, or ``None`` once output has ended."""
        if self._closed and self.output.empty():
            # the router may have stopped without room for the end marker
            return None
        line = await self.output.get()
        if line is None:
            # keep the end marker visible to later readers
            self.output.put_nowait(None)
        return line

    async def lines(self) -> AsyncIterator[str]:
        while True:
            line = await self.read_line()
            if line is None:
                return
            yield line

    # --- input ---

    async def write(self, command: str) -> None:
        """Send one command line to the console; no reply is awaited."""
        if self._closed:
            raise SessionClosedError("Chrome session is closed.")
        if self._settings.debug:
            logger.info("Writing to console: %s", command)
        await self._process.write(command)

    # --- convenience writers ---

    async def click_selector(self, selector: str) -> None:
        """Call ``click()`` on the element matching *selector*."""
        await self.write(scripts.click_selector(selector))

    async def click_item_with_classes(self, classes: str, index: int) -> None:
        """Click the *index*-th element with *classes* (space separated)."""
        await self.write(scripts.click_item_with_classes(classes, index))

    async def click_item_with_id(self, element_id: str) -> None:
        await self.write(scripts.click_item_with_id(element_id))

    async def click_item_with_inner_html(self, element_type: str, prefix: str, index: int) -> None:
        """Click the *index*-th *element_type* whose inner HTML starts with *prefix*."""
        await self.write(scripts.click_item_with_inner_html(element_type, prefix, index))

    async def get_item_with_inner_html(self, element_type: str, prefix: str, index: int) -> None:
        await self.write(scripts.get_item_with_inner_html(element_type, prefix, index))

    async def get_content_of_item_with_classes(self, classes: str, index: int) -> None:
        await self.write(scripts.get_content_of_item_with_classes(classes, index))

    async def get_content_of_item_with_selector(self, selector: str) -> None:
        await self.write(scripts.get_content_of_item_with_selector(selector))

    async def get_value_of_item_with_classes(self, classes: str, index: int) -> None:
        """Request the form value of the *index*-th element with *classes*."""
        await self.write(scripts.get_value_of_item_with_classes(classes, index))

    async def set_text_by_id(self, element_id: str, text: str) -> None:
        await self.write(scripts.set_text_by_id(element_id, text))

    async def set_text_by_classes(self, classes: str, index: int, text: str) -> None:
        await self.write(scripts.set_text_by_classes(classes, index, text))

    async def set_input_text_by_classes(self, classes: str, index: int, text: str) -> None:
        """Set ``value`` on the *index*-th input with *classes*."""
        await self.write(scripts.set_input_text_by_classes(classes, index, text))
