"""Separates console output from the REPL's echoed prompt lines."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable

from headlesschrome.models import RouterState

logger = logging.getLogger(__name__)

PROMPT_PREFIX = ">>>"


def is_prompt(line: str) -> bool:
    """Return ``True`` if *line* is an echoed input prompt."""
    return line.startswith(PROMPT_PREFIX)


class OutputRouter:
    """Drain *raw* and forward every non-prompt line to *filtered*.

    Lines are forwarded unchanged and in arrival order. ``None`` on *raw*
    (or a failed read) ends the loop; ``None`` is then put on *filtered* so
    consumers see the end of the stream. Setting *stop* ends the loop at the
    next read or blocked forward, even while the child is still producing
    output.
    """

    def __init__(
        self,
        raw: asyncio.Queue[str | None],
        filtered: asyncio.Queue[str | None],
        stop: asyncio.Event | None = None,
    ) -> None:
        self._raw = raw
        self._filtered = filtered
        self._stop = stop if stop is not None else asyncio.Event()
        self._state = RouterState.IDLE
        self.forwarded = 0
        self.dropped = 0

    @property
    def state(self) -> RouterState:
        return self._state

    @property
    def stop_event(self) -> asyncio.Event:
        return self._stop

    async def run(self) -> None:
        self._state = RouterState.RUNNING
        logger.debug("Output router started.")
        end_sent = False
        try:
            while not self._stop.is_set():
                line = await self._next_line()
                if line is None:
                    break
                if is_prompt(line):
                    self.dropped += 1
                    logger.debug("Dropped prompt line: %r", line)
                    continue
                if await self._unless_stopped(self._filtered.put(line)) is None:
                    break
                self.forwarded += 1
            end_sent = await self._unless_stopped(self._filtered.put(None)) is not None
        finally:
            self._state = RouterState.STOPPED
            logger.debug(
                "Output router stopped (forwarded=%d, dropped=%d).",
                self.forwarded,
                self.dropped,
            )
            if not end_sent:
                try:
                    self._filtered.put_nowait(None)
                except asyncio.QueueFull:
                    pass

    async def _unless_stopped(self, coro: Awaitable[Any]) -> asyncio.Future | None:
        """Await *coro* until it completes or the stop event is set.

        Returns the finished task, or ``None`` if *coro* was abandoned.
        """
        task = asyncio.ensure_future(coro)
        stop_task = asyncio.ensure_future(self._stop.wait())
        try:
            await asyncio.wait({task, stop_task}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            stop_task.cancel()
            if not task.done():
                task.cancel()
        if task.done() and not task.cancelled():
            return task
        return None

    async def _next_line(self) -> str | None:
        task = await self._unless_stopped(self._raw.get())
        if task is None:
            return None
        try:
            return task.result()
        except Exception as exc:
            logger.debug("Raw output read failed, treating as closed: %s", exc)
            return None
