"""asyncio-subprocess implementation of InteractiveProcess."""

from __future__ import annotations

import asyncio
import logging
from typing import Sequence

from headlesschrome.exceptions import SessionClosedError

logger = logging.getLogger(__name__)

_DRAIN_CHUNK = 64 * 1024


def _decode_line(data: bytes) -> str:
    text = data.decode("utf-8", errors="replace")
    if text.endswith("\n"):
        text = text[:-1]
        if text.endswith("\r"):
            text = text[:-1]
    return text


class SubprocessProcess:
    """Child process with piped stdin and a merged stdout/stderr line pump.

    After :meth:`exit` or :meth:`force_close` the pump is cancelled and the
    child's output is read and discarded until EOF, so the child never
    blocks on a full pipe.
    """

    def __init__(
        self,
        proc: asyncio.subprocess.Process,
        raw_capacity: int = 1,
    ) -> None:
        self._proc = proc
        self.raw_output: asyncio.Queue[str | None] = asyncio.Queue(maxsize=raw_capacity)
        self._closed = False
        self._pump_task = asyncio.create_task(self._pump())
        self._drain_task: asyncio.Task | None = None

    @classmethod
    async def spawn(cls, argv: Sequence[str], *, raw_capacity: int = 1) -> "SubprocessProcess":
        """Start *argv* and begin pumping its output.

        ``OSError`` from the exec (missing binary, no permission) propagates.
        """
        proc = await asyncio.create_subprocess_exec(
            *argv,
            stdin=asyncio.subprocess.PIPE,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.STDOUT,
        )
        logger.info("Spawned %s (pid=%s).", argv[0], proc.pid)
        return cls(proc, raw_capacity=raw_capacity)

    @property
    def pid(self) -> int | None:
        return self._proc.pid

    # --- output ---

    async def _pump(self) -> None:
        assert self._proc.stdout is not None
        try:
            while True:
                data = await self._proc.stdout.readline()
                if not data:
                    break
                await self.raw_output.put(_decode_line(data))
        except (OSError, ValueError) as exc:
            # ValueError: a single line exceeded the stream reader's limit
            logger.debug("Output pump stopped on read error: %s", exc)
        except asyncio.CancelledError:
            self._end_output_nowait()
            raise
        await self.raw_output.put(None)

    def _end_output_nowait(self) -> None:
        try:
            self.raw_output.put_nowait(None)
        except asyncio.QueueFull:
            pass

    async def _discard_output(self) -> None:
        # the pump must be gone before anything else reads stdout
        await asyncio.wait({self._pump_task})
        assert self._proc.stdout is not None
        try:
            while await self._proc.stdout.read(_DRAIN_CHUNK):
                pass
        except OSError as exc:
            logger.debug("Output drain stopped on read error: %s", exc)

    def _stop_pumping(self) -> None:
        if self._drain_task is not None:
            return
        self._pump_task.cancel()
        self._drain_task = asyncio.create_task(self._discard_output())

    # --- input ---

    async def write(self, line: str) -> None:
        stdin = self._proc.stdin
        if self._closed or stdin is None or stdin.is_closing():
            raise SessionClosedError("Console input is closed.")
        stdin.write(line.encode("utf-8") + b"\n")
        try:
            await stdin.drain()
        except (BrokenPipeError, ConnectionResetError) as exc:
            raise SessionClosedError(f"Console input is closed: {exc}") from exc

    # --- lifecycle ---

    async def exit(self) -> None:
        if self._closed:
            return
        self._closed = True
        if self._proc.stdin is not None and not self._proc.stdin.is_closing():
            self._proc.stdin.close()
        self._stop_pumping()

    async def force_close(self) -> None:
        self._closed = True
        try:
            self._proc.kill()
        except ProcessLookupError:
            pass
        self._stop_pumping()

    async def wait(self) -> int:
        return await self._proc.wait()
