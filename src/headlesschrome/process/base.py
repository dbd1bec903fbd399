"""Protocol definition for interactive console processes."""

from __future__ import annotations

import asyncio
from typing import Protocol


class InteractiveProcess(Protocol):
    """Line-oriented handle on a running child process.

    ``raw_output`` receives one decoded line per item with the line
    terminator removed, followed by ``None`` once the child's output is
    exhausted.
    """

    raw_output: asyncio.Queue[str | None]

    @property
    def pid(self) -> int | None:
        """OS process id of the child."""
        ...

    async def write(self, line: str) -> None:
        """Send *line* followed by a newline to the child's stdin."""
        ...

    async def exit(self) -> None:
        """Close stdin and stop expecting output, without waiting for the child."""
        ...

    async def force_close(self) -> None:
        """Kill the child immediately."""
        ...

    async def wait(self) -> int:
        """Block until the child terminates and return its exit status."""
        ...
