"""Value types shared across the session and router."""

from __future__ import annotations

import enum
from dataclasses import dataclass


@dataclass(frozen=True)
class LaunchSpec:
    """Executable plus base arguments used to start one browser console."""

    executable: str
    args: tuple[str, ...] = ()

    def argv(self, url: str) -> list[str]:
        """Return the full command line with *url* as the final argument."""
        return [self.executable, *self.args, url]


class RouterState(str, enum.Enum):
    IDLE = "idle"
    RUNNING = "running"
    STOPPED = "stopped"
