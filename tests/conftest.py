"""Shared test fixtures."""

from __future__ import annotations

import asyncio
import sys
import threading
from pathlib import Path

import pytest

from headlesschrome.session import EXPECTED_FIRST_LINE
from headlesschrome.settings import ChromeSettings

FAKE_REPL = Path(__file__).parent / "fake_repl.py"


class FakeProcess:
    """In-memory InteractiveProcess that records everything written to it."""

    def __init__(self, lines=(), *, eof: bool = True) -> None:
        self.raw_output: asyncio.Queue = asyncio.Queue()
        for line in lines:
            self.raw_output.put_nowait(line)
        if eof:
            self.raw_output.put_nowait(None)
        self.writes: list[str] = []
        self.exited = False
        self.killed = False

    @property
    def pid(self):
        return 4242

    async def write(self, line: str) -> None:
        self.writes.append(line)

    async def exit(self) -> None:
        self.exited = True

    async def force_close(self) -> None:
        self.killed = True

    async def wait(self) -> int:
        return 0


def make_spawn(process: FakeProcess, calls: list | None = None):
    """Return a spawn callable that hands out *process* and records argv."""

    async def _spawn(argv):
        if calls is not None:
            calls.append(list(argv))
        return process

    return _spawn


@pytest.fixture()
def greeting_process():
    return FakeProcess([EXPECTED_FIRST_LINE], eof=False)


@pytest.fixture()
def fake_repl_settings():
    """Settings that launch the Python REPL stand-in instead of Chrome."""
    return ChromeSettings(chrome_path=sys.executable, args=[str(FAKE_REPL)])


@pytest.fixture()
def tmp_settings_yaml(tmp_path):
    """Write a minimal settings.yaml and return its path."""
    content = """\
debug: true
chrome_path: "  /usr/bin/chromium  "
args:
  - "--headless"
  - "--repl"
output_capacity: 100
handshake_timeout: 2.5
url: "https://example.com"
"""
    p = tmp_path / "settings.yaml"
    p.write_text(content)
    return p


def run_with_deadline(coro_fn, timeout: float = 30.0):
    """Run ``asyncio.run(coro_fn())`` on a worker thread and fail if it hangs.

    Covers loop teardown as well as the coroutine itself.
    """
    outcome: dict = {}

    def _target():
        try:
            outcome["result"] = asyncio.run(coro_fn())
        except BaseException as exc:  # re-raised on the test thread
            outcome["error"] = exc

    worker = threading.Thread(target=_target, daemon=True)
    worker.start()
    worker.join(timeout)
    assert not worker.is_alive(), f"asyncio.run did not return within {timeout}s"
    if "error" in outcome:
        raise outcome["error"]
    return outcome.get("result")
