"""Pydantic-based settings loaded from YAML with env-var overrides."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


_PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent

DEFAULT_CHROME_PATH = "/Applications/Google Chrome.app/Contents/MacOS/Google Chrome"


def _default_args() -> list[str]:
    return [
        "--headless",
        "--disable-gpu",
        "--repl",
    ]


class ChromeSettings(BaseSettings):
    """Launch and session configuration for one headless Chrome console.

    Env vars are prefixed with ``HEADLESSCHROME_``.
    Example: ``HEADLESSCHROME_DEBUG=true``
    """

    model_config = {"env_prefix": "HEADLESSCHROME_"}

    # --- diagnostics ---
    debug: bool = False  # log every command before it is written

    # --- process ---
    chrome_path: str = DEFAULT_CHROME_PATH
    args: list[str] = Field(default_factory=_default_args)

    # --- session ---
    output_capacity: int = 5000  # filtered lines buffered before the router blocks
    handshake_timeout: float | None = None  # seconds; None waits for the greeting forever
    url: str = "about:blank"  # start page for ``python -m headlesschrome``

    @field_validator("chrome_path")
    @classmethod
    def _strip_path(cls, v: str) -> str:
        return v.strip()

    @field_validator("output_capacity")
    @classmethod
    def _positive_capacity(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("output_capacity must be greater than zero")
        return v

    # ---- factory ----

    @classmethod
    def from_yaml(cls, path: str | Path | None = None) -> "ChromeSettings":
        """Load settings from a YAML file, then overlay env vars.

        Env vars (``HEADLESSCHROME_*``) take priority over YAML values.
        """
        import os

        if path is None:
            path = _PROJECT_ROOT / "settings.yaml"
        path = Path(path)
        raw: dict[str, Any] = {}
        if path.exists():
            with open(path) as fh:
                raw = yaml.safe_load(fh) or {}

        prefix = "HEADLESSCHROME_"
        for key in list(raw.keys()):
            env_key = f"{prefix}{key.upper()}"
            if env_key in os.environ:
                del raw[key]

        return cls(**raw)
