"""Custom exception hierarchy for headlesschrome."""


class HeadlessChromeError(Exception):
    """Base exception for all headlesschrome errors."""


class StartupError(HeadlessChromeError):
    """Raised when the browser process cannot be spawned."""


class SessionClosedError(HeadlessChromeError):
    """Raised when writing to a session whose console has been shut down."""
