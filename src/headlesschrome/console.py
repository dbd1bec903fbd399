"""Rich-powered console output."""

from __future__ import annotations

from rich.console import Console
from rich.panel import Panel

from headlesschrome.session import ChromeSession

_console = Console()


def print_banner(url: str) -> None:
    """Display the startup banner."""
    _console.print(
        Panel.fit(
            f"[bold cyan]headlesschrome[/bold cyan]  {url}\n"
            '[dim]Type a JavaScript expression, or "quit" to exit.[/dim]',
            border_style="cyan",
        )
    )


def print_line(line: str) -> None:
    """Print one line of console output verbatim."""
    _console.print(line, markup=False, highlight=False)


async def print_output(session: ChromeSession) -> None:
    """Print every filtered line from *session* until its output ends."""
    async for line in session.lines():
        print_line(line)
