"""User-facing progress output."""

from collections.abc import Iterator
from contextlib import contextmanager

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel

from cutrelease.exceptions import ReleaseError


class Reporter:
    """Prints progress, warnings and errors for one release invocation.

    Every step prints a progress line before it runs and an error line if it
    fails. Errors are never swallowed here; they propagate to the caller.
    """

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()

    def progress(self, message: str) -> None:
        self.console.print(f"\n[bold cyan]>[/bold cyan] {escape(message)}...")

    def info(self, message: str) -> None:
        self.console.print(f"  {escape(message)}")

    def success(self, message: str) -> None:
        self.console.print(f"[green]  {escape(message)}[/green]")

    def warn(self, message: str) -> None:
        self.console.print(f"[yellow]  Warning: {escape(message)}[/yellow]")

    def error(self, error: BaseException | str) -> None:
        self.console.print(f"[red]  Error: {escape(_headline(error))}[/red]")
        details = getattr(error, "details", None)
        if details:
            self.console.print(f"[dim]  {escape(details)}[/dim]")

    @contextmanager
    def step(self, message: str) -> Iterator[None]:
        """Print a progress line, run the body, print an error line on failure."""
        self.progress(message)
        try:
            yield
        except ReleaseError as e:
            self.error(e)
            raise

    def panel(self, body: str, title: str | None = None, style: str = "cyan") -> None:
        self.console.print(Panel(body, title=title, border_style=style))


def _headline(error: BaseException | str) -> str:
    if isinstance(error, ReleaseError):
        return error.message
    return str(error)
