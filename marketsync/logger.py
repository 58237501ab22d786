"""Rich console logging for marketplace synchronization."""

from typing import Optional

from rich.console import Console
from rich.markup import escape

from marketsync.codes import describe_code


class MarketLogger:
    """Rich console output for sync and import events."""

    def __init__(self, console: Optional[Console] = None, verbose: bool = False):
        """Initialize logger.

        Args:
            console: Rich Console instance, defaults to one writing to stderr
            verbose: Enable verbose output
        """
        self.console = console or Console(stderr=True)
        self.verbose = verbose

    def info(self, message: str) -> None:
        """Blue info message."""
        self.console.print(f"[blue]ℹ[/blue] {escape(message)}")

    def success(self, message: str) -> None:
        """Green success message."""
        self.console.print(f"[green]✓[/green] {escape(message)}")

    def warning(self, message: str) -> None:
        """Yellow warning message."""
        self.console.print(f"[yellow]⚠[/yellow] {escape(message)}")

    def error(self, message: str) -> None:
        """Red error message."""
        self.console.print(f"[red]✗[/red] {escape(message)}")

    def detail(self, message: str) -> None:
        """Dim message, shown only in verbose mode."""
        if self.verbose:
            self.console.print(f"[dim]  {escape(message)}[/dim]")

    def remote_failure(self, operation: str, code: int, reason: str = "") -> None:
        """Warn about a failed remote call."""
        text = f"{operation} failed: {code} ({describe_code(code)})"
        if reason:
            text += f" - {reason}"
        self.warning(text)
