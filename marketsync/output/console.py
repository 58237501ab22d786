# Marketsync Console Output
# Rich-based console output for listings and import status

from collections.abc import Iterable
from enum import Enum
from typing import Optional

from rich.console import Console as RichConsole
from rich.panel import Panel
from rich.table import Table

from marketsync.cache.record import ListingTuple
from marketsync.codes import MarketplaceErrorCode, MarketplaceStatus, SLMErrorCode
from marketsync.config.schema import MarketsyncConfig
from marketsync.importer import InventoryImporter
from marketsync.sync.engine import SyncEngine

_STATUS_STYLES = {
    MarketplaceStatus.NOT_INITIALIZED: "dim",
    MarketplaceStatus.INITIALIZING: "yellow",
    MarketplaceStatus.CONNECTION_FAILURE: "red",
    MarketplaceStatus.MERCHANT: "green",
    MarketplaceStatus.NOT_MERCHANT: "yellow",
}


class Console:
    """
    Console output manager using Rich.

    Provides formatted output for listings and marketplace status.
    """

    def __init__(self, *, verbose: bool = False, colored: bool = True):
        """
        Initialize console.

        Args:
            verbose: Enable verbose output.
            colored: Enable colored output when writing to a terminal.
        """
        self.verbose = verbose
        self._console = RichConsole(no_color=not colored)

    @property
    def rich(self) -> RichConsole:
        return self._console

    def print(self, *args, **kwargs) -> None:
        """Print to console."""
        self._console.print(*args, **kwargs)

    def print_listings(self, engine: SyncEngine) -> None:
        """
        Print every cached listing.

        Args:
            engine: Engine whose cache is displayed.
        """
        records = sorted(engine.listings(), key=lambda r: (r.listing_id is None, r.listing_id or 0))
        if not records:
            self._console.print("[dim]No listings[/dim]")
            return

        self._console.print(self._listings_table(records, engine.pending_folders()))
        active = sum(1 for r in records if r.is_active)
        self._console.print(f"{len(records)} listings, [green]{active} active[/green]")

    def _listings_table(self, records: Iterable[ListingTuple], pending: frozenset) -> Table:
        table = Table(title="Marketplace Listings", show_header=True, header_style="bold")
        table.add_column("Listing", justify="right", style="cyan")
        table.add_column("Listing Folder")
        table.add_column("Version Folder")
        table.add_column("Active", justify="center")
        if self.verbose:
            table.add_column("Edit URL", style="dim")

        for record in records:
            listing = str(record.listing_id) if record.listing_id is not None else "[dim]-[/dim]"
            folder = str(record.listing_folder_id)
            if record.listing_folder_id in pending:
                folder += " [yellow](updating)[/yellow]"
            version = str(record.version_folder_id) if record.version_folder_id else "[dim]none[/dim]"
            active = "[green]✓[/green]" if record.is_active else "[dim]○[/dim]"
            row = [listing, folder, version, active]
            if self.verbose:
                row.append(record.edit_url or "")
            table.add_row(*row)
        return table

    def print_import_status(self, importer: InventoryImporter) -> None:
        """Print the importer state machine as a panel."""
        status = importer.marketplace_status
        style = _STATUS_STYLES.get(status, "white")
        running = "[yellow]running[/yellow]" if importer.is_import_in_progress else "idle"
        self._console.print(
            Panel(
                f"Status: [{style}]{status.label}[/{style}] ({status.value})\n"
                f"Initialized: {'yes' if importer.is_initialized else 'no'}\n"
                f"Import: {running}",
                title="Marketplace Import",
                border_style=style,
            )
        )

    def print_codes(self) -> None:
        """Print the numeric code tables."""
        tables: list[tuple[str, type[Enum]]] = [
            ("Import Job Codes", MarketplaceErrorCode),
            ("Listing API Codes", SLMErrorCode),
            ("Connection Status", MarketplaceStatus),
        ]
        for title, codes in tables:
            table = Table(title=title, show_header=True, header_style="bold")
            table.add_column("Code", justify="right", style="cyan")
            table.add_column("Name")
            for code in codes:
                table.add_row(str(code.value), code.name)
            self._console.print(table)

    def print_config_summary(self, config_path: str, config: Optional[MarketsyncConfig] = None) -> None:
        """Print configuration summary."""
        config = config or MarketsyncConfig()
        self._console.print(
            Panel(
                f"Config: {config_path}\n"
                f"Listings API: {config.remote.base_url}\n"
                f"Import API: {config.remote.import_url}\n"
                f"Auto import: {'yes' if config.importer.auto_trigger_import else 'no'}, "
                f"poll every {config.importer.poll_interval:g}s",
                title="Marketsync Configuration",
                border_style="blue",
            )
        )


def create_console(*, verbose: bool = False, colored: bool = True) -> Console:
    """
    Create a console instance.

    Args:
        verbose: Enable verbose output.
        colored: Enable colored output.

    Returns:
        Console instance.
    """
    return Console(verbose=verbose, colored=colored)
