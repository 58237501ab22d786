# Tests for marketsync.output.console
# Rich-based console output

import uuid
from io import StringIO

from rich.console import Console as RichConsole

from conftest import listing_reply
from marketsync.importer import InventoryImporter
from marketsync.output.console import Console, create_console


def _make_console(verbose: bool = False) -> Console:
    """Create a console with captured output."""
    console = Console(verbose=verbose, colored=False)
    console._console = RichConsole(file=StringIO(), no_color=True, width=200)
    return console


def _get_output(console: Console) -> str:
    """Get captured output from console."""
    console._console.file.seek(0)
    return console._console.file.read()


class TestConsoleBasic:
    """Tests for basic console methods."""

    def test_print(self):
        c = _make_console()
        c.print("hello world")
        assert "hello world" in _get_output(c)

    def test_print_markup(self):
        c = _make_console()
        c.print("[bold]hello[/bold]")
        assert "hello" in _get_output(c)
        assert "[bold]" not in _get_output(c)


class TestConsoleListings:
    """Tests for the listings table."""

    def test_print_empty(self, engine):
        c = _make_console()
        c.print_listings(engine)
        assert "No listings" in _get_output(c)

    def test_print_listings(self, engine, make_listing):
        version = uuid.uuid4()
        active = make_listing(listing_id=7, version_id=version, is_listed=True)
        make_listing(listing_id=8)

        c = _make_console()
        c.print_listings(engine)
        output = _get_output(c)

        assert "Marketplace Listings" in output
        assert str(active) in output
        assert str(version) in output
        assert "2 listings, 1 active" in output
        assert "Edit URL" not in output

    def test_pending_folder_marked(self, engine, client, make_listing):
        folder = make_listing()
        engine.get_listing(folder)

        c = _make_console()
        c.print_listings(engine)
        assert "(updating)" in _get_output(c)

        client.respond(200, listing_reply(folder, 42))
        c = _make_console()
        c.print_listings(engine)
        assert "(updating)" not in _get_output(c)

    def test_verbose_shows_edit_url(self, engine, client):
        folder = uuid.uuid4()
        engine.create_listing(folder)
        client.respond(201, listing_reply(folder, 42, edit_url="https://m.example.com/e/42"))

        c = _make_console(verbose=True)
        c.print_listings(engine)
        output = _get_output(c)

        assert "Edit URL" in output
        assert "https://m.example.com/e/42" in output


class TestConsoleImportStatus:
    """Tests for the importer panel."""

    def test_print_import_status(self, client, quiet_logger):
        importer = InventoryImporter(client, logger=quiet_logger)
        importer.initialize()
        client.respond(200)
        importer.trigger_import()

        c = _make_console()
        c.print_import_status(importer)
        output = _get_output(c)

        assert "Marketplace Import" in output
        assert "merchant (3)" in output
        assert "Initialized: yes" in output
        assert "running" in output


class TestConsoleCodes:
    """Tests for the code tables."""

    def test_print_codes(self):
        c = _make_console()
        c.print_codes()
        output = _get_output(c)

        assert "Import Job Codes" in output
        assert "Listing API Codes" in output
        assert "Connection Status" in output
        assert "IMPORT_JOB_TIMEOUT" in output
        assert "SLM_RECORD_CREATED" in output


class TestConsoleConfigSummary:
    """Tests for the configuration summary."""

    def test_defaults(self):
        c = _make_console()
        c.print_config_summary("/tmp/config.yaml")
        output = _get_output(c)

        assert "/tmp/config.yaml" in output
        assert "https://marketplace.secondlife.com/api/1/" in output
        assert "poll every 1s" in output


class TestCreateConsole:
    """Tests for create_console factory."""

    def test_default(self):
        c = create_console()
        assert isinstance(c, Console)
        assert c.verbose is False

    def test_verbose(self):
        c = create_console(verbose=True)
        assert c.verbose is True
