"""Click-based CLI for marketsync."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional

import click
import yaml
from pydantic import ValidationError
from rich.markup import escape

from marketsync import __version__
from marketsync.codes import describe_code
from marketsync.config import (
    ensure_config_exists,
    get_config_path,
    load_config,
    load_or_default,
    validate_config_file,
)
from marketsync.importer import InventoryImporter
from marketsync.logger import MarketLogger
from marketsync.output import create_console
from marketsync.remote import DeferredRemoteClient, RemoteRequest, RemoteResponse
from marketsync.sync import SyncEngine

console = create_console()
logger = MarketLogger(console.rich)


@click.group()
@click.version_option(version=__version__, prog_name="marketsync")
def cli() -> None:
    """marketsync - marketplace listings synchronization.

    Client-side cache of marketplace listings keyed by inventory folder,
    plus the bulk inventory import status machine.
    """
    pass


@cli.command()
def codes() -> None:
    """Show the numeric status and error codes of the marketplace APIs."""
    console.print_codes()


@cli.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--verbose", "-v", is_flag=True, help="Show edit URLs and every applied reply")
def inspect(file: Path, verbose: bool) -> None:
    """Load a saved listings reply and show the resulting cache.

    FILE is a YAML or JSON body of the get-all-listings route, i.e. a
    mapping with a "listings" list. It is replayed through a bulk refresh
    exactly as a live reply would be.
    """
    try:
        body = yaml.safe_load(file.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        logger.error(f"Cannot parse {file}: {e}")
        raise SystemExit(1)

    config = load_or_default()
    failures: list[int] = []

    def replay(request: RemoteRequest) -> RemoteResponse:
        return RemoteResponse(status=200, body=body if isinstance(body, dict) else {"listings": body})

    client = DeferredRemoteClient(replay)
    engine = SyncEngine(client, config, logger=MarketLogger(console.rich, verbose=verbose))
    engine.signals.status_report.connect(lambda code, _body: failures.append(code))

    engine.get_slm_listings()
    client.dispatch()

    if failures:
        for code in failures:
            logger.error(f"Reply rejected: {code} ({describe_code(code)})")
        raise SystemExit(1)

    out = create_console(verbose=verbose, colored=config.output.colored)
    out.print_listings(engine)
    engine.close()


@cli.command("import-replay")
@click.argument("codes", nargs=-1, required=True, type=int)
@click.option("--verbose", "-v", is_flag=True, help="Show every issued call")
def import_replay(codes: tuple[int, ...], verbose: bool) -> None:
    """Replay import API status codes and show the importer state.

    The first code answers the merchant probe, the second the import
    request and every further code one status poll.

    \b
    Examples:
      marketsync import-replay 200 202 202 200
      marketsync import-replay 503
    """
    config = load_or_default()
    replies = list(codes)
    ticks = [0.0]

    def replay(request: RemoteRequest) -> RemoteResponse:
        return RemoteResponse(status=replies.pop(0))

    client = DeferredRemoteClient(replay)
    importer = InventoryImporter(
        client,
        config,
        auto_trigger_import=True,
        clock=lambda: ticks[0],
        logger=MarketLogger(console.rich, verbose=verbose),
    )

    importer.initialize()
    while replies and client.queued:
        client.dispatch(limit=1)
        if not client.queued:
            # Step well past the interval so float rounding never delays a poll
            ticks[0] += 2 * config.importer.poll_interval
            importer.update()

    if replies:
        logger.warning(f"{len(replies)} code(s) not used: {' '.join(str(c) for c in replies)}")

    out = create_console(verbose=verbose, colored=config.output.colored)
    out.print_import_status(importer)
    importer.close()


# ============================================================================
# Configuration Commands
# ============================================================================


@cli.group()
def config() -> None:
    """Configuration file commands.

    \b
    Default location: ~/.config/marketsync/config.yaml
    Override with the MARKETSYNC_CONFIG environment variable.
    """
    pass


@config.command("init")
@click.option("--force", "-f", is_flag=True, help="Overwrite an existing configuration file")
def config_init(force: bool) -> None:
    """Create the default configuration file."""
    config_path, created = ensure_config_exists(force=force)
    if created:
        logger.success(f"Created configuration: {config_path}")
    else:
        logger.info(f"Configuration already exists: {config_path}")


@config.command("path")
def config_path() -> None:
    """Show the configuration file location."""
    click.echo(str(get_config_path()))


@config.command("show")
def config_show() -> None:
    """Show the effective configuration."""
    path = get_config_path()
    try:
        cfg = load_config(path)
    except (FileNotFoundError, ValidationError, yaml.YAMLError) as e:
        logger.error(str(e))
        raise SystemExit(1)

    console.print_config_summary(str(path), cfg)
    data: dict[str, Any] = cfg.model_dump(mode="json")
    click.echo(yaml.dump(data, default_flow_style=False, sort_keys=False))


@config.command("validate")
@click.argument("file", required=False, type=click.Path(path_type=Path))
def config_validate(file: Optional[Path]) -> None:
    """Validate a configuration file."""
    valid, errors = validate_config_file(file)
    target = file or get_config_path()
    if valid:
        logger.success(f"Configuration is valid: {target}")
        return

    logger.error(f"Configuration is invalid: {target}")
    for error in errors:
        console.print(f"  • {escape(error)}")
    raise SystemExit(1)


if __name__ == "__main__":
    cli()
