"""Click command group for larder.

Every command prints a JSON document on stdout; logs go to stderr.
Registry and snapshot failures exit with status 1.
"""

from __future__ import annotations

import asyncio
import json
from collections.abc import Coroutine
from typing import Any, TypeVar

import click

from larder import __version__
from larder.client.errors import LarderError
from larder.client.parse import universe_to_wire
from larder.client.supermarket import SupermarketClient
from larder.config import load_config, validate_endpoint
from larder.diff import diff_to_dict
from larder.models.config import LarderConfig
from larder.models.universe import Package
from larder.notifications import build_notification_dispatcher
from larder.observability.logging import get_logger, setup_logging
from larder.snapshot import SnapshotStore, load_universe
from larder.sync import run_sync

T = TypeVar("T")

_LOG_LEVELS = ["debug", "info", "warning", "error"]


def _echo_json(data: object) -> None:
    click.echo(json.dumps(data, indent=2, sort_keys=True))


def _run(coro: Coroutine[Any, Any, T]) -> T:
    """Run *coro* to completion, turning larder errors into a clean exit 1."""
    try:
        return asyncio.run(coro)
    except LarderError as exc:
        get_logger("cli").error("command_failed", error=str(exc), error_type=type(exc).__name__)
        raise click.ClickException(str(exc)) from exc


def _config(ctx: click.Context) -> LarderConfig:
    return ctx.find_object(LarderConfig)  # type: ignore[return-value]


@click.group()
@click.option("--endpoint", default=None, help="Registry API endpoint (overrides LARDER_ENDPOINT).")
@click.option(
    "--log-level",
    type=click.Choice(_LOG_LEVELS, case_sensitive=False),
    default=None,
    help="Log verbosity (overrides LARDER_LOG_LEVEL).",
)
@click.version_option(__version__, prog_name="larder")
@click.pass_context
def cli(ctx: click.Context, endpoint: str | None, log_level: str | None) -> None:
    """Chef Supermarket client and universe diff tool."""
    try:
        config = load_config()
        if endpoint:
            config.registry.endpoint = validate_endpoint(endpoint)
    except ValueError as exc:
        raise click.UsageError(str(exc)) from exc
    if log_level:
        config.log.level = log_level.lower()
    setup_logging(config.log.level)
    ctx.obj = config


@cli.command()
@click.argument("name")
@click.pass_context
def cookbook(ctx: click.Context, name: str) -> None:
    """Show the registry record of cookbook NAME."""
    config = _config(ctx)

    async def _fetch() -> dict[str, object]:
        async with SupermarketClient(config.registry) as client:
            return (await client.get_cookbook(name)).to_dict()

    _echo_json(_run(_fetch()))


@cli.command()
@click.argument("name")
@click.argument("version")
@click.pass_context
def version(ctx: click.Context, name: str, version: str) -> None:
    """Show VERSION of cookbook NAME."""
    config = _config(ctx)

    async def _fetch() -> dict[str, object]:
        async with SupermarketClient(config.registry) as client:
            return (await client.get_cookbook_version(name, version)).to_dict()

    _echo_json(_run(_fetch()))


@cli.command()
@click.option("--output", "-o", type=click.Path(dir_okay=False), default=None, help="Save as a snapshot file.")
@click.pass_context
def universe(ctx: click.Context, output: str | None) -> None:
    """Fetch the registry universe; print it or save it with --output."""
    config = _config(ctx)

    async def _fetch() -> Any:
        async with SupermarketClient(config.registry) as client:
            return await client.get_universe()

    current = _run(_fetch())
    if output is None:
        _echo_json(universe_to_wire(current))
        return
    try:
        SnapshotStore(output).save(current)
    except LarderError as exc:
        raise click.ClickException(str(exc)) from exc
    _echo_json({"path": output, "packages": len(current.packages)})


@cli.command()
@click.argument("old", type=click.Path(exists=True, dir_okay=False))
@click.argument("new", type=click.Path(exists=True, dir_okay=False))
@click.option("--package", "package_name", default=None, help="Diff a single cookbook instead of the universe.")
def diff(old: str, new: str, package_name: str | None) -> None:
    """Diff two snapshot files, OLD then NEW.

    Prints {"positive": ..., "negative": ...}; a side with no changes is
    omitted, so identical snapshots print {}.
    """
    try:
        before = load_universe(old)
        after = load_universe(new)
    except LarderError as exc:
        raise click.ClickException(str(exc)) from exc

    if package_name is None:
        _echo_json(diff_to_dict(before.diff(after)))
        return

    old_package = before.get(package_name)
    new_package = after.get(package_name)
    if old_package is None and new_package is None:
        raise click.ClickException(f"Cookbook {package_name!r} is in neither snapshot")
    # A cookbook missing on one side diffs against the empty package.
    _echo_json(diff_to_dict((old_package or Package()).diff(new_package or Package())))


@cli.command()
@click.option("--snapshot", "snapshot_path", default=None, help="Snapshot file (overrides LARDER_SNAPSHOT_PATH).")
@click.option("--dry-run", is_flag=True, help="Report changes without notifying or saving.")
@click.pass_context
def sync(ctx: click.Context, snapshot_path: str | None, dry_run: bool) -> None:
    """Diff the live universe against the stored snapshot, notify, then save."""
    config = _config(ctx)
    store = SnapshotStore(snapshot_path or config.snapshot.path)
    dispatcher = build_notification_dispatcher(config.notifications)

    async def _sync() -> Any:
        async with SupermarketClient(config.registry) as client:
            return await run_sync(client, store, dispatcher, dry_run=dry_run)

    result = _run(_sync())
    _echo_json(
        {
            "added": result.summary.added,
            "removed": result.summary.removed,
            "changed": result.summary.changed,
            "first_run": result.first_run,
            "saved": result.saved,
            "notified": result.deliveries,
        }
    )
