"""CLI entry point for savestate."""

from __future__ import annotations

import logging
from collections.abc import Generator
from contextlib import contextmanager
from datetime import UTC, datetime
from pathlib import Path

import click
from pydantic import ValidationError

from savestate.core.constants import (
    DEFAULT_IDENTITY_VAR,
    DEFAULT_LIVE_TEMPLATE,
    SNAPSHOT_ROOT_DIRNAME,
    STATUS_FILENAME,
)
from savestate.core.errors import SaveStateError
from savestate.core.models import Snapshot

logger = logging.getLogger(__name__)


def _get_engine(ctx: click.Context):
    """Construct the profile context and snapshot engine from CLI options."""
    from savestate.core.services.profile import ProfileContext
    from savestate.core.services.snapshots import SnapshotEngine
    from savestate.storage.paths import PathResolver

    home = Path(ctx.obj["home"])
    context = ProfileContext.load(home / STATUS_FILENAME)
    resolver = PathResolver(ctx.obj["live_template"], ctx.obj["identity_var"])
    return context, SnapshotEngine(context, resolver, home / SNAPSHOT_ROOT_DIRNAME)


@contextmanager
def _reported_errors() -> Generator[None, None, None]:
    """Turn expected failures into an error message and exit status 1."""
    try:
        yield
    except (SaveStateError, OSError, ValueError) as exc:
        logger.debug("Command failed", exc_info=True)
        message = exc.errors()[0]["msg"] if isinstance(exc, ValidationError) else str(exc)
        click.echo(f"Error: {message}", err=True)
        raise SystemExit(1) from None


@click.group()
@click.option(
    "--home",
    default=".",
    envvar="SAVESTATE_HOME",
    type=click.Path(file_okay=False),
    help="Directory holding status.json and the saves/ snapshot store.",
)
@click.option(
    "--live-template",
    default=DEFAULT_LIVE_TEMPLATE,
    envvar="SAVESTATE_LIVE_TEMPLATE",
    help="Path of the game's profile directory; $USERNAME is substituted.",
)
@click.option(
    "--identity-var",
    default=DEFAULT_IDENTITY_VAR,
    envvar="SAVESTATE_IDENTITY_VAR",
    help="Environment variable holding the current user name.",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
@click.pass_context
def cli(
    ctx: click.Context,
    home: str,
    live_template: str,
    identity_var: str,
    verbose: bool,
) -> None:
    """savestate -- capture and restore game save snapshots."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    ctx.ensure_object(dict)
    ctx.obj["home"] = home
    ctx.obj["live_template"] = live_template
    ctx.obj["identity_var"] = identity_var


# ── Profiles ──────────────────────────────────────────────────────────


@cli.group()
def profile() -> None:
    """Show or change the active profile."""


@profile.command(name="show")
@click.pass_context
def profile_show(ctx: click.Context) -> None:
    """Print the active profile."""
    with _reported_errors():
        context, _engine = _get_engine(ctx)
        click.echo(context.current())


@profile.command(name="set")
@click.argument("name")
@click.pass_context
def profile_set(ctx: click.Context, name: str) -> None:
    """Make NAME the active profile."""
    with _reported_errors():
        context, _engine = _get_engine(ctx)
        context.set_active(name)
        click.echo(f"Active profile: {name}")


@profile.command(name="list")
@click.pass_context
def profile_list(ctx: click.Context) -> None:
    """List the profiles found in the game's save location."""
    with _reported_errors():
        context, engine = _get_engine(ctx)
        active = context.current()
        names = engine.list_profiles()
        if not names:
            click.echo("No profiles found.")
        for name in names:
            marker = "*" if name == active else " "
            click.echo(f"{marker} {name}")


# ── Snapshots ─────────────────────────────────────────────────────────


@cli.command(name="list")
@click.pass_context
def list_cmd(ctx: click.Context) -> None:
    """List snapshots of the active profile."""
    with _reported_errors():
        context, engine = _get_engine(ctx)
        snapshots = engine.list_snapshots()
        if not snapshots:
            click.echo(f"No snapshots for profile {context.current()}.")
            return
        for snap in snapshots:
            click.echo(f"[{snap.index}] {snap.name}  {snap.date}")


@cli.command()
@click.pass_context
def current(ctx: click.Context) -> None:
    """Show the index of the snapshot the live save came from."""
    with _reported_errors():
        _context, engine = _get_engine(ctx)
        index = engine.current_snapshot_index()
        click.echo("none" if index is None else str(index))


@cli.command()
@click.argument("name")
@click.option("--index", "-i", type=click.IntRange(min=0), default=None, help="Snapshot ordinal.")
@click.option("--date", "-d", default=None, help="Label stored with the snapshot (default: now).")
@click.pass_context
def capture(ctx: click.Context, name: str, index: int | None, date: str | None) -> None:
    """Capture the live save of the active profile as NAME."""
    with _reported_errors():
        _context, engine = _get_engine(ctx)
        if index is None:
            existing = engine.list_snapshots()
            index = max((s.index for s in existing), default=-1) + 1
        if date is None:
            date = datetime.now(UTC).strftime("%Y-%m-%d %H:%M:%S")
        snap = Snapshot(index=index, name=name, date=date)
        path = engine.capture(snap)
        click.echo(f"Snapshot saved: {path}")


@cli.command()
@click.argument("name")
@click.pass_context
def restore(ctx: click.Context, name: str) -> None:
    """Restore snapshot NAME over the live save."""
    with _reported_errors():
        _context, engine = _get_engine(ctx)
        snap = next((s for s in engine.list_snapshots() if s.name == name), None)
        if snap is None:
            click.echo(f"Snapshot not found: {name}", err=True)
            raise SystemExit(1)
        engine.restore(snap)
        click.echo(f"Restored snapshot: {name}")


@cli.command()
@click.argument("name")
@click.pass_context
def delete(ctx: click.Context, name: str) -> None:
    """Delete snapshot NAME (no error if it does not exist)."""
    with _reported_errors():
        _context, engine = _get_engine(ctx)
        engine.delete(name)
        click.echo(f"Deleted snapshot: {name}")


if __name__ == "__main__":
    cli()
