# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Typer CLI application root.

Every command opens the store described by the ``TTLSTORE_*``
environment (or ``.env``), runs one operation and closes it again.  The
background collector is not started; use ``ttlstore gc`` for a sweep.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from typing import Annotated, TypeVar

import typer
from pydantic import ValidationError

from ttlstore.core.config import Settings, get_settings
from ttlstore.core.exceptions import KeyNotFoundError, TTLStoreError
from ttlstore.core.logging import setup_logging
from ttlstore.expiry import Lifetime
from ttlstore.store import KVStore

T = TypeVar("T")

app = typer.Typer(
    name="ttlstore",
    help="Expiring key-value storage on SQLite or PostgreSQL",
    no_args_is_help=True,
)


def _cli_settings() -> Settings:
    settings = get_settings()
    return settings.model_copy(update={"gc_interval": 0.0})


def _run(op: Callable[[KVStore], Awaitable[T]]) -> T:
    """Open the configured store, apply *op* and close it."""
    try:
        settings = _cli_settings()
    except ValidationError as exc:
        typer.echo(f"Error: invalid TTLSTORE_* configuration: {exc}", err=True)
        raise typer.Exit(1) from exc
    setup_logging(settings.log_level, settings.log_format)

    async def _main() -> T:
        async with await KVStore.open(settings) as store:
            return await op(store)

    try:
        return asyncio.run(_main())
    except KeyNotFoundError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(1) from exc
    except (TTLStoreError, ValueError) as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(1) from exc


def _show(value: bytes) -> str:
    return value.decode("utf-8", errors="backslashreplace")


@app.command()
def get(key: Annotated[str, typer.Argument(help="Key to read")]) -> None:
    """Print the value stored under KEY."""
    value = _run(lambda store: store.get(key))
    typer.echo(_show(value))


@app.command(name="set")
def set_(
    key: Annotated[str, typer.Argument(help="Key to write")],
    value: Annotated[str, typer.Argument(help="Value (stored UTF-8 encoded)")],
    ttl: Annotated[
        float | None,
        typer.Option("--ttl", "-t", help="Seconds until expiry; 0 never expires"),
    ] = None,
) -> None:
    """Store VALUE under KEY."""
    _run(lambda store: store.set(key, value, ttl))
    typer.echo(f"Stored {key}")


@app.command()
def delete(key: Annotated[str, typer.Argument(help="Key to delete")]) -> None:
    """Delete KEY (no error if it does not exist)."""
    _run(lambda store: store.delete(key))
    typer.echo(f"Deleted {key}")


@app.command()
def ttl(key: Annotated[str, typer.Argument(help="Key to inspect")]) -> None:
    """Print the seconds until KEY expires."""
    left = _run(lambda store: store.get_ttl(key))
    if left is Lifetime.NEVER_EXPIRES:
        typer.echo("never expires")
    else:
        typer.echo(f"{left:.0f}s")


@app.command()
def expire(
    key: Annotated[str, typer.Argument(help="Key to update")],
    seconds: Annotated[float, typer.Argument(help="New TTL in seconds; 0 never expires")],
) -> None:
    """Replace the expiry of a live KEY, keeping its value."""
    _run(lambda store: store.set_ttl(key, seconds))
    typer.echo(f"Updated expiry of {key}")


@app.command()
def count() -> None:
    """Print the number of stored rows (including expired, uncollected rows)."""
    typer.echo(str(_run(lambda store: store.count())))


@app.command(name="list")
def list_() -> None:
    """List all live entries."""
    from rich.console import Console
    from rich.table import Table

    entries = _run(lambda store: store.get_all())

    console = Console()
    if not entries:
        console.print("[dim]No live entries.[/dim]")
        return

    table = Table(title="Live Entries")
    table.add_column("Key", style="bold")
    table.add_column("Value")
    for key in sorted(entries):
        table.add_row(key, _show(entries[key]))
    console.print(table)


@app.command()
def gc() -> None:
    """Delete expired rows now."""
    removed = _run(lambda store: store.sweep())
    if removed < 0:
        typer.echo("Expired rows removed.")
    else:
        typer.echo(f"Removed {removed} expired rows.")


@app.command()
def reset(
    yes: Annotated[
        bool, typer.Option("--yes", "-y", help="Confirm irreversible deletion")
    ] = False,
) -> None:
    """Delete every entry in the table."""
    if not yes:
        typer.echo("Refusing to reset without --yes.", err=True)
        raise typer.Exit(1)
    _run(lambda store: store.reset())
    typer.echo("Store reset.")
