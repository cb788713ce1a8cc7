"""
CLI commands for kvhttp.

Uses click for command-line argument parsing. Reads run in a snapshot that is
discarded afterwards; writes run in a transaction that is committed.
"""

import asyncio
import logging
import sys
from collections.abc import Awaitable, Callable, Coroutine
from pathlib import Path
from typing import Any, TypeVar

import click

from ..config import DEFAULT_TIMEOUT, DEFAULT_URL
from ..cursor import Cursor
from ..database import Database
from ..exceptions import KVHTTPError
from ..session import Snapshot

T = TypeVar("T")


def run_async(coro: Coroutine[Any, Any, T]) -> T:
    """Run an async coroutine synchronously."""
    return asyncio.run(coro)


def _show(data: bytes) -> str:
    return data.decode("utf-8", errors="backslashreplace")


def _database(ctx: click.Context) -> Database:
    return Database(ctx.obj["url"], ctx.obj.get("client"), timeout=ctx.obj["timeout"])


def _run(ctx: click.Context, action: Callable[[Database], Awaitable[T]]) -> T:
    async def run() -> T:
        async with _database(ctx) as db:
            return await action(db)

    try:
        return run_async(run())
    except KVHTTPError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    except ValueError as e:
        click.echo(f"Invalid configuration: {e}", err=True)
        sys.exit(1)


def _print_cursor(ctx: click.Context, open_cursor: Callable[[Snapshot], Cursor], limit: int | None) -> None:
    async def action(db: Database) -> None:
        if limit == 0:
            return
        async with db.snapshot() as snap:
            count = 0
            async for key, value in open_cursor(snap):
                click.echo(f"{_show(key)}\t{_show(value)}")
                count += 1
                if limit is not None and count >= limit:
                    break

    _run(ctx, action)


@click.group()
@click.option(
    "--url",
    "-u",
    envvar="KVHTTP_URL",
    default=DEFAULT_URL,
    show_default=True,
    help="Key-value server base URL",
)
@click.option(
    "--timeout",
    "-t",
    envvar="KVHTTP_TIMEOUT",
    type=click.FloatRange(min=0, min_open=True),
    default=DEFAULT_TIMEOUT,
    show_default=True,
    help="Request timeout in seconds",
)
@click.option("--verbose", "-v", is_flag=True, help="Log every request")
@click.pass_context
def cli(ctx: click.Context, url: str, timeout: float, verbose: bool) -> None:
    """Command line client for an HTTP key-value store."""
    ctx.ensure_object(dict)
    ctx.obj["url"] = url
    ctx.obj["timeout"] = timeout
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")


@cli.command()
@click.argument("key")
@click.pass_context
def get(ctx: click.Context, key: str) -> None:
    """Print the value stored under KEY."""

    async def action(db: Database) -> bytes:
        async with db.snapshot() as snap:
            return await snap.get(key)

    click.echo(_show(_run(ctx, action)))


@cli.command("set")
@click.argument("key")
@click.argument("value", required=False)
@click.option(
    "--file",
    "-f",
    "file_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Read the value from a file",
)
@click.pass_context
def set_(ctx: click.Context, key: str, value: str | None, file_path: Path | None) -> None:
    """Store VALUE (or the contents of --file) under KEY."""
    if (value is None) == (file_path is None):
        click.echo("Error: give exactly one of VALUE or --file", err=True)
        sys.exit(2)

    async def action(db: Database) -> None:
        async with db.transaction() as tx:
            if file_path is not None:
                with file_path.open("rb") as f:
                    await tx.set(key, f)
            else:
                await tx.set(key, value)

    _run(ctx, action)
    click.echo(f"Stored {key}")


@cli.command()
@click.argument("key")
@click.pass_context
def delete(ctx: click.Context, key: str) -> None:
    """Remove KEY."""

    async def action(db: Database) -> None:
        async with db.transaction() as tx:
            await tx.delete(key)

    _run(ctx, action)
    click.echo(f"Deleted {key}")


@cli.command()
@click.argument("begin", default="")
@click.argument("end", default="")
@click.option("--limit", "-n", type=click.IntRange(min=0), help="Stop after N entries")
@click.pass_context
def ascend(ctx: click.Context, begin: str, end: str, limit: int | None) -> None:
    """List entries in [BEGIN, END) in increasing key order."""
    _print_cursor(ctx, lambda snap: snap.ascend(begin, end), limit)


@cli.command()
@click.argument("begin", default="")
@click.argument("end", default="")
@click.option("--limit", "-n", type=click.IntRange(min=0), help="Stop after N entries")
@click.pass_context
def descend(ctx: click.Context, begin: str, end: str, limit: int | None) -> None:
    """List entries in [BEGIN, END) in decreasing key order."""
    _print_cursor(ctx, lambda snap: snap.descend(begin, end), limit)


@cli.command()
@click.option("--limit", "-n", type=click.IntRange(min=0), help="Stop after N entries")
@click.pass_context
def scan(ctx: click.Context, limit: int | None) -> None:
    """List every entry in the server's order."""
    _print_cursor(ctx, lambda snap: snap.scan(), limit)


def main() -> None:
    """Entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
