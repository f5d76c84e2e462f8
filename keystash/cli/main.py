"""
keystash CLI entry point.

Commands:
    keystash set KEY VALUE     — Store a JSON value (or a plain string with -s)
    keystash get KEY           — Print a stored value
    keystash delete KEY        — Remove a key
    keystash keys [-p PREFIX]  — List keys
    keystash config            — Show effective configuration
    keystash version           — Show version

The CLI always works against the durable SQLite backend; --db picks the
file, otherwise storage.path from the configuration is used.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterator

import typer
from pydantic_core import from_json
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel

from keystash.core.config import KeystashConfig
from keystash.core.errors import KeystashError
from keystash.core.logging import setup_logging
from keystash.store.factory import open_storage
from keystash.store.storage import Storage

app = typer.Typer(
    name="keystash",
    help="keystash — a small key-value store with pluggable backends and encoders.",
    add_completion=False,
)

console = Console()


@app.callback()
def main(
    ctx: typer.Context,
    db: Path = typer.Option(None, "--db", help="SQLite database file"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug output"),
) -> None:
    """Load configuration shared by all commands."""
    overrides: dict[str, Any] = {"storage": {"memory": "sqlite"}}
    if db is not None:
        overrides["storage"]["path"] = str(db)

    try:
        config = KeystashConfig.load(overrides=overrides)
    except KeystashError as e:
        console.print(f"[red]{escape(e.message)}[/red]")
        raise typer.Exit(1)

    log_dir = Path(config.logging.log_dir) if config.logging.log_dir else None
    setup_logging(
        log_dir=log_dir,
        console_level=logging.DEBUG if verbose else config.logging.level,
    )
    ctx.obj = config


@contextmanager
def _storage(ctx: typer.Context) -> Iterator[Storage]:
    """Open the configured storage, report library errors, always close."""
    storage: Storage | None = None
    try:
        storage = open_storage(ctx.obj)
        yield storage
    except KeystashError as e:
        console.print(f"[red]Error:[/red] {escape(e.message)}")
        raise typer.Exit(1)
    finally:
        if storage is not None:
            storage.close()


@app.command("set")
def set_value(
    ctx: typer.Context,
    key: str = typer.Argument(..., help="Key to write"),
    value: str = typer.Argument(..., help="Value as JSON text"),
    string: bool = typer.Option(False, "--string", "-s", help="Store VALUE as a plain string"),
) -> None:
    """Store a value under KEY."""
    if string:
        parsed: Any = value
    else:
        try:
            parsed = from_json(value)
        except ValueError as e:
            console.print(f"[red]Invalid JSON:[/red] {escape(str(e))}")
            console.print("[dim]Use --string to store plain text[/dim]")
            raise typer.Exit(1)

    with _storage(ctx) as storage:
        storage.set(key, parsed)
    console.print(f"[green]Stored[/green] {escape(key)}")


@app.command("get")
def get_value(
    ctx: typer.Context,
    key: str = typer.Argument(..., help="Key to read"),
) -> None:
    """Print the value stored under KEY."""
    with _storage(ctx) as storage:
        found, value = storage.get(key, Any)

    if not found:
        console.print(f"[yellow]Key not found:[/yellow] {escape(key)}")
        raise typer.Exit(1)
    console.print_json(data=value, default=repr)


@app.command("delete")
def delete_value(
    ctx: typer.Context,
    key: str = typer.Argument(..., help="Key to delete"),
) -> None:
    """Delete KEY."""
    with _storage(ctx) as storage:
        existed = storage.delete(key)

    if not existed:
        console.print(f"[yellow]Key not found:[/yellow] {escape(key)}")
        raise typer.Exit(1)
    console.print(f"[green]Deleted[/green] {escape(key)}")


@app.command("keys")
def list_keys(
    ctx: typer.Context,
    prefix: str = typer.Option(None, "--prefix", "-p", help="Only keys starting with PREFIX (sorted)"),
) -> None:
    """List keys in insertion order, or sorted when filtering by prefix."""
    with _storage(ctx) as storage:
        keys = storage.keys() if prefix is None else storage.keys_with_prefix(prefix)

    if not keys:
        console.print("[dim]No keys.[/dim]")
        return
    for key in keys:
        console.print(escape(key), highlight=False)


@app.command()
def config(ctx: typer.Context) -> None:
    """Show the effective configuration."""
    console.print(Panel("[bold]keystash configuration[/bold]", border_style="cyan"))
    console.print_json(ctx.obj.model_dump_json())


@app.command()
def version() -> None:
    """Show keystash version."""
    from keystash import __version__

    console.print(f"keystash v{__version__}")


if __name__ == "__main__":
    app()
