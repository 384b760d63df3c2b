"""Command-line entry point for Guildhall."""

from __future__ import annotations

import sys
from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from guildhall import __version__
from guildhall.core.config import get_settings
from guildhall.core.exceptions import GuildhallError
from guildhall.core.logging import configure_logging, get_logger
from guildhall.storage.database import Database

console = Console()
logger = get_logger(__name__)

LOG_LEVELS = click.Choice(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"], case_sensitive=False)


def _open_database(db_path: str | None, log_level: str | None) -> Database:
    settings = get_settings()
    configure_logging(
        level=(log_level or settings.log_level).upper(),
        json_format=settings.json_logs,
        log_file=settings.log_file,
    )
    path: str | Path = db_path or settings.storage.database_path
    db = Database(path, timeout=settings.storage.timeout_seconds)
    db.connect()
    return db


@click.group()
@click.version_option(version=__version__)
def main() -> None:
    """Guildhall - manage RPG characters and guilds."""
    pass


@main.command()
@click.option("--db-path", type=click.Path(dir_okay=False), help="SQLite file (overrides GUILDHALL_DATABASE_PATH)")
@click.option("--log-level", type=LOG_LEVELS, help="Logging level for this run")
def run(db_path: str | None, log_level: str | None) -> None:
    """Start the interactive menu."""
    from guildhall.console.controllers import create_controllers
    from guildhall.console.menu import ConsoleMenu

    try:
        db = _open_database(db_path, log_level)
    except GuildhallError as exc:
        console.print(f"[red]✗[/red] {exc.message}")
        sys.exit(1)

    settings = get_settings()
    console.print(f"[bold]{settings.app_name}[/bold] v{settings.app_version}")
    console.print(f"[dim]Database: {db.db_path}[/dim]")

    with db:
        ConsoleMenu(create_controllers(db, settings), console=console).run()


@main.command()
@click.option("--db-path", type=click.Path(dir_okay=False), help="SQLite file (overrides GUILDHALL_DATABASE_PATH)")
@click.option("--log-level", type=LOG_LEVELS, help="Logging level for this run")
def status(db_path: str | None, log_level: str | None) -> None:
    """Check the database connection and show row counts."""
    from guildhall.storage.character_repository import CharacterRepository
    from guildhall.storage.guild_repository import GuildRepository

    console.print("[bold]Guildhall Status[/bold]\n")
    try:
        db = _open_database(db_path, log_level)
    except GuildhallError as exc:
        console.print(f"[red]✗[/red] {exc.message}")
        sys.exit(1)

    with db:
        console.print(f"[green]✓[/green] SQLite {db.ping()} at {db.db_path}")

        table = Table(title="Stored rows")
        table.add_column("Table")
        table.add_column("Rows", justify="right")
        table.add_row("characters", str(CharacterRepository(db).count()))
        table.add_row("guilds", str(len(GuildRepository(db).get_all())))
        console.print(table)


if __name__ == "__main__":
    main()
