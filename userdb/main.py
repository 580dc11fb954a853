from __future__ import annotations

import asyncio
import sys
from pathlib import Path
from typing import Any, Coroutine, List, Optional, TypeVar

import typer

from userdb.config import get_settings
from userdb.dataset import create_users
from userdb.domain.models import DbUser
from userdb.exceptions import UserDBError
from userdb.infrastructure.database import Database
from userdb.orchestrator import InsertionResult, run_insertion
from userdb.reporter import print_insertion_result, print_users
from userdb.utils.logging import configure_logging, get_logger

T = TypeVar("T")

log = get_logger(__name__)

app = typer.Typer(help="Populate, query and clear a SQLite users table.", no_args_is_help=True)


@app.callback()
def cli(
    ctx: typer.Context,
    workers: Optional[int] = typer.Option(
        None,
        "--workers",
        "-w",
        min=1,
        help="Number of concurrent insertion workers (default from settings). Used by insert.",
    ),
    db_path: Optional[Path] = typer.Option(
        None,
        "--db-path",
        help="SQLite database file (default from settings).",
    ),
    json_logs: bool = typer.Option(
        False,
        "--json-logs",
        help="Emit log lines as JSON.",
    ),
) -> None:
    """
    Resolve global options against settings and configure logging.
    """
    settings = get_settings()
    configure_logging(level=settings.log_level, json_logs=json_logs or settings.json_logs)
    ctx.obj = {
        "workers": workers or settings.workers,
        "db_path": db_path or Path(settings.db_path),
    }


def _run(coro: Coroutine[Any, Any, T]) -> T:
    """Run a coroutine to completion, turning userdb errors into exit code 1."""
    try:
        return asyncio.run(coro)
    except UserDBError as exc:
        log.debug("Command failed", exc_info=True)
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from exc


def _echo_schema(created: bool) -> None:
    typer.echo("Table created" if created else "Table exists")


async def _insert(db_path: Path, rows: int, seed: Optional[int], workers: int) -> InsertionResult:
    async with await Database.open(db_path) as db:
        _echo_schema(await db.ensure_schema())
        users = create_users(rows, length=get_settings().name_length, seed=seed)
        return await run_insertion(db, users, workers)


async def _select(db_path: Path) -> List[DbUser]:
    async with await Database.open(db_path) as db:
        _echo_schema(await db.ensure_schema())
        return await db.select_all()


async def _delete(db_path: Path) -> int:
    async with await Database.open(db_path) as db:
        _echo_schema(await db.ensure_schema())
        return await db.delete_all()


@app.command()
def insert(
    ctx: typer.Context,
    rows: Optional[int] = typer.Option(
        None,
        "--rows",
        "-r",
        min=0,
        help="Number of users to generate (default from settings).",
    ),
    seed: Optional[int] = typer.Option(
        None,
        "--seed",
        help="Seed for reproducible name generation.",
    ),
) -> None:
    """
    Generate users and insert them with concurrent workers.
    """
    total_rows = rows if rows is not None else get_settings().dataset_size
    workers = ctx.obj["workers"]
    typer.echo(f"Inserting rows={total_rows} with workers={workers}.")
    result = _run(_insert(ctx.obj["db_path"], total_rows, seed, workers))
    print_insertion_result(result)


@app.command()
def select(ctx: typer.Context) -> None:
    """
    List every stored user.
    """
    users = _run(_select(ctx.obj["db_path"]))
    print_users(users)
    typer.echo(f"Selected {len(users)} rows")


@app.command()
def delete(ctx: typer.Context) -> None:
    """
    Remove every stored user.
    """
    deleted = _run(_delete(ctx.obj["db_path"]))
    typer.echo(f"Deleted {deleted} rows")


@app.command()
def info(ctx: typer.Context) -> None:
    """
    Show effective configuration values.
    """
    settings = get_settings()
    typer.echo(
        f"DB={ctx.obj['db_path']} | workers={ctx.obj['workers']} "
        f"rows={settings.dataset_size} name_length={settings.name_length} "
        f"log_level={settings.log_level}"
    )


def main() -> None:
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)


if __name__ == "__main__":
    main()
