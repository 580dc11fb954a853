from __future__ import annotations

from typing import Optional, Sequence

from rich import box
from rich.console import Console
from rich.table import Table

from userdb.domain.models import DbUser
from userdb.orchestrator import InsertionResult


def print_users(users: Sequence[DbUser], console: Optional[Console] = None) -> None:
    """
    Render the rows of the users table.
    """
    console = console or Console()

    if not users:
        console.print("[yellow]No users stored.[/yellow]")
        return

    table = Table(title="Users", box=box.ROUNDED)
    table.add_column("ID", justify="right", style="magenta")
    table.add_column("Name", style="cyan", no_wrap=True)

    for user in users:
        table.add_row(str(user.id), user.name)

    console.print(table)


def print_insertion_result(result: InsertionResult, console: Optional[Console] = None) -> None:
    """
    Render per-worker counters followed by the run totals.
    """
    console = console or Console()

    table = Table(
        title="Insertion Results",
        box=box.ROUNDED,
        caption=(
            f"{result['duration_seconds']:.2f}s │ "
            f"{result['throughput_rows_per_sec']:,.2f} rows/s"
        ),
    )
    table.add_column("Worker", style="cyan", no_wrap=True)
    table.add_column("Attempted", justify="right", style="blue")
    table.add_column("Inserted", justify="right", style="bold green")
    table.add_column("Failed", justify="right", style="red")

    for worker in result["per_worker"]:
        table.add_row(
            worker["worker"],
            f"{worker['attempted']:,}",
            f"{worker['inserted']:,}",
            f"{worker['failed']:,}",
        )

    table.add_section()
    table.add_row(
        "Total",
        f"{result['attempted']:,}",
        f"{result['inserted']:,}",
        f"{result['failed']:,}",
        style="bold",
    )

    mem_bytes = result.get("peak_rss_bytes") or 0
    cpu = result.get("cpu_percent") or 0.0
    console.print(table)
    console.print(f"[dim]Peak memory: {mem_bytes / (1024 * 1024):.2f} MB │ CPU: {cpu:.1f}%[/dim]")


__all__ = ["print_insertion_result", "print_users"]
