"""
Concurrent insertion for userdb.

The dataset is split into stride partitions, one per worker. Each worker is
an asyncio task that inserts its partition row by row through the shared
`Database` handle. Per-row failures stay inside the worker; a worker that
dies is reported only after every other worker has finished.

Usage:
    from userdb.orchestrator import run_insertion

    async with await Database.open("test.db") as db:
        await db.ensure_schema()
        result = await run_insertion(db, create_users(1_000), workers=4)
"""

from __future__ import annotations

import asyncio
from typing import List, Optional, Sequence, TypedDict, TypeVar

from userdb.domain.models import User
from userdb.exceptions import DatabaseError, WorkerFaultError
from userdb.infrastructure.database import Database
from userdb.utils.logging import get_logger
from userdb.utils.profiler import profile_block

log = get_logger(__name__)

T = TypeVar("T")


class WorkerResult(TypedDict):
    """Counters reported by a single worker."""

    worker: str
    attempted: int
    inserted: int
    failed: int


class InsertionResult(TypedDict):
    """Aggregate outcome of one `run_insertion` call."""

    workers: int
    attempted: int
    inserted: int
    failed: int
    duration_seconds: float
    throughput_rows_per_sec: float
    peak_rss_bytes: Optional[int]
    cpu_percent: Optional[float]
    per_worker: List[WorkerResult]


def partition(items: Sequence[T], n: int) -> List[List[T]]:
    """
    Split `items` into `n` stride partitions.

    Partition ``i`` holds the items at positions ``i, i + n, i + 2n, ...`` in
    their original order. Exactly `n` lists are returned, trailing ones empty
    when there are fewer items than partitions.
    """
    if n < 1:
        raise ValueError(f"partition count must be >= 1, got {n}")
    return [list(items[offset::n]) for offset in range(n)]


def worker_name(index: int) -> str:
    return f"Worker: {index}"


async def batch_insertion(db: Database, name: str, users: Sequence[User]) -> WorkerResult:
    """
    Insert `users` one at a time and count the outcome.

    Database errors on a single row are logged and skipped; anything else
    propagates and ends the worker.
    """
    inserted = 0
    failed = 0
    for user in users:
        try:
            await db.insert(user)
        except DatabaseError as exc:
            failed += 1
            log.warning(f"{name} failed: {user.name} ({exc})", extra={"worker": name})
            continue
        inserted += 1
        log.info(f"{name} inserted: {user.name}", extra={"worker": name})

    log.debug(f"{name} done", extra={"worker": name, "inserted": inserted, "failed": failed})
    return WorkerResult(worker=name, attempted=len(users), inserted=inserted, failed=failed)


async def run_insertion(db: Database, users: Sequence[User], workers: int) -> InsertionResult:
    """
    Insert `users` using `workers` concurrent tasks over one handle.

    Parameters
    ----------
    db : Database
        Open handle shared by every worker.
    users : Sequence[User]
        Pre-generated dataset; never mutated.
    workers : int
        Number of concurrent tasks (>= 1).

    Returns
    -------
    InsertionResult
        Totals, per-worker counters and profiler measurements.

    Raises
    ------
    WorkerFaultError
        If any worker task terminated abnormally. Raised only once all
        workers have finished; the lowest-numbered faulty worker wins.
    """
    batches = partition(users, workers)
    log.info(
        f"[INSERT START] {len(users)} users across {workers} workers",
        extra={"rows": len(users), "workers": workers},
    )

    with profile_block("insert") as stats:
        tasks = [
            asyncio.create_task(batch_insertion(db, worker_name(index), batch))
            for index, batch in enumerate(batches, start=1)
        ]
        outcomes = await asyncio.gather(*tasks, return_exceptions=True)

    per_worker: List[WorkerResult] = []
    for index, outcome in enumerate(outcomes, start=1):
        if isinstance(outcome, BaseException):
            name = worker_name(index)
            log.error(f"[INSERT FAILED] {name} crashed", extra={"worker": name})
            raise WorkerFaultError(name, f"{name} crashed: {outcome!r}") from outcome
        per_worker.append(outcome)

    inserted = sum(r["inserted"] for r in per_worker)
    failed = sum(r["failed"] for r in per_worker)
    duration = stats.duration_seconds
    result = InsertionResult(
        workers=workers,
        attempted=len(users),
        inserted=inserted,
        failed=failed,
        duration_seconds=round(duration, 3),
        throughput_rows_per_sec=round(inserted / duration, 2) if duration > 0 else 0.0,
        peak_rss_bytes=stats.peak_rss_bytes,
        cpu_percent=stats.cpu_percent,
        per_worker=per_worker,
    )
    log.info(
        f"[INSERT COMPLETE] inserted={inserted} failed={failed}",
        extra={"inserted": inserted, "failed": failed, "duration": result["duration_seconds"]},
    )
    return result


__all__ = [
    "InsertionResult",
    "WorkerResult",
    "batch_insertion",
    "partition",
    "run_insertion",
    "worker_name",
]
