from __future__ import annotations

import asyncio
from typing import List

import pytest

from userdb.domain.models import User
from userdb.exceptions import ConstraintViolationError, StorageError, WorkerFaultError
from userdb.orchestrator import batch_insertion, run_insertion

DATASET_SIZE = 12
WORKER_COUNT = 3


class _RecordingDatabase:
    """Stands in for `Database`; fails on selected names."""

    def __init__(
        self,
        duplicates: tuple[str, ...] = (),
        broken: tuple[str, ...] = (),
        crash_on: tuple[str, ...] = (),
    ) -> None:
        self.duplicates = duplicates
        self.broken = broken
        self.crash_on = crash_on
        self.inserted: List[str] = []

    async def insert(self, user: User) -> int:
        await asyncio.sleep(0)
        if user.name in self.crash_on:
            raise RuntimeError("worker bug")
        if user.name in self.duplicates:
            raise ConstraintViolationError(f"user {user.name!r} already exists")
        if user.name in self.broken:
            raise StorageError("disk I/O error")
        self.inserted.append(user.name)
        return len(self.inserted)


def _users(count: int = DATASET_SIZE) -> List[User]:
    return [User(name=f"user{i:02d}") for i in range(count)]


@pytest.mark.asyncio
async def test_batch_insertion_skips_per_item_failures() -> None:
    db = _RecordingDatabase(duplicates=("user01",), broken=("user02",))

    result = await batch_insertion(db, "Worker: 1", _users(4))

    assert result == {"worker": "Worker: 1", "attempted": 4, "inserted": 2, "failed": 2}
    assert db.inserted == ["user00", "user03"]


@pytest.mark.asyncio
async def test_batch_insertion_propagates_unexpected_errors() -> None:
    db = _RecordingDatabase(crash_on=("user01",))

    with pytest.raises(RuntimeError, match="worker bug"):
        await batch_insertion(db, "Worker: 1", _users(4))

    assert db.inserted == ["user00"]


@pytest.mark.asyncio
async def test_run_insertion_aggregates_worker_results() -> None:
    db = _RecordingDatabase(duplicates=("user05",))

    result = await run_insertion(db, _users(), workers=WORKER_COUNT)

    assert result["workers"] == WORKER_COUNT
    assert result["attempted"] == DATASET_SIZE
    assert result["inserted"] == DATASET_SIZE - 1
    assert result["failed"] == 1
    assert [w["worker"] for w in result["per_worker"]] == ["Worker: 1", "Worker: 2", "Worker: 3"]
    assert [w["attempted"] for w in result["per_worker"]] == [4, 4, 4]
    assert sorted(db.inserted) == [f"user{i:02d}" for i in range(DATASET_SIZE) if i != 5]


@pytest.mark.asyncio
async def test_run_insertion_waits_for_all_workers_before_raising() -> None:
    # user00 belongs to worker 1; the others keep going after it dies.
    db = _RecordingDatabase(crash_on=("user00",))

    with pytest.raises(WorkerFaultError) as excinfo:
        await run_insertion(db, _users(), workers=WORKER_COUNT)

    assert excinfo.value.worker == "Worker: 1"
    assert isinstance(excinfo.value.__cause__, RuntimeError)
    worker_one = {f"user{i:02d}" for i in range(0, DATASET_SIZE, WORKER_COUNT)}
    assert sorted(db.inserted) == sorted(
        f"user{i:02d}" for i in range(DATASET_SIZE) if f"user{i:02d}" not in worker_one
    )


@pytest.mark.asyncio
async def test_run_insertion_reports_lowest_faulty_worker() -> None:
    db = _RecordingDatabase(crash_on=("user01", "user02"))

    with pytest.raises(WorkerFaultError) as excinfo:
        await run_insertion(db, _users(), workers=WORKER_COUNT)

    assert excinfo.value.worker == "Worker: 2"


@pytest.mark.asyncio
async def test_run_insertion_rejects_zero_workers() -> None:
    with pytest.raises(ValueError):
        await run_insertion(_RecordingDatabase(), _users(), workers=0)
