"""
End-to-end insertion runs against a temporary SQLite file.
"""

from __future__ import annotations

from collections import Counter

import pytest

from userdb.dataset import create_users
from userdb.infrastructure.database import Database
from userdb.orchestrator import run_insertion

DATASET_SIZE = 100
WORKER_COUNT = 4


@pytest.mark.asyncio
async def test_insert_then_select_returns_every_name_once(database: Database):
    users = create_users(DATASET_SIZE, seed=1234)

    result = await run_insertion(database, users, workers=WORKER_COUNT)

    assert result["inserted"] == DATASET_SIZE
    assert result["failed"] == 0
    rows = await database.select_all()
    assert len(rows) == DATASET_SIZE
    counts = Counter(r.name for r in rows)
    assert set(counts) == {u.name for u in users}
    assert all(count == 1 for count in counts.values())


@pytest.mark.asyncio
async def test_duplicate_pair_leaves_size_minus_one_rows(database: Database):
    users = create_users(DATASET_SIZE - 1, seed=99)
    users.append(users[10])

    result = await run_insertion(database, users, workers=WORKER_COUNT)

    assert result["attempted"] == DATASET_SIZE
    assert result["inserted"] == DATASET_SIZE - 1
    assert result["failed"] == 1
    assert await database.count() == DATASET_SIZE - 1


@pytest.mark.asyncio
async def test_delete_after_insert_clears_table(database: Database):
    await run_insertion(database, create_users(DATASET_SIZE, seed=7), workers=WORKER_COUNT)

    assert await database.delete_all() == DATASET_SIZE
    assert await database.select_all() == []


@pytest.mark.asyncio
async def test_more_workers_than_users(database: Database):
    result = await run_insertion(database, create_users(3, seed=5), workers=8)

    assert result["inserted"] == 3
    assert len(result["per_worker"]) == 8
    assert sum(w["attempted"] for w in result["per_worker"]) == 3
