"""
Pytest configuration for userdb.

Provides fixtures for:
- Temporary SQLite database files
- An opened database handle with the schema in place
- Settings cache and root logging isolation between tests
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import AsyncGenerator, Generator

import pytest
import pytest_asyncio

from userdb.config import get_settings
from userdb.infrastructure.database import Database


@pytest.fixture(autouse=True)
def reset_settings_cache() -> Generator[None, None, None]:
    """
    Drop cached settings so environment overrides in one test do not leak.
    """
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture(autouse=True)
def restore_root_logging() -> Generator[None, None, None]:
    """
    Undo the root handler swap performed by the CLI's logging setup.
    """
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def db_path(tmp_path: Path) -> Path:
    """
    Path to a database file that does not exist yet.
    """
    return tmp_path / "users.db"


@pytest_asyncio.fixture
async def database(db_path: Path) -> AsyncGenerator[Database, None]:
    """
    Open handle on a fresh database with the users table created.
    """
    db = await Database.open(db_path)
    await db.ensure_schema()
    try:
        yield db
    finally:
        await db.close()
