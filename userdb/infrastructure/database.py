"""
SQLite handle for userdb.

A `Database` owns exactly one aiosqlite connection. aiosqlite runs the
sqlite3 connection on its own thread and executes requests from a queue,
so any number of asyncio tasks can await operations on the same handle
while the statements themselves run one at a time.

The connection is opened in autocommit mode: every statement is its own
unit of work and no transaction ever spans two inserts.
"""

from __future__ import annotations

from pathlib import Path
from types import TracebackType
from typing import List, Optional, Type, Union

import aiosqlite

from userdb.domain.models import DbUser, User
from userdb.exceptions import (
    ConstraintViolationError,
    SchemaError,
    StorageError,
    StorageOpenError,
)
from userdb.utils.logging import get_logger

log = get_logger(__name__)

TABLE_NAME = "users"

CREATE_TABLE_SQL = """
CREATE TABLE IF NOT EXISTS users (
    id INTEGER PRIMARY KEY,
    name TEXT NOT NULL UNIQUE
)
"""
TABLE_EXISTS_SQL = "SELECT 1 FROM sqlite_master WHERE type = 'table' AND name = ?"
INSERT_SQL = "INSERT INTO users (name) VALUES (?)"
SELECT_ALL_SQL = "SELECT id, name FROM users ORDER BY id"
COUNT_SQL = "SELECT COUNT(*) FROM users"
DELETE_ALL_SQL = "DELETE FROM users"


class Database:
    """
    Shared handle over a single SQLite connection.

    Create it with `await Database.open(path)`; the handle can then be passed
    to as many concurrent tasks as needed. Use it as an async context manager
    (or call `close()`) to stop the connection thread.
    """

    def __init__(self, conn: aiosqlite.Connection, path: str) -> None:
        self._conn = conn
        self.path = path
        self._closed = False

    @classmethod
    async def open(cls, path: Union[str, Path]) -> "Database":
        """
        Open (or create) the database file at `path`.

        Raises
        ------
        StorageOpenError
            If SQLite cannot open or create the file.
        """
        location = str(path)
        try:
            conn = await aiosqlite.connect(location, isolation_level=None)
        except aiosqlite.Error as exc:
            raise StorageOpenError(f"cannot open database {location!r}: {exc}") from exc
        log.debug("Database opened", extra={"path": location})
        return cls(conn, location)

    @property
    def closed(self) -> bool:
        return self._closed

    def _ensure_open(self) -> None:
        if self._closed:
            raise StorageError(f"database {self.path!r} is closed")

    async def ensure_schema(self) -> bool:
        """
        Create the users table if it is missing.

        Returns
        -------
        bool
            True when the table was created, False when it already existed.
        """
        self._ensure_open()
        try:
            async with self._conn.execute(TABLE_EXISTS_SQL, (TABLE_NAME,)) as cursor:
                existed = await cursor.fetchone() is not None
            await self._conn.execute(CREATE_TABLE_SQL)
        except aiosqlite.Error as exc:
            raise SchemaError(f"cannot create table {TABLE_NAME!r}: {exc}") from exc
        log.debug("Schema ensured", extra={"table": TABLE_NAME, "table_created": not existed})
        return not existed

    async def insert(self, user: User) -> int:
        """
        Insert one user and return the id SQLite assigned to it.

        Raises
        ------
        ConstraintViolationError
            If a row with the same name already exists.
        StorageError
            On any other engine failure.
        """
        self._ensure_open()
        try:
            async with self._conn.execute(INSERT_SQL, (user.name,)) as cursor:
                row_id = cursor.lastrowid
        except aiosqlite.IntegrityError as exc:
            raise ConstraintViolationError(f"user {user.name!r} already exists") from exc
        except aiosqlite.Error as exc:
            raise StorageError(f"insert of {user.name!r} failed: {exc}") from exc
        return row_id

    async def select_all(self) -> List[DbUser]:
        """Return every row ordered by id."""
        self._ensure_open()
        try:
            async with self._conn.execute(SELECT_ALL_SQL) as cursor:
                rows = await cursor.fetchall()
        except aiosqlite.Error as exc:
            raise StorageError(f"select failed: {exc}") from exc
        return [DbUser(id=row[0], name=row[1]) for row in rows]

    async def count(self) -> int:
        self._ensure_open()
        try:
            async with self._conn.execute(COUNT_SQL) as cursor:
                (total,) = await cursor.fetchone()
        except aiosqlite.Error as exc:
            raise StorageError(f"count failed: {exc}") from exc
        return total

    async def delete_all(self) -> int:
        """Delete every row and return how many were removed."""
        self._ensure_open()
        try:
            async with self._conn.execute(DELETE_ALL_SQL) as cursor:
                deleted = cursor.rowcount
        except aiosqlite.Error as exc:
            raise StorageError(f"delete failed: {exc}") from exc
        log.debug("Rows deleted", extra={"rows": deleted})
        return deleted

    async def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        await self._conn.close()
        log.debug("Database closed", extra={"path": self.path})

    async def __aenter__(self) -> "Database":
        return self

    async def __aexit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc: Optional[BaseException],
        tb: Optional[TracebackType],
    ) -> None:
        await self.close()


__all__ = ["Database", "TABLE_NAME"]
