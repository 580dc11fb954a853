"""
Exception hierarchy for userdb.

Everything raised on purpose by this package derives from `UserDBError`, so
the CLI can turn any of them into a one-line message and a non-zero exit.
Wrappers always chain the underlying sqlite error with ``raise ... from``.
"""

from __future__ import annotations

from typing import Any


class UserDBError(Exception):
    """Base exception class from which all userdb exceptions inherit."""

    detail: str

    def __init__(self, *args: Any, detail: str = "") -> None:
        str_args = [str(arg) for arg in args if arg]
        if not detail:
            if str_args:
                detail, *str_args = str_args
            elif hasattr(self, "detail"):
                detail = self.detail
        self.detail = detail
        super().__init__(*str_args)

    def __repr__(self) -> str:
        if self.detail:
            return f"{self.__class__.__name__} - {self.detail}"
        return self.__class__.__name__

    def __str__(self) -> str:
        return " ".join((*self.args, self.detail)).strip()


class StorageOpenError(UserDBError):
    """The database file could not be opened or created."""


class SchemaError(UserDBError):
    """Creating the users table failed for a reason other than it already existing."""


class DatabaseError(UserDBError):
    """A single database operation failed."""


class StorageError(DatabaseError):
    """The storage engine failed while running a statement."""


class ConstraintViolationError(DatabaseError):
    """A row violated a table constraint (duplicate name)."""


class WorkerFaultError(UserDBError):
    """An insertion worker terminated abnormally."""

    def __init__(self, worker: str, *args: Any, detail: str = "") -> None:
        self.worker = worker
        super().__init__(*args, detail=detail)


__all__ = [
    "ConstraintViolationError",
    "DatabaseError",
    "SchemaError",
    "StorageError",
    "StorageOpenError",
    "UserDBError",
    "WorkerFaultError",
]
