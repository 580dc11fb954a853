"""
userdb - populate, query and clear a SQLite users table.

Bulk insertion is spread over a pool of asyncio workers that share one
database handle:

- A dataset of random alphanumeric names is generated up front
- The dataset is split into stride partitions, one per worker
- Every worker inserts its partition row by row; duplicates are skipped
- The dispatcher waits for all workers and reports any that crashed
"""

from __future__ import annotations

__version__ = "0.1.0"
__license__ = "MIT"

# Public API exports
from userdb.config import Settings, get_settings
from userdb.dataset import create_users, generate_name
from userdb.domain.models import DbUser, User
from userdb.exceptions import (
    ConstraintViolationError,
    DatabaseError,
    SchemaError,
    StorageError,
    StorageOpenError,
    UserDBError,
    WorkerFaultError,
)
from userdb.infrastructure.database import Database
from userdb.orchestrator import InsertionResult, WorkerResult, partition, run_insertion
from userdb.utils.logging import configure_logging, get_logger

__all__ = [
    # Version info
    "__version__",
    "__license__",
    # Configuration
    "Settings",
    "get_settings",
    # Domain
    "DbUser",
    "User",
    "create_users",
    "generate_name",
    # Database
    "Database",
    # Insertion
    "InsertionResult",
    "WorkerResult",
    "partition",
    "run_insertion",
    # Errors
    "ConstraintViolationError",
    "DatabaseError",
    "SchemaError",
    "StorageError",
    "StorageOpenError",
    "UserDBError",
    "WorkerFaultError",
    # Logging
    "configure_logging",
    "get_logger",
]
