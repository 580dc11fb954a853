"""
Domain package for userdb.

Exports the record types shared by the database handle, the insertion
workers and the CLI. Keep this package focused on data definitions.
"""

from userdb.domain.models import DbUser, User

__all__ = [
    "DbUser",
    "User",
]
