"""
Infrastructure package for userdb.

Centralizes database connectivity. Keep this layer focused on I/O and
resource management, decoupled from the insertion workers and the CLI.
"""

from userdb.infrastructure.database import Database

__all__ = [
    "Database",
]
