"""
Domain models for userdb.

`User` is a generated record that has no identity yet; `DbUser` is a row of
the `users` table. Both are frozen so a dataset can be shared by every
insertion worker without copying.
"""
from __future__ import annotations

from pydantic import BaseModel, Field


class User(BaseModel):
    """
    A user waiting to be persisted.
    """

    name: str = Field(..., min_length=1, description="Unique user name.")

    model_config = {
        "frozen": True,
    }

    def __str__(self) -> str:
        return self.name


class DbUser(BaseModel):
    """
    Representation of a single row in the `users` table.
    """

    id: int = Field(..., description="Primary key assigned by SQLite.")
    name: str = Field(..., description="Unique user name.")

    model_config = {
        "frozen": True,
        "populate_by_name": True,
    }

    def __str__(self) -> str:
        return f"id: {self.id} name: {self.name}"


__all__ = ["DbUser", "User"]
