"""
Synthetic user generation for userdb.

Names are fixed-length alphanumeric strings. Uniqueness is only
probabilistic; collisions surface later as constraint failures on insert.
"""

from __future__ import annotations

import random
import string
from typing import List, Optional

from userdb.domain.models import User

ALPHABET = string.ascii_letters + string.digits
NAME_LENGTH = 15
DATASET_SIZE = 10_000


def generate_name(length: int = NAME_LENGTH, rng: Optional[random.Random] = None) -> str:
    """Return `length` characters drawn uniformly from ALPHABET."""
    if length < 1:
        raise ValueError(f"length must be >= 1, got {length}")
    source = rng or random
    return "".join(source.choices(ALPHABET, k=length))


def create_users(
    count: int = DATASET_SIZE,
    length: int = NAME_LENGTH,
    seed: Optional[int] = None,
) -> List[User]:
    """
    Materialize `count` users with freshly generated names.

    Parameters
    ----------
    count : int
        Number of users to generate.
    length : int
        Length of each generated name.
    seed : int | None
        When given, generation uses a private `random.Random(seed)` and the
        dataset is reproducible.
    """
    if count < 0:
        raise ValueError(f"count must be >= 0, got {count}")
    rng = random.Random(seed) if seed is not None else None
    return [User(name=generate_name(length, rng)) for _ in range(count)]


__all__ = ["ALPHABET", "DATASET_SIZE", "NAME_LENGTH", "create_users", "generate_name"]
