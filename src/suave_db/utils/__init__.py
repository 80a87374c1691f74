"""Utility functions for suave_db."""

from __future__ import annotations

__all__ = [
    "local_now",
    "register_sqlite_adapters",
    # Mapped types
    "AssignedKey",
    "AssignedStrKey",
    "GuidKey",
    "IdentityKey",
    "InsertStamp",
    "RequiredStr",
    "SequentialKey",
    "UpdateStamp",
]

from .db import register_sqlite_adapters
from .mapped_types import (
    AssignedKey,
    AssignedStrKey,
    GuidKey,
    IdentityKey,
    InsertStamp,
    RequiredStr,
    SequentialKey,
    UpdateStamp,
)
from .time import local_now
