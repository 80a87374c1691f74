"""Constants and enumerations for suave_db."""

from __future__ import annotations

from enum import Enum

__all__ = [
    "KeyType",
    "SortOrder",
    "READ_ONLY_KEYS",
]


class KeyType(str, Enum):
    """Primary key roles supported by the statement builder.

    The role decides how a key value comes into existence on create:

    - ``NOT_A_KEY``: plain column
    - ``IDENTITY``: generated by the database and returned from the insert
    - ``GUID``: a ``uuid.UUID`` supplied by the caller
    - ``ASSIGNED``: supplied by the caller
    - ``SEQUENTIAL``: ``MAX(column) + 1``, scoped to the assigned keys
    """

    NOT_A_KEY = "not_a_key"
    IDENTITY = "identity"
    GUID = "guid"
    ASSIGNED = "assigned"
    SEQUENTIAL = "sequential"


class SortOrder(str, Enum):
    """Sort direction for ORDER BY resolution."""

    ASCENDING = "asc"
    DESCENDING = "desc"

    @property
    def sql(self) -> str:
        """SQL keyword for this direction."""
        return "ASC" if self is SortOrder.ASCENDING else "DESC"


# Key roles that are never editable once a row exists
READ_ONLY_KEYS = frozenset({KeyType.IDENTITY, KeyType.GUID, KeyType.SEQUENTIAL})
