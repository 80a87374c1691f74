"""Declarative CRUD mapping of dataclass records onto relational tables."""

from __future__ import annotations

from loguru import logger

__all__ = [
    # Declaring records
    "Column",
    "DateStamp",
    "Editable",
    "Key",
    "KeyType",
    "NotMapped",
    "ReadOnly",
    "Required",
    "SoftDelete",
    "table",
    # Data contexts
    "DataContext",
    "InMemoryDataContext",
    "SqlDataContext",
    "create_data_context",
    "SqlAlchemyDriver",
    # Results
    "PagedList",
    "SortOrder",
    # Errors
    "ArgumentError",
    "ConfigurationError",
    "DataIntegrityError",
    "SuaveError",
]

from .constants import KeyType, SortOrder
from .db import (
    DataContext,
    InMemoryDataContext,
    SqlAlchemyDriver,
    SqlDataContext,
    create_data_context,
)
from .errors import ArgumentError, ConfigurationError, DataIntegrityError, SuaveError
from .map import (
    Column,
    DateStamp,
    Editable,
    Key,
    NotMapped,
    ReadOnly,
    Required,
    SoftDelete,
    table,
)
from .paging import PagedList

# Library code stays quiet until an application opts in
logger.disable("suave_db")
