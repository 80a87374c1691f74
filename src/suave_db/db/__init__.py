"""Database package for suave_db."""

from __future__ import annotations

__all__ = [
    # Primary API - use these
    "DataContext",
    "SqlDataContext",
    "InMemoryDataContext",
    "create_data_context",
    # Drivers
    "Driver",
    "SqlAlchemyDriver",
    # Configuration
    "get_database_url",
    "get_engine",
    # Hydration
    "hydrate",
]

from .config import get_database_url, get_engine
from .context import DataContext, SqlDataContext, create_data_context
from .driver import Driver, SqlAlchemyDriver
from .memory import InMemoryDataContext
from .rows import hydrate
