"""Database-specific utilities and configurations."""

from __future__ import annotations

import sqlite3
import uuid
from datetime import datetime

__all__ = ["register_sqlite_adapters"]


def _adapt_datetime_iso(val: datetime) -> str:
    """Adapt datetime to ISO 8601 string for SQLite storage.

    Parameters
    ----------
    val : datetime
        Datetime to adapt

    Returns
    -------
    str
        ISO 8601 formatted string
    """
    return val.isoformat()


def _adapt_uuid(val: uuid.UUID) -> str:
    return str(val)


def register_sqlite_adapters() -> None:
    """Register custom datetime and UUID adapters for SQLite.

    Avoids the Python 3.12+ deprecation warning about SQLite's default
    datetime adapter and lets Guid keys be bound as parameters.

    The adapters store datetimes as ISO 8601 strings (the same text the
    SQLite builder's current-time expression produces) and UUIDs as their
    canonical string form.

    Notes
    -----
    Values come back as text; hydration parses them, so no converters are
    registered and the engine does not need ``detect_types``.

    Safe to call more than once. :func:`suave_db.db.config.get_engine` calls
    it for every SQLite URL.
    """
    sqlite3.register_adapter(datetime, _adapt_datetime_iso)
    sqlite3.register_adapter(uuid.UUID, _adapt_uuid)
