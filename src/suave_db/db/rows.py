"""Conversion of driver rows into record instances.

Uses a single adaptix ``Retort`` for every mapped type. Coercion is lenient
because drivers disagree on representations: SQLite hands back ISO strings
for datetimes, integers for booleans and strings for UUIDs, while SQL Server
drivers return native objects.
"""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import TYPE_CHECKING, Any

from adaptix import Retort, loader

if TYPE_CHECKING:
    from suave_db.map.field_map import FieldMap
    from suave_db.map.type_map import TypeMap

__all__ = ["hydrate", "convert_value"]


def _load_datetime(value: Any) -> datetime:
    if isinstance(value, datetime):
        return value
    return datetime.fromisoformat(str(value))


def _load_uuid(value: Any) -> uuid.UUID:
    if isinstance(value, uuid.UUID):
        return value
    if isinstance(value, bytes):
        return uuid.UUID(bytes=value)
    return uuid.UUID(str(value))


def _load_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "t", "yes")
    return bool(value)


_retort = Retort(
    strict_coercion=False,
    recipe=[
        loader(datetime, _load_datetime),
        loader(uuid.UUID, _load_uuid),
        loader(bool, _load_bool),
    ],
)


def hydrate(type_map: TypeMap, row: dict[str, Any]) -> Any:
    """
    Build a record instance from a row keyed by field name.

    Parameters
    ----------
    type_map : TypeMap
        Map of the record type
    row : dict[str, Any]
        Row as returned by a driver (columns aliased to field names)

    Returns
    -------
    Any
        Instance of ``type_map.type``
    """
    return _retort.load(row, type_map.type)


def convert_value(field_map: FieldMap, value: Any) -> Any:
    """Coerce a scalar returned by the database to the field's type."""
    if value is None or not isinstance(field_map.python_type, type):
        return value
    if field_map.python_type is object or isinstance(value, field_map.python_type):
        return value
    return _retort.load(value, field_map.python_type)
