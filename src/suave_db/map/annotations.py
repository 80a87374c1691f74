"""Declarative mapping markers for record types.

Markers are attached to dataclass fields with :data:`typing.Annotated` and
read once when the type map is built:

>>> @table("Cities")
... @dataclass
... class City:
...     city_id: Annotated[int, Key(KeyType.IDENTITY)] = 0
...     city_name: Annotated[str, Column("Name"), Required()] = ""

Reusable aliases built from these markers live in
:mod:`suave_db.utils.mapped_types`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, TypeVar

from suave_db.constants import KeyType

__all__ = [
    "Column",
    "DateStamp",
    "Editable",
    "Key",
    "NotMapped",
    "ReadOnly",
    "Required",
    "SoftDelete",
    "TableInfo",
    "table",
    "get_table_info",
]

T = TypeVar("T", bound=type)

_TABLE_ATTR = "__suave_table__"


class Marker:
    """Base class for all field markers."""


@dataclass(frozen=True)
class Key(Marker):
    """Mark a field as a key.

    Without an explicit role the role is inferred from the field type:
    ``int`` is an Identity key, ``uuid.UUID`` a Guid key, anything else an
    Assigned key.
    """

    key_type: KeyType | None = None


@dataclass(frozen=True)
class Column(Marker):
    """Map a field onto a differently named column."""

    name: str


@dataclass(frozen=True)
class Required(Marker):
    """Field must hold a value when a row is created."""


@dataclass(frozen=True)
class ReadOnly(Marker):
    """Exclude a field from updates.

    On a date stamp, marks it as insert-only: it is stamped on create and
    never re-stamped on update.
    """

    flag: bool = True


@dataclass(frozen=True)
class Editable(Marker):
    """Explicitly allow (or forbid) updates to a field."""

    flag: bool = True


@dataclass(frozen=True)
class DateStamp(Marker):
    """Field is set to the current time on create (and update)."""


@dataclass(frozen=True)
class SoftDelete(Marker):
    """Field records deletion state instead of a physical delete.

    Parameters
    ----------
    inserted_value : Any
        Value written on create
    deleted_value : Any
        Value that denotes a deleted row
    """

    inserted_value: Any
    deleted_value: Any


@dataclass(frozen=True)
class NotMapped(Marker):
    """Field has no backing column."""


@dataclass(frozen=True)
class TableInfo:
    """Table and schema a record type is mapped to."""

    name: str
    schema: str | None = None


def table(name: str | None = None, schema: str | None = None) -> Callable[[T], T]:
    """
    Class decorator overriding the table (and schema) a type maps to.

    Parameters
    ----------
    name : str | None, optional
        Table name, defaults to the class name
    schema : str | None, optional
        Schema name, by default no schema

    Examples
    --------
    >>> @table("SoftDeleteTest", schema="Suave")
    ... @dataclass
    ... class SoftDeleted:
    ...     ...
    """

    def decorate(cls: T) -> T:
        setattr(cls, _TABLE_ATTR, TableInfo(name or cls.__name__, schema or None))
        return cls

    return decorate


def get_table_info(cls: type) -> TableInfo:
    """Return the declared table info, defaulting to the class name."""
    # only honour the decorator on the class itself, not on a base class
    info = cls.__dict__.get(_TABLE_ATTR)
    if info is None:
        return TableInfo(cls.__name__)
    return info
