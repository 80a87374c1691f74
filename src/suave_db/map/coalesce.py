"""Normalisation of call inputs into condition sets.

Callers identify rows and describe filters in several shapes: a bare key
value, a mapping, a record instance, or any object exposing attributes
(``types.SimpleNamespace``, named tuples). Every shape is first turned into
a :class:`Scalar` or :class:`Fields` property bag, then validated against a
:class:`~suave_db.map.type_map.TypeMap`.
"""

from __future__ import annotations

import dataclasses
import uuid
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from datetime import date, time
from decimal import Decimal
from enum import Enum
from typing import TYPE_CHECKING, Any, Union

from loguru import logger

from suave_db.constants import SortOrder
from suave_db.errors import ArgumentError

if TYPE_CHECKING:
    from suave_db.map.field_map import FieldMap
    from suave_db.map.type_map import TypeMap

__all__ = [
    "Fields",
    "PropertyBag",
    "Scalar",
    "coalesce_conditions",
    "coalesce_key",
    "coalesce_sort",
    "select_updates",
    "to_property_bag",
]

_SCALAR_TYPES = (str, bytes, int, float, Decimal, uuid.UUID, date, time, Enum)

_DIRECTIONS = {
    "asc": SortOrder.ASCENDING,
    "ascending": SortOrder.ASCENDING,
    "desc": SortOrder.DESCENDING,
    "descending": SortOrder.DESCENDING,
}


@dataclass(frozen=True)
class Scalar:
    """A bare value, only meaningful as the value of a single key."""

    value: Any


@dataclass(frozen=True)
class Fields:
    """Ordered field name/value pairs."""

    pairs: tuple[tuple[str, Any], ...] = ()

    def as_dict(self) -> dict[str, Any]:
        return dict(self.pairs)

    def __len__(self) -> int:
        return len(self.pairs)


PropertyBag = Union[Scalar, Fields]


def to_property_bag(obj: Any) -> PropertyBag:
    """
    Classify a raw call input.

    Parameters
    ----------
    obj : Any
        Bare value, mapping, dataclass instance, named tuple or attribute
        object. ``None`` gives an empty :class:`Fields`.

    Returns
    -------
    Scalar | Fields
        Tagged property bag

    Examples
    --------
    >>> to_property_bag(7)
    Scalar(value=7)
    >>> to_property_bag({"area": "Hampshire"})
    Fields(pairs=(('area', 'Hampshire'),))
    """
    if isinstance(obj, (Scalar, Fields)):
        return obj
    if obj is None:
        return Fields()
    if isinstance(obj, Mapping):
        return Fields(tuple(obj.items()))
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return Fields(tuple((f.name, getattr(obj, f.name)) for f in dataclasses.fields(obj)))
    if isinstance(obj, tuple) and hasattr(obj, "_asdict"):
        return Fields(tuple(obj._asdict().items()))
    if isinstance(obj, _SCALAR_TYPES):
        return Scalar(obj)
    if hasattr(obj, "__dict__"):
        return Fields(tuple(vars(obj).items()))
    return Scalar(obj)


def coalesce_key(type_map: TypeMap, obj: Any) -> dict[str, Any]:
    """
    Normalise a key lookup into a condition set holding every key field.

    A bare value is accepted when the type has exactly one key and the value
    has that key's type.

    Raises
    ------
    ArgumentError
        If the input is None or does not supply every key field
    """
    if obj is None:
        msg = f"Passed key for {type_map.name} is None."
        raise ArgumentError(msg)

    keys = type_map.all_keys
    if not keys:
        msg = f"{type_map.name} has no key fields and cannot be looked up by key."
        raise ArgumentError(msg)

    bag = to_property_bag(obj)
    if isinstance(bag, Scalar):
        if len(keys) == 1 and keys[0].accepts(bag.value):
            return {keys[0].field: bag.value}
        names = ", ".join(k.field for k in keys)
        msg = f"Value {bag.value!r} cannot identify a {type_map.name}; supply {names}."
        raise ArgumentError(msg)

    values = bag.as_dict()
    missing = [k.field for k in keys if k.field not in values]
    if missing:
        msg = f"Failed to find key field(s) {', '.join(missing)} for {type_map.name}."
        raise ArgumentError(msg)
    return {k.field: values[k.field] for k in keys}


def coalesce_conditions(
    type_map: TypeMap, obj: Any, allow_empty: bool = False
) -> dict[str, Any]:
    """
    Normalise filter conditions into a validated condition set.

    Parameters
    ----------
    type_map : TypeMap
        Type the conditions apply to
    obj : Any
        Raw conditions
    allow_empty : bool, optional
        Accept an empty (or None) input, by default False

    Returns
    -------
    dict[str, Any]
        Field name to value, in input order

    Raises
    ------
    ArgumentError
        If a name is not a mapped field, or no condition is given and
        ``allow_empty`` is False
    """
    bag = to_property_bag(obj)
    if isinstance(bag, Scalar):
        msg = f"Conditions for {type_map.name} must name fields, got {bag.value!r}."
        raise ArgumentError(msg)

    conditions = bag.as_dict()
    unknown = [name for name in conditions if name not in type_map.fields]
    if unknown:
        msg = f"Failed to find field(s) {', '.join(unknown)} on {type_map.name}."
        raise ArgumentError(msg)
    if not conditions and not allow_empty:
        msg = "Please specify at least one field for a WHERE condition."
        raise ArgumentError(msg)
    return conditions


def select_updates(type_map: TypeMap, values: Mapping[str, Any]) -> list[FieldMap]:
    """
    Pick the updateable fields present in an update payload.

    Keys, read-only, soft delete, date stamp and unknown names are dropped
    without error (logged as a warning).

    Raises
    ------
    ArgumentError
        If nothing updateable remains
    """
    selected = []
    dropped = []
    for name in values:
        field_map = type_map.get_field(name)
        if field_map is not None and field_map.is_updateable:
            selected.append(field_map)
        elif field_map is None or not field_map.is_key:
            dropped.append(name)

    if dropped:
        logger.warning(f"Update of {type_map.name} ignores non-updateable fields {dropped}")
    if not selected:
        msg = f"Please provide one or more updateable fields for {type_map.name}."
        raise ArgumentError(msg)
    return selected


def _direction(value: Any) -> SortOrder:
    if isinstance(value, SortOrder):
        return value
    direction = _DIRECTIONS.get(str(value).lower())
    if direction is None:
        msg = f"Unknown sort direction {value!r}."
        raise ArgumentError(msg)
    return direction


def coalesce_sort(type_map: TypeMap, obj: Any) -> list[tuple[FieldMap, SortOrder]]:
    """
    Resolve a sort argument against the type map.

    Accepts None, a mapping of field to direction, a single field name, or a
    sequence of field names and ``(field, direction)`` pairs. An empty argument
    resolves to the default sort (all keys ascending). Keys missing from the
    sort are appended ascending, so the order is total and pages are stable.

    Raises
    ------
    ArgumentError
        If an item is malformed, a field is not mapped or a direction is not
        recognised
    """
    if obj is None:
        return type_map.default_sort
    if isinstance(obj, Mapping):
        items = list(obj.items())
    elif isinstance(obj, str):
        items = [(obj, SortOrder.ASCENDING)]
    elif isinstance(obj, Iterable):
        items = [_sort_item(item) for item in obj]
    else:
        msg = f"Invalid sort {obj!r}."
        raise ArgumentError(msg)

    if not items:
        return type_map.default_sort

    resolved = []
    for name, direction in items:
        field_map = type_map.get_field(name) if isinstance(name, str) else None
        if field_map is None:
            msg = f"Failed to find sort field {name} on {type_map.name}."
            raise ArgumentError(msg)
        resolved.append((field_map, _direction(direction)))

    sorted_fields = {f.field for f, _ in resolved}
    resolved.extend(
        (key, SortOrder.ASCENDING)
        for key in type_map.all_keys
        if key.field not in sorted_fields
    )
    return resolved


def _sort_item(item: Any) -> tuple[Any, Any]:
    if isinstance(item, str):
        return item, SortOrder.ASCENDING
    if isinstance(item, Sequence) and len(item) == 2:
        return item[0], item[1]
    msg = f"Invalid sort item {item!r}."
    raise ArgumentError(msg)
