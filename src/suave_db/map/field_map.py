"""Per-field mapping metadata."""

from __future__ import annotations

import re
import types
import uuid
from dataclasses import dataclass
from typing import Any, Annotated, Union, get_args, get_origin

from suave_db.constants import READ_ONLY_KEYS, KeyType
from suave_db.errors import ConfigurationError
from suave_db.map.annotations import (
    Column,
    DateStamp,
    Editable,
    Key,
    Marker,
    NotMapped,
    ReadOnly,
    Required,
    SoftDelete,
)

__all__ = ["FieldMap", "load_field_map", "split_annotation"]

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")


@dataclass(frozen=True)
class FieldMap:
    """
    Mapping of a single record field onto a column.

    Attributes
    ----------
    field : str
        Dataclass field name, also the SQL parameter and result alias name
    column : str
        Backing column name
    key_type : KeyType
        Key role of the field
    is_editable : bool
        Whether updates may change the field
    is_read_only : bool
        Whether the field is excluded from updates
    is_required : bool
        Whether a value must be present on create
    is_date_stamp : bool
        Whether the field is stamped with the current time
    stamp_on_update : bool
        Whether a date stamp is re-stamped on update (False for insert-only
        stamps declared with ``ReadOnly()``)
    is_soft_delete : bool
        Whether the field tracks soft deletion
    inserted_value, deleted_value : Any
        Soft delete values on create / on deletion
    python_type : Any
        Underlying field type with ``Annotated`` and ``Optional`` removed
    """

    field: str
    column: str
    key_type: KeyType = KeyType.NOT_A_KEY
    is_editable: bool = True
    is_read_only: bool = False
    is_required: bool = False
    is_date_stamp: bool = False
    stamp_on_update: bool = False
    is_soft_delete: bool = False
    inserted_value: Any = None
    deleted_value: Any = None
    python_type: Any = object

    @property
    def is_key(self) -> bool:
        return self.key_type is not KeyType.NOT_A_KEY

    @property
    def is_updateable(self) -> bool:
        """True when an update may write this field from caller input."""
        return (
            self.key_type is KeyType.NOT_A_KEY
            and self.is_editable
            and not self.is_soft_delete
            and not self.is_date_stamp
        )

    def accepts(self, value: Any) -> bool:
        """Check whether a bare value has this field's type."""
        if not isinstance(self.python_type, type) or self.python_type is object:
            return True
        # bool is an int subclass but never a sensible key value
        if isinstance(value, bool) and self.python_type is not bool:
            return False
        return isinstance(value, self.python_type)


def split_annotation(hint: Any) -> tuple[Any, list[Marker]]:
    """
    Split a type hint into its underlying type and mapping markers.

    ``Annotated`` layers are unwrapped (collecting markers) and
    ``Optional[X]`` collapses to ``X``.

    Examples
    --------
    >>> split_annotation(Annotated[int | None, Key()])
    (<class 'int'>, [Key(key_type=None)])
    """
    markers: list[Marker] = []
    while get_origin(hint) is Annotated:
        args = get_args(hint)
        markers.extend(m for m in args[1:] if isinstance(m, Marker))
        hint = args[0]

    if get_origin(hint) in (Union, types.UnionType):
        args = [a for a in get_args(hint) if a is not type(None)]
        if len(args) == 1:
            # Optional[Annotated[...]] keeps the inner markers
            inner, inner_markers = split_annotation(args[0])
            return inner, markers + inner_markers
    return hint, markers


def _is_implied_key(owner: str, name: str) -> bool:
    snake_owner = _CAMEL_BOUNDARY.sub("_", owner).lower()
    return name in ("id", "Id", f"{owner}Id", f"{snake_owner}_id")


def _infer_key_type(python_type: Any) -> KeyType:
    if python_type is int:
        return KeyType.IDENTITY
    if python_type is uuid.UUID:
        return KeyType.GUID
    return KeyType.ASSIGNED


def _first(markers: list[Marker], kind: type) -> Any:
    return next((m for m in markers if isinstance(m, kind)), None)


def load_field_map(owner: str, name: str, hint: Any) -> FieldMap | None:
    """
    Build the field map for one dataclass field.

    Parameters
    ----------
    owner : str
        Name of the record type declaring the field
    name : str
        Field name
    hint : Any
        Resolved type hint, including ``Annotated`` extras

    Returns
    -------
    FieldMap | None
        Field map, or None when the field is marked ``NotMapped()``

    Raises
    ------
    ConfigurationError
        If the field is declared both read-only and editable
    """
    python_type, markers = split_annotation(hint)
    if _first(markers, NotMapped) is not None:
        return None

    key: Key | None = _first(markers, Key)
    column: Column | None = _first(markers, Column)
    read_only: ReadOnly | None = _first(markers, ReadOnly)
    editable: Editable | None = _first(markers, Editable)
    soft_delete: SoftDelete | None = _first(markers, SoftDelete)
    is_date_stamp = _first(markers, DateStamp) is not None

    key_type = KeyType.NOT_A_KEY
    if key is not None and key.key_type is not None:
        key_type = KeyType(key.key_type)
    elif key is not None or _is_implied_key(owner, name):
        key_type = _infer_key_type(python_type)

    if key_type in READ_ONLY_KEYS or is_date_stamp:
        is_read_only, is_editable = True, False
    else:
        is_read_only = read_only.flag if read_only is not None else False
        if is_read_only and editable is None:
            is_editable = False
        else:
            is_editable = editable.flag if editable is not None else True

    if is_editable and is_read_only:
        msg = f"{owner}.{name} declares opposing ReadOnly and Editable values."
        raise ConfigurationError(msg)

    explicit_read_only = read_only is not None and read_only.flag
    return FieldMap(
        field=name,
        column=column.name if column is not None else name,
        key_type=key_type,
        is_editable=is_editable,
        is_read_only=is_read_only,
        is_required=_first(markers, Required) is not None,
        is_date_stamp=is_date_stamp,
        stamp_on_update=is_date_stamp and not explicit_read_only,
        is_soft_delete=soft_delete is not None,
        inserted_value=soft_delete.inserted_value if soft_delete else None,
        deleted_value=soft_delete.deleted_value if soft_delete else None,
        python_type=python_type,
    )
