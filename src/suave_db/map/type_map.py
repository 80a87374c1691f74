"""Type-to-table mapping built from dataclass declarations."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, get_type_hints

from loguru import logger

from suave_db.constants import KeyType, SortOrder
from suave_db.errors import ConfigurationError
from suave_db.map.annotations import get_table_info
from suave_db.map.field_map import FieldMap, load_field_map

if TYPE_CHECKING:
    from collections.abc import Iterable

__all__ = ["TypeMap", "build_type_map"]


@dataclass(frozen=True)
class TypeMap:
    """
    Mapping of a record type onto a table.

    Built once per type by :func:`build_type_map` (normally through a
    :class:`~suave_db.map.registry.TypeMapRegistry`) and immutable afterwards.

    Attributes
    ----------
    type : type
        Mapped dataclass
    table_name : str
        Table the type maps to
    schema : str | None
        Schema the table lives in
    fields : dict[str, FieldMap]
        All mapped fields in declaration order
    """

    type: type
    table_name: str
    schema: str | None
    fields: dict[str, FieldMap]
    all_keys: tuple[FieldMap, ...] = field(init=False)
    select_fields: tuple[FieldMap, ...] = field(init=False)
    insertable_fields: tuple[FieldMap, ...] = field(init=False)
    updateable_fields: tuple[FieldMap, ...] = field(init=False)
    date_stamp_fields: tuple[FieldMap, ...] = field(init=False)
    required_fields: tuple[FieldMap, ...] = field(init=False)

    def __post_init__(self) -> None:
        maps = tuple(self.fields.values())
        derived = {
            "all_keys": tuple(f for f in maps if f.is_key),
            "select_fields": maps,
            "insertable_fields": tuple(
                f for f in maps if f.key_type is not KeyType.IDENTITY
            ),
            "updateable_fields": tuple(f for f in maps if f.is_updateable),
            "date_stamp_fields": tuple(f for f in maps if f.is_date_stamp),
            "required_fields": tuple(f for f in maps if f.is_required),
        }
        for name, value in derived.items():
            object.__setattr__(self, name, value)

    @property
    def name(self) -> str:
        return self.type.__qualname__

    @property
    def table_identifier(self) -> str:
        """``[schema].[table]`` or ``[table]``."""
        if self.schema:
            return f"[{self.schema}].[{self.table_name}]"
        return f"[{self.table_name}]"

    def _single(self, key_type: KeyType) -> FieldMap | None:
        return next((f for f in self.all_keys if f.key_type is key_type), None)

    @property
    def identity_key(self) -> FieldMap | None:
        return self._single(KeyType.IDENTITY)

    @property
    def sequential_key(self) -> FieldMap | None:
        return self._single(KeyType.SEQUENTIAL)

    @property
    def assigned_keys(self) -> tuple[FieldMap, ...]:
        return tuple(f for f in self.all_keys if f.key_type is KeyType.ASSIGNED)

    @property
    def soft_delete_field(self) -> FieldMap | None:
        return next((f for f in self.fields.values() if f.is_soft_delete), None)

    @property
    def update_stamp_fields(self) -> tuple[FieldMap, ...]:
        """Date stamps re-stamped on update."""
        return tuple(f for f in self.date_stamp_fields if f.stamp_on_update)

    @property
    def default_sort(self) -> list[tuple[FieldMap, SortOrder]]:
        """All keys ascending."""
        return [(f, SortOrder.ASCENDING) for f in self.all_keys]

    def get_field(self, name: str) -> FieldMap | None:
        return self.fields.get(name)

    def values_of(self, obj: Any, maps: Iterable[FieldMap] | None = None) -> dict[str, Any]:
        """Read field values off an instance of the mapped type."""
        maps = self.select_fields if maps is None else maps
        return {f.field: getattr(obj, f.field) for f in maps}


def _count(maps: Iterable[FieldMap], predicate) -> int:
    return sum(1 for f in maps if predicate(f))


def _validate(name: str, maps: tuple[FieldMap, ...]) -> None:
    keys = [f for f in maps if f.is_key]
    identities = _count(keys, lambda f: f.key_type is KeyType.IDENTITY)

    if identities > 1:
        msg = f"{name} can only define a single Identity key."
        raise ConfigurationError(msg)
    if identities == 1 and len(keys) > 1:
        msg = f"{name} combines an Identity key with other keys, which is not supported."
        raise ConfigurationError(msg)
    if _count(keys, lambda f: f.key_type is KeyType.SEQUENTIAL) > 1:
        msg = f"{name} can only define a single Sequential key."
        raise ConfigurationError(msg)
    if _count(maps, lambda f: f.is_soft_delete) > 1:
        msg = f"{name} can only define a single soft delete field."
        raise ConfigurationError(msg)


def build_type_map(cls: type) -> TypeMap:
    """
    Build the type map for a dataclass.

    Parameters
    ----------
    cls : type
        Dataclass whose fields carry optional ``Annotated`` mapping markers

    Returns
    -------
    TypeMap
        Immutable type map

    Raises
    ------
    ConfigurationError
        If the type is not a dataclass or its markers conflict
    """
    if not (isinstance(cls, type) and dataclasses.is_dataclass(cls)):
        msg = f"{cls!r} is not a dataclass type and cannot be mapped."
        raise ConfigurationError(msg)

    try:
        hints = get_type_hints(cls, include_extras=True)
    except NameError as exc:
        msg = f"Cannot resolve field annotations of {cls.__qualname__}: {exc}"
        raise ConfigurationError(msg) from exc

    maps = []
    for dc_field in dataclasses.fields(cls):
        field_map = load_field_map(cls.__name__, dc_field.name, hints[dc_field.name])
        if field_map is not None:
            maps.append(field_map)

    if not maps:
        msg = f"{cls.__qualname__} has no mapped fields."
        raise ConfigurationError(msg)

    _validate(cls.__qualname__, tuple(maps))

    info = get_table_info(cls)
    type_map = TypeMap(
        type=cls,
        table_name=info.name,
        schema=info.schema,
        fields={f.field: f for f in maps},
    )
    logger.debug(
        f"Built type map for {type_map.name}: {type_map.table_identifier}, "
        f"keys={[f.field for f in type_map.all_keys]}"
    )
    return type_map
