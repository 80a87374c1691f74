"""Mapping metadata: markers, field/type maps, registry and coalescing."""

from __future__ import annotations

__all__ = [
    # Markers
    "Column",
    "DateStamp",
    "Editable",
    "Key",
    "NotMapped",
    "ReadOnly",
    "Required",
    "SoftDelete",
    "table",
    # Maps
    "FieldMap",
    "TypeMap",
    "TypeMapRegistry",
    "build_type_map",
    "default_registry",
    # Coalescing
    "Fields",
    "Scalar",
    "coalesce_conditions",
    "coalesce_key",
    "coalesce_sort",
    "select_updates",
    "to_property_bag",
]

from .annotations import (
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
from .coalesce import (
    Fields,
    Scalar,
    coalesce_conditions,
    coalesce_key,
    coalesce_sort,
    select_updates,
    to_property_bag,
)
from .field_map import FieldMap
from .registry import TypeMapRegistry, default_registry
from .type_map import TypeMap, build_type_map
