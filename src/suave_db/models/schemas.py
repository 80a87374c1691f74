"""Pydantic schemas for the CLI boundary.

Type maps are plain frozen dataclasses internally. These schemas exist only
to validate and export them as JSON.

Examples
--------
>>> from suave_db.models.schemas import TypeMapResponse
>>> response = TypeMapResponse.from_type_map(default_registry.get(City))
>>> print(response.model_dump_json(indent=2))
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

if TYPE_CHECKING:
    from suave_db.map.type_map import TypeMap

__all__ = [
    "FieldMapResponse",
    "TypeMapResponse",
]


def _type_name(value: Any) -> str:
    if isinstance(value, str):
        return value
    return getattr(value, "__name__", repr(value))


class FieldMapResponse(BaseModel):
    """Schema for exporting a FieldMap."""

    model_config = ConfigDict(from_attributes=True)

    field: str
    column: str
    key_type: str
    python_type: str
    is_editable: bool
    is_read_only: bool
    is_required: bool
    is_date_stamp: bool
    stamp_on_update: bool
    is_soft_delete: bool
    inserted_value: Any = None
    deleted_value: Any = None

    @field_validator("key_type", mode="before")
    @classmethod
    def _key_type_value(cls, value: Any) -> str:
        return getattr(value, "value", value)

    @field_validator("python_type", mode="before")
    @classmethod
    def _python_type_name(cls, value: Any) -> str:
        return _type_name(value)


class TypeMapResponse(BaseModel):
    """
    Schema for exporting a TypeMap.

    Use :meth:`from_type_map` rather than ``model_validate`` so the derived
    views are filled in.
    """

    model_config = ConfigDict(from_attributes=True)

    name: str
    table_name: str
    schema_name: str | None = Field(default=None, description="Database schema")
    table_identifier: str
    keys: list[str] = Field(default_factory=list, description="Key fields in order")
    default_sort: list[str] = Field(default_factory=list)
    fields: list[FieldMapResponse]

    @classmethod
    def from_type_map(cls, type_map: TypeMap) -> TypeMapResponse:
        return cls(
            name=type_map.name,
            table_name=type_map.table_name,
            schema_name=type_map.schema,
            table_identifier=type_map.table_identifier,
            keys=[f.field for f in type_map.all_keys],
            default_sort=[f"{f.field} {order.sql}" for f, order in type_map.default_sort],
            fields=[FieldMapResponse.model_validate(f) for f in type_map.fields.values()],
        )
