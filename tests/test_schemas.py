"""Tests for Pydantic schemas (CLI boundary)."""

from __future__ import annotations

from records import DateStampTest, SoftDeleteTest
from suave_db.map import build_type_map
from suave_db.models import FieldMapResponse, TypeMapResponse


class TestFieldMapResponse:
    """Test FieldMap export."""

    def test_from_attributes(self) -> None:
        field_map = build_type_map(DateStampTest).fields["insert_date"]
        response = FieldMapResponse.model_validate(field_map)
        assert response.field == "insert_date"
        assert response.python_type == "datetime"
        assert response.key_type == "not_a_key"
        assert response.is_date_stamp
        assert not response.stamp_on_update


class TestTypeMapResponse:
    """Test TypeMap export."""

    def test_from_type_map(self) -> None:
        response = TypeMapResponse.from_type_map(build_type_map(SoftDeleteTest))
        assert response.schema_name == "Suave"
        assert response.table_identifier == "[Suave].[SoftDeleteTest]"
        assert response.keys == ["soft_delete_id"]
        assert response.default_sort == ["soft_delete_id ASC"]
        soft_delete = response.fields[1]
        assert (soft_delete.inserted_value, soft_delete.deleted_value) == (1, 0)

    def test_json_round_trip(self) -> None:
        response = TypeMapResponse.from_type_map(build_type_map(DateStampTest))
        restored = TypeMapResponse.model_validate_json(response.model_dump_json())
        assert restored == response
