"""Tests for normalising call inputs into condition sets."""

from __future__ import annotations

from collections import namedtuple
from types import SimpleNamespace

import pytest

from records import City, DateStampTest, Element, ReadOnlyTest, SoftDeleteTest
from suave_db import ArgumentError, SortOrder
from suave_db.map import (
    Fields,
    Scalar,
    build_type_map,
    coalesce_conditions,
    coalesce_key,
    coalesce_sort,
    select_updates,
    to_property_bag,
)


@pytest.fixture
def city_map():
    return build_type_map(City)


@pytest.fixture
def element_map():
    return build_type_map(Element)


class TestPropertyBag:
    """Test classification of raw inputs."""

    def test_scalar(self) -> None:
        """Test bare values become Scalar."""
        assert to_property_bag(7) == Scalar(7)
        assert to_property_bag("PUP") == Scalar("PUP")

    def test_mapping(self) -> None:
        """Test mappings keep their order."""
        bag = to_property_bag({"area": "Hampshire", "city_code": "PUP"})
        assert bag == Fields((("area", "Hampshire"), ("city_code", "PUP")))

    def test_dataclass(self) -> None:
        """Test dataclass instances expose every field."""
        bag = to_property_bag(City(city_id=1, city_code="PUP"))
        assert bag.as_dict() == {
            "city_id": 1,
            "city_code": "PUP",
            "city_name": None,
            "area": None,
        }

    def test_attribute_objects(self) -> None:
        """Test namespaces and named tuples are field bags."""
        Point = namedtuple("Point", "booking_id itinerary_id")
        assert to_property_bag(SimpleNamespace(area="Kent")).as_dict() == {"area": "Kent"}
        assert to_property_bag(Point(1, 2)).as_dict() == {"booking_id": 1, "itinerary_id": 2}

    def test_none(self) -> None:
        """Test None is an empty bag."""
        assert to_property_bag(None) == Fields()
        assert len(to_property_bag(None)) == 0


class TestCoalesceKey:
    """Test key normalisation."""

    def test_bare_value_single_key(self, city_map) -> None:
        """Test a bare value of the key type identifies the row."""
        assert coalesce_key(city_map, 12) == {"city_id": 12}

    def test_bare_value_wrong_type(self, city_map) -> None:
        """Test a bare value of another type is rejected."""
        with pytest.raises(ArgumentError):
            coalesce_key(city_map, "12")
        with pytest.raises(ArgumentError):
            coalesce_key(city_map, True)

    def test_bare_value_composite_key(self, element_map) -> None:
        """Test a bare value cannot identify a composite key."""
        with pytest.raises(ArgumentError, match="booking_id"):
            coalesce_key(element_map, 1)

    def test_composite_key(self, element_map) -> None:
        """Test key fields are picked out in key order."""
        key = coalesce_key(
            element_map,
            {"element_id": 3, "element_title": "ignored", "booking_id": 1, "itinerary_id": 2},
        )
        assert key == {"booking_id": 1, "itinerary_id": 2, "element_id": 3}
        assert list(key) == ["booking_id", "itinerary_id", "element_id"]

    def test_missing_key_field(self, element_map) -> None:
        """Test a missing key field is an error."""
        with pytest.raises(ArgumentError, match="element_id"):
            coalesce_key(element_map, {"booking_id": 1, "itinerary_id": 2})

    def test_none(self, city_map) -> None:
        """Test a None key is an error."""
        with pytest.raises(ArgumentError):
            coalesce_key(city_map, None)

    def test_idempotent(self, element_map) -> None:
        """Test coalescing a coalesced key changes nothing."""
        key = coalesce_key(element_map, {"booking_id": 1, "itinerary_id": 2, "element_id": 3})
        assert coalesce_key(element_map, key) == key


class TestCoalesceConditions:
    """Test condition normalisation."""

    def test_valid(self, city_map) -> None:
        """Test known fields pass through in order."""
        assert coalesce_conditions(city_map, SimpleNamespace(area="Hampshire")) == {
            "area": "Hampshire"
        }

    def test_unknown_field(self, city_map) -> None:
        """Test unknown names are rejected."""
        with pytest.raises(ArgumentError, match="population"):
            coalesce_conditions(city_map, {"population": 10})

    def test_empty(self, city_map) -> None:
        """Test empty conditions need allow_empty."""
        with pytest.raises(ArgumentError, match="at least one field"):
            coalesce_conditions(city_map, {})
        with pytest.raises(ArgumentError):
            coalesce_conditions(city_map, None)
        assert coalesce_conditions(city_map, None, allow_empty=True) == {}

    def test_scalar_rejected(self, city_map) -> None:
        """Test a bare value is not a condition set."""
        with pytest.raises(ArgumentError):
            coalesce_conditions(city_map, 5)

    def test_idempotent(self, city_map) -> None:
        """Test coalescing a coalesced condition set changes nothing."""
        conditions = coalesce_conditions(city_map, {"area": "Kent", "city_code": "CAN"})
        assert coalesce_conditions(city_map, conditions) == conditions


class TestSelectUpdates:
    """Test update field filtering."""

    def test_drops_read_only(self) -> None:
        """Test read-only fields are dropped and editable ones kept."""
        type_map = build_type_map(ReadOnlyTest)
        selected = select_updates(
            type_map,
            {"sequential_id": 1, "editable": "x", "read_only_property": "y"},
        )
        assert [f.field for f in selected] == ["editable"]

    def test_drops_date_stamps(self) -> None:
        """Test date stamps are never taken from input."""
        type_map = build_type_map(DateStampTest)
        selected = select_updates(type_map, {"name": "a", "value": "b", "insert_date": None})
        assert [f.field for f in selected] == ["value"]

    def test_nothing_left(self) -> None:
        """Test a payload without updateable fields is an error."""
        type_map = build_type_map(SoftDeleteTest)
        with pytest.raises(ArgumentError, match="updateable"):
            select_updates(type_map, {"soft_delete_id": 1, "record_status": 0})


class TestCoalesceSort:
    """Test sort argument resolution."""

    def test_default(self, element_map) -> None:
        """Test an empty sort falls back to the key order."""
        assert coalesce_sort(element_map, None) == element_map.default_sort
        assert coalesce_sort(element_map, {}) == element_map.default_sort
        assert coalesce_sort(element_map, []) == element_map.default_sort

    def test_mapping(self, city_map) -> None:
        """Test a mapping of field to direction."""
        resolved = coalesce_sort(city_map, {"area": "desc", "city_name": SortOrder.ASCENDING})
        assert [(f.field, d) for f, d in resolved] == [
            ("area", SortOrder.DESCENDING),
            ("city_name", SortOrder.ASCENDING),
            ("city_id", SortOrder.ASCENDING),
        ]

    def test_sequence(self, city_map) -> None:
        """Test names and (name, direction) pairs."""
        resolved = coalesce_sort(city_map, ["area", ("city_id", "DESC")])
        assert [(f.field, d) for f, d in resolved] == [
            ("area", SortOrder.ASCENDING),
            ("city_id", SortOrder.DESCENDING),
        ]

    def test_single_name(self, city_map) -> None:
        """Test a single field name sorts ascending, then by key."""
        assert coalesce_sort(city_map, "area") == [
            (city_map.fields["area"], SortOrder.ASCENDING),
            (city_map.fields["city_id"], SortOrder.ASCENDING),
        ]

    def test_keys_break_ties(self, element_map) -> None:
        """Test keys missing from the sort are appended ascending in key order."""
        resolved = coalesce_sort(element_map, [("itinerary_id", "desc"), "element_title"])
        assert [(f.field, d) for f, d in resolved] == [
            ("itinerary_id", SortOrder.DESCENDING),
            ("element_title", SortOrder.ASCENDING),
            ("booking_id", SortOrder.ASCENDING),
            ("element_id", SortOrder.ASCENDING),
        ]

    def test_unknown_field(self, city_map) -> None:
        """Test unknown sort fields are rejected."""
        with pytest.raises(ArgumentError, match="population"):
            coalesce_sort(city_map, {"population": "asc"})

    def test_unknown_direction(self, city_map) -> None:
        """Test unknown directions are rejected."""
        with pytest.raises(ArgumentError, match="sideways"):
            coalesce_sort(city_map, {"area": "sideways"})

    @pytest.mark.parametrize(
        "sort",
        [[("area", "desc", "x")], [5], ["area", ("city_name",)], 5],
        ids=["triple", "number-item", "single", "number"],
    )
    def test_malformed(self, city_map, sort) -> None:
        """Test malformed sort items are rejected as caller errors."""
        with pytest.raises(ArgumentError, match="Invalid sort"):
            coalesce_sort(city_map, sort)
