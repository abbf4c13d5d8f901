"""
Tests for deep key-casing conversion.
"""

from datetime import datetime, timezone
from decimal import Decimal

import pytest

from storage_sync.infrastructure.http.case_transcoder import (
    camel_to_snake,
    snake_to_camel,
    to_internal,
    to_wire,
)


class TestKeyConversion:
    """Single-key rules."""

    @pytest.mark.parametrize(
        ("snake", "camel"),
        [
            ("physical_location_id", "physicalLocationId"),
            ("bg_color", "bgColor"),
            ("name", "name"),
            ("item_2_count", "item_2Count"),
        ],
    )
    def test_snake_to_camel(self, snake, camel):
        assert snake_to_camel(snake) == camel

    def test_camel_to_snake(self):
        assert camel_to_snake("parentLocationBgColor") == "parent_location_bg_color"

    def test_underscore_before_digit_is_kept(self):
        """Only an underscore followed by a lowercase letter is collapsed."""
        assert snake_to_camel("address_2") == "address_2"

    def test_underscored_internal_key_does_not_round_trip(self):
        """Internal keys that already contain underscores are outside the bijection."""
        assert to_internal(to_wire({"legacy_key": 1})) == {"legacyKey": 1}


class TestDeepConversion:
    """Recursive conversion over JSON-like values."""

    def test_nested_dicts_and_lists(self):
        wire = {
            "physical_locations": [
                {"physical_location_id": "p1", "map_coordinates": {"google_maps_link": "x"}}
            ],
            "sublocations": [],
        }
        assert to_internal(wire) == {
            "physicalLocations": [
                {"physicalLocationId": "p1", "mapCoordinates": {"googleMapsLink": "x"}}
            ],
            "sublocations": [],
        }

    def test_values_are_never_rewritten(self):
        assert to_internal({"bg_color": "dark_red"}) == {"bgColor": "dark_red"}

    def test_scalars_and_objects_pass_through(self):
        stamp = datetime(2024, 1, 1, tzinfo=timezone.utc)
        value = {"created_at": stamp, "cost": Decimal("1.50"), "n": None}
        converted = to_internal(value)
        assert converted["createdAt"] is stamp
        assert converted["cost"] == Decimal("1.50")
        assert converted["n"] is None
        assert to_wire("plain") == "plain"
        assert to_wire(3) == 3

    def test_list_order_and_length_preserved(self):
        values = [{"aB": 1}, {"cD": 2}, 3]
        assert to_wire(values) == [{"a_b": 1}, {"c_d": 2}, 3]

    def test_tuples_map_element_wise(self):
        assert to_wire(({"itemCount": 1},)) == ({"item_count": 1},)

    def test_does_not_mutate_input(self):
        original = {"parentLocationId": "p1"}
        to_wire(original)
        assert original == {"parentLocationId": "p1"}

    def test_bounded_round_trip(self):
        value = {
            "physicalLocations": [
                {"id": "p1", "mapCoordinates": {"coords": "1,2"}, "bgColor": "red"}
            ],
            "metadata": {"itemsByLocation2": [1, 2, {"deepKey": True}]},
        }
        assert to_internal(to_wire(value)) == value
