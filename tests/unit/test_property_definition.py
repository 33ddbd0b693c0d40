"""Unit tests for property definitions."""

from __future__ import annotations

import pytest

from class_forge.core.exceptions import InvalidPropertyOptionError, InvalidValueError
from class_forge.core.registry import ClassManager
from class_forge.property.definition import attribute_method_suffix
from class_forge.property.manager import PropertyManager


class TestAttributeSuffix:
    def test_camel_case(self) -> None:
        assert attribute_method_suffix("className") == "class_name"
        assert attribute_method_suffix("minValue") == "min_value"
        assert attribute_method_suffix("type") == "type"


class TestBaseData:
    def test_declared_values_override_base(self, property_manager: PropertyManager) -> None:
        prop = property_manager.create_property("n", {"type": "number", "writable": False})
        data = prop.get_definition().get_data()
        assert data["writable"] is False
        assert data["accessors"] is True
        assert data["nullable"] is None
        assert "minValue" in data

    def test_unknown_attribute(self, property_manager: PropertyManager) -> None:
        with pytest.raises(InvalidPropertyOptionError) as exc_info:
            property_manager.create_property("n", {"type": "number", "pattern": "x"})
        assert exc_info.value.option == "pattern"

    @pytest.mark.parametrize(
        ("definition", "option"),
        [
            ({"type": "number", "writable": "yes"}, "writable"),
            ({"type": "number", "accessors": 1}, "accessors"),
            ({"type": "number", "nullable": "no"}, "nullable"),
            ({"type": "number", "watcher": 5}, "watcher"),
            ({"type": "number", "minValue": "0"}, "minValue"),
            ({"type": "number", "minValue": 5, "maxValue": 1}, "maxValue"),
            ({"type": "string", "pattern": "("}, "pattern"),
        ],
    )
    def test_invalid_options(
        self, property_manager: PropertyManager, definition: dict, option: str
    ) -> None:
        with pytest.raises(InvalidPropertyOptionError) as exc_info:
            property_manager.create_property("p", definition)
        assert exc_info.value.option == option

    def test_declared_value_is_validated(self, property_manager: PropertyManager) -> None:
        with pytest.raises(InvalidValueError):
            property_manager.create_property("flag", {"type": "boolean", "value": "yes"})

    def test_default_value_is_copied(self, property_manager: PropertyManager) -> None:
        prop = property_manager.create_property("data", {"type": "object", "value": {"a": [1]}})
        first = prop.get_default_value()
        first["a"].append(2)
        assert prop.get_default_value() == {"a": [1]}


class TestRequiredAttributes:
    @pytest.mark.parametrize(
        ("definition", "option"),
        [
            ({"type": "class"}, "className"),
            ({"type": "mixed"}, "allows"),
            ({"type": "map"}, "schema"),
            ({"type": "arrayCollection"}, "proto"),
        ],
    )
    def test_missing_required(
        self, property_manager: PropertyManager, definition: dict, option: str
    ) -> None:
        with pytest.raises(InvalidPropertyOptionError) as exc_info:
            property_manager.create_property("p", definition)
        assert exc_info.value.option == option

    def test_mixed_allows_must_not_be_empty(self, property_manager: PropertyManager) -> None:
        with pytest.raises(InvalidPropertyOptionError):
            property_manager.create_property("p", {"type": "mixed", "allows": []})

    def test_class_reference_must_name_registered_class(self, manager: ClassManager) -> None:
        with pytest.raises(InvalidPropertyOptionError, match="registered class"):
            manager.get_property_manager().create_property(
                "owner", {"type": "class", "className": "Missing"}
            )

    def test_class_reference_can_not_be_not_nullable(self, manager: ClassManager) -> None:
        manager.register_class("User", "Class", {})
        with pytest.raises(InvalidPropertyOptionError) as exc_info:
            manager.get_property_manager().create_property(
                "owner", {"type": "class", "className": "User", "nullable": False}
            )
        assert exc_info.value.option == "nullable"


class TestNestedAccessors:
    def test_nested_properties_have_no_accessors(self, property_manager: PropertyManager) -> None:
        prop = property_manager.create_property("point", {
            "type": "map", "schema": {"x": {"type": "number"}},
        })
        child = prop.get_child("x")
        assert child is not None
        assert child.get_definition().is_accessors() is False
        assert child.get_name_full() == "point.x"
        assert prop.get_definition().is_accessors() is True
