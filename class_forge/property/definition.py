"""Property definitions.

A PropertyDefinition normalizes the declared definition mapping of one
property: it merges the type's base schema with the declared attributes
(declared values win), runs ``validate_<attribute>`` for every attribute and
checks the required attributes of the type.

Wire format::

    {"type": "boolean", "value": True, "nullable": False, "writable": True,
     "accessors": True, "watcher": None, ...type-specific attributes}
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Any, ClassVar

from class_forge.core.exceptions import InvalidArgumentError, InvalidPropertyOptionError
from class_forge.core.tools import MISSING, copy_value, is_plain_object

if TYPE_CHECKING:
    from class_forge.property.base import PropertyType

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])([A-Z])")


def attribute_method_suffix(attribute: str) -> str:
    """Map a definition attribute to its method suffix ("className" -> "class_name")."""
    return _CAMEL_BOUNDARY.sub(r"_\1", attribute).lower()


class PropertyDefinition:
    """Normalized configuration of one property.

    Args:
        prop: The PropertyType this definition belongs to.
        definition: Declared definition mapping.
    """

    default_nullable: ClassVar[bool] = True

    def __init__(self, prop: PropertyType, definition: dict[str, Any]) -> None:
        if not is_plain_object(definition):
            raise InvalidArgumentError(
                "property_definition", definition, "a plain object with a 'type' key"
            )
        self._property = prop
        self._data: dict[str, Any] = dict(definition)

    def get_property(self) -> PropertyType:
        return self._property

    def get_data(self) -> dict[str, Any]:
        return self._data

    def get_base_data(self) -> dict[str, Any]:
        """Base schema of the definition; declared attributes override it."""
        return {
            "type": None,
            "value": MISSING,
            "nullable": None,
            "writable": True,
            "accessors": True,
            "watcher": None,
        }

    def get_required_attributes(self) -> list[str]:
        return ["type"]

    # --- Lifecycle ---

    def process(self) -> None:
        """Merge the base schema with the declared attributes."""
        base = self.get_base_data()
        for attribute, value in self._data.items():
            if attribute not in base:
                raise InvalidPropertyOptionError(
                    attribute, str(self._property), f"one of {sorted(base)}", value
                )
        base.update(self._data)
        self._data = base

        watcher = self._data.get("watcher")
        if callable(watcher):
            self._property.add_watcher(watcher)

    def validate(self) -> None:
        """Validate every attribute; the default value is checked last."""
        for attribute in self.get_required_attributes():
            value = self._data.get(attribute, MISSING)
            if value is MISSING or value is None:
                raise InvalidPropertyOptionError(
                    attribute, str(self._property), "specified (required option)", value
                )
        for attribute, value in self._data.items():
            if attribute == "value":
                continue
            getattr(self, f"validate_{attribute_method_suffix(attribute)}")(value)
        self.validate_value(self._data.get("value", MISSING))

    def _invalid(self, attribute: str, value: Any, expected: str) -> InvalidPropertyOptionError:
        return InvalidPropertyOptionError(attribute, str(self._property), expected, value)

    # --- type ---

    def validate_type(self, value: Any) -> None:
        if not isinstance(value, str):
            raise self._invalid("type", value, "a string")

    def get_type(self) -> str:
        return self._data["type"]

    # --- value ---

    def validate_value(self, value: Any) -> None:
        if value is MISSING:
            return
        self._property.validate(value)

    def set_value(self, value: Any) -> None:
        self.validate_value(value)
        self._data["value"] = value

    def is_value_declared(self) -> bool:
        return self._data.get("value", MISSING) is not MISSING

    def get_value(self) -> Any:
        """Default value: the declared ``value`` or the type's empty value."""
        value = self._data.get("value", MISSING)
        if value is MISSING:
            return self.get_empty_value()
        return copy_value(value)

    def get_empty_value(self) -> Any:
        if self.is_nullable():
            return None
        return self.get_not_null_empty_value()

    def get_not_null_empty_value(self) -> Any:
        return None

    # --- nullable ---

    def validate_nullable(self, value: Any) -> None:
        if value is not None and not isinstance(value, bool):
            raise self._invalid("nullable", value, "a boolean or None")

    def is_nullable(self) -> bool:
        nullable = self._data.get("nullable")
        return self.default_nullable if nullable is None else nullable

    # --- writable ---

    def validate_writable(self, value: Any) -> None:
        if not isinstance(value, bool):
            raise self._invalid("writable", value, "a boolean")

    def is_writable(self) -> bool:
        return bool(self._data.get("writable", True))

    # --- accessors ---

    def validate_accessors(self, value: Any) -> None:
        if not isinstance(value, bool):
            raise self._invalid("accessors", value, "a boolean")

    def set_accessors(self, value: bool) -> None:
        self.validate_accessors(value)
        self._data["accessors"] = value

    def is_accessors(self) -> bool:
        return bool(self._data.get("accessors", True))

    # --- watcher ---

    def validate_watcher(self, value: Any) -> None:
        if value is not None and not callable(value):
            raise self._invalid("watcher", value, "a callable or None")


class BooleanDefinition(PropertyDefinition):
    default_nullable = False

    def get_not_null_empty_value(self) -> Any:
        return False


class StringDefinition(PropertyDefinition):
    def get_base_data(self) -> dict[str, Any]:
        data = super().get_base_data()
        data["pattern"] = None
        return data

    def get_not_null_empty_value(self) -> Any:
        return ""

    def validate_pattern(self, value: Any) -> None:
        if value is None:
            return
        if not isinstance(value, str):
            raise self._invalid("pattern", value, "a regular expression string or None")
        try:
            re.compile(value)
        except re.error as e:
            raise self._invalid("pattern", value, f"a valid regular expression ({e})") from e

    def get_pattern(self) -> str | None:
        return self._data.get("pattern")


class NumberDefinition(PropertyDefinition):
    def get_base_data(self) -> dict[str, Any]:
        data = super().get_base_data()
        data["minValue"] = None
        data["maxValue"] = None
        return data

    def get_not_null_empty_value(self) -> Any:
        return 0

    def _validate_bound(self, attribute: str, value: Any) -> None:
        if value is not None and (isinstance(value, bool) or not isinstance(value, (int, float))):
            raise self._invalid(attribute, value, "a number or None")

    def validate_min_value(self, value: Any) -> None:
        self._validate_bound("minValue", value)

    def validate_max_value(self, value: Any) -> None:
        self._validate_bound("maxValue", value)
        min_value = self.get_min_value()
        if value is not None and min_value is not None and value < min_value:
            raise self._invalid("maxValue", value, f"a number not less than minValue ({min_value})")

    def get_min_value(self) -> float | None:
        return self._data.get("minValue")

    def get_max_value(self) -> float | None:
        return self._data.get("maxValue")


class ObjectDefinition(PropertyDefinition):
    def get_not_null_empty_value(self) -> Any:
        return {}


class UntypedDefinition(PropertyDefinition):
    pass


class ClassReferenceDefinition(PropertyDefinition):
    """Definition of a property holding an instance of a named class."""

    def get_base_data(self) -> dict[str, Any]:
        data = super().get_base_data()
        data["className"] = None
        return data

    def get_required_attributes(self) -> list[str]:
        return super().get_required_attributes() + ["className"]

    def get_empty_value(self) -> Any:
        return None

    def validate_nullable(self, value: Any) -> None:
        super().validate_nullable(value)
        if value is False:
            raise self._invalid("nullable", value, "True or None (class references are nullable)")

    def validate_class_name(self, value: Any) -> None:
        if not isinstance(value, str) or not value:
            raise self._invalid("className", value, "a non-empty class name")
        class_manager = self._property.get_property_manager().get_class_manager()
        if class_manager is not None and not class_manager.isset_class(value):
            raise self._invalid("className", value, "a name of a registered class")

    def get_class_name(self) -> str:
        return self._data["className"]


class MapDefinition(PropertyDefinition):
    """Definition of a structured plain object with typed children."""

    default_nullable = False

    def get_base_data(self) -> dict[str, Any]:
        data = super().get_base_data()
        data["schema"] = None
        return data

    def get_required_attributes(self) -> list[str]:
        return super().get_required_attributes() + ["schema"]

    def get_not_null_empty_value(self) -> Any:
        return self._property.get_children_defaults()

    def validate_schema(self, value: Any) -> None:
        if not is_plain_object(value) or not value:
            raise self._invalid("schema", value, "a non-empty plain object with property definitions")
        for child_name, child_definition in value.items():
            if not isinstance(child_name, str) or not is_plain_object(child_definition):
                raise self._invalid(
                    "schema", value, "a plain object mapping names to property definitions"
                )

    def get_schema(self) -> dict[str, Any]:
        return self._data["schema"]

    def process(self) -> None:
        super().process()
        schema = self._data.get("schema")
        if is_plain_object(schema):
            self.validate_schema(schema)
            for child_name, child_definition in schema.items():
                self._property.add_child(child_name, copy_value(child_definition))


class MixedDefinition(PropertyDefinition):
    """Definition of a property accepting any of several property types."""

    def get_base_data(self) -> dict[str, Any]:
        data = super().get_base_data()
        data["allows"] = []
        return data

    def get_required_attributes(self) -> list[str]:
        return super().get_required_attributes() + ["allows"]

    def get_empty_value(self) -> Any:
        return None if self.is_nullable() else False

    def validate_allows(self, value: Any) -> None:
        if not isinstance(value, list) or not value:
            raise self._invalid(
                "allows", value, "a non-empty list with definitions of the allowed property types"
            )
        for allowed in value:
            if not is_plain_object(allowed):
                raise self._invalid("allows", value, "a list of property definitions")

    def get_allows(self) -> list[dict[str, Any]]:
        return self._data["allows"]

    def get_allows_names(self) -> list[str]:
        return [allowed.get("type") for allowed in self.get_allows()]

    def process(self) -> None:
        super().process()
        allows = self._data.get("allows")
        if isinstance(allows, list):
            self.validate_allows(allows)
            for allowed in allows:
                self._property.add_allowed_type(copy_value(allowed))


class CollectionDefinition(PropertyDefinition):
    """Definition of a collection whose items share the ``proto`` definition."""

    default_nullable = False

    def get_base_data(self) -> dict[str, Any]:
        data = super().get_base_data()
        data["proto"] = None
        return data

    def get_required_attributes(self) -> list[str]:
        return super().get_required_attributes() + ["proto"]

    def validate_proto(self, value: Any) -> None:
        if not is_plain_object(value) or "type" not in value:
            raise self._invalid("proto", value, "a property definition with a 'type' key")

    def get_proto(self) -> dict[str, Any]:
        return self._data["proto"]

    def process(self) -> None:
        super().process()
        proto = self._data.get("proto")
        self.validate_proto(proto)
        self._property.create_proto(copy_value(proto))


class ArrayCollectionDefinition(CollectionDefinition):
    def get_not_null_empty_value(self) -> Any:
        return []


class ObjectCollectionDefinition(CollectionDefinition):
    def get_not_null_empty_value(self) -> Any:
        return {}
