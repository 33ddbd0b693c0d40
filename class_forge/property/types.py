"""Built-in scalar and structured property types."""

from __future__ import annotations

import re
from typing import Any

from class_forge.core.exceptions import InvalidValueError
from class_forge.core.tools import copy_value, generate_accessor_name, is_class_instance, is_plain_object
from class_forge.property.base import PropertyType
from class_forge.property.definition import (
    BooleanDefinition,
    ClassReferenceDefinition,
    MapDefinition,
    MixedDefinition,
    NumberDefinition,
    ObjectDefinition,
    StringDefinition,
    UntypedDefinition,
)

EXTENDS_KEY = "extends"


class BooleanType(PropertyType):
    """Accepts exactly True or False. Adds an ``is_<name>`` checker."""

    type_name = "boolean"
    definition_class = BooleanDefinition
    expected_description = "a boolean"

    def is_allowed_value(self, value: Any) -> bool:
        return isinstance(value, bool)

    def attach(self, namespace: dict[str, Any]) -> dict[str, str]:
        installed = super().attach(namespace)
        if "getter" in installed:
            checker_name = generate_accessor_name(self._config().checker_prefix, self._name)
            namespace[checker_name] = self._getter
            installed["checker"] = checker_name
        return installed


class StringType(PropertyType):
    type_name = "string"
    definition_class = StringDefinition
    expected_description = "a string"

    def is_allowed_value(self, value: Any) -> bool:
        if not isinstance(value, str):
            return False
        pattern = self._definition.get_pattern()
        return pattern is None or re.fullmatch(pattern, value) is not None

    def describe_expected(self) -> str:
        pattern = self._definition.get_pattern()
        expected = "a string"
        if pattern is not None:
            expected += f" matching pattern '{pattern}'"
        if self._definition.is_nullable():
            expected += " or None"
        return expected

    def is_empty(self, context: Any) -> bool:
        return not self.get_value(context)


class NumberType(PropertyType):
    """Accepts int and float values; bool is rejected."""

    type_name = "number"
    definition_class = NumberDefinition
    expected_description = "a number"

    def is_allowed_value(self, value: Any) -> bool:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return False
        min_value = self._definition.get_min_value()
        max_value = self._definition.get_max_value()
        if min_value is not None and value < min_value:
            return False
        if max_value is not None and value > max_value:
            return False
        return True

    def describe_expected(self) -> str:
        expected = "a number"
        min_value = self._definition.get_min_value()
        max_value = self._definition.get_max_value()
        if min_value is not None:
            expected += f" not less than {min_value}"
        if max_value is not None:
            expected += f" not greater than {max_value}"
        if self._definition.is_nullable():
            expected += " or None"
        return expected


class ObjectType(PropertyType):
    """Accepts plain objects (dicts)."""

    type_name = "object"
    definition_class = ObjectDefinition
    expected_description = "a plain object"

    def is_allowed_value(self, value: Any) -> bool:
        return is_plain_object(value)

    def is_empty(self, context: Any) -> bool:
        return not self.get_value(context)


class UntypedType(PropertyType):
    """Accepts any value."""

    type_name = "untyped"
    definition_class = UntypedDefinition
    expected_description = "any value"


class ClassReferenceType(PropertyType):
    """Accepts None or instances of the class named by ``className``."""

    type_name = "class"
    definition_class = ClassReferenceDefinition

    def is_allowed_value(self, value: Any) -> bool:
        return is_class_instance(value) and bool(
            value.is_instance_of(self._definition.get_class_name())
        )

    def describe_expected(self) -> str:
        return f"an instance of class '{self._definition.get_class_name()}' or None"


class MapType(PropertyType):
    """Plain object with a fixed set of typed children declared in ``schema``.

    Stored values always carry every schema key; missing keys are filled with
    the child defaults. Inside an object collection an item may also carry the
    ``extends`` marker.
    """

    type_name = "map"
    definition_class = MapDefinition

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        self._children: dict[str, PropertyType] = {}
        super().__init__(*args, **kwargs)

    def add_child(self, child_name: str, child_definition: dict[str, Any]) -> PropertyType:
        child = self._property_manager.create_property(
            child_name, child_definition, self._context_class, self
        )
        self._children[child_name] = child
        return child

    def get_children(self) -> dict[str, PropertyType]:
        return dict(self._children)

    def get_child(self, child_name: str) -> PropertyType | None:
        return self._children.get(child_name)

    def get_children_defaults(self) -> dict[str, Any]:
        return {name: child.get_default_value() for name, child in self._children.items()}

    def allows_extends(self) -> bool:
        return bool(getattr(self._context_property, "supports_extends", False))

    def describe_expected(self) -> str:
        expected = f"a plain object with keys {sorted(self._children)}"
        if self._definition.is_nullable():
            expected += " or None"
        return expected

    def validate(self, value: Any) -> None:
        if value is None and self._definition.is_nullable():
            return
        if not is_plain_object(value):
            raise self.invalid_value(value)
        for key, child_value in value.items():
            if key == EXTENDS_KEY and self.allows_extends():
                if child_value is not None and not isinstance(child_value, str):
                    raise InvalidValueError(
                        f"{self.get_name_full()}.{EXTENDS_KEY}",
                        "a key of another collection item or None",
                        child_value,
                        self.get_context_class_name(),
                    )
                continue
            child = self._children.get(key)
            if child is None:
                raise self.invalid_value(value)
            child.validate(child_value)

    def prepare_value(self, context: Any, value: Any) -> Any:
        if not is_plain_object(value):
            return value
        prepared = self.get_children_defaults()
        for key, child_value in value.items():
            prepared[key] = copy_value(child_value)
        return prepared

    def is_default_value(self, value: Any) -> bool:
        return bool(self.prepare_value(None, value) == self.get_default_value())


class MixedType(PropertyType):
    """Accepts values satisfying at least one of the ``allows`` definitions."""

    type_name = "mixed"
    definition_class = MixedDefinition
    names_nested = False

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        self._allowed_types: list[PropertyType] = []
        super().__init__(*args, **kwargs)

    def add_allowed_type(self, definition: dict[str, Any]) -> PropertyType:
        allowed = self._property_manager.create_property(
            self._name, definition, self._context_class, self
        )
        self._allowed_types.append(allowed)
        return allowed

    def get_allowed_types(self) -> list[PropertyType]:
        return list(self._allowed_types)

    def describe_expected(self) -> str:
        expected = "one of the types " + ", ".join(
            repr(name) for name in self._definition.get_allows_names()
        )
        if self._definition.is_nullable():
            expected += " or None"
        return expected

    def is_allowed_value(self, value: Any) -> bool:
        for allowed in self._allowed_types:
            try:
                allowed.validate(value)
            except InvalidValueError:
                continue
            return True
        return False
