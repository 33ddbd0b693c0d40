"""Fluent class builders.

Builders assemble a declaration mapping step by step instead of writing it
by hand::

    manager.build_class(ClassVariant.CLASS, "App/User") \\
        .set_parent("App/Model") \\
        .add_property("name", {"type": "string"}) \\
        .add_method("greet", lambda self: f"Hi {self.name}") \\
        .save()

``build()`` returns the declaration, ``save()`` registers it (or redefines
the class when it already exists) and returns the ClassType.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Callable

from class_forge.core.enums import ClassVariant
from class_forge.core.exceptions import InvalidArgumentError
from class_forge.core.tools import copy_value, is_plain_object

if TYPE_CHECKING:
    from class_forge.classes.class_type import ClassType
    from class_forge.core.registry import ClassManager


def _validate_name_list(argument: str, names: Any) -> list[str]:
    if not isinstance(names, (list, tuple)) or not all(
        isinstance(name, str) and name for name in names
    ):
        raise InvalidArgumentError(argument, names, "a list of class names")
    return list(names)


def _validate_methods(argument: str, methods: Any) -> dict[str, Callable[..., Any]]:
    if not is_plain_object(methods) or not all(
        isinstance(name, str) and callable(method) for name, method in methods.items()
    ):
        raise InvalidArgumentError(argument, methods, "a plain object with methods")
    return dict(methods)


class ClassBuilderBase:
    """Shared part of all builders: name, parent, members, build and save."""

    variant: ClassVariant = ClassVariant.CLASS

    def __init__(
        self,
        class_manager: ClassManager,
        class_name: str | None = None,
        declaration: dict[str, Any] | None = None,
    ) -> None:
        self._class_manager = class_manager
        self._name: str | None = None
        self._declaration: dict[str, Any] = {}
        if class_name is not None:
            self.set_name(class_name)
        if declaration is not None:
            if not is_plain_object(declaration):
                raise InvalidArgumentError("declaration", declaration, "a plain object")
            self._declaration = copy_value(declaration)

    def set_name(self, class_name: str) -> ClassBuilderBase:
        if not isinstance(class_name, str) or not class_name:
            raise InvalidArgumentError("class_name", class_name, "a non-empty string")
        self._name = class_name
        return self

    def get_name(self) -> str | None:
        return self._name

    def set_parent(self, parent_name: str | None) -> ClassBuilderBase:
        if parent_name is not None and (not isinstance(parent_name, str) or not parent_name):
            raise InvalidArgumentError("parent_name", parent_name, "a name of the parent class or None")
        self._declaration["$_extends"] = parent_name
        return self

    def get_parent(self) -> str | None:
        return self._declaration.get("$_extends")

    def add_method(self, method_name: str, method: Callable[..., Any]) -> ClassBuilderBase:
        if not isinstance(method_name, str) or not method_name or method_name.startswith("$_"):
            raise InvalidArgumentError("method_name", method_name, "a method name")
        if not callable(method):
            raise InvalidArgumentError("method", method, "a callable")
        self._declaration[method_name] = method
        return self

    def add_methods(self, methods: dict[str, Callable[..., Any]]) -> ClassBuilderBase:
        for method_name, method in _validate_methods("methods", methods).items():
            self.add_method(method_name, method)
        return self

    def get_methods(self) -> dict[str, Callable[..., Any]]:
        return {
            name: value
            for name, value in self._declaration.items()
            if not name.startswith("$_") and callable(value)
        }

    def remove_method(self, method_name: str) -> ClassBuilderBase:
        if callable(self._declaration.get(method_name)):
            del self._declaration[method_name]
        return self

    def build(self) -> dict[str, Any]:
        """Return a copy of the assembled declaration."""
        return copy_value(self._declaration)

    def save(self) -> ClassType:
        """Register the class, or redefine it when the name is taken."""
        if self._name is None:
            raise InvalidArgumentError("class_name", None, "set with set_name() before saving")
        manager = self._class_manager
        if manager.isset_class(self._name):
            class_type = manager.get_class(self._name)
            if class_type.variant is not self.variant:
                raise InvalidArgumentError(
                    "class_name",
                    self._name,
                    f"a name of a class with type '{self.variant.value}'",
                )
            class_type.set_definition(self.build())
            return class_type
        return manager.register_class(self._name, self.variant, self.build())


class PropertiesMixin:
    """Typed property declarations (``$_properties``)."""

    _declaration: dict[str, Any]

    def set_properties(self, properties: dict[str, dict[str, Any]]) -> Any:
        self._declaration["$_properties"] = {}
        return self.add_properties(properties)

    def add_properties(self, properties: dict[str, dict[str, Any]]) -> Any:
        if not is_plain_object(properties):
            raise InvalidArgumentError("properties", properties, "a plain object with property definitions")
        for name, definition in properties.items():
            self.add_property(name, definition)
        return self

    def add_property(self, property_name: str, definition: dict[str, Any]) -> Any:
        if not isinstance(property_name, str) or not property_name:
            raise InvalidArgumentError("property_name", property_name, "a non-empty string")
        if not is_plain_object(definition):
            raise InvalidArgumentError("definition", definition, "a property definition")
        self._declaration.setdefault("$_properties", {})[property_name] = copy_value(definition)
        return self

    def remove_property(self, property_name: str) -> Any:
        self._declaration.get("$_properties", {}).pop(property_name, None)
        return self

    def get_properties(self) -> dict[str, dict[str, Any]]:
        return dict(self._declaration.get("$_properties") or {})


class TraitsMixin:
    _declaration: dict[str, Any]

    def set_traits(self, traits: list[str]) -> Any:
        self._declaration["$_traits"] = _validate_name_list("traits", traits)
        return self

    def add_traits(self, traits: list[str]) -> Any:
        current = self._declaration.setdefault("$_traits", [])
        for name in _validate_name_list("traits", traits):
            if name not in current:
                current.append(name)
        return self

    def get_traits(self) -> list[str]:
        return list(self._declaration.get("$_traits") or [])


class ClassBuilder(ClassBuilderBase, PropertiesMixin, TraitsMixin):
    """Builder of ``Class`` declarations."""

    def set_static(self, static: dict[str, Any]) -> ClassBuilder:
        if not is_plain_object(static):
            raise InvalidArgumentError("static", static, "a plain object with static members")
        self._declaration["$_static"] = dict(static)
        return self

    def add_static(self, name: str, value: Any) -> ClassBuilder:
        if not isinstance(name, str) or not name:
            raise InvalidArgumentError("name", name, "a non-empty string")
        self._declaration.setdefault("$_static", {})[name] = value
        return self

    def get_static(self) -> dict[str, Any]:
        return dict(self._declaration.get("$_static") or {})

    def set_constructor(self, constructor: Callable[..., Any] | None) -> ClassBuilder:
        if constructor is not None and not callable(constructor):
            raise InvalidArgumentError("constructor", constructor, "a callable or None")
        self._declaration["$_constructor"] = constructor
        return self

    def set_requires(self, requires: dict[str, str]) -> ClassBuilder:
        if not is_plain_object(requires) or not all(
            isinstance(alias, str) and isinstance(name, str) and name
            for alias, name in requires.items()
        ):
            raise InvalidArgumentError("requires", requires, "a plain object mapping aliases to class names")
        self._declaration["$_requires"] = dict(requires)
        return self

    def set_interfaces(self, interfaces: list[str]) -> ClassBuilder:
        self._declaration["$_implements"] = _validate_name_list("interfaces", interfaces)
        return self

    def add_interfaces(self, interfaces: list[str]) -> ClassBuilder:
        current = self._declaration.setdefault("$_implements", [])
        for name in _validate_name_list("interfaces", interfaces):
            if name not in current:
                current.append(name)
        return self

    def get_interfaces(self) -> list[str]:
        return list(self._declaration.get("$_implements") or [])


class AbstractClassBuilder(ClassBuilder):
    variant = ClassVariant.ABSTRACT_CLASS

    def set_abstract_methods(self, methods: dict[str, Callable[..., Any]]) -> AbstractClassBuilder:
        self._declaration["$_abstract"] = _validate_methods("abstract_methods", methods)
        return self

    def add_abstract_methods(self, methods: dict[str, Callable[..., Any]]) -> AbstractClassBuilder:
        self._declaration.setdefault("$_abstract", {}).update(
            _validate_methods("abstract_methods", methods)
        )
        return self

    def add_abstract_method(
        self, method_name: str, method: Callable[..., Any]
    ) -> AbstractClassBuilder:
        return self.add_abstract_methods({method_name: method})

    def get_abstract_methods(self) -> dict[str, Callable[..., Any]]:
        return dict(self._declaration.get("$_abstract") or {})

    def remove_abstract_method(self, method_name: str) -> AbstractClassBuilder:
        self._declaration.get("$_abstract", {}).pop(method_name, None)
        return self


class InterfaceBuilder(ClassBuilderBase, PropertiesMixin):
    variant = ClassVariant.INTERFACE


class TraitBuilder(ClassBuilderBase, PropertiesMixin, TraitsMixin):
    variant = ClassVariant.TRAIT


class ConfigBuilder(ClassBuilderBase):
    """Builder of ``Config`` declarations; data fields are the config defaults."""

    variant = ClassVariant.CONFIG

    def set_includes(self, includes: list[str]) -> ConfigBuilder:
        self._declaration["$_includes"] = _validate_name_list("includes", includes)
        return self

    def add_includes(self, includes: list[str]) -> ConfigBuilder:
        current = self._declaration.setdefault("$_includes", [])
        for name in _validate_name_list("includes", includes):
            if name not in current:
                current.append(name)
        return self

    def get_includes(self) -> list[str]:
        return list(self._declaration.get("$_includes") or [])

    def add_default(self, name: str, value: Any) -> ConfigBuilder:
        if not isinstance(name, str) or not name or name.startswith("$_") or callable(value):
            raise InvalidArgumentError("name", name, "a field name with a non-callable value")
        self._declaration[name] = copy_value(value)
        return self

    def add_defaults(self, values: dict[str, Any]) -> ConfigBuilder:
        if not is_plain_object(values):
            raise InvalidArgumentError("values", values, "a plain object")
        for name, value in values.items():
            self.add_default(name, value)
        return self


BUILDERS: dict[ClassVariant, type[ClassBuilderBase]] = {
    ClassVariant.CLASS: ClassBuilder,
    ClassVariant.ABSTRACT_CLASS: AbstractClassBuilder,
    ClassVariant.INTERFACE: InterfaceBuilder,
    ClassVariant.TRAIT: TraitBuilder,
    ClassVariant.CONFIG: ConfigBuilder,
}
