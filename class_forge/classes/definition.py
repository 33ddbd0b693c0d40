"""Class definitions.

A ClassDefinition wraps the declaration mapping of one class. Option keys
start with ``$_``; every other key is an instance method (callable) or a data
field copied onto each instance.

    {
        "$_extends": "App/Base",
        "$_properties": {"name": {"type": "string"}},
        "$_traits": ["App/Timestamps"],
        "$_implements": ["App/Runnable"],
        "run": lambda self: ...,
        "counter": 0,
    }

Each option ``$_<option>`` has a ``validate_<option>`` method checking its
shape and a ``process_<option>`` method applying it to the owning ClassType.
A variant forbids an option by overriding its validator to raise.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Callable

from class_forge.core.enums import ClassVariant
from class_forge.core.exceptions import InvalidArgumentError, InvalidClassOptionError
from class_forge.core.tools import copy_value, extend_deep, is_plain_object

if TYPE_CHECKING:
    from class_forge.classes.class_type import ClassType


OPTION_PREFIX = "$_"

# Order in which options are applied to the ClassType.
PROCESS_ORDER: tuple[str, ...] = (
    "extends",
    "properties",
    "requires",
    "traits",
    "implements",
    "abstract",
    "includes",
    "static",
    "constructor",
)

RESERVED_MEMBER_NAMES: frozenset[str] = frozenset({"_properties_store", "_sealed"})


def option_key(option: str) -> str:
    return f"{OPTION_PREFIX}{option}"


def is_option_key(key: str) -> bool:
    return isinstance(key, str) and key.startswith(OPTION_PREFIX)


# --- Helper methods baked into class declarations ---


def _get_class_manager(self: Any) -> Any:
    return self.get_class().get_class_manager()


def _has_trait(self: Any, trait_name: str) -> bool:
    return bool(self.get_class().has_trait(trait_name))


def _is_implements(self: Any, interface_name: str) -> bool:
    return bool(self.get_class().is_implements(interface_name))


def _get_copy(self: Any) -> Any:
    return self.get_class().copy_instance(self)


def _config_set_values(self: Any, values: dict[str, Any]) -> None:
    """Deep-merge values into the fields of a config instance."""
    if not is_plain_object(values):
        raise InvalidArgumentError("values", values, "a plain object")
    defaults = self.get_class().get_data_fields()
    for name, value in values.items():
        if name not in defaults:
            raise InvalidArgumentError(
                "values", values, f"a plain object with keys of {sorted(defaults)}"
            )
        current = getattr(self, name)
        if is_plain_object(value) and is_plain_object(current):
            extend_deep(current, value)
        else:
            setattr(self, name, copy_value(value))


def _config_get_values(self: Any) -> dict[str, Any]:
    return {
        name: copy_value(getattr(self, name)) for name in self.get_class().get_data_fields()
    }


def _config_get_defaults(self: Any) -> dict[str, Any]:
    return self.get_class().get_data_fields()


def _config_get_schema_defaults(self: Any) -> dict[str, Any]:
    return copy_value(self.get_class().get_definition().get_no_methods())


class ClassDefinition:
    """Declaration of a class of the ``Class`` variant.

    Args:
        class_type: Owning ClassType.
        declaration: Declaration mapping.
    """

    def __init__(self, class_type: ClassType, declaration: dict[str, Any]) -> None:
        if not is_plain_object(declaration):
            raise InvalidArgumentError("declaration", declaration, "a plain object")
        self._class_type = class_type
        self._declared: dict[str, Any] = dict(declaration)
        self._data: dict[str, Any] = dict(declaration)

    def get_class(self) -> ClassType:
        return self._class_type

    def get_class_name(self) -> str:
        return self._class_type.get_name()

    def get_data(self) -> dict[str, Any]:
        return self._data

    def get_declared_data(self) -> dict[str, Any]:
        """The declaration as registered, without the base skeleton."""
        return self._declared

    def get_base_data(self) -> dict[str, Any]:
        """Skeleton of the declaration; declared values override it."""
        return {
            "$_extends": None,
            "$_properties": {},
            "$_requires": {},
            "$_traits": [],
            "$_implements": [],
            "$_static": {},
            "$_constructor": None,
            "get_class_manager": _get_class_manager,
            "has_trait": _has_trait,
            "is_implements": _is_implements,
            "get_copy": _get_copy,
        }

    def merge_base_data(self) -> None:
        """Reset the working data to the base skeleton merged with the declaration."""
        data = self.get_base_data()
        data.update(self._declared)
        self._data = data

    def reset(self) -> None:
        self._data = dict(self._declared)

    # --- Validation ---

    def _invalid(
        self, option: str, expected: str, received: Any = None, detail: str | None = None
    ) -> InvalidClassOptionError:
        return InvalidClassOptionError(
            option, self.get_class_name(), expected, received, detail=detail
        )

    def _forbidden(self, option: str, detail: str) -> InvalidClassOptionError:
        return self._invalid(option_key(option), "not specified", detail=detail)

    def validate_data(self) -> None:
        """Run the validator of every option and check member names."""
        for key, value in self._data.items():
            if not isinstance(key, str) or not key:
                raise self._invalid(str(key), "a non-empty string key", key)
            if not is_option_key(key):
                self.validate_member(key, value)
                continue
            validator = getattr(self, f"validate_{key[len(OPTION_PREFIX):]}", None)
            if validator is None:
                raise self._invalid(key, "a known option", detail="Unknown option.")
            validator(value)

    def validate_member(self, name: str, value: Any) -> None:
        if name in RESERVED_MEMBER_NAMES or (name.startswith("__") and name.endswith("__")):
            raise self._invalid(name, "a member name not reserved by the instance base class")

    def _validate_name_list(self, option: str, value: Any) -> None:
        if value is None:
            return
        if not isinstance(value, (list, tuple)) or not all(
            isinstance(name, str) and name for name in value
        ):
            raise self._invalid(option_key(option), "a list of class names", value)

    def _validate_mapping(self, option: str, value: Any, expected: str) -> None:
        if value is not None and not is_plain_object(value):
            raise self._invalid(option_key(option), expected, value)

    def validate_extends(self, value: Any) -> None:
        if value is None:
            return
        if not isinstance(value, str) or not value:
            raise self._invalid("$_extends", "a name of the parent class or None", value)
        if value == self.get_class_name():
            raise self._invalid(
                "$_extends", "a name of another class", value, detail="Class can't extend itself."
            )

    def validate_properties(self, value: Any) -> None:
        self._validate_mapping("properties", value, "a plain object with property definitions")
        for name, definition in (value or {}).items():
            if not isinstance(name, str) or not is_plain_object(definition):
                raise self._invalid(
                    "$_properties", "a plain object mapping names to property definitions", value
                )

    def validate_requires(self, value: Any) -> None:
        self._validate_mapping("requires", value, "a plain object mapping aliases to class names")
        for alias, class_name in (value or {}).items():
            if not isinstance(alias, str) or not isinstance(class_name, str) or not class_name:
                raise self._invalid(
                    "$_requires", "a plain object mapping aliases to class names", value
                )

    def validate_traits(self, value: Any) -> None:
        self._validate_name_list("traits", value)

    def validate_implements(self, value: Any) -> None:
        self._validate_name_list("implements", value)

    def validate_abstract(self, value: Any) -> None:
        raise self._forbidden("abstract", "Only abstract classes can declare abstract methods.")

    def validate_includes(self, value: Any) -> None:
        raise self._forbidden("includes", "Only configs can include other configs.")

    def validate_static(self, value: Any) -> None:
        self._validate_mapping("static", value, "a plain object with static members")

    def validate_constructor(self, value: Any) -> None:
        if value is not None and not callable(value):
            raise self._invalid("$_constructor", "a callable or None", value)

    # --- Relatives ---

    def get_relatives(self) -> list[str]:
        """Names of every class this declaration references."""
        data = self._data
        relatives: list[str] = []
        if isinstance(data.get("$_extends"), str):
            relatives.append(data["$_extends"])
        for option in ("$_traits", "$_implements", "$_includes"):
            relatives.extend(name for name in data.get(option) or [] if isinstance(name, str))
        requires = data.get("$_requires")
        if is_plain_object(requires):
            relatives.extend(name for name in requires.values() if isinstance(name, str))
        return relatives

    def process_relatives(self) -> None:
        class_manager = self._class_type.get_class_manager()
        for class_name in self.get_relatives():
            class_manager.add_to_load_stack(class_name)

    def _resolve_relative(
        self, option: str, class_name: str, variants: tuple[ClassVariant, ...]
    ) -> ClassType:
        relative = self._class_type.get_class_manager().get_class(class_name)
        if relative.variant not in variants:
            allowed = " or ".join(f"'{v.value}'" for v in variants)
            raise self._invalid(
                option_key(option),
                f"names of classes with type {allowed}",
                class_name,
                detail=(
                    f"Class '{class_name}' has type '{relative.variant.value}', "
                    f"expected {allowed}."
                ),
            )
        return relative

    # --- Processing ---

    def process_data(self) -> None:
        """Apply the options to the owning ClassType in PROCESS_ORDER."""
        for option in PROCESS_ORDER:
            key = option_key(option)
            if key in self._data:
                getattr(self, f"process_{option}")(self._data[key])

    def process_extends(self, value: str | None) -> None:
        self._class_type.set_parent(value)

    def process_properties(self, value: dict[str, Any] | None) -> None:
        for name, definition in (value or {}).items():
            self._class_type.add_property(name, copy_value(definition))

    def process_requires(self, value: dict[str, str] | None) -> None:
        class_manager = self._class_type.get_class_manager()
        for alias, class_name in (value or {}).items():
            class_manager.get_class(class_name)
            if alias not in self._class_type.get_properties():
                self._class_type.add_property(alias, {"type": "untyped"})

    def _adopt_properties(self, relative: ClassType) -> None:
        own = self._class_type.get_properties()
        for name, prop in relative.get_properties(True).items():
            if name not in own:
                self._class_type.add_property(name, copy_value(prop.get_definition().get_data()))

    def process_traits(self, value: list[str] | None) -> None:
        for trait_name in value or []:
            trait = self._resolve_relative("traits", trait_name, (ClassVariant.TRAIT,))
            trait.get_constructor()
            self._adopt_properties(trait)

    def process_implements(self, value: list[str] | None) -> None:
        for interface_name in value or []:
            interface = self._resolve_relative(
                "implements", interface_name, (ClassVariant.INTERFACE,)
            )
            interface.get_constructor()
            self._adopt_properties(interface)

    def process_abstract(self, value: dict[str, Callable[..., Any]] | None) -> None:
        for method_name, method in (value or {}).items():
            self._class_type.add_abstract_method(method_name, method)

    def process_includes(self, value: list[str] | None) -> None:
        for include_name in value or []:
            self._resolve_relative("includes", include_name, (ClassVariant.CONFIG,)).get_constructor()

    def process_static(self, value: dict[str, Any] | None) -> None:
        for name in value or {}:
            if name in self._class_type.get_properties(True):
                raise self._invalid(
                    "$_static", "static members not named like typed properties", name
                )

    def process_constructor(self, value: Callable[..., Any] | None) -> None:
        pass

    # --- Accessors ---

    def get_extends(self) -> str | None:
        return self._data.get("$_extends")

    def get_traits(self) -> list[str]:
        return list(self._data.get("$_traits") or [])

    def get_implements(self) -> list[str]:
        return list(self._data.get("$_implements") or [])

    def get_includes(self) -> list[str]:
        return list(self._data.get("$_includes") or [])

    def get_abstract(self) -> dict[str, Callable[..., Any]]:
        return dict(self._data.get("$_abstract") or {})

    def get_static(self) -> dict[str, Any]:
        return dict(self._data.get("$_static") or {})

    def get_requires(self) -> dict[str, str]:
        return dict(self._data.get("$_requires") or {})

    def get_constructor_method(self) -> Callable[..., Any] | None:
        return self._data.get("$_constructor")

    def get_methods(self) -> dict[str, Callable[..., Any]]:
        """Non-option members that are callable."""
        return {
            name: value
            for name, value in self._data.items()
            if not is_option_key(name) and callable(value)
        }

    def get_no_methods(self, with_inherited: bool = False) -> dict[str, Any]:
        """Non-option members that are plain data fields."""
        fields: dict[str, Any] = {}
        parent = self._class_type.get_parent()
        if with_inherited and parent is not None:
            fields.update(parent.get_definition().get_no_methods(True))
        fields.update(
            {
                name: value
                for name, value in self._data.items()
                if not is_option_key(name) and not callable(value)
            }
        )
        return fields


class AbstractClassDefinition(ClassDefinition):
    """Class definition that may declare ``$_abstract`` methods."""

    def get_base_data(self) -> dict[str, Any]:
        data = super().get_base_data()
        data["$_abstract"] = {}
        for helper in ("get_class_manager", "has_trait", "is_implements", "get_copy"):
            del data[helper]
        return data

    def validate_abstract(self, value: Any) -> None:
        self._validate_mapping("abstract", value, "a plain object with methods or None")
        for method in (value or {}).values():
            if not callable(method):
                raise self._invalid("$_abstract", "a plain object with methods or None", value)


class InterfaceDefinition(ClassDefinition):
    """Interface declaration; every method it declares is abstract."""

    def get_base_data(self) -> dict[str, Any]:
        return {"$_extends": None, "$_properties": {}}

    def validate_abstract(self, value: Any) -> None:
        raise self._forbidden(
            "abstract", "All methods specified in an interface are abstract by default."
        )

    def validate_implements(self, value: Any) -> None:
        raise self._forbidden(
            "implements", "Interface can't implement interfaces, extend another interface instead."
        )

    def validate_traits(self, value: Any) -> None:
        raise self._forbidden("traits", "Interface can't contain traits.")

    def validate_static(self, value: Any) -> None:
        raise self._forbidden("static", "Interface can't contain static members.")

    def validate_requires(self, value: Any) -> None:
        raise self._forbidden("requires", "Interface can't require classes.")

    def validate_constructor(self, value: Any) -> None:
        raise self._forbidden("constructor", "Interface can't declare a constructor.")


class TraitDefinition(ClassDefinition):
    """Trait declaration: properties and methods mixed into classes."""

    def get_base_data(self) -> dict[str, Any]:
        return {"$_extends": None, "$_properties": {}, "$_traits": []}

    def validate_abstract(self, value: Any) -> None:
        raise self._forbidden("abstract", "Trait can't contain abstract methods.")

    def validate_implements(self, value: Any) -> None:
        raise self._forbidden("implements", "Trait can't implement interfaces.")

    def validate_static(self, value: Any) -> None:
        raise self._forbidden("static", "Trait can't contain static members.")

    def validate_requires(self, value: Any) -> None:
        raise self._forbidden("requires", "Trait can't require classes.")

    def validate_constructor(self, value: Any) -> None:
        raise self._forbidden("constructor", "Trait can't declare a constructor.")


class ConfigDefinition(ClassDefinition):
    """Config declaration.

    Data fields are the config schema with its default values. Configs listed
    in ``$_includes`` are deep-merged under the own fields.
    """

    def get_base_data(self) -> dict[str, Any]:
        data = super().get_base_data()
        for option in ("$_properties", "$_static", "$_requires", "$_traits", "$_implements"):
            del data[option]
        data["$_includes"] = []
        data["set_values"] = _config_set_values
        data["get_values"] = _config_get_values
        data["get_defaults"] = _config_get_defaults
        data["get_schema_defaults"] = _config_get_schema_defaults
        return data

    def validate_properties(self, value: Any) -> None:
        raise self._forbidden("properties", "Config can't contain typed properties.")

    def validate_static(self, value: Any) -> None:
        raise self._forbidden("static", "Config can't contain static members.")

    def validate_abstract(self, value: Any) -> None:
        raise self._forbidden("abstract", "Config can't contain abstract methods.")

    def validate_implements(self, value: Any) -> None:
        raise self._forbidden("implements", "Config can't implement interfaces.")

    def validate_requires(self, value: Any) -> None:
        raise self._forbidden("requires", "Config can't require classes.")

    def validate_traits(self, value: Any) -> None:
        raise self._forbidden("traits", "Config can't contain traits.")

    def validate_includes(self, value: Any) -> None:
        self._validate_name_list("includes", value)
