"""class_forge exception hierarchy.

Every failure raised by the class and property engine derives from
ClassForgeError. Writes to non-writable properties are not errors: they are
logged as warnings and dropped.
"""

from __future__ import annotations

from typing import Any

from class_forge.core.tools import describe_value


class ClassForgeError(Exception):
    """Base exception for all class_forge errors."""


class InvalidArgumentError(ClassForgeError):
    """Raised when a public method receives a value of the wrong shape."""

    def __init__(self, argument: str, received: Any, expected: str) -> None:
        self.argument = argument
        self.received = received
        self.expected = expected
        super().__init__(
            f"Invalid value of argument '{argument}'. It must be {expected}. "
            f"{describe_value(received)}"
        )


# --- Declarations ---


class InvalidClassOptionError(ClassForgeError):
    """Raised when a declared class option fails variant-specific validation."""

    def __init__(
        self,
        option: str,
        class_name: str,
        expected: str,
        received: Any = None,
        detail: str | None = None,
    ) -> None:
        self.option = option
        self.class_name = class_name
        self.expected = expected
        self.received = received
        message = f"Invalid option '{option}' in definition of class '{class_name}'. "
        if detail:
            message += detail
        else:
            message += f"It must be {expected}. {describe_value(received)}"
        super().__init__(message)


class InvalidPropertyOptionError(ClassForgeError):
    """Raised when an attribute of a property definition is not valid."""

    def __init__(self, option: str, property_name: str, expected: str, received: Any) -> None:
        self.option = option
        self.property_name = property_name
        self.expected = expected
        self.received = received
        super().__init__(
            f"Invalid value of option '{option}' in definition of property {property_name}. "
            f"It must be {expected}. {describe_value(received)}"
        )


class ReservedNameError(ClassForgeError):
    """Raised when a reserved property name is declared."""

    def __init__(self, property_name: str, reserved: list[str]) -> None:
        self.property_name = property_name
        self.reserved = reserved
        super().__init__(
            f"Property name '{property_name}' is not allowed. Reserved names: {reserved}"
        )


# --- Registries ---


class UnknownTypeError(ClassForgeError):
    """Base for lookups of unregistered type names."""


class UnknownPropertyTypeError(UnknownTypeError):
    """Raised when a property definition names an unregistered type."""

    def __init__(self, type_name: Any, property_name: str) -> None:
        self.type_name = type_name
        self.property_name = property_name
        super().__init__(f"Unknown property type '{type_name}' in definition of '{property_name}'")


class UnknownClassTypeError(UnknownTypeError):
    """Raised when a class is registered with an unknown variant."""

    def __init__(self, type_name: Any) -> None:
        self.type_name = type_name
        super().__init__(f"Unknown class type '{type_name}'")


class DuplicateRegistrationError(ClassForgeError):
    """Base for registering the same name twice."""


class DuplicateTypeError(DuplicateRegistrationError):
    """Raised when a property type or class type name is registered twice."""

    def __init__(self, type_name: str) -> None:
        self.type_name = type_name
        super().__init__(f"Type '{type_name}' is already registered")


class DuplicateClassError(DuplicateRegistrationError):
    """Raised when a class name is registered twice."""

    def __init__(self, class_name: str) -> None:
        self.class_name = class_name
        super().__init__(f"Class '{class_name}' is already registered")


# --- Resolution ---


class UnresolvedReferenceError(ClassForgeError):
    """Base for references to targets that do not exist."""


class ClassNotFoundError(UnresolvedReferenceError):
    """Raised when a class name cannot be found in the class manager."""

    def __init__(self, class_name: str) -> None:
        self.class_name = class_name
        super().__init__(f"Trying to get non-existent class '{class_name}'")


class PropertyNotFoundError(UnresolvedReferenceError):
    """Raised when a typed property is missing from a class."""

    def __init__(self, property_name: str, class_name: str) -> None:
        self.property_name = property_name
        self.class_name = class_name
        super().__init__(
            f"Trying to get non-existent property '{property_name}' in class '{class_name}'"
        )


class ItemNotFoundError(UnresolvedReferenceError):
    """Raised when a collection item key does not exist."""

    def __init__(self, key: Any, property_name: str) -> None:
        self.key = key
        self.property_name = property_name
        super().__init__(f"Collection {property_name} has no item with key '{key}'")


class UnresolvedExtendsError(UnresolvedReferenceError):
    """Raised when a collection item extends a non-existent item."""

    def __init__(self, item_key: str, extends: Any) -> None:
        self.item_key = item_key
        self.extends = extends
        super().__init__(
            f"Trying to extend collection item '{item_key}' by non-existent "
            f"item with key '{extends}'"
        )


class CyclicExtendsError(ClassForgeError):
    """Raised when collection items extend each other in a cycle."""

    def __init__(self, chain: list[str]) -> None:
        self.chain = chain
        super().__init__(f"Cyclic 'extends' chain in collection items: {' -> '.join(chain)}")


# --- Values and instances ---


class InvalidValueError(ClassForgeError):
    """Raised when a value fails the validation of a typed property."""

    def __init__(
        self,
        property_name: str,
        expected: str,
        value: Any,
        class_name: str | None = None,
    ) -> None:
        self.property_name = property_name
        self.expected = expected
        self.value = value
        self.class_name = class_name
        location = f" in class '{class_name}'" if class_name else ""
        super().__init__(
            f"The value of the property '{property_name}'{location} must be {expected}. "
            f"{describe_value(value)}"
        )


class AbstractInstantiationError(ClassForgeError):
    """Raised when a non-instantiable class is instantiated."""

    def __init__(self, class_name: str, detail: str) -> None:
        self.class_name = class_name
        super().__init__(f"Can't create instance of class '{class_name}': {detail}")
