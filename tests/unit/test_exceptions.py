"""Unit tests for the exception hierarchy."""

from __future__ import annotations

import pytest

from class_forge.core.exceptions import (
    AbstractInstantiationError,
    ClassForgeError,
    ClassNotFoundError,
    CyclicExtendsError,
    DuplicateClassError,
    DuplicateRegistrationError,
    DuplicateTypeError,
    InvalidArgumentError,
    InvalidClassOptionError,
    InvalidValueError,
    UnknownClassTypeError,
    UnknownPropertyTypeError,
    UnknownTypeError,
    UnresolvedExtendsError,
    UnresolvedReferenceError,
)


class TestHierarchy:
    @pytest.mark.parametrize(
        ("error", "base"),
        [
            (UnknownPropertyTypeError("foo", "bar"), UnknownTypeError),
            (UnknownClassTypeError("foo"), UnknownTypeError),
            (DuplicateTypeError("foo"), DuplicateRegistrationError),
            (DuplicateClassError("foo"), DuplicateRegistrationError),
            (ClassNotFoundError("foo"), UnresolvedReferenceError),
            (UnresolvedExtendsError("a", "b"), UnresolvedReferenceError),
            (CyclicExtendsError(["a", "a"]), ClassForgeError),
            (AbstractInstantiationError("A", "reason"), ClassForgeError),
        ],
    )
    def test_inherits(self, error: Exception, base: type) -> None:
        assert isinstance(error, base)
        assert isinstance(error, ClassForgeError)


class TestMessages:
    def test_invalid_argument_carries_fields(self) -> None:
        err = InvalidArgumentError("name", 5, "a string")
        assert err.argument == "name"
        assert err.received == 5
        assert err.expected == "a string"
        assert "Value with type 'int'" in str(err)

    def test_invalid_class_option(self) -> None:
        err = InvalidClassOptionError("$_traits", "App/User", "a list of class names", "oops")
        assert err.option == "$_traits"
        assert err.class_name == "App/User"
        assert "App/User" in str(err)
        assert "a list of class names" in str(err)

    def test_invalid_class_option_detail_replaces_expected(self) -> None:
        err = InvalidClassOptionError("$_abstract", "Cfg", "not specified", detail="Nope.")
        assert str(err).endswith("Nope.")

    def test_invalid_value(self) -> None:
        err = InvalidValueError("items.0", "a string", {}, "App/List")
        assert err.property_name == "items.0"
        assert err.class_name == "App/List"
        assert "Plain object was received instead." in str(err)

    def test_cyclic_chain(self) -> None:
        err = CyclicExtendsError(["a", "b", "a"])
        assert "a -> b -> a" in str(err)
