"""Unit tests for the fluent class builders."""

from __future__ import annotations

from typing import Any

import pytest

from class_forge.classes.builder import (
    AbstractClassBuilder,
    ClassBuilder,
    ConfigBuilder,
    InterfaceBuilder,
    TraitBuilder,
)
from class_forge.core.enums import ClassVariant
from class_forge.core.exceptions import InvalidArgumentError
from class_forge.core.registry import ClassManager


def greet(self: Any) -> str:
    return f"Hi {self.name}"


class TestClassBuilder:
    def test_build_declaration(self, manager: ClassManager) -> None:
        declaration = (
            ClassBuilder(manager, "App/User")
            .set_parent("App/Model")
            .add_property("name", {"type": "string"})
            .add_method("greet", greet)
            .set_traits(["App/Timestamps"])
            .set_interfaces(["App/Greeter"])
            .add_static("TABLE", "users")
            .set_requires({"Model": "App/Model"})
            .build()
        )
        assert declaration == {
            "$_extends": "App/Model",
            "$_properties": {"name": {"type": "string"}},
            "greet": greet,
            "$_traits": ["App/Timestamps"],
            "$_implements": ["App/Greeter"],
            "$_static": {"TABLE": "users"},
            "$_requires": {"Model": "App/Model"},
        }

    def test_build_returns_copy(self, manager: ClassManager) -> None:
        builder = ClassBuilder(manager, "A").add_property("n", {"type": "number"})
        declaration = builder.build()
        declaration["$_properties"]["n"]["type"] = "string"
        assert builder.get_properties() == {"n": {"type": "number"}}

    def test_save_registers_class(self, manager: ClassManager) -> None:
        class_type = (
            manager.build_class(ClassVariant.CLASS, "User")
            .add_property("name", {"type": "string", "value": "Ann"})
            .add_method("greet", greet)
            .save()
        )
        assert manager.get_class("User") is class_type
        assert class_type.create_instance().greet() == "Hi Ann"

    def test_save_redefines_existing_class(self, manager: ClassManager) -> None:
        manager.register_class("User", ClassVariant.CLASS, {"greet": greet})
        class_type = (
            manager.alter_class("User")
            .add_property("name", {"type": "string", "value": "Bob"})
            .save()
        )
        assert class_type is manager.get_class("User")
        assert class_type.create_instance().greet() == "Hi Bob"

    def test_save_rejects_other_variant(self, manager: ClassManager) -> None:
        manager.register_class("Thing", ClassVariant.TRAIT, {})
        with pytest.raises(InvalidArgumentError):
            ClassBuilder(manager, "Thing").save()

    def test_save_requires_name(self, manager: ClassManager) -> None:
        with pytest.raises(InvalidArgumentError):
            ClassBuilder(manager).save()

    def test_members(self, manager: ClassManager) -> None:
        builder = ClassBuilder(manager, "A").add_methods({"greet": greet, "other": greet})
        builder.remove_method("other")
        assert builder.get_methods() == {"greet": greet}
        builder.add_interfaces(["I"]).add_interfaces(["I", "J"])
        assert builder.get_interfaces() == ["I", "J"]
        builder.add_traits(["T"]).add_traits(["T"])
        assert builder.get_traits() == ["T"]
        builder.set_static({"X": 1})
        assert builder.get_static() == {"X": 1}
        builder.remove_property("missing")
        assert builder.get_properties() == {}

    @pytest.mark.parametrize(
        "step",
        [
            lambda b: b.set_name(""),
            lambda b: b.set_parent(5),
            lambda b: b.add_method("$_extends", greet),
            lambda b: b.add_method("greet", "not callable"),
            lambda b: b.add_methods({"greet": 1}),
            lambda b: b.add_property("", {"type": "string"}),
            lambda b: b.add_property("name", "string"),
            lambda b: b.set_traits("T"),
            lambda b: b.set_interfaces([1]),
            lambda b: b.set_static([]),
            lambda b: b.set_constructor("init"),
            lambda b: b.set_requires({"alias": 1}),
        ],
    )
    def test_invalid_arguments(self, manager: ClassManager, step: Any) -> None:
        with pytest.raises(InvalidArgumentError):
            step(ClassBuilder(manager, "A"))


class TestVariantBuilders:
    def test_build_class_picks_builder(self, manager: ClassManager) -> None:
        assert isinstance(manager.build_class("Class"), ClassBuilder)
        assert isinstance(manager.build_class(ClassVariant.ABSTRACT_CLASS), AbstractClassBuilder)
        assert isinstance(manager.build_class("Interface"), InterfaceBuilder)
        assert isinstance(manager.build_class("Trait"), TraitBuilder)
        assert isinstance(manager.build_class("Config"), ConfigBuilder)

    def test_abstract_methods(self, manager: ClassManager) -> None:
        builder = AbstractClassBuilder(manager, "Shape").set_abstract_methods({"area": greet})
        builder.add_abstract_method("perimeter", greet)
        builder.remove_abstract_method("area")
        assert builder.get_abstract_methods() == {"perimeter": greet}
        class_type = builder.save()
        assert class_type.variant is ClassVariant.ABSTRACT_CLASS

    def test_config_defaults(self, manager: ClassManager) -> None:
        config = (
            ConfigBuilder(manager, "db")
            .add_defaults({"host": "localhost", "port": 5432})
            .set_includes(["base"])
            .add_includes(["base", "extra"])
        )
        assert config.get_includes() == ["base", "extra"]
        assert config.build() == {
            "host": "localhost",
            "port": 5432,
            "$_includes": ["base", "extra"],
        }
        with pytest.raises(InvalidArgumentError):
            config.add_default("hook", greet)

    def test_interface_builder(self, manager: ClassManager) -> None:
        class_type = (
            InterfaceBuilder(manager, "Greeter")
            .add_method("greet", greet)
            .add_property("name", {"type": "string"})
            .save()
        )
        assert class_type.get_interface_methods() == ["greet"]
