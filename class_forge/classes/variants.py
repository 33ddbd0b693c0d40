"""Class variants: Class, AbstractClass, Interface, Trait and Config."""

from __future__ import annotations

from class_forge.classes.class_type import ClassType
from class_forge.classes.definition import (
    AbstractClassDefinition,
    ClassDefinition,
    ConfigDefinition,
    InterfaceDefinition,
    TraitDefinition,
)
from class_forge.core.enums import ClassVariant


class Class(ClassType):
    variant = ClassVariant.CLASS
    definition_class = ClassDefinition


class AbstractClass(ClassType):
    """Class that can't be instantiated and may declare abstract methods."""

    variant = ClassVariant.ABSTRACT_CLASS
    definition_class = AbstractClassDefinition
    instantiable = False


class Interface(ClassType):
    """Set of methods (and typed properties) implementing classes must define.

    Interfaces are checked when an implementing class is instantiated.
    """

    variant = ClassVariant.INTERFACE
    definition_class = InterfaceDefinition
    parent_variants = (ClassVariant.INTERFACE,)
    instantiable = False


class Trait(ClassType):
    """Methods and typed properties copied into the classes using it."""

    variant = ClassVariant.TRAIT
    definition_class = TraitDefinition
    parent_variants = (ClassVariant.TRAIT,)
    instantiable = False


class Config(ClassType):
    variant = ClassVariant.CONFIG
    definition_class = ConfigDefinition
    parent_variants = (ClassVariant.CONFIG,)


DEFAULT_CLASS_TYPES: tuple[type[ClassType], ...] = (
    Class,
    AbstractClass,
    Interface,
    Trait,
    Config,
)
