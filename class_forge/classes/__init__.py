"""Class layer - definitions, class types, builders and plans."""

from __future__ import annotations

from class_forge.classes.builder import (
    AbstractClassBuilder,
    ClassBuilder,
    ConfigBuilder,
    InterfaceBuilder,
    TraitBuilder,
)
from class_forge.classes.class_type import ClassType
from class_forge.classes.definition import (
    AbstractClassDefinition,
    ClassDefinition,
    ConfigDefinition,
    InterfaceDefinition,
    TraitDefinition,
)
from class_forge.classes.instance import ClassInstance
from class_forge.classes.plan import AccessorPlan, ClassPlan
from class_forge.classes.variants import AbstractClass, Class, Config, Interface, Trait

__all__ = [
    "ClassType",
    "Class",
    "AbstractClass",
    "Interface",
    "Trait",
    "Config",
    "ClassDefinition",
    "AbstractClassDefinition",
    "InterfaceDefinition",
    "TraitDefinition",
    "ConfigDefinition",
    "ClassInstance",
    "ClassPlan",
    "AccessorPlan",
    "ClassBuilder",
    "AbstractClassBuilder",
    "InterfaceBuilder",
    "TraitBuilder",
    "ConfigBuilder",
]
