"""class_forge - declarative class composition engine with typed properties."""

from __future__ import annotations

from class_forge.classes import (
    AbstractClass,
    AbstractClassBuilder,
    Class,
    ClassBuilder,
    ClassInstance,
    ClassPlan,
    ClassType,
    Config,
    ConfigBuilder,
    Interface,
    InterfaceBuilder,
    Trait,
    TraitBuilder,
)
from class_forge.core.config import ClassManagerConfig
from class_forge.core.enums import ClassVariant
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
    InvalidPropertyOptionError,
    InvalidValueError,
    ItemNotFoundError,
    PropertyNotFoundError,
    ReservedNameError,
    UnknownClassTypeError,
    UnknownPropertyTypeError,
    UnknownTypeError,
    UnresolvedExtendsError,
    UnresolvedReferenceError,
)
from class_forge.core.registry import ClassManager
from class_forge.property import (
    ArrayCollection,
    Collection,
    ObjectCollection,
    PropertyManager,
    PropertyType,
)

__all__ = [
    # Registry
    "ClassManager",
    "ClassManagerConfig",
    "PropertyManager",
    # Classes
    "ClassVariant",
    "ClassType",
    "Class",
    "AbstractClass",
    "Interface",
    "Trait",
    "Config",
    "ClassInstance",
    "ClassPlan",
    # Builders
    "ClassBuilder",
    "AbstractClassBuilder",
    "InterfaceBuilder",
    "TraitBuilder",
    "ConfigBuilder",
    # Properties
    "PropertyType",
    "Collection",
    "ArrayCollection",
    "ObjectCollection",
    # Exceptions
    "ClassForgeError",
    "InvalidArgumentError",
    "InvalidClassOptionError",
    "InvalidPropertyOptionError",
    "ReservedNameError",
    "UnknownTypeError",
    "UnknownPropertyTypeError",
    "UnknownClassTypeError",
    "DuplicateRegistrationError",
    "DuplicateTypeError",
    "DuplicateClassError",
    "UnresolvedReferenceError",
    "ClassNotFoundError",
    "PropertyNotFoundError",
    "ItemNotFoundError",
    "UnresolvedExtendsError",
    "CyclicExtendsError",
    "InvalidValueError",
    "AbstractInstantiationError",
]
