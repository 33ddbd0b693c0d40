"""Typed property layer - property types, definitions and collections."""

from __future__ import annotations

from class_forge.property.base import PropertyAccessor, PropertyStore, PropertyType
from class_forge.property.collection import (
    ArrayCollection,
    ArrayCollectionType,
    Collection,
    CollectionManager,
    CollectionType,
    ObjectCollection,
    ObjectCollectionType,
)
from class_forge.property.definition import PropertyDefinition
from class_forge.property.manager import PropertyManager
from class_forge.property.protocol import PropertyContext
from class_forge.property.types import (
    BooleanType,
    ClassReferenceType,
    MapType,
    MixedType,
    NumberType,
    ObjectType,
    StringType,
    UntypedType,
)

__all__ = [
    "PropertyManager",
    "PropertyType",
    "PropertyDefinition",
    "PropertyStore",
    "PropertyAccessor",
    "PropertyContext",
    "BooleanType",
    "StringType",
    "NumberType",
    "ObjectType",
    "ClassReferenceType",
    "MapType",
    "MixedType",
    "UntypedType",
    "CollectionType",
    "ArrayCollectionType",
    "ObjectCollectionType",
    "Collection",
    "ArrayCollection",
    "ObjectCollection",
    "CollectionManager",
]
