"""Class plan data classes.

Frozen dataclasses describing a resolved class: the flattened member tables
that a ClassType computes from its declaration and its ancestry, and from
which the Python class is synthesized.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Callable

from class_forge.core.enums import ClassVariant

if TYPE_CHECKING:
    from class_forge.property.base import PropertyType


@dataclass(frozen=True)
class AccessorPlan:
    """Accessor methods installed for one typed property."""

    property_name: str
    getter: str | None = None
    setter: str | None = None
    checker: str | None = None

    @classmethod
    def from_installed(cls, property_name: str, installed: dict[str, str]) -> AccessorPlan:
        return cls(
            property_name,
            getter=installed.get("getter"),
            setter=installed.get("setter"),
            checker=installed.get("checker"),
        )


@dataclass(frozen=True)
class ClassPlan:
    """Resolved, flattened description of a class and its ancestry."""

    class_name: str
    variant: ClassVariant
    parent_name: str | None
    methods: dict[str, Callable[..., Any]]  # inherited, traits, own
    properties: dict[str, PropertyType]  # inherited + own, own wins
    accessors: dict[str, AccessorPlan]
    data_fields: dict[str, Any]
    abstract_methods: frozenset[str] = frozenset()
    interfaces: tuple[str, ...] = ()
    traits: tuple[str, ...] = ()
    requires: dict[str, str] = field(default_factory=dict)
    static: dict[str, Any] = field(default_factory=dict)
    constructor: Callable[..., Any] | None = None
