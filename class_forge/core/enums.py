"""Class variant enumeration."""

from __future__ import annotations

from enum import Enum


class ClassVariant(Enum):
    """Kinds of class declarations."""

    CLASS = "Class"
    ABSTRACT_CLASS = "AbstractClass"
    INTERFACE = "Interface"
    TRAIT = "Trait"
    CONFIG = "Config"
