"""Property context protocol.

Every object that holds typed property values (class instances and
collections) exposes a PropertyStore under ``_properties_store``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from class_forge.property.base import PropertyStore


@runtime_checkable
class PropertyContext(Protocol):
    """Holder of typed property values."""

    _properties_store: PropertyStore
