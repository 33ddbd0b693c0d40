"""Property type registry.

Each ClassManager owns one PropertyManager. The registry maps type names
("boolean", "map", ...) to PropertyType subclasses and creates typed
properties from definition mappings.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from class_forge.core.config import ClassManagerConfig
from class_forge.core.exceptions import (
    DuplicateTypeError,
    InvalidArgumentError,
    ReservedNameError,
    UnknownPropertyTypeError,
)
from class_forge.core.tools import is_plain_object
from class_forge.property.base import PropertyType
from class_forge.property.collection import ArrayCollectionType, ObjectCollectionType
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

if TYPE_CHECKING:
    from class_forge.core.registry import ClassManager

logger = logging.getLogger(__name__)

DEFAULT_PROPERTY_TYPES: tuple[type[PropertyType], ...] = (
    BooleanType,
    StringType,
    NumberType,
    ObjectType,
    ClassReferenceType,
    MapType,
    MixedType,
    UntypedType,
    ArrayCollectionType,
    ObjectCollectionType,
)


class PropertyManager:
    """Registry of property types and factory of typed properties.

    Args:
        class_manager: Owning ClassManager, used to resolve class references.
        config: Engine settings; reserved names and accessor prefixes are
            read from it.
    """

    def __init__(
        self,
        class_manager: ClassManager | None = None,
        config: ClassManagerConfig | None = None,
    ) -> None:
        self._class_manager = class_manager
        self._config = config or ClassManagerConfig()
        self._types: dict[str, type[PropertyType]] = {}
        self._not_allowed_names: list[str] = list(self._config.reserved_property_names)
        self.register_default_types()

    def get_class_manager(self) -> ClassManager | None:
        return self._class_manager

    def get_config(self) -> ClassManagerConfig:
        return self._config

    # --- Type registry ---

    def register_default_types(self) -> None:
        for type_cls in DEFAULT_PROPERTY_TYPES:
            if not self.isset_property_type(type_cls.get_property_type_name()):
                self.register_property_type(type_cls)

    def register_property_type(self, type_cls: type[PropertyType]) -> None:
        """Register a PropertyType subclass under its type name.

        Raises:
            InvalidArgumentError: If type_cls is not a PropertyType subclass.
            DuplicateTypeError: If the type name is already registered.
        """
        if not isinstance(type_cls, type) or not issubclass(type_cls, PropertyType):
            raise InvalidArgumentError("type_cls", type_cls, "a subclass of PropertyType")
        type_name = type_cls.get_property_type_name()
        if type_name in self._types:
            raise DuplicateTypeError(type_name)
        self._types[type_name] = type_cls
        logger.debug("Registered property type %r", type_name)

    def get_property_types(self) -> dict[str, type[PropertyType]]:
        return dict(self._types)

    def isset_property_type(self, type_name: str) -> bool:
        return type_name in self._types

    def get_property_type(self, type_name: str) -> type[PropertyType]:
        try:
            return self._types[type_name]
        except (KeyError, TypeError):
            raise UnknownPropertyTypeError(type_name, "") from None

    # --- Reserved names ---

    def register_not_allowed_property_names(self, names: list[str]) -> None:
        if not isinstance(names, (list, tuple)) or not all(isinstance(n, str) for n in names):
            raise InvalidArgumentError("names", names, "a list of strings")
        for name in names:
            if name not in self._not_allowed_names:
                self._not_allowed_names.append(name)

    def get_not_allowed_property_names(self) -> list[str]:
        return list(self._not_allowed_names)

    def is_allowed_property_name(self, name: str) -> bool:
        return name not in self._not_allowed_names

    # --- Factory ---

    def create_property(
        self,
        property_name: str,
        property_definition: dict[str, Any],
        context_class: Any = None,
        context_property: PropertyType | None = None,
    ) -> PropertyType:
        """Create a typed property from its definition mapping.

        Args:
            property_name: Name of the property.
            property_definition: Definition mapping with a "type" key.
            context_class: ClassType declaring the property.
            context_property: Enclosing property for nested properties
                (map children, mixed alternatives, collection items).

        Returns:
            A new PropertyType instance.

        Raises:
            InvalidArgumentError: If the definition is not a mapping.
            UnknownPropertyTypeError: If the type is missing or unregistered.
            ReservedNameError: If a top-level property uses a reserved name.
        """
        if not is_plain_object(property_definition):
            raise InvalidArgumentError(
                "property_definition", property_definition, "a plain object with a 'type' key"
            )
        type_name = property_definition.get("type")
        if not isinstance(type_name, str) or type_name not in self._types:
            raise UnknownPropertyTypeError(type_name, property_name)
        if context_property is None and not self.is_allowed_property_name(property_name):
            raise ReservedNameError(property_name, self.get_not_allowed_property_names())

        return self._types[type_name](
            self, property_name, property_definition, context_class, context_property
        )
