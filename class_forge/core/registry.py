"""Class registry - owns the registered classes of one application context.

A ClassManager is created per context and passed by reference; there is no
global registry. Names may be namespaced ("App/Models/User").
"""

from __future__ import annotations

import logging
from typing import Any

from class_forge.classes.builder import BUILDERS, ClassBuilderBase
from class_forge.classes.class_type import ClassType
from class_forge.classes.variants import DEFAULT_CLASS_TYPES
from class_forge.core.config import ClassManagerConfig
from class_forge.core.enums import ClassVariant
from class_forge.core.exceptions import (
    ClassNotFoundError,
    DuplicateClassError,
    DuplicateTypeError,
    InvalidArgumentError,
    UnknownClassTypeError,
)
from class_forge.core.tools import copy_value
from class_forge.property.manager import PropertyManager

logger = logging.getLogger(__name__)


class ClassManager:
    """Registers classes and hands out their ClassTypes.

    Args:
        config: Engine settings shared with the PropertyManager.

    Example:
        manager = ClassManager()
        manager.register_class("Point", ClassVariant.CLASS, {
            "$_properties": {"x": {"type": "number"}, "y": {"type": "number"}},
        })
        point = manager.get_class("Point").create_instance()
        point.set_x(3)
    """

    def __init__(self, config: ClassManagerConfig | None = None) -> None:
        self._config = config or ClassManagerConfig()
        self._property_manager = PropertyManager(self, self._config)
        self._class_types: dict[str, type[ClassType]] = {}
        self._classes: dict[str, ClassType] = {}
        self._load_stack: list[str] = []
        for class_type_cls in DEFAULT_CLASS_TYPES:
            self.register_class_type(class_type_cls)

    def get_config(self) -> ClassManagerConfig:
        return self._config

    def get_property_manager(self) -> PropertyManager:
        return self._property_manager

    # --- Class types ---

    def register_class_type(self, class_type_cls: type[ClassType]) -> None:
        if not isinstance(class_type_cls, type) or not issubclass(class_type_cls, ClassType):
            raise InvalidArgumentError("class_type_cls", class_type_cls, "a subclass of ClassType")
        type_name = class_type_cls.get_class_type_name()
        if type_name in self._class_types:
            raise DuplicateTypeError(type_name)
        self._class_types[type_name] = class_type_cls

    def get_class_types(self) -> dict[str, type[ClassType]]:
        return dict(self._class_types)

    def _resolve_variant(self, variant: ClassVariant | str) -> type[ClassType]:
        type_name = variant.value if isinstance(variant, ClassVariant) else variant
        try:
            return self._class_types[type_name]
        except (KeyError, TypeError):
            raise UnknownClassTypeError(variant) from None

    # --- Classes ---

    def register_class(
        self,
        class_name: str,
        variant: ClassVariant | str,
        declaration: dict[str, Any] | None = None,
    ) -> ClassType:
        """Register a class declaration.

        The declared options are validated immediately; everything that needs
        the referenced classes is resolved when the class is first built.

        Raises:
            InvalidArgumentError: If class_name is not a non-empty string.
            UnknownClassTypeError: If variant is not a registered class type.
            DuplicateClassError: If class_name is already registered.
            InvalidClassOptionError: If a declared option is not valid.
        """
        if not isinstance(class_name, str) or not class_name:
            raise InvalidArgumentError("class_name", class_name, "a non-empty string")
        class_type_cls = self._resolve_variant(variant)
        if class_name in self._classes:
            raise DuplicateClassError(class_name)

        class_type = class_type_cls(self, class_name, {} if declaration is None else declaration)
        self._classes[class_name] = class_type
        self.remove_from_load_stack(class_name)
        logger.debug("Registered %s %r", class_type.variant.value, class_name)
        return class_type

    def get_class(self, class_name: str) -> ClassType:
        try:
            return self._classes[class_name]
        except (KeyError, TypeError):
            raise ClassNotFoundError(class_name) from None

    def isset_class(self, class_name: str) -> bool:
        return class_name in self._classes

    def copy_class(self, class_name: str, new_class_name: str) -> ClassType:
        """Register a copy of a class declaration under another name."""
        source = self.get_class(class_name)
        declaration = copy_value(source.get_definition().get_declared_data())
        return self.register_class(new_class_name, source.variant, declaration)

    def build_class(
        self, variant: ClassVariant | str, class_name: str | None = None
    ) -> ClassBuilderBase:
        """Return an empty builder for a class of the given variant."""
        class_type_cls = self._resolve_variant(variant)
        return BUILDERS[class_type_cls.variant](self, class_name)

    def alter_class(self, class_name: str) -> ClassBuilderBase:
        """Return a builder preloaded with the declaration of an existing class."""
        class_type = self.get_class(class_name)
        return BUILDERS[class_type.variant](
            self, class_name, class_type.get_definition().get_declared_data()
        )

    @property
    def class_names(self) -> list[str]:
        """Registered class names, sorted alphabetically."""
        return sorted(self._classes)

    def __len__(self) -> int:
        return len(self._classes)

    def __contains__(self, class_name: object) -> bool:
        return class_name in self._classes

    # --- Load stack ---

    def add_to_load_stack(self, class_name: str) -> None:
        """Mark a referenced class as pending until it is registered."""
        if class_name in self._classes or class_name in self._load_stack:
            return
        self._load_stack.append(class_name)
        logger.debug("Added %r to load stack", class_name)

    def remove_from_load_stack(self, class_name: str) -> None:
        if class_name in self._load_stack:
            self._load_stack.remove(class_name)
            logger.debug("Removed %r from load stack", class_name)

    def is_load_stack_empty(self) -> bool:
        return not self._load_stack

    def get_load_stack(self) -> list[str]:
        return list(self._load_stack)
