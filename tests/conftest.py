"""Shared test fixtures."""

from __future__ import annotations

from typing import Any

import pytest

from class_forge.core.config import ClassManagerConfig
from class_forge.core.enums import ClassVariant
from class_forge.core.registry import ClassManager
from class_forge.property.manager import PropertyManager


@pytest.fixture
def manager() -> ClassManager:
    """Fresh class registry with default settings."""
    return ClassManager()


@pytest.fixture
def property_manager(manager: ClassManager) -> PropertyManager:
    return manager.get_property_manager()


@pytest.fixture
def unsealed_manager() -> ClassManager:
    return ClassManager(ClassManagerConfig(seal_instances=False))


@pytest.fixture
def make_instance(manager: ClassManager):
    """Helper registering a Class with the given typed properties and instantiating it.

    Usage:
        obj = make_instance({"flag": {"type": "boolean"}})
    """
    counter = iter(range(1_000_000))

    def _make(properties: dict[str, Any], **members: Any) -> Any:
        class_name = f"Test/Generated{next(counter)}"
        declaration: dict[str, Any] = {"$_properties": properties}
        declaration.update(members)
        manager.register_class(class_name, ClassVariant.CLASS, declaration)
        return manager.get_class(class_name).create_instance()

    return _make
