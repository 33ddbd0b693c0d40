"""Class manager configuration.

ClassManagerConfig is a Pydantic model for type-safe engine settings.
"""

from __future__ import annotations

from pydantic import BaseModel

DEFAULT_RESERVED_PROPERTY_NAMES: list[str] = [
    "class",
    "parent",
    "classManager",
    "class_manager",
    "classWrap",
    "class_wrap",
    "className",
    "class_name",
]


class ClassManagerConfig(BaseModel):
    """Configuration for a ClassManager and its PropertyManager."""

    reserved_property_names: list[str] = list(DEFAULT_RESERVED_PROPERTY_NAMES)
    getter_prefix: str = "get_"
    setter_prefix: str = "set_"
    checker_prefix: str = "is_"
    seal_instances: bool = True
    enforce_interfaces: bool = True
