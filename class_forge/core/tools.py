"""Helpers shared by the class and property engines.

Copying and merging only descend into plain containers (dict, list, tuple,
set). Everything else, including class instances, ClassTypes and callables,
is kept by reference.
"""

from __future__ import annotations

from typing import Any


class _Missing:
    """Sentinel type for "no value supplied"."""

    _instance: _Missing | None = None

    def __new__(cls) -> _Missing:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING: Any = _Missing()


def is_plain_object(value: Any) -> bool:
    """Check if value is a plain mapping (a dict, not a class instance)."""
    return isinstance(value, dict)


def is_class_instance(value: Any) -> bool:
    """Check if value is an instance of a synthesized class."""
    return bool(getattr(type(value), "_class_name", None)) and hasattr(value, "is_instance_of")


def copy_value(value: Any) -> Any:
    """Copy plain containers recursively, keep everything else by reference."""
    if isinstance(value, dict):
        return {key: copy_value(item) for key, item in value.items()}
    if isinstance(value, list):
        return [copy_value(item) for item in value]
    if isinstance(value, tuple):
        return tuple(copy_value(item) for item in value)
    if isinstance(value, set):
        return {copy_value(item) for item in value}
    return value


def extend_deep(target: dict[str, Any], source: dict[str, Any]) -> dict[str, Any]:
    """Merge source into target recursively; source values win.

    Nested dicts are merged, every other value replaces the target value.
    Returns the (mutated) target.
    """
    for key, value in source.items():
        if isinstance(value, dict) and isinstance(target.get(key), dict):
            extend_deep(target[key], value)
        else:
            target[key] = copy_value(value)
    return target


def describe_value(value: Any) -> str:
    """Describe what was received, for error messages."""
    if value is None:
        return "None was received instead."
    if is_class_instance(value):
        return f"Instance of class '{type(value)._class_name}' was received instead."
    if is_plain_object(value):
        return "Plain object was received instead."
    if isinstance(value, (bool, int, float, str, bytes, list, tuple, set)):
        return f"Value with type '{type(value).__name__}' was received instead."
    return f"Object with type '{type(value).__name__}' was received instead."


def generate_accessor_name(prefix: str, property_name: str) -> str:
    """Build an accessor method name, e.g. ("get_", "name") -> "get_name"."""
    return f"{prefix}{property_name}"


def python_class_name(class_name: str) -> str:
    """Turn a namespaced class name ("App/Models/User") into an identifier."""
    tail = class_name.replace("\\", "/").replace(".", "/").rsplit("/", 1)[-1]
    identifier = "".join(char if char.isalnum() or char == "_" else "_" for char in tail)
    if not identifier or identifier[0].isdigit():
        identifier = "_" + identifier
    return identifier
