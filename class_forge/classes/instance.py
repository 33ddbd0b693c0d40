"""Base class of every synthesized class."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, ClassVar

from class_forge.core.enums import ClassVariant
from class_forge.property.base import PropertyAccessor, PropertyStore

if TYPE_CHECKING:
    from class_forge.classes.class_type import ClassType
    from class_forge.classes.plan import ClassPlan


class ClassInstance:
    """Root of the synthesized class hierarchy.

    Instances keep typed values in ``_properties_store``. Once sealed, no new
    attribute can be added and existing ones can't be deleted; typed
    properties and data fields stay assignable.
    """

    _class_name: ClassVar[str] = ""
    _class_variant: ClassVar[ClassVariant | None] = None
    _class_type: ClassVar[ClassType | None] = None
    _class_plan: ClassVar[ClassPlan]

    def __init__(self, *args: Any) -> None:
        class_type = type(self)._class_type
        if class_type is None:
            raise TypeError("ClassInstance can only be created through a ClassType")
        class_type.initialize_instance(self, args)

    def _init_store(self) -> None:
        object.__setattr__(self, "_properties_store", PropertyStore())
        object.__setattr__(self, "_sealed", False)

    def _seal(self) -> None:
        object.__setattr__(self, "_sealed", True)

    def __setattr__(self, name: str, value: Any) -> None:
        if (
            self.__dict__.get("_sealed")
            and name not in self.__dict__
            and not isinstance(getattr(type(self), name, None), PropertyAccessor)
        ):
            raise AttributeError(
                f"Can't add attribute '{name}' to sealed instance of class '{self._class_name}'"
            )
        object.__setattr__(self, name, value)

    def __delattr__(self, name: str) -> None:
        if self.__dict__.get("_sealed"):
            raise AttributeError(
                f"Can't delete attribute '{name}' of sealed instance of class '{self._class_name}'"
            )
        object.__delattr__(self, name)

    def get_class(self) -> ClassType:
        return type(self)._class_type  # type: ignore[return-value]

    def get_class_name(self) -> str:
        return self._class_name

    def is_instance_of(self, class_name: str) -> bool:
        return self.get_class().is_instance_of(class_name)

    def __repr__(self) -> str:
        return f"<{self._class_name} instance>"
