"""Typed property base class.

A PropertyType describes one declared property. Values never live on the
PropertyType itself: each context object (class instance or collection)
carries a PropertyStore keyed by the canonical property name, so typed values
can't collide with user-defined members.

Getter and setter closures are built once per property and serve as the
accessor table: the same functions back ``get_value``/``set_value``, the
generated ``get_<name>``/``set_<name>`` methods and the attribute descriptor.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Callable, ClassVar

from class_forge.core.exceptions import InvalidArgumentError, InvalidValueError
from class_forge.core.tools import MISSING, generate_accessor_name
from class_forge.property.definition import PropertyDefinition

if TYPE_CHECKING:
    from class_forge.property.manager import PropertyManager

logger = logging.getLogger(__name__)

Watcher = Callable[[Any, Any, Any], Any]


class PropertyStore:
    """Backing storage for the typed values of one context object.

    Args:
        owner: Context that owns the object holding this store (the class
            instance owning a collection), or None.
        owner_property: Property of ``owner`` this store belongs to.

    While ``detached`` is set, modification flags are not reported to
    ``owner``; a collection is detached until it is stored on its owner.
    """

    def __init__(self, owner: Any = None, owner_property: PropertyType | None = None) -> None:
        self.values: dict[str, Any] = {}
        self.modified: set[str] = set()
        self.owner = owner
        self.owner_property = owner_property
        self.detached = False


def get_store(context: Any) -> PropertyStore:
    """Return the PropertyStore of a context object."""
    store = getattr(context, "_properties_store", None)
    if not isinstance(store, PropertyStore):
        raise InvalidArgumentError("context", context, "an object holding a property store")
    return store


def get_owner(context: Any) -> Any:
    """Return the outermost owner of a context, e.g. the instance holding a collection."""
    store = get_store(context)
    while store.owner is not None:
        context = store.owner
        store = get_store(context)
    return context


class PropertyAccessor:
    """Data descriptor routing attribute access through a typed property."""

    def __init__(self, prop: PropertyType) -> None:
        self._property = prop

    @property
    def property(self) -> PropertyType:
        return self._property

    def __get__(self, instance: Any, owner: type | None = None) -> Any:
        if instance is None:
            return self
        return self._property.get_value(instance)

    def __set__(self, instance: Any, value: Any) -> None:
        self._property.set_value(instance, value)

    def __delete__(self, instance: Any) -> None:
        raise AttributeError(f"Typed property {self._property} can't be deleted")


class PropertyType:
    """Base class of every property type.

    Subclasses set ``type_name``, point ``definition_class`` at their
    PropertyDefinition subclass and implement ``is_allowed_value``.
    """

    type_name: ClassVar[str] = ""
    definition_class: ClassVar[type[PropertyDefinition]] = PropertyDefinition
    expected_description: ClassVar[str] = "a valid value"
    # False when nested properties share this property's full name (mixed).
    names_nested: ClassVar[bool] = True

    def __init__(
        self,
        property_manager: PropertyManager,
        property_name: str,
        property_definition: dict[str, Any],
        context_class: Any = None,
        context_property: PropertyType | None = None,
    ) -> None:
        if not property_name or not isinstance(property_name, str):
            raise InvalidArgumentError("property_name", property_name, "a non-empty string")
        self._property_manager = property_manager
        self._name = property_name
        self._context_class = context_class
        self._context_property = context_property
        self._watchers: list[Watcher] = []
        self._definition = self.definition_class(self, property_definition)
        self.initialize()

    @classmethod
    def get_property_type_name(cls) -> str:
        if not cls.type_name:
            raise NotImplementedError(f"{cls.__name__} must define 'type_name'")
        return cls.type_name

    def initialize(self) -> None:
        """Process and validate the definition, then build the accessors."""
        definition = self._definition
        if self._context_property is not None:
            definition.set_accessors(False)
        definition.process()
        definition.validate()
        self._getter = self.generate_getter()
        self._setter = self.generate_setter()

    # --- Identity ---

    def get_property_manager(self) -> PropertyManager:
        return self._property_manager

    def get_name(self) -> str:
        return self._name

    def get_name_full(self) -> str:
        """Property name prefixed with the names of its context properties."""
        if self._context_property is None:
            return self._name
        context_name = self._context_property.get_name_full()
        if not self._context_property.names_nested:
            return context_name
        return f"{context_name}.{self._name}"

    def get_definition(self) -> PropertyDefinition:
        return self._definition

    def get_context_class(self) -> Any:
        return self._context_class

    def get_context_property(self) -> PropertyType | None:
        return self._context_property

    def get_context_class_name(self) -> str | None:
        if self._context_class is None:
            return None
        return self._context_class.get_name()

    def __str__(self) -> str:
        class_name = self.get_context_class_name()
        location = f" in class '{class_name}'" if class_name else ""
        return f"'{self.get_name_full()}'{location}"

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.get_name_full()!r}>"

    # --- Modification tracking ---

    def is_modified(self, context: Any) -> bool:
        return self._name in get_store(context).modified

    def set_is_modified(self, context: Any, is_modified: bool) -> None:
        if not isinstance(is_modified, bool):
            raise InvalidArgumentError("is_modified", is_modified, "a boolean")
        store = get_store(context)
        if is_modified:
            store.modified.add(self._name)
        else:
            store.modified.discard(self._name)
        if store.owner is not None and store.owner_property is not None and not store.detached:
            store.owner_property.set_is_modified(store.owner, is_modified)

    # --- Watchers ---

    def get_watchers(self) -> list[Watcher]:
        return list(self._watchers)

    def add_watcher(self, callback: Watcher) -> None:
        """Register a callback ``(context, new_value, old_value) -> value``.

        The value returned by each watcher is passed to the next one and
        finally stored, so watchers may transform it.

        ``context`` is the instance owning the value. For collection items
        that is the instance holding the collection, not the collection.
        """
        if not callable(callback):
            raise InvalidArgumentError("callback", callback, "a callable")
        if not self.isset_watcher(callback):
            self._watchers.append(callback)

    def isset_watcher(self, callback: Watcher) -> bool:
        return callback in self._watchers

    def remove_watcher(self, callback: Watcher) -> None:
        if callback in self._watchers:
            self._watchers.remove(callback)

    def remove_watchers(self) -> None:
        self._watchers = []

    def invoke_watchers(self, context: Any, new_value: Any, old_value: Any) -> Any:
        for watcher in list(self._watchers):
            new_value = watcher(context, new_value, old_value)
        return new_value

    # --- Values ---

    def get_default_value(self) -> Any:
        return self._definition.get_value()

    def get_empty_value(self) -> Any:
        return self._definition.get_empty_value()

    def read(self, context: Any) -> Any:
        """Read the raw backing slot."""
        try:
            return get_store(context).values[self._name]
        except KeyError:
            raise AttributeError(f"Property {self} is not attached to {context!r}") from None

    def write(self, context: Any, value: Any) -> None:
        """Write the raw backing slot, without validation."""
        get_store(context).values[self._name] = self.prepare_value(context, value)

    def prepare_value(self, context: Any, value: Any) -> Any:
        """Convert a validated value into its stored form."""
        return value

    def get_value(self, context: Any) -> Any:
        return self._getter(context)

    def set_value(self, context: Any, value: Any) -> None:
        if not self._definition.is_writable():
            logger.warning("Trying to change not writable property %s.", self)
            return
        self._setter(context, value)

    def generate_getter(self) -> Callable[[Any], Any]:
        prop = self

        def getter(context: Any) -> Any:
            return prop.read(context)

        getter.__name__ = generate_accessor_name(self._config().getter_prefix, self._name)
        return getter

    def generate_setter(self) -> Callable[[Any, Any], None]:
        prop = self
        name = self._name

        def setter(context: Any, value: Any) -> None:
            store = get_store(context)
            old_value = store.values.get(name)
            value = prop.invoke_watchers(get_owner(context), value, old_value)
            prop.validate(value)
            # a failing prepare leaves both the value and the flag untouched
            prepared = prop.prepare_value(context, value)
            prop.set_is_modified(context, True)
            store.values[name] = prepared

        setter.__name__ = generate_accessor_name(self._config().setter_prefix, self._name)
        return setter

    def attach(self, namespace: dict[str, Any]) -> dict[str, str]:
        """Install the descriptor and accessor methods on a class namespace.

        Returns a mapping of accessor role ("getter", "setter", ...) to the
        method name installed for it.
        """
        namespace[self._name] = PropertyAccessor(self)
        installed: dict[str, str] = {}
        if self._definition.is_accessors():
            config = self._config()
            getter_name = generate_accessor_name(config.getter_prefix, self._name)
            namespace[getter_name] = self._getter
            installed["getter"] = getter_name
            if self._definition.is_writable():
                setter_name = generate_accessor_name(config.setter_prefix, self._name)
                namespace[setter_name] = self._setter
                installed["setter"] = setter_name
        return installed

    def attach_hashed(self, context: Any) -> None:
        """Create the backing slot on a context, holding the default value."""
        get_store(context).values[self._name] = self.prepare_value(
            context, self._definition.get_value()
        )

    def detach(self, context: Any) -> None:
        store = get_store(context)
        store.values.pop(self._name, None)
        store.modified.discard(self._name)

    # --- Validation ---

    def is_allowed_value(self, value: Any) -> bool:
        """Check a non-None value against the type predicate."""
        return True

    def describe_expected(self) -> str:
        expected = self.expected_description
        if self._definition.is_nullable():
            expected += " or None"
        return expected

    def validate(self, value: Any) -> None:
        """Raise InvalidValueError if value is not allowed for this property."""
        if value is None and self._definition.is_nullable():
            return
        if value is MISSING or value is None or not self.is_allowed_value(value):
            raise self.invalid_value(value)

    def invalid_value(self, value: Any, expected: str | None = None) -> InvalidValueError:
        return InvalidValueError(
            self.get_name_full(),
            expected or self.describe_expected(),
            value,
            self.get_context_class_name(),
        )

    def is_empty(self, context: Any) -> bool:
        return self.get_value(context) is None

    def is_default_value(self, value: Any) -> bool:
        return bool(value == self.get_default_value())

    def _config(self) -> Any:
        return self._property_manager.get_config()
