"""Collection property types.

A collection property holds a Collection object per context. Every item of
the collection is itself a typed property built from a copy of the
collection's ``proto`` definition, so items are validated, watched and
tracked for modification like any other property.

    {"type": "arrayCollection", "proto": {"type": "string"}}
    {"type": "objectCollection", "proto": {"type": "map", "schema": {...}}}

Object-collection items whose proto is a ``map`` may extend another item of
the same collection by key::

    {"base": {"x": 1, "y": 2}, "child": {"extends": "base", "x": 5}}
    # "child" normalizes to {"x": 5, "y": 2}
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Iterator
from typing import Any, ClassVar

from class_forge.core.exceptions import (
    CyclicExtendsError,
    InvalidArgumentError,
    InvalidValueError,
    ItemNotFoundError,
    UnresolvedExtendsError,
)
from class_forge.core.tools import MISSING, copy_value, extend_deep, is_plain_object
from class_forge.property.base import PropertyStore, PropertyType
from class_forge.property.definition import (
    ArrayCollectionDefinition,
    ObjectCollectionDefinition,
)
from class_forge.property.types import EXTENDS_KEY

logger = logging.getLogger(__name__)


class CollectionManager:
    """Tracks the item properties and item values of one collection.

    Item values live in the collection's PropertyStore; this manager owns
    the item-key -> PropertyType map.
    """

    def __init__(self, collection: Collection) -> None:
        if not isinstance(collection, Collection):
            raise InvalidArgumentError("collection", collection, "an instance of Collection")
        self._collection = collection
        self._item_props: dict[str, PropertyType] = {}

    def get_collection(self) -> Collection:
        return self._collection

    def create_item(self, key: str, value: Any = MISSING) -> Any:
        """Create the item property for ``key`` and optionally assign value.

        The item is built from a copy of the proto definition, with the
        collection property as its context property.
        """
        collection = self._collection
        prop = collection.get_property()
        definition = copy_value(prop.get_proto().get_definition().get_data())

        item = prop.get_property_manager().create_property(
            key, definition, prop.get_context_class(), prop
        )
        self._item_props[key] = item
        item.attach_hashed(collection)

        if value is not MISSING:
            try:
                if item.get_definition().is_writable():
                    item.set_value(collection, value)
                else:
                    item.validate(value)
                    item.write(collection, value)
            except InvalidValueError:
                self.remove_item(key)
                raise

        return item.get_value(collection)

    def remove_item(self, key: str) -> None:
        item = self._item_props.pop(key, None)
        if item is not None:
            item.detach(self._collection)

    def isset_item(self, key: str) -> bool:
        return key in self._item_props

    def get_item_props(self) -> dict[str, PropertyType]:
        return self._item_props

    def get_item_prop(self, key: str) -> PropertyType:
        try:
            return self._item_props[key]
        except KeyError:
            raise ItemNotFoundError(key, str(self._collection.get_property())) from None

    def get_items(self) -> dict[str, Any]:
        """Raw item values keyed by item key."""
        return self._collection._properties_store.values


class Collection(ABC):
    """Base collection bound to one context object."""

    def __init__(self, prop: CollectionType, context: Any) -> None:
        self._property = prop
        self._context = context
        self._properties_store = PropertyStore(owner=context, owner_property=prop)
        self._manager = CollectionManager(self)

    def get_property(self) -> CollectionType:
        return self._property

    def get_context(self) -> Any:
        return self._context

    def get_manager(self) -> CollectionManager:
        return self._manager

    @abstractmethod
    def _item_key(self, key: Any) -> str:
        """Validate a public key and return the internal item key."""

    def _check_writable(self) -> bool:
        if self._property.get_definition().is_writable():
            return True
        logger.warning("Trying to change not writable collection %s.", self._property)
        return False

    @abstractmethod
    def _set_items(self, items: Any) -> None:
        """Replace all items."""

    @abstractmethod
    def to_data(self) -> Any:
        """Return the items as plain data."""

    def _load(self, items: Any) -> None:
        """Fill a collection that is not stored on its owner yet."""
        store = self._properties_store
        store.detached = True
        try:
            self._set_items(items)
        finally:
            store.detached = False

    def isset_item(self, key: Any) -> bool:
        return self._manager.isset_item(self._item_key(key))

    def get_item(self, key: Any) -> Any:
        return self._manager.get_item_prop(self._item_key(key)).get_value(self)

    def get_item_prop(self, key: Any) -> PropertyType:
        return self._manager.get_item_prop(self._item_key(key))

    def get_data(self, key: Any = MISSING) -> Any:
        """Copy of one item value, or of the whole collection as plain data."""
        if key is MISSING:
            return self.to_data()
        return copy_value(self.get_item(key))

    def set_item(self, key: Any, value: Any) -> None:
        if self._check_writable():
            self._set_item(key, value)

    def _set_item(self, key: Any, value: Any) -> None:
        item_key = self._item_key(key)
        if self._manager.isset_item(item_key):
            self._manager.get_item_prop(item_key).set_value(self, value)
        else:
            self._manager.create_item(item_key, value)

    def remove_item(self, key: Any) -> None:
        if not self._check_writable():
            return
        item_key = self._item_key(key)
        self._manager.get_item_prop(item_key)
        self._remove_item(item_key)
        self._property.set_is_modified(self._context, True)

    def _remove_item(self, item_key: str) -> None:
        self._manager.remove_item(item_key)

    def set_items(self, items: Any) -> None:
        if self._check_writable():
            self._property.validate(items)
            self._set_items(items)

    def clear(self) -> None:
        if self._check_writable():
            self._clear()
            self._property.set_is_modified(self._context, True)

    def _clear(self) -> None:
        for item_key in list(self._manager.get_item_props()):
            self._manager.remove_item(item_key)

    def get_items(self) -> dict[str, Any]:
        return {
            key: item.get_value(self) for key, item in self._manager.get_item_props().items()
        }

    def __len__(self) -> int:
        return len(self._manager.get_item_props())

    def __contains__(self, key: Any) -> bool:
        try:
            return self.isset_item(key)
        except InvalidArgumentError:
            return False

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Collection):
            return bool(self.to_data() == other.to_data())
        if isinstance(other, (list, dict)):
            return bool(self.to_data() == other)
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self._property.get_name_full()!r} {self.to_data()!r}>"


class ArrayCollection(Collection):
    """Ordered collection addressed by integer index."""

    def _item_key(self, key: Any) -> str:
        if isinstance(key, bool) or not isinstance(key, int):
            raise InvalidArgumentError("index", key, "an integer index")
        if key < 0:
            key += len(self)
        return str(key)

    def add_item(self, value: Any) -> int | None:
        """Append an item and return its index."""
        if not self._check_writable():
            return None
        index = len(self)
        self._manager.create_item(str(index), value)
        return index

    def _set_item(self, key: Any, value: Any) -> None:
        if isinstance(key, int) and not isinstance(key, bool) and key > len(self):
            raise InvalidArgumentError("index", key, f"an index not greater than {len(self)}")
        super()._set_item(key, value)

    def _remove_item(self, item_key: str) -> None:
        data = self.to_data()
        del data[int(item_key)]
        self._set_items(data)

    def _set_items(self, items: Any) -> None:
        self._clear()
        for value in items:
            self._manager.create_item(str(len(self)), value)

    def to_data(self) -> list[Any]:
        return [copy_value(self.get_item(index)) for index in range(len(self))]

    def __getitem__(self, index: int) -> Any:
        return self.get_item(index)

    def __iter__(self) -> Iterator[Any]:
        for index in range(len(self)):
            yield self.get_item(index)


class ObjectCollection(Collection):
    """Keyed collection addressed by string keys."""

    def _item_key(self, key: Any) -> str:
        if not isinstance(key, str) or not key:
            raise InvalidArgumentError("key", key, "a non-empty string")
        return key

    def add_item(self, key: str, value: Any = MISSING) -> Any:
        """Create a new item; the key must not be in use."""
        item_key = self._item_key(key)
        if self._manager.isset_item(item_key):
            raise InvalidArgumentError("key", key, "a key not used by another item")
        if not self._check_writable():
            return None
        self._manager.create_item(item_key, value)
        try:
            return self.normalize_item(item_key)
        except (CyclicExtendsError, UnresolvedExtendsError):
            self._manager.remove_item(item_key)
            raise

    def _set_item(self, key: Any, value: Any) -> None:
        item_key = self._item_key(key)
        previous = self.get_data(item_key) if self._manager.isset_item(item_key) else MISSING
        super()._set_item(item_key, value)
        try:
            self.normalize_item(item_key)
        except (CyclicExtendsError, UnresolvedExtendsError):
            if previous is MISSING:
                self._manager.remove_item(item_key)
            else:
                self._manager.get_item_prop(item_key).write(self, previous)
            raise

    def _set_items(self, items: Any) -> None:
        self._clear()
        for key, value in items.items():
            self._manager.create_item(self._item_key(key), value)
        self.normalize()

    def to_data(self) -> dict[str, Any]:
        return {key: copy_value(value) for key, value in self.get_items().items()}

    def normalize(self) -> None:
        for key in list(self._manager.get_item_props()):
            self.normalize_item(key)

    def normalize_item(self, key: str, _chain: list[str] | None = None) -> Any:
        """Resolve the ``extends`` marker of an item and return its value.

        Fields of the item that equal their schema default are dropped before
        the item is merged over the (normalized) item it extends, so only
        explicit overrides survive.
        """
        item = self.get_data(key)
        if self._property.get_proto().get_property_type_name() != "map":
            return item
        if not is_plain_object(item) or not item.get(EXTENDS_KEY):
            return item

        chain = (_chain or []) + [key]
        parent_key = item[EXTENDS_KEY]
        if parent_key in chain:
            raise CyclicExtendsError(chain + [parent_key])
        if not self.isset_item(parent_key):
            raise UnresolvedExtendsError(key, parent_key)

        parent_item = copy_value(self.normalize_item(parent_key, chain))
        del item[EXTENDS_KEY]

        item_prop = self._manager.get_item_prop(key)
        for field_name in list(item):
            child = item_prop.get_child(field_name)
            if child is not None and child.is_default_value(item[field_name]):
                del item[field_name]

        merged = extend_deep(parent_item, item)
        merged.pop(EXTENDS_KEY, None)
        item_prop.set_value(self, merged)
        return self.get_data(key)

    def keys(self) -> list[str]:
        return list(self._manager.get_item_props())

    def items(self) -> list[tuple[str, Any]]:
        return list(self.get_items().items())

    def __getitem__(self, key: str) -> Any:
        return self.get_item(key)

    def __iter__(self) -> Iterator[str]:
        return iter(self.keys())


class CollectionType(PropertyType, ABC):
    """Base of collection property types."""

    collection_class: ClassVar[type[Collection]]
    supports_extends: ClassVar[bool] = False

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        self._proto: PropertyType | None = None
        super().__init__(*args, **kwargs)

    def create_proto(self, definition: dict[str, Any]) -> PropertyType:
        self._proto = self._property_manager.create_property(
            "proto", definition, self._context_class, self
        )
        return self._proto

    def get_proto(self) -> PropertyType:
        if self._proto is None:
            raise InvalidArgumentError("proto", None, "a processed proto definition")
        return self._proto

    @abstractmethod
    def is_allowed_container(self, value: Any) -> bool:
        """Whether ``value`` is a container of the right kind."""

    @abstractmethod
    def iterate_items(self, value: Any) -> Iterator[tuple[Any, Any]]:
        """Yield ``(key, item)`` pairs of a container value."""

    def validate(self, value: Any) -> None:
        if value is None and self._definition.is_nullable():
            return
        if isinstance(value, Collection):
            value = value.to_data()
        if not self.is_allowed_container(value):
            raise self.invalid_value(value)
        for key, item in self.iterate_items(value):
            self.validate_item(key, item)

    def validate_item(self, key: Any, item: Any) -> None:
        proto = self.get_proto()
        try:
            proto.validate(item)
        except InvalidValueError as e:
            item_name = f"{self.get_name_full()}.{key}"
            raise InvalidValueError(
                e.property_name.replace(proto.get_name_full(), item_name, 1),
                e.expected,
                e.value,
                e.class_name,
            ) from None

    def prepare_value(self, context: Any, value: Any) -> Any:
        if value is None:
            return None
        if isinstance(value, Collection):
            value = value.to_data()
        collection = self.collection_class(self, context)
        collection._load(value)
        return collection

    def get_collection(self, context: Any) -> Collection | None:
        return self.get_value(context)

    def is_empty(self, context: Any) -> bool:
        value = self.get_value(context)
        return value is None or len(value) == 0

    def is_default_value(self, value: Any) -> bool:
        if isinstance(value, Collection):
            value = value.to_data()
        return bool(value == self.get_default_value())


class ArrayCollectionType(CollectionType):
    type_name = "arrayCollection"
    definition_class = ArrayCollectionDefinition
    collection_class = ArrayCollection
    expected_description = "a list"

    def is_allowed_container(self, value: Any) -> bool:
        return isinstance(value, (list, tuple))

    def iterate_items(self, value: Any) -> Iterator[tuple[Any, Any]]:
        return iter(enumerate(value))


class ObjectCollectionType(CollectionType):
    type_name = "objectCollection"
    definition_class = ObjectCollectionDefinition
    collection_class = ObjectCollection
    supports_extends = True
    expected_description = "a plain object with string keys"

    def is_allowed_container(self, value: Any) -> bool:
        return is_plain_object(value) and all(isinstance(key, str) and key for key in value)

    def iterate_items(self, value: Any) -> Iterator[tuple[Any, Any]]:
        return iter(value.items())
