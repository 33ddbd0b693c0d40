"""ClassType - the compiled form of one registered class.

A ClassType owns the ClassDefinition of a class and its own typed
properties. The Python class is built lazily on the first
``get_constructor()`` call:

1. the declaration is merged over the variant's base skeleton, validated and
   processed (parent, properties, traits, interfaces, ... are resolved);
2. the parent class is built first;
3. a ClassPlan with the flattened member tables is computed;
4. a Python class is synthesized with ``type()``, deriving from the parent
   class or from ClassInstance.

A failed build leaves no partial state behind, so the next call retries.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Callable, ClassVar

from class_forge.classes.definition import ClassDefinition
from class_forge.classes.instance import ClassInstance
from class_forge.classes.plan import AccessorPlan, ClassPlan
from class_forge.core.enums import ClassVariant
from class_forge.core.exceptions import (
    AbstractInstantiationError,
    InvalidArgumentError,
    InvalidClassOptionError,
    PropertyNotFoundError,
)
from class_forge.core.tools import copy_value, extend_deep, python_class_name

if TYPE_CHECKING:
    from class_forge.core.registry import ClassManager
    from class_forge.property.base import PropertyType

logger = logging.getLogger(__name__)


class ClassType:
    """Base of the class variants.

    Args:
        class_manager: Registry owning this class.
        class_name: Unique, possibly namespaced, class name.
        declaration: Declaration mapping.
    """

    variant: ClassVar[ClassVariant] = ClassVariant.CLASS
    definition_class: ClassVar[type[ClassDefinition]] = ClassDefinition
    # Variants a parent class may have.
    parent_variants: ClassVar[tuple[ClassVariant, ...]] = (
        ClassVariant.CLASS,
        ClassVariant.ABSTRACT_CLASS,
    )
    instantiable: ClassVar[bool] = True

    def __init__(
        self,
        class_manager: ClassManager,
        class_name: str,
        declaration: dict[str, Any],
    ) -> None:
        if class_manager is None:
            raise InvalidArgumentError("class_manager", class_manager, "an instance of ClassManager")
        if not isinstance(class_name, str) or not class_name:
            raise InvalidArgumentError("class_name", class_name, "a non-empty string")
        self._class_manager = class_manager
        self._name = class_name
        self._reset_build_state()
        self._definition = self.create_definition(declaration)
        self.initialize()

    @classmethod
    def get_class_type_name(cls) -> str:
        return cls.variant.value

    def initialize(self) -> None:
        definition = self._definition
        definition.validate_data()
        definition.process_relatives()

    def _reset_build_state(self) -> None:
        self._constructor: type[ClassInstance] | None = None
        self._parent: ClassType | None = None
        self._properties: dict[str, PropertyType] = {}
        self._abstract_methods: dict[str, Callable[..., Any]] = {}
        self._building = False

    # --- Identity ---

    def get_class_manager(self) -> ClassManager:
        return self._class_manager

    def get_name(self) -> str:
        return self._name

    def create_definition(self, declaration: dict[str, Any]) -> ClassDefinition:
        return self.definition_class(self, declaration)

    def get_definition(self) -> ClassDefinition:
        return self._definition

    def set_definition(self, declaration: dict[str, Any]) -> None:
        """Replace the declaration; the class is rebuilt on next use.

        Classes already built from this one keep the previous Python class.
        """
        self._reset_build_state()
        self._definition = self.create_definition(declaration)
        self.initialize()
        logger.debug("Redefined class %r", self._name)

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self._name!r}>"

    # --- Parent ---

    def set_parent(self, parent_name: str | None) -> None:
        if parent_name is None:
            self._parent = None
            return
        if not isinstance(parent_name, str) or not parent_name:
            raise InvalidArgumentError("parent_name", parent_name, "a name of the parent class or None")
        parent = self._class_manager.get_class(parent_name)
        if parent.variant not in self.parent_variants:
            allowed = " or ".join(f"'{v.value}'" for v in self.parent_variants)
            raise InvalidClassOptionError(
                "$_extends",
                self._name,
                f"a name of a class with type {allowed}",
                parent_name,
                detail=(
                    f"Class '{parent_name}' has type '{parent.variant.value}', "
                    f"expected {allowed}."
                ),
            )
        self._parent = parent

    def get_parent(self) -> ClassType | None:
        return self._parent

    def has_parent(self) -> bool:
        return self._parent is not None

    # --- Typed properties ---

    def add_property(self, property_name: str, property_definition: dict[str, Any]) -> PropertyType:
        property_manager = self._class_manager.get_property_manager()
        prop = property_manager.create_property(property_name, property_definition, self)
        self._properties[property_name] = prop
        return prop

    def get_properties(self, with_inherited: bool = False) -> dict[str, PropertyType]:
        """Own typed properties, optionally merged over the inherited ones."""
        properties: dict[str, PropertyType] = {}
        if with_inherited and self._parent is not None:
            properties.update(self._parent.get_properties(True))
        properties.update(self._properties)
        return properties

    def get_property(self, property_name: str) -> PropertyType:
        prop = self.get_properties(True).get(property_name)
        if prop is None:
            raise PropertyNotFoundError(property_name, self._name)
        return prop

    def isset_property(self, property_name: str) -> bool:
        return property_name in self.get_properties(True)

    # --- Abstract methods ---

    def add_abstract_method(self, method_name: str, method: Callable[..., Any]) -> None:
        self._abstract_methods[method_name] = method

    def get_abstract_methods(self, with_inherited: bool = False) -> dict[str, Callable[..., Any]]:
        methods: dict[str, Callable[..., Any]] = {}
        if with_inherited and self._parent is not None:
            methods.update(self._parent.get_abstract_methods(True))
        methods.update(self._abstract_methods)
        return methods

    # --- Relatives ---

    def _get_relatives(self, option: str) -> list[ClassType]:
        names = getattr(self._definition, f"get_{option}")()
        return [self._class_manager.get_class(name) for name in names]

    def get_traits(self, with_inherited: bool = False) -> list[str]:
        names: list[str] = []
        if with_inherited and self._parent is not None:
            names.extend(self._parent.get_traits(True))
        for trait in self._get_relatives("traits"):
            for name in [trait.get_name(), *trait.get_traits(True)]:
                if name not in names:
                    names.append(name)
        return names

    def get_interfaces(self, with_inherited: bool = False) -> list[str]:
        names: list[str] = []
        if with_inherited and self._parent is not None:
            names.extend(self._parent.get_interfaces(True))
        for name in self._definition.get_implements():
            if name not in names:
                names.append(name)
        return names

    def has_trait(self, trait_name: str) -> bool:
        return trait_name in self.get_traits(True)

    def is_implements(self, interface_name: str) -> bool:
        return any(
            self._class_manager.get_class(name).is_instance_of(interface_name)
            for name in self.get_interfaces(True)
        )

    def is_instance_of(self, class_name: str) -> bool:
        """Check this class and its parent chain for class_name."""
        if not isinstance(class_name, str) or not class_name:
            raise InvalidArgumentError("class_name", class_name, "a non-empty class name")
        if self._name == class_name:
            return True
        if self._parent is not None:
            return self._parent.is_instance_of(class_name)
        return False

    # --- Members ---

    def get_methods(self, with_inherited: bool = False) -> dict[str, Callable[..., Any]]:
        """Methods of the class: inherited, then traits, then own."""
        methods: dict[str, Callable[..., Any]] = {}
        if with_inherited and self._parent is not None:
            methods.update(self._parent.get_methods(True))
        for trait in self._get_relatives("traits"):
            methods.update(trait.get_methods(True))
        methods.update(self._definition.get_methods())
        return methods

    def get_data_fields(self, with_inherited: bool = True) -> dict[str, Any]:
        """Copy of the data fields every instance starts with.

        Later sources win: inherited, traits, included configs, own.
        """
        fields: dict[str, Any] = {}
        if with_inherited and self._parent is not None:
            extend_deep(fields, self._parent.get_data_fields(True))
        for relative in self._get_relatives("traits") + self._get_relatives("includes"):
            extend_deep(fields, relative.get_data_fields(True))
        extend_deep(fields, self._definition.get_no_methods())
        return fields

    def get_requires(self, with_inherited: bool = True) -> dict[str, str]:
        requires: dict[str, str] = {}
        if with_inherited and self._parent is not None:
            requires.update(self._parent.get_requires(True))
        requires.update(self._definition.get_requires())
        return requires

    def get_constructor_method(self) -> Callable[..., Any] | None:
        method = self._definition.get_constructor_method()
        if method is None and self._parent is not None:
            return self._parent.get_constructor_method()
        return method

    def get_interface_methods(self) -> list[str]:
        """Names of methods a class implementing this one must define."""
        return sorted(self.get_methods(True))

    # --- Construction ---

    def get_constructor(self) -> type[ClassInstance]:
        """Build the Python class once and return it."""
        if self._constructor is not None:
            return self._constructor
        if self._building:
            raise InvalidClassOptionError(
                "$_extends",
                self._name,
                "a name of a class not extending this one",
                detail="Class inheritance chain is cyclic.",
            )

        definition = self._definition
        self._building = True
        try:
            definition.merge_base_data()
            definition.validate_data()
            definition.process_data()
            constructor = self.create_constructor()
        except Exception:
            self._reset_build_state()
            definition.reset()
            raise
        self._building = False
        self._constructor = constructor
        logger.debug("Built class %r", self._name)
        return constructor

    def create_constructor(self) -> type[ClassInstance]:
        """Resolve the ClassPlan and synthesize the Python class."""
        parent = self._parent
        base: type[ClassInstance] = parent.get_constructor() if parent is not None else ClassInstance
        parent_plan = parent.get_plan() if parent is not None else None

        own_methods = self.get_methods()
        properties = self.get_properties(True)
        for method_name in own_methods:
            if method_name in properties:
                raise InvalidClassOptionError(
                    method_name,
                    self._name,
                    "a method name not used by a typed property",
                    detail=f"Method '{method_name}' clashes with the typed property of that name.",
                )

        namespace: dict[str, Any] = {}
        for name, value in self._definition.get_static().items():
            namespace[name] = staticmethod(value) if callable(value) else value

        accessors = dict(parent_plan.accessors) if parent_plan is not None else {}
        for name, prop in self._properties.items():
            accessors[name] = AccessorPlan.from_installed(name, prop.attach(namespace))

        namespace.update(own_methods)
        namespace["_class_name"] = self._name
        namespace["_class_variant"] = self.variant
        namespace["_class_type"] = self

        methods = dict(parent_plan.methods) if parent_plan is not None else {}
        methods.update(own_methods)

        namespace["_class_plan"] = ClassPlan(
            class_name=self._name,
            variant=self.variant,
            parent_name=parent.get_name() if parent is not None else None,
            methods=methods,
            properties=properties,
            accessors=accessors,
            data_fields=self.get_data_fields(),
            abstract_methods=frozenset(self.get_abstract_methods(True)),
            interfaces=tuple(self.get_interfaces(True)),
            traits=tuple(self.get_traits(True)),
            requires=self.get_requires(),
            static=self._definition.get_static(),
            constructor=self.get_constructor_method(),
        )

        cls_name = python_class_name(self._name)
        namespace["__qualname__"] = cls_name
        return type(cls_name, (base,), namespace)

    def get_plan(self) -> ClassPlan:
        return self.get_constructor()._class_plan

    # --- Instances ---

    def create_instance(self, *args: Any) -> ClassInstance:
        return self.get_constructor()(*args)

    def check_instantiable(self, cls: type) -> None:
        """Raise AbstractInstantiationError if cls can't be instantiated."""
        if not self.instantiable:
            raise AbstractInstantiationError(
                self._name, f"classes of type '{self.variant.value}' can't be instantiated"
            )
        plan = self.get_plan()
        missing = sorted(
            name for name in plan.abstract_methods if not callable(getattr(cls, name, None))
        )
        if missing:
            raise AbstractInstantiationError(
                self._name, f"abstract methods {missing} are not implemented"
            )
        if not self._class_manager.get_config().enforce_interfaces:
            return
        for interface_name in plan.interfaces:
            interface = self._class_manager.get_class(interface_name)
            missing = [
                name
                for name in interface.get_interface_methods()
                if not callable(getattr(cls, name, None))
            ]
            if missing:
                raise AbstractInstantiationError(
                    self._name,
                    f"methods {missing} of interface '{interface_name}' are not implemented",
                )

    def initialize_instance(self, instance: ClassInstance, args: tuple[Any, ...]) -> None:
        """Attach typed values, copy data fields, seal and run $_constructor."""
        plan = self.get_plan()
        self.check_instantiable(type(instance))
        instance._init_store()

        for prop in plan.properties.values():
            prop.attach_hashed(instance)
            definition = prop.get_definition()
            if definition.is_value_declared() and definition.is_writable():
                prop.set_value(instance, definition.get_value())
            prop.set_is_modified(instance, False)

        for name, value in plan.data_fields.items():
            object.__setattr__(instance, name, copy_value(value))

        if self._class_manager.get_config().seal_instances:
            instance._seal()

        for alias, class_name in plan.requires.items():
            plan.properties[alias].set_value(instance, self._class_manager.get_class(class_name))

        if plan.constructor is not None:
            plan.constructor(instance, *args)

    def copy_instance(self, instance: ClassInstance) -> ClassInstance:
        """Create a new instance holding copies of the values of instance.

        The ``$_constructor`` is not called on the copy.
        """
        if not isinstance(instance, ClassInstance) or instance.get_class() is not self:
            raise InvalidArgumentError("instance", instance, f"an instance of class '{self._name}'")
        cls = type(instance)
        plan = self.get_plan()
        copied = cls.__new__(cls)
        copied._init_store()

        for prop in plan.properties.values():
            prop.attach_hashed(copied)
            prop.write(copied, copy_value(prop.get_value(instance)))
            prop.set_is_modified(copied, prop.is_modified(instance))

        for name in plan.data_fields:
            object.__setattr__(copied, name, copy_value(getattr(instance, name)))

        if self._class_manager.get_config().seal_instances:
            copied._seal()
        return copied
