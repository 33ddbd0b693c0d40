"""Unit tests for ClassType construction and instances."""

from __future__ import annotations

from typing import Any

import pytest

from class_forge.classes.instance import ClassInstance
from class_forge.classes.plan import ClassPlan
from class_forge.core.enums import ClassVariant
from class_forge.core.exceptions import (
    AbstractInstantiationError,
    ClassNotFoundError,
    InvalidArgumentError,
    InvalidClassOptionError,
    InvalidValueError,
    PropertyNotFoundError,
)
from class_forge.core.registry import ClassManager

POINT = {
    "$_properties": {
        "x": {"type": "number", "value": 0},
        "y": {"type": "number", "value": 0},
    },
}


def area(self: Any) -> float:
    return self.width * self.height


class TestConstructor:
    def test_constructor_is_built_once(self, manager: ClassManager) -> None:
        class_type = manager.register_class("Point", ClassVariant.CLASS, POINT)
        first = class_type.get_constructor()
        assert class_type.get_constructor() is first
        assert issubclass(first, ClassInstance)
        assert first.__name__ == "Point"

    def test_namespaced_name(self, manager: ClassManager) -> None:
        class_type = manager.register_class("App/Models/User", ClassVariant.CLASS, {})
        assert class_type.get_constructor().__name__ == "User"
        assert class_type.create_instance().get_class_name() == "App/Models/User"

    def test_failed_build_is_retried(self, manager: ClassManager) -> None:
        class_type = manager.register_class("Child", ClassVariant.CLASS, {"$_extends": "Parent"})
        with pytest.raises(ClassNotFoundError):
            class_type.get_constructor()
        assert class_type.get_parent() is None

        manager.register_class("Parent", ClassVariant.CLASS, POINT)
        instance = class_type.create_instance()
        assert instance.is_instance_of("Parent")
        assert instance.get_x() == 0

    def test_cyclic_inheritance(self, manager: ClassManager) -> None:
        manager.register_class("A", ClassVariant.CLASS, {"$_extends": "B"})
        manager.register_class("B", ClassVariant.CLASS, {"$_extends": "A"})
        with pytest.raises(InvalidClassOptionError, match="cyclic"):
            manager.get_class("A").get_constructor()
        # the failure leaves no half-built state behind
        with pytest.raises(InvalidClassOptionError, match="cyclic"):
            manager.get_class("B").get_constructor()

    def test_plan(self, manager: ClassManager) -> None:
        class_type = manager.register_class("Flag", ClassVariant.CLASS, {
            "$_properties": {"active": {"type": "boolean"}},
            "toggle": lambda self: self.set_active(not self.is_active()),
            "label": "flag",
        })
        plan = class_type.get_plan()
        assert isinstance(plan, ClassPlan)
        assert plan.variant is ClassVariant.CLASS
        assert plan.parent_name is None
        assert "toggle" in plan.methods
        assert plan.data_fields == {"label": "flag"}
        accessor = plan.accessors["active"]
        assert accessor.getter == "get_active"
        assert accessor.setter == "set_active"
        assert accessor.checker == "is_active"

    def test_plan_belongs_to_built_class(self, manager: ClassManager) -> None:
        class_type = manager.register_class("Flag", ClassVariant.CLASS, {"label": "old"})
        old_cls = class_type.get_constructor()
        assert class_type.get_plan() is old_cls._class_plan

        class_type.set_definition({"label": "new"})
        assert class_type.get_plan().data_fields == {"label": "new"}
        assert old_cls._class_plan.data_fields == {"label": "old"}

    def test_method_clashing_with_property(self, manager: ClassManager) -> None:
        class_type = manager.register_class("A", ClassVariant.CLASS, {
            "$_properties": {"name": {"type": "string"}},
            "name": lambda self: "x",
        })
        with pytest.raises(InvalidClassOptionError, match="clashes"):
            class_type.get_constructor()


class TestProperties:
    def test_accessors_and_attribute(self, manager: ClassManager) -> None:
        point = manager.register_class("Point", ClassVariant.CLASS, POINT).create_instance()
        point.set_x(3)
        point.y = 4
        assert point.get_x() == 3
        assert point.y == 4
        with pytest.raises(InvalidValueError):
            point.set_x("3")

    def test_get_property(self, manager: ClassManager) -> None:
        class_type = manager.register_class("Point", ClassVariant.CLASS, POINT)
        class_type.get_constructor()
        assert class_type.get_property("x").get_name() == "x"
        assert class_type.isset_property("y")
        with pytest.raises(PropertyNotFoundError):
            class_type.get_property("z")

    def test_declared_default_is_not_modified(self, manager: ClassManager) -> None:
        class_type = manager.register_class("Point", ClassVariant.CLASS, POINT)
        point = class_type.create_instance()
        prop = class_type.get_property("x")
        assert not prop.is_modified(point)
        point.set_x(1)
        assert prop.is_modified(point)

    def test_values_are_per_instance(self, manager: ClassManager) -> None:
        class_type = manager.register_class("Point", ClassVariant.CLASS, POINT)
        first, second = class_type.create_instance(), class_type.create_instance()
        first.set_x(10)
        assert second.get_x() == 0

    def test_inherited_properties(self, manager: ClassManager) -> None:
        manager.register_class("Point", ClassVariant.CLASS, POINT)
        point3d = manager.register_class("Point3D", ClassVariant.CLASS, {
            "$_extends": "Point",
            "$_properties": {"z": {"type": "number", "value": 0}},
        }).create_instance()
        point3d.set_x(1)
        point3d.set_z(2)
        assert (point3d.x, point3d.y, point3d.z) == (1, 0, 2)
        assert isinstance(point3d, manager.get_class("Point").get_constructor())

    def test_not_writable_property_has_no_setter(self, manager: ClassManager) -> None:
        obj = manager.register_class("A", ClassVariant.CLASS, {
            "$_properties": {"id": {"type": "number", "value": 7, "writable": False}},
        }).create_instance()
        assert obj.get_id() == 7
        assert not hasattr(obj, "set_id")

    def test_property_without_accessors(self, manager: ClassManager) -> None:
        obj = manager.register_class("A", ClassVariant.CLASS, {
            "$_properties": {"raw": {"type": "string", "accessors": False}},
        }).create_instance()
        obj.raw = "x"
        assert obj.raw == "x"
        assert not hasattr(obj, "get_raw")


class TestMembers:
    def test_methods_and_data_fields(self, manager: ClassManager) -> None:
        counter = manager.register_class("Counter", ClassVariant.CLASS, {
            "count": 0,
            "history": [],
            "increment": lambda self: setattr(self, "count", self.count + 1),
        })
        first, second = counter.create_instance(), counter.create_instance()
        first.increment()
        first.history.append(1)
        assert first.count == 1
        assert second.count == 0
        assert second.history == []

    def test_constructor_receives_arguments(self, manager: ClassManager) -> None:
        def init(self: Any, x: float, y: float) -> None:
            self.set_x(x)
            self.set_y(y)

        declaration = dict(POINT, **{"$_constructor": init})
        point = manager.register_class("Point", ClassVariant.CLASS, declaration).create_instance(1, 2)
        assert (point.x, point.y) == (1, 2)

    def test_constructor_is_inherited(self, manager: ClassManager) -> None:
        declaration = dict(POINT, **{"$_constructor": lambda self, x: self.set_x(x)})
        manager.register_class("Point", ClassVariant.CLASS, declaration)
        child = manager.register_class("Child", ClassVariant.CLASS, {"$_extends": "Point"})
        assert child.create_instance(5).get_x() == 5

    def test_static_members(self, manager: ClassManager) -> None:
        cls = manager.register_class("Math", ClassVariant.CLASS, {
            "$_static": {"PI": 3.14, "double": lambda value: value * 2},
        }).get_constructor()
        assert cls.PI == 3.14
        assert cls.double(2) == 4
        assert cls().double(3) == 6

    def test_static_named_like_property(self, manager: ClassManager) -> None:
        class_type = manager.register_class("A", ClassVariant.CLASS, {
            "$_properties": {"x": {"type": "number"}},
            "$_static": {"x": 1},
        })
        with pytest.raises(InvalidClassOptionError) as exc_info:
            class_type.get_constructor()
        assert exc_info.value.option == "$_static"

    def test_requires_are_resolved_to_classes(self, manager: ClassManager) -> None:
        logger_class = manager.register_class("App/Logger", ClassVariant.CLASS, {})
        service = manager.register_class("App/Service", ClassVariant.CLASS, {
            "$_requires": {"Logger": "App/Logger"},
            "make_logger": lambda self: self.Logger.create_instance(),
        }).create_instance()
        assert service.Logger is logger_class
        assert service.get_Logger() is logger_class
        assert service.make_logger().get_class_name() == "App/Logger"

    def test_missing_required_class(self, manager: ClassManager) -> None:
        class_type = manager.register_class("A", ClassVariant.CLASS, {"$_requires": {"B": "B"}})
        with pytest.raises(ClassNotFoundError):
            class_type.get_constructor()

    def test_helpers(self, manager: ClassManager) -> None:
        obj = manager.register_class("A", ClassVariant.CLASS, {}).create_instance()
        assert obj.get_class_manager() is manager
        assert obj.get_class() is manager.get_class("A")
        assert not obj.has_trait("T")
        assert not obj.is_implements("I")


class TestSealing:
    def test_sealed_instance(self, manager: ClassManager) -> None:
        obj = manager.register_class("A", ClassVariant.CLASS, dict(POINT, count=0)).create_instance()
        obj.count = 5
        obj.x = 2
        with pytest.raises(AttributeError, match="sealed"):
            obj.extra = 1
        with pytest.raises(AttributeError, match="sealed"):
            del obj.count
        with pytest.raises(AttributeError):
            del obj.x

    def test_unsealed_instance(self, unsealed_manager: ClassManager) -> None:
        obj = unsealed_manager.register_class("A", ClassVariant.CLASS, {}).create_instance()
        obj.extra = 1
        assert obj.extra == 1


class TestCopy:
    def test_copy_does_not_call_constructor(self, manager: ClassManager) -> None:
        calls: list[Any] = []
        declaration = dict(
            POINT, tags=["a"], **{"$_constructor": lambda self: calls.append(self)}
        )
        original = manager.register_class("Point", ClassVariant.CLASS, declaration).create_instance()
        original.set_x(4)

        copied = original.get_copy()

        assert len(calls) == 1
        assert copied is not original
        assert copied.get_x() == 4
        assert copied.tags == ["a"] and copied.tags is not original.tags
        assert manager.get_class("Point").get_property("x").is_modified(copied)

    def test_copy_requires_own_instance(self, manager: ClassManager) -> None:
        a = manager.register_class("A", ClassVariant.CLASS, {})
        b = manager.register_class("B", ClassVariant.CLASS, {})
        with pytest.raises(InvalidArgumentError):
            a.copy_instance(b.create_instance())


class TestAbstractClasses:
    @pytest.fixture
    def shape(self, manager: ClassManager) -> None:
        manager.register_class("Shape", ClassVariant.ABSTRACT_CLASS, {
            "$_properties": {
                "width": {"type": "number", "value": 1},
                "height": {"type": "number", "value": 1},
            },
            "$_abstract": {"area": area},
            "describe": lambda self: f"area={self.area()}",
        })

    def test_abstract_class_is_not_instantiable(self, manager: ClassManager, shape: None) -> None:
        with pytest.raises(AbstractInstantiationError):
            manager.get_class("Shape").create_instance()

    def test_missing_abstract_method(self, manager: ClassManager, shape: None) -> None:
        manager.register_class("Square", ClassVariant.CLASS, {"$_extends": "Shape"})
        with pytest.raises(AbstractInstantiationError, match="area"):
            manager.get_class("Square").create_instance()

    def test_implemented_abstract_method(self, manager: ClassManager, shape: None) -> None:
        manager.register_class("Square", ClassVariant.CLASS, {"$_extends": "Shape", "area": area})
        square = manager.get_class("Square").create_instance()
        square.set_width(3)
        square.set_height(3)
        assert square.describe() == "area=9"
        assert square.is_instance_of("Shape")


class TestTraitsAndInterfaces:
    def test_trait_members_are_mixed_in(self, manager: ClassManager) -> None:
        manager.register_class("Timestamps", ClassVariant.TRAIT, {
            "$_properties": {"stamp": {"type": "number", "value": 0}},
            "touch": lambda self: self.set_stamp(self.stamp + 1),
        })
        manager.register_class("Post", ClassVariant.CLASS, {"$_traits": ["Timestamps"]})
        post = manager.get_class("Post").create_instance()
        post.touch()
        assert post.get_stamp() == 1
        assert post.has_trait("Timestamps")
        assert not post.is_instance_of("Timestamps")

    def test_nested_traits(self, manager: ClassManager) -> None:
        manager.register_class("Base", ClassVariant.TRAIT, {"hello": lambda self: "hi"})
        manager.register_class("Greeter", ClassVariant.TRAIT, {"$_traits": ["Base"]})
        manager.register_class("A", ClassVariant.CLASS, {"$_traits": ["Greeter"]})
        manager.register_class("B", ClassVariant.CLASS, {"$_extends": "A"})
        b = manager.get_class("B").create_instance()
        assert b.hello() == "hi"
        assert b.has_trait("Base") and b.has_trait("Greeter")

    def test_own_property_wins_over_trait(self, manager: ClassManager) -> None:
        manager.register_class("T", ClassVariant.TRAIT, {
            "$_properties": {"name": {"type": "string", "value": "trait"}},
        })
        obj = manager.register_class("A", ClassVariant.CLASS, {
            "$_traits": ["T"],
            "$_properties": {"name": {"type": "string", "value": "own"}},
        }).create_instance()
        assert obj.get_name() == "own"

    def test_trait_is_not_instantiable(self, manager: ClassManager) -> None:
        trait = manager.register_class("T", ClassVariant.TRAIT, {})
        with pytest.raises(AbstractInstantiationError):
            trait.create_instance()

    def test_interface_methods_are_enforced(self, manager: ClassManager) -> None:
        manager.register_class("Runnable", ClassVariant.INTERFACE, {"run": lambda self: None})
        manager.register_class("Job", ClassVariant.CLASS, {"$_implements": ["Runnable"]})
        with pytest.raises(AbstractInstantiationError, match="Runnable"):
            manager.get_class("Job").create_instance()

    def test_interface_enforcement_can_be_disabled(self) -> None:
        from class_forge.core.config import ClassManagerConfig

        manager = ClassManager(ClassManagerConfig(enforce_interfaces=False))
        manager.register_class("Runnable", ClassVariant.INTERFACE, {"run": lambda self: None})
        manager.register_class("Job", ClassVariant.CLASS, {"$_implements": ["Runnable"]})
        assert manager.get_class("Job").create_instance().is_implements("Runnable")

    def test_is_implements_follows_interface_parents(self, manager: ClassManager) -> None:
        manager.register_class("Base", ClassVariant.INTERFACE, {})
        manager.register_class("Runnable", ClassVariant.INTERFACE, {
            "$_extends": "Base",
            "run": lambda self: "ran",
        })
        manager.register_class("Job", ClassVariant.CLASS, {
            "$_implements": ["Runnable"],
            "run": lambda self: "ran",
        })
        manager.register_class("NightlyJob", ClassVariant.CLASS, {"$_extends": "Job"})
        job = manager.get_class("NightlyJob").create_instance()
        assert job.is_implements("Runnable")
        assert job.is_implements("Base")
        assert not job.is_implements("Other")

    def test_interface_properties_are_adopted(self, manager: ClassManager) -> None:
        manager.register_class("Named", ClassVariant.INTERFACE, {
            "$_properties": {"title": {"type": "string", "value": ""}},
        })
        obj = manager.register_class("A", ClassVariant.CLASS, {
            "$_implements": ["Named"],
        }).create_instance()
        obj.set_title("t")
        assert obj.title == "t"


class TestRedefinition:
    def test_set_definition_rebuilds(self, manager: ClassManager) -> None:
        class_type = manager.register_class("A", ClassVariant.CLASS, POINT)
        old_cls = class_type.get_constructor()
        class_type.set_definition({"$_properties": {"name": {"type": "string", "value": "a"}}})
        new_cls = class_type.get_constructor()
        assert new_cls is not old_cls
        obj = new_cls()
        assert obj.get_name() == "a"
        assert not hasattr(obj, "get_x")

    def test_is_instance_of_validates_name(self, manager: ClassManager) -> None:
        class_type = manager.register_class("A", ClassVariant.CLASS, {})
        with pytest.raises(InvalidArgumentError):
            class_type.is_instance_of("")
