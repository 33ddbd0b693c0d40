"""
Example 02: Inheritance, Traits and Interfaces

This example combines an abstract base class, a trait and an interface, and
shows where abstract and interface methods are enforced.
"""

from class_forge import AbstractInstantiationError, ClassManager, ClassVariant


def main():
    manager = ClassManager()

    manager.register_class("App/Shape", ClassVariant.ABSTRACT_CLASS, {
        "$_properties": {"name": {"type": "string", "value": "shape"}},
        "$_abstract": {"area": lambda self: None},
        "describe": lambda self: f"{self.name}: area={self.area()}",
    })
    manager.register_class("App/Tagged", ClassVariant.TRAIT, {
        "$_properties": {
            "tags": {"type": "arrayCollection", "proto": {"type": "string", "nullable": False}},
        },
        "tag": lambda self, value: self.tags.add_item(value),
    })
    manager.register_class("App/Drawable", ClassVariant.INTERFACE, {
        "draw": lambda self: None,
    })
    manager.register_class("App/Square", ClassVariant.CLASS, {
        "$_extends": "App/Shape",
        "$_traits": ["App/Tagged"],
        "$_implements": ["App/Drawable"],
        "$_properties": {"side": {"type": "number", "value": 1}},
        "area": lambda self: self.side ** 2,
        "draw": lambda self: "[]",
    })

    print("=== Inheritance, Traits and Interfaces ===\n")

    square = manager.get_class("App/Square").create_instance()
    square.set_side(3)
    square.set_name("square")
    square.tag("blue")
    print(square.describe())
    print(f"draw(): {square.draw()}")
    print(f"tags: {square.tags.to_data()}")
    print(f"is_instance_of('App/Shape'): {square.is_instance_of('App/Shape')}")
    print(f"has_trait('App/Tagged'): {square.has_trait('App/Tagged')}")
    print(f"is_implements('App/Drawable'): {square.is_implements('App/Drawable')}\n")

    try:
        manager.get_class("App/Shape").create_instance()
    except AbstractInstantiationError as exc:
        print(f"Abstract class: {exc}")

    manager.register_class("App/Circle", ClassVariant.CLASS, {
        "$_extends": "App/Shape",
        "$_implements": ["App/Drawable"],
        "area": lambda self: 3.14,
    })
    try:
        manager.get_class("App/Circle").create_instance()
    except AbstractInstantiationError as exc:
        print(f"Missing interface method: {exc}")


if __name__ == "__main__":
    main()
