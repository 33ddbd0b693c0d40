"""
Example 01: Basic Classes

This example declares a class with typed properties, builds it and works with
its instances through the generated accessors.
"""

from class_forge import ClassManager, ClassVariant, InvalidValueError


def main():
    manager = ClassManager()

    manager.register_class("App/Point", ClassVariant.CLASS, {
        "$_properties": {
            "x": {"type": "number", "value": 0},
            "y": {"type": "number", "value": 0},
            "visible": {"type": "boolean", "value": True},
        },
        "$_constructor": lambda self, x=0, y=0: (self.set_x(x), self.set_y(y)),
        "length": lambda self: (self.x ** 2 + self.y ** 2) ** 0.5,
        "label": "point",
    })

    point_type = manager.get_class("App/Point")
    point = point_type.create_instance(3, 4)

    print("=== Basic Classes ===\n")
    print(f"Python class: {type(point).__name__}")
    print(f"x={point.get_x()}, y={point.y}, visible={point.is_visible()}")
    print(f"length(): {point.length()}")
    print(f"label data field: {point.label}\n")

    # Typed properties validate every write
    try:
        point.set_x("three")
    except InvalidValueError as exc:
        print(f"Rejected write: {exc}\n")

    # Instances are sealed
    try:
        point.z = 1
    except AttributeError as exc:
        print(f"Sealed instance: {exc}\n")

    copied = point.get_copy()
    copied.set_x(10)
    print(f"Original x={point.x}, copy x={copied.x}")


if __name__ == "__main__":
    main()
