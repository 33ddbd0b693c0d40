"""
Example 04: Configs and Builders

This example assembles configs with the fluent builders. Included configs are
deep-merged under the fields of the including config.
"""

from class_forge import ClassManager, ClassVariant


def main():
    manager = ClassManager()

    (
        manager.build_class(ClassVariant.CONFIG, "db")
        .add_defaults({"host": "localhost", "port": 5432, "options": {"timeout": 10}})
        .save()
    )
    (
        manager.build_class(ClassVariant.CONFIG, "app")
        .set_includes(["db"])
        .add_defaults({"debug": False, "options": {"retries": 3}})
        .save()
    )

    config = manager.get_class("app").create_instance()

    print("=== Configs and Builders ===\n")
    print(f"defaults: {config.get_defaults()}")
    print(f"own schema defaults: {config.get_schema_defaults()}\n")

    config.set_values({"debug": True, "options": {"timeout": 30}})
    print(f"values: {config.get_values()}\n")

    # Builders can also alter an existing declaration
    manager.build_class(ClassVariant.CLASS, "App/Greeter").add_method(
        "greet", lambda self: f"Hello, {self.name}"
    ).add_property("name", {"type": "string", "value": "world"}).save()

    greeter = manager.get_class("App/Greeter").create_instance()
    print(greeter.greet())

    manager.alter_class("App/Greeter").add_method(
        "greet", lambda self: f"Hi, {self.name}!"
    ).save()
    print(manager.get_class("App/Greeter").create_instance().greet())


if __name__ == "__main__":
    main()
