"""
Example 03: Collections

This example uses an object collection of map items, where items may extend
other items of the same collection by key.
"""

from class_forge import ClassManager, ClassVariant, CyclicExtendsError


def main():
    manager = ClassManager()

    manager.register_class("App/Theme", ClassVariant.CLASS, {
        "$_properties": {
            "styles": {
                "type": "objectCollection",
                "proto": {
                    "type": "map",
                    "schema": {
                        "color": {"type": "string", "value": "black"},
                        "size": {"type": "number", "value": 12},
                        "bold": {"type": "boolean", "value": False},
                    },
                },
            },
        },
    })

    theme = manager.get_class("App/Theme").create_instance()

    print("=== Collections ===\n")

    theme.styles.set_items({
        "body": {"color": "gray"},
        "heading": {"extends": "body", "size": 20, "bold": True},
        "title": {"extends": "heading", "size": 32},
    })
    for key, style in theme.styles.items():
        print(f"{key}: {style}")
    print()

    theme.styles.add_item("link", {"color": "blue"})
    print(f"keys: {theme.styles.keys()}")
    print(f"'link' in styles: {'link' in theme.styles}\n")

    try:
        theme.styles.set_items({"a": {"extends": "b"}, "b": {"extends": "a"}})
    except CyclicExtendsError as exc:
        print(f"Rejected: {exc}")


if __name__ == "__main__":
    main()
