#!/usr/bin/env python3
"""
Example script demonstrating basic usage of the jschema library.

Run from the project root after installing the package:
    python examples/main.py examples/schema
"""

import sys

from jschema import InferenceOptions, ModelHost, RegistryBuilder, discover_sources


def main():
    schema_dir = "examples/schema"
    if len(sys.argv) > 1:
        schema_dir = sys.argv[1]

    print(f"Loading schemas from {schema_dir}...")
    builder = RegistryBuilder(InferenceOptions(show_progress=True))
    registry = builder.build(discover_sources(schema_dir))

    for name, errors in registry.errors().items():
        for error in errors:
            print(f"  {name}: {error}")

    host = ModelHost(registry)
    Order = host["com.example.Order"]
    Status = host["com.example.Order.status"]

    # Unset map and list fields are created on first read
    order = Order(id="A-1")
    order.status = Status.IN_PROGRESS
    order.ship_to.street = "12 Analytical Row"
    order.ship_to.post_code = "N1 9GU"
    order.customer.name = "Ada Lovelace"
    order.lines.append({"sku": "bolt", "quantity": 4, "price": 0.25})

    print(order.pretty_print())

    # Appended maps are already typed as Order.Line
    for line in order.lines:
        print(f"  {line.sku} x{line.quantity} -> parent {line.parent()['id']}")

    parsed = Order.parse(order.write())
    print(f"Status: {parsed.status}")


if __name__ == '__main__':
    main()
