#!/usr/bin/env python3
"""
Example usage of Dynamic JSON.

This script demonstrates diffing, patching, merging and navigating
loosely-typed JSON documents.
"""

import json
from dataclasses import dataclass, field
from typing import List

from src.dynamic_json import ABSENT, DynamicJSON, JsonPath


@dataclass
class Order:
    id: int
    total: float = 0.0
    items: List[str] = field(default_factory=list)


def main():
    """Main example function."""
    print("Dynamic JSON Example")
    print("=" * 50)

    engine = DynamicJSON()

    original = engine.loads(json.dumps({
        "user": {
            "name": "Alice Johnson",
            "email": "alice@example.com",
            "orders": [
                {"id": 1001, "total": 25.5, "items": ["pen", "ink"]},
                {"id": 1002, "total": 12, "items": []}
            ],
            "settings": {"theme": "dark", "notifications": True}
        },
        "created_at": "2024-01-01T10:00:00Z"
    }))

    updated = engine.loads(json.dumps({
        "user": {
            "name": "Alice Johnson",
            "email": "alice@example.org",
            "orders": [
                {"id": 1001, "total": 25.5, "items": ["pen", "ink"]}
            ],
            "settings": {"theme": "light", "language": "en"}
        },
        "created_at": "2024-01-01T10:00:00Z"
    }))

    # Merge patch
    print("\n📝 Merge patch:")
    patch = engine.diff(original, updated)
    if patch is ABSENT:
        print("   No changes")
    else:
        print(engine.dumps(patch, indent=2))

    patched = engine.apply_patch(original, patch)
    print(f"\n✅ Patch reproduces the updated document: {patched == updated}")

    # Path-aware changes
    print("\n🔍 Changes by path:")
    for entry in engine.diff_with_paths(original, updated):
        print(f"   {entry.describe()}")

    # Deep merge
    print("\n🔀 Merge with array concatenation:")
    defaults = {"settings": {"theme": "dark", "tags": ["default"]}}
    overrides = {"settings": {"tags": ["custom"]}}
    print(engine.dumps(engine.merge(defaults, overrides, concat_arrays=True), indent=2))

    # Navigation
    path = JsonPath.root().property("user").property("orders").index(0).property("total")
    print(f"\n🧭 {path} = {engine.get(original, path)}")
    print(f"   /user/orders[5] resolves: {engine.is_valid_for(original, '/user/orders[5]')}")

    # Dynamic access and typed mapping
    data = engine.materialize(original)
    print(f"\n👤 {data.User.Name} <{data.user.email}>, created {data.created_at:%Y-%m-%d}")
    orders = data.user.orders.to_list(Order)
    for order in orders:
        print(f"   • Order {order.id}: {order.total} ({len(order.items)} items)")


if __name__ == "__main__":
    main()
