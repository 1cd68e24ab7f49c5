from __future__ import annotations

from typing import Any


def build_large_context() -> dict[str, Any]:
    """Large context: 1000 rows, each with a nested mapping and tags."""
    return {
        "title": "Inventory",
        "rows": [
            {
                "id": i,
                "name": f"Item <{i}>",
                "stock": {"warehouse": f"W{i % 7}", "count": i * 3},
                "tags": [f"t{i % 5}", f"t{i % 11}"],
                "discontinued": i % 13 == 0,
            }
            for i in range(1000)
        ],
    }


LARGE_CONTEXT = build_large_context()
