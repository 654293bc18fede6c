"""Infer a minimal JSON Schema from an example value."""

from typing import Any

# Containers below this depth are described by type only
MAX_SCHEMA_DEPTH = 64


def infer_schema(example: Any, depth: int = 0) -> dict:
    """Build a schema describing ``example``.

    Arrays are typed from their first element. Object properties are never
    marked required: an example only shows that a key may appear.
    """
    if example is None:
        return {"type": "string", "nullable": True}

    if isinstance(example, (list, tuple)):
        if not example or depth >= MAX_SCHEMA_DEPTH:
            return {"type": "array", "items": {"type": "string"}}
        return {"type": "array", "items": infer_schema(example[0], depth + 1)}

    # bool before int: True is an int in Python
    if isinstance(example, bool):
        return {"type": "boolean"}
    if isinstance(example, int):
        return {"type": "integer", "format": "int32"}
    if isinstance(example, float):
        return {"type": "number", "format": "float"}
    if isinstance(example, str):
        return {"type": "string"}

    if isinstance(example, dict):
        if depth >= MAX_SCHEMA_DEPTH:
            return {"type": "object"}
        return {
            "type": "object",
            "properties": {str(key): infer_schema(value, depth + 1) for key, value in example.items()},
        }

    return {"type": "string"}
