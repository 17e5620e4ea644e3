from typing import Any


def coerce_id(value: Any) -> Any:
    """Record ids arrive as numbers or strings; compare them as strings."""
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return str(int(value)) if float(value).is_integer() else str(value)
    return value
