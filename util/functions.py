# util/functions.py
from typing import Optional
from urllib.parse import quote
from util.types import AttributeValue

_TRUE = {"1", "true", "t", "yes", "y", "on"}


def to_bool(value: Optional[AttributeValue]) -> bool:
    """
    - Server flags arrive as "0"/"1", "true"/"false" or real booleans.
    - Absent (None) reads as False.
    """
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0
    if isinstance(value, list):
        return bool(value)
    return value.strip().lower() in _TRUE


def to_int(value: Optional[AttributeValue], default: int = 0) -> int:
    if value is None or isinstance(value, list):
        return default
    if isinstance(value, bool):
        return int(value)
    try:
        return int(float(value))
    except (TypeError, ValueError):
        return default


def to_float(value: Optional[AttributeValue], default: float = 0.0) -> float:
    if value is None or isinstance(value, list):
        return default
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def to_str(value: Optional[AttributeValue]) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, list):
        return ",".join(value)
    if isinstance(value, bool):
        return "1" if value else "0"
    return str(value)


def to_list(value: Optional[AttributeValue]) -> list[str]:
    """Wrap scalars; absent -> []."""
    if value is None:
        return []
    if isinstance(value, list):
        return [str(v) for v in value]
    return [to_str(value) or ""]


def join_path(base: str, name: str) -> str:
    """Append a URL-quoted entity name to a collection path."""
    return f"{base.rstrip('/')}/{quote(name, safe='')}"
