from datetime import datetime, timezone
from typing import Any, Mapping


def naive_utc(value: Any) -> Any:
    """DateTime columns hold naive UTC; convert aware datetimes on the way in."""
    if isinstance(value, datetime) and value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def apply_fields(obj: Any, fields: Mapping[str, Any]) -> Any:
    for key, value in fields.items():
        if not hasattr(type(obj), key):
            raise AttributeError(f"{type(obj).__name__} has no column {key!r}")
        setattr(obj, key, naive_utc(value))
    return obj
