from typing import Any, Optional
from imgchain.domain.types import Size


def validate_float(val: Any, default: float = 0.0) -> float:
    """Ensures a value is a float, providing a default if None."""
    if val is None:
        return default
    try:
        return float(val)
    except (TypeError, ValueError):
        return default


def validate_bool(val: Any, default: bool = False) -> bool:
    """
    Ensures a value is a bool.
    Strings coming from environment variables are parsed ("1", "true", "yes", "on").
    """
    if val is None:
        return default
    if isinstance(val, str):
        return val.strip().lower() in ("1", "true", "yes", "on")
    return bool(val)


def validate_size(val: Any) -> Optional[Size]:
    """
    Coerces a [w, h] pair, a {"width", "height"} mapping or a "WxH" string to a Size.
    Returns None for missing or unparseable values.
    """
    if val is None:
        return None
    if isinstance(val, Size):
        return val
    try:
        if isinstance(val, str):
            w, h = val.lower().split("x")
        elif isinstance(val, dict):
            w, h = val["width"], val["height"]
        else:
            w, h = val
        return Size(float(w), float(h))
    except (TypeError, ValueError, KeyError):
        return None
