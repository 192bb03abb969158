from __future__ import annotations

import math
from typing import Any, Optional

from ..core.exceptions import InvalidInputError


def is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False


def require_non_empty(value: Optional[str], field_name: str) -> str:
    if is_blank(value):
        raise InvalidInputError(f"{field_name} is required")
    return str(value).strip()


def require_float(value: Any, field_name: str) -> float:
    """Parse a finite float; NaN and +/-inf are rejected."""
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise InvalidInputError(f"{field_name} must be a number") from None
    if not math.isfinite(number):
        raise InvalidInputError(f"{field_name} must be a finite number")
    return number


def require_latitude(value: Any) -> float:
    lat = require_float(value, "Latitude")
    if not -90.0 <= lat <= 90.0:
        raise InvalidInputError("Latitude must be between -90 and 90")
    return lat


def require_longitude(value: Any) -> float:
    lon = require_float(value, "Longitude")
    if not -180.0 <= lon <= 180.0:
        raise InvalidInputError("Longitude must be between -180 and 180")
    return lon


def require_positive_int(value: Any, field_name: str) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise InvalidInputError(f"{field_name} must be an integer") from None
    if number <= 0:
        raise InvalidInputError(f"{field_name} must be positive")
    return number
