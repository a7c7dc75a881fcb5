"""
Input checks shared by the lifecycle handlers.
"""

import math
from typing import Any

from ecotrace.core.errors import ValidationError


def require_text(value: Any, field: str) -> str:
    """Return value unchanged if it is a non-blank string."""
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{field} is required")
    return value


def require_positive(value: Any, field: str) -> float:
    """
    Return value as a float if it is a finite int or float greater than zero.

    Numeric strings are rejected; parsing belongs to the caller.
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValidationError(f"{field} must be a positive number")
    number = float(value)
    if not math.isfinite(number) or number <= 0:
        raise ValidationError(f"{field} must be a positive number")
    return number
