"""
Numeric helpers shared by the calculator, environment and review modules.
"""

import math
from typing import Any


def round_half_up(value: float, digits: int = 0) -> float:
    """Round like Math.round: halves go up, not to even."""
    scale = 10 ** digits
    return math.floor(value * scale + 0.5) / scale


def to_number(value: Any) -> float:
    """Coerce to a finite float; malformed values become 0.0."""
    if isinstance(value, bool):
        return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    if math.isnan(number) or math.isinf(number):
        return 0.0
    return number
