from __future__ import annotations

import math


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves going up (2.5 -> 3).

    Python's built-in ``round`` uses banker's rounding, which would move
    scores such as 62.5 into a lower band.
    """
    return math.floor(value + 0.5)


def safe_ratio(numerator: float | None, denominator: float | None) -> float:
    """Return ``numerator / denominator``, or 0.0 when the denominator is zero or missing."""
    if not denominator:
        return 0.0
    return (numerator or 0) / denominator
