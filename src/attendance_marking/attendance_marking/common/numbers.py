from __future__ import annotations

import math
from fractions import Fraction
from typing import Optional


def percentage_of(part: int, whole: int) -> Optional[int]:
    """Whole-number percentage, rounding halves up. None when `whole` is 0."""

    if whole <= 0:
        return None
    return math.floor(Fraction(100 * part, whole) + Fraction(1, 2))
