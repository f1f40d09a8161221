"""Rounding helpers shared by every dose calculation.

All rounding in the engine goes through this module and uses
``ROUND_HALF_UP`` (halves away from zero), so ``17.5`` becomes ``18`` and
``2.25`` units rounded to a half-unit step become ``2.5``.
"""

from __future__ import annotations

import math
from decimal import Decimal, ROUND_HALF_UP

from .constants import DOSE_STEP

Number = int | float | Decimal


def to_decimal(value: Number) -> Decimal:
    """Convert ``value`` to :class:`~decimal.Decimal` without binary noise.

    Floats go through ``str`` so ``0.15`` stays ``Decimal("0.15")`` rather
    than the exact binary expansion.
    """
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def positive_decimal(value: object) -> Decimal | None:
    """Return ``value`` as a positive ``Decimal`` or ``None``.

    ``None``, booleans, zero, negative numbers, ``NaN`` and infinities all
    produce ``None``. Non-numeric objects are rejected the same way.

    Examples:
        >>> positive_decimal(70)
        Decimal('70')
        >>> positive_decimal(float("nan")) is None
        True
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, (int, float)):
        if not math.isfinite(value):
            return None
        result = to_decimal(value)
    else:
        return None
    if not result.is_finite() or result <= 0:
        return None
    return result


def round_units(value: Number) -> int:
    """Round ``value`` to the nearest whole insulin unit."""
    return int(to_decimal(value).to_integral_value(rounding=ROUND_HALF_UP))


def round_to_step(value: Number, step: Number = DOSE_STEP) -> float:
    """Round ``value`` to the nearest multiple of ``step``.

    Args:
        value: Unrounded dose.
        step: Rounding step in insulin units. Must be positive.

    Returns:
        ``value`` rounded to the nearest multiple of ``step``.
    """
    s = to_decimal(step)
    if s <= 0:
        raise ValueError("step must be positive")
    rounded = (to_decimal(value) / s).to_integral_value(rounding=ROUND_HALF_UP) * s
    return float(rounded)


__all__ = [
    "Number",
    "to_decimal",
    "positive_decimal",
    "round_units",
    "round_to_step",
]
