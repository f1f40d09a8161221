"""Shared constants for the dosing engine."""

from decimal import Decimal

# Units of insulin per kg of body weight, by risk tier.
HIGH_RISK_UNITS_PER_KG = Decimal("0.5")
MEDIUM_RISK_UNITS_PER_KG = Decimal("0.4")
LOW_RISK_UNITS_PER_KG = Decimal("0.3")

# Share of the total daily dose assigned to each component.
BASAL_SHARE = Decimal("0.50")
BREAKFAST_SHARE = Decimal("0.20")
LUNCH_SHARE = Decimal("0.15")
DINNER_SHARE = Decimal("0.15")

# 1800 rule (insulin sensitivity) and 500 rule (insulin-to-carb ratio).
ISF_RULE = Decimal("1800")
ICR_RULE = Decimal("500")

DEFAULT_TARGET_GLUCOSE: float = 120
DEFAULT_CORRECTION_FACTOR: float = 50

# Doses are rounded to the nearest half unit.
DOSE_STEP = Decimal("0.5")

# Titration multipliers.
BASAL_INCREASE = Decimal("1.15")
BASAL_DECREASE = Decimal("0.85")
BOLUS_INCREASE = Decimal("1.10")
BOLUS_DECREASE = Decimal("0.90")

# Target ranges in mg/dL.
FASTING_RANGE: tuple[float, float] = (70, 95)
PRE_MEAL_RANGE: tuple[float, float] = (70, 100)
POST_MEAL_RANGE: tuple[float, float] = (70, 140)
BEDTIME_RANGE: tuple[float, float] = (70, 120)

# Any reading above this value is out of range regardless of its type.
GENERAL_HIGH_THRESHOLD_MG_DL: float = 180

__all__ = [
    "HIGH_RISK_UNITS_PER_KG",
    "MEDIUM_RISK_UNITS_PER_KG",
    "LOW_RISK_UNITS_PER_KG",
    "BASAL_SHARE",
    "BREAKFAST_SHARE",
    "LUNCH_SHARE",
    "DINNER_SHARE",
    "ISF_RULE",
    "ICR_RULE",
    "DEFAULT_TARGET_GLUCOSE",
    "DEFAULT_CORRECTION_FACTOR",
    "DOSE_STEP",
    "BASAL_INCREASE",
    "BASAL_DECREASE",
    "BOLUS_INCREASE",
    "BOLUS_DECREASE",
    "FASTING_RANGE",
    "PRE_MEAL_RANGE",
    "POST_MEAL_RANGE",
    "BEDTIME_RANGE",
    "GENERAL_HIGH_THRESHOLD_MG_DL",
]
