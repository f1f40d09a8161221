"""Insulin dose calculations for gestational diabetes.

The functions in this module are pure: they take plain numbers and return
either a computed value or a sentinel (``None`` for composite results, ``0``
for doses) when the input is insufficient. They never raise on missing,
zero or ``NaN`` input so callers can branch on the sentinel.

The figures follow general GDM dosing guidelines and are meant to be
reviewed by a clinician before use.
"""

from __future__ import annotations

import logging
from decimal import Decimal

from .models import (
    BolusDoses,
    DoseDefaults,
    DoseProfile,
    MealDoseResult,
    PatientProfile,
    RiskLevel,
)
from .utils.constants import (
    BASAL_SHARE,
    BREAKFAST_SHARE,
    DINNER_SHARE,
    DOSE_STEP,
    HIGH_RISK_UNITS_PER_KG,
    ICR_RULE,
    ISF_RULE,
    LOW_RISK_UNITS_PER_KG,
    LUNCH_SHARE,
    MEDIUM_RISK_UNITS_PER_KG,
)
from .utils.rounding import Number, positive_decimal, round_to_step, round_units, to_decimal

logger = logging.getLogger(__name__)

DEFAULT_DOSE_DEFAULTS = DoseDefaults()

_UNITS_PER_KG: dict[RiskLevel, Decimal] = {
    RiskLevel.HIGH: HIGH_RISK_UNITS_PER_KG,
    RiskLevel.MEDIUM: MEDIUM_RISK_UNITS_PER_KG,
    RiskLevel.LOW: LOW_RISK_UNITS_PER_KG,
}


def calculate_initial_dose(
    weight_kg: Number | None, risk_level: RiskLevel | str | None
) -> DoseProfile | None:
    """Calculate the starting insulin prescription from body weight.

    The total daily dose (TDD) is ``weight_kg`` times 0.5, 0.4 or 0.3 units
    for high, medium and low risk. Unrecognised risk levels count as low.
    TDD is rounded to whole units first, then split into 50% basal and
    20/15/15% breakfast/lunch/dinner bolus. Every part is rounded on its
    own, so the parts may not add up to TDD exactly.

    Args:
        weight_kg: Body weight in kilograms.
        risk_level: Patient risk tier.

    Returns:
        The initial :class:`DoseProfile`, or ``None`` if ``weight_kg`` is
        missing, zero, negative or not finite.
    """
    weight = positive_decimal(weight_kg)
    if weight is None:
        return None

    level = RiskLevel.parse(risk_level)
    total_daily_dose = round_units(weight * _UNITS_PER_KG[level])
    logger.debug(
        "Initial TDD %s units for %s kg at %s risk", total_daily_dose, weight, level.value
    )

    tdd = Decimal(total_daily_dose)
    return DoseProfile(
        total_daily_dose=total_daily_dose,
        basal_insulin=round_units(tdd * BASAL_SHARE),
        bolus_doses=BolusDoses(
            breakfast=round_units(tdd * BREAKFAST_SHARE),
            lunch=round_units(tdd * LUNCH_SHARE),
            dinner=round_units(tdd * DINNER_SHARE),
        ),
    )


def initial_dose_for_patient(patient: PatientProfile) -> DoseProfile | None:
    return calculate_initial_dose(patient.weight_kg, patient.risk_level)


def calculate_correction(
    current_glucose: Number | None,
    target_glucose: Number | None = None,
    correction_factor: Number | None = None,
    *,
    defaults: DoseDefaults = DEFAULT_DOSE_DEFAULTS,
) -> float:
    """Return the correction dose for glucose above target.

    ``target_glucose`` and ``correction_factor`` fall back to ``defaults``
    (120 mg/dL and 50 mg/dL per unit) when ``None``.

    Returns:
        ``(current - target) / factor`` rounded to the nearest 0.5 unit, or
        ``0`` when glucose is missing or at/below target.
    """
    current = positive_decimal(current_glucose)
    target = to_decimal(defaults.target_glucose if target_glucose is None else target_glucose)
    factor = positive_decimal(
        defaults.correction_factor if correction_factor is None else correction_factor
    )
    if current is None or not target.is_finite() or current <= target:
        return 0
    if factor is None:
        logger.debug("No usable correction factor %r, skipping correction", correction_factor)
        return 0
    return round_to_step((current - target) / factor, DOSE_STEP)


def calculate_isf(total_daily_dose: Number | None) -> int | None:
    """Insulin sensitivity factor in mg/dL per unit (1800 rule)."""
    tdd = positive_decimal(total_daily_dose)
    if tdd is None:
        return None
    return round_units(ISF_RULE / tdd)


def calculate_icr(total_daily_dose: Number | None) -> int | None:
    """Insulin-to-carbohydrate ratio in grams per unit (500 rule)."""
    tdd = positive_decimal(total_daily_dose)
    if tdd is None:
        return None
    return round_units(ICR_RULE / tdd)


def calculate_meal_bolus(carb_grams: Number | None, icr: Number | None) -> float:
    """Bolus covering ``carb_grams``, rounded to the nearest 0.5 unit.

    Returns ``0`` if either argument is missing or zero.
    """
    carbs = positive_decimal(carb_grams)
    ratio = positive_decimal(icr)
    if carbs is None or ratio is None:
        return 0
    return round_to_step(carbs / ratio, DOSE_STEP)


def calculate_meal_dose(
    carb_grams: Number | None,
    current_glucose: Number | None,
    total_daily_dose: Number | None,
    target_glucose: Number | None = None,
    *,
    defaults: DoseDefaults = DEFAULT_DOSE_DEFAULTS,
) -> MealDoseResult | None:
    """Combine carbohydrate and correction bolus into one meal dose.

    ISF and ICR are derived from ``total_daily_dose``. The correction part
    uses the patient's ISF as correction factor instead of the default one.

    Args:
        carb_grams: Carbohydrates in the meal.
        current_glucose: Pre-meal glucose in mg/dL.
        total_daily_dose: Current total daily insulin dose in units.
        target_glucose: Correction target. ``None`` uses ``defaults``.
        defaults: Fallback values for the correction target.

    Returns:
        :class:`MealDoseResult` or ``None`` when any input is missing or the
        ISF rounds to zero. An ICR that rounds to zero gives a zero meal
        bolus.
    """
    if (
        positive_decimal(carb_grams) is None
        or positive_decimal(current_glucose) is None
        or positive_decimal(total_daily_dose) is None
    ):
        return None

    isf = calculate_isf(total_daily_dose)
    # A zero ICR only zeroes the meal bolus.
    icr = calculate_icr(total_daily_dose) or 0
    if not isf:
        logger.debug("Cannot derive ISF from TDD %r", total_daily_dose)
        return None

    meal_bolus = calculate_meal_bolus(carb_grams, icr)
    correction_bolus = calculate_correction(
        current_glucose, target_glucose, isf, defaults=defaults
    )
    total_dose = round_to_step(
        to_decimal(meal_bolus) + to_decimal(correction_bolus), DOSE_STEP
    )
    return MealDoseResult(
        meal_bolus=meal_bolus,
        correction_bolus=correction_bolus,
        total_dose=total_dose,
        isf=isf,
        icr=icr,
    )


__all__ = [
    "DEFAULT_DOSE_DEFAULTS",
    "calculate_initial_dose",
    "initial_dose_for_patient",
    "calculate_correction",
    "calculate_isf",
    "calculate_icr",
    "calculate_meal_bolus",
    "calculate_meal_dose",
]
