"""Dose titration from a patient's recent glucose history."""

from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Iterable, Sequence
from dataclasses import replace
from decimal import Decimal

from .models import (
    MEALS,
    AdjustedDoseProfile,
    DoseProfile,
    GlucoseReading,
    MealContext,
    ReadingType,
    TargetRange,
    TargetRanges,
)
from .utils.constants import BASAL_DECREASE, BASAL_INCREASE, BOLUS_DECREASE, BOLUS_INCREASE
from .utils.rounding import round_units, to_decimal

logger = logging.getLogger(__name__)


def group_readings(
    readings: Iterable[GlucoseReading],
) -> dict[ReadingType, list[GlucoseReading]]:
    """Partition ``readings`` by reading type.

    Readings whose type is not a known :class:`ReadingType` are skipped.
    """
    grouped: defaultdict[ReadingType, list[GlucoseReading]] = defaultdict(list)
    for reading in readings:
        reading_type = ReadingType.parse(reading.reading_type)
        if reading_type is None:
            logger.debug("Ignoring reading with unknown type %r", reading.reading_type)
            continue
        grouped[reading_type].append(reading)
    return dict(grouped)


def average_glucose(readings: Sequence[GlucoseReading]) -> float | None:
    """Arithmetic mean of ``glucose_value`` or ``None`` for no readings."""
    if not readings:
        return None
    total = sum((to_decimal(r.glucose_value) for r in readings), Decimal(0))
    return float(total / len(readings))


def _titrate(
    dose: int,
    average: float | None,
    target: TargetRange,
    increase: Decimal,
    decrease: Decimal,
) -> int:
    if average is None:
        return dose
    if average > target.max:
        return round_units(Decimal(dose) * increase)
    if average < target.min:
        return round_units(Decimal(dose) * decrease)
    return dose


def adjust_insulin_dose(
    current_dose: DoseProfile | None,
    glucose_readings: Sequence[GlucoseReading] | None,
    target_ranges: TargetRanges | None = None,
) -> AdjustedDoseProfile | None:
    """Adjust basal and bolus doses against recent glucose readings.

    Basal insulin follows the fasting average: above ``fasting.max`` it is
    raised by 15%, below ``fasting.min`` lowered by 15%. Each meal bolus
    follows the average of post-meal readings for that meal: above
    ``post_meal.max`` it is raised by 10%, below ``post_meal.min`` lowered
    by 10%. Range boundaries count as in range. Doses without readings to
    judge them by are carried over unchanged.

    Args:
        current_dose: Dose currently prescribed.
        glucose_readings: Readings collected since the last adjustment.
        target_ranges: Target ranges; defaults to :class:`TargetRanges`.

    Returns:
        The adjusted dose whose ``total_daily_dose`` is the sum of its
        components, or ``None`` when there is no dose or no readings.
    """
    if current_dose is None or not glucose_readings:
        return None
    ranges = target_ranges or TargetRanges()

    grouped = group_readings(glucose_readings)

    fasting_avg = average_glucose(grouped.get(ReadingType.FASTING, []))
    basal = _titrate(
        current_dose.basal_insulin,
        fasting_avg,
        ranges.fasting,
        BASAL_INCREASE,
        BASAL_DECREASE,
    )
    logger.debug(
        "Fasting average %s: basal %s -> %s",
        fasting_avg,
        current_dose.basal_insulin,
        basal,
    )

    post_meal = grouped.get(ReadingType.POST_MEAL, [])
    bolus_doses = current_dose.bolus_doses
    for meal in MEALS:
        meal_avg = average_glucose(
            [r for r in post_meal if MealContext.parse(r.meal_context) is meal]
        )
        current = bolus_doses.for_meal(meal)
        adjusted = _titrate(
            current, meal_avg, ranges.post_meal, BOLUS_INCREASE, BOLUS_DECREASE
        )
        if adjusted != current:
            logger.debug(
                "Post-%s average %s: bolus %s -> %s", meal.value, meal_avg, current, adjusted
            )
            bolus_doses = replace(bolus_doses, **{meal.value: adjusted})

    return AdjustedDoseProfile.from_components(basal, bolus_doses)


__all__ = ["group_readings", "average_glucose", "adjust_insulin_dose"]
