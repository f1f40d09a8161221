"""Classification and summaries of glucose readings."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum

from .models import GlucoseReading, ReadingType, TargetRanges
from .titration import average_glucose, group_readings
from .utils.constants import GENERAL_HIGH_THRESHOLD_MG_DL
from .utils.rounding import round_to_step, to_decimal

_AVERAGE_STEP = Decimal("0.1")


class GlucoseStatus(str, Enum):
    LOW = "low"
    NORMAL = "normal"
    HIGH = "high"


@dataclass(frozen=True)
class TypeAverage:
    """Mean glucose (rounded to 0.1 mg/dL) and number of readings."""

    average: float
    count: int


@dataclass(frozen=True)
class ReadingSummary:
    """Averages per reading type plus an overall average.

    Types without readings map to ``None``.
    """

    by_type: dict[ReadingType, TypeAverage | None] = field(default_factory=dict)
    overall: TypeAverage | None = None


def classify_reading(
    reading: GlucoseReading, ranges: TargetRanges | None = None
) -> GlucoseStatus:
    """Compare ``reading`` with the target range for its type."""
    target = (ranges or TargetRanges()).for_type(reading.reading_type)
    if reading.glucose_value > target.max:
        return GlucoseStatus.HIGH
    if reading.glucose_value < target.min:
        return GlucoseStatus.LOW
    return GlucoseStatus.NORMAL


def is_out_of_range(reading: GlucoseReading, ranges: TargetRanges | None = None) -> bool:
    """Flag readings that need clinical attention.

    Fasting and post-meal readings are flagged above their target maximum;
    any reading is flagged above the general high threshold of 180 mg/dL.
    """
    ranges = ranges or TargetRanges()
    value = reading.glucose_value
    if reading.reading_type is ReadingType.FASTING and value > ranges.fasting.max:
        return True
    if reading.reading_type is ReadingType.POST_MEAL and value > ranges.post_meal.max:
        return True
    return value > GENERAL_HIGH_THRESHOLD_MG_DL


def summarize_readings(readings: Iterable[GlucoseReading]) -> ReadingSummary:
    grouped = group_readings(readings)
    by_type: dict[ReadingType, TypeAverage | None] = {}
    total = Decimal(0)
    count = 0
    for reading_type in ReadingType:
        group = grouped.get(reading_type, [])
        average = average_glucose(group)
        if average is None:
            by_type[reading_type] = None
            continue
        by_type[reading_type] = TypeAverage(
            average=round_to_step(average, _AVERAGE_STEP), count=len(group)
        )
        total += sum((to_decimal(r.glucose_value) for r in group), Decimal(0))
        count += len(group)

    overall = None
    if count:
        overall = TypeAverage(average=round_to_step(total / count, _AVERAGE_STEP), count=count)
    return ReadingSummary(by_type=by_type, overall=overall)


__all__ = [
    "GlucoseStatus",
    "TypeAverage",
    "ReadingSummary",
    "classify_reading",
    "is_out_of_range",
    "summarize_readings",
]
