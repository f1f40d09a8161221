"""Domain value objects for the dosing engine.

Every object here is immutable and built fresh for each calculation.
"""

from __future__ import annotations

import datetime
import logging
from dataclasses import dataclass, field
from enum import Enum

from .utils.constants import (
    BEDTIME_RANGE,
    DEFAULT_CORRECTION_FACTOR,
    DEFAULT_TARGET_GLUCOSE,
    FASTING_RANGE,
    POST_MEAL_RANGE,
    PRE_MEAL_RANGE,
)

logger = logging.getLogger(__name__)


def _normalize(value: str) -> str:
    return value.strip().replace("-", "").replace("_", "").replace(" ", "").lower()


class RiskLevel(str, Enum):
    """GDM risk tier of a patient."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @classmethod
    def parse(cls, value: object) -> RiskLevel:
        """Return the matching level, falling back to ``LOW``.

        Only ``"high"`` and ``"medium"`` select their own tier; anything
        else, including ``None`` and unknown strings, is treated as low risk.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value)
            except ValueError:
                logger.debug("Unknown risk level %r treated as low", value)
        return cls.LOW


class ReadingType(str, Enum):
    """Context in which a glucose reading was taken."""

    FASTING = "fasting"
    PRE_MEAL = "preMeal"
    POST_MEAL = "postMeal"
    BEDTIME = "bedtime"

    @classmethod
    def parse(cls, value: object) -> ReadingType | None:
        """Return the reading type for ``value`` or ``None`` if unknown.

        Accepts the enum itself and spellings such as ``"pre-meal"``,
        ``"pre_meal"`` or ``"preMeal"``.
        """
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return None
        return _READING_TYPES.get(_normalize(value))


_READING_TYPES: dict[str, ReadingType] = {
    _normalize(member.value): member for member in ReadingType
}


class MealContext(str, Enum):
    """Meal a post-meal reading refers to."""

    BREAKFAST = "breakfast"
    LUNCH = "lunch"
    DINNER = "dinner"
    NONE = "none"

    @classmethod
    def parse(cls, value: object) -> MealContext:
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value)
            except ValueError:
                logger.debug("Unknown meal context %r treated as none", value)
        return cls.NONE


MEALS: tuple[MealContext, ...] = (
    MealContext.BREAKFAST,
    MealContext.LUNCH,
    MealContext.DINNER,
)


@dataclass(frozen=True)
class PatientProfile:
    """Subset of patient data needed for the initial prescription."""

    weight_kg: float | None
    risk_level: RiskLevel = RiskLevel.LOW


@dataclass(frozen=True)
class BolusDoses:
    """Mealtime bolus doses in whole insulin units."""

    breakfast: int
    lunch: int
    dinner: int

    def __post_init__(self) -> None:
        for meal in MEALS:
            if getattr(self, meal.value) < 0:
                raise ValueError(f"{meal.value} bolus must be non-negative")

    def for_meal(self, meal: MealContext) -> int:
        if meal is MealContext.NONE:
            raise ValueError("bolus is only defined for breakfast, lunch and dinner")
        return int(getattr(self, meal.value))

    def total(self) -> int:
        return self.breakfast + self.lunch + self.dinner


@dataclass(frozen=True)
class DoseProfile:
    """Daily insulin prescription.

    The rounded components are not required to add up to
    ``total_daily_dose``; each one is rounded independently.
    """

    total_daily_dose: int
    basal_insulin: int
    bolus_doses: BolusDoses

    def __post_init__(self) -> None:
        if self.total_daily_dose < 0:
            raise ValueError("total_daily_dose must be non-negative")
        if self.basal_insulin < 0:
            raise ValueError("basal_insulin must be non-negative")


@dataclass(frozen=True)
class AdjustedDoseProfile(DoseProfile):
    """Dose profile produced by titration.

    ``total_daily_dose`` is always the literal sum of basal and the three
    bolus doses. Use :meth:`from_components` to build one.
    """

    @classmethod
    def from_components(
        cls, basal_insulin: int, bolus_doses: BolusDoses
    ) -> AdjustedDoseProfile:
        return cls(
            total_daily_dose=basal_insulin + bolus_doses.total(),
            basal_insulin=basal_insulin,
            bolus_doses=bolus_doses,
        )


@dataclass(frozen=True)
class GlucoseReading:
    """Single glucose measurement in mg/dL."""

    reading_type: ReadingType
    glucose_value: float
    meal_context: MealContext = MealContext.NONE
    timestamp: datetime.datetime | None = None


@dataclass(frozen=True)
class TargetRange:
    """Inclusive glucose target range in mg/dL."""

    min: float
    max: float

    def __post_init__(self) -> None:
        if self.min > self.max:
            raise ValueError("target range min must not exceed max")

    def contains(self, value: float) -> bool:
        return self.min <= value <= self.max


@dataclass(frozen=True)
class TargetRanges:
    """Target ranges per reading context.

    Defaults follow common GDM guidelines: fasting 70–95, pre-meal 70–100,
    post-meal 70–140 and bedtime 70–120 mg/dL.
    """

    fasting: TargetRange = field(default_factory=lambda: TargetRange(*FASTING_RANGE))
    pre_meal: TargetRange = field(default_factory=lambda: TargetRange(*PRE_MEAL_RANGE))
    post_meal: TargetRange = field(
        default_factory=lambda: TargetRange(*POST_MEAL_RANGE)
    )
    bedtime: TargetRange = field(default_factory=lambda: TargetRange(*BEDTIME_RANGE))

    def for_type(self, reading_type: ReadingType) -> TargetRange:
        return {
            ReadingType.FASTING: self.fasting,
            ReadingType.PRE_MEAL: self.pre_meal,
            ReadingType.POST_MEAL: self.post_meal,
            ReadingType.BEDTIME: self.bedtime,
        }[reading_type]


@dataclass(frozen=True)
class DoseDefaults:
    """Fallback values for correction dosing.

    Attributes:
        target_glucose: Glucose level (mg/dL) a correction aims for.
        correction_factor: mg/dL lowered by one unit when no patient
            specific ISF is supplied.
    """

    target_glucose: float = DEFAULT_TARGET_GLUCOSE
    correction_factor: float = DEFAULT_CORRECTION_FACTOR


@dataclass(frozen=True)
class MealDoseResult:
    """Recommended meal dose together with the ratios it was derived from."""

    meal_bolus: float
    correction_bolus: float
    total_dose: float
    isf: int
    icr: int


__all__ = [
    "RiskLevel",
    "ReadingType",
    "MealContext",
    "MEALS",
    "PatientProfile",
    "BolusDoses",
    "DoseProfile",
    "AdjustedDoseProfile",
    "GlucoseReading",
    "TargetRange",
    "TargetRanges",
    "DoseDefaults",
    "MealDoseResult",
]
