"""GDM risk assessment.

Produces the :class:`~gdm_dosing.models.RiskLevel` consumed by
:func:`~gdm_dosing.dosing.calculate_initial_dose`.
"""

from __future__ import annotations

import datetime
import logging
from dataclasses import dataclass, field
from decimal import Decimal

from .models import RiskLevel
from .utils.rounding import Number, positive_decimal, round_to_step

logger = logging.getLogger(__name__)

AGE_RISK_THRESHOLD = 35
BMI_RISK_THRESHOLD = 30


@dataclass(frozen=True)
class RiskWeights:
    """Score contributed by each risk factor."""

    age_35_plus: int = 1
    bmi_30_plus: int = 1
    family_history: int = 1
    previous_gdm: int = 3
    previous_macrosomia: int = 1


@dataclass(frozen=True)
class PatientRiskData:
    """Patient attributes relevant to the risk score.

    ``bmi`` and ``age`` are derived from weight/height and date of birth
    when not given directly.
    """

    date_of_birth: datetime.date | None = None
    age: int | None = None
    pre_pregnancy_weight: float | None = None
    height_cm: float | None = None
    bmi: float | None = None
    family_history_diabetes: bool = False
    previous_gdm: bool = False
    previous_macrosomia: bool = False


@dataclass(frozen=True)
class RiskAssessment:
    bmi: float | None
    age: int | None
    risk_factors: list[str] = field(default_factory=list)
    risk_score: int = 0
    risk_level: RiskLevel = RiskLevel.LOW


def calculate_bmi(weight_kg: Number | None, height_cm: Number | None) -> float | None:
    """Body mass index rounded to two decimals, ``None`` on missing input."""
    weight = positive_decimal(weight_kg)
    height = positive_decimal(height_cm)
    if weight is None or height is None:
        return None
    height_m = height / 100
    return round_to_step(weight / (height_m * height_m), Decimal("0.01"))


def calculate_age(
    date_of_birth: datetime.date | None, today: datetime.date | None = None
) -> int | None:
    """Age in full years at ``today`` (defaults to the current date)."""
    if date_of_birth is None:
        return None
    if isinstance(date_of_birth, datetime.datetime):
        date_of_birth = date_of_birth.date()
    today = today or datetime.date.today()
    age = today.year - date_of_birth.year
    if (today.month, today.day) < (date_of_birth.month, date_of_birth.day):
        age -= 1
    return age


def _resolve(
    patient: PatientRiskData, today: datetime.date | None
) -> tuple[float | None, int | None]:
    bmi = patient.bmi or calculate_bmi(patient.pre_pregnancy_weight, patient.height_cm)
    age = patient.age or calculate_age(patient.date_of_birth, today)
    return bmi, age


def calculate_risk_factors(
    patient: PatientRiskData,
    weights: RiskWeights | None = None,
    today: datetime.date | None = None,
) -> tuple[list[str], int]:
    """Return the list of present risk factors and the weighted score."""
    weights = weights or RiskWeights()
    bmi, age = _resolve(patient, today)

    factors: list[str] = []
    score = 0
    if age is not None and age >= AGE_RISK_THRESHOLD:
        factors.append("Age ≥ 35")
        score += weights.age_35_plus
    if bmi is not None and bmi >= BMI_RISK_THRESHOLD:
        factors.append("BMI ≥ 30")
        score += weights.bmi_30_plus
    if patient.family_history_diabetes:
        factors.append("Family history of diabetes")
        score += weights.family_history
    if patient.previous_gdm:
        factors.append("Previous GDM")
        score += weights.previous_gdm
    if patient.previous_macrosomia:
        factors.append("Previous macrosomia")
        score += weights.previous_macrosomia
    return factors, score


def determine_risk_level(risk_score: int, previous_gdm: bool = False) -> RiskLevel:
    """Map a risk score to a tier. Previous GDM is always high risk."""
    if previous_gdm or risk_score >= 3:
        return RiskLevel.HIGH
    if risk_score >= 1:
        return RiskLevel.MEDIUM
    return RiskLevel.LOW


def calculate_risk(
    patient: PatientRiskData,
    weights: RiskWeights | None = None,
    today: datetime.date | None = None,
) -> RiskAssessment:
    bmi, age = _resolve(patient, today)
    factors, score = calculate_risk_factors(patient, weights, today)
    level = determine_risk_level(score, patient.previous_gdm)
    logger.debug("Risk score %s (%s) -> %s", score, ", ".join(factors) or "none", level.value)
    return RiskAssessment(
        bmi=bmi,
        age=age,
        risk_factors=factors,
        risk_score=score,
        risk_level=level,
    )


__all__ = [
    "RiskWeights",
    "PatientRiskData",
    "RiskAssessment",
    "calculate_bmi",
    "calculate_age",
    "calculate_risk_factors",
    "determine_risk_level",
    "calculate_risk",
]
