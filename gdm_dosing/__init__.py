"""Insulin dosing engine for gestational diabetes care.

Pure calculations for initial insulin prescriptions, meal doses and dose
titration from glucose history. Functions return ``None`` (or ``0`` for a
dose) when the input is not sufficient to compute a result.
"""

from .dosing import (
    calculate_correction,
    calculate_icr,
    calculate_initial_dose,
    calculate_isf,
    calculate_meal_bolus,
    calculate_meal_dose,
    initial_dose_for_patient,
)
from .glucose import GlucoseStatus, classify_reading, is_out_of_range, summarize_readings
from .models import (
    AdjustedDoseProfile,
    BolusDoses,
    DoseDefaults,
    DoseProfile,
    GlucoseReading,
    MealContext,
    MealDoseResult,
    PatientProfile,
    ReadingType,
    RiskLevel,
    TargetRange,
    TargetRanges,
)
from .risk import PatientRiskData, RiskAssessment, calculate_risk
from .titration import adjust_insulin_dose, average_glucose, group_readings

__all__ = [
    "calculate_correction",
    "calculate_icr",
    "calculate_initial_dose",
    "calculate_isf",
    "calculate_meal_bolus",
    "calculate_meal_dose",
    "initial_dose_for_patient",
    "GlucoseStatus",
    "classify_reading",
    "is_out_of_range",
    "summarize_readings",
    "AdjustedDoseProfile",
    "BolusDoses",
    "DoseDefaults",
    "DoseProfile",
    "GlucoseReading",
    "MealContext",
    "MealDoseResult",
    "PatientProfile",
    "ReadingType",
    "RiskLevel",
    "TargetRange",
    "TargetRanges",
    "PatientRiskData",
    "RiskAssessment",
    "calculate_risk",
    "adjust_insulin_dose",
    "average_glucose",
    "group_readings",
]
