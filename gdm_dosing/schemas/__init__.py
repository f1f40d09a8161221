from .doses import (
    BolusDosesSchema,
    CorrectionOut,
    DoseProfileSchema,
    MealDoseOut,
    PatientRiskIn,
    RiskAssessmentOut,
)
from .readings import (
    GlucoseReadingIn,
    ReadingSummaryOut,
    TypeAverageOut,
    readings_from_records,
)

__all__ = [
    "BolusDosesSchema",
    "CorrectionOut",
    "DoseProfileSchema",
    "MealDoseOut",
    "PatientRiskIn",
    "RiskAssessmentOut",
    "GlucoseReadingIn",
    "ReadingSummaryOut",
    "TypeAverageOut",
    "readings_from_records",
]
