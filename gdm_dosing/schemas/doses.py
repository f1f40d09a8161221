from __future__ import annotations

from datetime import date

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from ..models import BolusDoses, DoseProfile, MealDoseResult
from ..risk import PatientRiskData, RiskAssessment


class BolusDosesSchema(BaseModel):
    """Mealtime bolus doses in whole units."""

    breakfast: int = Field(ge=0)
    lunch: int = Field(ge=0)
    dinner: int = Field(ge=0)


class DoseProfileSchema(BaseModel):
    """Daily insulin prescription as exchanged with the API layer."""

    totalDailyDose: int = Field(
        ge=0,
        alias="totalDailyDose",
        validation_alias=AliasChoices("totalDailyDose", "total_daily_dose"),
    )
    basalInsulin: int = Field(
        ge=0,
        alias="basalInsulin",
        validation_alias=AliasChoices("basalInsulin", "basal_insulin"),
    )
    bolusDoses: BolusDosesSchema = Field(
        alias="bolusDoses",
        validation_alias=AliasChoices("bolusDoses", "bolus_doses"),
    )

    model_config = ConfigDict(populate_by_name=True)

    def to_domain(self) -> DoseProfile:
        return DoseProfile(
            total_daily_dose=self.totalDailyDose,
            basal_insulin=self.basalInsulin,
            bolus_doses=BolusDoses(
                breakfast=self.bolusDoses.breakfast,
                lunch=self.bolusDoses.lunch,
                dinner=self.bolusDoses.dinner,
            ),
        )

    @classmethod
    def from_domain(cls, dose: DoseProfile) -> DoseProfileSchema:
        return cls(
            totalDailyDose=dose.total_daily_dose,
            basalInsulin=dose.basal_insulin,
            bolusDoses=BolusDosesSchema(
                breakfast=dose.bolus_doses.breakfast,
                lunch=dose.bolus_doses.lunch,
                dinner=dose.bolus_doses.dinner,
            ),
        )


class CorrectionOut(BaseModel):
    """Correction bolus with the target and factor it was computed from."""

    correctionBolus: float
    targetGlucose: float
    correctionFactor: float


class MealDoseOut(BaseModel):
    """Recommended meal dose with the ratios used to derive it."""

    mealBolus: float
    correctionBolus: float
    totalDose: float
    isf: int = Field(description="Insulin sensitivity factor, mg/dL per unit")
    icr: int = Field(description="Insulin-to-carb ratio, grams per unit")

    @classmethod
    def from_domain(cls, result: MealDoseResult) -> MealDoseOut:
        return cls(
            mealBolus=result.meal_bolus,
            correctionBolus=result.correction_bolus,
            totalDose=result.total_dose,
            isf=result.isf,
            icr=result.icr,
        )


class PatientRiskIn(BaseModel):
    """Patient record fields used for the risk assessment."""

    dateOfBirth: date | None = Field(
        default=None,
        alias="dateOfBirth",
        validation_alias=AliasChoices("dateOfBirth", "date_of_birth"),
    )
    age: int | None = Field(default=None, ge=0)
    prePregnancyWeight: float | None = Field(
        default=None,
        gt=0,
        alias="prePregnancyWeight",
        validation_alias=AliasChoices("prePregnancyWeight", "pre_pregnancy_weight"),
    )
    height: float | None = Field(default=None, gt=0, description="Height in cm")
    bmi: float | None = Field(default=None, gt=0)
    familyHistoryDiabetes: bool = Field(
        default=False,
        alias="familyHistoryDiabetes",
        validation_alias=AliasChoices("familyHistoryDiabetes", "family_history_diabetes"),
    )
    previousGdm: bool = Field(
        default=False,
        alias="previousGdm",
        validation_alias=AliasChoices("previousGdm", "previous_gdm"),
    )
    previousMacrosomia: bool = Field(
        default=False,
        alias="previousMacrosomia",
        validation_alias=AliasChoices("previousMacrosomia", "previous_macrosomia"),
    )

    model_config = ConfigDict(populate_by_name=True)

    def to_domain(self) -> PatientRiskData:
        return PatientRiskData(
            date_of_birth=self.dateOfBirth,
            age=self.age,
            pre_pregnancy_weight=self.prePregnancyWeight,
            height_cm=self.height,
            bmi=self.bmi,
            family_history_diabetes=self.familyHistoryDiabetes,
            previous_gdm=self.previousGdm,
            previous_macrosomia=self.previousMacrosomia,
        )


class RiskAssessmentOut(BaseModel):
    bmi: float | None = None
    age: int | None = None
    riskFactors: list[str] = Field(default_factory=list)
    riskScore: int = 0
    riskLevel: str

    @classmethod
    def from_domain(cls, assessment: RiskAssessment) -> RiskAssessmentOut:
        return cls(
            bmi=assessment.bmi,
            age=assessment.age,
            riskFactors=list(assessment.risk_factors),
            riskScore=assessment.risk_score,
            riskLevel=assessment.risk_level.value,
        )


__all__ = [
    "BolusDosesSchema",
    "DoseProfileSchema",
    "CorrectionOut",
    "MealDoseOut",
    "PatientRiskIn",
    "RiskAssessmentOut",
]
