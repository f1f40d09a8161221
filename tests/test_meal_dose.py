import logging

import pytest

from gdm_dosing.dosing import calculate_meal_bolus, calculate_meal_dose
from gdm_dosing.models import DoseDefaults, MealDoseResult


def test_meal_bolus_rounded_to_half_unit() -> None:
    # 45 / 14 = 3.21 -> 3.0
    assert calculate_meal_bolus(45, 14) == 3.0
    assert calculate_meal_bolus(60, 10) == 6.0
    # 50 / 12 = 4.17 -> 4.0, 55 / 12 = 4.58 -> 4.5
    assert calculate_meal_bolus(50, 12) == 4.0
    assert calculate_meal_bolus(55, 12) == 4.5


@pytest.mark.parametrize(("carbs", "icr"), [(0, 14), (None, 14), (45, 0), (45, None)])
def test_meal_bolus_missing_input(carbs: float | None, icr: float | None) -> None:
    assert calculate_meal_bolus(carbs, icr) == 0


def test_meal_dose_combines_bolus_and_correction() -> None:
    result = calculate_meal_dose(45, 180, 36)
    assert result == MealDoseResult(
        meal_bolus=3.0, correction_bolus=1.0, total_dose=4.0, isf=50, icr=14
    )


def test_meal_dose_uses_patient_isf_as_correction_factor() -> None:
    # TDD 60: isf 30, icr 8. Correction (180 - 120) / 30 = 2.0, not 60 / 50.
    result = calculate_meal_dose(40, 180, 60)
    assert result is not None
    assert result.isf == 30
    assert result.icr == 8
    assert result.meal_bolus == 5.0
    assert result.correction_bolus == 2.0
    assert result.total_dose == 7.0


def test_meal_dose_target_override() -> None:
    result = calculate_meal_dose(40, 180, 60, 150)
    assert result is not None
    assert result.correction_bolus == 1.0
    assert result.total_dose == 6.0


def test_meal_dose_target_from_defaults() -> None:
    result = calculate_meal_dose(40, 180, 60, defaults=DoseDefaults(target_glucose=90))
    assert result is not None
    assert result.correction_bolus == 3.0


def test_meal_dose_below_target_has_no_correction() -> None:
    result = calculate_meal_dose(45, 100, 36)
    assert result is not None
    assert result.correction_bolus == 0
    assert result.total_dose == 3.0


@pytest.mark.parametrize(
    ("carbs", "glucose", "tdd"),
    [(0, 180, 36), (45, None, 36), (45, 180, 0), (None, None, None), (45, float("nan"), 36)],
)
def test_meal_dose_missing_input(
    carbs: float | None, glucose: float | None, tdd: float | None
) -> None:
    assert calculate_meal_dose(carbs, glucose, tdd) is None


def test_meal_dose_when_isf_rounds_to_zero(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.DEBUG, logger="gdm_dosing.dosing"):
        assert calculate_meal_dose(45, 180, 5000) is None
    assert "Cannot derive ISF" in caplog.text


def test_meal_dose_when_only_icr_rounds_to_zero() -> None:
    # TDD 2000: isf 0.9 -> 1, icr 0.25 -> 0. Correction still applies.
    result = calculate_meal_dose(45, 180, 2000)
    assert result == MealDoseResult(
        meal_bolus=0, correction_bolus=60.0, total_dose=60.0, isf=1, icr=0
    )
