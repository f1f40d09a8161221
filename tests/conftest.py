from __future__ import annotations

from collections.abc import Callable

import pytest

from gdm_dosing.models import (
    BolusDoses,
    DoseProfile,
    GlucoseReading,
    MealContext,
    ReadingType,
)


@pytest.fixture()
def current_dose() -> DoseProfile:
    return DoseProfile(
        total_daily_dose=40,
        basal_insulin=20,
        bolus_doses=BolusDoses(breakfast=10, lunch=10, dinner=10),
    )


@pytest.fixture()
def make_reading() -> Callable[..., GlucoseReading]:
    def _make(
        reading_type: ReadingType,
        value: float,
        meal: MealContext = MealContext.NONE,
    ) -> GlucoseReading:
        return GlucoseReading(
            reading_type=reading_type, glucose_value=value, meal_context=meal
        )

    return _make
