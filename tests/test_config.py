import logging

import pytest
from pydantic import ValidationError

from gdm_dosing import config
from gdm_dosing.models import DoseDefaults, TargetRange, TargetRanges


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("debug", logging.DEBUG),
        ("1", logging.DEBUG),
        ("true", logging.DEBUG),
        ("warning", logging.WARNING),
        ("ERROR", logging.ERROR),
        ("15", 15),
        ("nonsense", logging.INFO),
        (30, logging.WARNING),
    ],
)
def test_parse_log_level(value: str | int, expected: int) -> None:
    assert config.Settings(LOG_LEVEL=value).log_level == expected


def test_defaults() -> None:
    settings = config.Settings()
    assert settings.dose_defaults() == DoseDefaults()
    assert settings.target_ranges() == TargetRanges()


def test_settings_read_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(config, "settings", config.settings)
    monkeypatch.setenv("GDM_TARGET_GLUCOSE", "110")
    monkeypatch.setenv("GDM_CORRECTION_FACTOR", "40")
    monkeypatch.setenv("GDM_FASTING_MAX", "90")

    settings = config.reload_settings()

    assert config.get_settings() is settings
    assert settings.dose_defaults() == DoseDefaults(target_glucose=110, correction_factor=40)
    assert settings.target_ranges().fasting == TargetRange(70, 90)
    assert settings.target_ranges().post_meal == TargetRange(70, 140)


def test_inverted_range_rejected() -> None:
    with pytest.raises(ValidationError, match="bedtime range min must not exceed max"):
        config.Settings(GDM_BEDTIME_MIN=130, GDM_BEDTIME_MAX=120)


@pytest.mark.parametrize("field", ["GDM_TARGET_GLUCOSE", "GDM_CORRECTION_FACTOR"])
def test_non_positive_dosing_values_rejected(field: str) -> None:
    with pytest.raises(ValidationError):
        config.Settings(**{field: 0})


def test_shell_overrides_do_not_leak_into_tests() -> None:
    settings = config.get_settings()
    assert settings.log_level == logging.INFO
    assert settings.dose_defaults() == DoseDefaults()
