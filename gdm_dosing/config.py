"""Runtime configuration via Pydantic settings.

The dosing functions never read these values on their own; callers such as
the command line interface build :class:`~gdm_dosing.models.DoseDefaults`
and :class:`~gdm_dosing.models.TargetRanges` from them explicitly.
"""

from __future__ import annotations

import logging
import os

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .models import DoseDefaults, TargetRange, TargetRanges
from .utils.constants import (
    BEDTIME_RANGE,
    DEFAULT_CORRECTION_FACTOR,
    DEFAULT_TARGET_GLUCOSE,
    FASTING_RANGE,
    POST_MEAL_RANGE,
    PRE_MEAL_RANGE,
)


class Settings(BaseSettings):
    """Runtime configuration.

    Values are read from the environment and from the file named by
    ``GDM_ENV_FILE`` (``.env`` by default).
    """

    model_config = SettingsConfigDict(
        env_file=os.environ.get("GDM_ENV_FILE", ".env"),
        extra="ignore",
        populate_by_name=True,
    )

    app_name: str = "gdm-dosing"
    log_level: int = Field(default=logging.INFO, alias="LOG_LEVEL")

    # Correction dosing, mg/dL
    target_glucose: float = Field(
        default=DEFAULT_TARGET_GLUCOSE, gt=0, alias="GDM_TARGET_GLUCOSE"
    )
    correction_factor: float = Field(
        default=DEFAULT_CORRECTION_FACTOR, gt=0, alias="GDM_CORRECTION_FACTOR"
    )

    # Target ranges, mg/dL
    fasting_min: float = Field(default=FASTING_RANGE[0], alias="GDM_FASTING_MIN")
    fasting_max: float = Field(default=FASTING_RANGE[1], alias="GDM_FASTING_MAX")
    pre_meal_min: float = Field(default=PRE_MEAL_RANGE[0], alias="GDM_PRE_MEAL_MIN")
    pre_meal_max: float = Field(default=PRE_MEAL_RANGE[1], alias="GDM_PRE_MEAL_MAX")
    post_meal_min: float = Field(default=POST_MEAL_RANGE[0], alias="GDM_POST_MEAL_MIN")
    post_meal_max: float = Field(default=POST_MEAL_RANGE[1], alias="GDM_POST_MEAL_MAX")
    bedtime_min: float = Field(default=BEDTIME_RANGE[0], alias="GDM_BEDTIME_MIN")
    bedtime_max: float = Field(default=BEDTIME_RANGE[1], alias="GDM_BEDTIME_MAX")

    @field_validator("log_level", mode="before")
    @classmethod
    def parse_log_level(cls, v: str | int | float) -> int:
        if isinstance(v, str):
            if v.lower() in {"1", "true", "debug"}:
                return logging.DEBUG
            level = logging.getLevelName(v.upper())
            if isinstance(level, int):
                return level
            try:
                return int(v)
            except ValueError:
                return logging.INFO
        if isinstance(v, (int, float)):
            return int(v)
        raise TypeError(f"Unsupported log level type: {type(v)!r}")

    @model_validator(mode="after")
    def check_ranges(self) -> Settings:
        for name in ("fasting", "pre_meal", "post_meal", "bedtime"):
            if getattr(self, f"{name}_min") > getattr(self, f"{name}_max"):
                raise ValueError(f"{name} range min must not exceed max")
        return self

    def dose_defaults(self) -> DoseDefaults:
        return DoseDefaults(
            target_glucose=self.target_glucose,
            correction_factor=self.correction_factor,
        )

    def target_ranges(self) -> TargetRanges:
        return TargetRanges(
            fasting=TargetRange(self.fasting_min, self.fasting_max),
            pre_meal=TargetRange(self.pre_meal_min, self.pre_meal_max),
            post_meal=TargetRange(self.post_meal_min, self.post_meal_max),
            bedtime=TargetRange(self.bedtime_min, self.bedtime_max),
        )


settings = Settings()


def get_settings() -> Settings:
    return settings


def reload_settings() -> Settings:
    """Re-read the environment and replace the module level ``settings``."""
    global settings
    settings = Settings()
    return settings


__all__ = ["Settings", "settings", "get_settings", "reload_settings"]
