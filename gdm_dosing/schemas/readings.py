from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from datetime import date, datetime, time
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, TypeAdapter, model_validator

from ..glucose import ReadingSummary, TypeAverage
from ..models import GlucoseReading, MealContext, ReadingType

logger = logging.getLogger(__name__)


class GlucoseReadingIn(BaseModel):
    """Glucose reading record as stored by the patient diary.

    Accepts both the camelCase API keys and the snake_case column names
    (``reading_type``, ``glucose_value``, ``meal``). Records that carry
    ``reading_date``/``reading_time`` instead of ``timestamp`` are combined
    into one timestamp.
    """

    readingType: str = Field(
        alias="readingType",
        validation_alias=AliasChoices("readingType", "reading_type"),
    )
    glucoseValue: float = Field(
        gt=0,
        alias="glucoseValue",
        validation_alias=AliasChoices("glucoseValue", "glucose_value"),
        description="Glucose in mg/dL",
    )
    mealContext: str | None = Field(
        default=None,
        alias="mealContext",
        validation_alias=AliasChoices("mealContext", "meal_context", "meal"),
    )
    timestamp: datetime | None = None

    model_config = ConfigDict(populate_by_name=True)

    @model_validator(mode="before")
    @classmethod
    def _combine_date_time(cls, data: Any) -> Any:
        if not isinstance(data, Mapping) or data.get("timestamp") is not None:
            return data
        reading_date = data.get("reading_date") or data.get("readingDate")
        if reading_date is None:
            return data
        reading_time = data.get("reading_time") or data.get("readingTime") or "00:00"
        combined = dict(data)
        combined["timestamp"] = datetime.combine(
            date.fromisoformat(str(reading_date)), time.fromisoformat(str(reading_time))
        )
        return combined

    def to_domain(self) -> GlucoseReading | None:
        """Return the domain reading or ``None`` for an unknown reading type."""
        reading_type = ReadingType.parse(self.readingType)
        if reading_type is None:
            return None
        return GlucoseReading(
            reading_type=reading_type,
            glucose_value=self.glucoseValue,
            meal_context=MealContext.parse(self.mealContext),
            timestamp=self.timestamp,
        )


_READINGS_ADAPTER = TypeAdapter(list[GlucoseReadingIn])


def readings_from_records(
    records: Iterable[Mapping[str, Any] | GlucoseReadingIn],
) -> list[GlucoseReading]:
    """Validate raw records and convert them to domain readings.

    The batch is validated as a whole, so a payload that is not a list of
    records, or contains a malformed one, raises
    :class:`pydantic.ValidationError`. Records with an unknown reading type
    are dropped with a warning.
    """
    readings: list[GlucoseReading] = []
    for parsed in _READINGS_ADAPTER.validate_python(records):
        reading = parsed.to_domain()
        if reading is None:
            logger.warning("Skipping reading with unknown type %r", parsed.readingType)
            continue
        readings.append(reading)
    return readings


class TypeAverageOut(BaseModel):
    average: float
    count: int

    @classmethod
    def from_domain(cls, value: TypeAverage | None) -> TypeAverageOut | None:
        if value is None:
            return None
        return cls(average=value.average, count=value.count)


class ReadingSummaryOut(BaseModel):
    """Average glucose per reading type for reports."""

    fasting: TypeAverageOut | None = None
    preMeal: TypeAverageOut | None = None
    postMeal: TypeAverageOut | None = None
    bedtime: TypeAverageOut | None = None
    overall: TypeAverageOut | None = None

    @classmethod
    def from_domain(cls, summary: ReadingSummary) -> ReadingSummaryOut:
        fields: dict[str, TypeAverageOut | None] = {
            reading_type.value: TypeAverageOut.from_domain(average)
            for reading_type, average in summary.by_type.items()
        }
        return cls(**fields, overall=TypeAverageOut.from_domain(summary.overall))


__all__ = [
    "GlucoseReadingIn",
    "readings_from_records",
    "TypeAverageOut",
    "ReadingSummaryOut",
]
