"""Command line access to the dosing engine.

Examples:

    python -m gdm_dosing initial --weight 70 --risk high
    python -m gdm_dosing correction --glucose 180
    python -m gdm_dosing meal --carbs 45 --glucose 180 --tdd 36
    python -m gdm_dosing adjust --input dose_and_readings.json
    python -m gdm_dosing risk --input patient.json --today 2024-05-01
    python -m gdm_dosing summary --input readings.json

Results are printed to stdout as JSON; ``null`` means there was not enough
data to compute a result.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from collections.abc import Callable, Iterable
from datetime import date
from typing import Any

from pydantic import ValidationError

from . import config
from .dosing import calculate_correction, calculate_initial_dose, calculate_meal_dose
from .glucose import summarize_readings
from .risk import calculate_risk
from .schemas import (
    CorrectionOut,
    DoseProfileSchema,
    MealDoseOut,
    PatientRiskIn,
    ReadingSummaryOut,
    RiskAssessmentOut,
    readings_from_records,
)
from .titration import adjust_insulin_dose

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def _load_json(path: str) -> Any:
    if path == "-":
        return json.load(sys.stdin)
    with open(path, encoding="utf-8") as fh:
        return json.load(fh)


def _pick(data: dict[str, Any], *keys: str) -> Any:
    for key in keys:
        if key in data:
            return data[key]
    raise ValueError(f"missing field {keys[0]!r}")


def _initial(args: argparse.Namespace) -> dict[str, Any] | None:
    dose = calculate_initial_dose(args.weight, args.risk)
    return None if dose is None else DoseProfileSchema.from_domain(dose).model_dump()


def _correction(args: argparse.Namespace) -> dict[str, Any]:
    defaults = config.get_settings().dose_defaults()
    target = defaults.target_glucose if args.target is None else args.target
    factor = defaults.correction_factor if args.factor is None else args.factor
    bolus = calculate_correction(args.glucose, target, factor)
    return CorrectionOut(
        correctionBolus=bolus, targetGlucose=target, correctionFactor=factor
    ).model_dump()


def _meal(args: argparse.Namespace) -> dict[str, Any] | None:
    result = calculate_meal_dose(
        args.carbs,
        args.glucose,
        args.tdd,
        args.target,
        defaults=config.get_settings().dose_defaults(),
    )
    return None if result is None else MealDoseOut.from_domain(result).model_dump()


def _adjust(args: argparse.Namespace) -> dict[str, Any] | None:
    data = _load_json(args.input)
    if not isinstance(data, dict):
        raise ValueError("adjust input must be a JSON object")
    current = DoseProfileSchema.model_validate(
        _pick(data, "currentDose", "current_dose")
    ).to_domain()
    readings = readings_from_records(
        _pick(data, "readings", "glucoseReadings", "glucose_readings")
    )
    adjusted = adjust_insulin_dose(
        current, readings, config.get_settings().target_ranges()
    )
    return None if adjusted is None else DoseProfileSchema.from_domain(adjusted).model_dump()


def _risk(args: argparse.Namespace) -> dict[str, Any]:
    patient = PatientRiskIn.model_validate(_load_json(args.input)).to_domain()
    assessment = calculate_risk(patient, today=args.today)
    return RiskAssessmentOut.from_domain(assessment).model_dump()


def _summary(args: argparse.Namespace) -> dict[str, Any]:
    data = _load_json(args.input)
    records = _pick(data, "readings") if isinstance(data, dict) else data
    summary = summarize_readings(readings_from_records(records))
    return ReadingSummaryOut.from_domain(summary).model_dump()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gdm-dosing", description="Insulin dosing calculations for GDM"
    )
    commands = parser.add_subparsers(dest="command", required=True)

    initial = commands.add_parser("initial", help="Initial prescription from body weight")
    initial.add_argument("--weight", type=float, required=True, help="Body weight in kg")
    initial.add_argument(
        "--risk", default="low", help="Risk level: low, medium or high (default: low)"
    )
    initial.set_defaults(handler=_initial)

    correction = commands.add_parser(
        "correction", help="Correction bolus for glucose above target"
    )
    correction.add_argument(
        "--glucose", type=float, required=True, help="Current glucose, mg/dL"
    )
    correction.add_argument(
        "--target", type=float, default=None, help="Target glucose (default from settings)"
    )
    correction.add_argument(
        "--factor",
        type=float,
        default=None,
        help="mg/dL lowered by one unit (default from settings)",
    )
    correction.set_defaults(handler=_correction)

    meal = commands.add_parser("meal", help="Meal bolus with correction")
    meal.add_argument("--carbs", type=float, required=True, help="Carbohydrates in grams")
    meal.add_argument("--glucose", type=float, required=True, help="Current glucose, mg/dL")
    meal.add_argument("--tdd", type=float, required=True, help="Total daily dose, units")
    meal.add_argument(
        "--target", type=float, default=None, help="Target glucose (default from settings)"
    )
    meal.set_defaults(handler=_meal)

    adjust = commands.add_parser("adjust", help="Titrate a dose against recent readings")
    adjust.add_argument(
        "--input", required=True, help="JSON file with currentDose and readings, - for stdin"
    )
    adjust.set_defaults(handler=_adjust)

    risk = commands.add_parser("risk", help="GDM risk assessment")
    risk.add_argument("--input", required=True, help="JSON patient record, - for stdin")
    risk.add_argument(
        "--today",
        type=date.fromisoformat,
        default=None,
        help="Reference date in YYYY-MM-DD used for the age (defaults to today)",
    )
    risk.set_defaults(handler=_risk)

    summary = commands.add_parser("summary", help="Average glucose per reading type")
    summary.add_argument("--input", required=True, help="JSON list of readings, - for stdin")
    summary.set_defaults(handler=_summary)
    return parser


def main(argv: Iterable[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)
    logging.basicConfig(level=config.get_settings().log_level, format=LOG_FORMAT)

    handler: Callable[[argparse.Namespace], Any] = args.handler
    try:
        result = handler(args)
    except ValidationError:
        logger.exception("Invalid %s input", args.command)
        return 1
    except (OSError, ValueError):
        logger.exception("Failed to run %s", args.command)
        return 1

    sys.stdout.write(f"{json.dumps(result, ensure_ascii=False)}\n")
    return 0


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    raise SystemExit(main())
