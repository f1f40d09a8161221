import json
from pathlib import Path
from typing import Any

import pytest

from gdm_dosing import cli, config


def _run(argv: list[str], capsys: pytest.CaptureFixture[str]) -> tuple[int, Any]:
    code = cli.main(argv)
    out = capsys.readouterr().out
    return code, json.loads(out) if out else None


def _write(tmp_path: Path, data: Any) -> str:
    path = tmp_path / "input.json"
    path.write_text(json.dumps(data), encoding="utf-8")
    return str(path)


def test_initial(capsys: pytest.CaptureFixture[str]) -> None:
    code, result = _run(["initial", "--weight", "70", "--risk", "high"], capsys)
    assert code == 0
    assert result == {
        "totalDailyDose": 35,
        "basalInsulin": 18,
        "bolusDoses": {"breakfast": 7, "lunch": 5, "dinner": 5},
    }


def test_initial_without_weight_prints_null(capsys: pytest.CaptureFixture[str]) -> None:
    code = cli.main(["initial", "--weight", "0"])
    assert code == 0
    assert capsys.readouterr().out.strip() == "null"


def test_meal(capsys: pytest.CaptureFixture[str]) -> None:
    code, result = _run(
        ["meal", "--carbs", "45", "--glucose", "180", "--tdd", "36"], capsys
    )
    assert code == 0
    assert result == {
        "mealBolus": 3.0,
        "correctionBolus": 1.0,
        "totalDose": 4.0,
        "isf": 50,
        "icr": 14,
    }


def test_adjust(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    path = _write(
        tmp_path,
        {
            "currentDose": {
                "totalDailyDose": 40,
                "basalInsulin": 20,
                "bolusDoses": {"breakfast": 10, "lunch": 10, "dinner": 10},
            },
            "readings": [
                {"readingType": "fasting", "glucoseValue": 100},
                {"readingType": "postMeal", "glucoseValue": 160, "mealContext": "dinner"},
            ],
        },
    )
    code, result = _run(["adjust", "--input", path], capsys)
    assert code == 0
    assert result == {
        "totalDailyDose": 54,
        "basalInsulin": 23,
        "bolusDoses": {"breakfast": 10, "lunch": 10, "dinner": 11},
    }


def test_adjust_without_readings_prints_null(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    path = _write(
        tmp_path,
        {
            "current_dose": {
                "total_daily_dose": 40,
                "basal_insulin": 20,
                "bolus_doses": {"breakfast": 10, "lunch": 10, "dinner": 10},
            },
            "glucose_readings": [],
        },
    )
    code, result = _run(["adjust", "--input", path], capsys)
    assert code == 0
    assert result is None


def test_risk(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    path = _write(tmp_path, {"dateOfBirth": "1990-08-01", "bmi": 32, "familyHistoryDiabetes": True})
    code, result = _run(["risk", "--input", path, "--today", "2024-06-01"], capsys)
    assert code == 0
    assert result == {
        "bmi": 32.0,
        "age": 33,
        "riskFactors": ["BMI ≥ 30", "Family history of diabetes"],
        "riskScore": 2,
        "riskLevel": "medium",
    }


def test_summary(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    path = _write(
        tmp_path,
        [
            {"reading_type": "fasting", "glucose_value": 92},
            {"reading_type": "fasting", "glucose_value": 97},
            {"reading_type": "bedtime", "glucose_value": 115},
        ],
    )
    code, result = _run(["summary", "--input", path], capsys)
    assert code == 0
    assert result["fasting"] == {"average": 94.5, "count": 2}
    assert result["bedtime"] == {"average": 115.0, "count": 1}
    assert result["postMeal"] is None
    assert result["overall"] == {"average": 101.3, "count": 3}


def test_invalid_reading_returns_error(
    tmp_path: Path, capsys: pytest.CaptureFixture[str], caplog: pytest.LogCaptureFixture
) -> None:
    path = _write(tmp_path, [{"readingType": "fasting", "glucoseValue": -5}])
    assert cli.main(["summary", "--input", path]) == 1
    assert capsys.readouterr().out == ""
    assert "Invalid summary input" in caplog.text


def test_missing_field_returns_error(
    tmp_path: Path, caplog: pytest.LogCaptureFixture
) -> None:
    path = _write(tmp_path, {"readings": []})
    assert cli.main(["adjust", "--input", path]) == 1
    assert "missing field 'currentDose'" in caplog.text


def test_missing_file_returns_error(tmp_path: Path) -> None:
    assert cli.main(["risk", "--input", str(tmp_path / "absent.json")]) == 1


def test_unknown_command_exits() -> None:
    with pytest.raises(SystemExit):
        cli.main(["bogus"])


def test_correction_uses_configured_defaults(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    code, result = _run(["correction", "--glucose", "180"], capsys)
    assert code == 0
    assert result == {"correctionBolus": 1.0, "targetGlucose": 120.0, "correctionFactor": 50.0}

    monkeypatch.setenv("GDM_TARGET_GLUCOSE", "100")
    monkeypatch.setenv("GDM_CORRECTION_FACTOR", "40")
    config.reload_settings()
    code, result = _run(["correction", "--glucose", "180"], capsys)
    assert code == 0
    assert result == {"correctionBolus": 2.0, "targetGlucose": 100.0, "correctionFactor": 40.0}


def test_correction_arguments_override_settings(capsys: pytest.CaptureFixture[str]) -> None:
    code, result = _run(
        ["correction", "--glucose", "250", "--target", "110", "--factor", "30"], capsys
    )
    assert code == 0
    # 140 / 30 = 4.67 -> 4.5
    assert result["correctionBolus"] == 4.5


def test_correction_at_target_is_zero(capsys: pytest.CaptureFixture[str]) -> None:
    code, result = _run(["correction", "--glucose", "110"], capsys)
    assert code == 0
    assert result["correctionBolus"] == 0


@pytest.mark.parametrize("payload", [5, "readings", {"readings": 7}, {"readings": {"a": 1}}])
def test_summary_rejects_non_list_readings(
    tmp_path: Path,
    capsys: pytest.CaptureFixture[str],
    caplog: pytest.LogCaptureFixture,
    payload: Any,
) -> None:
    path = _write(tmp_path, payload)
    assert cli.main(["summary", "--input", path]) == 1
    assert capsys.readouterr().out == ""
    assert "Invalid summary input" in caplog.text


def test_adjust_rejects_scalar_readings(
    tmp_path: Path, caplog: pytest.LogCaptureFixture
) -> None:
    path = _write(
        tmp_path,
        {
            "currentDose": {
                "totalDailyDose": 40,
                "basalInsulin": 20,
                "bolusDoses": {"breakfast": 10, "lunch": 10, "dinner": 10},
            },
            "readings": 7,
        },
    )
    assert cli.main(["adjust", "--input", path]) == 1
    assert "Invalid adjust input" in caplog.text
