"""Session setup shared by the whole test suite."""

from __future__ import annotations

import logging
import os

import pytest

# Settings are read from the file named here; a local `.env` with tuned
# targets would otherwise change expected doses.
os.environ.setdefault("GDM_ENV_FILE", ".env.test")

_COVERAGE_DEFAULTS: dict[str, object] = {
    "cov": ["gdm_dosing"],
    "cov_report": ["term-missing"],
    "cov_fail_under": 85,
}


@pytest.hookimpl(tryfirst=True)
def pytest_configure(config: pytest.Config) -> None:
    """Measure coverage of ``gdm_dosing`` unless options say otherwise."""
    if not config.pluginmanager.hasplugin("pytest_cov"):
        return
    for name, value in _COVERAGE_DEFAULTS.items():
        if getattr(config.option, name, None) is None:
            setattr(config.option, name, value)


@pytest.fixture(autouse=True)
def default_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    """Run every test against settings built without shell overrides."""
    from gdm_dosing import config

    for name in list(os.environ):
        if name.startswith("GDM_") and name != "GDM_ENV_FILE":
            monkeypatch.delenv(name)
    monkeypatch.setenv("LOG_LEVEL", logging.getLevelName(logging.INFO))
    monkeypatch.setattr(config, "settings", config.Settings())
