from __future__ import annotations

import sys
from pathlib import Path

import pytest
from pydantic import ValidationError

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from src.cad.diagnostics import ListDiagnosticsSink, Severity
from src.cad.settings import DrawingSettings, settings_from_env


def test_defaults_are_independent():
    settings = DrawingSettings()
    assert settings.point_tolerance == 0.2
    assert settings.duplicate_tolerance == 1.0
    assert settings.search_radius == 10.0
    assert settings.max_horizontal_deviation == pytest.approx(3.0)


def test_negative_values_are_rejected():
    with pytest.raises(ValidationError):
        DrawingSettings(duplicate_tolerance=-1.0)


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("CAD_DUPLICATE_TOLERANCE", "0,5")
    monkeypatch.setenv("CAD_SEARCH_RADIUS", "2500")
    sink = ListDiagnosticsSink()
    settings = settings_from_env(diag=sink)
    assert settings.duplicate_tolerance == 0.5
    assert settings.search_radius == 2500.0
    assert settings.point_tolerance == 0.2
    codes = sorted(event.code for event in sink.events)
    assert codes == ["SETTINGS_OVERRIDE", "SETTINGS_OVERRIDE"]


def test_bad_env_values_fall_back_with_warning():
    sink = ListDiagnosticsSink()
    settings = settings_from_env(
        {"CAD_POINT_TOLERANCE": "abc", "CAD_CLUSTER_DEVIATION_RATIO": "-0.3", "CAD_SEARCH_RADIUS": "  "},
        diag=sink,
    )
    assert settings == DrawingSettings()
    assert [event.code for event in sink.events] == ["SETTINGS_FALLBACK", "SETTINGS_FALLBACK"]
    assert all(event.severity == int(Severity.WARN) for event in sink.events)
    assert sink.events[0].path == "point_tolerance"
    assert sink.events[0].source == "fallback"
    assert sink.events[0].resolved_value == 0.2
