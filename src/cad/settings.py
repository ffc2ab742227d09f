"""Tolerances and search parameters, with environment overrides."""

from __future__ import annotations

import math
import os
from typing import Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field

from src.cad.diagnostics import DiagnosticsSink, NoopDiagnosticsSink, Severity, emit_simple
from src.cad.points import DUPLICATE_TOLERANCE, POINT_TOLERANCE
from src.cad.text_search import CLUSTER_DEVIATION_RATIO, SEARCH_RADIUS


class DrawingSettings(BaseModel):
    """
    Все длины в единицах чертежа (мм или м, как в самом чертеже).
    Конвертации единиц нет.
    """

    model_config = ConfigDict(frozen=True)

    point_tolerance: float = Field(default=POINT_TOLERANCE, ge=0)
    duplicate_tolerance: float = Field(default=DUPLICATE_TOLERANCE, ge=0)
    search_radius: float = Field(default=SEARCH_RADIUS, ge=0)
    cluster_deviation_ratio: float = Field(default=CLUSTER_DEVIATION_RATIO, ge=0)

    @property
    def max_horizontal_deviation(self) -> float:
        return self.search_radius * self.cluster_deviation_ratio


ENV_KEYS = {
    "point_tolerance": "CAD_POINT_TOLERANCE",
    "duplicate_tolerance": "CAD_DUPLICATE_TOLERANCE",
    "search_radius": "CAD_SEARCH_RADIUS",
    "cluster_deviation_ratio": "CAD_CLUSTER_DEVIATION_RATIO",
}


def _as_float(value) -> Optional[float]:
    try:
        return float(str(value).strip().replace(",", "."))
    except (TypeError, ValueError):
        return None


def settings_from_env(
    environ: Optional[Mapping[str, str]] = None,
    diag: Optional[DiagnosticsSink] = None,
    run_id: str = "",
) -> DrawingSettings:
    """Read CAD_* overrides; bad values keep the default and emit SETTINGS_FALLBACK."""
    env = os.environ if environ is None else environ
    sink = diag if diag is not None else NoopDiagnosticsSink()
    defaults = DrawingSettings()
    values: dict[str, float] = {}

    for field_name, env_key in ENV_KEYS.items():
        raw = env.get(env_key, "")
        if not str(raw).strip():
            continue
        default_value = getattr(defaults, field_name)
        value = _as_float(raw)
        if value is None or math.isnan(value) or value < 0.0:
            emit_simple(
                sink,
                run_id=run_id,
                stage="settings",
                component="settings",
                code="SETTINGS_FALLBACK",
                severity=Severity.WARN,
                path=field_name,
                source="fallback",
                input_value=raw,
                resolved_value=default_value,
                reason=f"{env_key} is not a non-negative number",
            )
            continue
        values[field_name] = value
        emit_simple(
            sink,
            run_id=run_id,
            stage="settings",
            component="settings",
            code="SETTINGS_OVERRIDE",
            severity=Severity.INFO,
            path=field_name,
            source="env",
            input_value=raw,
            resolved_value=value,
        )

    return DrawingSettings(**values)
