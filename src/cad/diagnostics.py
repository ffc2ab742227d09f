"""Diagnostics contracts and sink implementations."""

from __future__ import annotations

import json
import os
from collections import Counter
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from enum import IntEnum
from pathlib import Path
from typing import Any, Iterable, Protocol


class Severity(IntEnum):
    INFO = 0
    WARN = 1
    ERROR = 2
    FATAL = 3


SEVERITY_LABELS: dict[int, str] = {
    int(Severity.INFO): "info",
    int(Severity.WARN): "warn",
    int(Severity.ERROR): "error",
    int(Severity.FATAL): "fatal",
}
SEVERITY_MIN = int(Severity.INFO)
SEVERITY_MAX = int(Severity.FATAL)
VALID_SEVERITIES = frozenset(SEVERITY_LABELS.keys())

VALID_STAGES = frozenset({"settings", "dedupe", "search", "replace"})
VALID_SOURCES = frozenset({"snapshot", "settings", "env", "fallback", "computed"})
VALID_COMPONENTS = frozenset({"settings", "resolver", "search", "replace", "session", "pipeline"})
DEFAULT_STAGE = "dedupe"
DEFAULT_SOURCE = "computed"
DEFAULT_COMPONENT = "pipeline"

DIAG_JSONL_ENV = "CAD_DIAG_JSONL"


def utc_now_iso() -> str:
    """Return UTC timestamp in stable ISO-8601 format."""
    return datetime.now(timezone.utc).replace(microsecond=0).isoformat().replace("+00:00", "Z")


@dataclass(frozen=True)
class Event:
    """Unified diagnostics event schema."""

    ts: str
    run_id: str
    stage: str
    component: str
    code: str
    severity: int
    path: str
    source: str
    input_value: Any
    resolved_value: Any
    reason: str
    meta: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


_VOCABULARIES = (
    ("stage", VALID_STAGES, DEFAULT_STAGE),
    ("component", VALID_COMPONENTS, DEFAULT_COMPONENT),
    ("source", VALID_SOURCES, DEFAULT_SOURCE),
)


def make_event(
    *,
    run_id: str = "",
    stage: str,
    component: str,
    code: str,
    severity: int = 0,
    path: str = "",
    source: str = "",
    input_value: Any = None,
    resolved_value: Any = None,
    reason: str = "",
    meta: dict[str, Any] | None = None,
    ts: str = "",
) -> Event:
    raw = {"stage": stage, "component": component, "source": source}
    vocab: dict[str, str] = {}
    normalized_from: dict[str, Any] = {}
    for key, valid, default in _VOCABULARIES:
        candidate = raw[key].strip().lower() if isinstance(raw[key], str) else ""
        vocab[key] = candidate if candidate in valid else default
        if vocab[key] != candidate:
            normalized_from[key] = raw[key]

    try:
        severity_value = int(severity)
    except (TypeError, ValueError):
        severity_value = int(Severity.INFO)

    meta_value = dict(meta) if isinstance(meta, dict) else {}
    if normalized_from:
        meta_value["normalized_from"] = normalized_from
        reason = reason or "normalized diagnostics vocabulary"
    return Event(
        ts=ts or utc_now_iso(),
        run_id=run_id,
        code=code,
        severity=max(SEVERITY_MIN, min(SEVERITY_MAX, severity_value)),
        path=path,
        input_value=input_value,
        resolved_value=resolved_value,
        reason=reason,
        meta=meta_value,
        **vocab,
    )


class DiagnosticsSink(Protocol):
    """Sink interface for structured diagnostics events."""

    def emit(self, event: Event) -> None:
        """Publish one diagnostics event."""


def emit_simple(
    sink: DiagnosticsSink,
    *,
    code: str,
    path: str = "",
    payload: Any = None,
    severity: int = Severity.INFO,
    component: str = DEFAULT_COMPONENT,
    stage: str = DEFAULT_STAGE,
    source: str = DEFAULT_SOURCE,
    reason: str = "",
    run_id: str = "",
    input_value: Any = None,
    resolved_value: Any = None,
    meta: dict[str, Any] | None = None,
    ts: str = "",
    **extra_meta: Any,
) -> Event:
    merged_meta = dict(meta) if isinstance(meta, dict) else {}
    if extra_meta:
        merged_meta.update(extra_meta)
    if payload is not None and "payload" not in merged_meta:
        merged_meta["payload"] = payload
    event = make_event(
        ts=ts,
        run_id=run_id,
        stage=stage,
        component=component,
        code=code,
        severity=severity,
        path=path,
        source=source,
        input_value=input_value,
        resolved_value=resolved_value,
        reason=reason,
        meta=merged_meta,
    )
    sink.emit(event)
    return event


def build_diagnostics_summary(events: Iterable[Event]) -> dict[str, Any]:
    by_stage: Counter = Counter()
    by_code: Counter = Counter()
    by_severity: Counter = Counter()
    total = 0
    for event in events:
        total += 1
        by_stage[event.stage] += 1
        by_code[event.code] += 1
        by_severity[SEVERITY_LABELS.get(int(event.severity), str(event.severity))] += 1
    return {
        "total": total,
        "by_stage": dict(sorted(by_stage.items())),
        "by_code": dict(sorted(by_code.items())),
        "by_severity": dict(sorted(by_severity.items())),
    }


class NoopDiagnosticsSink:
    """Default diagnostics sink that drops all events."""

    def emit(self, event: Event) -> None:
        del event


class ListDiagnosticsSink:
    """Keep events in memory (tools and tests read them back)."""

    def __init__(self) -> None:
        self.events: list[Event] = []

    def emit(self, event: Event) -> None:
        self.events.append(event)


class JsonlDiagnosticsSink:
    """Append diagnostics events to a JSONL file."""

    def __init__(self, path: str) -> None:
        self._path = Path(path)

    def emit(self, event: Event) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        line = json.dumps(event.to_dict(), ensure_ascii=False, sort_keys=True, default=str)
        with self._path.open("a", encoding="utf-8") as handle:
            handle.write(f"{line}\n")


def diag_sink_from_env() -> DiagnosticsSink:
    # Diagnostics are opt-in: JSONL sink only when CAD_DIAG_JSONL is set.
    path = os.environ.get(DIAG_JSONL_ENV, "")
    if isinstance(path, str) and path.strip():
        return JsonlDiagnosticsSink(path.strip())
    return NoopDiagnosticsSink()
