"""Stable serialization of placements and texts for regression snapshots."""

from __future__ import annotations

from typing import Any, Iterable

from src.schema import Placement, TextAnnotation


def _round_value(value: Any):
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return round(float(value), 6)
    if isinstance(value, (list, tuple)):
        return [_round_value(item) for item in value]
    if isinstance(value, dict):
        normalized: dict[str, Any] = {}
        for key in sorted(value):
            normalized[str(key)] = _round_value(value[key])
        return normalized
    return value


def placement_to_snapshot(placement: Placement) -> dict[str, Any]:
    item: dict[str, Any] = {
        "name": placement.name,
        "effective_name": placement.effective_name,
        "position": _round_value(placement.position),
        "rotation": _round_value(placement.rotation),
        "scale": _round_value(placement.scale),
        "layer": placement.layer,
    }
    if placement.handle:
        item["handle"] = placement.handle
    return item


def text_to_snapshot(text: TextAnnotation) -> dict[str, Any]:
    item: dict[str, Any] = {
        "position": _round_value(text.position),
        "content": text.content,
        "kind": text.kind.value,
    }
    if text.handle:
        item["handle"] = text.handle
    return item


def placements_to_snapshot(placements: Iterable[Placement]) -> list[dict[str, Any]]:
    return [placement_to_snapshot(placement) for placement in placements]


def texts_to_snapshot(texts: Iterable[TextAnnotation]) -> list[dict[str, Any]]:
    return [text_to_snapshot(text) for text in texts]
