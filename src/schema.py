from __future__ import annotations

import re
from enum import Enum
from typing import Tuple

from pydantic import BaseModel, ConfigDict, field_validator, model_validator


class InvalidInput(ValueError):
    """Malformed record handed in by the drawing layer (e.g. too few coordinates)."""


# =========================
# Enums / core types
# =========================

class TextKind(str, Enum):
    single_line = "single_line"
    multi_line = "multi_line"
    other = "other"


SEARCHABLE_TEXT_KINDS = frozenset({TextKind.single_line, TextKind.multi_line})


# =========================
# Aliases / Canonicalization
# =========================

def _canon(s: str) -> str:
    s = s.strip().lower()
    s = s.replace("-", " ")
    s = s.replace("_", " ")
    s = re.sub(r"\s+", " ", s)
    return s


TEXT_KIND_ALIASES = {
    # ObjectName из COM-интерфейса
    "acdbtext": "single_line",
    "acdbmtext": "multi_line",

    # DXF-типы
    "text": "single_line",
    "mtext": "multi_line",

    "single line": "single_line",
    "singleline": "single_line",
    "однострочный": "single_line",

    "multi line": "multi_line",
    "multiline": "multi_line",
    "многострочный": "multi_line",

    "other": "other",
}


def _coords(v, min_len: int, max_len: int, field_name: str):
    if v is None:
        raise InvalidInput(f"{field_name} is required")
    try:
        values = tuple(float(c) for c in v)
    except TypeError:
        raise InvalidInput(f"{field_name} must be a sequence of numbers") from None
    if not (min_len <= len(values) <= max_len):
        if min_len == max_len:
            expected = str(min_len)
        else:
            expected = f"{min_len}..{max_len}"
        raise InvalidInput(f"{field_name} must have {expected} coordinates, got {len(values)}")
    return values


# =========================
# Drawing snapshot records
# =========================

class Placement(BaseModel):
    """
    Вхождение блока: снимок одной вставки, полученный из чертежа.
    Ядро только решает, какие вставки оставить; удаляет их внешний слой.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    effective_name: str = ""
    position: Tuple[float, float, float]
    rotation: float = 0.0  # radians
    scale: Tuple[float, float, float] = (1.0, 1.0, 1.0)
    layer: str = "0"
    handle: str = ""

    @field_validator("position", mode="before")
    @classmethod
    def _v_position(cls, v):
        return _coords(v, 3, 3, "position")

    @field_validator("scale", mode="before")
    @classmethod
    def _v_scale(cls, v):
        if v is None:
            return (1.0, 1.0, 1.0)
        return _coords(v, 3, 3, "scale")

    @model_validator(mode="before")
    @classmethod
    def _default_effective_name(cls, data):
        # Для обычных (не динамических) блоков EffectiveName совпадает с Name.
        if isinstance(data, dict) and not data.get("effective_name"):
            data = dict(data)
            data["effective_name"] = data.get("name", "")
        return data

    @property
    def x(self) -> float:
        return self.position[0]

    @property
    def y(self) -> float:
        return self.position[1]

    @property
    def z(self) -> float:
        return self.position[2]


class TextAnnotation(BaseModel):
    """Однострочный или многострочный текст; используется только X/Y позиции."""

    model_config = ConfigDict(frozen=True)

    position: Tuple[float, ...]
    content: str = ""
    kind: TextKind = TextKind.single_line
    handle: str = ""

    @field_validator("position", mode="before")
    @classmethod
    def _v_position(cls, v):
        return _coords(v, 2, 3, "position")

    @field_validator("content", mode="before")
    @classmethod
    def _v_content(cls, v):
        if v is None:
            return ""
        return str(v)

    @field_validator("kind", mode="before")
    @classmethod
    def _v_kind(cls, v):
        if v is None or isinstance(v, TextKind):
            return v
        return TEXT_KIND_ALIASES.get(_canon(str(v)), "other")

    @property
    def x(self) -> float:
        return self.position[0]

    @property
    def y(self) -> float:
        return self.position[1]


def placement_from_dict(payload: dict) -> Placement:
    """Build a Placement from a loosely-keyed dict (COM-style names are accepted)."""
    data = dict(payload)
    if "position" not in data and "insertion_point" in data:
        data["position"] = data.pop("insertion_point")
    if "effective_name" not in data and "effectiveName" in data:
        data["effective_name"] = data.pop("effectiveName")
    return Placement.model_validate(data)


def text_from_dict(payload: dict) -> TextAnnotation:
    data = dict(payload)
    if "position" not in data and "insertion_point" in data:
        data["position"] = data.pop("insertion_point")
    if "content" not in data and "text_string" in data:
        data["content"] = data.pop("text_string")
    if "kind" not in data and "object_name" in data:
        data["kind"] = data.pop("object_name")
    return TextAnnotation.model_validate(data)
