"""Radius-bounded search for elevation marks around a placement."""

from __future__ import annotations

from typing import Any, Iterable, List, Optional, Sequence

from src.cad.height_marks import is_height_mark
from src.cad.points import coords, distance_2d
from src.schema import SEARCHABLE_TEXT_KINDS, TextAnnotation

SEARCH_RADIUS = 10.0
CLUSTER_DEVIATION_RATIO = 0.3
MAX_HORIZONTAL_DEVIATION = 100.0


def filter_vertical_cluster(
    items: Sequence[TextAnnotation],
    max_horizontal_deviation: float = MAX_HORIZONTAL_DEVIATION,
) -> List[TextAnnotation]:
    """Keep texts whose X lies within the deviation of the mean X of all items."""
    if len(items) <= 1:
        return list(items)

    xs = [coords(item, 2)[0] for item in items]
    avg_x = sum(xs) / len(xs)
    return [item for item, x in zip(items, xs) if abs(x - avg_x) <= max_horizontal_deviation]


def find_nearby_height_marks(
    block_position: Any,
    texts: Optional[Iterable[TextAnnotation]],
    search_radius: float = SEARCH_RADIUS,
    cluster_deviation_ratio: float = CLUSTER_DEVIATION_RATIO,
) -> List[TextAnnotation]:
    """Return elevation marks around ``block_position``, top to bottom.

    Only single-line and multi-line texts within ``search_radius`` (XY plane)
    are considered. The result is narrowed to the column of marks stacked
    around the mean X of the candidates.
    """
    if texts is None:
        return []
    origin = coords(block_position, 2)

    found: List[TextAnnotation] = []
    for item in texts:
        if item.kind not in SEARCHABLE_TEXT_KINDS:
            continue
        if distance_2d(origin, item) > search_radius:
            continue
        if is_height_mark((item.content or "").strip()):
            found.append(item)

    # Сверху вниз: по убыванию Y, порядок равных сохраняется.
    found.sort(key=lambda item: -coords(item, 2)[1])

    return filter_vertical_cluster(found, max_horizontal_deviation=search_radius * cluster_deviation_ratio)
