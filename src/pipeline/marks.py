"""Height-mark lookup for placements of an open drawing."""

from __future__ import annotations

from typing import List, Optional

from src.cad.diagnostics import emit_simple
from src.cad.settings import DrawingSettings
from src.cad.text_search import find_nearby_height_marks
from src.pipeline.session import DrawingSession, RunContext
from src.schema import Placement, TextAnnotation


def find_height_marks_for_placement(
    session: DrawingSession,
    placement: Placement,
    settings: Optional[DrawingSettings] = None,
    ctx: Optional[RunContext] = None,
) -> List[TextAnnotation]:
    settings = settings or DrawingSettings()
    ctx = ctx or RunContext()

    texts = list(session.texts())
    marks = find_nearby_height_marks(
        placement.position,
        texts,
        search_radius=settings.search_radius,
        cluster_deviation_ratio=settings.cluster_deviation_ratio,
    )
    emit_simple(
        ctx.diag,
        run_id=ctx.run_id,
        stage="search",
        component="search",
        code="SEARCH_DONE",
        path=placement.handle or placement.name,
        source="snapshot",
        input_value={"texts": len(texts), "position": list(placement.position)},
        resolved_value=[mark.content for mark in marks],
        reason="height marks around placement",
        search_radius=settings.search_radius,
    )
    return marks
