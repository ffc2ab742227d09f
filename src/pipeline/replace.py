"""Replace every placement of one block with one or more other blocks."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, List, Optional

from src.cad.diagnostics import Severity, emit_simple
from src.cad.points import points_near
from src.cad.settings import DrawingSettings
from src.cad.snapshot import placements_to_snapshot
from src.pipeline.session import DrawingSession, RunContext
from src.schema import InvalidInput, Placement


@dataclass
class ReplaceReport:
    replaced: list[Placement] = field(default_factory=list)
    inserted: list[Placement] = field(default_factory=list)
    skipped: list[Placement] = field(default_factory=list)
    definition_deleted: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "replaced": placements_to_snapshot(self.replaced),
            "inserted": placements_to_snapshot(self.inserted),
            "skipped": placements_to_snapshot(self.skipped),
            "definition_deleted": self.definition_deleted,
        }


def parse_block_names(names: str) -> List[str]:
    """Split a comma-separated list of block names, dropping blanks."""
    return [part.strip() for part in str(names or "").split(",") if part.strip()]


def _same_block(a: str, b: str) -> bool:
    return a.casefold() == b.casefold()


def replace_blocks(
    session: DrawingSession,
    name_from: str,
    names_to: str,
    settings: Optional[DrawingSettings] = None,
    ctx: Optional[RunContext] = None,
    skip_existing: bool = False,
) -> ReplaceReport:
    """Swap each ``name_from`` placement for ``names_to`` placements at the same spot.

    New placements keep the insertion point, rotation, scale factors and layer
    of the replaced one. With ``skip_existing`` a target block is not inserted
    where a placement of that block already sits (within ``point_tolerance``).
    Once no placement references ``name_from`` its definition is purged; a
    failure to purge is reported but does not undo the replacement.
    """
    source_name = str(name_from or "").strip()
    target_names = parse_block_names(names_to)
    if not source_name or not target_names:
        raise InvalidInput("both the source block name and at least one target block name are required")

    settings = settings or DrawingSettings()
    ctx = ctx or RunContext()
    report = ReplaceReport()

    placements = list(session.placements())
    emit_simple(
        ctx.diag,
        run_id=ctx.run_id,
        stage="replace",
        component="replace",
        code="REPLACE_START",
        source="snapshot",
        input_value={"name_from": source_name, "names_to": target_names},
        resolved_value={"placements": len(placements)},
        reason="block replacement start",
    )

    existing = [p for p in placements if not _same_block(p.name, source_name)]
    for placement in placements:
        if not _same_block(placement.name, source_name):
            continue
        session.delete_placement(placement)
        report.replaced.append(placement)

        for target in target_names:
            new_placement = Placement(
                name=target,
                position=placement.position,
                rotation=placement.rotation,
                scale=placement.scale,
                layer=placement.layer,
            )
            if skip_existing and any(
                _same_block(other.name, target)
                and points_near(other, new_placement, settings.point_tolerance)
                for other in existing
            ):
                report.skipped.append(new_placement)
                continue
            session.insert_placement(new_placement)
            existing.append(new_placement)
            report.inserted.append(new_placement)

    # The block table is keyed by the drawing's spelling of the name.
    definition_name = report.replaced[0].name if report.replaced else source_name
    report.definition_deleted = _purge_definition(session, definition_name, ctx)

    emit_simple(
        ctx.diag,
        run_id=ctx.run_id,
        stage="replace",
        component="replace",
        code="REPLACE_DONE",
        resolved_value={
            "replaced": len(report.replaced),
            "inserted": len(report.inserted),
            "skipped": len(report.skipped),
            "definition_deleted": report.definition_deleted,
        },
        reason="block replacement done",
    )
    return report


def _purge_definition(session: DrawingSession, name: str, ctx: RunContext) -> bool:
    try:
        if not session.has_block_definition(name):
            return False
        if any(_same_block(p.name, name) for p in session.placements()):
            return False
        session.delete_block_definition(name)
    except Exception as exc:
        # The definition may be nested in another block; the drawing stays valid.
        emit_simple(
            ctx.diag,
            run_id=ctx.run_id,
            stage="replace",
            component="session",
            code="DEFINITION_DELETE_FAILED",
            severity=Severity.WARN,
            path=name,
            source="computed",
            reason=str(exc),
        )
        return False
    return True
