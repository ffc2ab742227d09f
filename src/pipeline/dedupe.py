"""Apply duplicate resolution to an open drawing."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

from src.cad.diagnostics import Severity, emit_simple
from src.cad.duplicates import group_placements, pick_survivor
from src.cad.settings import DrawingSettings
from src.cad.snapshot import placements_to_snapshot
from src.pipeline.session import DrawingSession, RunContext
from src.schema import Placement


@dataclass
class DedupeReport:
    kept: list[Placement] = field(default_factory=list)
    dropped: list[Placement] = field(default_factory=list)
    groups: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "groups": self.groups,
            "kept": placements_to_snapshot(self.kept),
            "dropped": placements_to_snapshot(self.dropped),
        }


def remove_duplicate_placements(
    session: DrawingSession,
    unwanted_name: str,
    settings: Optional[DrawingSettings] = None,
    ctx: Optional[RunContext] = None,
) -> DedupeReport:
    """Keep one placement per location and erase the rest from ``session``."""
    settings = settings or DrawingSettings()
    ctx = ctx or RunContext()

    placements = list(session.placements())
    emit_simple(
        ctx.diag,
        run_id=ctx.run_id,
        stage="dedupe",
        component="pipeline",
        code="DEDUPE_START",
        source="snapshot",
        input_value={"placements": len(placements), "unwanted_name": unwanted_name},
        resolved_value={"tolerance": settings.duplicate_tolerance},
        reason="duplicate removal start",
    )

    report = DedupeReport()
    for group in group_placements(placements, settings.duplicate_tolerance):
        survivor = pick_survivor(group.members, unwanted_name)
        report.groups += 1
        report.kept.append(survivor)
        # Identity, not equality: two identical snapshots are still two entities.
        dropped = [member for member in group.members if member is not survivor]
        if dropped:
            emit_simple(
                ctx.diag,
                run_id=ctx.run_id,
                stage="dedupe",
                component="resolver",
                code="GROUP_RESOLVED",
                path=f"placements[{group.leader_index}]",
                input_value=[member.name for member in group.members],
                resolved_value=survivor.name,
                reason="placements share one location",
                member_indices=list(group.member_indices),
            )
        for member in dropped:
            session.delete_placement(member)
            report.dropped.append(member)

    emit_simple(
        ctx.diag,
        run_id=ctx.run_id,
        stage="dedupe",
        component="pipeline",
        code="DEDUPE_DONE",
        severity=Severity.INFO,
        resolved_value={
            "groups": report.groups,
            "kept": len(report.kept),
            "dropped": len(report.dropped),
        },
        reason="duplicate removal done",
    )
    return report
