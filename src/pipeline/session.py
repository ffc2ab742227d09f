"""Drawing-session port and run context shared by pipeline operations."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from typing import Iterable, Protocol

from src.cad.diagnostics import DiagnosticsSink, NoopDiagnosticsSink, diag_sink_from_env
from src.schema import Placement, TextAnnotation


class DrawingSession(Protocol):
    """Access to one open drawing, implemented by the CAD binding layer."""

    def placements(self) -> Iterable[Placement]:
        """Snapshot of block placements in model space."""

    def texts(self) -> Iterable[TextAnnotation]:
        """Snapshot of text entities in model space."""

    def delete_placement(self, placement: Placement) -> None:
        """Erase the entity the snapshot was taken from."""

    def insert_placement(self, placement: Placement) -> None:
        """Insert a new block reference described by ``placement``."""

    def has_block_definition(self, name: str) -> bool:
        """Whether the block table holds a definition called ``name``."""

    def delete_block_definition(self, name: str) -> None:
        """Remove a block definition from the block table."""


@dataclass(frozen=True)
class RunContext:
    run_id: str = field(default_factory=lambda: uuid.uuid4().hex)
    diag: DiagnosticsSink = field(default_factory=NoopDiagnosticsSink)


def context_from_env() -> RunContext:
    return RunContext(diag=diag_sink_from_env())
