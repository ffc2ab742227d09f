from __future__ import annotations

import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from src.cad.snapshot import placements_to_snapshot, texts_to_snapshot
from src.schema import Placement, TextAnnotation


def test_placement_snapshot_is_rounded_and_stable():
    placement = Placement(
        name="*U7",
        effective_name="door",
        position=(1.00000012, 2.0, 0.0),
        rotation=0.1234567891,
        layer="A-DOOR",
    )
    assert placements_to_snapshot([placement]) == [
        {
            "name": "*U7",
            "effective_name": "door",
            "position": [1.0, 2.0, 0.0],
            "rotation": 0.123457,
            "scale": [1.0, 1.0, 1.0],
            "layer": "A-DOOR",
        }
    ]


def test_text_snapshot_includes_handle_when_known():
    text = TextAnnotation(position=(3, 4), content="EL 1.000", kind="AcDbMText", handle="2B")
    assert texts_to_snapshot([text]) == [
        {"position": [3.0, 4.0], "content": "EL 1.000", "kind": "multi_line", "handle": "2B"}
    ]
