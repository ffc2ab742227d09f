from __future__ import annotations

import json
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from tools.run_snapshot import main, run


SNAPSHOT = {
    "placements": [
        {"name": "door", "insertion_point": [0, 0, 0], "handle": "A1"},
        {"name": "stub", "insertion_point": [0.3, 0, 0], "handle": "A2"},
        {"name": "door", "insertion_point": [40, 0, 0], "handle": "A3"},
    ],
    "texts": [
        {"insertion_point": [1, 3], "text_string": "ОТМ +3.600", "object_name": "AcDbText"},
        {"insertion_point": [1, 1], "text_string": "Дверь", "object_name": "AcDbText"},
        {"insertion_point": [41, -2], "text_string": "12.450", "object_name": "AcDbMText"},
    ],
}


def test_run_resolves_and_collects_marks(monkeypatch):
    monkeypatch.delenv("CAD_SEARCH_RADIUS", raising=False)
    monkeypatch.delenv("CAD_DUPLICATE_TOLERANCE", raising=False)
    result = run(SNAPSHOT, "stub", with_marks=True)
    assert result["input_count"] == 3
    assert result["dropped_count"] == 1
    assert [item["handle"] for item in result["kept"]] == ["A1", "A3"]
    assert [[mark["content"] for mark in marks] for marks in result["marks"]] == [["ОТМ +3.600"], ["12.450"]]
    assert result["diagnostics_summary"]["total"] == 0


def test_main_writes_output_file(tmp_path):
    snapshot_path = tmp_path / "snapshot.json"
    snapshot_path.write_text(json.dumps(SNAPSHOT, ensure_ascii=False), encoding="utf-8")
    out_path = tmp_path / "out" / "result.json"

    assert main([str(snapshot_path), "--unwanted", "stub", "--out", str(out_path)]) == 0
    payload = json.loads(out_path.read_text(encoding="utf-8"))
    assert len(payload["kept"]) == 2
    assert "marks" not in payload


def test_main_rejects_malformed_snapshot(tmp_path, capsys):
    bad = tmp_path / "bad.json"
    bad.write_text(json.dumps({"placements": [{"name": "door", "insertion_point": [0, 0]}]}), encoding="utf-8")
    assert main([str(bad)]) == 2
    assert "SNAPSHOT_ERROR" in capsys.readouterr().err

    not_object = tmp_path / "list.json"
    not_object.write_text("[]", encoding="utf-8")
    assert main([str(not_object)]) == 2


def test_main_rejects_wrongly_shaped_records(tmp_path, capsys):
    cases = [
        {"placements": [5]},
        {"placements": 7},
        {"texts": ["EL 1.000"]},
        {"texts": {"insertion_point": [0, 0]}},
    ]
    for index, snapshot in enumerate(cases):
        path = tmp_path / f"shape_{index}.json"
        path.write_text(json.dumps(snapshot), encoding="utf-8")
        assert main([str(path)]) == 2
        assert "SNAPSHOT_ERROR" in capsys.readouterr().err
