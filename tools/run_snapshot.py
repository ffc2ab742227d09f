"""Run duplicate resolution / height-mark search on a drawing snapshot JSON.

Usage:
  python tools/run_snapshot.py snapshot.json --unwanted NAME [--marks] [--out result.json]

Snapshot layout: {"placements": [{...}], "texts": [{...}]}
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from src.cad.diagnostics import ListDiagnosticsSink, build_diagnostics_summary  # noqa: E402
from src.cad.duplicates import resolve_duplicates  # noqa: E402
from src.cad.settings import settings_from_env  # noqa: E402
from src.cad.snapshot import placements_to_snapshot, texts_to_snapshot  # noqa: E402
from src.cad.text_search import find_nearby_height_marks  # noqa: E402
from src.schema import placement_from_dict, text_from_dict  # noqa: E402


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("snapshot", type=str, help="drawing snapshot JSON")
    parser.add_argument("--unwanted", type=str, default="", help="block name dropped at shared locations")
    parser.add_argument("--marks", action="store_true", help="collect height marks around kept placements")
    parser.add_argument("--out", type=str, default="", help="write result JSON here instead of stdout")
    return parser.parse_args(argv)


def _load_snapshot(path: Path) -> dict[str, Any]:
    payload = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(payload, dict):
        raise ValueError(f"Expected JSON object in {path}, got {type(payload).__name__}")
    return payload


def _records(payload: dict[str, Any], key: str) -> list[dict[str, Any]]:
    items = payload.get(key) or []
    if not isinstance(items, list):
        raise ValueError(f"{key}: expected a JSON array, got {type(items).__name__}")
    for index, item in enumerate(items):
        if not isinstance(item, dict):
            raise ValueError(f"{key}[{index}]: expected a JSON object, got {type(item).__name__}")
    return items


def run(payload: dict[str, Any], unwanted: str, with_marks: bool = False) -> dict[str, Any]:
    sink = ListDiagnosticsSink()
    settings = settings_from_env(diag=sink)

    placements = [placement_from_dict(item) for item in _records(payload, "placements")]
    texts = [text_from_dict(item) for item in _records(payload, "texts")]

    kept = resolve_duplicates(placements, unwanted, settings.duplicate_tolerance)
    result: dict[str, Any] = {
        "input_count": len(placements),
        "kept": placements_to_snapshot(kept),
        "dropped_count": len(placements) - len(kept),
    }
    if with_marks:
        result["marks"] = [
            texts_to_snapshot(
                find_nearby_height_marks(
                    placement.position,
                    texts,
                    search_radius=settings.search_radius,
                    cluster_deviation_ratio=settings.cluster_deviation_ratio,
                )
            )
            for placement in kept
        ]
    result["diagnostics_summary"] = build_diagnostics_summary(sink.events)
    return result


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    try:
        payload = _load_snapshot(Path(args.snapshot))
        result = run(payload, args.unwanted, with_marks=args.marks)
    except (OSError, ValueError) as exc:
        print(f"SNAPSHOT_ERROR:{exc}", file=sys.stderr)
        return 2

    text = json.dumps(result, ensure_ascii=False, indent=2)
    if args.out:
        out_path = Path(args.out)
        out_path.parent.mkdir(parents=True, exist_ok=True)
        out_path.write_text(text + "\n", encoding="utf-8")
    else:
        print(text)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
