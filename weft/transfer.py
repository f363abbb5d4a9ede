"""Graph import and export as JSON documents shaped like the snapshot."""
import json
from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, Optional

from .errors import ImportParseFailure
from .graph import GraphSnapshot

SCHEMA_VERSION = 1


@dataclass(frozen=True)
class ImportResult:
    success: bool
    tabs: int = 0
    groups: int = 0
    error: Optional[str] = None
    snapshot: Optional[GraphSnapshot] = None


def parse_import(data: Any) -> GraphSnapshot:
    if not isinstance(data, dict):
        raise ImportParseFailure("Import data must be a JSON object with a 'tabs' array")
    if not isinstance(data.get("tabs"), list):
        raise ImportParseFailure("Missing 'tabs' array")
    for key in ("edges", "groups"):
        if key in data and not isinstance(data[key], list):
            raise ImportParseFailure(f"'{key}' must be an array")
    return GraphSnapshot.from_dict(data)


def import_graph(data: Any) -> ImportResult:
    try:
        snapshot = parse_import(data)
    except ImportParseFailure as exc:
        return ImportResult(success=False, error=str(exc))
    return ImportResult(success=True, tabs=len(snapshot.tabs), groups=len(snapshot.groups), snapshot=snapshot)


def import_graph_text(text: str) -> ImportResult:
    try:
        data = json.loads(text)
    except ValueError as exc:
        return ImportResult(success=False, error=f"Invalid JSON file: {exc}")
    return import_graph(data)


def import_graph_file(path: str) -> ImportResult:
    try:
        with open(path, "r", encoding="utf-8") as f:
            text = f.read()
    except OSError as exc:
        return ImportResult(success=False, error=f"Could not read {path}: {exc}")
    return import_graph_text(text)


def export_graph(snapshot: GraphSnapshot) -> Dict[str, Any]:
    out: Dict[str, Any] = {"schema_version": SCHEMA_VERSION}
    out.update(snapshot.to_dict())
    return out


def dumps_graph(snapshot: GraphSnapshot) -> str:
    return json.dumps(export_graph(snapshot), ensure_ascii=False, indent=2)


def write_graph(snapshot: GraphSnapshot, path: str) -> None:
    with open(path, "w", encoding="utf-8") as f:
        f.write(dumps_graph(snapshot))
        f.write("\n")


def export_filename(day: Optional[date] = None) -> str:
    day = day or date.today()
    return f"weft_graph_{day.isoformat()}.json"
