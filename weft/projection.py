"""Graph view projection: visible nodes and edges plus force-layout constants.

Node positions are left to the renderer; this module only decides what is
drawn, in which color, under which label.
"""
import re
from dataclasses import asdict, dataclass
from typing import Any, Dict, List, Optional, Tuple

from .graph import REASON_NAVIGATION, GraphSnapshot, Tab
from .query import EMPTY_QUERY, Query, filter_tabs

GROUP_COLORS = (
    "#8b5cf6",  # purple
    "#06b6d4",  # cyan
    "#f59e0b",  # amber
    "#10b981",  # emerald
    "#ef4444",  # red
    "#ec4899",  # pink
    "#6366f1",  # indigo
    "#84cc16",  # lime
    "#f97316",  # orange
    "#14b8a6",  # teal
)
UNGROUPED_COLOR = "#6b7280"
NODE_SIZE = 20
LABEL_MAX_LENGTH = 30
UNTITLED = "Untitled"

_NON_DIGITS = re.compile(r"\D")


def group_number(group_id: str) -> int:
    digits = _NON_DIGITS.sub("", group_id)
    return int(digits) if digits else 0


def group_color(group_id: Optional[str]) -> str:
    if not group_id:
        return UNGROUPED_COLOR
    return GROUP_COLORS[group_number(group_id) % len(GROUP_COLORS)]


def truncate(text: Optional[str], max_length: int) -> str:
    if not text:
        return ""
    return text[:max_length] + "..." if len(text) > max_length else text


def node_label(tab: Tab) -> str:
    return truncate(tab.title or tab.domain or UNTITLED, LABEL_MAX_LENGTH)


@dataclass(frozen=True)
class LayoutParams:
    """cose force-directed simulation settings handed to the renderer."""

    name: str = "cose"
    animate: bool = False
    randomize: bool = True
    node_repulsion: float = 6000
    ideal_edge_length: float = 120
    edge_elasticity: float = 100
    nesting_factor: float = 1.2
    gravity: float = 0.4
    num_iter: int = 200
    initial_temp: float = 300
    cooling_factor: float = 0.95
    min_temp: float = 1.0
    node_dimensions_include_labels: bool = True
    padding: int = 40

    def to_dict(self) -> Dict[str, Any]:
        return {_camel(k): v for k, v in asdict(self).items()}


LAYOUT = LayoutParams()


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.capitalize() for part in rest)


@dataclass(frozen=True)
class ProjectionNode:
    id: str
    label: str
    color: str
    size: int = NODE_SIZE
    group_id: Optional[str] = None


@dataclass(frozen=True)
class ProjectionEdge:
    id: str
    source: str
    target: str
    weight: float
    reason: Optional[str]
    width: int


@dataclass(frozen=True)
class Projection:
    nodes: Tuple[ProjectionNode, ...]
    edges: Tuple[ProjectionEdge, ...]
    layout: LayoutParams = LAYOUT

    def to_dict(self) -> Dict[str, Any]:
        elements: List[Dict[str, Any]] = []
        for node in self.nodes:
            data = {"id": node.id, "label": node.label, "color": node.color, "size": node.size}
            elements.append({"group": "nodes", "data": data})
        for edge in self.edges:
            data = {
                "id": edge.id,
                "source": edge.source,
                "target": edge.target,
                "weight": edge.weight,
                "reason": edge.reason,
                "width": edge.width,
            }
            elements.append({"group": "edges", "data": data})
        return {"elements": elements, "layout": self.layout.to_dict()}


def edge_width(reason: Optional[str]) -> int:
    return 2 if reason == REASON_NAVIGATION else 1


def project(snapshot: GraphSnapshot, query: Query = EMPTY_QUERY) -> Projection:
    tabs = filter_tabs(snapshot, query)
    nodes = tuple(
        ProjectionNode(id=t.id, label=node_label(t), color=group_color(t.group_id), group_id=t.group_id)
        for t in tabs
    )
    visible = {t.id for t in tabs}
    edges = tuple(
        ProjectionEdge(
            id=f"{e.source}-{e.target}-{i}",
            source=e.source,
            target=e.target,
            weight=e.weight,
            reason=e.reason,
            width=edge_width(e.reason),
        )
        for i, e in enumerate(snapshot.edges)
        if e.source in visible and e.target in visible
    )
    return Projection(nodes=nodes, edges=edges)
