"""Graph snapshot model: tabs, edges and groups as produced by the graph builder.

A snapshot is normalised once on ingestion and never mutated afterwards.
Consumers receive a whole new snapshot on refresh.
"""
import json
import sys
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union
from urllib.parse import urlparse

from .errors import AcquisitionFailure

REASON_NAVIGATION = "navigation"
REASON_SIMILARITY = "similarity"

Timestamp = Union[int, float, str]


@dataclass(frozen=True)
class Tab:
    id: str
    url: str = ""
    title: Optional[str] = None
    domain: Optional[str] = None
    keywords: Tuple[str, ...] = ()
    group_id: Optional[str] = None
    duplicate_of: Optional[str] = None
    added_at: Optional[Timestamp] = None
    last_accessed: Optional[Timestamp] = None

    @property
    def is_duplicate(self) -> bool:
        return self.duplicate_of is not None

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"id": self.id, "url": self.url}
        if self.title is not None:
            out["title"] = self.title
        if self.domain is not None:
            out["domain"] = self.domain
        out["keywords"] = list(self.keywords)
        for key in ("group_id", "duplicate_of", "added_at", "last_accessed"):
            value = getattr(self, key)
            if value is not None:
                out[key] = value
        return out


@dataclass(frozen=True)
class Edge:
    source: str
    target: str
    weight: float = 0.0
    reason: Optional[str] = None

    def other_end(self, tab_id: str) -> Optional[str]:
        if self.source == tab_id:
            return self.target
        if self.target == tab_id:
            return self.source
        return None

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"source": self.source, "target": self.target, "weight": self.weight}
        if self.reason is not None:
            out["reason"] = self.reason
        return out


@dataclass(frozen=True)
class Group:
    id: str
    label: str
    tab_ids: Tuple[str, ...] = ()
    size: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "label": self.label, "tab_ids": list(self.tab_ids), "size": self.size}


@dataclass(frozen=True)
class GraphStats:
    tab_count: int
    domain_count: int
    group_count: int
    edge_count: int


@dataclass(frozen=True)
class GraphSnapshot:
    tabs: Tuple[Tab, ...] = ()
    edges: Tuple[Edge, ...] = ()
    groups: Tuple[Group, ...] = ()
    _tab_index: Dict[str, Tab] = field(init=False, repr=False, compare=False)
    _group_index: Dict[str, Group] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        tab_index: Dict[str, Tab] = {}
        for tab in self.tabs:
            tab_index.setdefault(tab.id, tab)
        group_index: Dict[str, Group] = {}
        for group in self.groups:
            group_index.setdefault(group.id, group)
        object.__setattr__(self, "_tab_index", tab_index)
        object.__setattr__(self, "_group_index", group_index)

    @property
    def is_empty(self) -> bool:
        return not self.tabs

    def get_tab(self, tab_id: Optional[str]) -> Optional[Tab]:
        if tab_id is None:
            return None
        return self._tab_index.get(tab_id)

    def get_group(self, group_id: Optional[str]) -> Optional[Group]:
        if group_id is None:
            return None
        return self._group_index.get(group_id)

    def tabs_for_group(self, group: Union[Group, str, None]) -> List[Tab]:
        """Resolvable member tabs of a group, in member order. Repeated members are kept."""
        if not isinstance(group, Group):
            group = self.get_group(group)
        if group is None:
            return []
        members = [self._tab_index.get(tid) for tid in group.tab_ids]
        return [t for t in members if t]

    def primary_tabs(self) -> List[Tab]:
        return [t for t in self.tabs if not t.is_duplicate]

    def stats(self) -> GraphStats:
        primary = self.primary_tabs()
        domains = {t.domain for t in primary if t.domain}
        return GraphStats(
            tab_count=len(primary),
            domain_count=len(domains),
            group_count=len(self.groups),
            edge_count=len(self.edges),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "tabs": [t.to_dict() for t in self.tabs],
            "edges": [e.to_dict() for e in self.edges],
            "groups": [g.to_dict() for g in self.groups],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GraphSnapshot":
        return cls(
            tabs=tuple(_iter_parsed(data.get("tabs"), parse_tab, "tab")),
            edges=tuple(_iter_parsed(data.get("edges"), parse_edge, "edge")),
            groups=tuple(_iter_parsed(data.get("groups"), parse_group, "group")),
        )


EMPTY_SNAPSHOT = GraphSnapshot()


def normalize_domain(url: str) -> str:
    parsed = urlparse(url)
    domain = parsed.netloc.lower().split(":")[0]
    if domain.startswith("www."):
        domain = domain[4:]
    return domain


def is_http_url(url: str) -> bool:
    return url.startswith("http://") or url.startswith("https://")


def _pick(entry: Dict[str, Any], *keys: str) -> Any:
    for key in keys:
        value = entry.get(key)
        if value is not None:
            return value
    return None


def _as_id(value: Any) -> Optional[str]:
    # bool is an int subclass and never a valid id
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return str(value)
    if isinstance(value, str):
        value = value.strip()
        return value or None
    return None


def _as_group_ref(value: Any) -> Optional[str]:
    # the graph builder writes -1 for tabs outside every group
    if isinstance(value, int) and not isinstance(value, bool) and value < 0:
        return None
    return _as_id(value)


def _as_text(value: Any) -> Optional[str]:
    if isinstance(value, str) and value:
        return value
    return None


def _as_weight(value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0.0
    if value != value:
        return 0.0
    return float(value)


def _as_timestamp(value: Any) -> Optional[Timestamp]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return value
    if isinstance(value, str) and value.strip():
        return value
    return None


def _as_keywords(value: Any) -> Tuple[str, ...]:
    if not isinstance(value, list):
        return ()
    seen: List[str] = []
    for kw in value:
        if isinstance(kw, str) and kw and kw not in seen:
            seen.append(kw)
    return tuple(seen)


def parse_tab(entry: Dict[str, Any]) -> Optional[Tab]:
    tab_id = _as_id(entry.get("id"))
    if tab_id is None:
        return None
    url = entry.get("url") if isinstance(entry.get("url"), str) else ""
    domain = _as_text(entry.get("domain"))
    if domain is None and is_http_url(url):
        domain = normalize_domain(url) or None
    return Tab(
        id=tab_id,
        url=url,
        title=_as_text(entry.get("title")),
        domain=domain,
        keywords=_as_keywords(entry.get("keywords")),
        group_id=_as_group_ref(_pick(entry, "group_id", "groupId")),
        duplicate_of=_as_id(_pick(entry, "duplicate_of", "duplicateOf")),
        added_at=_as_timestamp(_pick(entry, "added_at", "addedAt")),
        last_accessed=_as_timestamp(_pick(entry, "last_accessed", "lastAccessed")),
    )


def parse_edge(entry: Dict[str, Any]) -> Optional[Edge]:
    source = _as_id(entry.get("source"))
    target = _as_id(entry.get("target"))
    if source is None or target is None:
        return None
    return Edge(
        source=source,
        target=target,
        weight=_as_weight(entry.get("weight")),
        reason=_as_text(entry.get("reason")),
    )


def parse_group(entry: Dict[str, Any]) -> Optional[Group]:
    group_id = _as_id(entry.get("id"))
    if group_id is None:
        return None
    raw_ids = _pick(entry, "tab_ids", "tabIds")
    tab_ids = tuple(tid for tid in (_as_id(v) for v in raw_ids) if tid) if isinstance(raw_ids, list) else ()
    size = entry.get("size")
    if isinstance(size, bool) or not isinstance(size, int) or size <= 0:
        size = len(tab_ids)
    label = entry.get("label")
    if not isinstance(label, str):
        label = "group"
    return Group(id=group_id, label=label, tab_ids=tab_ids, size=size)


def _iter_parsed(entries: Any, parser, kind: str) -> Iterable:
    if not isinstance(entries, list):
        return
    skipped = 0
    for entry in entries:
        item = parser(entry) if isinstance(entry, dict) else None
        if item is None:
            skipped += 1
            continue
        yield item
    if skipped:
        print(f"[WARN] Skipped {skipped} malformed {kind} entries.", file=sys.stderr)


def load_graph(path: str) -> GraphSnapshot:
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as exc:
        raise AcquisitionFailure(f"Could not read graph {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise AcquisitionFailure(f"{path} is not a graph document (expected an object with tabs/edges/groups)")
    return GraphSnapshot.from_dict(data)


def load_graph_or_empty(path: str) -> GraphSnapshot:
    try:
        return load_graph(path)
    except AcquisitionFailure as exc:
        print(f"[WARN] {exc}; using an empty graph.", file=sys.stderr)
        return EMPTY_SNAPSHOT
