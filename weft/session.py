"""Session controller owning the mutable view state.

The current snapshot, the active query, the selected tab and the last
insight live here; every query, ranking and projection call goes to the
pure functions with that state passed in.
"""
import sys
import time
from dataclasses import dataclass, replace
from typing import Any, Callable, Dict, List, Optional, Tuple

from .config import WeftOptions
from .errors import AcquisitionFailure
from .graph import EMPTY_SNAPSHOT, GraphSnapshot, Group, Tab, load_graph
from .history import SearchHistory
from .insights import EMPTY_STATE_MESSAGE, Insight, InsightBackend, build_backend, generate_insights
from .markdown import Block, blocks_to_html, render_markdown
from .projection import Projection, project
from .query import Query, filter_groups, filter_tabs, parse_query
from .ranking import DEFAULT_RELATED_LIMIT, RelatedTab, related_tabs
from .timeline import TimelineBucket, activity_timeline
from .transfer import ImportResult, export_graph, import_graph

UNGROUPED_LABEL = "Ungrouped"


@dataclass(frozen=True)
class TabDetails:
    tab: Tab
    title: str
    group_label: str
    related: Tuple[RelatedTab, ...]


@dataclass(frozen=True)
class InsightView:
    blocks: Tuple[Block, ...]
    html: str
    source: Optional[str] = None
    age_minutes: int = 0

    @property
    def is_empty(self) -> bool:
        return self.source is None


EMPTY_INSIGHT_VIEW = InsightView(
    blocks=tuple(Block(kind="p", text=line) for line in EMPTY_STATE_MESSAGE.splitlines()),
    html="".join(f"<p>{line}</p>" for line in EMPTY_STATE_MESSAGE.splitlines()),
)


class Session:
    def __init__(
        self,
        loader: Callable[[], GraphSnapshot],
        history: Optional[SearchHistory] = None,
        backend: Optional[InsightBackend] = None,
        related_limit: int = DEFAULT_RELATED_LIMIT,
        clock: Callable[[], float] = time.time,
        verbose: bool = False,
    ) -> None:
        self.loader = loader
        self.history = history if history is not None else SearchHistory()
        self.backend = backend
        self.related_limit = related_limit
        self.clock = clock
        self.verbose = verbose
        self.snapshot: GraphSnapshot = EMPTY_SNAPSHOT
        self.query_text = ""
        self.selected_id: Optional[str] = None
        self.cached_insight: Optional[Insight] = None

    @classmethod
    def from_options(cls, options: WeftOptions) -> "Session":
        return cls(
            loader=lambda: load_graph(options.graph),
            history=SearchHistory(options.history_path),
            backend=build_backend(options.insights_backend, **options.backend_options()),
            related_limit=options.related_limit,
            verbose=options.verbose,
        )

    # -- snapshot -------------------------------------------------------

    def refresh(self) -> GraphSnapshot:
        try:
            snapshot = self.loader()
        except AcquisitionFailure as exc:
            print(f"[WARN] Failed to load graph data: {exc}", file=sys.stderr)
            snapshot = EMPTY_SNAPSHOT
        self.replace_snapshot(snapshot)
        return snapshot

    def replace_snapshot(self, snapshot: GraphSnapshot) -> None:
        if snapshot is not self.snapshot:
            self.cached_insight = None
        self.snapshot = snapshot
        if self.selected_id is not None and snapshot.get_tab(self.selected_id) is None:
            self.selected_id = None

    # -- search ---------------------------------------------------------

    @property
    def query(self) -> Query:
        return parse_query(self.query_text)

    def search(self, raw: str) -> Query:
        self.query_text = raw or ""
        return self.query

    def submit_search(self, raw: str) -> Query:
        query = self.search(raw)
        trimmed = self.query_text.strip()
        if trimmed:
            self.history.add(trimmed)
        return query

    def visible_tabs(self) -> List[Tab]:
        return filter_tabs(self.snapshot, self.query)

    def visible_groups(self) -> List[Tuple[Group, List[Tab]]]:
        return [(g, self.snapshot.tabs_for_group(g)) for g in filter_groups(self.snapshot, self.query)]

    def graph(self) -> Projection:
        return project(self.snapshot, self.query)

    def timeline(self) -> List[TimelineBucket]:
        return activity_timeline(self.snapshot)

    # -- selection ------------------------------------------------------

    def select(self, tab_id: str) -> Optional[TabDetails]:
        # duplicates stay reachable here, e.g. through an edge in the details panel
        tab = self.snapshot.get_tab(tab_id)
        if tab is None:
            return None
        self.selected_id = tab.id
        group = self.snapshot.get_group(tab.group_id)
        return TabDetails(
            tab=tab,
            title=tab.title or tab.url,
            group_label=group.label if group else UNGROUPED_LABEL,
            related=tuple(related_tabs(self.snapshot, tab.id, self.related_limit)),
        )

    def clear_selection(self) -> None:
        self.selected_id = None

    # -- insights -------------------------------------------------------

    def insights(self, refresh: bool = True) -> InsightView:
        if refresh or self.cached_insight is None:
            insight = generate_insights(self.snapshot, self.backend, self.selected_id, verbose=self.verbose)
            if insight is None:
                self.cached_insight = None
                return EMPTY_INSIGHT_VIEW
            self.cached_insight = replace(insight, generated_at=self.clock())
        insight = self.cached_insight
        blocks = render_markdown(insight.text)
        age = max(0, round((self.clock() - insight.generated_at) / 60))
        return InsightView(blocks=tuple(blocks), html=blocks_to_html(blocks), source=insight.source, age_minutes=age)

    # -- import / export ------------------------------------------------

    def import_data(self, data: Any) -> ImportResult:
        result = import_graph(data)
        if result.success and result.snapshot is not None:
            self.replace_snapshot(result.snapshot)
        return result

    def export_data(self) -> Dict[str, Any]:
        return export_graph(self.snapshot)
