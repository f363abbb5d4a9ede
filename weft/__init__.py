"""weft: search, ranking, projection and insight reports over a tab knowledge graph."""
from .graph import EMPTY_SNAPSHOT, Edge, GraphSnapshot, Group, Tab, load_graph, load_graph_or_empty
from .history import SearchHistory
from .insights import InsightReport, generate_insights, synthesize_offline
from .markdown import render_html, render_markdown
from .projection import LAYOUT, Projection, group_color, project
from .query import Query, filter_groups, filter_tabs, matches_group, matches_tab, parse_query
from .ranking import RelatedTab, related_tabs
from .session import Session
from .transfer import ImportResult, export_graph, import_graph

__version__ = "0.1.0"

__all__ = [
    "EMPTY_SNAPSHOT",
    "Edge",
    "GraphSnapshot",
    "Group",
    "ImportResult",
    "InsightReport",
    "LAYOUT",
    "Projection",
    "Query",
    "RelatedTab",
    "SearchHistory",
    "Session",
    "Tab",
    "export_graph",
    "filter_groups",
    "filter_tabs",
    "generate_insights",
    "group_color",
    "import_graph",
    "load_graph",
    "load_graph_or_empty",
    "matches_group",
    "matches_tab",
    "parse_query",
    "project",
    "related_tabs",
    "render_html",
    "render_markdown",
    "synthesize_offline",
]
