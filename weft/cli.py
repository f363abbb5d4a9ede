#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""Query a tab graph from the command line.

Usage:
  weft --graph tab_graph.json search "python @github #async"
  weft --graph tab_graph.json related 12
  weft --graph tab_graph.json insights --insights-backend ollama
  weft --graph tab_graph.json import weft_graph_2026-10-01.json
"""
import argparse
import json
import sys
from typing import List, Optional

from .config import WeftOptions, add_arguments, options_from_args
from .insights import EMPTY_STATE_MESSAGE
from .session import Session
from .timeline import bar_heights
from .transfer import export_filename, import_graph_file, write_graph


def _tab_line(tab) -> str:
    return f"{tab.id}\t{tab.title or tab.url}\t{tab.domain or ''}"


def cmd_search(session: Session, args: argparse.Namespace) -> int:
    raw = " ".join(args.query)
    if args.save:
        session.submit_search(raw)
    else:
        session.search(raw)
    tabs = session.visible_tabs()
    if args.json:
        print(json.dumps([t.to_dict() for t in tabs], ensure_ascii=False, indent=2))
        return 0
    for tab in tabs:
        print(_tab_line(tab))
    print(f"[OK] {len(tabs)} matching tabs.")
    return 0


def cmd_groups(session: Session, args: argparse.Namespace) -> int:
    session.search(" ".join(args.query))
    groups = session.visible_groups()
    if not groups:
        print("No groups yet. Browse some pages to start building your knowledge graph.")
        return 0
    for group, tabs in groups:
        print(f"{group.label} ({len(tabs)})")
        for tab in tabs:
            print(f"  {_tab_line(tab)}")
    return 0


def cmd_related(session: Session, args: argparse.Namespace) -> int:
    if args.limit is not None:
        session.related_limit = args.limit
    details = session.select(args.tab_id)
    if details is None:
        print(f"[ERROR] Unknown tab id: {args.tab_id}", file=sys.stderr)
        return 1
    print(f"{details.title}\n  {details.tab.url}\n  group: {details.group_label}")
    if details.tab.keywords:
        print(f"  keywords: {', '.join(details.tab.keywords)}")
    if not details.related:
        print("No connected tabs")
    for item in details.related:
        print(f"{item.tab.id}\t{item.tab.title or item.tab.url}\t{item.describe()}")
    return 0


def cmd_project(session: Session, args: argparse.Namespace) -> int:
    session.search(" ".join(args.query))
    text = json.dumps(session.graph().to_dict(), ensure_ascii=False, indent=2)
    if args.out:
        try:
            with open(args.out, "w", encoding="utf-8") as f:
                f.write(text)
        except OSError as exc:
            print(f"[ERROR] Could not write {args.out}: {exc}", file=sys.stderr)
            return 1
        print(f"[OK] Wrote {args.out}")
    else:
        print(text)
    return 0


def cmd_insights(session: Session, args: argparse.Namespace) -> int:
    view = session.insights()
    if view.is_empty:
        print(EMPTY_STATE_MESSAGE)
        return 0
    if args.html:
        print(view.html)
    else:
        print(session.cached_insight.text)
    if session.verbose:
        print(f"[INFO] Insights source: {view.source}", file=sys.stderr)
    return 0


def cmd_timeline(session: Session, args: argparse.Namespace) -> int:
    buckets = session.timeline()
    if not buckets:
        print("No activity data yet")
        return 0
    for bucket, height in zip(buckets, bar_heights(buckets)):
        bar = "#" * max(1, round(height / 5))
        print(f"{bucket.label:>15} {bucket.count:>4} {bar}")
    return 0


def cmd_stats(session: Session, args: argparse.Namespace) -> int:
    stats = session.snapshot.stats()
    print(f"{stats.tab_count} tabs | {stats.domain_count} domains | {stats.group_count} groups | {stats.edge_count} edges")
    return 0


def cmd_history(session: Session, args: argparse.Namespace) -> int:
    if args.clear:
        session.history.clear()
        print("[OK] Cleared search history.")
        return 0
    for query in session.history.entries():
        print(query)
    return 0


def cmd_import(session: Session, args: argparse.Namespace, options: WeftOptions) -> int:
    result = import_graph_file(args.file)
    if not result.success:
        print(f"[ERROR] Import failed: {result.error}", file=sys.stderr)
        return 1
    try:
        write_graph(result.snapshot, options.graph)
    except OSError as exc:
        print(f"[ERROR] Could not write {options.graph}: {exc}", file=sys.stderr)
        return 1
    print(f"[OK] Imported {result.tabs} tabs, {result.groups} groups into {options.graph}")
    return 0


def cmd_export(session: Session, args: argparse.Namespace) -> int:
    out = args.out or export_filename()
    try:
        write_graph(session.snapshot, out)
    except OSError as exc:
        print(f"[ERROR] Could not write {out}: {exc}", file=sys.stderr)
        return 1
    print(f"[OK] Wrote {out} with {len(session.snapshot.tabs)} tabs, {len(session.snapshot.groups)} groups.")
    return 0


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="weft", description="Search, rank and summarize a tab knowledge graph.")
    add_arguments(ap)
    sub = ap.add_subparsers(dest="command", required=True)

    p = sub.add_parser("search", help="List tabs matching a query")
    p.add_argument("query", nargs="*", help="Free text with optional @domain and #keyword tokens")
    p.add_argument("--save", action="store_true", help="Record the query in search history")
    p.add_argument("--json", action="store_true", help="Print matching tabs as JSON")

    p = sub.add_parser("groups", help="List groups matching a query, largest first")
    p.add_argument("query", nargs="*")

    p = sub.add_parser("related", help="Show a tab and its strongest connections")
    p.add_argument("tab_id")
    p.add_argument("--limit", type=int, help="Number of related tabs")

    p = sub.add_parser("project", help="Emit the graph view (nodes, edges, layout) as JSON")
    p.add_argument("query", nargs="*")
    p.add_argument("--out", help="Write JSON to this path")

    p = sub.add_parser("insights", help="Print a browsing insight report")
    p.add_argument("--html", action="store_true", help="Render the report to HTML")

    sub.add_parser("timeline", help="Show activity by hour or by group")
    sub.add_parser("stats", help="Show tab, domain, group and edge counts")

    p = sub.add_parser("history", help="Show recent searches")
    p.add_argument("--clear", action="store_true", help="Forget all recent searches")

    p = sub.add_parser("import", help="Validate a graph JSON file and make it the current graph")
    p.add_argument("file")

    p = sub.add_parser("export", help="Write the current graph to a dated JSON file")
    p.add_argument("--out", help="Output path (default weft_graph_<date>.json)")
    return ap


COMMANDS = {
    "search": cmd_search,
    "groups": cmd_groups,
    "related": cmd_related,
    "project": cmd_project,
    "insights": cmd_insights,
    "timeline": cmd_timeline,
    "stats": cmd_stats,
    "history": cmd_history,
    "export": cmd_export,
}


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    options = options_from_args(args)
    try:
        session = Session.from_options(options)
    except ValueError as exc:
        print(f"[ERROR] {exc}", file=sys.stderr)
        return 1

    if args.command == "import":
        return cmd_import(session, args, options)
    if args.command != "history":
        session.refresh()
    if options.verbose:
        stats = session.snapshot.stats()
        print(f"[INFO] Loaded {options.graph}: {stats.tab_count} tabs, {stats.group_count} groups.", file=sys.stderr)
    return COMMANDS[args.command](session, args)


if __name__ == "__main__":
    sys.exit(main())
