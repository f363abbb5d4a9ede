"""Shared graph fixtures shaped like a built tab graph."""
import pytest

from weft.graph import GraphSnapshot


def graph_data():
    return {
        "schema_version": 1,
        "stats": {"tab_count": 5, "group_count": 2, "edge_count": 4},
        "tabs": [
            {
                "id": 0,
                "url": "https://github.com/python/cpython",
                "title": "CPython source",
                "domain": "github.com",
                "keywords": ["python", "interpreter", "asyncio"],
                "group_id": 1,
            },
            {
                "id": 1,
                "url": "https://docs.python.org/3/library/asyncio.html",
                "title": "asyncio — Asynchronous I/O",
                "domain": "docs.python.org",
                "keywords": ["asyncio", "python"],
                "group_id": 1,
            },
            {
                "id": 2,
                "url": "https://www.github.com/python/cpython",
                "title": "CPython mirror",
                "domain": "github.com",
                "keywords": ["python"],
                "group_id": 1,
                "duplicate_of": 0,
            },
            {
                "id": 3,
                "url": "https://news.ycombinator.com/item?id=1",
                "title": "Show HN: Rust in the kernel",
                "domain": "news.ycombinator.com",
                "keywords": ["rust", "kernel"],
                "group_id": 2,
            },
            {
                "id": 4,
                "url": "https://example.org/untitled",
                "keywords": [],
                "group_id": -1,
            },
        ],
        "edges": [
            {"source": 0, "target": 1, "weight": 0.9, "reason": "similarity"},
            {"source": 3, "target": 0, "weight": 0.5, "reason": "navigation"},
            {"source": 0, "target": 2, "weight": 0.95, "reason": "similarity+domain"},
            {"source": 0, "target": 99, "weight": 1.0, "reason": "similarity"},
        ],
        "groups": [
            {"id": 2, "label": "Rust news", "tab_ids": [3], "size": 1},
            {"id": 1, "label": "Python internals", "tab_ids": [0, 1, 2], "size": 3},
        ],
    }


@pytest.fixture
def snapshot():
    return GraphSnapshot.from_dict(graph_data())
