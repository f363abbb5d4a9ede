"""Minimal markdown subset renderer for insight reports.

Understands ``#``/``##``/``###`` headers, ``- `` bullets, ``1. `` numbered
items, ``**bold**`` and ``code`` spans. Everything else is a paragraph.
Text is HTML-escaped before any inline markup is added.
"""
import html
import re
from dataclasses import dataclass
from typing import List, Optional, Tuple

HEADERS = (("### ", "h3"), ("## ", "h2"), ("# ", "h1"))
ORDERED_ITEM = re.compile(r"^\d+\.\s")
BOLD = re.compile(r"\*\*([^*]+)\*\*")
CODE = re.compile(r"`([^`]+)`")


@dataclass(frozen=True)
class Block:
    kind: str  # h1 | h2 | h3 | ul | ol | p
    text: str = ""
    items: Tuple[str, ...] = ()

    def to_html(self) -> str:
        if self.kind in ("ul", "ol"):
            inner = "".join(f"<li>{item}</li>" for item in self.items)
            return f"<{self.kind}>{inner}</{self.kind}>"
        return f"<{self.kind}>{self.text}</{self.kind}>"


def escape(text: str) -> str:
    return html.escape(text, quote=True)


def format_inline(text: str) -> str:
    out = escape(text)
    out = BOLD.sub(r"<b>\1</b>", out)
    return CODE.sub(r"<code>\1</code>", out)


def render_markdown(text: Optional[str]) -> List[Block]:
    if not text:
        return []

    blocks: List[Block] = []
    list_kind: Optional[str] = None
    list_items: List[str] = []

    def close_list() -> None:
        nonlocal list_kind, list_items
        if list_kind is not None:
            blocks.append(Block(kind=list_kind, items=tuple(list_items)))
        list_kind, list_items = None, []

    def add_item(kind: str, item: str) -> None:
        nonlocal list_kind
        if list_kind != kind:
            close_list()
            list_kind = kind
        list_items.append(format_inline(item))

    for line in text.splitlines():
        header = next(((prefix, kind) for prefix, kind in HEADERS if line.startswith(prefix)), None)
        if header:
            close_list()
            prefix, kind = header
            blocks.append(Block(kind=kind, text=escape(line[len(prefix):])))
        elif line.startswith("- "):
            add_item("ul", line[2:])
        elif ORDERED_ITEM.match(line):
            add_item("ol", ORDERED_ITEM.sub("", line, count=1))
        else:
            close_list()
            if line.strip():
                blocks.append(Block(kind="p", text=format_inline(line)))
    close_list()
    return blocks


def blocks_to_html(blocks: List[Block]) -> str:
    return "".join(b.to_html() for b in blocks)


def render_html(text: Optional[str]) -> str:
    return blocks_to_html(render_markdown(text))
