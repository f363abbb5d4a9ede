"""Search query mini-language over tabs and groups.

    "python @github #async"  ->  text="python", domain="github", keyword="async"

The first ``@word`` filters on domain and the first ``#word`` on keywords.
Whatever is left is matched as a substring of titles and urls.
"""
import re
from dataclasses import dataclass
from typing import List, Optional, Sequence

from .graph import GraphSnapshot, Group, Tab

DOMAIN_TOKEN = re.compile(r"@(\w+)")
KEYWORD_TOKEN = re.compile(r"#(\w+)")


@dataclass(frozen=True)
class Query:
    domain: Optional[str] = None
    keyword: Optional[str] = None
    text: str = ""

    @property
    def is_empty(self) -> bool:
        return self.domain is None and self.keyword is None and not self.text


EMPTY_QUERY = Query()


def parse_query(raw: Optional[str]) -> Query:
    if not raw:
        return EMPTY_QUERY
    lowered = raw.lower()
    domain_match = DOMAIN_TOKEN.search(lowered)
    keyword_match = KEYWORD_TOKEN.search(lowered)
    rest = KEYWORD_TOKEN.sub("", lowered)
    rest = DOMAIN_TOKEN.sub("", rest)
    return Query(
        domain=domain_match.group(1) if domain_match else None,
        keyword=keyword_match.group(1) if keyword_match else None,
        text=" ".join(rest.casefold().split()),
    )


def _domain_ok(tab: Tab, domain: str) -> bool:
    return bool(tab.domain) and domain in tab.domain.lower()


def _keyword_ok(tab: Tab, keyword: str) -> bool:
    return any(keyword in kw.lower() for kw in tab.keywords)


def _text_ok(tab: Tab, text: str) -> bool:
    if tab.title and text in tab.title.casefold():
        return True
    return bool(tab.url) and text in tab.url.casefold()


def matches_tab(tab: Tab, query: Query) -> bool:
    if tab.is_duplicate:
        return False
    if query.domain is not None and not _domain_ok(tab, query.domain):
        return False
    if query.keyword is not None and not _keyword_ok(tab, query.keyword):
        return False
    if query.text and not _text_ok(tab, query.text):
        return False
    return True


def matches_group(group: Group, tabs: Sequence[Tab], query: Query) -> bool:
    """Domain and keyword filters need one satisfying member; free text may also hit the label."""
    if query.domain is not None and not any(_domain_ok(t, query.domain) for t in tabs):
        return False
    if query.keyword is not None and not any(_keyword_ok(t, query.keyword) for t in tabs):
        return False
    if query.text:
        if query.text not in group.label.casefold() and not any(_text_ok(t, query.text) for t in tabs):
            return False
    return True


def filter_tabs(snapshot: GraphSnapshot, query: Query) -> List[Tab]:
    return [t for t in snapshot.tabs if matches_tab(t, query)]


def filter_groups(snapshot: GraphSnapshot, query: Query) -> List[Group]:
    """Matching groups, largest first."""
    groups = [g for g in snapshot.groups if matches_group(g, snapshot.tabs_for_group(g), query)]
    groups.sort(key=lambda g: g.size, reverse=True)
    return groups
