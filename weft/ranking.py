"""Related-tab ranking by edge traversal."""
from dataclasses import dataclass
from typing import Dict, List

from .graph import REASON_NAVIGATION, REASON_SIMILARITY, GraphSnapshot, Tab

# How to treat several edges joining the same pair of tabs.
FIRST_EDGE_WINS = "first-edge"
MAX_WEIGHT_WINS = "max-weight"
DEDUPE_POLICY = FIRST_EDGE_WINS

DEFAULT_RELATED_LIMIT = 5


@dataclass(frozen=True)
class RelatedTab:
    tab: Tab
    weight: float
    reason: str

    def describe(self) -> str:
        if self.reason == REASON_NAVIGATION:
            return "→ Navigated"
        return f"~ {round(self.weight * 100)}% similar"


def related_tabs(
    snapshot: GraphSnapshot,
    tab_id: str,
    limit: int = DEFAULT_RELATED_LIMIT,
    policy: str = DEDUPE_POLICY,
) -> List[RelatedTab]:
    if policy not in (FIRST_EDGE_WINS, MAX_WEIGHT_WINS):
        raise ValueError(f"Unknown dedupe policy: {policy}")

    candidates: Dict[str, RelatedTab] = {}
    for edge in snapshot.edges:
        other_id = edge.other_end(tab_id)
        if other_id is None or other_id == tab_id:
            continue
        tab = snapshot.get_tab(other_id)
        if tab is None:
            continue
        found = RelatedTab(tab=tab, weight=edge.weight, reason=edge.reason or REASON_SIMILARITY)
        existing = candidates.get(other_id)
        if existing is None:
            candidates[other_id] = found
        elif policy == MAX_WEIGHT_WINS and found.weight > existing.weight:
            # dict keeps the first-seen position, so ties still sort by edge order
            candidates[other_id] = found

    ranked = sorted(candidates.values(), key=lambda r: r.weight, reverse=True)
    return ranked[: max(0, limit)]
