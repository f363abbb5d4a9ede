"""Session activity timeline.

Tabs with timestamps are bucketed by hour of day (UTC). Without any
timestamps the largest groups stand in as activity buckets.
"""
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import List, Optional

from .graph import GraphSnapshot, Tab, Timestamp
from .projection import truncate

MAX_GROUP_BUCKETS = 12
GROUP_LABEL_LENGTH = 15
MIN_BAR_HEIGHT = 4.0


@dataclass(frozen=True)
class TimelineBucket:
    label: str
    count: int
    group_id: Optional[str] = None


def parse_timestamp(value: Optional[Timestamp]) -> Optional[datetime]:
    """Epoch milliseconds or an ISO 8601 string."""
    if value is None:
        return None
    try:
        if isinstance(value, (int, float)):
            return datetime.fromtimestamp(value / 1000.0, tz=timezone.utc)
        parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    except (ValueError, OverflowError, OSError):
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def tab_time(tab: Tab) -> Optional[datetime]:
    return parse_timestamp(tab.added_at) or parse_timestamp(tab.last_accessed)


def activity_timeline(snapshot: GraphSnapshot) -> List[TimelineBucket]:
    if snapshot.is_empty:
        return []

    times = [t for t in (tab_time(tab) for tab in snapshot.tabs) if t]
    if times:
        hours = [0] * 24
        for moment in times:
            hours[moment.hour] += 1
        return [TimelineBucket(label=f"{h}:00", count=hours[h]) for h in range(24)]

    groups = sorted(snapshot.groups, key=lambda g: g.size, reverse=True)[:MAX_GROUP_BUCKETS]
    return [
        TimelineBucket(label=truncate(g.label, GROUP_LABEL_LENGTH), count=g.size, group_id=g.id)
        for g in groups
    ]


def bar_heights(buckets: List[TimelineBucket]) -> List[float]:
    """Bar heights as percentages of the busiest bucket."""
    peak = max([b.count for b in buckets] + [1])
    return [max(MIN_BAR_HEIGHT, b.count / peak * 100) for b in buckets]
