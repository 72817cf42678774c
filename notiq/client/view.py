"""
Derived dashboard state: filtering, sorting and statistics over the full note set.

Everything here is a pure function of (notes, state, now). Nothing is cached or
updated incrementally; callers recompute after every change.
"""
from datetime import datetime, timedelta, timezone, tzinfo
from typing import Any, Dict, Iterable, List, Literal, Optional

from pydantic import BaseModel, Field

SortKey = Literal["newest", "oldest", "updated", "title", "favorites"]

ALL_CATEGORIES = "All"


class ViewState(BaseModel):
    query: str = ""
    category: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    sort: SortKey = "newest"


class NoteStats(BaseModel):
    total: int
    today: int
    this_week: int
    today_trend: int
    week_trend: int
    favorites: int


def parse_ts(value: str) -> datetime:
    """ISO-8601 timestamp from the API (with `Z` suffix) as aware datetime."""
    dt = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def matches_query(note: Dict[str, Any], query: str) -> bool:
    q = query.strip().lower()
    if not q:
        return True
    haystack = [note.get("title") or "", note.get("content") or "", note.get("topic") or ""]
    haystack.extend(note.get("tags") or [])
    return any(q in str(h).lower() for h in haystack)


def matches_category(note: Dict[str, Any], category: Optional[str]) -> bool:
    if not category or category == ALL_CATEGORIES:
        return True
    return note.get("category") == category


def matches_tags(note: Dict[str, Any], tags: Iterable[str]) -> bool:
    # every selected tag must be on the note
    present = set(note.get("tags") or [])
    return all(t in present for t in tags)


def filter_notes(notes: Iterable[Dict[str, Any]], state: ViewState) -> List[Dict[str, Any]]:
    return [
        n for n in notes
        if matches_query(n, state.query)
        and matches_category(n, state.category)
        and matches_tags(n, state.tags)
    ]


def _created(note: Dict[str, Any]) -> datetime:
    return parse_ts(note["created_at"])


def sort_notes(notes: Iterable[Dict[str, Any]], key: SortKey = "newest") -> List[Dict[str, Any]]:
    notes = list(notes)
    if key == "oldest":
        return sorted(notes, key=_created)
    if key == "updated":
        return sorted(notes, key=lambda n: parse_ts(n.get("updated_at") or n["created_at"]), reverse=True)
    if key == "title":
        return sorted(notes, key=lambda n: (n.get("title") or "").casefold())
    newest = sorted(notes, key=_created, reverse=True)
    if key == "favorites":
        # stable sort keeps newest-first inside each group
        return sorted(newest, key=lambda n: not n.get("is_favorite"))
    return newest


def derive_view(notes: Iterable[Dict[str, Any]], state: ViewState) -> List[Dict[str, Any]]:
    return sort_notes(filter_notes(notes, state), state.sort)


def trend(current: int, prior: int) -> int:
    """Percentage change vs the prior period (100 when growing from zero)."""
    if prior == 0:
        return 100 if current > 0 else 0
    return round((current - prior) / prior * 100)


def compute_stats(
    notes: Iterable[Dict[str, Any]],
    *,
    now: Optional[datetime] = None,
    tz: tzinfo = timezone.utc,
) -> NoteStats:
    now = (now or datetime.now(timezone.utc)).astimezone(tz)
    today = now.date()
    yesterday = today - timedelta(days=1)
    week_ago = now - timedelta(days=7)
    two_weeks_ago = now - timedelta(days=14)

    notes = list(notes)
    counts = {"today": 0, "yesterday": 0, "week": 0, "prev_week": 0}
    for n in notes:
        created = parse_ts(n["created_at"]).astimezone(tz)
        day = created.date()
        if day == today:
            counts["today"] += 1
        elif day == yesterday:
            counts["yesterday"] += 1
        if week_ago <= created <= now:
            counts["week"] += 1
        elif two_weeks_ago <= created < week_ago:
            counts["prev_week"] += 1

    return NoteStats(
        total=len(notes),
        today=counts["today"],
        this_week=counts["week"],
        today_trend=trend(counts["today"], counts["yesterday"]),
        week_trend=trend(counts["week"], counts["prev_week"]),
        favorites=sum(1 for n in notes if n.get("is_favorite")),
    )


def available_categories(notes: Iterable[Dict[str, Any]]) -> List[str]:
    return sorted({n.get("category") for n in notes if n.get("category")})


def available_tags(notes: Iterable[Dict[str, Any]]) -> List[str]:
    return sorted({t for n in notes for t in (n.get("tags") or [])})


def relative_date(value: str, *, now: Optional[datetime] = None, tz: tzinfo = timezone.utc) -> str:
    """Short label for a timestamp: `Just now`, `5m ago`, `3h ago`, `2d ago` or `Mar 4`.

    The calendar label is the day in the viewer's timezone `tz`.
    """
    dt = parse_ts(value).astimezone(tz)
    now = now or datetime.now(timezone.utc)
    seconds = (now - dt).total_seconds()
    minutes = int(seconds // 60)
    hours = int(seconds // 3600)
    days = int(seconds // 86400)
    if minutes < 1:
        return "Just now"
    if minutes < 60:
        return f"{minutes}m ago"
    if hours < 24:
        return f"{hours}h ago"
    if days < 7:
        return f"{days}d ago"
    return f"{dt.strftime('%b')} {dt.day}"
