from datetime import datetime, timedelta, timezone
from zoneinfo import ZoneInfo

import pytest

from notiq.client.view import (
    ViewState,
    available_categories,
    available_tags,
    compute_stats,
    derive_view,
    filter_notes,
    relative_date,
    sort_notes,
    trend,
)

NOW = datetime(2026, 3, 18, 15, 0, tzinfo=timezone.utc)


def _iso(dt):
    return dt.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def note(id, title="t", *, content="", topic="Miscellaneous", category="General", tags=(),
         fav=False, age=timedelta(0), updated_age=None):
    created = NOW - age
    updated = NOW - (updated_age if updated_age is not None else age)
    return {
        "id": id, "title": title, "content": content, "topic": topic, "category": category,
        "tags": list(tags), "is_favorite": fav,
        "created_at": _iso(created), "updated_at": _iso(updated),
    }


@pytest.fixture
def notes():
    return [
        note("1", "Binary trees", content="Traversals", category="CS", tags=["x", "y"], age=timedelta(hours=1)),
        note("2", "apples", content="fruit", topic="Biology", category="Food", tags=["x"], fav=True, age=timedelta(days=2)),
        note("3", "Zebra", content="stripes", category="CS", tags=["y", "x", "z"], age=timedelta(days=10),
             updated_age=timedelta(minutes=5)),
        note("4", "Graphs", content="BFS", category="CS", tags=["y"], age=timedelta(days=1)),
    ]


def test_tag_filter_requires_all_selected(notes):
    out = filter_notes(notes, ViewState(tags=["x", "y"]))
    assert sorted(n["id"] for n in out) == ["1", "3"]
    assert all({"x", "y"} <= set(n["tags"]) for n in out)


def test_text_search_is_case_insensitive_across_fields(notes):
    assert [n["id"] for n in filter_notes(notes, ViewState(query="BINARY"))] == ["1"]
    assert [n["id"] for n in filter_notes(notes, ViewState(query="bfs"))] == ["4"]
    assert [n["id"] for n in filter_notes(notes, ViewState(query="biology"))] == ["2"]
    assert sorted(n["id"] for n in filter_notes(notes, ViewState(query="Z"))) == ["3"]
    assert len(filter_notes(notes, ViewState(query="   "))) == 4


def test_category_filter(notes):
    assert [n["id"] for n in filter_notes(notes, ViewState(category="Food"))] == ["2"]
    assert len(filter_notes(notes, ViewState(category="All"))) == 4
    assert len(filter_notes(notes, ViewState(category=None))) == 4


def test_filters_combine(notes):
    state = ViewState(query="e", category="CS", tags=["y"])
    assert sorted(n["id"] for n in filter_notes(notes, state)) == ["1", "3", "4"]
    assert [n["id"] for n in filter_notes(notes, state.model_copy(update={"query": "graph"}))] == ["4"]


@pytest.mark.parametrize("key,expected", [
    ("newest", ["1", "4", "2", "3"]),
    ("oldest", ["3", "2", "4", "1"]),
    ("updated", ["3", "1", "4", "2"]),
    ("title", ["2", "1", "4", "3"]),
    ("favorites", ["2", "1", "4", "3"]),
])
def test_sort_keys(notes, key, expected):
    assert [n["id"] for n in sort_notes(notes, key)] == expected


def test_derive_view_filters_then_sorts(notes):
    out = derive_view(notes, ViewState(category="CS", sort="oldest"))
    assert [n["id"] for n in out] == ["3", "4", "1"]


def test_trend():
    assert trend(0, 0) == 0
    assert trend(3, 0) == 100
    assert trend(3, 2) == 50
    assert trend(1, 4) == -75


def test_stats(notes):
    stats = compute_stats(notes, now=NOW)
    assert stats.total == 4
    assert stats.today == 1
    assert stats.this_week == 3
    assert stats.favorites == 1
    # yesterday has note 4
    assert stats.today_trend == 0
    # previous week (7-14 days ago) has note 3
    assert stats.week_trend == 200


def test_today_follows_viewer_timezone():
    # 06:00 UTC is still the previous evening in Mazatlan (UTC-7)
    early = [note("1", age=timedelta(hours=9))]
    assert compute_stats(early, now=NOW).today == 1
    assert compute_stats(early, now=NOW, tz=ZoneInfo("America/Mazatlan")).today == 0


def test_selectors(notes):
    assert available_categories(notes) == ["CS", "Food"]
    assert available_tags(notes) == ["x", "y", "z"]


@pytest.mark.parametrize("age,label", [
    (timedelta(seconds=20), "Just now"),
    (timedelta(minutes=5), "5m ago"),
    (timedelta(hours=3), "3h ago"),
    (timedelta(days=2), "2d ago"),
    (timedelta(days=14), "Mar 4"),
])
def test_relative_date(age, label):
    assert relative_date(_iso(NOW - age), now=NOW) == label


def test_relative_date_uses_viewer_timezone():
    # 03:00 UTC on Mar 5 is still the evening of Mar 4 in Mazatlan (UTC-7)
    created = _iso(datetime(2026, 3, 5, 3, 0, tzinfo=timezone.utc))
    assert relative_date(created, now=NOW) == "Mar 5"
    assert relative_date(created, now=NOW, tz=ZoneInfo("America/Mazatlan")) == "Mar 4"
