import copy
from datetime import date, datetime, timezone

import pytest

from obsidian_publish.metadata import format_published_at, synthesize, tags_to_topics

from .conftest import FIXED_NOW


def test_site_defaults(site, now):
    meta = synthesize({}, "my-note.md", ["a", "b", "a"], site, now=now)
    assert meta == {
        "title": "My Note",
        "date": FIXED_NOW.isoformat(),
        "draft": False,
        "slug": "my-note",
        "tags": ["a", "b"],
    }
    assert list(meta) == ["title", "date", "draft", "slug", "tags"]


def test_site_never_overwrites_explicit_fields(site, now):
    given = {"title": "T", "date": "2020-01-01", "draft": True, "slug": "custom", "tags": ["x"]}
    meta = synthesize(given, "other.md", ["x", "y"], site, now=now)
    assert meta["title"] == "T"
    assert meta["date"] == "2020-01-01"
    assert meta["draft"] is True
    assert meta["slug"] == "custom"
    assert meta["tags"] == ["x", "y"]


def test_site_without_any_tags_has_no_tags_field(site, now):
    assert "tags" not in synthesize({}, "a.md", [], site, now=now)


def test_site_scalar_tags_become_list(site, now):
    assert synthesize({"tags": "solo"}, "a.md", ["more"], site, now=now)["tags"] == ["solo", "more"]


def test_article_defaults(article, now):
    meta = synthesize({}, "My Note.md", ["JavaScript", "Python", "javascript"], article, now=now)
    assert meta == {
        "title": "My Note",
        "emoji": "📝",
        "type": "tech",
        "published": True,
        "published_at": "2024-05-06 07:08",
        "topics": ["javascript", "python"],
    }


def test_article_never_overwrites_explicit_fields(article, now):
    given = {
        "title": "T",
        "emoji": "🚀",
        "type": "idea",
        "published": False,
        "published_at": "2023-01-01 10:00",
        "topics": ["Rust"],
        "slug": "keep-me",
    }
    meta = synthesize(given, "x.md", ["go"], article, now=now)
    assert meta["title"] == "T"
    assert meta["emoji"] == "🚀"
    assert meta["type"] == "idea"
    assert meta["published"] is False
    assert meta["published_at"] == "2023-01-01 10:00"
    assert meta["topics"] == ["Rust", "go"]
    assert meta["slug"] == "keep-me"


@pytest.mark.parametrize(("value", "expected"), [
    ("2024-01-02T03:04:00", "2024-01-02 03:04"),
    ("2024-01-02", "2024-01-02 00:00"),
    (date(2024, 1, 2), "2024-01-02 00:00"),
    (datetime(2024, 1, 2, 3, 4), "2024-01-02 03:04"),
])
def test_article_date_is_reformatted(article, now, value, expected):
    assert synthesize({"date": value}, "x.md", [], article, now=now)["published_at"] == expected


def test_aware_dates_are_shown_in_local_time():
    aware = datetime(2024, 1, 2, 3, 4, tzinfo=timezone.utc)
    assert format_published_at(aware) == aware.astimezone().strftime("%Y-%m-%d %H:%M")


def test_article_unparseable_date_is_kept(article, now):
    meta = synthesize({"date": "sometime soon"}, "x.md", [], article, now=now)
    assert meta["published_at"] == "sometime soon"


def test_topics_are_truncated_and_deduplicated(article, now):
    meta = synthesize({"topics": ["a", "b", "c"]}, "x.md", ["d", "e", "f", "a"], article, now=now)
    assert meta["topics"] == ["a", "b", "c", "d", "e"]


def test_tags_to_topics_uses_topic_map(cfg):
    from obsidian_publish.profiles import article_profile
    cfg["article"]["topic_map"] = {"JS": "javascript"}
    profile = article_profile(cfg)
    assert tags_to_topics(["js", "Js", "Go"], profile) == ["javascript", "go"]


def test_unknown_fields_pass_through(site, article, now):
    given = {"series": "intro", "weight": 3}
    for profile in (site, article):
        meta = synthesize(given, "x.md", [], profile, now=now)
        assert meta["series"] == "intro"
        assert meta["weight"] == 3


def test_input_metadata_is_not_mutated(site, article, now):
    given = {"tags": ["a"], "topics": ["b"], "title": None}
    before = copy.deepcopy(given)
    synthesize(given, "x.md", ["c"], site, now=now)
    synthesize(given, "x.md", ["c"], article, now=now)
    assert given == before
