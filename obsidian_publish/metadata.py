"""Build each profile's canonical frontmatter from parsed metadata and inline tags.

Only absent fields are defaulted: a key that is missing, or present with a
null value, gets the profile default. Anything the profile does not know about
is carried through untouched.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Callable, Iterable

from dateutil import parser as dateutil_parser
from tqdm import tqdm

from .canon import bare_stem, slugify, title_case
from .profiles import ConversionProfile

PUBLISHED_AT_FORMAT = "%Y-%m-%d %H:%M"

Clock = Callable[[], datetime]


def _now(now: Clock | None) -> datetime:
    return now() if now else datetime.now().astimezone()


def _absent(meta: dict, key: str) -> bool:
    return meta.get(key) is None


def _as_list(value) -> list:
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value]


def _unique(items: Iterable) -> list:
    seen = set()
    out = []
    for item in items:
        key = item if isinstance(item, str) else repr(item)
        if key in seen:
            continue
        seen.add(key)
        out.append(item)
    return out


# ================= Dates =================
def to_local_datetime(value) -> datetime:
    """Coerce a YAML/str date into a local datetime. Raises ValueError when unparseable."""
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, date):
        dt = datetime.combine(value, datetime.min.time())
    else:
        raw = str(value).strip()
        if not raw:
            raise ValueError("empty date")
        try:
            dt = dateutil_parser.parse(raw)
        except (TypeError, ValueError, OverflowError) as e:
            raise ValueError(f"unparseable date {raw!r}: {e}") from e
    if dt.tzinfo is not None:
        dt = dt.astimezone()
    return dt


def format_published_at(value=None, now: Clock | None = None) -> str:
    dt = to_local_datetime(value) if value is not None else _now(now)
    return dt.strftime(PUBLISHED_AT_FORMAT)


# ================= Topics =================
def tags_to_topics(tags: list[str], profile: ConversionProfile) -> list[str]:
    topics = []
    for tag in tags:
        low = tag.lower()
        topics.append(profile.topic_map.get(low, low))
    return _unique(topics[:profile.max_topics])


# ================= Profiles =================
def synthesize_site(meta: dict, filename: str, tags: list[str], profile: ConversionProfile,
                    now: Clock | None = None) -> dict:
    out = dict(meta)
    if _absent(out, "title"):
        out["title"] = title_case(filename)
    if _absent(out, "date"):
        out["date"] = _now(now).isoformat()
    for key, value in profile.defaults.items():
        if _absent(out, key):
            out[key] = value
    if _absent(out, "slug"):
        out["slug"] = slugify(bare_stem(filename))

    all_tags = _unique(_as_list(out.get("tags")) + list(tags))
    if all_tags:
        out["tags"] = all_tags
    return out


def synthesize_article(meta: dict, filename: str, tags: list[str], profile: ConversionProfile,
                       now: Clock | None = None) -> dict:
    out: dict = {}
    out["title"] = meta["title"] if not _absent(meta, "title") else bare_stem(filename)
    for key, value in profile.defaults.items():
        out[key] = meta[key] if not _absent(meta, key) else value

    if not _absent(meta, "published_at"):
        out["published_at"] = meta["published_at"]
    elif not _absent(meta, "date"):
        try:
            out["published_at"] = format_published_at(meta["date"])
        except ValueError as e:
            tqdm.write(f"[warn] {filename}: {e}; keeping date as-is")
            out["published_at"] = str(meta["date"])
    else:
        out["published_at"] = format_published_at(now=now)

    topics = _unique(_as_list(meta.get("topics")) + tags_to_topics(tags, profile))
    topics = topics[:profile.max_topics]
    if topics:
        out["topics"] = topics

    # unknown keys keep their values, after the canonical block
    for key, value in meta.items():
        if key not in out:
            out[key] = value
    return out


def synthesize(meta: dict, filename: str, tags: list[str], profile: ConversionProfile,
               now: Clock | None = None) -> dict:
    if profile.is_article:
        return synthesize_article(meta, filename, tags, profile, now=now)
    return synthesize_site(meta, filename, tags, profile, now=now)
