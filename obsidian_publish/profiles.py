"""Fixed rewrite/default rules for each output dialect."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping

SITE = "site"
ARTICLE = "article"


@dataclass(frozen=True)
class ConversionProfile:
    """Everything a single document conversion needs to know about its target."""

    name: str
    image_root: str
    slugify_links: bool
    quote_strings: bool = False
    defaults: Mapping[str, object] = field(default_factory=dict)
    topic_map: Mapping[str, str] = field(default_factory=dict)
    max_topics: int = 5
    slug_alphabet: str = "abcdefghijklmnopqrstuvwxyz0123456789"
    slug_length: int = 12
    image_exts: frozenset[str] = frozenset()
    excluded_dirs: frozenset[str] = frozenset()

    @property
    def is_article(self) -> bool:
        return self.name == ARTICLE


def _common(cfg: dict, section: str) -> dict:
    return {
        "image_exts": frozenset(e.lower() for e in cfg.get("image_exts", [])),
        "excluded_dirs": frozenset(cfg[section].get("excluded_dirs", [])),
    }


def site_profile(cfg: dict) -> ConversionProfile:
    return ConversionProfile(
        name=SITE,
        image_root="/",
        slugify_links=True,
        defaults=MappingProxyType({"draft": False}),
        **_common(cfg, SITE),
    )


def article_profile(cfg: dict) -> ConversionProfile:
    art = cfg["article"]
    return ConversionProfile(
        name=ARTICLE,
        image_root="/images/",
        slugify_links=False,
        quote_strings=True,
        defaults=MappingProxyType({
            "emoji": art["emoji"],
            "type": art["type"],
            "published": art["published"],
        }),
        topic_map=MappingProxyType({str(k).lower(): str(v) for k, v in art["topic_map"].items()}),
        max_topics=art["max_topics"],
        slug_alphabet=art["slug_alphabet"],
        slug_length=art["slug_length"],
        **_common(cfg, ARTICLE),
    )


def get_profile(name: str, cfg: dict) -> ConversionProfile:
    if name == SITE:
        return site_profile(cfg)
    if name == ARTICLE:
        return article_profile(cfg)
    raise ValueError(f"unknown profile: {name}")
