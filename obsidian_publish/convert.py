"""Single-document conversion: frontmatter -> tags -> links -> metadata -> text."""

from __future__ import annotations

import random
from dataclasses import dataclass
from pathlib import Path

from . import frontmatter
from .canon import random_token
from .errors import ConversionError
from .links import has_link_tokens, rewrite_links
from .metadata import Clock, synthesize
from .profiles import ConversionProfile
from .tags import extract_tags


@dataclass
class ConvertedDocument:
    source_path: Path
    filename: str
    metadata: dict
    body: str
    text: str


def output_name(source_path: Path, metadata: dict, profile: ConversionProfile,
                rng: random.Random | None = None) -> str:
    """Site keeps the source filename; article uses `slug` or a random token."""
    if not profile.is_article:
        return Path(source_path).name
    slug = metadata.get("slug")
    if slug is not None:
        return f"{slug}.md"
    return random_token(profile.slug_alphabet, profile.slug_length, rng) + ".md"


def convert_text(text: str, source_path: Path, profile: ConversionProfile,
                 rng: random.Random | None = None, now: Clock | None = None) -> ConvertedDocument:
    source_path = Path(source_path)
    try:
        meta, body = frontmatter.parse(text)
    except ValueError as e:
        raise ConversionError(source_path, str(e)) from e

    tags, body = extract_tags(body)
    body = rewrite_links(body, profile)
    if has_link_tokens(body):
        raise ConversionError(source_path, "wikilink syntax left after rewrite")

    metadata = synthesize(meta, source_path.name, tags, profile, now=now)
    filename = output_name(source_path, meta, profile, rng=rng)
    out = frontmatter.serialize(metadata, body, quote_strings=profile.quote_strings)
    return ConvertedDocument(source_path, filename, metadata, body, out)


def read_document(path: Path) -> str:
    try:
        return Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ConversionError(path, f"could not read: {e}") from e


def convert_file(path: Path, profile: ConversionProfile,
                 rng: random.Random | None = None, now: Clock | None = None) -> ConvertedDocument:
    return convert_text(read_document(path), path, profile, rng=rng, now=now)
