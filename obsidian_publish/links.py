import re
from pathlib import PurePosixPath
from urllib.parse import quote

from .canon import slugify
from .profiles import ConversionProfile

# One pass over both families; group 1 is the embed bang.
WIKILINK_ALL = re.compile(r"(!?)\[\[([^\]|]*)(?:\|([^\]]*))?\]\]")

def _split_target_alias(m: re.Match) -> tuple[str, str | None]:
    target = m.group(2)
    alias = m.group(3)
    return target, (alias or None)

def _alt_from_target(target: str) -> str:
    return PurePosixPath(target.replace("\\", "/")).stem

def image_destination(target: str, profile: ConversionProfile) -> str:
    return profile.image_root + quote(target, safe="/")

def link_destination(target: str, profile: ConversionProfile) -> str:
    if profile.slugify_links:
        return f"../{slugify(target)}/"
    return target

def rewrite_links(text: str, profile: ConversionProfile) -> str:
    """Rewrite every `![[..]]` embed and `[[..]]` wikilink into Markdown syntax."""
    def _repl(m: re.Match) -> str:
        bang = m.group(1)
        target, alias = _split_target_alias(m)
        if bang:
            if not target:
                return ""
            alt = alias if alias else _alt_from_target(target)
            return f"![{alt}]({image_destination(target, profile)})"
        display = alias if alias else target
        if not target:
            return display
        return f"[{display}]({link_destination(target, profile)})"
    return WIKILINK_ALL.sub(_repl, text)

def find_image_embeds(text: str) -> list[str]:
    return [m.group(2) for m in WIKILINK_ALL.finditer(text) if m.group(1) and m.group(2)]

def has_link_tokens(text: str) -> bool:
    return WIKILINK_ALL.search(text) is not None
