import re

# ASCII word chars, `-`, `/`, Hiragana, Katakana, CJK ideographs
TAG_CHARS = r"A-Za-z0-9_\-/\u3040-\u309F\u30A0-\u30FF\u4E00-\u9FAF"

# Heading markers are split off by line position before matching.
# Trailing blanks go with the tag: "a #t b" -> "a b".
TAG_RE        = re.compile(rf"#([{TAG_CHARS}]+)[ \t]*")
HEADING_RE    = re.compile(r"^[ \t]*#{1,6}[ \t]")
BLANK_RUN_RE  = re.compile(r"\n[ \t]*\n(?:[ \t]*\n)+")

def _split_heading(line: str) -> tuple[str, str]:
    m = HEADING_RE.match(line)
    if not m:
        return "", line
    return line[:m.end()], line[m.end():]

def extract_tags(body: str) -> tuple[list[str], str]:
    """Return (tags in first-occurrence order, body with the tags removed).

    A heading marker (`## Title`) is recognised by its position at the start of
    a line and is never read as a tag; tags later on a heading line still are.
    """
    tags: list[str] = []
    out = []
    for line in body.splitlines(keepends=True):
        marker, rest = _split_heading(line)
        tags.extend(m.group(1) for m in TAG_RE.finditer(rest))
        out.append(marker + TAG_RE.sub("", rest))
    stripped = BLANK_RUN_RE.sub("\n\n", "".join(out))
    return tags, stripped
