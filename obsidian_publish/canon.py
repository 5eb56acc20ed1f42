import random
import re
from pathlib import PurePosixPath

_WS_RE      = re.compile(r"\s+")
_NON_SLUG   = re.compile(r"[^a-z0-9\-]")
_MULTI_DASH = re.compile(r"-{2,}")
_WORD_START = re.compile(r"\b\w")

_default_rng = random.Random()

def slugify(name: str) -> str:
    """Lowercase, hyphenate whitespace, keep only [a-z0-9-]. Never fails."""
    s = (name or "").lower()
    s = _WS_RE.sub("-", s)
    s = _NON_SLUG.sub("", s)
    s = _MULTI_DASH.sub("-", s)
    return s.strip("-")

def bare_stem(filename: str) -> str:
    return PurePosixPath(str(filename).replace("\\", "/")).stem

def title_case(filename: str) -> str:
    stem = bare_stem(filename)
    stem = re.sub(r"[-_]", " ", stem)
    return _WORD_START.sub(lambda m: m.group(0).upper(), stem)

def random_token(alphabet: str, length: int, rng: random.Random | None = None) -> str:
    if not alphabet:
        raise ValueError("alphabet must not be empty")
    rng = rng or _default_rng
    return "".join(rng.choice(alphabet) for _ in range(length))
