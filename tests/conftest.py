import copy
from datetime import datetime

import pytest

from obsidian_publish.config import CFG_DEFAULTS
from obsidian_publish.profiles import article_profile, site_profile

FIXED_NOW = datetime(2024, 5, 6, 7, 8, 9)


@pytest.fixture
def cfg():
    return copy.deepcopy(CFG_DEFAULTS)


@pytest.fixture
def site(cfg):
    return site_profile(cfg)


@pytest.fixture
def article(cfg):
    return article_profile(cfg)


@pytest.fixture
def now():
    return lambda: FIXED_NOW


def write(path, text=""):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


def touch_image(path, payload=b"\x89PNG fake"):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(payload)
    return path
