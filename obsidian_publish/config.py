# config.py — config-first settings for the vault publisher
# - Built-in defaults deep-merged with an optional YAML/JSON file.
# - Discovery order when no --config is given: publish.yaml, publish.yml, publish.json
# - CLI flags are applied on top by cli.py (positional paths, --dry-run, --debug).

import copy
import json
from pathlib import Path

import yaml
from tqdm import tqdm

from .errors import ConfigError

CONFIG_CANDIDATES = ("publish.yaml", "publish.yml", "publish.json")

CFG_DEFAULTS = {
    # Execution controls
    "dry_run": False,
    "debug": False,

    # Corpus scanning
    "image_exts": [".png", ".jpg", ".jpeg", ".gif", ".bmp", ".svg", ".webp"],
    "ignored_files": [".vault-nickname"],

    # Static-site profile: mirrored content + blind asset copy
    "site": {
        "input": "./obsidian",
        "output": "./content",
        "static": "./static",
        "excluded_dirs": [".obsidian"],
    },

    # Article profile: flat articles + reconciled images/
    "article": {
        "input": "./articles-vault",
        "output": "./articles",
        "images": "./images",
        "excluded_dirs": [".obsidian", "templates"],
        "emoji": "📝",
        "type": "tech",
        "published": True,
        "max_topics": 5,
        "slug_alphabet": "abcdefghijklmnopqrstuvwxyz0123456789",
        "slug_length": 12,
        "topic_map": {
            "javascript": "javascript",
            "typescript": "typescript",
            "react": "react",
            "vue": "vue",
            "nodejs": "nodejs",
            "web": "web",
            "frontend": "frontend",
            "backend": "backend",
            "oss": "oss",
            "github": "github",
            "npm": "npm",
            "css": "css",
            "html": "html",
        },
    },
}

def _deep_merge(base: dict, override: dict) -> dict:
    out = dict(base)
    for k, v in (override or {}).items():
        if isinstance(v, dict) and isinstance(out.get(k), dict):
            out[k] = _deep_merge(out[k], v)
        else:
            out[k] = v
    return out

def find_config(cwd: Path | None = None) -> Path | None:
    base = Path(cwd) if cwd else Path.cwd()
    for cand in CONFIG_CANDIDATES:
        if (base / cand).exists():
            return base / cand
    return None

def load_config(config_path: Path | None = None, cwd: Path | None = None) -> dict:
    if config_path is None:
        config_path = find_config(cwd)

    if config_path is None:
        tqdm.write("[cfg] No config file found; using built-in defaults")
        return copy.deepcopy(CFG_DEFAULTS)

    config_path = Path(config_path)
    if not config_path.exists():
        raise ConfigError(f"Config file not found: {config_path}")

    text = config_path.read_text(encoding="utf-8")
    try:
        if config_path.suffix.lower() == ".json":
            data = json.loads(text)
        else:
            data = yaml.safe_load(text) or {}
    except (yaml.YAMLError, json.JSONDecodeError) as e:
        raise ConfigError(f"Failed to parse config {config_path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Config {config_path} must be a mapping, got {type(data).__name__}")

    cfg = _deep_merge(copy.deepcopy(CFG_DEFAULTS), data)
    validate_config(cfg)
    return cfg

def validate_config(cfg: dict) -> None:
    for key in ("image_exts", "ignored_files"):
        if not isinstance(cfg.get(key), list):
            raise ConfigError(f"config.{key} must be a list")
    for section in ("site", "article"):
        if not isinstance(cfg.get(section), dict):
            raise ConfigError(f"config.{section} must be a mapping")
        if not isinstance(cfg[section].get("excluded_dirs"), list):
            raise ConfigError(f"config.{section}.excluded_dirs must be a list")
    art = cfg["article"]
    if not isinstance(art.get("topic_map"), dict):
        raise ConfigError("config.article.topic_map must be a mapping")
    if not art.get("slug_alphabet"):
        raise ConfigError("config.article.slug_alphabet must not be empty")
    for key in ("max_topics", "slug_length"):
        val = art.get(key)
        if not isinstance(val, int) or isinstance(val, bool) or val < 0:
            raise ConfigError(f"config.article.{key} must be a non-negative integer")
