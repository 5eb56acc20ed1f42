import argparse
import sys
from pathlib import Path
from typing import Sequence

from .config import load_config
from .errors import PublishError
from .pipeline import RunSummary, print_summary, run_article, run_site
from .profiles import ARTICLE, SITE, get_profile

# positional slot -> config key, per profile
PATH_KEYS = {
    SITE:    ("input", "output", "static"),
    ARTICLE: ("input", "output", "images"),
}

def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    ap = argparse.ArgumentParser(
        prog="obsidian-publish",
        description="Convert an Obsidian vault to static-site or article-platform Markdown.",
    )
    sub = ap.add_subparsers(dest="profile", required=True)
    helps = {
        SITE: "Mirror notes into a content tree and copy every asset into a static tree",
        ARTICLE: "Write flat articles named by slug and reconcile a referenced-images directory",
    }
    for name, keys in PATH_KEYS.items():
        p = sub.add_parser(name, help=helps[name])
        p.add_argument("input", nargs="?", help="Vault directory (default from config)")
        p.add_argument("output", nargs="?", help="Converted Markdown directory (default from config)")
        p.add_argument("assets", nargs="?", help=f"{keys[2].capitalize()} directory (default from config)")
        p.add_argument("--config", help="Path to YAML/JSON config (default: publish.yaml|yml|json if present)")
        p.add_argument("--dry-run", action="store_true", help="Force dry run (overrides config)")
        p.add_argument("--debug",   action="store_true", help="Force debug (overrides config)")
    return ap.parse_args(argv)

def run(args: argparse.Namespace) -> RunSummary:
    cfg = load_config(Path(args.config) if args.config else None)
    if args.dry_run: cfg["dry_run"] = True
    if args.debug:   cfg["debug"]   = True

    section = cfg[args.profile]
    in_key, out_key, asset_key = PATH_KEYS[args.profile]
    input_dir  = Path(args.input  or section[in_key])
    output_dir = Path(args.output or section[out_key])
    asset_dir  = Path(args.assets or section[asset_key])

    print(f"[start] profile    = {args.profile}")
    print(f"[start] input_dir  = {input_dir.resolve()}")
    print(f"[start] output_dir = {output_dir.resolve()}")
    print(f"[start] {asset_key + '_dir':<10} = {asset_dir.resolve()}")
    if cfg["dry_run"]:
        print("[start] dry run: nothing will be written or deleted")

    profile = get_profile(args.profile, cfg)
    if args.profile == SITE:
        summary = run_site(input_dir, output_dir, asset_dir, profile, cfg)
    else:
        summary = run_article(input_dir, output_dir, asset_dir, profile, cfg)
    print_summary(summary, input_dir, output_dir, asset_dir)
    return summary

def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)
    try:
        run(args)
    except PublishError as e:
        print(f"[error] {e}", file=sys.stderr)
        return 1
    return 0

def entry() -> None:
    sys.exit(main())
