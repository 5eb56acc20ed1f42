# pipeline.py — sequences discovery -> (refs -> images) -> convert -> write for one run
#
# Both runs OWN their output directories and are destructive by design of the
# target platforms:
#   site:    the whole content output directory is removed and rebuilt
#   article: every *.md in the articles directory is deleted and regenerated,
#            images/ is reconciled against the current references
# Nothing is written or deleted when cfg["dry_run"] is set.

from __future__ import annotations

import random
import shutil
from dataclasses import dataclass
from pathlib import Path

from tqdm import tqdm

from .assets import build_asset_index, collect_image_references, copy_assets_blind, sync_images
from .convert import ConvertedDocument, convert_file, convert_text, read_document
from .errors import ConversionError, PublishError, UnsafePathError
from .metadata import Clock
from .profiles import ConversionProfile
from .walk import assert_in_root, find_markdown_files


@dataclass
class RunSummary:
    profile: str
    documents: int = 0
    converted: int = 0
    failed: int = 0
    assets_copied: int = 0
    assets_deleted: int = 0
    dangling: int = 0
    asset_failures: int = 0


def _check_roots(input_dir: Path, *owned: Path) -> None:
    src = input_dir.resolve()
    for d in owned:
        if src.is_relative_to(d.resolve()):
            raise PublishError(f"Input {input_dir} lies inside output {d}; refusing to overwrite it")

def _discover(input_dir: Path, profile: ConversionProfile, *owned: Path) -> list[Path]:
    skip = [d.resolve() for d in owned]
    return [p for p in find_markdown_files(input_dir, profile.excluded_dirs)
            if not any(p.resolve().is_relative_to(d) for d in skip)]

def _write_document(dst: Path, root: Path, text: str) -> None:
    assert_in_root(root, dst)
    dst.parent.mkdir(parents=True, exist_ok=True)
    dst.write_text(text, encoding="utf-8")

def _clean_site_output(output_dir: Path, dry_run: bool) -> None:
    if not output_dir.exists():
        return
    if dry_run:
        tqdm.write(f"[dry] remove {output_dir}")
        return
    tqdm.write(f"[clean] Removing {output_dir}")
    try:
        shutil.rmtree(output_dir)
    except OSError as e:
        raise PublishError(f"Cannot clear output directory {output_dir}: {e}") from e

def _clean_article_output(output_dir: Path, dry_run: bool, debug: bool) -> int:
    if not output_dir.is_dir():
        return 0
    deleted = 0
    for p in sorted(output_dir.glob("*.md")):
        if dry_run:
            tqdm.write(f"[dry] delete (article) {p.name}")
            continue
        try:
            assert_in_root(output_dir, p)
            p.unlink()
        except (OSError, UnsafePathError) as e:
            tqdm.write(f"[error] deleting existing article {p.name}: {e}")
            continue
        deleted += 1
        if debug:
            tqdm.write(f"[clean] Deleted existing article: {p.name}")
    if deleted:
        tqdm.write(f"[clean] Deleted {deleted} existing articles")
    return deleted

# ================= Site profile =================
def run_site(input_dir: Path, output_dir: Path, static_dir: Path,
             profile: ConversionProfile, cfg: dict, now: Clock | None = None) -> RunSummary:
    input_dir, output_dir, static_dir = Path(input_dir), Path(output_dir), Path(static_dir)
    dry_run, debug = cfg.get("dry_run", False), cfg.get("debug", False)
    summary = RunSummary(profile=profile.name)

    _check_roots(input_dir, output_dir)
    md_files = _discover(input_dir, profile, output_dir, static_dir)
    summary.documents = len(md_files)
    print(f"[scan] md files found: {len(md_files)}")

    _clean_site_output(output_dir, dry_run)

    for src in tqdm(md_files, desc="Converting notes", unit="note", disable=not md_files):
        rel = src.relative_to(input_dir)
        dst = output_dir / rel
        try:
            doc = convert_file(src, profile, now=now)
            if dry_run:
                tqdm.write(f"[dry] write (note) {rel} -> {dst}")
            else:
                _write_document(dst, output_dir, doc.text)
        except (ConversionError, UnsafePathError, OSError) as e:
            tqdm.write(f"[error] processing file {src}: {e}")
            summary.failed += 1
            continue
        summary.converted += 1
        if debug:
            tqdm.write(f"[convert] {rel} -> {dst}")

    report = copy_assets_blind(input_dir, static_dir, profile.excluded_dirs,
                               cfg.get("ignored_files", ()), dry_run=dry_run, debug=debug,
                               skip_dirs=[output_dir, static_dir])
    summary.assets_copied = len(report.copied)
    summary.asset_failures = len(report.failed)
    return summary

# ================= Article profile =================
def run_article(input_dir: Path, output_dir: Path, images_dir: Path,
                profile: ConversionProfile, cfg: dict,
                rng: random.Random | None = None, now: Clock | None = None) -> RunSummary:
    input_dir, output_dir, images_dir = Path(input_dir), Path(output_dir), Path(images_dir)
    dry_run, debug = cfg.get("dry_run", False), cfg.get("debug", False)
    summary = RunSummary(profile=profile.name)

    _check_roots(input_dir, output_dir, images_dir)
    md_files = _discover(input_dir, profile, output_dir, images_dir)
    summary.documents = len(md_files)
    print(f"[scan] Processing {len(md_files)} markdown files from {input_dir} to {output_dir}")

    # 1) read the whole corpus before anything is written
    documents: list[tuple[Path, str]] = []
    for src in md_files:
        try:
            documents.append((src, read_document(src)))
        except ConversionError as e:
            tqdm.write(f"[error] {e}")
            summary.failed += 1

    # 2) references from every document, then the image index, then reconcile images/
    print("[refs] Analyzing image references...")
    refs = collect_image_references(documents, debug=debug)
    print(f"[refs] Found {len(refs)} unique image references")

    index = build_asset_index(input_dir, profile.image_exts, profile.excluded_dirs,
                              skip_dirs=[images_dir, output_dir])
    report = sync_images(refs, index, images_dir, profile.image_exts, dry_run=dry_run, debug=debug)
    summary.assets_copied = len(report.copied)
    summary.assets_deleted = len(report.deleted)
    summary.dangling = len(report.dangling)
    summary.asset_failures = len(report.failed)

    # 3) regenerate articles
    _clean_article_output(output_dir, dry_run, debug)
    if not dry_run:
        try:
            output_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise PublishError(f"Cannot create output directory {output_dir}: {e}") from e

    written: dict[str, Path] = {}
    for src, text in tqdm(documents, desc="Converting articles", unit="note", disable=not documents):
        try:
            doc: ConvertedDocument = convert_text(text, src, profile, rng=rng, now=now)
            dst = output_dir / doc.filename
            if doc.filename in written:
                tqdm.write(f"[warn] {src.name} and {written[doc.filename].name} both map to "
                           f"{doc.filename}; the later one wins")
            if dry_run:
                tqdm.write(f"[dry] write (article) {src.name} -> {doc.filename}")
            else:
                _write_document(dst, output_dir, doc.text)
        except (ConversionError, UnsafePathError, OSError) as e:
            tqdm.write(f"[error] processing file {src}: {e}")
            summary.failed += 1
            continue
        written[doc.filename] = src
        summary.converted += 1
        if debug:
            tqdm.write(f"[convert] Converted: {src.name} -> {doc.filename}")
    return summary

def print_summary(summary: RunSummary, input_dir: Path, output_dir: Path, asset_dir: Path) -> None:
    print(f"\n=== {summary.profile} build ===")
    print(f"Input:          {input_dir}")
    print(f"Output:         {output_dir}")
    print(f"Assets:         {asset_dir}")
    print(f"Notes found:    {summary.documents}")
    print(f"Converted:      {summary.converted}")
    print(f"Failed:         {summary.failed}")
    print(f"Assets copied:  {summary.assets_copied}")
    if summary.profile == "article":
        print(f"Images pruned:  {summary.assets_deleted}")
        print(f"Dangling refs:  {summary.dangling}")
    if summary.asset_failures:
        print(f"Asset errors:   {summary.asset_failures}")
    print("Done.")
