# assets.py — image reference collection + reconciliation, and the blind asset copy
#
# Reconciling mode (article profile):
#   1) collect every `![[name]]` target across the WHOLE corpus first
#   2) index image files under the input tree by basename
#   3) copy referenced+found names into images/, warn on dangling refs,
#      delete every other image file already in images/
#   Afterwards: {image files in images/} == refs & index.keys()
#
# Blind mode (site profile): copy every non-note file, mirrored, no filtering, no deletes.

import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable

from tqdm import tqdm

from . import frontmatter
from .errors import PublishError, UnsafePathError
from .links import find_image_embeds
from .tags import extract_tags
from .walk import assert_in_root, find_asset_files, find_image_files, is_image_name


@dataclass
class SyncReport:
    copied: list[str] = field(default_factory=list)
    deleted: list[str] = field(default_factory=list)
    dangling: list[str] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)


@dataclass
class AssetCopyReport:
    copied: list[Path] = field(default_factory=list)
    failed: list[Path] = field(default_factory=list)


# ================= Reference extraction =================
def image_references_in(text: str) -> set[str]:
    _, body = frontmatter.parse(text)
    _, body = extract_tags(body)
    return set(find_image_embeds(body))

def collect_image_references(documents: Iterable[tuple[Path, str]], debug: bool = False) -> set[str]:
    refs: set[str] = set()
    for path, text in documents:
        try:
            found = image_references_in(text)
        except ValueError as e:
            tqdm.write(f"[error] analyzing image references in {path}: {e}")
            continue
        if debug and found:
            tqdm.write(f"[refs] {Path(path).name}: {len(found)} image refs")
        refs |= found
    return refs

# ================= Index =================
def build_asset_index(root: Path, image_exts: Iterable[str], excluded_dirs: Iterable[str] = (),
                      skip_dirs: Iterable[Path] = ()) -> dict[str, Path]:
    """Map image basename -> source path. On a name collision the last file found wins."""
    skip = [Path(d).resolve() for d in skip_dirs]
    index: dict[str, Path] = {}
    for p in find_image_files(root, image_exts, excluded_dirs):
        if skip and any(p.resolve().is_relative_to(d) for d in skip):
            continue
        prev = index.get(p.name)
        if prev is not None:
            tqdm.write(f"[warn] Duplicate image name {p.name}: {prev} is shadowed by {p}")
        index[p.name] = p
    return index

# ================= Sync =================
def sync_images(refs: set[str], index: dict[str, Path], images_dir: Path,
                image_exts: Iterable[str], dry_run: bool = False, debug: bool = False) -> SyncReport:
    report = SyncReport()
    exts = {e.lower() for e in image_exts}
    images_dir = Path(images_dir)
    wanted = {name for name in refs if name in index}

    if not refs:
        tqdm.write("[images] No image references found in content.")

    if not dry_run:
        try:
            images_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise PublishError(f"Cannot create images directory {images_dir}: {e}") from e

    for name in tqdm(sorted(refs), desc="Syncing images", unit="img", disable=not refs):
        src = index.get(name)
        if src is None:
            tqdm.write(f"[warn] Referenced image not found: {name}")
            report.dangling.append(name)
            continue
        dst = images_dir / name
        if dry_run:
            tqdm.write(f"[dry] copy (image) {src} -> {dst}")
            report.copied.append(name)
            continue
        try:
            assert_in_root(images_dir, dst)
            shutil.copy2(src, dst)
        except (OSError, UnsafePathError) as e:
            tqdm.write(f"[error] copying image {name}: {e}")
            report.failed.append(name)
            continue
        report.copied.append(name)
        if debug:
            tqdm.write(f"[images] Copied image: {name}")

    report.deleted = prune_orphan_images(images_dir, wanted, exts, dry_run=dry_run, debug=debug,
                                         failed=report.failed)
    return report

def prune_orphan_images(images_dir: Path, keep: set[str], image_exts: set[str],
                        dry_run: bool = False, debug: bool = False,
                        failed: list[str] | None = None) -> list[str]:
    if not images_dir.is_dir():
        return []
    deleted = []
    try:
        existing = sorted(images_dir.iterdir())
    except OSError as e:
        tqdm.write(f"[error] cleaning up images directory {images_dir}: {e}")
        return deleted

    for p in existing:
        if not p.is_file() or p.name in keep or not is_image_name(p.name, image_exts):
            continue
        if dry_run:
            tqdm.write(f"[dry] delete (image) {p.name}")
            deleted.append(p.name)
            continue
        try:
            assert_in_root(images_dir, p)
            p.unlink()
        except (OSError, UnsafePathError) as e:
            tqdm.write(f"[error] deleting unused image {p.name}: {e}")
            if failed is not None:
                failed.append(p.name)
            continue
        deleted.append(p.name)
        if debug:
            tqdm.write(f"[images] Cleaned up unused image: {p.name}")

    if deleted:
        tqdm.write(f"[images] Cleaned up {len(deleted)} unused images")
    return deleted

# ================= Blind copy (site profile) =================
def copy_assets_blind(input_root: Path, static_root: Path, excluded_dirs: Iterable[str] = (),
                      ignored_files: Iterable[str] = (), dry_run: bool = False,
                      debug: bool = False, skip_dirs: Iterable[Path] = ()) -> AssetCopyReport:
    report = AssetCopyReport()
    input_root = Path(input_root)
    static_root = Path(static_root)
    skip = [Path(d).resolve() for d in skip_dirs]
    assets = [p for p in find_asset_files(input_root, excluded_dirs, ignored_files)
              if not any(p.resolve().is_relative_to(d) for d in skip)]
    for src in tqdm(assets, desc="Copying assets", unit="file", disable=not assets):
        dst = static_root / src.relative_to(input_root)
        if dry_run:
            tqdm.write(f"[dry] copy (asset) {src.relative_to(input_root)} -> {dst}")
            report.copied.append(dst)
            continue
        try:
            assert_in_root(static_root, dst)
            dst.parent.mkdir(parents=True, exist_ok=True)
            shutil.copy2(src, dst)
        except (OSError, UnsafePathError) as e:
            tqdm.write(f"[error] copying asset {src}: {e}")
            report.failed.append(src)
            continue
        report.copied.append(dst)
        if debug:
            tqdm.write(f"[assets] {src.relative_to(input_root)} -> {dst}")
    return report
