import os
from pathlib import Path
from typing import Callable, Iterable, Iterator

from tqdm import tqdm

from .errors import PublishError, UnsafePathError

# ================= Safety guard: never modify outside an owned output root =================
def assert_in_root(root: Path, target: Path) -> Path:
    target = Path(target).resolve()
    root = Path(root).resolve()
    try:
        target.relative_to(root)
    except ValueError:
        raise UnsafePathError(target, root) from None
    return target

# ================= Corpus traversal =================
def iter_files(root: Path, excluded_dirs: Iterable[str] = (),
               predicate: Callable[[str], bool] | None = None) -> Iterator[Path]:
    """Yield files under root in sorted order, pruning excluded directory names.

    Unreadable subtrees are reported and skipped; only an unreadable root is fatal.
    """
    root = Path(root)
    if not root.is_dir():
        raise PublishError(f"Input directory not found: {root}")
    try:
        with os.scandir(root) as it:
            next(it, None)
    except OSError as e:
        raise PublishError(f"Cannot read input directory {root}: {e}") from e

    excluded = set(excluded_dirs)

    def _onerror(err: OSError):
        tqdm.write(f"[warn] Skipping unreadable directory {err.filename}: {err.strerror}")

    for dirpath, dirnames, filenames in os.walk(root, onerror=_onerror):
        dirnames[:] = sorted(d for d in dirnames if d not in excluded)
        for name in sorted(filenames):
            if predicate is None or predicate(name):
                yield Path(dirpath) / name

def find_markdown_files(root: Path, excluded_dirs: Iterable[str] = ()) -> list[Path]:
    return list(iter_files(root, excluded_dirs, lambda n: n.endswith(".md")))

def is_image_name(name: str, image_exts: Iterable[str]) -> bool:
    return Path(name).suffix.lower() in image_exts

def find_image_files(root: Path, image_exts: Iterable[str], excluded_dirs: Iterable[str] = ()) -> list[Path]:
    exts = {e.lower() for e in image_exts}
    return list(iter_files(root, excluded_dirs, lambda n: is_image_name(n, exts)))

def find_asset_files(root: Path, excluded_dirs: Iterable[str] = (),
                     ignored_files: Iterable[str] = ()) -> list[Path]:
    ignored = set(ignored_files)
    return list(iter_files(root, excluded_dirs,
                           lambda n: not n.endswith(".md") and n not in ignored))
