"""File discovery — enumerate project sources, skipping build/dependency dirs."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Iterable, Iterator

_logger = logging.getLogger(__name__)

# Root-relative POSIX prefixes that are never scanned.
DEFAULT_SKIP_PREFIXES: tuple[str, ...] = (
    "node_modules",
    ".next",
    "dist",
    "build",
    ".git",
)

# Extra prefixes for the dependency usage scan.
DEPENDENCY_SKIP_PREFIXES: tuple[str, ...] = DEFAULT_SKIP_PREFIXES + (
    "coverage",
    ".turbo",
    "out",
)

RULE_EXTENSIONS: tuple[str, ...] = (".tsx", ".jsx", ".ts", ".js")
COMPONENT_EXTENSIONS: tuple[str, ...] = (".tsx", ".jsx")
DEPENDENCY_SCAN_EXTENSIONS: tuple[str, ...] = (
    ".ts",
    ".tsx",
    ".js",
    ".jsx",
    ".mts",
    ".cts",
    ".mjs",
    ".cjs",
)


def is_skipped(rel_posix: str, skip_prefixes: Iterable[str]) -> bool:
    """True if *rel_posix* starts with any of *skip_prefixes*."""
    return any(rel_posix.startswith(prefix) for prefix in skip_prefixes)


def iter_source_files(
    root: Path,
    extensions: Iterable[str] = RULE_EXTENSIONS,
    skip_prefixes: Iterable[str] = DEFAULT_SKIP_PREFIXES,
) -> Iterator[Path]:
    """Yield files under *root* with one of *extensions*, in sorted order.

    A path is excluded when its root-relative POSIX form starts with one of
    *skip_prefixes*.  Prefix matching is textual, so ``"dist"`` also skips
    ``distribution/``.
    """
    if not root.is_dir():
        return
    exts = tuple(e.lower() for e in extensions)
    skips = tuple(skip_prefixes)
    found: list[Path] = []
    for dirpath, dirnames, filenames in os.walk(root):
        base = Path(dirpath)
        kept = []
        for d in dirnames:
            rel = (base / d).relative_to(root).as_posix()
            if is_skipped(rel, skips):
                _logger.debug("Skipping %s (excluded prefix)", rel)
                continue
            kept.append(d)
        # prune in place so os.walk never descends into excluded trees
        dirnames[:] = kept
        for name in filenames:
            p = base / name
            if p.suffix.lower() not in exts:
                continue
            if is_skipped(p.relative_to(root).as_posix(), skips):
                continue
            found.append(p)
    yield from sorted(found)
