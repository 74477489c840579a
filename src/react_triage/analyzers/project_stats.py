"""Project snapshot: framework versions, file counts, component split."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable

from react_triage.analyzers.manifest import dependency_map, read_manifest, strip_range
from react_triage.core.discover import (
    COMPONENT_EXTENSIONS,
    DEFAULT_SKIP_PREFIXES,
    RULE_EXTENSIONS,
    iter_source_files,
)
from react_triage.model.scan_result import LargeFile, ProjectStats

_logger = logging.getLogger(__name__)

LARGE_FILE_THRESHOLD = 400
# A component is a client component when the directive sits this early.
CLIENT_DIRECTIVE_WINDOW = 200


def is_client_component(content: str) -> bool:
    head = content[:CLIENT_DIRECTIVE_WINDOW]
    return "'use client'" in head or '"use client"' in head


def _versions(root: Path) -> tuple[str | None, str | None, str | None]:
    manifest = read_manifest(root)
    if manifest is None:
        return None, None, None
    merged = {
        **dependency_map(manifest, "dependencies"),
        **dependency_map(manifest, "devDependencies"),
    }

    def pick(name: str) -> str | None:
        value = merged.get(name)
        return strip_range(value) if value else None

    return pick("react"), pick("react-dom"), pick("next")


def gather_project_stats(
    root: Path,
    *,
    large_file_threshold: int = LARGE_FILE_THRESHOLD,
    skip_prefixes: Iterable[str] = DEFAULT_SKIP_PREFIXES,
) -> ProjectStats:
    """Walk *root* once and summarise it.

    Line counts are ``content.split("\\n")`` lengths, so a trailing newline
    counts as one extra line.  tsconfig-derived fields are left at their
    defaults; the aggregator fills them in.
    """
    react, react_dom, nxt = _versions(root)

    total = 0
    client = 0
    server = 0
    large: list[LargeFile] = []
    for path in iter_source_files(root, RULE_EXTENSIONS, skip_prefixes):
        total += 1
        try:
            content = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            _logger.debug("Skipping unreadable file %s: %s", path, exc)
            continue
        rel = path.relative_to(root).as_posix()
        lines = len(content.split("\n"))
        if lines > large_file_threshold:
            large.append(LargeFile(path=rel, lines=lines))
        if path.suffix.lower() in COMPONENT_EXTENSIONS:
            if is_client_component(content):
                client += 1
            else:
                server += 1

    large.sort(key=lambda lf: lf.lines, reverse=True)
    return ProjectStats(
        react_version=react,
        react_dom_version=react_dom,
        next_version=nxt,
        total_files=total,
        client_components=client,
        server_components=server,
        large_files=tuple(large),
    )
