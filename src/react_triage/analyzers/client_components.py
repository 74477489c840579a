"""Project-wide source checks: async client components and console calls."""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Iterable, Iterator

from react_triage.analyzers.project_stats import is_client_component
from react_triage.core.discover import (
    COMPONENT_EXTENSIONS,
    DEFAULT_SKIP_PREFIXES,
    RULE_EXTENSIONS,
    iter_source_files,
)
from react_triage.model import Severity
from react_triage.model.finding import Finding, Location
from react_triage.rules import ids

_logger = logging.getLogger(__name__)

_ASYNC_EXPORT_RE = re.compile(r"export\s+(default\s+)?async\s+function")
_CONSOLE_CALL_RE = re.compile(r"console\.(log|warn|error|info|debug)\s*\(")

CONSOLE_REPORT_LIMIT = 5


def _read_sources(
    root: Path, extensions: Iterable[str], skip_prefixes: Iterable[str]
) -> Iterator[tuple[str, str]]:
    for path in iter_source_files(root, extensions, skip_prefixes):
        try:
            content = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            _logger.debug("Skipping unreadable file %s: %s", path, exc)
            continue
        yield path.relative_to(root).as_posix(), content


def check_async_client_components(
    root: Path, *, skip_prefixes: Iterable[str] = DEFAULT_SKIP_PREFIXES
) -> list[Finding]:
    """Client components cannot be async; flag each offending file at line 1."""
    findings: list[Finding] = []
    for rel, content in _read_sources(root, COMPONENT_EXTENSIONS, skip_prefixes):
        if is_client_component(content) and _ASYNC_EXPORT_RE.search(content):
            findings.append(
                Finding(
                    rule_id=ids.ASYNC_CLIENT_COMPONENT,
                    severity=Severity.CRITICAL,
                    message=(
                        "Async Client Component detected — client components "
                        "cannot be async functions"
                    ),
                    location=Location(path=rel, line=1, column=1),
                )
            )
    return findings


def check_console_statements(
    root: Path,
    *,
    limit: int = CONSOLE_REPORT_LIMIT,
    skip_prefixes: Iterable[str] = DEFAULT_SKIP_PREFIXES,
) -> list[Finding]:
    """Report the first *limit* console calls plus one summary for the rest."""
    findings: list[Finding] = []
    count = 0
    for rel, content in _read_sources(root, RULE_EXTENSIONS, skip_prefixes):
        for i, line in enumerate(content.split("\n")):
            if not _CONSOLE_CALL_RE.search(line):
                continue
            count += 1
            if count <= limit:
                findings.append(
                    Finding(
                        rule_id=ids.NO_CONSOLE,
                        severity=Severity.INFO,
                        message="console statement found — remove for production",
                        location=Location(path=rel, line=i + 1, column=1),
                    )
                )
    if count > limit:
        findings.append(
            Finding(
                rule_id=ids.NO_CONSOLE,
                severity=Severity.INFO,
                message=(
                    f"... and {count - limit} more console statements across the project"
                ),
                location=Location.UNPLACED,
            )
        )
    return findings
