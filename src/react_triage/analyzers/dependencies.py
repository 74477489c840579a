"""Dependency health: version skew, misplaced dev tools, unused and duplicate packages."""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Iterable

from react_triage.analyzers.manifest import (
    dependency_map,
    read_manifest,
    script_commands,
    strip_range,
)
from react_triage.core.discover import (
    DEPENDENCY_SCAN_EXTENSIONS,
    DEPENDENCY_SKIP_PREFIXES,
    iter_source_files,
)
from react_triage.model import DependencyIssueKind, Severity
from react_triage.model.scan_result import DependencyIssue
from react_triage.utils.process import CommandError, CommandRunner, run_command

_logger = logging.getLogger(__name__)

# Test, mocking and dev-server tooling that has no place in ``dependencies``.
HEAVY_DEV_ONLY_PACKAGES: frozenset[str] = frozenset({
    "@faker-js/faker",
    "faker",
    "storybook",
    "@storybook/react",
    "@testing-library/react",
    "@testing-library/jest-dom",
    "jest",
    "vitest",
    "cypress",
    "playwright",
    "msw",
    "ts-node",
    "nodemon",
    "webpack-dev-server",
})

SPECIFIER_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"""\bimport\s+[^"'`]*?\sfrom\s*["'`]([^"'`]+)["'`]"""),
    re.compile(r"""\bexport\s+[^"'`]*?\sfrom\s*["'`]([^"'`]+)["'`]"""),
    re.compile(r"""\bimport\s*["'`]([^"'`]+)["'`]"""),
    re.compile(r"""\brequire\s*\(\s*["'`]([^"'`]+)["'`]\s*\)"""),
    re.compile(r"""\bimport\s*\(\s*["'`]([^"'`]+)["'`]\s*\)"""),
    re.compile(r"""\b(?:jest|vi)\.mock\s*\(\s*["'`]([^"'`]+)["'`]"""),
)

_NODE_BUILTINS = (
    "assert", "assert/strict", "async_hooks", "buffer", "child_process",
    "cluster", "console", "constants", "crypto", "dgram",
    "diagnostics_channel", "dns", "dns/promises", "domain", "events", "fs",
    "fs/promises", "http", "http2", "https", "inspector",
    "inspector/promises", "module", "net", "os", "path", "path/posix",
    "path/win32", "perf_hooks", "process", "punycode", "querystring",
    "readline", "readline/promises", "repl", "stream", "stream/consumers",
    "stream/promises", "stream/web", "string_decoder", "sys", "timers",
    "timers/promises", "tls", "trace_events", "tty", "url", "util",
    "util/types", "v8", "vm", "wasi", "worker_threads", "zlib",
)
NODE_BUILTIN_MODULES: frozenset[str] = frozenset(
    name for base in _NODE_BUILTINS for name in (base, f"node:{base}")
)

_TOKEN_CHAR_RE = re.compile(r"[A-Za-z0-9@/_-]")
_REACT_INSTALL_RE = re.compile(r"\breact@\d")

_IGNORED_SPECIFIER_PREFIXES = (".", "/", "#", "@/", "~/")


def normalize_package_name(specifier: str) -> str | None:
    """Resolve an import specifier to its declaring package name.

    ``@scope/pkg/utils`` → ``@scope/pkg``, ``lodash/merge`` → ``lodash``.
    Relative, absolute, aliased, URL and Node builtin specifiers → ``None``.
    """
    if not specifier or specifier.startswith(_IGNORED_SPECIFIER_PREFIXES):
        return None
    if "://" in specifier or specifier.startswith("node:"):
        return None
    if specifier in NODE_BUILTIN_MODULES:
        return None
    parts = specifier.split("/")
    if specifier.startswith("@"):
        return f"{parts[0]}/{parts[1]}" if len(parts) >= 2 else None
    return parts[0] or None


def extract_used_packages(content: str) -> set[str]:
    used: set[str] = set()
    for pattern in SPECIFIER_PATTERNS:
        for match in pattern.finditer(content):
            name = normalize_package_name(match.group(1))
            if name:
                used.add(name)
    return used


def _is_token_boundary(char: str | None) -> bool:
    return char is None or not _TOKEN_CHAR_RE.match(char)


def script_mentions_package(command: str, package: str) -> bool:
    """True if *package* appears in *command* as a whole token."""
    if not command or not package:
        return False
    start = 0
    while True:
        index = command.find(package, start)
        if index == -1:
            return False
        end = index + len(package)
        prev = command[index - 1] if index > 0 else None
        nxt = command[end] if end < len(command) else None
        if _is_token_boundary(prev) and _is_token_boundary(nxt):
            return True
        start = end


def count_react_installs(listing: str) -> int:
    """Count ``react@<digit>`` lines in a ``bun pm ls --all`` listing."""
    return sum(1 for line in listing.split("\n") if _REACT_INSTALL_RE.search(line))


class DependencyAuditor:
    """Audit ``package.json`` against the source tree and the installed graph."""

    id = "dependencies"

    def __init__(
        self,
        binary: str = "bun",
        timeout: float = 60.0,
        runner: CommandRunner = run_command,
        skip_prefixes: Iterable[str] = DEPENDENCY_SKIP_PREFIXES,
    ) -> None:
        self.binary = binary
        self.timeout = timeout
        self._runner = runner
        self._skip_prefixes = tuple(skip_prefixes)

    # ── usage ────────────────────────────────────────────────────────

    def find_used_packages(
        self, root: Path, declared: set[str], scripts: list[str]
    ) -> set[str]:
        used = {
            name
            for command in scripts
            for name in declared
            if script_mentions_package(command, name)
        }
        for path in iter_source_files(root, DEPENDENCY_SCAN_EXTENSIONS, self._skip_prefixes):
            try:
                content = path.read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError) as exc:
                _logger.debug("Skipping unreadable file %s: %s", path, exc)
                continue
            used |= extract_used_packages(content) & declared
        return used

    # ── duplicates ───────────────────────────────────────────────────

    def _duplicate_react(self, root: Path) -> DependencyIssue | None:
        try:
            output = self._runner(
                [self.binary, "pm", "ls", "--all"], cwd=root, timeout=self.timeout
            )
        except CommandError as exc:
            _logger.warning("%s pm ls failed: %s — duplicate check skipped", self.binary, exc)
            return None
        installs = count_react_installs(output.stdout)
        if installs > 1:
            return DependencyIssue(
                kind=DependencyIssueKind.DUPLICATE,
                message=(
                    f"Multiple React installations detected ({installs} found) — "
                    "this causes hooks errors"
                ),
                severity=Severity.CRITICAL,
            )
        return None

    # ── entry point ──────────────────────────────────────────────────

    def run(self, root: Path) -> list[DependencyIssue]:
        manifest = read_manifest(root)
        if manifest is None:
            return []

        deps = dependency_map(manifest, "dependencies")
        dev_deps = dependency_map(manifest, "devDependencies")
        used = self.find_used_packages(
            root, set(deps) | set(dev_deps), script_commands(manifest)
        )
        issues: list[DependencyIssue] = []

        if deps.get("react") and deps.get("react-dom"):
            if strip_range(deps["react"]) != strip_range(deps["react-dom"]):
                issues.append(
                    DependencyIssue(
                        kind=DependencyIssueKind.VERSION_MISMATCH,
                        message=(
                            f"react ({deps['react']}) and react-dom "
                            f"({deps['react-dom']}) versions don't match"
                        ),
                        severity=Severity.CRITICAL,
                    )
                )

        for name in deps:
            if name in HEAVY_DEV_ONLY_PACKAGES:
                issues.append(
                    DependencyIssue(
                        kind=DependencyIssueKind.DEV_IN_PROD,
                        message=f'"{name}" should be in devDependencies, not dependencies',
                        severity=Severity.PERFORMANCE,
                    )
                )
            if name not in used:
                issues.append(
                    DependencyIssue(
                        kind=DependencyIssueKind.UNUSED,
                        message=f'"{name}" appears unused in dependencies',
                        severity=Severity.PERFORMANCE,
                    )
                )

        for name in dev_deps:
            if name not in used:
                issues.append(
                    DependencyIssue(
                        kind=DependencyIssueKind.UNUSED,
                        message=f'"{name}" appears unused in devDependencies',
                        severity=Severity.BEST_PRACTICE,
                    )
                )

        duplicate = self._duplicate_react(root)
        if duplicate is not None:
            issues.append(duplicate)
        return issues
