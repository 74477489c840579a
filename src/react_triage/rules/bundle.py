"""Bundle-size detectors: heavy or deferrable modules imported statically."""

from __future__ import annotations

import re
from typing import Iterator

from react_triage.model import Impact, Severity
from react_triage.rules import ids
from react_triage.rules.base import (
    Hit,
    Rule,
    best_practice_url,
    is_component_file,
    split_lines,
)
from react_triage.rules.tables import RuleTables, matches_package

_IMPORT_FROM_RE = re.compile(r"""^import\s+.*from\s+['"]([^'"]+)['"]""")
_DATA_IMPORT_RE = re.compile(
    r"""^import\s+(\w+)\s+from\s+['"]([^'"]+\.(?:json|data\.\w+))['"]"""
)
_CONDITIONAL_WORD_RE = re.compile(r"\b(?:if|enabled|show|visible|active)\b")


def _check_dynamic_imports(
    path: str, content: str, tables: RuleTables
) -> Iterator[Hit]:
    for i, line in enumerate(split_lines(content)):
        m = _IMPORT_FROM_RE.match(line)
        if not m:
            continue
        pkg = m.group(1)
        if matches_package(pkg, tables.heavy_imports):
            yield Hit(
                line=i + 1,
                message=(
                    f'Static import of heavy library "{pkg}" — use '
                    "next/dynamic or React.lazy()"
                ),
                help=(
                    "Replace with: const Component = "
                    f"dynamic(() => import('{pkg}'), {{ ssr: false }})"
                ),
            )


def _check_defer_third_party(
    path: str, content: str, tables: RuleTables
) -> Iterator[Hit]:
    if not is_component_file(path):
        return
    # A file already using lazy loading is trusted to defer correctly.
    if "next/dynamic" in content or "React.lazy" in content:
        return
    for i, line in enumerate(split_lines(content)):
        m = _IMPORT_FROM_RE.match(line)
        if m and matches_package(m.group(1), tables.deferrable_packages):
            yield Hit(
                line=i + 1,
                message=(
                    f'Static import of "{m.group(1)}" — load analytics/tracking '
                    "after hydration"
                ),
                help="Use next/dynamic with { ssr: false } or load in useEffect",
            )


def _check_conditional(path: str, content: str, tables: RuleTables) -> Iterator[Hit]:
    if not is_component_file(path):
        return
    for i, line in enumerate(split_lines(content)):
        m = _DATA_IMPORT_RE.match(line)
        if not m:
            continue
        var_name, source = m.group(1), m.group(2)
        # Everything after the first textual occurrence of the import line.
        rest = content[content.find(line) + len(line):]
        if _CONDITIONAL_WORD_RE.search(rest) and var_name in rest:
            yield Hit(
                line=i + 1,
                message=(
                    f'"{source}" is statically imported but used conditionally '
                    "— use dynamic import()"
                ),
                help="Load large data modules with import() inside useEffect or event handlers",
            )


BUNDLE_DYNAMIC_IMPORTS = Rule(
    id=ids.BUNDLE_DYNAMIC_IMPORTS,
    title="Dynamic Imports for Heavy Components",
    impact=Impact.CRITICAL,
    severity=Severity.CRITICAL,
    description=(
        "Heavy libraries imported statically bloat the initial bundle. "
        "Use next/dynamic or React.lazy() to load them on demand."
    ),
    url=best_practice_url(ids.BUNDLE_DYNAMIC_IMPORTS),
    check=_check_dynamic_imports,
)

BUNDLE_DEFER_THIRD_PARTY = Rule(
    id=ids.BUNDLE_DEFER_THIRD_PARTY,
    title="Defer Non-Critical Third-Party Libraries",
    impact=Impact.HIGH,
    severity=Severity.PERFORMANCE,
    description=(
        "Analytics, logging, and error tracking don't block user interaction. "
        "Load them after hydration with next/dynamic or lazy import."
    ),
    url=best_practice_url(ids.BUNDLE_DEFER_THIRD_PARTY),
    check=_check_defer_third_party,
)

BUNDLE_CONDITIONAL = Rule(
    id=ids.BUNDLE_CONDITIONAL,
    title="Conditional Module Loading",
    impact=Impact.HIGH,
    severity=Severity.PERFORMANCE,
    description=(
        "Large data modules imported at the top-level load even when features "
        "are disabled. Use dynamic import() inside conditions."
    ),
    url=best_practice_url(ids.BUNDLE_CONDITIONAL),
    check=_check_conditional,
)

RULES: tuple[Rule, ...] = (
    BUNDLE_DYNAMIC_IMPORTS,
    BUNDLE_DEFER_THIRD_PARTY,
    BUNDLE_CONDITIONAL,
)
