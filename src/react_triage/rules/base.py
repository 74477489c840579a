"""Rule contract shared by every heuristic detector.

A rule is a static descriptor plus a pure ``check(path, content, tables)``
generator yielding :class:`Hit` objects.  :meth:`Rule.detect` turns hits
into :class:`Finding` objects stamped with the rule's own id, severity and
url, so a rule can never emit a finding of a different severity.

Rules scan raw text line by line with regular expressions.  They never
build a syntax tree, so unusual formatting can hide a violation or produce
a false positive.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Callable, Iterable

from react_triage.model import Impact, Severity
from react_triage.model.finding import Finding, Location
from react_triage.rules.tables import DEFAULT_TABLES, RuleTables

_SKILLS_BASE = "https://github.com/vercel-labs/agent-skills/blob/main/skills"

# `const x = await ...` at the start of a (stripped) line.
AWAIT_ASSIGN_RE = re.compile(r"^(?:const|let|var)\s+(\w+)\s*=\s*await\s+")

# First lines where a `"use client"` directive is honoured.
_DIRECTIVE_WINDOW = 300


def best_practice_url(rule_id: str) -> str:
    return f"{_SKILLS_BASE}/react-best-practices/rules/{rule_id}.md"


def composition_url(name: str) -> str:
    return f"{_SKILLS_BASE}/vercel-composition-patterns/rules/{name}.md"


@dataclass(frozen=True, slots=True)
class Hit:
    """One raw match produced by a rule's check function."""

    line: int
    message: str
    help: str
    column: int = 1


CheckFn = Callable[[str, str, RuleTables], Iterable[Hit]]


@dataclass(frozen=True, slots=True)
class Rule:
    """Static rule descriptor with a pure detection function."""

    id: str
    title: str
    impact: Impact
    severity: Severity
    description: str
    url: str
    check: CheckFn = field(repr=False, compare=False)

    def detect(
        self,
        path: str,
        content: str,
        tables: RuleTables = DEFAULT_TABLES,
    ) -> tuple[Finding, ...]:
        """Run the rule over one file and return its findings."""
        return tuple(
            Finding(
                rule_id=self.id,
                severity=self.severity,
                message=hit.message,
                location=Location(path=path, line=hit.line, column=hit.column),
                help=hit.help,
                url=self.url,
            )
            for hit in self.check(path, content, tables)
        )


# ── shared helpers ──────────────────────────────────────────────────


def has_ext(path: str, *exts: str) -> bool:
    return path.endswith(exts)


def is_component_file(path: str) -> bool:
    return has_ext(path, ".tsx", ".jsx")


def has_client_directive(content: str) -> bool:
    """True when a ``use client`` directive appears near the top."""
    head = content[:_DIRECTIVE_WINDOW]
    return "'use client'" in head or '"use client"' in head


def split_lines(content: str) -> list[str]:
    # Split on "\n" only; line numbers must line up with editors.
    return content.split("\n")
