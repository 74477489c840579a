"""Ordered rule registry and the per-file rule sweep.

Each rule runs in isolation: an exception raised by one rule on one file is
logged, recorded as a :class:`RuleFault` and contributes zero findings; the
remaining rules for that file, and the rest of the scan, carry on.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Sequence

from react_triage.model.finding import Finding
from react_triage.rules import (
    async_rules,
    bundle,
    client,
    composition,
    ids,
    nextjs,
    rendering,
    rerender,
    server,
)
from react_triage.rules.base import Rule
from react_triage.rules.tables import DEFAULT_TABLES, RuleTables

_logger = logging.getLogger(__name__)

_RULE_MODULES = (
    async_rules,
    bundle,
    server,
    nextjs,
    client,
    composition,
    rerender,
    rendering,
)


@dataclass(frozen=True, slots=True)
class RuleFault:
    """A rule that raised while checking one file."""

    rule_id: str
    path: str
    error: str


@dataclass(frozen=True, slots=True)
class RuleSweep:
    findings: tuple[Finding, ...] = ()
    faults: tuple[RuleFault, ...] = ()


def build_rules() -> tuple[Rule, ...]:
    """All built-in rules in canonical execution order."""
    by_id = {rule.id: rule for mod in _RULE_MODULES for rule in mod.RULES}
    missing = [rid for rid in ids.HEURISTIC_RULE_IDS if rid not in by_id]
    extra = sorted(set(by_id) - set(ids.HEURISTIC_RULE_IDS))
    if missing or extra:
        raise AssertionError(
            f"rule modules out of sync with ids: missing={missing} extra={extra}"
        )
    return tuple(by_id[rid] for rid in ids.HEURISTIC_RULE_IDS)


class RuleRegistry:
    """Immutable, ordered collection of rules plus the tables they consult."""

    def __init__(
        self,
        rules: Sequence[Rule] | None = None,
        tables: RuleTables = DEFAULT_TABLES,
    ) -> None:
        self._rules: tuple[Rule, ...] = tuple(rules) if rules is not None else build_rules()
        self._tables = tables
        seen: set[str] = set()
        for rule in self._rules:
            if rule.id in seen:
                raise ValueError(f"duplicate rule id: {rule.id}")
            if not rule.url:
                raise ValueError(f"rule {rule.id} has no reference url")
            seen.add(rule.id)

    @property
    def rules(self) -> tuple[Rule, ...]:
        return self._rules

    @property
    def tables(self) -> RuleTables:
        return self._tables

    def __len__(self) -> int:
        return len(self._rules)

    def get(self, rule_id: str) -> Rule | None:
        return next((r for r in self._rules if r.id == rule_id), None)

    def run_file(self, path: str, content: str) -> RuleSweep:
        """Run every rule over one file, isolating failures per rule."""
        findings: list[Finding] = []
        faults: list[RuleFault] = []
        for rule in self._rules:
            try:
                findings.extend(rule.detect(path, content, self._tables))
            except Exception as exc:
                _logger.warning(
                    "Rule '%s' failed on %s: %s — skipped", rule.id, path, exc
                )
                faults.append(RuleFault(rule_id=rule.id, path=path, error=repr(exc)))
        return RuleSweep(findings=tuple(findings), faults=tuple(faults))

    def run_files(self, root: Path, files: Iterable[Path]) -> RuleSweep:
        """Sweep *files* (absolute paths under *root*) with every rule."""
        findings: list[Finding] = []
        faults: list[RuleFault] = []
        for path in files:
            try:
                content = path.read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError) as exc:
                _logger.debug("Skipping unreadable file %s: %s", path, exc)
                continue
            rel = path.relative_to(root).as_posix()
            sweep = self.run_file(rel, content)
            findings.extend(sweep.findings)
            faults.extend(sweep.faults)
        return RuleSweep(findings=tuple(findings), faults=tuple(faults))


_default: RuleRegistry | None = None


def default_registry() -> RuleRegistry:
    global _default
    if _default is None:
        _default = RuleRegistry()
    return _default
