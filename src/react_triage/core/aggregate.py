"""Merge collaborator outputs into one scored, severity-ordered ScanResult."""

from __future__ import annotations

from dataclasses import replace
from typing import Iterable, Sequence

from react_triage.analyzers.tsconfig import TsconfigCheck
from react_triage.insights.scoring import compute_score
from react_triage.model import SEVERITY_ORDER
from react_triage.model.finding import Finding
from react_triage.model.scan_result import (
    DependencyIssue,
    LintResult,
    ProjectStats,
    ScanResult,
    SecurityAudit,
)


def sort_findings(findings: Iterable[Finding]) -> list[Finding]:
    """Stable sort by severity ordinal; equal severities keep insertion order."""
    return sorted(findings, key=lambda f: SEVERITY_ORDER[f.severity])


def aggregate(
    *,
    lint: LintResult,
    tsconfig: TsconfigCheck,
    stats: ProjectStats,
    async_client: Sequence[Finding] = (),
    console: Sequence[Finding] = (),
    rule_findings: Sequence[Finding] = (),
    dependency_issues: Sequence[DependencyIssue] = (),
    security: SecurityAudit = SecurityAudit(),
    elapsed_ms: int = 0,
) -> ScanResult:
    """Build the :class:`ScanResult`.

    Findings are concatenated linter → tsconfig → async-client → console →
    heuristic rules, then stable-sorted, so that order decides ties.  The
    file count comes from the linter unless it counted nothing, in which
    case the project-stats sweep is used.
    """
    merged = sort_findings(
        [
            *lint.findings,
            *tsconfig.findings,
            *async_client,
            *console,
            *rule_findings,
        ]
    )

    total_files = lint.file_count if lint.file_count > 0 else stats.total_files
    final_stats = replace(
        stats,
        total_files=total_files,
        strict_mode=tsconfig.strict_mode,
        jsx_transform=tsconfig.jsx_transform,
        target=tsconfig.target,
    )

    deps = tuple(dependency_issues)
    score = compute_score(merged, deps, security, final_stats)
    return ScanResult(
        score=score,
        elapsed_ms=max(0, int(elapsed_ms)),
        findings=tuple(merged),
        stats=final_stats,
        dependency_issues=deps,
        security=security,
    )
