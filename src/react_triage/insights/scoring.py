"""Health score — 100 minus weighted penalties, clamped to 0..100.

Formula:
    score = 100
            − Σ SEVERITY_PENALTIES[finding.severity]
            − Σ SEVERITY_PENALTIES[dependency_issue.severity]
            − Σ VULNERABILITY_PENALTIES[tier] × count(tier)
            − client_ratio_penalty(stats)
"""

from __future__ import annotations

from typing import Iterable

from react_triage.model import Severity, VulnerabilitySeverity
from react_triage.model.finding import Finding
from react_triage.model.scan_result import DependencyIssue, ProjectStats, SecurityAudit

_BASE = 100

# ── per-item penalties ──────────────────────────────────────────────
SEVERITY_PENALTIES: dict[Severity, int] = {
    Severity.CRITICAL: 10,
    Severity.PERFORMANCE: 3,
    Severity.BEST_PRACTICE: 1,
    Severity.INFO: 0,
}

VULNERABILITY_PENALTIES: dict[VulnerabilitySeverity, int] = {
    VulnerabilitySeverity.CRITICAL: 15,
    VulnerabilitySeverity.HIGH: 8,
    VulnerabilitySeverity.MODERATE: 3,
    VulnerabilitySeverity.LOW: 1,
}

# ── client component ratio (Next.js projects only) ──────────────────
_CLIENT_RATIO_STEPS: tuple[tuple[float, int], ...] = (
    (0.8, 5),
    (0.6, 2),
)


def _clamp(value: float, lo: int, hi: int) -> int:
    return max(lo, min(hi, int(round(value))))


def client_ratio(stats: ProjectStats) -> float | None:
    """Client / (client + server) component ratio, or ``None`` with no components."""
    total = stats.client_components + stats.server_components
    if total == 0:
        return None
    return stats.client_components / total


def client_ratio_penalty(stats: ProjectStats) -> int:
    """Flat penalty for a client-heavy Next.js app; 0 when ``next`` is absent."""
    if not stats.next_version:
        return 0
    ratio = client_ratio(stats)
    if ratio is None:
        return 0
    for threshold, penalty in _CLIENT_RATIO_STEPS:
        if ratio > threshold:
            return penalty
    return 0


def compute_score(
    findings: Iterable[Finding],
    dependency_issues: Iterable[DependencyIssue],
    security: SecurityAudit,
    stats: ProjectStats,
) -> int:
    """Return the 0-100 integer health score."""
    score = _BASE
    score -= sum(SEVERITY_PENALTIES[f.severity] for f in findings)
    score -= sum(SEVERITY_PENALTIES[d.severity] for d in dependency_issues)
    score -= sum(
        penalty * security.summary.count(tier)
        for tier, penalty in VULNERABILITY_PENALTIES.items()
    )
    score -= client_ratio_penalty(stats)
    return _clamp(score, 0, 100)
