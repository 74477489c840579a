"""Fail-on policy — decide the exit status from an exact severity match.

The gate is *exact*: ``--fail-on performance`` does not trip on critical
findings.  Vulnerabilities are first remapped onto the finding scale
(high → performance, moderate → best-practice, low → info), so a high
advisory never satisfies a critical policy.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from react_triage.model import Severity, VulnerabilitySeverity
from react_triage.model.scan_result import ScanResult

VULNERABILITY_TO_SEVERITY: dict[VulnerabilitySeverity, Severity] = {
    VulnerabilitySeverity.CRITICAL: Severity.CRITICAL,
    VulnerabilitySeverity.HIGH: Severity.PERFORMANCE,
    VulnerabilitySeverity.MODERATE: Severity.BEST_PRACTICE,
    VulnerabilitySeverity.LOW: Severity.INFO,
}

VALID_SEVERITIES: tuple[str, ...] = tuple(s.value for s in Severity)


def parse_severity(name: str) -> Severity:
    """Validate a user-supplied severity name.

    Raises:
        ValueError: *name* is not one of the four severities.
    """
    try:
        return Severity(name.strip().lower())
    except ValueError:
        raise ValueError(
            f"invalid severity {name!r}; expected one of: "
            + ", ".join(VALID_SEVERITIES)
        ) from None


def _empty_buckets() -> dict[Severity, int]:
    return {sev: 0 for sev in Severity}


@dataclass(frozen=True)
class FailOnOutcome:
    """Structured breakdown of one fail-on evaluation."""

    fail_on: Severity
    issue_matches: int = 0
    dependency_matches: int = 0
    vulnerability_matches: int = 0
    matched_by_severity: dict[Severity, int] = field(default_factory=_empty_buckets)

    @property
    def total_matches(self) -> int:
        return self.issue_matches + self.dependency_matches + self.vulnerability_matches

    @property
    def should_fail(self) -> bool:
        return self.total_matches > 0

    def to_dict(self) -> dict:
        return {
            "should_fail": self.should_fail,
            "fail_on": self.fail_on.value,
            "issue_matches": self.issue_matches,
            "dependency_matches": self.dependency_matches,
            "vulnerability_matches": self.vulnerability_matches,
            "total_matches": self.total_matches,
            "matched_by_severity": {
                sev.value: self.matched_by_severity.get(sev, 0) for sev in Severity
            },
        }


def evaluate_fail_on_policy(
    result: ScanResult, fail_on: Optional[Severity]
) -> Optional[FailOnOutcome]:
    """Return ``None`` when no policy is configured, else the outcome."""
    if fail_on is None:
        return None

    buckets = _empty_buckets()

    issue_matches = 0
    for finding in result.findings:
        if finding.severity == fail_on:
            issue_matches += 1
            buckets[finding.severity] += 1

    dependency_matches = 0
    for dep in result.dependency_issues:
        if dep.severity == fail_on:
            dependency_matches += 1
            buckets[dep.severity] += 1

    vulnerability_matches = 0
    for vuln in result.security.vulnerabilities:
        mapped = VULNERABILITY_TO_SEVERITY[vuln.severity]
        if mapped == fail_on:
            vulnerability_matches += 1
            buckets[mapped] += 1

    return FailOnOutcome(
        fail_on=fail_on,
        issue_matches=issue_matches,
        dependency_matches=dependency_matches,
        vulnerability_matches=vulnerability_matches,
        matched_by_severity=buckets,
    )
