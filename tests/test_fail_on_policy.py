"""Tests for the exact-match fail-on policy."""

from __future__ import annotations

import pytest

from react_triage.model import DependencyIssueKind, Severity, VulnerabilitySeverity
from react_triage.model.finding import Finding, Location
from react_triage.model.scan_result import (
    DependencyIssue,
    ProjectStats,
    ScanResult,
    SecurityAudit,
    Vulnerability,
)
from react_triage.policy.fail_on import evaluate_fail_on_policy, parse_severity


def _result(findings=(), deps=(), vulns=()) -> ScanResult:
    return ScanResult(
        score=50,
        elapsed_ms=1,
        findings=tuple(findings),
        stats=ProjectStats(),
        dependency_issues=tuple(deps),
        security=SecurityAudit.from_vulnerabilities(list(vulns)),
    )


def _finding(severity: Severity) -> Finding:
    return Finding("r", severity, "m", Location("a.tsx", 1, 1))


HIGH_VULN = Vulnerability(
    id=1, package="next", title="SSRF", severity=VulnerabilitySeverity.HIGH
)


class TestParseSeverity:
    def test_valid_names(self):
        assert parse_severity("critical") is Severity.CRITICAL
        assert parse_severity(" Best-Practice ") is Severity.BEST_PRACTICE

    def test_invalid_name(self):
        with pytest.raises(ValueError, match="expected one of: critical, performance"):
            parse_severity("high")


class TestEvaluate:
    def test_no_policy(self):
        assert evaluate_fail_on_policy(_result(), None) is None

    def test_exact_match_only(self):
        result = _result(findings=[_finding(Severity.CRITICAL)])
        outcome = evaluate_fail_on_policy(result, Severity.PERFORMANCE)
        assert outcome is not None
        assert not outcome.should_fail
        assert outcome.total_matches == 0

    def test_issue_and_dependency_matches(self):
        result = _result(
            findings=[_finding(Severity.PERFORMANCE), _finding(Severity.PERFORMANCE)],
            deps=[
                DependencyIssue(
                    DependencyIssueKind.VERSION_MISMATCH, "react mismatch", Severity.PERFORMANCE
                )
            ],
        )
        outcome = evaluate_fail_on_policy(result, Severity.PERFORMANCE)
        assert outcome.should_fail
        assert outcome.issue_matches == 2
        assert outcome.dependency_matches == 1
        assert outcome.matched_by_severity[Severity.PERFORMANCE] == 3

    def test_high_vulnerability_maps_to_performance(self):
        outcome = evaluate_fail_on_policy(_result(vulns=[HIGH_VULN]), Severity.PERFORMANCE)
        assert outcome.should_fail
        assert outcome.vulnerability_matches == 1

    def test_high_vulnerability_is_not_critical(self):
        outcome = evaluate_fail_on_policy(_result(vulns=[HIGH_VULN]), Severity.CRITICAL)
        assert not outcome.should_fail

    def test_to_dict(self):
        outcome = evaluate_fail_on_policy(_result(vulns=[HIGH_VULN]), Severity.PERFORMANCE)
        d = outcome.to_dict()
        assert d["should_fail"] is True
        assert d["fail_on"] == "performance"
        assert d["total_matches"] == 1
        assert d["matched_by_severity"] == {
            "critical": 0,
            "performance": 1,
            "best-practice": 0,
            "info": 0,
        }
