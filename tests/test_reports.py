"""Tests for the terminal dashboard and the file exporters."""

from __future__ import annotations

import json

import pytest

from react_triage.model import DependencyIssueKind, Severity, VulnerabilitySeverity
from react_triage.model.finding import Finding, Location
from react_triage.model.scan_result import (
    DependencyIssue,
    LargeFile,
    ProjectStats,
    ScanResult,
    SecurityAudit,
    Vulnerability,
)
from react_triage.policy.fail_on import evaluate_fail_on_policy
from react_triage.reports.dashboard import (
    DisplayOptions,
    outro_message,
    render_dashboard,
    render_health_bar,
    vitals_rows,
)
from react_triage.reports.exporters import export_html, export_markdown, export_result


def _finding(i: int, severity: Severity, path: str = "app/page.tsx") -> Finding:
    return Finding(
        rule_id=f"rule-{severity.value}-{i}",
        severity=severity,
        message=f"{severity.value} issue {i}",
        location=Location(path=path, line=i + 1, column=3),
        help="do the thing",
        url="https://example.invalid/docs",
    )


def _result(findings=(), *, score=80, stats=None, deps=(), vulns=()) -> ScanResult:
    return ScanResult(
        score=score,
        elapsed_ms=123,
        findings=tuple(findings),
        stats=stats or ProjectStats(total_files=10),
        dependency_issues=tuple(deps),
        security=SecurityAudit.from_vulnerabilities(list(vulns)),
    )


VULN = Vulnerability(
    id=1096,
    package="next",
    title="SSRF in Server Actions",
    severity=VulnerabilitySeverity.HIGH,
    url="https://github.com/advisories/GHSA-fr5h-rqp8-mj6g",
    vulnerable_versions="<14.1.1",
    cwe=("CWE-918",),
    cvss_score=7.5,
)


class TestHealthBar:
    def test_bar(self):
        assert render_health_bar(100, width=10) == "██████████ 100/100"
        assert render_health_bar(0, width=10) == "░░░░░░░░░░ 0/100"
        assert render_health_bar(50, width=10) == "█████░░░░░ 50/100"


class TestVitals:
    def test_rows(self):
        stats = ProjectStats(
            react_version="17.0.2",
            react_dom_version="18.2.0",
            next_version="14.1.0",
            client_components=9,
            server_components=1,
            strict_mode=True,
            target="ES2022",
            total_files=12,
        )
        rows = vitals_rows(_result(stats=stats))
        assert rows == [
            ("React", "17.0.2", "OUTDATED"),
            ("React DOM", "18.2.0", "MISMATCH"),
            ("Next.js", "14.1.0", "OK"),
            ("Client/Server", "9/1", "HIGH"),
            ("Strict Mode", "Enabled", "SAFE"),
            ("TS Target", "ES2022", ""),
            ("Files Scanned", "12", ""),
        ]

    def test_minimal(self):
        rows = vitals_rows(_result(stats=ProjectStats()))
        assert rows == [("Strict Mode", "Disabled", "RISK"), ("Files Scanned", "0", "")]


class TestDashboard:
    def test_groups_are_truncated(self):
        findings = [_finding(i, Severity.CRITICAL) for i in range(7)]
        findings += [_finding(i, Severity.INFO) for i in range(4)]
        out = render_dashboard(_result(findings))
        assert "⚠ Found 11 issues" in out
        assert "critical issue 4" in out
        assert "critical issue 5" not in out
        assert "... and 2 more in this category." in out
        assert "info issue 2" in out
        assert "info issue 3" not in out
        assert "... and 1 more in this category." in out
        assert "app/page.tsx:1:3" in out

    def test_show_all(self):
        findings = [_finding(i, Severity.CRITICAL) for i in range(7)]
        out = render_dashboard(_result(findings), DisplayOptions(show_all=True))
        assert "critical issue 6" in out
        assert "more in this category" not in out

    def test_severity_filter_hides_groups_but_not_score(self):
        findings = [_finding(0, Severity.CRITICAL), _finding(1, Severity.PERFORMANCE)]
        options = DisplayOptions(severity_filter=frozenset({Severity.PERFORMANCE}))
        out = render_dashboard(_result(findings, score=87), options)
        assert "⚠ Found 1 of 2 issue" in out
        assert "performance issue 1" in out
        assert "critical issue 0" not in out
        assert "87/100" in out

    def test_healthy_project(self):
        out = render_dashboard(_result(score=100))
        assert "No issues found" in out
        assert "Excellent!" in out

    def test_sections(self):
        stats = ProjectStats(large_files=(LargeFile("src/huge.tsx", 812),))
        deps = [DependencyIssue(DependencyIssueKind.UNUSED, '"left-pad" appears unused', Severity.PERFORMANCE)]
        result = _result(stats=stats, deps=deps, vulns=[VULN])
        outcome = evaluate_fail_on_policy(result, Severity.PERFORMANCE)
        out = render_dashboard(result, outcome=outcome)
        assert "src/huge.tsx (812 lines)" in out
        assert '"left-pad" appears unused' in out
        assert "1 vulnerability found (1 high)" in out
        assert "[HIGH] next (CVSS 7.5)" in out
        assert "CWE: CWE-918" in out
        assert "FAIL-ON POLICY (performance): FAILED" in out
        assert out.endswith("\n")


class TestOutro:
    @pytest.mark.parametrize(
        "score, findings, expected",
        [
            (95, [], "Excellent!"),
            (70, [_finding(0, Severity.CRITICAL)], "Fix the 1 critical issue first."),
            (70, [_finding(0, Severity.INFO)], "Some improvements possible."),
            (40, [], "needs attention"),
        ],
    )
    def test_messages(self, score, findings, expected):
        assert expected in outro_message(_result(findings, score=score))


class TestExporters:
    def test_json_matches_to_dict(self):
        result = _result([_finding(0, Severity.CRITICAL)], vulns=[VULN])
        assert json.loads(export_result(result, "json")) == result.to_dict()

    def test_markdown(self):
        findings = [_finding(i, Severity.PERFORMANCE) for i in range(6)]
        deps = [DependencyIssue(DependencyIssueKind.DUPLICATE, "two Reacts", Severity.CRITICAL)]
        md = export_markdown(_result(findings, deps=deps, vulns=[VULN]))
        assert md.startswith("# ⚛️ React Triage Report")
        assert "**Health Score:** 80/100" in md
        assert "| performance | 6 |" in md
        assert "### 🚀 Performance (6)" in md
        assert "_... and 1 more._" in md
        assert "| duplicate | critical | two Reacts |" in md
        assert "[SSRF in Server Actions](https://github.com/advisories/GHSA-fr5h-rqp8-mj6g)" in md

    def test_markdown_show_all_and_empty(self):
        findings = [_finding(i, Severity.INFO) for i in range(6)]
        assert "more._" not in export_markdown(_result(findings), show_all=True)
        assert "No issues found." in export_markdown(_result())

    def test_html_escapes(self):
        finding = Finding("x", Severity.CRITICAL, "<script>alert(1)</script>", Location("a.tsx", 1, 1))
        doc = export_html(_result([finding]))
        assert doc.startswith("<!DOCTYPE html>")
        assert "<script>alert(1)</script>" not in doc
        assert "&lt;script&gt;" in doc

    def test_dispatcher(self):
        assert export_result(_result(), "md").startswith("# ")
        assert "<html" in export_result(_result(), "html")
        with pytest.raises(ValueError, match="Unknown export format"):
            export_result(_result(), "pdf")
