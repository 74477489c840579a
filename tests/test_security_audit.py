"""Tests for the package-manager security audit."""

from __future__ import annotations

import json

from conftest import FakeRunner
from react_triage.analyzers.security_audit import (
    SecurityAuditor,
    extract_json_object,
    normalize_severity,
    parse_audit_output,
)
from react_triage.contracts.load import validate_instance
from react_triage.model import VulnerabilitySeverity
from react_triage.model.scan_result import ProjectStats
from react_triage.utils.process import CommandError, CommandOutput

ADVISORIES = {
    "next": [
        {
            "id": 1096,
            "title": "Server-Side Request Forgery in Server Actions",
            "severity": "moderate",
            "url": "https://github.com/advisories/GHSA-fr5h-rqp8-mj6g",
            "vulnerable_versions": ">=13.4.0 <14.1.1",
            "cwe": ["CWE-918"],
            "cvss": {"score": 7.5},
        }
    ],
    "lodash": [{"id": 7, "title": "Prototype Pollution", "severity": "CRITICAL", "cwe": "CWE-1321"}],
    "mystery": [{"severity": "urgent"}],
    "meta": {"not": "a list"},
}


class TestExtractJsonObject:
    def test_skips_preamble(self):
        text = "bun audit v1.1.0\nSaved lockfile\n" + json.dumps({"a": []}) + "\n"
        assert extract_json_object(text) == {"a": []}

    def test_no_object(self):
        assert extract_json_object("No vulnerabilities found") is None
        assert extract_json_object("} {") is None
        assert extract_json_object("{ broken") is None
        assert extract_json_object("[1, 2]") is None


class TestNormalizeSeverity:
    def test_mapping(self):
        assert normalize_severity("HIGH") is VulnerabilitySeverity.HIGH
        assert normalize_severity("moderate") is VulnerabilitySeverity.MODERATE
        assert normalize_severity("urgent") is VulnerabilitySeverity.LOW
        assert normalize_severity(None) is VulnerabilitySeverity.LOW


class TestParseAuditOutput:
    def test_sorted_by_severity_with_summary(self):
        audit = parse_audit_output("Resolving...\n" + json.dumps(ADVISORIES))

        assert [v.package for v in audit.vulnerabilities] == ["lodash", "next", "mystery"]
        assert audit.summary.total == 3
        assert audit.summary.critical == 1
        assert audit.summary.moderate == 1
        assert audit.summary.low == 1
        assert audit.summary.high == 0

    def test_advisory_fields(self):
        audit = parse_audit_output(json.dumps(ADVISORIES))
        lodash, nxt, mystery = audit.vulnerabilities
        assert nxt.id == 1096
        assert nxt.cwe == ("CWE-918",)
        assert nxt.cvss_score == 7.5
        assert nxt.vulnerable_versions == ">=13.4.0 <14.1.1"
        assert lodash.cwe == ("CWE-1321",)
        assert lodash.cvss_score is None
        assert mystery.id == 0
        assert mystery.title == "Unknown vulnerability"
        assert mystery.vulnerable_versions == "*"
        assert mystery.url == ""

    def test_wrongly_typed_advisory_fields_are_coerced(self):
        payload = {
            "next": [
                {
                    "id": {"ghsa": "x"},
                    "title": 42,
                    "severity": "high",
                    "url": ["https://example.test"],
                    "vulnerable_versions": 14,
                    "cwe": {"id": "CWE-1"},
                    "cvss": {"score": True},
                }
            ]
        }
        audit = parse_audit_output(json.dumps(payload))
        (vuln,) = audit.vulnerabilities
        assert vuln.id == "{'ghsa': 'x'}"
        assert vuln.title == "42"
        assert vuln.url == "['https://example.test']"
        assert vuln.vulnerable_versions == "14"
        assert vuln.cwe == ()
        assert vuln.cvss_score is None
        validate_instance(
            {
                "score": 100,
                "elapsed_ms": 0,
                "issues": [],
                "stats": ProjectStats().to_dict(),
                "dependency_issues": [],
                "security": audit.to_dict(),
            },
            "scan_result.schema.json",
        )

    def test_empty_output(self):
        audit = parse_audit_output("")
        assert audit.vulnerabilities == ()
        assert audit.summary.total == 0


class TestSecurityAuditor:
    def test_nonzero_exit_still_parsed(self, tmp_path):
        runner = FakeRunner({("bun", "audit"): CommandOutput(1, json.dumps(ADVISORIES))})
        audit = SecurityAuditor(runner=runner).run(tmp_path)
        assert audit.summary.total == 3
        assert runner.calls == [["bun", "audit", "--json"]]

    def test_missing_tool_gives_empty_audit(self, tmp_path):
        runner = FakeRunner({("bun", "audit"): CommandError("command not found: bun")})
        audit = SecurityAuditor(runner=runner).run(tmp_path)
        assert audit.vulnerabilities == ()
        assert audit.to_dict()["summary"] == {
            "total": 0,
            "critical": 0,
            "high": 0,
            "moderate": 0,
            "low": 0,
        }
