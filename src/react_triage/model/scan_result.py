"""ScanResult and the records the collaborators hand to the aggregator."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Union

from . import DependencyIssueKind, Severity, VulnerabilitySeverity
from .finding import Finding


@dataclass(frozen=True, slots=True)
class DependencyIssue:
    """One dependency-health problem reported by the dependency auditor."""

    kind: DependencyIssueKind
    message: str
    severity: Severity

    def to_dict(self) -> dict:
        return {
            "type": self.kind.value,
            "message": self.message,
            "severity": self.severity.value,
        }


@dataclass(frozen=True, slots=True)
class Vulnerability:
    """One security advisory hit."""

    id: Union[int, str]
    package: str
    title: str
    severity: VulnerabilitySeverity
    url: str = ""
    vulnerable_versions: str = "*"
    cwe: tuple[str, ...] = ()
    cvss_score: Optional[float] = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "package": self.package,
            "title": self.title,
            "severity": self.severity.value,
            "url": self.url,
            "vulnerable_versions": self.vulnerable_versions,
            "cwe": list(self.cwe),
            "cvss_score": self.cvss_score,
        }


@dataclass(frozen=True, slots=True)
class SecuritySummary:
    total: int = 0
    critical: int = 0
    high: int = 0
    moderate: int = 0
    low: int = 0

    def count(self, severity: VulnerabilitySeverity) -> int:
        return getattr(self, severity.value)

    def to_dict(self) -> dict:
        return {
            "total": self.total,
            "critical": self.critical,
            "high": self.high,
            "moderate": self.moderate,
            "low": self.low,
        }


@dataclass(frozen=True, slots=True)
class SecurityAudit:
    vulnerabilities: tuple[Vulnerability, ...] = ()
    summary: SecuritySummary = field(default_factory=SecuritySummary)

    @classmethod
    def from_vulnerabilities(cls, vulns: list[Vulnerability]) -> "SecurityAudit":
        counts = {sev: 0 for sev in VulnerabilitySeverity}
        for v in vulns:
            counts[v.severity] += 1
        return cls(
            vulnerabilities=tuple(vulns),
            summary=SecuritySummary(
                total=len(vulns),
                critical=counts[VulnerabilitySeverity.CRITICAL],
                high=counts[VulnerabilitySeverity.HIGH],
                moderate=counts[VulnerabilitySeverity.MODERATE],
                low=counts[VulnerabilitySeverity.LOW],
            ),
        )

    def to_dict(self) -> dict:
        return {
            "vulnerabilities": [v.to_dict() for v in self.vulnerabilities],
            "summary": self.summary.to_dict(),
        }


@dataclass(frozen=True, slots=True)
class LargeFile:
    path: str
    lines: int


@dataclass(frozen=True, slots=True)
class ProjectStats:
    """Descriptive snapshot of the scanned project."""

    react_version: Optional[str] = None
    react_dom_version: Optional[str] = None
    next_version: Optional[str] = None
    total_files: int = 0
    client_components: int = 0
    server_components: int = 0
    large_files: tuple[LargeFile, ...] = ()
    strict_mode: bool = False
    jsx_transform: Optional[str] = None
    target: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "react_version": self.react_version,
            "react_dom_version": self.react_dom_version,
            "next_version": self.next_version,
            "total_files": self.total_files,
            "client_components": self.client_components,
            "server_components": self.server_components,
            "large_files": [
                {"path": lf.path, "lines": lf.lines} for lf in self.large_files
            ],
            "strict_mode": self.strict_mode,
            "jsx_transform": self.jsx_transform,
            "target": self.target,
        }


@dataclass(frozen=True, slots=True)
class LintResult:
    """Output contract of the external linter adapter."""

    findings: tuple[Finding, ...] = ()
    file_count: int = 0


@dataclass(frozen=True, slots=True)
class ScanResult:
    """Terminal aggregate of one scan; built only by ``core.aggregate``."""

    score: int
    elapsed_ms: int
    findings: tuple[Finding, ...]
    stats: ProjectStats
    dependency_issues: tuple[DependencyIssue, ...] = ()
    security: SecurityAudit = field(default_factory=SecurityAudit)

    def to_dict(self) -> dict:
        return {
            "score": self.score,
            "elapsed_ms": self.elapsed_ms,
            "issues": [f.to_dict() for f in self.findings],
            "stats": self.stats.to_dict(),
            "dependency_issues": [d.to_dict() for d in self.dependency_issues],
            "security": self.security.to_dict(),
        }
