"""Text-based dashboard — the terminal view of one scan.

Pure stdlib, no colour codes, so the output is equally readable in a
terminal, a CI log or ``less``.  Severity filters only choose which issue
groups are shown; the score is never affected.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from react_triage.insights.scoring import client_ratio
from react_triage.model import Severity, VulnerabilitySeverity
from react_triage.model.finding import Finding
from react_triage.model.scan_result import ScanResult
from react_triage.policy.fail_on import FailOnOutcome

_GROUP_LIMIT = 5
_INFO_LIMIT = 3
_LARGE_FILE_LIMIT = 5
_VULN_LIMIT = 10
_BAR_WIDTH = 30

_GROUP_HEADINGS: dict[Severity, str] = {
    Severity.CRITICAL: "🚨 CRITICAL — Must fix now",
    Severity.PERFORMANCE: "🚀 PERFORMANCE — Causes slowdowns",
    Severity.BEST_PRACTICE: "💡 BEST PRACTICES — Recommended improvements",
    Severity.INFO: "○ INFO — For your awareness",
}

_SEV_ICON: dict[Severity, str] = {
    Severity.CRITICAL: "✖",
    Severity.PERFORMANCE: "!",
    Severity.BEST_PRACTICE: "◆",
    Severity.INFO: "○",
}

_VULN_BADGE: dict[VulnerabilitySeverity, str] = {
    VulnerabilitySeverity.CRITICAL: "[CRITICAL]",
    VulnerabilitySeverity.HIGH: "[HIGH]",
    VulnerabilitySeverity.MODERATE: "[MODERATE]",
    VulnerabilitySeverity.LOW: "[LOW]",
}


@dataclass(frozen=True)
class DisplayOptions:
    """What the dashboard shows; an empty filter means every severity."""

    show_all: bool = False
    severity_filter: frozenset[Severity] = field(default_factory=frozenset)

    def shows(self, severity: Severity) -> bool:
        return not self.severity_filter or severity in self.severity_filter


def _major(version: str) -> int:
    head = version.split(".")[0]
    digits = ""
    for ch in head:
        if not ch.isdigit():
            break
        digits += ch
    return int(digits) if digits else 0


def render_health_bar(score: int, width: int = _BAR_WIDTH) -> str:
    filled = round(score / 100 * width)
    return "█" * filled + "░" * (width - filled) + f" {score}/100"


# ── vitals ──────────────────────────────────────────────────────────


def vitals_rows(result: ScanResult) -> list[tuple[str, str, str]]:
    """(label, value, status) rows for the project vitals table."""
    stats = result.stats
    rows: list[tuple[str, str, str]] = []
    if stats.react_version:
        status = "OK" if _major(stats.react_version) >= 18 else "OUTDATED"
        rows.append(("React", stats.react_version, status))
    if stats.react_dom_version and stats.react_dom_version != stats.react_version:
        rows.append(("React DOM", stats.react_dom_version, "MISMATCH"))
    if stats.next_version:
        status = "OK" if _major(stats.next_version) >= 14 else "UPGRADE"
        rows.append(("Next.js", stats.next_version, status))
        ratio = client_ratio(stats)
        if ratio is not None:
            pct = round(ratio * 100)
            status = "HIGH" if pct > 80 else "WATCH" if pct > 50 else "GOOD"
            rows.append(
                (
                    "Client/Server",
                    f"{stats.client_components}/{stats.server_components}",
                    status,
                )
            )
    rows.append(
        (
            "Strict Mode",
            "Enabled" if stats.strict_mode else "Disabled",
            "SAFE" if stats.strict_mode else "RISK",
        )
    )
    if stats.target:
        rows.append(("TS Target", stats.target, ""))
    rows.append(("Files Scanned", str(stats.total_files), ""))
    return rows


def _render_table(rows: list[tuple[str, str, str]]) -> list[str]:
    w0 = max(len(r[0]) for r in rows)
    w1 = max(len(r[1]) for r in rows)
    return [f"  {a:<{w0}}  {b:<{w1}}  {c}".rstrip() for a, b, c in rows]


# ── issues ──────────────────────────────────────────────────────────


def _render_issue_group(issues: list[Finding], limit: Optional[int]) -> list[str]:
    lines: list[str] = []
    shown = issues if limit is None else issues[:limit]
    for issue in shown:
        lines.append(f"   {_SEV_ICON[issue.severity]} {issue.message}")
        if issue.help:
            lines.append(f"     💊 {issue.help}")
        if issue.location.path:
            loc = issue.location
            lines.append(f"     {loc.path}:{loc.line}:{loc.column or 1}")
        if issue.url:
            lines.append(f"     📖 {issue.url}")
        lines.append("")
    remaining = len(issues) - len(shown)
    if remaining > 0:
        lines.append(f"   ... and {remaining} more in this category.")
        lines.append("")
    return lines


def _render_issues(result: ScanResult, options: DisplayOptions) -> list[str]:
    lines: list[str] = []
    visible = [f for f in result.findings if options.shows(f.severity)]
    if not visible:
        lines.append("✔ No issues found. Your project is healthy! 🍎")
        return lines

    total = len(result.findings)
    count = f"{len(visible)} of {total}" if options.severity_filter else str(total)
    plural = "" if len(visible) == 1 else "s"
    lines.append(f"⚠ Found {count} issue{plural}")

    for severity in Severity:
        group = [f for f in visible if f.severity is severity]
        if not group:
            continue
        if options.show_all:
            limit = None
        else:
            limit = _INFO_LIMIT if severity is Severity.INFO else _GROUP_LIMIT
        lines.append("")
        lines.append(f"  {_GROUP_HEADINGS[severity]}:")
        lines.append("")
        lines.extend(_render_issue_group(group, limit))
    return lines


# ── large files / dependencies / security ───────────────────────────


def _render_large_files(result: ScanResult) -> list[str]:
    large = result.stats.large_files
    if not large:
        return []
    lines = ["", "  📏 LARGE FILES — Consider splitting:", ""]
    for lf in large[:_LARGE_FILE_LIMIT]:
        lines.append(f"   ◆ {lf.path} ({lf.lines} lines)")
    if len(large) > _LARGE_FILE_LIMIT:
        lines.append("")
        lines.append(f"   ... and {len(large) - _LARGE_FILE_LIMIT} more large files.")
    return lines


def _render_dependencies(result: ScanResult) -> list[str]:
    if not result.dependency_issues:
        return []
    lines = ["", "  📦 DEPENDENCIES:", ""]
    for dep in result.dependency_issues:
        lines.append(f"   {_SEV_ICON[dep.severity]} {dep.message}")
    return lines


def _render_security(result: ScanResult) -> list[str]:
    summary = result.security.summary
    if summary.total == 0:
        return []
    parts = [
        f"{summary.count(sev)} {sev.value}"
        for sev in VulnerabilitySeverity
        if summary.count(sev) > 0
    ]
    noun = "vulnerability" if summary.total == 1 else "vulnerabilities"
    lines = ["", f"  🔒 SECURITY — {summary.total} {noun} found ({', '.join(parts)})", ""]
    vulns = result.security.vulnerabilities
    for vuln in vulns[:_VULN_LIMIT]:
        cvss = f" (CVSS {vuln.cvss_score})" if vuln.cvss_score is not None else ""
        lines.append(f"   {_VULN_BADGE[vuln.severity]} {vuln.package}{cvss}")
        lines.append(f"     {vuln.title}")
        lines.append(f"     Affected: {vuln.vulnerable_versions}")
        if vuln.cwe:
            lines.append(f"     CWE: {', '.join(vuln.cwe)}")
        if vuln.url:
            lines.append(f"     📖 {vuln.url}")
        lines.append("")
    if len(vulns) > _VULN_LIMIT:
        lines.append(f"   ... and {len(vulns) - _VULN_LIMIT} more vulnerabilities.")
        lines.append("")
    lines.append("   💊 Run `bun update` or `bun update --latest` to fix.")
    return lines


# ── outro / policy ──────────────────────────────────────────────────


def outro_message(result: ScanResult) -> str:
    if result.score >= 90:
        return "Excellent! Your React project follows best practices. ✨"
    if result.score >= 60:
        critical = sum(1 for f in result.findings if f.severity is Severity.CRITICAL)
        if critical:
            plural = "" if critical == 1 else "s"
            return f"Fix the {critical} critical issue{plural} first."
        return "Some improvements possible. Check the performance suggestions above."
    return "⚠ Your project needs attention. Start with the critical issues."


def _render_policy(outcome: FailOnOutcome) -> list[str]:
    verdict = "FAILED" if outcome.should_fail else "PASSED"
    return [
        "",
        f"  🚦 FAIL-ON POLICY ({outcome.fail_on.value}): {verdict}",
        f"     issues: {outcome.issue_matches}  "
        f"dependencies: {outcome.dependency_matches}  "
        f"vulnerabilities: {outcome.vulnerability_matches}  "
        f"total: {outcome.total_matches}",
    ]


def render_dashboard(
    result: ScanResult,
    options: DisplayOptions | None = None,
    *,
    outcome: FailOnOutcome | None = None,
    width: int = 72,
) -> str:
    """Render the full dashboard as a multiline string."""
    options = options or DisplayOptions()
    lines: list[str] = []

    # ── header ──────────────────────────────────────────────────────
    lines.append("═" * width)
    lines.append("  ⚛  REACT TRIAGE")
    lines.append("═" * width)
    lines.append(f"  Health Score:    {render_health_bar(result.score)}")
    lines.append(f"  Scan Time:       {result.elapsed_ms}ms")
    lines.append(f"  Files:           {result.stats.total_files}")
    lines.append(f"  Issues:          {len(result.findings)}")
    lines.append(f"  Vulnerabilities: {result.security.summary.total}")
    lines.append("─" * width)

    lines.append("  📊 Project Vitals")
    lines.extend(_render_table(vitals_rows(result)))
    lines.append("─" * width)

    lines.extend(_render_dependencies(result))
    lines.extend(_render_security(result))
    lines.append("")
    lines.extend(_render_issues(result, options))
    lines.extend(_render_large_files(result))

    if outcome is not None:
        lines.extend(_render_policy(outcome))

    lines.append("")
    lines.append("─" * width)
    lines.append(f"  {outro_message(result)}")
    lines.append("═" * width)
    return "\n".join(lines) + "\n"
