"""Multi-format exporters for scan results.

Supports:

*  **JSON** — machine-readable, suitable for CI artifact storage.
*  **Markdown** — human-readable, suitable for PR comments and issues.
*  **HTML** — self-contained HTML document with embedded CSS.

All exporters accept a :class:`ScanResult` and produce a string.
"""

from __future__ import annotations

import html as html_mod
from collections import Counter
from datetime import datetime, timezone

from react_triage.model import Severity
from react_triage.model.finding import Finding
from react_triage.model.scan_result import ScanResult
from react_triage.utils.json_norm import stable_json_dumps

_GROUP_LIMIT = 5

_SEVERITY_TITLES: dict[Severity, str] = {
    Severity.CRITICAL: "🚨 Critical",
    Severity.PERFORMANCE: "🚀 Performance",
    Severity.BEST_PRACTICE: "💡 Best Practices",
    Severity.INFO: "○ Info",
}


def _md_escape(text: str) -> str:
    return text.replace("|", "\\|")


def _loc(f: Finding) -> str:
    return f"{f.location.path}:{f.location.line}" if f.location.path else ""


# ════════════════════════════════════════════════════════════════════
# JSON exporter
# ════════════════════════════════════════════════════════════════════


def export_json(result: ScanResult, *, indent: int = 2) -> str:
    """Export a ``ScanResult`` as indented, key-sorted JSON."""
    return stable_json_dumps(result.to_dict(), indent=indent)


# ════════════════════════════════════════════════════════════════════
# Markdown exporter
# ════════════════════════════════════════════════════════════════════


def export_markdown(result: ScanResult, *, show_all: bool = False) -> str:
    """Export a ``ScanResult`` as a Markdown report.

    Issues are grouped by severity; each group lists at most five entries
    unless *show_all* is set.
    """
    lines: list[str] = []
    now = datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M UTC")
    stats = result.stats

    lines.append("# ⚛️ React Triage Report")
    lines.append("")
    lines.append(f"**Generated:** {now}  ")
    lines.append(f"**Health Score:** {result.score}/100  ")
    lines.append(f"**Scan Time:** {result.elapsed_ms}ms  ")
    lines.append(f"**Issues:** {len(result.findings)}")
    lines.append("")

    # Project stats
    lines.append("## 📊 Project Stats")
    lines.append("")
    lines.append("| Metric | Value |")
    lines.append("|--------|-------|")
    lines.append(f"| React | {stats.react_version or 'N/A'} |")
    lines.append(f"| React DOM | {stats.react_dom_version or 'N/A'} |")
    lines.append(f"| Next.js | {stats.next_version or 'N/A'} |")
    lines.append(f"| Files Scanned | {stats.total_files} |")
    lines.append(
        f"| Client / Server Components | "
        f"{stats.client_components} / {stats.server_components} |"
    )
    lines.append(f"| Strict Mode | {'Enabled' if stats.strict_mode else 'Disabled'} |")
    lines.append(f"| JSX Transform | {stats.jsx_transform or 'N/A'} |")
    lines.append(f"| TS Target | {stats.target or 'N/A'} |")
    lines.append("")

    # Severity breakdown
    sev_counts = Counter(f.severity for f in result.findings)
    if sev_counts:
        lines.append("## Issues")
        lines.append("")
        lines.append("| Severity | Count |")
        lines.append("|----------|------:|")
        for sev in Severity:
            c = sev_counts.get(sev, 0)
            if c:
                lines.append(f"| {sev.value} | {c} |")
        lines.append("")

        for sev in Severity:
            group = [f for f in result.findings if f.severity is sev]
            if not group:
                continue
            shown = group if show_all else group[:_GROUP_LIMIT]
            lines.append(f"### {_SEVERITY_TITLES[sev]} ({len(group)})")
            lines.append("")
            for f in shown:
                loc = _loc(f)
                where = f" `{loc}`" if loc else ""
                lines.append(f"- **{f.rule_id}**{where} — {f.message}")
                if f.help:
                    lines.append(f"  - 💊 {f.help}")
                if f.url:
                    lines.append(f"  - 📖 [Docs]({f.url})")
            remaining = len(group) - len(shown)
            if remaining > 0:
                lines.append(f"- _... and {remaining} more._")
            lines.append("")
    else:
        lines.append("No issues found. 🍎")
        lines.append("")

    if stats.large_files:
        lines.append("## 📏 Large Files")
        lines.append("")
        lines.append("| File | Lines |")
        lines.append("|------|------:|")
        for lf in stats.large_files:
            lines.append(f"| `{_md_escape(lf.path)}` | {lf.lines} |")
        lines.append("")

    if result.dependency_issues:
        lines.append("## 📦 Dependency Issues")
        lines.append("")
        lines.append("| Type | Severity | Message |")
        lines.append("|------|----------|---------|")
        for dep in result.dependency_issues:
            lines.append(
                f"| {dep.kind.value} | {dep.severity.value} | {_md_escape(dep.message)} |"
            )
        lines.append("")

    security = result.security
    if security.summary.total:
        s = security.summary
        lines.append("## 🔒 Security Vulnerabilities")
        lines.append("")
        lines.append(
            f"{s.total} total — {s.critical} critical, {s.high} high, "
            f"{s.moderate} moderate, {s.low} low"
        )
        lines.append("")
        lines.append("| Severity | Package | Title | Affected | CVSS |")
        lines.append("|----------|---------|-------|----------|-----:|")
        for v in security.vulnerabilities:
            cvss = "" if v.cvss_score is None else str(v.cvss_score)
            title = f"[{_md_escape(v.title)}]({v.url})" if v.url else _md_escape(v.title)
            lines.append(
                f"| {v.severity.value} | `{v.package}` | {title} | "
                f"`{_md_escape(v.vulnerable_versions)}` | {cvss} |"
            )
        lines.append("")

    lines.append("---")
    lines.append("*Generated by react-triage*")
    lines.append("")
    return "\n".join(lines)


# ════════════════════════════════════════════════════════════════════
# HTML exporter
# ════════════════════════════════════════════════════════════════════

_SEVERITY_COLOR = {
    "critical": "#dc3545",
    "performance": "#fd7e14",
    "best-practice": "#0d6efd",
    "info": "#6c757d",
}

_HTML_TEMPLATE = """\
<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="utf-8">
<title>React Triage Report</title>
<style>
  body {{ font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif; margin: 2rem; color: #212529; }}
  h1 {{ color: #343a40; }}
  .summary {{ background: #f8f9fa; padding: 1rem; border-radius: 6px; margin-bottom: 1.5rem; }}
  .badge {{ display: inline-block; padding: 2px 8px; border-radius: 4px; color: #fff; font-size: 0.85em; font-weight: 600; }}
  table {{ border-collapse: collapse; width: 100%; margin-bottom: 1.5rem; }}
  th, td {{ text-align: left; padding: 6px 12px; border-bottom: 1px solid #dee2e6; }}
  th {{ background: #e9ecef; }}
  .finding {{ margin-bottom: 0.75rem; }}
  footer {{ margin-top: 2rem; color: #6c757d; font-size: 0.85em; }}
</style>
</head>
<body>
{body}
</body>
</html>
"""


def _badge(severity: str) -> str:
    color = _SEVERITY_COLOR.get(severity, "#6c757d")
    return f'<span class="badge" style="background:{color}">{html_mod.escape(severity.upper())}</span>'


def export_html(result: ScanResult, *, show_all: bool = False) -> str:
    """Export a ``ScanResult`` as a self-contained HTML document."""
    parts: list[str] = []
    now = datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M UTC")

    parts.append("<h1>React Triage Report</h1>")
    parts.append('<div class="summary">')
    parts.append(f"<p><strong>Generated:</strong> {now}</p>")
    parts.append(f"<p><strong>Health Score:</strong> {result.score}/100</p>")
    parts.append(f"<p><strong>Issues:</strong> {len(result.findings)}</p>")
    parts.append(
        f"<p><strong>Vulnerabilities:</strong> {result.security.summary.total}</p>"
    )
    parts.append("</div>")

    for sev in Severity:
        group = [f for f in result.findings if f.severity is sev]
        if not group:
            continue
        shown = group if show_all else group[:_GROUP_LIMIT]
        parts.append(f"<h2>{_badge(sev.value)} {len(group)}</h2>")
        for f in shown:
            loc = _loc(f)
            where = f" <code>{html_mod.escape(loc)}</code>" if loc else ""
            parts.append(
                f'<div class="finding"><strong>{html_mod.escape(f.rule_id)}</strong>'
                f"{where} &mdash; {html_mod.escape(f.message)}</div>"
            )

    if result.dependency_issues:
        parts.append("<h2>Dependency Issues</h2>")
        parts.append("<table><tr><th>Severity</th><th>Type</th><th>Message</th></tr>")
        for dep in result.dependency_issues:
            parts.append(
                f"<tr><td>{_badge(dep.severity.value)}</td>"
                f"<td>{html_mod.escape(dep.kind.value)}</td>"
                f"<td>{html_mod.escape(dep.message)}</td></tr>"
            )
        parts.append("</table>")

    if result.security.vulnerabilities:
        parts.append("<h2>Security Vulnerabilities</h2>")
        parts.append("<table><tr><th>Severity</th><th>Package</th><th>Title</th></tr>")
        for v in result.security.vulnerabilities:
            parts.append(
                f"<tr><td>{html_mod.escape(v.severity.value)}</td>"
                f"<td><code>{html_mod.escape(v.package)}</code></td>"
                f"<td>{html_mod.escape(v.title)}</td></tr>"
            )
        parts.append("</table>")

    parts.append(f"<footer>Generated by react-triage &bull; {now}</footer>")
    return _HTML_TEMPLATE.format(body="\n".join(parts))


# ════════════════════════════════════════════════════════════════════
# Dispatcher
# ════════════════════════════════════════════════════════════════════


def export_result(
    result: ScanResult,
    fmt: str = "json",
    *,
    show_all: bool = False,
) -> str:
    """Export a ``ScanResult`` in the specified format.

    Raises
    ------
    ValueError
        If *fmt* is not recognised.
    """
    if fmt == "json":
        return export_json(result)
    if fmt in ("markdown", "md"):
        return export_markdown(result, show_all=show_all)
    if fmt == "html":
        return export_html(result, show_all=show_all)
    raise ValueError(f"Unknown export format: {fmt!r} (use json|markdown|html)")
