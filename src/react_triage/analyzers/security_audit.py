"""Security audit via ``bun audit --json`` (npm bulk advisory format)."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Optional

from react_triage.model import VULNERABILITY_ORDER, VulnerabilitySeverity
from react_triage.model.scan_result import SecurityAudit, Vulnerability
from react_triage.utils.process import CommandError, CommandRunner, run_command

_logger = logging.getLogger(__name__)


def extract_json_object(text: str) -> Optional[dict[str, Any]]:
    """Decode the JSON object spanning the first ``{`` to the last ``}``.

    bun may print informational lines (lockfile migration and the like)
    before the payload even with ``--json``.
    """
    first = text.find("{")
    last = text.rfind("}")
    if first == -1 or last == -1 or last < first:
        return None
    candidate = text[first : last + 1].strip()
    if not candidate:
        return None
    try:
        parsed = json.loads(candidate)
    except json.JSONDecodeError:
        return None
    return parsed if isinstance(parsed, dict) else None


def normalize_severity(raw: Any) -> VulnerabilitySeverity:
    """Case-insensitive mapping; anything unrecognised is ``low``."""
    try:
        return VulnerabilitySeverity(str(raw).lower())
    except ValueError:
        return VulnerabilitySeverity.LOW


def _field(advisory: dict[str, Any], key: str, default: str) -> str:
    value = advisory.get(key)
    if value is None or value == "":
        return default
    return value if isinstance(value, str) else str(value)


def _advisory_id(raw: Any) -> int | str:
    if isinstance(raw, bool) or not isinstance(raw, (int, str)):
        return 0 if raw is None else str(raw)
    return raw


def _advisory_to_vulnerability(package: str, advisory: dict[str, Any]) -> Vulnerability:
    cvss = advisory.get("cvss")
    score = cvss.get("score") if isinstance(cvss, dict) else None
    cwe = advisory.get("cwe")
    if isinstance(cwe, str):
        cwe = [cwe]
    elif not isinstance(cwe, list):
        cwe = []
    return Vulnerability(
        id=_advisory_id(advisory.get("id")),
        package=package,
        title=_field(advisory, "title", "Unknown vulnerability"),
        severity=normalize_severity(advisory.get("severity") or "low"),
        url=_field(advisory, "url", ""),
        vulnerable_versions=_field(advisory, "vulnerable_versions", "*"),
        cwe=tuple(str(c) for c in cwe),
        cvss_score=(
            float(score)
            if isinstance(score, (int, float)) and not isinstance(score, bool)
            else None
        ),
    )


def parse_audit_output(text: str) -> SecurityAudit:
    """Map raw audit stdout onto a sorted :class:`SecurityAudit`."""
    raw = extract_json_object(text)
    if not raw:
        return SecurityAudit()
    vulns: list[Vulnerability] = []
    for package, advisories in raw.items():
        if not isinstance(advisories, list):
            continue
        for advisory in advisories:
            if isinstance(advisory, dict):
                vulns.append(_advisory_to_vulnerability(package, advisory))
    vulns.sort(key=lambda v: VULNERABILITY_ORDER[v.severity])
    return SecurityAudit.from_vulnerabilities(vulns)


class SecurityAuditor:
    """Run the package manager's audit command; empty result on any failure."""

    id = "security"

    def __init__(
        self,
        binary: str = "bun",
        timeout: float = 60.0,
        runner: CommandRunner = run_command,
    ) -> None:
        self.binary = binary
        self.timeout = timeout
        self._runner = runner

    def run(self, root: Path) -> SecurityAudit:
        try:
            output = self._runner(
                [self.binary, "audit", "--json"], cwd=root, timeout=self.timeout
            )
        except CommandError as exc:
            _logger.warning("%s audit unavailable: %s — security audit skipped", self.binary, exc)
            return SecurityAudit()
        # exit 1 means vulnerabilities were found; only the payload matters
        return parse_audit_output(output.stdout)
