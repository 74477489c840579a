"""oxlint adapter — run the external linter and map its JSON diagnostics."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from react_triage.model.finding import Finding, Location
from react_triage.model.scan_result import LintResult
from react_triage.rules.lint_severity import classify_lint_code, extract_rule_name
from react_triage.utils.process import CommandError, CommandRunner, run_command

_logger = logging.getLogger(__name__)

# Plugins, categories and individual overrides for a React/Next.js triage.
# no-ternary and no-array-sort are allowed because the heuristic rules
# rendering-conditional-render and js-tosorted-immutable cover them.
OXLINT_FLAGS: tuple[str, ...] = (
    "--format", "json",
    "--react-plugin",
    "--nextjs-plugin",
    "--react-perf-plugin",
    "--jsx-a11y-plugin",
    "-D", "correctness",
    "-D", "perf",
    "-D", "suspicious",
    "-W", "style",
    "--deny", "no-barrel-file",
    "--deny", "no-css-tags",
    "--deny", "next-script-for-ga",
    "--allow", "no-ternary",
    "--allow", "no-array-sort",
)


# Diagnostics without a code (parse errors and the like) still surface.
UNCODED_RULE = "oxlint"


def _text(value: Any) -> str | None:
    return value if isinstance(value, str) and value else None


def _position(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        return 0
    return max(0, value)


def _diagnostic_to_finding(diag: dict[str, Any]) -> Finding:
    code = _text(diag.get("code")) or ""
    labels = diag.get("labels")
    first = labels[0] if isinstance(labels, list) and labels else None
    span = first.get("span") if isinstance(first, dict) else None
    if not isinstance(span, dict):
        span = {}
    return Finding(
        rule_id=extract_rule_name(code) or UNCODED_RULE,
        severity=classify_lint_code(code),
        message=_text(diag.get("message")) or "",
        location=Location(
            path=_text(diag.get("filename")) or "",
            line=_position(span.get("line")),
            column=_position(span.get("column")),
        ),
        help=_text(diag.get("help")),
        url=_text(diag.get("url")),
    )


def parse_oxlint_output(data: dict[str, Any]) -> LintResult:
    """Map a decoded oxlint JSON document onto :class:`LintResult`.

    Entries that are not objects are dropped; fields of the wrong type fall
    back to empty values so every finding stays well-formed.
    """
    diagnostics = data.get("diagnostics")
    if not isinstance(diagnostics, list):
        diagnostics = []
    findings = [
        _diagnostic_to_finding(diag) for diag in diagnostics if isinstance(diag, dict)
    ]
    return LintResult(
        findings=tuple(findings),
        file_count=_position(data.get("number_of_files")),
    )


class OxlintAdapter:
    """Run ``oxlint`` against a project and return its findings."""

    id = "oxlint"

    def __init__(
        self,
        binary: str = "oxlint",
        timeout: float = 120.0,
        runner: CommandRunner = run_command,
    ) -> None:
        self.binary = binary
        self.timeout = timeout
        self._runner = runner

    def build_args(self, root: Path) -> list[str]:
        return [self.binary, str(root), *OXLINT_FLAGS]

    def run(self, root: Path) -> LintResult:
        try:
            output = self._runner(self.build_args(root), cwd=root, timeout=self.timeout)
        except CommandError as exc:
            _logger.warning("oxlint unavailable: %s — lint results skipped", exc)
            return LintResult()

        try:
            data = json.loads(output.stdout)
        except json.JSONDecodeError:
            if "No files found" in output.stderr:
                _logger.info("oxlint found no files under %s", root)
            else:
                _logger.warning(
                    "oxlint produced no JSON (exit %d) — lint results skipped",
                    output.returncode,
                )
            return LintResult()

        if not isinstance(data, dict):
            _logger.warning("oxlint JSON is not an object — lint results skipped")
            return LintResult()
        return parse_oxlint_output(data)
