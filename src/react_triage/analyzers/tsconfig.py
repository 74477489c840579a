"""tsconfig.json checks: strict mode, JSX transform and compile target."""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

from react_triage.model import Severity
from react_triage.model.finding import Finding, Location
from react_triage.rules import ids

_logger = logging.getLogger(__name__)

TSCONFIG_NAME = "tsconfig.json"

_LINE_COMMENT_RE = re.compile(r"//.*$", re.MULTILINE)
_BLOCK_COMMENT_RE = re.compile(r"/\*[\s\S]*?\*/")
_TRAILING_COMMA_RE = re.compile(r",\s*([\]}])")

MODERN_JSX_TRANSFORMS = ("react-jsx", "react-jsxdev")
OLD_TARGETS = ("es5", "es6", "es2015", "es2016", "es2017", "es2018", "es2019")


@dataclass(frozen=True, slots=True)
class TsconfigCheck:
    findings: tuple[Finding, ...] = ()
    strict_mode: bool = False
    jsx_transform: Optional[str] = None
    target: Optional[str] = None


def parse_lenient_json(text: str) -> Any:
    """Parse JSON with ``//`` and ``/* */`` comments and trailing commas.

    Comment stripping is textual: a ``//`` inside a string value (for
    example a URL in ``paths``) truncates that line.
    """
    cleaned = _LINE_COMMENT_RE.sub("", text)
    cleaned = _BLOCK_COMMENT_RE.sub("", cleaned)
    cleaned = _TRAILING_COMMA_RE.sub(r"\1", cleaned)
    return json.loads(cleaned)


def _finding(rule_id: str, severity: Severity, message: str) -> Finding:
    return Finding(
        rule_id=rule_id,
        severity=severity,
        message=message,
        location=Location(path=TSCONFIG_NAME, line=0, column=0),
    )


def check_tsconfig(root: Path) -> TsconfigCheck:
    path = root / TSCONFIG_NAME
    if not path.is_file():
        return TsconfigCheck(
            findings=(
                _finding(
                    ids.TSCONFIG_MISSING,
                    Severity.BEST_PRACTICE,
                    "No tsconfig.json found — TypeScript recommended for React projects",
                ),
            )
        )

    try:
        tsconfig = parse_lenient_json(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, ValueError) as exc:
        _logger.warning("Cannot parse %s: %s — tsconfig checks skipped", path, exc)
        return TsconfigCheck()
    if not isinstance(tsconfig, dict):
        return TsconfigCheck()

    options = tsconfig.get("compilerOptions") or {}
    if not isinstance(options, dict):
        options = {}
    findings: list[Finding] = []

    strict_mode = options.get("strict") is True
    if not strict_mode:
        findings.append(
            _finding(
                ids.TSCONFIG_STRICT,
                Severity.BEST_PRACTICE,
                '"strict" is not enabled in tsconfig.json — recommended for modern React',
            )
        )

    jsx = options.get("jsx")
    jsx_transform = str(jsx) if jsx else None
    if jsx_transform and jsx_transform not in MODERN_JSX_TRANSFORMS:
        findings.append(
            _finding(
                ids.TSCONFIG_JSX_TRANSFORM,
                Severity.PERFORMANCE,
                f'JSX transform is "{jsx_transform}" — use "react-jsx" for smaller '
                "bundles (no React imports needed). This also causes false-positive "
                '"react-in-jsx-scope" warnings across every JSX file; switching to '
                '"react-jsx" eliminates them all automatically.',
            )
        )

    raw_target = options.get("target")
    target = str(raw_target) if raw_target else None
    if target and target.lower() in OLD_TARGETS:
        findings.append(
            _finding(
                ids.TSCONFIG_TARGET,
                Severity.PERFORMANCE,
                f'Target is "{target}" — consider ES2020+ to reduce polyfill bloat',
            )
        )

    return TsconfigCheck(
        findings=tuple(findings),
        strict_mode=strict_mode,
        jsx_transform=jsx_transform,
        target=target,
    )
