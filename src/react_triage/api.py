"""
react_triage.api
================

Programmatic entrypoints for using react_triage as a backend engine.

Goals:
  - No argparse / CLI dependencies
  - JSON-friendly outputs that match the bundled ``scan_result`` schema

Usage::

    from react_triage.api import scan_project

    result, result_dict = scan_project("path/to/app", fail_on="critical")
    if result_dict["policy"] and result_dict["policy"]["should_fail"]:
        ...
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional

from react_triage.analyzers.manifest import MANIFEST_NAME, has_manifest
from react_triage.core.config import TriageConfig
from react_triage.core.runner import run_scan
from react_triage.model import Severity
from react_triage.model.scan_result import ScanResult
from react_triage.policy.fail_on import (
    FailOnOutcome,
    evaluate_fail_on_policy,
    parse_severity,
)


class MissingManifestError(FileNotFoundError):
    """The target directory has no package.json, so it is not a JS project."""


def _to_path(p: str | Path) -> Path:
    return p if isinstance(p, Path) else Path(p)


def resolve_fail_on(
    fail_on: Severity | str | None, config: TriageConfig
) -> Optional[Severity]:
    """Explicit argument wins over the config's ``fail_on``.

    Raises:
        ValueError: *fail_on* is not a known severity.
    """
    if fail_on is None:
        return config.fail_on
    if isinstance(fail_on, Severity):
        return fail_on
    return parse_severity(fail_on)


def run_gated_scan(
    root: str | Path,
    *,
    fail_on: Severity | str | None = None,
    config: TriageConfig | None = None,
) -> tuple[ScanResult, Optional[FailOnOutcome]]:
    """Scan *root* and evaluate the fail-on gate once.

    Returns the result and the gate outcome (``None`` without a gate).
    Raises the same errors as :func:`scan_project`.
    """
    root_path = _to_path(root).resolve()
    if not root_path.is_dir():
        raise FileNotFoundError(f"Path not found: {root_path}")
    if not has_manifest(root_path):
        raise MissingManifestError(f"No {MANIFEST_NAME} found in {root_path}")

    cfg = config if config is not None else TriageConfig.discover(root_path)
    gate = resolve_fail_on(fail_on, cfg)

    result = run_scan(root_path, cfg)
    return result, evaluate_fail_on_policy(result, gate)


def result_payload(result: ScanResult, outcome: Optional[FailOnOutcome]) -> dict[str, Any]:
    """``result.to_dict()`` plus the ``"policy"`` key."""
    payload = result.to_dict()
    payload["policy"] = outcome.to_dict() if outcome is not None else None
    return payload


def scan_project(
    root: str | Path,
    *,
    fail_on: Severity | str | None = None,
    config: TriageConfig | None = None,
) -> tuple[ScanResult, dict[str, Any]]:
    """Run the standard scan pipeline programmatically.

    Parameters
    ----------
    root:
        Directory containing ``package.json``.
    fail_on:
        Optional exact-match severity gate; overrides ``config.fail_on``.
    config:
        Scan configuration. Defaults to ``TriageConfig.discover(root)``.

    Returns
    -------
    ``(ScanResult, dict)`` — the dict is ``result.to_dict()`` plus a
    ``"policy"`` key holding the fail-on outcome (``None`` without a gate).

    Raises
    ------
    FileNotFoundError
        *root* does not exist.
    MissingManifestError
        *root* has no ``package.json``.
    ValueError
        *fail_on* or the discovered config is invalid.
    """
    result, outcome = run_gated_scan(root, fail_on=fail_on, config=config)
    return result, result_payload(result, outcome)
