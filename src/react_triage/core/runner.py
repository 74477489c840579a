"""Runner — fans the collaborators out, joins them, builds the ScanResult."""

from __future__ import annotations

import logging
import time
from concurrent.futures import Future, ThreadPoolExecutor
from pathlib import Path
from typing import Any, Callable, Optional

from jsonschema import ValidationError

from react_triage.analyzers.client_components import (
    check_async_client_components,
    check_console_statements,
)
from react_triage.analyzers.dependencies import DependencyAuditor
from react_triage.analyzers.linter import OxlintAdapter
from react_triage.analyzers.project_stats import gather_project_stats
from react_triage.analyzers.security_audit import SecurityAuditor
from react_triage.analyzers.tsconfig import TsconfigCheck, check_tsconfig
from react_triage.contracts.load import validate_instance
from react_triage.core.aggregate import aggregate
from react_triage.core.config import TriageConfig
from react_triage.core.discover import (
    DEFAULT_SKIP_PREFIXES,
    DEPENDENCY_SKIP_PREFIXES,
    RULE_EXTENSIONS,
    iter_source_files,
)
from react_triage.model.scan_result import (
    LintResult,
    ProjectStats,
    ScanResult,
    SecurityAudit,
)
from react_triage.rules.registry import RuleRegistry, RuleSweep, default_registry

_logger = logging.getLogger(__name__)


class ScanError(RuntimeError):
    """The scan could not start (e.g. the target is not a directory)."""


def _sweep_rules(registry: RuleRegistry, root: Path, skip: tuple[str, ...]) -> RuleSweep:
    sweep = registry.run_files(root, iter_source_files(root, RULE_EXTENSIONS, skip))
    if sweep.faults:
        _logger.warning(
            "%d rule fault(s) during sweep — affected rule/file pairs contributed no findings",
            len(sweep.faults),
        )
    return sweep


def run_scan(
    root: Path,
    config: TriageConfig | None = None,
    *,
    registry: RuleRegistry | None = None,
    linter: Optional[OxlintAdapter] = None,
    dependency_auditor: Optional[DependencyAuditor] = None,
    security_auditor: Optional[SecurityAuditor] = None,
    validate: bool = True,
) -> ScanResult:
    """Run every collaborator against *root* concurrently and aggregate.

    A collaborator that raises is logged and replaced by its neutral value;
    it never prevents the others from contributing.  ``elapsed_ms`` is wall
    clock time for the whole fan-out, not the sum of the collaborators.

    With ``validate=True`` a result that violates ``scan_result.schema.json``
    is logged at ERROR and still returned.

    Raises:
        ScanError: *root* is not a directory.
    """
    cfg = config if config is not None else TriageConfig()
    root = Path(root).resolve()
    if not root.is_dir():
        raise ScanError(f"not a directory: {root}")

    if registry is None:
        registry = default_registry()
    if linter is None:
        linter = OxlintAdapter(binary=cfg.linter_binary, timeout=cfg.lint_timeout)
    skip = DEFAULT_SKIP_PREFIXES + cfg.extra_skip_prefixes
    if dependency_auditor is None:
        dependency_auditor = DependencyAuditor(
            binary=cfg.package_manager,
            timeout=cfg.audit_timeout,
            skip_prefixes=DEPENDENCY_SKIP_PREFIXES + cfg.extra_skip_prefixes,
        )
    if security_auditor is None:
        security_auditor = SecurityAuditor(
            binary=cfg.package_manager, timeout=cfg.audit_timeout
        )

    # ── 1. fan out ───────────────────────────────────────────────────
    tasks: dict[str, tuple[Callable[[], Any], Any]] = {
        "linter": (lambda: linter.run(root), LintResult()),
        "dependencies": (lambda: dependency_auditor.run(root), []),
        "tsconfig": (lambda: check_tsconfig(root), TsconfigCheck()),
        "stats": (
            lambda: gather_project_stats(
                root,
                large_file_threshold=cfg.large_file_threshold,
                skip_prefixes=skip,
            ),
            ProjectStats(),
        ),
        "async_client": (
            lambda: check_async_client_components(root, skip_prefixes=skip),
            [],
        ),
        "console": (
            lambda: check_console_statements(
                root, limit=cfg.console_report_limit, skip_prefixes=skip
            ),
            [],
        ),
        "rules": (lambda: _sweep_rules(registry, root, skip), RuleSweep()),
        "security": (lambda: security_auditor.run(root), SecurityAudit()),
    }

    started = time.perf_counter()
    outputs: dict[str, Any] = {}
    with ThreadPoolExecutor(max_workers=len(tasks), thread_name_prefix="triage") as pool:
        futures: dict[str, Future] = {
            name: pool.submit(fn) for name, (fn, _neutral) in tasks.items()
        }
        # ── 2. join (all-complete barrier) ───────────────────────────
        for name, future in futures.items():
            try:
                outputs[name] = future.result()
            except Exception:
                _logger.exception("Collaborator '%s' raised an exception — skipped", name)
                outputs[name] = tasks[name][1]
    elapsed_ms = round((time.perf_counter() - started) * 1000)

    # ── 3. aggregate + score ─────────────────────────────────────────
    result = aggregate(
        lint=outputs["linter"],
        tsconfig=outputs["tsconfig"],
        stats=outputs["stats"],
        async_client=outputs["async_client"],
        console=outputs["console"],
        rule_findings=outputs["rules"].findings,
        dependency_issues=outputs["dependencies"],
        security=outputs["security"],
        elapsed_ms=elapsed_ms,
    )

    # ── 4. validate output against schema ────────────────────────────
    if validate:
        try:
            validate_instance(result.to_dict(), "scan_result.schema.json")
        except ValidationError:
            _logger.exception("Scan result does not match scan_result.schema.json")
    _logger.debug(
        "Scan of %s finished in %d ms: %d findings, score %d",
        root,
        result.elapsed_ms,
        len(result.findings),
        result.score,
    )
    return result
