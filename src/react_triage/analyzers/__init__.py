"""Collaborators that feed the aggregator.

Each one inspects the project (or shells out to a tool) and degrades to a
neutral result instead of raising for expected failures: missing binary,
missing file, malformed output.

Class-based collaborators expose ``id`` and ``run(root)``:
    - OxlintAdapter: external linter → LintResult
    - DependencyAuditor: package.json + source tree → DependencyIssue list
    - SecurityAuditor: ``bun audit --json`` → SecurityAudit

Functional checks:
    - tsconfig.check_tsconfig
    - project_stats.gather_project_stats
    - client_components.check_async_client_components / check_console_statements
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Protocol


class Collaborator(Protocol):
    """Every class-based collaborator exposes ``id`` and ``run()``."""

    id: str

    def run(self, root: Path) -> Any:
        """Inspect the project under *root* and return a neutral-safe result."""
        ...


# Lazy imports to avoid circular dependencies
def __getattr__(name: str):
    if name == "OxlintAdapter":
        from .linter import OxlintAdapter
        return OxlintAdapter
    if name == "DependencyAuditor":
        from .dependencies import DependencyAuditor
        return DependencyAuditor
    if name == "SecurityAuditor":
        from .security_audit import SecurityAuditor
        return SecurityAuditor
    if name in ("check_tsconfig", "TsconfigCheck"):
        from . import tsconfig
        return getattr(tsconfig, name)
    if name == "gather_project_stats":
        from .project_stats import gather_project_stats
        return gather_project_stats
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
