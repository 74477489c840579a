"""Shared fixtures: throwaway React projects and fake command runners."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Callable

import pytest

from react_triage.utils.process import CommandError, CommandOutput


class FakeRunner:
    """Stands in for ``run_command``; answers by the command's subcommand.

    *responses* maps a tuple prefix of the argument list (for example
    ``("bun", "audit")``) to a :class:`CommandOutput` or an exception
    instance to raise.  Unmatched commands raise :class:`CommandError`, as
    if the binary were not installed.
    """

    def __init__(self, responses: dict | None = None) -> None:
        self.responses = dict(responses or {})
        self.calls: list[list[str]] = []

    def __call__(self, args, *, cwd=None, timeout=None) -> CommandOutput:
        args = [str(a) for a in args]
        self.calls.append(args)
        for prefix, response in self.responses.items():
            if tuple(args[: len(prefix)]) == prefix:
                if isinstance(response, BaseException):
                    raise response
                return response
        raise CommandError(f"command not found: {args[0]}")


def write_files(root: Path, files: dict[str, str]) -> None:
    for rel, content in files.items():
        path = root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")


@pytest.fixture
def make_project(tmp_path: Path) -> Callable[..., Path]:
    """Factory: ``make_project(manifest={...}, files={...})`` → project root."""

    def _make(
        manifest: dict | None = None,
        files: dict[str, str] | None = None,
        *,
        name: str = "app",
    ) -> Path:
        root = tmp_path / name
        root.mkdir(parents=True, exist_ok=True)
        if manifest is not None:
            (root / "package.json").write_text(json.dumps(manifest), encoding="utf-8")
        write_files(root, files or {})
        return root

    return _make


@pytest.fixture
def offline_runner() -> FakeRunner:
    """A runner for which every external tool is missing."""
    return FakeRunner()


@pytest.fixture
def offline_scan(monkeypatch) -> FakeRunner:
    """Route ``api.scan_project`` through collaborators with no external tools."""
    from react_triage import api
    from react_triage.analyzers.dependencies import DependencyAuditor
    from react_triage.analyzers.linter import OxlintAdapter
    from react_triage.analyzers.security_audit import SecurityAuditor
    from react_triage.core.runner import run_scan

    runner = FakeRunner()

    def _run_scan(root, config=None, **kwargs):
        return run_scan(
            root,
            config,
            linter=OxlintAdapter(runner=runner),
            dependency_auditor=DependencyAuditor(runner=runner),
            security_auditor=SecurityAuditor(runner=runner),
        )

    monkeypatch.setattr(api, "run_scan", _run_scan)
    return runner
