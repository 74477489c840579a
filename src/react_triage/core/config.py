"""Scan configuration — defaults, overridable from ``.react-triage.yaml``."""

from __future__ import annotations

import logging
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Optional

import yaml

from react_triage.model import Severity
from react_triage.policy.fail_on import parse_severity

_logger = logging.getLogger(__name__)

CONFIG_FILENAMES = (".react-triage.yaml", ".react-triage.yml")


@dataclass(frozen=True)
class TriageConfig:
    """Immutable scan configuration.

    Every field has a working default, so ``TriageConfig()`` scans a project
    exactly like the CLI does without a config file.
    """

    linter_binary: str = "oxlint"
    package_manager: str = "bun"
    lint_timeout: float = 120.0
    audit_timeout: float = 60.0
    large_file_threshold: int = 400
    console_report_limit: int = 5
    extra_skip_prefixes: tuple[str, ...] = ()
    fail_on: Optional[Severity] = None

    def __post_init__(self) -> None:
        for name in ("linter_binary", "package_manager"):
            value = getattr(self, name)
            if not isinstance(value, str) or not value.strip():
                raise ValueError(f"{name} must be a non-empty string")
        for name in ("lint_timeout", "audit_timeout"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
                raise ValueError(f"{name} must be a positive number, got {value!r}")
        for name in ("large_file_threshold", "console_report_limit"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                raise ValueError(f"{name} must be a non-negative integer, got {value!r}")
        if isinstance(self.extra_skip_prefixes, str) or not all(
            isinstance(p, str) for p in self.extra_skip_prefixes
        ):
            raise ValueError("extra_skip_prefixes must be a list of strings")
        object.__setattr__(self, "extra_skip_prefixes", tuple(self.extra_skip_prefixes))
        if self.fail_on is not None and not isinstance(self.fail_on, Severity):
            object.__setattr__(self, "fail_on", parse_severity(str(self.fail_on)))

    @classmethod
    def from_mapping(cls, data: dict[str, Any]) -> "TriageConfig":
        """Build from a plain mapping, ignoring unknown keys."""
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            _logger.warning("Ignoring unknown config keys: %s", ", ".join(unknown))
        kwargs = {k: v for k, v in data.items() if k in known}
        if "extra_skip_prefixes" in kwargs and isinstance(kwargs["extra_skip_prefixes"], list):
            kwargs["extra_skip_prefixes"] = tuple(kwargs["extra_skip_prefixes"])
        return cls(**kwargs)

    @classmethod
    def from_yaml(cls, path: Path) -> "TriageConfig":
        """Load configuration from a YAML file.

        Raises:
            ValueError: the document is not a mapping or holds a bad value.
            OSError: the file cannot be read.
        """
        with open(path, encoding="utf-8") as f:
            try:
                data = yaml.safe_load(f) or {}
            except yaml.YAMLError as exc:
                raise ValueError(f"invalid YAML in {path}: {exc}") from exc
        if not isinstance(data, dict):
            raise ValueError(f"{path}: top-level YAML value must be a mapping")
        return cls.from_mapping(data)

    @classmethod
    def discover(cls, root: Path) -> "TriageConfig":
        """Load ``.react-triage.yaml``/``.yml`` from *root* if present."""
        for name in CONFIG_FILENAMES:
            candidate = root / name
            if candidate.is_file():
                _logger.debug("Loading config from %s", candidate)
                return cls.from_yaml(candidate)
        return cls()

    def with_overrides(self, **overrides: Any) -> "TriageConfig":
        """Return a copy with every non-``None`` override applied."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **changes) if changes else self
