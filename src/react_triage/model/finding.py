"""Finding — the normalized output of every detector for a single issue."""

from __future__ import annotations

import hashlib
from dataclasses import dataclass
from typing import ClassVar, Optional

from . import Severity


@dataclass(frozen=True, slots=True)
class Location:
    """Source location of a finding (path relative to the scan root).

    ``line`` and ``column`` are 1-based; ``Location.UNPLACED`` (empty path,
    line 0) marks project-wide findings.
    """

    path: str
    line: int = 0
    column: int = 0

    UNPLACED: ClassVar["Location"]


Location.UNPLACED = Location(path="", line=0, column=0)


@dataclass(frozen=True, slots=True)
class Finding:
    """Immutable finding emitted by a rule or collaborator."""

    rule_id: str
    severity: Severity
    message: str
    location: Location
    help: Optional[str] = None
    url: Optional[str] = None

    @property
    def fingerprint(self) -> str:
        return make_fingerprint(
            self.rule_id, self.location.path, self.location.line, self.message
        )

    # ── serialisation ───────────────────────────────────────────────

    def to_dict(self) -> dict:
        d: dict = {
            "rule": self.rule_id,
            "severity": self.severity.value,
            "message": self.message,
            "file": self.location.path,
            "line": self.location.line,
            "column": self.location.column,
            "fingerprint": self.fingerprint,
        }
        if self.help:
            d["help"] = self.help
        if self.url:
            d["url"] = self.url
        return d


def make_fingerprint(rule_id: str, rel_path: str, line: int, message: str) -> str:
    """Deterministic fingerprint: sha256(rule|path|line|message)."""
    rel_path = rel_path.replace("\\", "/")
    payload = "|".join([rule_id, rel_path, str(line), message.strip()])
    return "sha256:" + hashlib.sha256(payload.encode()).hexdigest()
