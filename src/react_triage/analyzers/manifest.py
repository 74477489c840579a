"""package.json access shared by the dependency auditor and project stats."""

from __future__ import annotations

import json
import logging
import re
from pathlib import Path
from typing import Any, Optional

_logger = logging.getLogger(__name__)

MANIFEST_NAME = "package.json"

_RANGE_OPERATORS_RE = re.compile(r"[\^~>=<]*")


def strip_range(version: str) -> str:
    """Drop range operators: ``^18.2.0`` → ``18.2.0``, ``>=14`` → ``14``."""
    return _RANGE_OPERATORS_RE.sub("", version)


def has_manifest(root: Path) -> bool:
    return (root / MANIFEST_NAME).is_file()


def read_manifest(root: Path) -> Optional[dict[str, Any]]:
    """Decode ``package.json`` under *root*; ``None`` if absent or unreadable."""
    path = root / MANIFEST_NAME
    if not path.is_file():
        return None
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
        _logger.warning("Cannot read %s: %s", path, exc)
        return None
    if not isinstance(data, dict):
        _logger.warning("%s is not a JSON object", path)
        return None
    return data


def dependency_map(manifest: dict[str, Any], key: str) -> dict[str, str]:
    """``dependencies``/``devDependencies`` as a name → range map."""
    section = manifest.get(key) or {}
    if not isinstance(section, dict):
        return {}
    return {str(k): str(v) for k, v in section.items()}


def script_commands(manifest: dict[str, Any]) -> list[str]:
    scripts = manifest.get("scripts") or {}
    if not isinstance(scripts, dict):
        return []
    return [v for v in scripts.values() if isinstance(v, str)]
