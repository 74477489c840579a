"""Repo-local shim.

This repo uses a `src/` layout. Subprocess-based tests invoke
`python -m react_triage` without setting PYTHONPATH, which would normally fail.

This shim makes the package importable from the repo root by extending the
package path to include `src/react_triage/` and then running the real
package initialiser in this module's namespace.
"""

from __future__ import annotations

from pathlib import Path

# Make submodules (e.g. `react_triage.model`) resolve to the real implementation.
_REAL = Path(__file__).resolve().parent.parent / "src" / "react_triage"
if _REAL.exists():
    __path__.append(str(_REAL))  # type: ignore[name-defined]

    _real_init = _REAL / "__init__.py"
    exec(compile(_real_init.read_text(encoding="utf-8"), str(_real_init), "exec"))
