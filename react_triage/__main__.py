"""Repo-root shim for `python -m react_triage`.

Executes the real CLI implementation from `src/react_triage/__main__.py`.
"""

from __future__ import annotations

from pathlib import Path
import importlib.util


def main(argv: list[str] | None = None) -> int:
    """Invoke the real CLI implementation from the `src/` tree.

    Tests may call `react_triage.__main__.main([...])` directly; match that
    signature here and forward to the implementation.
    """
    repo_root = Path(__file__).resolve().parents[1]
    cli_path = repo_root / "src" / "react_triage" / "__main__.py"

    spec = importlib.util.spec_from_file_location("_react_triage_cli", cli_path)
    if spec is None or spec.loader is None:
        raise RuntimeError("Unable to load CLI module")
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)

    # The src CLI exposes `main(argv: list[str] | None) -> int`.
    return int(module.main(argv))


if __name__ == "__main__":
    raise SystemExit(main())
