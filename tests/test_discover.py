"""Tests for source-file discovery."""

from __future__ import annotations

from pathlib import Path

from conftest import write_files
from react_triage.core.discover import (
    DEPENDENCY_SCAN_EXTENSIONS,
    DEPENDENCY_SKIP_PREFIXES,
    is_skipped,
    iter_source_files,
)


def _rel(root: Path, paths) -> list[str]:
    return [p.relative_to(root).as_posix() for p in paths]


class TestIterSourceFiles:
    def test_sorted_and_filtered(self, tmp_path: Path):
        write_files(
            tmp_path,
            {
                "src/z.tsx": "",
                "src/a.ts": "",
                "src/readme.md": "",
                "app/page.jsx": "",
                "index.js": "",
                "node_modules/react/index.js": "",
                ".next/cache/x.js": "",
                "build/out.js": "",
                "dist/bundle.js": "",
                ".git/hooks/pre-commit.js": "",
            },
        )
        assert _rel(tmp_path, iter_source_files(tmp_path)) == [
            "app/page.jsx",
            "index.js",
            "src/a.ts",
            "src/z.tsx",
        ]

    def test_prefix_matching_is_textual(self, tmp_path: Path):
        write_files(tmp_path, {"distribution/x.ts": "", "builders/y.ts": "", "src/z.ts": ""})
        assert _rel(tmp_path, iter_source_files(tmp_path)) == ["src/z.ts"]

    def test_extension_match_ignores_case(self, tmp_path: Path):
        write_files(tmp_path, {"App.TSX": ""})
        assert _rel(tmp_path, iter_source_files(tmp_path)) == ["App.TSX"]

    def test_dependency_scan_extensions(self, tmp_path: Path):
        write_files(
            tmp_path,
            {"a.mjs": "", "b.cts": "", "coverage/c.js": "", "out/d.js": "", "e.ts": ""},
        )
        files = iter_source_files(tmp_path, DEPENDENCY_SCAN_EXTENSIONS, DEPENDENCY_SKIP_PREFIXES)
        assert _rel(tmp_path, files) == ["a.mjs", "b.cts", "e.ts"]

    def test_missing_root(self, tmp_path: Path):
        assert list(iter_source_files(tmp_path / "nope")) == []


class TestIsSkipped:
    def test_prefixes(self):
        assert is_skipped("node_modules/x.js", ("node_modules",))
        assert not is_skipped("src/node_modules.ts", ("node_modules",))
