"""Tests for the project snapshot and the project-wide source checks."""

from __future__ import annotations

from react_triage.analyzers.client_components import (
    check_async_client_components,
    check_console_statements,
)
from react_triage.analyzers.project_stats import gather_project_stats, is_client_component
from react_triage.model import Severity
from react_triage.model.finding import Location

CLIENT = '"use client";\nexport function Button() {\n  return <button />;\n}\n'
SERVER = "export default function Page() {\n  return <main />;\n}\n"


class TestIsClientComponent:
    def test_directive_near_top(self):
        assert is_client_component("'use client'\nexport {}")
        assert is_client_component('// comment\n"use client";')

    def test_directive_too_late(self):
        assert not is_client_component(" " * 200 + '"use client";')


class TestGatherProjectStats:
    def test_versions_and_component_split(self, make_project):
        root = make_project(
            manifest={
                "dependencies": {"react": "^18.2.0", "react-dom": "^18.2.0"},
                "devDependencies": {"next": "~14.1.0"},
            },
            files={
                "app/page.tsx": SERVER,
                "components/Button.tsx": CLIENT,
                "components/Card.jsx": CLIENT,
                "lib/util.ts": "export const x = 1;\n",
                "node_modules/pkg/index.js": "module.exports = {};\n",
                ".next/server/page.js": "export {};\n",
                "styles/app.css": "body {}\n",
            },
        )

        stats = gather_project_stats(root)

        assert stats.react_version == "18.2.0"
        assert stats.react_dom_version == "18.2.0"
        assert stats.next_version == "14.1.0"
        assert stats.total_files == 4
        assert stats.client_components == 2
        assert stats.server_components == 1
        assert stats.large_files == ()
        assert stats.strict_mode is False
        assert stats.target is None

    def test_no_manifest(self, tmp_path):
        stats = gather_project_stats(tmp_path)
        assert stats.react_version is None
        assert stats.next_version is None
        assert stats.total_files == 0

    def test_large_files_sorted_descending(self, make_project):
        root = make_project(
            manifest={},
            files={
                "a.ts": "x\n" * 5,
                "b.ts": "x\n" * 9,
                "c.ts": "x\n" * 2,
            },
        )
        stats = gather_project_stats(root, large_file_threshold=4)
        # a trailing newline counts as one more line
        assert [(lf.path, lf.lines) for lf in stats.large_files] == [("b.ts", 10), ("a.ts", 6)]

    def test_extra_skip_prefixes(self, make_project):
        root = make_project(
            manifest={},
            files={"src/a.ts": "", "generated/b.ts": ""},
        )
        stats = gather_project_stats(root, skip_prefixes=("node_modules", "generated"))
        assert stats.total_files == 1


class TestAsyncClientComponents:
    def test_flags_async_client_export(self, make_project):
        root = make_project(
            files={
                "app/Profile.tsx": '"use client";\nexport default async function Profile() {}\n',
                "app/page.tsx": "export default async function Page() {}\n",
                "app/client.ts": '"use client";\nexport async function helper() {}\n',
            }
        )
        findings = check_async_client_components(root)
        assert len(findings) == 1
        finding = findings[0]
        assert finding.rule_id == "async-client-component"
        assert finding.severity == Severity.CRITICAL
        assert (finding.location.path, finding.location.line) == ("app/Profile.tsx", 1)


class TestConsoleStatements:
    def test_lists_each_call_under_limit(self, make_project):
        root = make_project(
            files={"src/a.ts": "const a = 1;\nconsole.log(a);\nconsole.error('x');\n"}
        )
        findings = check_console_statements(root)
        assert [(f.location.path, f.location.line) for f in findings] == [
            ("src/a.ts", 2),
            ("src/a.ts", 3),
        ]
        assert all(f.severity == Severity.INFO for f in findings)

    def test_summary_beyond_limit(self, make_project):
        root = make_project(
            files={
                "src/a.ts": "console.log(1);\n" * 4,
                "src/b.ts": "console.warn(2);\n" * 4,
            }
        )
        findings = check_console_statements(root, limit=5)
        assert len(findings) == 6
        assert [f.location.path for f in findings[:5]] == ["src/a.ts"] * 4 + ["src/b.ts"]
        summary = findings[-1]
        assert summary.location == Location.UNPLACED
        assert summary.message == "... and 3 more console statements across the project"

    def test_ignores_other_console_members(self, make_project):
        root = make_project(files={"src/a.ts": "console.table(rows);\nconsole.group();\n"})
        assert check_console_statements(root) == []
