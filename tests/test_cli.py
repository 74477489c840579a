"""Tests for the argparse CLI and its exit-code contract."""

from __future__ import annotations

import json

import pytest

from react_triage.__main__ import main
from react_triage.utils.exit_codes import ExitCode

CLIENT_ASYNC = '"use client";\nexport default async function Counter() {}\n'


@pytest.fixture
def clean_project(make_project):
    # only finding: tsconfig-missing (best-practice)
    return make_project(manifest={"name": "clean", "dependencies": {}})


@pytest.fixture
def broken_project(make_project):
    return make_project(
        manifest={"name": "broken", "dependencies": {}},
        files={"components/Counter.tsx": CLIENT_ASYNC},
        name="broken",
    )


class TestExitCodes:
    def test_contract_values(self):
        assert [int(c) for c in ExitCode] == [0, 1, 2]

    def test_clean_scan(self, clean_project, offline_scan, capsys):
        assert main([str(clean_project)]) == ExitCode.SUCCESS
        out = capsys.readouterr().out
        assert "REACT TRIAGE" in out
        assert "99/100" in out

    def test_missing_manifest(self, tmp_path, offline_scan, capsys):
        assert main([str(tmp_path)]) == ExitCode.FAILURE
        assert "No package.json found" in capsys.readouterr().err

    def test_invalid_fail_on(self, clean_project, offline_scan, capsys):
        assert main([str(clean_project), "--fail-on", "high"]) == ExitCode.USAGE
        assert "invalid severity" in capsys.readouterr().err

    def test_fail_on_exact_match(self, broken_project, offline_scan):
        assert main([str(broken_project), "--fail-on", "critical"]) == ExitCode.FAILURE
        assert main([str(broken_project), "--fail-on", "performance"]) == ExitCode.SUCCESS

    def test_fail_on_from_config(self, clean_project, offline_scan):
        (clean_project / ".react-triage.yaml").write_text(
            "fail_on: best-practice\n", encoding="utf-8"
        )
        assert main([str(clean_project)]) == ExitCode.FAILURE
        # an explicit flag wins over the config file
        assert main([str(clean_project), "--fail-on", "critical"]) == ExitCode.SUCCESS

    def test_bad_config_file(self, clean_project, offline_scan, tmp_path, capsys):
        bad = tmp_path / "bad.yaml"
        bad.write_text("lint_timeout: -3\n", encoding="utf-8")
        assert main([str(clean_project), "--config", str(bad)]) == ExitCode.USAGE
        assert "lint_timeout" in capsys.readouterr().err

    def test_scan_error_is_reported(self, clean_project, monkeypatch, capsys):
        from react_triage import api

        def _boom(root, config=None, **kwargs):
            raise RuntimeError("disk on fire")

        monkeypatch.setattr(api, "run_scan", _boom)
        assert main([str(clean_project)]) == ExitCode.FAILURE
        assert "disk on fire" in capsys.readouterr().err


class TestOutputs:
    def test_json_goes_to_stdout(self, broken_project, offline_scan, capsys):
        code = main([str(broken_project), "--json", "--fail-on", "critical"])
        captured = capsys.readouterr()
        assert code == ExitCode.FAILURE
        payload = json.loads(captured.out)
        assert payload["policy"]["should_fail"] is True
        assert payload["policy"]["issue_matches"] == 1
        assert any(i["rule"] == "async-client-component" for i in payload["issues"])
        assert "REACT TRIAGE" in captured.err

    def test_markdown_export(self, broken_project, offline_scan, tmp_path):
        target = tmp_path / "reports" / "triage.md"
        assert main([str(broken_project), "--to-markdown", str(target)]) == ExitCode.SUCCESS
        text = target.read_text(encoding="utf-8")
        assert "# ⚛️ React Triage Report" in text
        assert "async-client-component" in text

    def test_severity_filter(self, broken_project, offline_scan, capsys):
        main([str(broken_project), "--performance"])
        out = capsys.readouterr().out
        assert "Async Client Component detected" not in out
        main([str(broken_project), "--critical"])
        assert "Async Client Component detected" in capsys.readouterr().out

    def test_version(self, capsys):
        with pytest.raises(SystemExit) as excinfo:
            main(["--version"])
        assert excinfo.value.code == 0
        assert "0.1.0" in capsys.readouterr().out

    def test_unwritable_markdown_target(self, broken_project, offline_scan, tmp_path, capsys):
        blocker = tmp_path / "not-a-dir"
        blocker.write_text("", encoding="utf-8")
        target = blocker / "triage.md"
        assert main([str(broken_project), "--to-markdown", str(target)]) == ExitCode.FAILURE
        assert "error: could not write" in capsys.readouterr().err

    def test_policy_evaluated_once(self, broken_project, offline_scan, monkeypatch, capsys):
        from react_triage import api

        calls = []
        real = api.evaluate_fail_on_policy

        def _counting(result, gate):
            calls.append(gate)
            return real(result, gate)

        monkeypatch.setattr(api, "evaluate_fail_on_policy", _counting)
        code = main([str(broken_project), "--json", "--fail-on", "critical"])
        assert code == ExitCode.FAILURE
        assert len(calls) == 1
        assert json.loads(capsys.readouterr().out)["policy"]["should_fail"] is True
