"""Tests for the oxlint adapter and lint-code severity classification."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from conftest import FakeRunner
from react_triage.analyzers.linter import (
    OXLINT_FLAGS,
    UNCODED_RULE,
    OxlintAdapter,
    parse_oxlint_output,
)
from react_triage.model import Severity
from react_triage.rules.lint_severity import classify_lint_code, extract_rule_name
from react_triage.utils.process import CommandError, CommandOutput

OXLINT_JSON = {
    "diagnostics": [
        {
            "message": "React Hook useEffect is called conditionally",
            "code": "react-hooks(rules-of-hooks)",
            "severity": "error",
            "help": "Call hooks at the top level",
            "url": "https://oxc.rs/docs/guide/usage/linter/rules/react/rules-of-hooks",
            "filename": "src/App.tsx",
            "labels": [{"span": {"offset": 10, "length": 3, "line": 12, "column": 5}}],
        },
        {
            "message": "Do not use <img>",
            "code": "nextjs(no-img-element)",
            "filename": "src/Hero.tsx",
            "labels": [],
        },
    ],
    "number_of_files": 42,
}


class TestClassifyLintCode:
    @pytest.mark.parametrize(
        "code, expected",
        [
            ("react-hooks(rules-of-hooks)", Severity.CRITICAL),
            ("react(jsx-key)", Severity.CRITICAL),
            ("react-hooks(exhaustive-deps)", Severity.PERFORMANCE),
            ("react-perf(jsx-no-new-object-as-prop)", Severity.PERFORMANCE),
            ("nextjs(no-html-link-for-pages)", Severity.BEST_PRACTICE),
            ("eslint(no-unused-vars)", Severity.INFO),
            ("no-img-element", Severity.PERFORMANCE),
        ],
    )
    def test_classification(self, code, expected):
        assert classify_lint_code(code) is expected

    def test_extract_rule_name(self):
        assert extract_rule_name("react(jsx-key)") == "jsx-key"
        assert extract_rule_name("plain-code") == "plain-code"


class TestParseOxlintOutput:
    def test_maps_diagnostics(self):
        result = parse_oxlint_output(OXLINT_JSON)
        assert result.file_count == 42
        first, second = result.findings
        assert first.rule_id == "rules-of-hooks"
        assert first.severity == Severity.CRITICAL
        assert (first.location.path, first.location.line, first.location.column) == (
            "src/App.tsx",
            12,
            5,
        )
        assert first.help == "Call hooks at the top level"
        assert second.rule_id == "no-img-element"
        assert second.location.line == 0
        assert second.help is None

    def test_uncoded_diagnostic_gets_fallback_rule(self):
        data = {
            "diagnostics": [
                {
                    "message": "Unexpected token",
                    "filename": "app/page.tsx",
                    "labels": [{"span": {"line": 1, "column": 1}}],
                }
            ],
            "number_of_files": 1,
        }
        (finding,) = parse_oxlint_output(data).findings
        assert finding.rule_id == UNCODED_RULE
        assert finding.severity == Severity.INFO
        assert finding.location.line == 1

    def test_wrongly_typed_fields_fall_back(self):
        data = {
            "diagnostics": [
                "not an object",
                {
                    "code": 17,
                    "message": ["x"],
                    "filename": None,
                    "help": {"text": "h"},
                    "url": 3,
                    "labels": [{"span": {"line": "12", "column": -4}}],
                },
            ],
            "number_of_files": "many",
        }
        result = parse_oxlint_output(data)
        assert result.file_count == 0
        (finding,) = result.findings
        assert finding.rule_id == UNCODED_RULE
        assert finding.message == ""
        assert (finding.location.path, finding.location.line, finding.location.column) == (
            "",
            0,
            0,
        )
        assert finding.help is None
        assert finding.url is None

    def test_empty_document(self):
        result = parse_oxlint_output({})
        assert result.findings == ()
        assert result.file_count == 0


class TestOxlintAdapter:
    def test_build_args(self, tmp_path: Path):
        args = OxlintAdapter(binary="/opt/oxlint").build_args(tmp_path)
        assert args[:2] == ["/opt/oxlint", str(tmp_path)]
        assert tuple(args[2:]) == OXLINT_FLAGS
        assert "--react-plugin" in args

    def test_run_parses_stdout(self, tmp_path: Path):
        runner = FakeRunner({("oxlint",): CommandOutput(1, json.dumps(OXLINT_JSON))})
        result = OxlintAdapter(runner=runner).run(tmp_path)
        assert len(result.findings) == 2
        assert result.file_count == 42
        assert runner.calls[0][0] == "oxlint"

    def test_missing_binary_degrades(self, tmp_path: Path, caplog):
        runner = FakeRunner({("oxlint",): CommandError("not found")})
        with caplog.at_level("WARNING"):
            result = OxlintAdapter(runner=runner).run(tmp_path)
        assert result.findings == ()
        assert result.file_count == 0
        assert "lint results skipped" in caplog.text

    def test_non_json_output_degrades(self, tmp_path: Path):
        runner = FakeRunner(
            {("oxlint",): CommandOutput(1, "Finished in 3ms", "No files found to lint")}
        )
        result = OxlintAdapter(runner=runner).run(tmp_path)
        assert result.findings == ()

    def test_non_object_json_degrades(self, tmp_path: Path):
        runner = FakeRunner({("oxlint",): CommandOutput(0, "[1, 2]")})
        assert OxlintAdapter(runner=runner).run(tmp_path).findings == ()
