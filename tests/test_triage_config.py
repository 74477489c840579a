"""Tests for TriageConfig defaults, validation and YAML loading."""

from __future__ import annotations

from pathlib import Path

import pytest

from react_triage.core.config import TriageConfig
from react_triage.model import Severity


class TestDefaults:
    def test_defaults(self):
        cfg = TriageConfig()
        assert cfg.linter_binary == "oxlint"
        assert cfg.package_manager == "bun"
        assert cfg.large_file_threshold == 400
        assert cfg.console_report_limit == 5
        assert cfg.extra_skip_prefixes == ()
        assert cfg.fail_on is None

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"linter_binary": ""},
            {"package_manager": "  "},
            {"lint_timeout": 0},
            {"audit_timeout": True},
            {"large_file_threshold": -1},
            {"console_report_limit": 2.5},
            {"extra_skip_prefixes": "vendor"},
            {"fail_on": "urgent"},
        ],
    )
    def test_invalid_values(self, kwargs):
        with pytest.raises(ValueError):
            TriageConfig(**kwargs)

    def test_fail_on_string_is_parsed(self):
        assert TriageConfig(fail_on="critical").fail_on is Severity.CRITICAL

    def test_with_overrides_ignores_none(self):
        cfg = TriageConfig()
        assert cfg.with_overrides(fail_on=None) is cfg
        assert cfg.with_overrides(console_report_limit=10).console_report_limit == 10


class TestYaml:
    def test_from_yaml(self, tmp_path: Path):
        path = tmp_path / "triage.yaml"
        path.write_text(
            "package_manager: pnpm\n"
            "large_file_threshold: 300\n"
            "extra_skip_prefixes:\n"
            "  - generated\n"
            "  - storybook-static\n"
            "fail_on: performance\n",
            encoding="utf-8",
        )
        cfg = TriageConfig.from_yaml(path)
        assert cfg.package_manager == "pnpm"
        assert cfg.large_file_threshold == 300
        assert cfg.extra_skip_prefixes == ("generated", "storybook-static")
        assert cfg.fail_on is Severity.PERFORMANCE

    def test_unknown_keys_are_ignored(self, tmp_path: Path, caplog):
        path = tmp_path / "triage.yaml"
        path.write_text("colour: blue\nconsole_report_limit: 1\n", encoding="utf-8")
        with caplog.at_level("WARNING"):
            cfg = TriageConfig.from_yaml(path)
        assert cfg.console_report_limit == 1
        assert "colour" in caplog.text

    def test_empty_document(self, tmp_path: Path):
        path = tmp_path / "triage.yaml"
        path.write_text("", encoding="utf-8")
        assert TriageConfig.from_yaml(path) == TriageConfig()

    def test_non_mapping_rejected(self, tmp_path: Path):
        path = tmp_path / "triage.yaml"
        path.write_text("- a\n- b\n", encoding="utf-8")
        with pytest.raises(ValueError, match="must be a mapping"):
            TriageConfig.from_yaml(path)

    def test_malformed_yaml_rejected(self, tmp_path: Path):
        path = tmp_path / "triage.yaml"
        path.write_text("key: [unclosed\n", encoding="utf-8")
        with pytest.raises(ValueError, match="invalid YAML"):
            TriageConfig.from_yaml(path)


class TestDiscover:
    def test_no_file_gives_defaults(self, tmp_path: Path):
        assert TriageConfig.discover(tmp_path) == TriageConfig()

    def test_yml_extension(self, tmp_path: Path):
        (tmp_path / ".react-triage.yml").write_text("linter_binary: /opt/oxlint\n", encoding="utf-8")
        assert TriageConfig.discover(tmp_path).linter_binary == "/opt/oxlint"

    def test_yaml_preferred_over_yml(self, tmp_path: Path):
        (tmp_path / ".react-triage.yaml").write_text("console_report_limit: 7\n", encoding="utf-8")
        (tmp_path / ".react-triage.yml").write_text("console_report_limit: 9\n", encoding="utf-8")
        assert TriageConfig.discover(tmp_path).console_report_limit == 7
