"""Tests for the canonical JSON normalization layer."""

import json
from pathlib import Path

from react_triage.model import Severity
from react_triage.model.finding import Finding, Location
from react_triage.model.scan_result import LargeFile
from react_triage.utils.json_norm import stable_json_dump, stable_json_dumps


def test_stable_json_dumps_sorts_keys_and_adds_newline():
    s = stable_json_dumps({"b": 1, "a": 2})
    assert s.endswith("\n")
    # Keys should be sorted in the serialized output
    assert s.index('"a"') < s.index('"b"')


def test_stable_json_dumps_normalizes_paths():
    s = stable_json_dumps({"p": Path("a") / "b"})
    obj = json.loads(s)
    assert obj["p"] == "a/b"


def test_stable_json_dumps_uses_to_dict_and_enum_values():
    finding = Finding("no-console", Severity.INFO, "console", Location("a.ts", 2, 1))
    obj = json.loads(stable_json_dumps({"f": finding, "s": Severity.BEST_PRACTICE}))
    assert obj["s"] == "best-practice"
    assert obj["f"]["rule"] == "no-console"
    assert obj["f"]["line"] == 2


def test_stable_json_dumps_plain_dataclass_and_tuples():
    obj = json.loads(stable_json_dumps({"large": (LargeFile("big.tsx", 900),)}))
    assert obj == {"large": [{"path": "big.tsx", "lines": 900}]}


def test_stable_json_dumps_keeps_non_ascii():
    assert "→" in stable_json_dumps({"m": "a → b"})


def test_stable_json_dump_writes_to_file_like(tmp_path):
    out = tmp_path / "x.json"
    with out.open("w", encoding="utf-8") as f:
        stable_json_dump({"b": 1, "a": 2}, f)
    txt = out.read_text(encoding="utf-8")
    assert txt.endswith("\n")
    assert '"a"' in txt and '"b"' in txt
