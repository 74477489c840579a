"""Re-render detectors: derived state, eager state init, memo defaults."""

from __future__ import annotations

import re
from typing import Iterator

from react_triage.model import Impact, Severity
from react_triage.rules import ids
from react_triage.rules.base import (
    Hit,
    Rule,
    best_practice_url,
    is_component_file,
    split_lines,
)
from react_triage.rules.tables import RuleTables

_USE_EFFECT_RE = re.compile(r"useEffect\s*\(")
_SETTER_CALL_RE = re.compile(r"\bset([A-Z]\w*)\s*\(")
_EFFECT_WINDOW = 8
_MAX_DERIVED_STATEMENTS = 3


def _effect_statements(block: str) -> list[str]:
    """Non-trivial lines of an effect block (no braces, deps or comments)."""
    out = []
    for raw in block.split("\n"):
        line = raw.strip()
        if not line or line.startswith(("//", "useEffect", "[", ")")):
            continue
        if line in ("}", "},"):
            continue
        out.append(line)
    return out


def _check_derived_state(path: str, content: str, tables: RuleTables) -> Iterator[Hit]:
    if not is_component_file(path):
        return
    if "useEffect" not in content or "useState" not in content:
        return
    lines = split_lines(content)
    for i, line in enumerate(lines):
        if not _USE_EFFECT_RE.search(line.strip()):
            continue
        block = "\n".join(lines[i: i + _EFFECT_WINDOW])
        m = _SETTER_CALL_RE.search(block)
        if not m:
            continue
        state = m.group(1)
        state = state[0].lower() + state[1:]
        if len(_effect_statements(block)) <= _MAX_DERIVED_STATEMENTS:
            yield Hit(
                line=i + 1,
                message=(
                    f'useEffect updates "{state}" from other state — compute '
                    "during render instead"
                ),
                help=f"Replace useState + useEffect with: const {state} = computedValue",
            )


_USE_STATE_INIT_RE = re.compile(r"useState\s*\(\s*([^)]+)\)")
_EXPENSIVE_CALL_RE = re.compile(
    r"(?:JSON\.parse|localStorage\.\w+|sessionStorage\.\w+|buildIndex|parse|"
    r"compute|calculate|transform|process|generate)"
)
_PRIMITIVE_RE = re.compile(r"""^(?:\d+|'[^']*'|"[^"]*"|true|false|null|undefined|\{\}|\[\])$""")


def _check_lazy_state_init(
    path: str, content: str, tables: RuleTables
) -> Iterator[Hit]:
    for i, line in enumerate(split_lines(content)):
        m = _USE_STATE_INIT_RE.search(line)
        if not m:
            continue
        init = m.group(1).strip()
        if init.startswith(("() =>", "function")) or _PRIMITIVE_RE.match(init):
            continue
        if not _EXPENSIVE_CALL_RE.search(init):
            continue
        short = init[:40]
        yield Hit(
            line=i + 1,
            message="Expensive initializer in useState() runs on every render — use lazy form",
            help=f"Replace useState({short}) with useState(() => {short})",
        )


_DEFAULT_PARAM_RE = re.compile(r"(\w+)\s*=\s*(\(\)\s*=>|function|\{[^}]*\}|\[[^\]]*\])")
_MEMO_CALL_RE = re.compile(r"memo\s*[(<]")
_MEMO_LOOKBEHIND = 10


def _is_fresh_reference(default: str) -> bool:
    return default in ("{}", "[]", "function") or default.startswith("() =>")


def _check_memo_default(path: str, content: str, tables: RuleTables) -> Iterator[Hit]:
    if "memo(" not in content and "memo<" not in content:
        return
    lines = split_lines(content)
    for i, line in enumerate(lines):
        m = _DEFAULT_PARAM_RE.search(line)
        if not m or not _is_fresh_reference(m.group(2)):
            continue
        context = "\n".join(lines[max(0, i - _MEMO_LOOKBEHIND): i + 1])
        if not _MEMO_CALL_RE.search(context):
            continue
        prop, default = m.group(1), m.group(2)
        yield Hit(
            line=i + 1,
            message=(
                f'Default value for "{prop}" in memo() component creates new '
                "reference every render"
            ),
            help=(
                "Extract to module-level constant: "
                f"const DEFAULT_{prop.upper()} = {default[:20]}"
            ),
        )


RERENDER_DERIVED_STATE_NO_EFFECT = Rule(
    id=ids.RERENDER_DERIVED_STATE_NO_EFFECT,
    title="Calculate Derived State During Rendering",
    impact=Impact.HIGH,
    severity=Severity.PERFORMANCE,
    description=(
        "Using useEffect + setState to derive values from props/state causes an "
        "extra render cycle. Compute derived values directly during render."
    ),
    url=best_practice_url(ids.RERENDER_DERIVED_STATE_NO_EFFECT),
    check=_check_derived_state,
)

RERENDER_LAZY_STATE_INIT = Rule(
    id=ids.RERENDER_LAZY_STATE_INIT,
    title="Use Lazy State Initialization",
    impact=Impact.HIGH,
    severity=Severity.PERFORMANCE,
    description=(
        "Expensive expressions passed directly to useState run on every render. "
        "Use a function form () => value to run only once."
    ),
    url=best_practice_url(ids.RERENDER_LAZY_STATE_INIT),
    check=_check_lazy_state_init,
)

RERENDER_MEMO_DEFAULT_VALUE = Rule(
    id=ids.RERENDER_MEMO_DEFAULT_VALUE,
    title="Hoist Default Non-Primitive Props",
    impact=Impact.HIGH,
    severity=Severity.PERFORMANCE,
    description=(
        "Default non-primitive parameter values in memo() components break "
        "memoization — new instances are created on every render."
    ),
    url=best_practice_url("rerender-memo-with-default-value"),
    check=_check_memo_default,
)

RULES: tuple[Rule, ...] = (
    RERENDER_DERIVED_STATE_NO_EFFECT,
    RERENDER_LAZY_STATE_INIT,
    RERENDER_MEMO_DEFAULT_VALUE,
)
