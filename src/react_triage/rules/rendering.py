"""Rendering correctness: falsy-number short circuits and in-place sorts."""

from __future__ import annotations

import re
from typing import Iterator

from react_triage.model import Impact, Severity
from react_triage.rules import ids
from react_triage.rules.base import (
    Hit,
    Rule,
    best_practice_url,
    has_ext,
    is_component_file,
    split_lines,
)
from react_triage.rules.tables import RuleTables

# ── rendering-conditional-render ────────────────────────────────────

_JSX_AND_RE = re.compile(r"\{([^{}\n]+)&&\s*(?:<[A-Za-z]|\()")
_BOOLEAN_PREFIX_RE = re.compile(
    r"^(?:is|has|had|have|should|can|will|did|was|are|show|hide|enable|disable|allow|with|no)",
    re.IGNORECASE,
)
# Negation, comparison, typeof / instanceof / in always yield a boolean.
_BOOLEAN_EXPRESSION_RE = re.compile(
    r"^\s*!|[!=]==?|>=?|<=?|\btypeof\b|\binstanceof\b|\bin\b"
)
_NUMERIC_TAIL_RE = re.compile(r"\.length$")
_NUMERIC_NAME_RE = re.compile(
    r"\b(?:count|num|total|size|index|offset|score|amount|quantity|width|"
    r"height|age|depth|level|step|page|limit)$",
    re.IGNORECASE,
)
_LAST_IDENT_RE = re.compile(r"(\w+)\s*$")


def condition_could_be_number(condition: str) -> bool:
    """True only with positive evidence that *condition* is numeric."""
    c = condition.strip()
    if _BOOLEAN_EXPRESSION_RE.search(c):
        return False
    m = _LAST_IDENT_RE.search(c)
    last_ident = m.group(1) if m else None
    if last_ident and _BOOLEAN_PREFIX_RE.search(last_ident):
        return False
    if _NUMERIC_TAIL_RE.search(c):
        return True
    return bool(last_ident and _NUMERIC_NAME_RE.search(last_ident))


def _check_conditional_render(
    path: str, content: str, tables: RuleTables
) -> Iterator[Hit]:
    if not is_component_file(path):
        return
    for i, line in enumerate(split_lines(content)):
        if line.strip().startswith(("//", "*", "/*")):
            continue
        m = _JSX_AND_RE.search(line)
        if not m or not condition_could_be_number(m.group(1)):
            continue
        yield Hit(
            line=i + 1,
            message=(
                "`{condition && <JSX>}` may render '0' when condition is a falsy "
                "number — use ternary instead"
            ),
            help=(
                "Replace `{count && <Item/>}` with `{count > 0 ? <Item/> : null}` "
                "to prevent accidental rendering of '0'"
            ),
        )


# ── js-tosorted-immutable ───────────────────────────────────────────

_COPY_THEN_SORT_RES = (
    re.compile(r"\[\.\.\..*\]\.sort\s*\("),
    re.compile(r"Array\.from\s*\("),
    re.compile(r"\.slice\s*\([^)]*\)\.sort\s*\("),
)
_SORT_CALL_RE = re.compile(r"(\w+)\.sort\s*\(")


def _check_tosorted(path: str, content: str, tables: RuleTables) -> Iterator[Hit]:
    if not has_ext(path, ".tsx", ".jsx", ".ts", ".js"):
        return
    for i, line in enumerate(split_lines(content)):
        if ".sort(" not in line:
            continue
        if any(r.search(line) for r in _COPY_THEN_SORT_RES):
            continue
        m = _SORT_CALL_RE.search(line)
        if not m or m.group(1) in ("Array", "Object"):
            continue
        var = m.group(1)
        yield Hit(
            line=i + 1,
            column=line.find(var) + 1,
            message=(
                f'"{var}.sort()" mutates the array in place — use '
                f'"{var}.toSorted()" to avoid React state/prop mutation bugs'
            ),
            help=(
                "Replace .sort(comparator) with .toSorted(comparator). For older "
                "environments: [...arr].sort(comparator)"
            ),
        )


RENDERING_CONDITIONAL_RENDER = Rule(
    id=ids.RENDERING_CONDITIONAL_RENDER,
    title="Use Ternary for Conditional JSX Rendering",
    impact=Impact.MEDIUM,
    severity=Severity.BEST_PRACTICE,
    description=(
        '`{count && <Component/>}` renders "0" when count is a falsy number '
        "(e.g. array.length). Use `{count > 0 ? <Component/> : null}` to "
        "prevent silent rendering bugs."
    ),
    url=best_practice_url(ids.RENDERING_CONDITIONAL_RENDER),
    check=_check_conditional_render,
)

JS_TOSORTED_IMMUTABLE = Rule(
    id=ids.JS_TOSORTED_IMMUTABLE,
    title="Use toSorted() for Immutable Sorting",
    impact=Impact.MEDIUM,
    severity=Severity.PERFORMANCE,
    description=(
        ".sort() mutates the array in place, which can cause stale-state bugs "
        "when sorting React props or state. Use .toSorted() to return a new "
        "array without mutation."
    ),
    url=best_practice_url(ids.JS_TOSORTED_IMMUTABLE),
    check=_check_tosorted,
)

RULES: tuple[Rule, ...] = (
    RENDERING_CONDITIONAL_RENDER,
    JS_TOSORTED_IMMUTABLE,
)
