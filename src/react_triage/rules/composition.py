"""Component API design: boolean prop sprawl and render-prop slots."""

from __future__ import annotations

import re
from typing import Iterator

from react_triage.model import Impact, Severity
from react_triage.rules import ids
from react_triage.rules.base import (
    Hit,
    Rule,
    composition_url,
    is_component_file,
    split_lines,
)
from react_triage.rules.tables import RuleTables

_PROPS_OPEN_RE = re.compile(
    r"(?:interface|type)\s+\w*[Pp]rops\w*\s*(?:extends[^{]*)?\{"
    r"|(?:interface|type)\s+\w*[Pp]rops\w*\s*="
)
_BOOL_PROP_RE = re.compile(
    r"\b(?:is|has|show|hide|enable|disable|with)[A-Z]\w*\s*\??\s*:\s*boolean"
)
_PROPS_BLOCK_MAX_LINES = 80
_MIN_BOOLEAN_PROPS = 3


def props_block(lines: list[str], start: int) -> str:
    """Brace-matched block starting at *start* (capped at 80 lines)."""
    depth = 0
    block: list[str] = []
    for j in range(start, min(start + _PROPS_BLOCK_MAX_LINES, len(lines))):
        line = lines[j]
        depth += line.count("{") - line.count("}")
        block.append(line)
        if j > start and depth <= 0:
            break
    return "\n".join(block)


def _check_boolean_props(path: str, content: str, tables: RuleTables) -> Iterator[Hit]:
    if not is_component_file(path):
        return
    lines = split_lines(content)
    for i, line in enumerate(lines):
        if not _PROPS_OPEN_RE.search(line):
            continue
        matches = [m.group(0) for m in _BOOL_PROP_RE.finditer(props_block(lines, i))]
        if len(matches) < _MIN_BOOLEAN_PROPS:
            continue
        names = ", ".join(re.split(r"[\s?:]", m)[0] for m in matches)
        yield Hit(
            line=i + 1,
            message=(
                f"{len(matches)} boolean props detected ({names}) — use explicit "
                "variant components instead"
            ),
            help=(
                "Create separate ChannelComposer, ThreadComposer, EditComposer "
                "components rather than a single component with boolean switches"
            ),
        )


_RENDER_PROP_TYPE_RE = re.compile(
    r"render[A-Z]\w*\s*\??\s*:\s*"
    r"(?:\(\s*\)\s*=>|\(\s*\w[^)]*\)\s*=>|React\.ReactNode|ReactNode|JSX\.Element)"
)
_DESTRUCTURED_RENDER_PROPS_RE = re.compile(
    r"function\s+\w+\s*\(\s*\{[^}]*render[A-Z]\w*[^}]*render[A-Z]\w*[^}]*\}"
)
_ARROW_RENDER_PROPS_RE = re.compile(
    r"(?:const|let)\s+\w+\s*=\s*\([^)]*render[A-Z]\w*[^)]*render[A-Z]\w*[^)]*\)\s*=>"
)
_CREATE_CONTEXT_RE = re.compile(r"createContext\s*\(")
_SIGNATURE_WINDOW = 6
_COMPOUND_HELP = (
    "Export a compound object: const MyComponent = { Frame, Header, Input, "
    "Footer } — consumers compose exactly what they need"
)


def _check_compound_components(
    path: str, content: str, tables: RuleTables
) -> Iterator[Hit]:
    if not is_component_file(path) or _CREATE_CONTEXT_RE.search(content):
        return

    # Signal 1: two or more render* props declared in a type.
    typed = [m.group(0) for m in _RENDER_PROP_TYPE_RE.finditer(content)]
    if len(typed) >= 2:
        first_at = content.find(typed[0])
        names = ", ".join(re.split(r"[\s?:(]", t)[0] for t in typed)
        yield Hit(
            line=content.count("\n", 0, first_at) + 1,
            message=(
                f"{len(typed)} render* props detected ({names}) — use compound "
                "components with createContext instead"
            ),
            help=_COMPOUND_HELP,
        )
        return

    # Signal 2: a signature destructuring two render* props.
    lines = split_lines(content)
    for i in range(len(lines)):
        window = " ".join(lines[i: i + _SIGNATURE_WINDOW])
        if _DESTRUCTURED_RENDER_PROPS_RE.search(window) or _ARROW_RENDER_PROPS_RE.search(window):
            yield Hit(
                line=i + 1,
                message=(
                    "Component accepts multiple render* function props — use "
                    "compound components with shared context instead"
                ),
                help=_COMPOUND_HELP,
            )
            return


COMPOSITION_BOOLEAN_PROPS = Rule(
    id=ids.COMPOSITION_BOOLEAN_PROPS,
    title="Avoid Boolean Prop Proliferation",
    impact=Impact.HIGH,
    severity=Severity.BEST_PRACTICE,
    description=(
        "Components with 3+ boolean props (isX, hasX, showX) create exponential "
        "state combinations and unmaintainable conditional logic. Use "
        "composition with explicit variant components instead."
    ),
    url=composition_url("architecture-avoid-boolean-props"),
    check=_check_boolean_props,
)

COMPOSITION_COMPOUND_COMPONENTS = Rule(
    id=ids.COMPOSITION_COMPOUND_COMPONENTS,
    title="Use Compound Components Instead of Render Props",
    impact=Impact.HIGH,
    severity=Severity.BEST_PRACTICE,
    description=(
        "Components with multiple renderX props (renderHeader, renderFooter) "
        "hide conditionals and force consumers to manage internals. Use "
        "compound components with a shared context so consumers compose "
        "exactly what they need."
    ),
    url=composition_url("architecture-compound-components"),
    check=_check_compound_components,
)

RULES: tuple[Rule, ...] = (
    COMPOSITION_BOOLEAN_PROPS,
    COMPOSITION_COMPOUND_COMPONENTS,
)
