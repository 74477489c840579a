"""Client-side detectors: hydration hazards, data fetching and listeners."""

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

# ── hydration-browser-api ───────────────────────────────────────────

_TEST_FILE_RE = re.compile(r"\.(test|spec|stories)\.[tj]sx?$")
_MOUNTED_GUARD_RES = (
    re.compile(r"\bmounted\b"),
    re.compile(r"\bisClient\b"),
    re.compile(r"\bisServer\b"),
)
_RETURN_OPEN_RES = (
    re.compile(r"\breturn\s*\(?\s*$"),
    re.compile(r"\breturn\s*\(<"),
)
_BROWSER_API_IN_JSX_RE = re.compile(
    r"\{\s*(?:"
    r"window\.(?:innerWidth|innerHeight|location|navigator|screen|devicePixelRatio|scrollX|scrollY)"
    r"|document\.(?:title|referrer|cookie|domain)"
    r"|localStorage\.(?:getItem|length)"
    r"|sessionStorage\.(?:getItem|length))"
)
_BROWSER_API_NAME_RE = re.compile(
    r"\b(window\.\w+|document\.\w+|localStorage\.\w+|sessionStorage\.\w+)"
)


class JsxReturnTracker:
    """Tracks whether a line sits inside a ``return ( ... )`` block.

    A line opening ``return (`` (or ``return`` at end of line) enters the
    block with depth 0; while inside, every ``(``/``)`` on the raw line moves
    the depth, and the block ends as soon as the depth goes negative.
    """

    def __init__(self) -> None:
        self.active = False
        self.depth = 0

    def feed(self, line: str) -> bool:
        stripped = line.strip()
        if any(r.search(stripped) for r in _RETURN_OPEN_RES):
            self.active = True
            self.depth = 0
        if self.active:
            self.depth += line.count("(") - line.count(")")
            if self.depth < 0:
                self.active = False
                self.depth = 0
        return self.active


def _check_hydration(path: str, content: str, tables: RuleTables) -> Iterator[Hit]:
    if not is_component_file(path) or _TEST_FILE_RE.search(path):
        return
    if any(r.search(content) for r in _MOUNTED_GUARD_RES):
        return
    tracker = JsxReturnTracker()
    for i, line in enumerate(split_lines(content)):
        if not tracker.feed(line):
            continue
        if not _BROWSER_API_IN_JSX_RE.search(line):
            continue
        m = _BROWSER_API_NAME_RE.search(line)
        api = m.group(1) if m else "browser API"
        global_name = api.split(".")[0]
        yield Hit(
            line=i + 1,
            message=(
                f"`{api}` used directly in JSX — causes hydration mismatch "
                f"(server has no {global_name})"
            ),
            help=(
                "Use useEffect + useState to read browser APIs after mount, or "
                "wrap in a client-only component"
            ),
        )


# ── client-swr-dedup ────────────────────────────────────────────────

_DATA_LIB_RE = re.compile(r"(?:useSWR|useQuery|@tanstack\/react-query|swr)")
_USE_EFFECT_RE = re.compile(r"useEffect\s*\(")
_FETCH_CALL_RE = re.compile(r"(?:fetch\s*\(|axios\.\w+\s*\(|\.get\s*\(|\.post\s*\()")
_DEPS_CLOSE_RE = re.compile(r"\],?\s*\)")
_FETCH_LOOKAHEAD = 10
_EFFECT_BLOCK_LINES = 15


def _check_swr_dedup(path: str, content: str, tables: RuleTables) -> Iterator[Hit]:
    if not has_ext(path, ".tsx", ".jsx", ".ts") or _DATA_LIB_RE.search(content):
        return
    lines = split_lines(content)
    for i, line in enumerate(lines):
        if not _USE_EFFECT_RE.search(line.strip()):
            continue
        effect_block = "\n".join(lines[i: i + _EFFECT_BLOCK_LINES])
        for j in range(i, min(i + _FETCH_LOOKAHEAD, len(lines))):
            if _FETCH_CALL_RE.search(lines[j]) and _DEPS_CLOSE_RE.search(effect_block):
                yield Hit(
                    line=j + 1,
                    message=(
                        "useEffect + fetch pattern detected — consider useSWR "
                        "or useQuery for deduplication and caching"
                    ),
                    help=(
                        "Replace with: const { data } = useSWR(key, fetcher) for "
                        "automatic dedup, caching, and revalidation"
                    ),
                )
                break


# ── client-passive-event-listeners ──────────────────────────────────

_SCROLL_LISTENER_RE = re.compile(
    r"""addEventListener\s*\(\s*['"](?:touchstart|touchmove|wheel|scroll)['"]"""
)
_QUOTED_WORD_RE = re.compile(r"""['"](\w+)['"]""")
_LISTENER_CONTEXT_LINES = 3


def _check_passive_listeners(
    path: str, content: str, tables: RuleTables
) -> Iterator[Hit]:
    lines = split_lines(content)
    for i, line in enumerate(lines):
        if not _SCROLL_LISTENER_RE.search(line):
            continue
        context = " ".join(lines[i: i + _LISTENER_CONTEXT_LINES])
        if "passive" in context:
            continue
        m = _QUOTED_WORD_RE.search(line)
        event = m.group(1) if m else "scroll"
        yield Hit(
            line=i + 1,
            message=f'"{event}" listener without {{ passive: true }} — causes scroll delay',
            help="Add { passive: true } as the third argument to addEventListener",
        )


HYDRATION_BROWSER_API = Rule(
    id=ids.HYDRATION_BROWSER_API,
    title="Browser API in Server/Shared Component Render",
    impact=Impact.HIGH,
    severity=Severity.CRITICAL,
    description=(
        "Using window, document, or localStorage directly in render output "
        "(JSX) causes hydration mismatches or server-side ReferenceErrors. "
        "Guard with useEffect or 'use client' + mounted check."
    ),
    url="https://nextjs.org/docs/messages/react-hydration-error",
    check=_check_hydration,
)

CLIENT_SWR_DEDUP = Rule(
    id=ids.CLIENT_SWR_DEDUP,
    title="Use SWR for Automatic Deduplication",
    impact=Impact.HIGH,
    severity=Severity.PERFORMANCE,
    description=(
        "useEffect + fetch causes duplicate requests when multiple instances "
        "mount. Use SWR or React Query for automatic deduplication."
    ),
    url=best_practice_url(ids.CLIENT_SWR_DEDUP),
    check=_check_swr_dedup,
)

CLIENT_PASSIVE_EVENT_LISTENERS = Rule(
    id=ids.CLIENT_PASSIVE_EVENT_LISTENERS,
    title="Use Passive Event Listeners",
    impact=Impact.HIGH,
    severity=Severity.PERFORMANCE,
    description=(
        "Touch and wheel event listeners without { passive: true } cause scroll "
        "delay as the browser waits to check for preventDefault()."
    ),
    url=best_practice_url(ids.CLIENT_PASSIVE_EVENT_LISTENERS),
    check=_check_passive_listeners,
)

RULES: tuple[Rule, ...] = (
    HYDRATION_BROWSER_API,
    CLIENT_SWR_DEDUP,
    CLIENT_PASSIVE_EVENT_LISTENERS,
)
