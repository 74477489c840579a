"""Waterfall detectors: sequential awaits that could run concurrently.

``async-parallel`` and ``async-dependencies`` overlap on purpose: a run of
three independent awaits fires both, and each keeps its own rule id.
"""

from __future__ import annotations

import re
from typing import Iterator

from react_triage.model import Impact, Severity
from react_triage.rules import ids
from react_triage.rules.base import (
    AWAIT_ASSIGN_RE,
    Hit,
    Rule,
    best_practice_url,
    is_component_file,
    split_lines,
)
from react_triage.rules.tables import RuleTables

_EARLY_GUARD_RE = re.compile(r"^if\s*\(")
_RETURN_RE = re.compile(r"return\s")
_DEFER_LOOKAHEAD = 5
_MIN_AWAIT_RUN = 3

_ROUTE_HANDLER_EXPORT_RE = re.compile(
    r"export\s+(?:async\s+)?function\s+(?:GET|POST|PUT|PATCH|DELETE|HEAD|OPTIONS)"
)
_ROUTE_HANDLER_LINE_RE = re.compile(
    r"export\s+(?:async\s+)?function\s+(?:GET|POST|PUT|PATCH|DELETE)"
)

_ASYNC_COMPONENT_RE = re.compile(r"export\s+(?:default\s+)?async\s+function\s+\w+")
_ASYNC_COMPONENT_LINE_RE = re.compile(r"export\s+(?:default\s+)?async\s+function")
_AWAIT_BEFORE_JSX_RE = re.compile(r"await\s+\w+[\s\S]*?return\s*\(?\s*<")


def _check_parallel(path: str, content: str, tables: RuleTables) -> Iterator[Hit]:
    lines = split_lines(content)
    for i in range(len(lines) - 1):
        current = AWAIT_ASSIGN_RE.match(lines[i].strip())
        nxt_line = lines[i + 1].strip()
        nxt = AWAIT_ASSIGN_RE.match(nxt_line)
        if not (current and nxt):
            continue
        first_var = current.group(1)
        # Textual dependency test: any mention of the first name counts.
        if first_var in nxt_line:
            continue
        yield Hit(
            line=i + 1,
            message=(
                "Sequential independent awaits — use "
                f"Promise.all([{first_var}, {nxt.group(1)}]) instead"
            ),
            help="Independent async operations should run in parallel with Promise.all()",
        )


def _check_defer_await(path: str, content: str, tables: RuleTables) -> Iterator[Hit]:
    lines = split_lines(content)
    for i, raw in enumerate(lines):
        m = AWAIT_ASSIGN_RE.match(raw.strip())
        if not m:
            continue
        var_name = m.group(1)
        for j in range(i + 1, min(i + 1 + _DEFER_LOOKAHEAD, len(lines))):
            ahead = lines[j].strip()
            if (
                _EARLY_GUARD_RE.search(ahead)
                and _RETURN_RE.search(ahead)
                and var_name not in ahead
            ):
                yield Hit(
                    line=i + 1,
                    message=(
                        f'"{var_name}" is awaited before an early return that '
                        "doesn't use it — move await after the guard"
                    ),
                    help="Defer await until the branch where the result is actually needed",
                )
                break
            if var_name in ahead:
                break


def _check_dependencies(path: str, content: str, tables: RuleTables) -> Iterator[Hit]:
    run = 0
    first_line = 0
    for i, raw in enumerate(split_lines(content)):
        line = raw.strip()
        if AWAIT_ASSIGN_RE.match(line):
            if run == 0:
                first_line = i
            run += 1
        elif line == "" or line.startswith("//"):
            continue
        else:
            if run >= _MIN_AWAIT_RUN:
                yield Hit(
                    line=first_line + 1,
                    message=(
                        f"{run} sequential awaits — some may be parallelizable "
                        "with Promise.all()"
                    ),
                    help=(
                        "Group independent operations together and use "
                        "Promise.all(), then await dependent ones after"
                    ),
                )
            run = 0
    # A run that reaches end-of-file is never closed, so it is not reported.


def _check_api_routes(path: str, content: str, tables: RuleTables) -> Iterator[Hit]:
    if not ("/api/" in path or "route.ts" in path or "route.js" in path):
        return
    if not _ROUTE_HANDLER_EXPORT_RE.search(content):
        return

    in_handler = False
    run = 0
    first_line = 0
    for i, raw in enumerate(split_lines(content)):
        line = raw.strip()
        if _ROUTE_HANDLER_LINE_RE.search(line):
            in_handler = True
            run = 0
            continue
        if not in_handler:
            continue
        if AWAIT_ASSIGN_RE.match(line):
            if run == 0:
                first_line = i
            run += 1
        elif line.startswith("}") and run >= 2:
            yield Hit(
                line=first_line + 1,
                message=(
                    f"{run} sequential awaits in API route — start promises "
                    "early, await late"
                ),
                help=(
                    "Initiate all fetches at the top without await, then await "
                    "results where needed"
                ),
            )
            in_handler = False
            run = 0


def _check_suspense_boundaries(
    path: str, content: str, tables: RuleTables
) -> Iterator[Hit]:
    if not is_component_file(path):
        return
    if not _ASYNC_COMPONENT_RE.search(content):
        return
    if not _AWAIT_BEFORE_JSX_RE.search(content) or "Suspense" in content:
        return
    for i, line in enumerate(split_lines(content)):
        if _ASYNC_COMPONENT_LINE_RE.search(line):
            yield Hit(
                line=i + 1,
                message=(
                    "Async component awaits data without Suspense — entire "
                    "page blocks until data loads"
                ),
                help="Move data fetching into a child component and wrap it with <Suspense>",
            )
            return


ASYNC_PARALLEL = Rule(
    id=ids.ASYNC_PARALLEL,
    title="Promise.all() for Independent Operations",
    impact=Impact.CRITICAL,
    severity=Severity.CRITICAL,
    description=(
        "Sequential awaits on independent operations create waterfalls. "
        "Use Promise.all() to parallelize."
    ),
    url=best_practice_url(ids.ASYNC_PARALLEL),
    check=_check_parallel,
)

ASYNC_DEFER_AWAIT = Rule(
    id=ids.ASYNC_DEFER_AWAIT,
    title="Defer Await Until Needed",
    impact=Impact.HIGH,
    severity=Severity.PERFORMANCE,
    description=(
        "Await is used before an early return that doesn't need the result. "
        "Move await into the branch that uses it."
    ),
    url=best_practice_url(ids.ASYNC_DEFER_AWAIT),
    check=_check_defer_await,
)

ASYNC_DEPENDENCIES = Rule(
    id=ids.ASYNC_DEPENDENCIES,
    title="Parallelize Partially Dependent Operations",
    impact=Impact.CRITICAL,
    severity=Severity.CRITICAL,
    description=(
        "When multiple awaits exist and only some depend on others, "
        "parallelize the independent ones."
    ),
    url=best_practice_url(ids.ASYNC_DEPENDENCIES),
    check=_check_dependencies,
)

ASYNC_API_ROUTES = Rule(
    id=ids.ASYNC_API_ROUTES,
    title="Start Promises Early in API Routes",
    impact=Impact.CRITICAL,
    severity=Severity.CRITICAL,
    description=(
        "In API routes, start promises as early as possible and await them "
        "only when the result is needed."
    ),
    url=best_practice_url(ids.ASYNC_API_ROUTES),
    check=_check_api_routes,
)

ASYNC_SUSPENSE_BOUNDARIES = Rule(
    id=ids.ASYNC_SUSPENSE_BOUNDARIES,
    title="Strategic Suspense Boundaries",
    impact=Impact.HIGH,
    severity=Severity.PERFORMANCE,
    description=(
        "Async Server Components that await data block the entire page. "
        "Use Suspense boundaries to stream partial UI."
    ),
    url=best_practice_url(ids.ASYNC_SUSPENSE_BOUNDARIES),
    check=_check_suspense_boundaries,
)

RULES: tuple[Rule, ...] = (
    ASYNC_PARALLEL,
    ASYNC_DEFER_AWAIT,
    ASYNC_DEPENDENCIES,
    ASYNC_API_ROUTES,
    ASYNC_SUSPENSE_BOUNDARIES,
)
