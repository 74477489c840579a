"""Server Component and Server Action detectors."""

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
    has_client_directive,
    has_ext,
    is_component_file,
    split_lines,
)
from react_triage.rules.tables import RuleTables

# ── server-parallel-fetching ────────────────────────────────────────

_ASYNC_EXPORT_RE = re.compile(r"export\s+(?:default\s+)?async\s+function\s+(\w+)")
_SELF_CLOSING_CHILD_RE = re.compile(r"<[A-Z]\w+[^>]*\/>")
_BODY_SCAN_LINES = 50


def _check_parallel_fetching(
    path: str, content: str, tables: RuleTables
) -> Iterator[Hit]:
    if not is_component_file(path) or has_client_directive(content):
        return
    lines = split_lines(content)
    for i, line in enumerate(lines):
        if not _ASYNC_EXPORT_RE.search(line):
            continue
        body_start = i + 1
        await_count = 0
        await_line = 0
        has_child = False
        for j in range(body_start, min(body_start + _BODY_SCAN_LINES, len(lines))):
            body_line = lines[j].strip()
            if AWAIT_ASSIGN_RE.match(body_line):
                if await_count == 0:
                    await_line = j
                await_count += 1
            if await_count > 0 and _SELF_CLOSING_CHILD_RE.search(body_line):
                has_child = True
            if body_line == "}" and j > body_start + 2:
                break
        if await_count > 0 and has_child:
            yield Hit(
                line=await_line + 1,
                message=(
                    "Parent component awaits before rendering children — "
                    "children can't start fetching until parent finishes"
                ),
                help="Move data fetching into each child component so they can fetch in parallel",
            )


# ── server-auth-actions ─────────────────────────────────────────────

_AUTH_RE = re.compile(
    r"(?:auth|session|verify|getUser|getSession|getCurrentUser|checkAuth|requireAuth)",
    re.IGNORECASE,
)
_MUTATION_RE = re.compile(
    r"(?:create|update|delete|remove|add|submit|save|modify|edit|insert)",
    re.IGNORECASE,
)
_ACTION_EXPORT_RE = re.compile(r"export\s+async\s+function\s+(\w+)")
_EXPORT_START_RE = re.compile(r"^export\s")
_USE_SERVER = ("'use server'", '"use server"')
_DIRECTIVE_MAX_LINE = 5
_ACTION_BODY_LINES = 30


def has_server_directive(content: str) -> bool:
    return any(d in content for d in _USE_SERVER)


def _is_file_level_server_directive(lines: list[str]) -> bool:
    for line in lines[:_DIRECTIVE_MAX_LINE]:
        if line.strip() in _USE_SERVER:
            return True
    return False


def _check_auth_actions(path: str, content: str, tables: RuleTables) -> Iterator[Hit]:
    if not has_server_directive(content):
        return
    lines = split_lines(content)
    if not _is_file_level_server_directive(lines):
        return

    for i, line in enumerate(lines):
        m = _ACTION_EXPORT_RE.search(line)
        if not m:
            continue
        fn_name = m.group(1)
        if not _MUTATION_RE.search(fn_name):
            continue
        has_auth = False
        for j in range(i + 1, min(i + _ACTION_BODY_LINES, len(lines))):
            if _AUTH_RE.search(lines[j]):
                has_auth = True
                break
            if j > i + 1 and _EXPORT_START_RE.match(lines[j].strip()):
                break
        if not has_auth:
            yield Hit(
                line=i + 1,
                message=(
                    f'Server Action "{fn_name}" has no authentication check — '
                    "it's a public endpoint"
                ),
                help="Add auth verification (e.g. verifySession()) at the start of the action",
            )


# ── server-serialization ────────────────────────────────────────────

_SINGLE_PROP_JSX_RE = re.compile(r"<(\w+)\s+(\w+)=\{(\w+)\}\s*\/?\s*>")


def _check_serialization(path: str, content: str, tables: RuleTables) -> Iterator[Hit]:
    if not is_component_file(path) or has_client_directive(content):
        return
    for i, raw in enumerate(split_lines(content)):
        line = raw.strip()
        m = _SINGLE_PROP_JSX_RE.search(line)
        if not m:
            continue
        component, prop, var_name = m.groups()
        if prop in tables.scalar_prop_names:
            continue
        before = content[: content.find(line)]
        fetched = re.search(
            rf"(?:const|let)\s+{var_name}\s*=\s*await\s+", before
        )
        if fetched and component[0].isascii() and component[0].isupper():
            yield Hit(
                line=i + 1,
                message=(
                    f'Entire fetched object "{var_name}" passed to <{component}> '
                    "— only pass needed fields"
                ),
                help=(
                    f"Destructure: <{component} {prop}={{{var_name}.specificField}} /> "
                    "to reduce serialization"
                ),
            )


# ── server-cache-lru / server-cache-react ───────────────────────────

_DATA_LAYER_DIR_RE = re.compile(
    r"lib/|utils/|helpers/|services/|data/|queries/|db/|repositories/"
)
_DATA_LAYER_SUFFIX_RE = re.compile(r"\.service\.ts$|\.repo\.ts$|\.query\.ts$|\.dal\.ts$")
_LRU_DB_CALL_RE = re.compile(
    r"\b(?:prisma|db|supabase|drizzle|sql|mongoose|sequelize)(?:\.\w+)+\s*\("
)
_LRU_PRESENT_RE = re.compile(r"LRUCache|lru-cache|lruCache")
_REDIS_PRESENT_RE = re.compile(r"\bredis\b|\bioredis\b|\bupstash\b")
_CACHE_INSTANCE_RE = re.compile(r"(?:const|let)\s+\w*[Cc]ache\w*\s*=\s*new\s+\w+")

_REACT_CACHE_DB_CALL_RE = re.compile(
    r"\b(?:prisma|db|supabase|drizzle|sql|knex|mongoose|sequelize)(?:\.\w+)+\s*\("
)
_AUTH_CALL_RE = re.compile(
    r"\bauth\(\)|\bgetSession\(\)|\bgetServerSession\(|\bverifyToken\("
)
_REACT_CACHE_IMPORT_RE = re.compile(
    r"""import\s+\{[^}]*\bcache\b[^}]*\}\s+from\s+['"]react['"]"""
)
_CACHE_CALL_RE = re.compile(r"\bcache\s*\(")
_ASYNC_EXPORT_ANY_RE = re.compile(r"export\s+(?:async\s+function|const\s+\w+\s*=\s*async)")


def _check_cache_lru(path: str, content: str, tables: RuleTables) -> Iterator[Hit]:
    if not path.endswith(".ts") or has_client_directive(content):
        return
    if not (_DATA_LAYER_DIR_RE.search(path) or _DATA_LAYER_SUFFIX_RE.search(path)):
        return
    if not _LRU_DB_CALL_RE.search(content):
        return
    if (
        _LRU_PRESENT_RE.search(content)
        or _REDIS_PRESENT_RE.search(content)
        or _CACHE_INSTANCE_RE.search(content)
    ):
        return
    for i, line in enumerate(split_lines(content)):
        if _LRU_DB_CALL_RE.search(line):
            yield Hit(
                line=i + 1,
                message=(
                    "Data fetching functions lack cross-request caching — "
                    "sequential requests hit the database unnecessarily"
                ),
                help=(
                    'import { LRUCache } from "lru-cache"\n'
                    "const cache = new LRUCache({ max: 500, ttl: 5 * 60 * 1000 })"
                ),
            )
            return


def _check_cache_react(path: str, content: str, tables: RuleTables) -> Iterator[Hit]:
    if not has_ext(path, ".ts", ".tsx") or has_client_directive(content):
        return
    if not (_REACT_CACHE_DB_CALL_RE.search(content) or _AUTH_CALL_RE.search(content)):
        return
    if _REACT_CACHE_IMPORT_RE.search(content) or _CACHE_CALL_RE.search(content):
        return
    for i, line in enumerate(split_lines(content)):
        if _ASYNC_EXPORT_ANY_RE.search(line):
            yield Hit(
                line=i + 1,
                message=(
                    "Async server function makes db/auth queries without "
                    "React.cache() — same query runs on every call site within "
                    "a request"
                ),
                help=(
                    'import { cache } from "react"\n'
                    "export const getData = cache(async () => { /* your query */ })"
                ),
            )
            return


# ── server-dedup-props ──────────────────────────────────────────────

_TRANSFORMED_PROP_RE = re.compile(
    r"\w+=\{(\w+)\.(toSorted|toReversed|filter|map|slice|flat|flatMap)\s*\("
)
_DEDUP_WINDOW = 8


def _check_dedup_props(path: str, content: str, tables: RuleTables) -> Iterator[Hit]:
    if not is_component_file(path) or has_client_directive(content):
        return
    lines = split_lines(content)
    for i, line in enumerate(lines):
        m = _TRANSFORMED_PROP_RE.search(line)
        if not m:
            continue
        source_var, transform = m.group(1), m.group(2)
        direct_prop_re = re.compile(rf"\w+=\{{{source_var}\}}(?:[^.]|$)")
        start = max(0, i - _DEDUP_WINDOW)
        end = min(len(lines) - 1, i + _DEDUP_WINDOW)
        for j in range(start, end + 1):
            if j != i and direct_prop_re.search(lines[j]):
                yield Hit(
                    line=i + 1,
                    message=(
                        f'RSC passes both "{source_var}" and '
                        f'"{source_var}.{transform}()" as props — serializes '
                        "the array twice"
                    ),
                    help=(
                        f'Pass only "{source_var}" to the client component and '
                        f"apply .{transform}() there with useMemo"
                    ),
                )
                break


SERVER_PARALLEL_FETCHING = Rule(
    id=ids.SERVER_PARALLEL_FETCHING,
    title="Parallel Data Fetching with Component Composition",
    impact=Impact.CRITICAL,
    severity=Severity.CRITICAL,
    description=(
        "Async Server Components with await before rendering children create "
        "sequential waterfalls. Use composition to parallelize."
    ),
    url=best_practice_url(ids.SERVER_PARALLEL_FETCHING),
    check=_check_parallel_fetching,
)

SERVER_AUTH_ACTIONS = Rule(
    id=ids.SERVER_AUTH_ACTIONS,
    title="Authenticate Server Actions",
    impact=Impact.CRITICAL,
    severity=Severity.CRITICAL,
    description=(
        "Server Actions are public endpoints. Always verify authentication "
        "inside each action."
    ),
    url=best_practice_url(ids.SERVER_AUTH_ACTIONS),
    check=_check_auth_actions,
)

SERVER_SERIALIZATION = Rule(
    id=ids.SERVER_SERIALIZATION,
    title="Minimize Serialization at RSC Boundaries",
    impact=Impact.HIGH,
    severity=Severity.PERFORMANCE,
    description=(
        "Passing entire objects from Server to Client Components serializes "
        "all fields into HTML. Only pass the fields the client needs."
    ),
    url=best_practice_url(ids.SERVER_SERIALIZATION),
    check=_check_serialization,
)

SERVER_CACHE_LRU = Rule(
    id=ids.SERVER_CACHE_LRU,
    title="Cross-Request LRU Caching",
    impact=Impact.HIGH,
    severity=Severity.PERFORMANCE,
    description=(
        "React.cache() only deduplicates within one request. Server-side data "
        "utility functions accessed by sequential requests should use an LRU "
        "cache to avoid redundant database queries."
    ),
    url=best_practice_url(ids.SERVER_CACHE_LRU),
    check=_check_cache_lru,
)

SERVER_CACHE_REACT = Rule(
    id=ids.SERVER_CACHE_REACT,
    title="Per-Request Deduplication with React.cache()",
    impact=Impact.MEDIUM,
    severity=Severity.PERFORMANCE,
    description=(
        "Async server functions making database or auth queries run on every "
        "call site. Wrap with React.cache() to deduplicate within a single "
        "request."
    ),
    url=best_practice_url(ids.SERVER_CACHE_REACT),
    check=_check_cache_react,
)

SERVER_DEDUP_PROPS = Rule(
    id=ids.SERVER_DEDUP_PROPS,
    title="Avoid Duplicate Serialization in RSC Props",
    impact=Impact.LOW,
    severity=Severity.PERFORMANCE,
    description=(
        "RSC to client serialization deduplicates by object reference. Passing "
        "both an array and a transformed version (toSorted, filter, map) as "
        "separate props serializes both arrays. Send once and transform in "
        "the client."
    ),
    url=best_practice_url(ids.SERVER_DEDUP_PROPS),
    check=_check_dedup_props,
)

RULES: tuple[Rule, ...] = (
    SERVER_PARALLEL_FETCHING,
    SERVER_AUTH_ACTIONS,
    SERVER_SERIALIZATION,
    SERVER_CACHE_LRU,
    SERVER_CACHE_REACT,
    SERVER_DEDUP_PROPS,
)
