"""Canonical rule ID registry.

Single source of truth for the ids of the built-in heuristic rules and
for the ids the collaborators emit alongside them.

Structure:
  HEURISTIC_RULE_IDS - built-in rules, in registry (execution) order
  CHECK_RULE_IDS     - ids emitted by the project-level checks
  ALL_RULE_IDS       - sorted union of both (internal use only)
"""

from __future__ import annotations

import re

# ── Async / waterfalls ──────────────────────────────────────────────
ASYNC_PARALLEL = "async-parallel"
ASYNC_DEFER_AWAIT = "async-defer-await"
ASYNC_DEPENDENCIES = "async-dependencies"
ASYNC_API_ROUTES = "async-api-routes"
ASYNC_SUSPENSE_BOUNDARIES = "async-suspense-boundaries"

# ── Bundle size ─────────────────────────────────────────────────────
BUNDLE_DYNAMIC_IMPORTS = "bundle-dynamic-imports"
BUNDLE_DEFER_THIRD_PARTY = "bundle-defer-third-party"
BUNDLE_CONDITIONAL = "bundle-conditional"

# ── Server components / actions ─────────────────────────────────────
SERVER_PARALLEL_FETCHING = "server-parallel-fetching"
SERVER_AUTH_ACTIONS = "server-auth-actions"
SERVER_SERIALIZATION = "server-serialization"
SERVER_CACHE_LRU = "server-cache-lru"
SERVER_CACHE_REACT = "server-cache-react"
SERVER_DEDUP_PROPS = "server-dedup-props"

# ── Next.js APIs ────────────────────────────────────────────────────
METADATA_IN_CLIENT_COMPONENT = "metadata-in-client-component"
NAVIGATION_IN_TRY_CATCH = "navigation-in-try-catch"
IMAGE_FILL_MISSING_SIZES = "image-fill-missing-sizes"
FONT_MANUAL_LINK = "font-manual-link"
USE_NEXT_OG = "use-next-og"

# ── Client / hydration ──────────────────────────────────────────────
HYDRATION_BROWSER_API = "hydration-browser-api"
CLIENT_SWR_DEDUP = "client-swr-dedup"
CLIENT_PASSIVE_EVENT_LISTENERS = "client-passive-event-listeners"

# ── Re-render / composition / rendering ─────────────────────────────
COMPOSITION_BOOLEAN_PROPS = "composition-boolean-props"
COMPOSITION_COMPOUND_COMPONENTS = "composition-compound-components"
RERENDER_DERIVED_STATE_NO_EFFECT = "rerender-derived-state-no-effect"
RERENDER_LAZY_STATE_INIT = "rerender-lazy-state-init"
RERENDER_MEMO_DEFAULT_VALUE = "rerender-memo-default-value"
JS_TOSORTED_IMMUTABLE = "js-tosorted-immutable"
RENDERING_CONDITIONAL_RENDER = "rendering-conditional-render"

# ── Project-level checks ────────────────────────────────────────────
TSCONFIG_MISSING = "tsconfig-missing"
TSCONFIG_STRICT = "tsconfig-strict"
TSCONFIG_JSX_TRANSFORM = "tsconfig-jsx-transform"
TSCONFIG_TARGET = "tsconfig-target"
ASYNC_CLIENT_COMPONENT = "async-client-component"
NO_CONSOLE = "no-console"

# ── Buckets ─────────────────────────────────────────────────────────

# Execution order matters: equal-severity findings keep this order.
HEURISTIC_RULE_IDS: tuple[str, ...] = (
    ASYNC_PARALLEL,
    ASYNC_DEFER_AWAIT,
    ASYNC_DEPENDENCIES,
    ASYNC_API_ROUTES,
    ASYNC_SUSPENSE_BOUNDARIES,
    BUNDLE_DYNAMIC_IMPORTS,
    SERVER_PARALLEL_FETCHING,
    SERVER_AUTH_ACTIONS,
    METADATA_IN_CLIENT_COMPONENT,
    NAVIGATION_IN_TRY_CATCH,
    HYDRATION_BROWSER_API,
    BUNDLE_DEFER_THIRD_PARTY,
    BUNDLE_CONDITIONAL,
    SERVER_SERIALIZATION,
    SERVER_CACHE_LRU,
    IMAGE_FILL_MISSING_SIZES,
    FONT_MANUAL_LINK,
    COMPOSITION_BOOLEAN_PROPS,
    COMPOSITION_COMPOUND_COMPONENTS,
    CLIENT_SWR_DEDUP,
    CLIENT_PASSIVE_EVENT_LISTENERS,
    RERENDER_DERIVED_STATE_NO_EFFECT,
    RERENDER_LAZY_STATE_INIT,
    RERENDER_MEMO_DEFAULT_VALUE,
    SERVER_CACHE_REACT,
    JS_TOSORTED_IMMUTABLE,
    USE_NEXT_OG,
    RENDERING_CONDITIONAL_RENDER,
    SERVER_DEDUP_PROPS,
)

CHECK_RULE_IDS: tuple[str, ...] = (
    TSCONFIG_MISSING,
    TSCONFIG_STRICT,
    TSCONFIG_JSX_TRANSFORM,
    TSCONFIG_TARGET,
    ASYNC_CLIENT_COMPONENT,
    NO_CONSOLE,
)

ALL_RULE_IDS: list[str] = sorted(set(HEURISTIC_RULE_IDS + CHECK_RULE_IDS))


def _assert_rule_registry_invariants() -> None:
    """Fail fast on invariant violations.

    Called at import time so CI and local runs catch issues immediately.
    """
    rule_re = re.compile(r"^[a-z][a-z0-9]*(?:-[a-z0-9]+)+$")

    for name, ids in (
        ("HEURISTIC_RULE_IDS", HEURISTIC_RULE_IDS),
        ("CHECK_RULE_IDS", CHECK_RULE_IDS),
    ):
        if len(ids) != len(set(ids)):
            raise AssertionError(f"{name} must contain unique IDs")
        bad = [x for x in ids if not rule_re.match(x)]
        if bad:
            raise AssertionError(f"{name} contains invalid rule IDs: {bad}")

    overlap = set(HEURISTIC_RULE_IDS) & set(CHECK_RULE_IDS)
    if overlap:
        raise AssertionError(
            f"Rule ID buckets must be disjoint; overlaps: {sorted(overlap)}"
        )


_assert_rule_registry_invariants()
