"""Heuristic rules for React / Next.js source files.

Every rule satisfies the same contract (see ``rules.base``):
static metadata plus a pure ``detect(path, content)`` that returns
findings for that one file.  ``rules.registry`` holds them in execution
order and isolates failures per rule.

Families:
    - async_rules: sequential-await waterfalls
    - bundle: heavy / deferrable static imports
    - server: Server Components and Server Actions
    - nextjs: metadata, navigation, images, fonts, OG images
    - client: hydration hazards, fetch-in-effect, passive listeners
    - composition / rerender / rendering: component API and render hygiene
"""

from __future__ import annotations


# Lazy imports to avoid circular dependencies
def __getattr__(name: str):
    if name in ("Rule", "Hit"):
        from . import base
        return getattr(base, name)
    if name in ("RuleTables", "DEFAULT_TABLES"):
        from . import tables
        return getattr(tables, name)
    if name in ("RuleRegistry", "RuleFault", "RuleSweep", "build_rules", "default_registry"):
        from . import registry
        return getattr(registry, name)
    if name == "classify_lint_code":
        from .lint_severity import classify_lint_code
        return classify_lint_code
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
