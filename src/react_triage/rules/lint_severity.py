"""Severity classification for the external linter's diagnostic codes.

oxlint reports codes such as ``react-hooks(rules-of-hooks)`` or
``nextjs(no-img-element)``; the parenthesised suffix is the rule name.
"""

from __future__ import annotations

import re

from react_triage.model import Severity

CRITICAL_LINT_RULES: frozenset[str] = frozenset({
    "rules-of-hooks",
    "jsx-key",
    "no-direct-mutation-state",
    "jsx-no-undef",
    "no-script-component-in-head",
    "no-async-client-component",
    "no-typos",
    "require-render-return",
    "valid-jsx-nesting",
})

PERFORMANCE_LINT_RULES: frozenset[str] = frozenset({
    "exhaustive-deps",
    "jsx-no-bind",
    "no-unstable-nested-components",
    "jsx-no-useless-fragment",
    "no-string-refs",
    "no-sync-scripts",
    "google-font-display",
    "google-font-preconnect",
    "no-img-element",
    "no-array-index-key",
    # react-perf
    "jsx-no-new-object-as-prop",
    "jsx-no-new-array-as-prop",
    "jsx-no-new-function-as-prop",
    "jsx-no-jsx-as-prop",
    "no-barrel-file",
    "no-css-tags",
    "next-script-for-ga",
    "jsx-no-constructed-context-values",
})

BEST_PRACTICE_LINT_RULES: frozenset[str] = frozenset({
    "no-html-link-for-pages",
    "jsx-no-target-blank",
    "no-children-prop",
    "no-danger-with-children",
    "no-is-mounted",
    "no-redundant-should-component-update",
    "no-render-return-value",
    "no-unknown-property",
    "no-unescaped-entities",
    "void-dom-elements-no-children",
    "no-find-dom-node",
    "inline-script-id",
    "no-head-element",
    "no-page-custom-font",
    "no-unwanted-polyfillio",
    "no-title-in-document-head",
    "no-before-interactive-script-outside-document",
    "no-document-import-in-page",
    "no-head-import-in-document",
    "no-styled-jsx-in-document",
    "no-duplicate-head",
})

_RULE_NAME_RE = re.compile(r"\((.+)\)")


def extract_rule_name(code: str) -> str:
    m = _RULE_NAME_RE.search(code)
    return m.group(1) if m else code


def classify_lint_code(code: str) -> Severity:
    """Map a linter diagnostic code to a finding severity (default: info)."""
    rule = extract_rule_name(code)
    if rule in CRITICAL_LINT_RULES:
        return Severity.CRITICAL
    if rule in PERFORMANCE_LINT_RULES:
        return Severity.PERFORMANCE
    if rule in BEST_PRACTICE_LINT_RULES:
        return Severity.BEST_PRACTICE
    return Severity.INFO
