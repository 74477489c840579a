"""Fixed package/name tables consulted by the heuristic rules.

The tables are immutable and handed to the registry at construction time;
tests swap in their own :class:`RuleTables` to exercise a rule in isolation.
"""

from __future__ import annotations

from dataclasses import dataclass

# Libraries large enough that a static import hurts the initial bundle.
HEAVY_IMPORTS: tuple[str, ...] = (
    "monaco-editor",
    "@monaco-editor/react",
    "react-quill",
    "draft-js",
    "slate",
    "slate-react",
    "chart.js",
    "recharts",
    "react-chartjs-2",
    "d3",
    "three",
    "@react-three/fiber",
    "react-map-gl",
    "mapbox-gl",
    "leaflet",
    "react-leaflet",
    "react-pdf",
    "@react-pdf/renderer",
    "react-markdown",
    "react-syntax-highlighter",
    "prism-react-renderer",
    "codemirror",
    "@codemirror/view",
    "ace-builds",
    "react-ace",
    "react-datepicker",
    "react-big-calendar",
    "react-dnd",
    "framer-motion",
    "lottie-react",
    "react-player",
    "video.js",
    "cropperjs",
    "react-cropper",
)

# Analytics / tracking packages that can load after hydration.
DEFERRABLE_PACKAGES: tuple[str, ...] = (
    "@vercel/analytics",
    "@vercel/speed-insights",
    "@sentry/nextjs",
    "@sentry/react",
    "posthog-js",
    "@posthog/react",
    "mixpanel-browser",
    "@segment/analytics-next",
    "hotjar-react-hook",
    "@hotjar/browser",
    "react-ga4",
    "@google-analytics/ga",
    "intercom-react",
    "crisp-sdk-web",
    "drift-react",
    "@datadog/browser-rum",
    "logrocket",
    "fullstory-browser",
    "amplitude-js",
    "@amplitude/analytics-browser",
)

# Props that are routinely scalar; passing them never serializes a whole object.
SCALAR_PROP_NAMES: frozenset[str] = frozenset({
    "id", "name", "title", "label", "value", "error", "loading",
    "disabled", "className", "style", "key", "ref", "children",
})


@dataclass(frozen=True, slots=True)
class RuleTables:
    heavy_imports: tuple[str, ...] = HEAVY_IMPORTS
    deferrable_packages: tuple[str, ...] = DEFERRABLE_PACKAGES
    scalar_prop_names: frozenset[str] = SCALAR_PROP_NAMES


DEFAULT_TABLES = RuleTables()


def matches_package(specifier: str, packages: tuple[str, ...]) -> bool:
    """True if *specifier* is one of *packages* or a sub-path of one."""
    return any(
        specifier == pkg or specifier.startswith(pkg + "/") for pkg in packages
    )
