"""Next.js API misuse: metadata, navigation, images, fonts and OG images."""

from __future__ import annotations

import re
from typing import Iterator

from react_triage.model import Impact, Severity
from react_triage.rules import ids
from react_triage.rules.base import (
    Hit,
    Rule,
    has_client_directive,
    has_ext,
    is_component_file,
    split_lines,
)
from react_triage.rules.server import has_server_directive
from react_triage.rules.tables import RuleTables

_SCRIPT_EXTS = (".ts", ".tsx", ".js", ".jsx")

# ── metadata-in-client-component ────────────────────────────────────

_METADATA_EXPORT_RE = re.compile(r"^export\s+const\s+metadata\b")
_GENERATE_METADATA_RE = re.compile(r"^export\s+(async\s+)?function\s+generateMetadata\b")
_METADATA_HELP = (
    "Remove 'use client' and move client logic to child components, or "
    "extract metadata to a parent layout"
)


def _check_metadata(path: str, content: str, tables: RuleTables) -> Iterator[Hit]:
    if not has_ext(path, ".tsx", ".jsx", ".ts") or not has_client_directive(content):
        return
    for i, raw in enumerate(split_lines(content)):
        line = raw.strip()
        if _METADATA_EXPORT_RE.search(line):
            yield Hit(
                line=i + 1,
                message=(
                    '`export const metadata` in a "use client" file — metadata '
                    "is only supported in Server Components"
                ),
                help=_METADATA_HELP,
            )
        if _GENERATE_METADATA_RE.search(line):
            yield Hit(
                line=i + 1,
                message=(
                    '`generateMetadata` in a "use client" file — metadata is '
                    "only supported in Server Components"
                ),
                help=_METADATA_HELP,
            )


# ── navigation-in-try-catch ─────────────────────────────────────────

_NAV_CALL_RE = re.compile(
    r"\b(redirect|permanentRedirect|notFound|forbidden|unauthorized)\s*\("
)
_TRY_OPEN_RE = re.compile(r"\btry\s*\{")
_CATCH_RE = re.compile(r"\}\s*catch\b")
_FINALLY_RE = re.compile(r"\}\s*finally\b")
_RETHROW_WINDOW = 20


class TryBlockTracker:
    """Line-driven approximation of "am I inside a try/catch?".

    ``open`` runs before a line is inspected and ``close`` after it.  Only
    bare ``}`` lines not followed by ``catch``/``finally`` and ``} finally``
    lines end a block; nested braces inside the try body are not counted.
    """

    def __init__(self) -> None:
        self.depth = 0
        self.start_line = -1

    @property
    def inside(self) -> bool:
        return self.depth > 0

    def open(self, index: int, stripped: str) -> None:
        if _TRY_OPEN_RE.search(stripped):
            if self.depth == 0:
                self.start_line = index
            self.depth += 1

    def close(self, index: int, stripped: str, next_stripped: str) -> None:
        if (
            not _TRY_OPEN_RE.search(stripped)
            and not _CATCH_RE.search(stripped)
            and _FINALLY_RE.search(stripped)
        ):
            self.depth = max(0, self.depth - 1)
        if self.depth > 0 and stripped == "}" and index > self.start_line + 1:
            if not next_stripped.startswith(("catch", "finally")):
                self.depth = max(0, self.depth - 1)


def _check_navigation(path: str, content: str, tables: RuleTables) -> Iterator[Hit]:
    if not has_server_directive(content) or not has_ext(path, *_SCRIPT_EXTS):
        return
    lines = split_lines(content)
    tracker = TryBlockTracker()
    for i, raw in enumerate(lines):
        stripped = raw.strip()
        tracker.open(i, stripped)
        m = _NAV_CALL_RE.search(stripped) if tracker.inside else None
        if m:
            window = lines[max(0, tracker.start_line): i + _RETHROW_WINDOW]
            if "unstable_rethrow" not in "\n".join(window):
                fn = m.group(1)
                yield Hit(
                    line=i + 1,
                    message=(
                        f"{fn}() inside try-catch — this throws a special error "
                        "that will be caught, breaking navigation"
                    ),
                    help=(
                        f"Move {fn}() outside try-catch, or use "
                        "unstable_rethrow(error) in the catch block"
                    ),
                )
        next_stripped = lines[i + 1].strip() if i + 1 < len(lines) else ""
        tracker.close(i, stripped, next_stripped)


# ── image-fill-missing-sizes ────────────────────────────────────────

_IMAGE_OPEN_RE = re.compile(r"<Image\b")
_TAG_SELF_CLOSE_RE = re.compile(r"\/\s*>")
_TAG_CLOSE_LINE_RE = re.compile(r"^\s*>")
_FILL_RE = re.compile(r"\bfill\b")
_SIZES_RE = re.compile(r"\bsizes\s*=")
_TAG_LOOKAHEAD = 15


def _collect_tag(lines: list[str], start: int) -> str:
    tag = lines[start]
    for j in range(start, min(start + _TAG_LOOKAHEAD, len(lines))):
        tag = "\n".join(lines[start: j + 1])
        if _TAG_SELF_CLOSE_RE.search(lines[j]) or (
            j > start and _TAG_CLOSE_LINE_RE.search(lines[j])
        ):
            break
    return tag


def _check_image_sizes(path: str, content: str, tables: RuleTables) -> Iterator[Hit]:
    if not is_component_file(path) or "next/image" not in content:
        return
    lines = split_lines(content)
    for i, line in enumerate(lines):
        if not _IMAGE_OPEN_RE.search(line):
            continue
        tag = _collect_tag(lines, i)
        has_fill = bool(_FILL_RE.search(tag)) and "fill={false}" not in tag
        if has_fill and not _SIZES_RE.search(tag):
            yield Hit(
                line=i + 1,
                message=(
                    "<Image fill /> without `sizes` — browser downloads the "
                    "largest image variant"
                ),
                help=(
                    'Add sizes prop, e.g. sizes="(max-width: 768px) 100vw, 33vw" '
                    "for responsive behavior"
                ),
            )


# ── font-manual-link ────────────────────────────────────────────────

_GOOGLE_FONTS_CSS = "fonts.googleapis.com"
_GOOGLE_FONTS_FILES = "fonts.gstatic.com"
_LINK_TAG_RE = re.compile(r"<link\b")
_CSS_IMPORT_URL_RE = re.compile(r"@import\s+url\s*\(")


def _check_font_links(path: str, content: str, tables: RuleTables) -> Iterator[Hit]:
    is_component = has_ext(path, *_SCRIPT_EXTS)
    is_css = path.endswith(".css")
    if not (is_component or is_css):
        return
    lines = split_lines(content)
    first_fonts_line = next(
        (i for i, line in enumerate(lines) if _GOOGLE_FONTS_CSS in line), -1
    )
    inline_html = "dangerouslySetInnerHTML" in content

    for i, line in enumerate(lines):
        has_link = bool(_LINK_TAG_RE.search(line))
        if is_component and _GOOGLE_FONTS_CSS in line and has_link:
            yield Hit(
                line=i + 1,
                message=(
                    "Manual <link> to Google Fonts — blocks rendering and "
                    "causes layout shift"
                ),
                help=(
                    "Use next/font/google for self-hosted, optimized fonts: "
                    "import { Inter } from 'next/font/google'"
                ),
            )
        if is_component and _GOOGLE_FONTS_FILES in line and has_link:
            yield Hit(
                line=i + 1,
                message="Manual <link> to font files — use next/font for automatic optimization",
                help="Use next/font/google or next/font/local instead of manual font links",
            )
        if is_css and _CSS_IMPORT_URL_RE.search(line) and _GOOGLE_FONTS_CSS in line:
            yield Hit(
                line=i + 1,
                message="@import for Google Fonts in CSS — blocks rendering",
                help="Remove @import and use next/font/google in your layout.tsx instead",
            )
        if is_component and inline_html and i == first_fonts_line:
            yield Hit(
                line=i + 1,
                message="Google Fonts loaded via inline HTML — use next/font for optimization",
                help="Use next/font/google instead of injecting font stylesheets manually",
            )


# ── use-next-og ─────────────────────────────────────────────────────

_VERCEL_OG_IMPORT_RE = re.compile(r"""import\s+.*from\s+['"]@vercel\/og['"]""")
_VERCEL_OG_REQUIRE_RE = re.compile(r"""require\s*\(\s*['"]@vercel\/og['"]\s*\)""")


def _check_next_og(path: str, content: str, tables: RuleTables) -> Iterator[Hit]:
    if not has_ext(path, *_SCRIPT_EXTS):
        return
    for i, line in enumerate(split_lines(content)):
        if _VERCEL_OG_IMPORT_RE.search(line) or _VERCEL_OG_REQUIRE_RE.search(line):
            yield Hit(
                line=i + 1,
                message='Import from "@vercel/og" — use "next/og" instead (built into Next.js)',
                help="Replace: import { ImageResponse } from 'next/og'",
            )


METADATA_IN_CLIENT_COMPONENT = Rule(
    id=ids.METADATA_IN_CLIENT_COMPONENT,
    title="Metadata Not Supported in Client Components",
    impact=Impact.HIGH,
    severity=Severity.CRITICAL,
    description=(
        "The `metadata` object and `generateMetadata` function are only "
        "supported in Server Components. In files with 'use client', metadata "
        "is silently ignored."
    ),
    url="https://nextjs.org/docs/app/building-your-application/optimizing/metadata",
    check=_check_metadata,
)

NAVIGATION_IN_TRY_CATCH = Rule(
    id=ids.NAVIGATION_IN_TRY_CATCH,
    title="Navigation APIs Inside try-catch in Server Actions",
    impact=Impact.HIGH,
    severity=Severity.CRITICAL,
    description=(
        "redirect(), notFound(), forbidden(), and unauthorized() throw special "
        "errors that Next.js handles internally. Wrapping them in try-catch "
        "causes navigation to silently fail."
    ),
    url="https://nextjs.org/docs/app/api-reference/functions/redirect#behavior",
    check=_check_navigation,
)

IMAGE_FILL_MISSING_SIZES = Rule(
    id=ids.IMAGE_FILL_MISSING_SIZES,
    title="Image with fill Missing sizes Prop",
    impact=Impact.HIGH,
    severity=Severity.PERFORMANCE,
    description=(
        "Using <Image fill /> without a `sizes` prop causes the browser to "
        "download the largest image variant. Always provide `sizes` for proper "
        "responsive behavior."
    ),
    url="https://nextjs.org/docs/app/api-reference/components/image#sizes",
    check=_check_image_sizes,
)

FONT_MANUAL_LINK = Rule(
    id=ids.FONT_MANUAL_LINK,
    title="Use next/font Instead of Manual Font Links",
    impact=Impact.HIGH,
    severity=Severity.PERFORMANCE,
    description=(
        "Manual <link> tags and CSS @import for Google Fonts block rendering "
        "and cause layout shift. Use next/font for self-hosted, optimized fonts "
        "with zero CLS."
    ),
    url="https://nextjs.org/docs/app/building-your-application/optimizing/fonts",
    check=_check_font_links,
)

USE_NEXT_OG = Rule(
    id=ids.USE_NEXT_OG,
    title="Use next/og Instead of @vercel/og",
    impact=Impact.MEDIUM,
    severity=Severity.BEST_PRACTICE,
    description=(
        "`ImageResponse` is built into Next.js via `next/og`. Using "
        "`@vercel/og` is unnecessary and adds an extra dependency."
    ),
    url="https://nextjs.org/docs/app/api-reference/functions/image-response",
    check=_check_next_og,
)

RULES: tuple[Rule, ...] = (
    METADATA_IN_CLIENT_COMPONENT,
    NAVIGATION_IN_TRY_CATCH,
    IMAGE_FILL_MISSING_SIZES,
    FONT_MANUAL_LINK,
    USE_NEXT_OG,
)
