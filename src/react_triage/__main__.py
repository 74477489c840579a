"""CLI entry-point for react_triage.

Usage:
    python -m react_triage [path]
    python -m react_triage [path] --show-all
    python -m react_triage [path] --critical --performance
    python -m react_triage [path] --to-markdown report.md
    python -m react_triage [path] --json
    python -m react_triage [path] --fail-on critical
    python -m react_triage [path] --config .react-triage.yaml

Exit codes: 0 clean, 1 fail-on policy triggered / no package.json / scan
error, 2 rejected arguments or configuration.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from react_triage import __version__
from react_triage.analyzers.manifest import MANIFEST_NAME, has_manifest
from react_triage.api import (
    MissingManifestError,
    resolve_fail_on,
    result_payload,
    run_gated_scan,
)
from react_triage.core.config import TriageConfig
from react_triage.model import Severity
from react_triage.policy.fail_on import VALID_SEVERITIES
from react_triage.reports.dashboard import DisplayOptions, render_dashboard
from react_triage.reports.exporters import export_markdown
from react_triage.utils.exit_codes import ExitCode
from react_triage.utils.json_norm import stable_json_dump

_logger = logging.getLogger("react_triage")


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="react-triage",
        description="Health check for React and Next.js projects.",
        epilog="Severity filters can be combined: react-triage --critical --performance",
    )
    p.add_argument(
        "path",
        nargs="?",
        type=Path,
        default=Path("."),
        help="Project directory containing package.json (default: current directory).",
    )
    p.add_argument(
        "--show-all",
        action="store_true",
        default=False,
        help="Show all issues (no truncation per category).",
    )

    # ── display filters (never change the score) ────────────────────
    p.add_argument("--critical", action="store_true", help="Show only critical issues.")
    p.add_argument("--performance", action="store_true", help="Show only performance issues.")
    p.add_argument(
        "--best-practices",
        dest="best_practices",
        action="store_true",
        help="Show only best-practice issues.",
    )

    # ── outputs ─────────────────────────────────────────────────────
    p.add_argument(
        "--to-markdown",
        dest="to_markdown",
        type=Path,
        default=None,
        metavar="FILE",
        help="Export the results to a Markdown file.",
    )
    p.add_argument(
        "--json",
        dest="json_out",
        action="store_true",
        default=False,
        help="Print the full ScanResult JSON to stdout (dashboard goes to stderr).",
    )

    # ── policy / config ─────────────────────────────────────────────
    p.add_argument(
        "--fail-on",
        dest="fail_on",
        default=None,
        metavar="SEVERITY",
        help=(
            "Exit 1 when any issue, dependency issue or mapped vulnerability has "
            f"exactly this severity ({', '.join(VALID_SEVERITIES)})."
        ),
    )
    p.add_argument(
        "--config",
        type=Path,
        default=None,
        metavar="FILE",
        help="YAML config file (default: .react-triage.yaml in the project, if any).",
    )
    p.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return p


def _severity_filter(args: argparse.Namespace) -> frozenset[Severity]:
    selected: set[Severity] = set()
    if args.critical:
        selected.add(Severity.CRITICAL)
    if args.performance:
        selected.add(Severity.PERFORMANCE)
    if args.best_practices:
        selected.add(Severity.BEST_PRACTICE)
    return frozenset(selected)


def _load_config(args: argparse.Namespace, target: Path) -> TriageConfig:
    if args.config is not None:
        return TriageConfig.from_yaml(args.config)
    return TriageConfig.discover(target)


def main(argv: list[str] | None = None) -> int:
    """Entry-point — returns an exit code (see ``utils.exit_codes``)."""
    args = _build_parser().parse_args(argv)
    _configure_logging(args.verbose)

    target: Path = args.path.resolve()

    # ── 1. reject bad configuration before scanning ─────────────────
    try:
        config = _load_config(args, target)
        gate = resolve_fail_on(args.fail_on, config)
    except (ValueError, OSError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return ExitCode.USAGE

    if not has_manifest(target):
        print(
            f"\n  ✖ No {MANIFEST_NAME} found in {target}\n"
            "  Make sure you're in a React project directory.\n",
            file=sys.stderr,
        )
        return ExitCode.FAILURE

    # ── 2. scan ─────────────────────────────────────────────────────
    print("Scanning project vitals...", file=sys.stderr)
    try:
        result, outcome = run_gated_scan(target, fail_on=gate, config=config)
    except MissingManifestError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return ExitCode.FAILURE
    except Exception as exc:
        _logger.debug("Scan failed", exc_info=True)
        print(f"\n  ✖ Error during scan: {exc}\n", file=sys.stderr)
        return ExitCode.FAILURE

    # ── 3. report ───────────────────────────────────────────────────
    options = DisplayOptions(show_all=args.show_all, severity_filter=_severity_filter(args))
    dashboard = render_dashboard(result, options, outcome=outcome)
    print(dashboard, end="", file=sys.stderr if args.json_out else sys.stdout)

    if args.to_markdown is not None:
        md_path = args.to_markdown.resolve()
        try:
            md_path.parent.mkdir(parents=True, exist_ok=True)
            md_path.write_text(
                export_markdown(result, show_all=args.show_all), encoding="utf-8"
            )
        except OSError as exc:
            print(f"error: could not write {md_path}: {exc}", file=sys.stderr)
            return ExitCode.FAILURE
        print(f"\n  📄 Report exported to {md_path}\n", file=sys.stderr)

    if args.json_out:
        stable_json_dump(result_payload(result, outcome), sys.stdout, indent=2)

    if outcome is not None and outcome.should_fail:
        return ExitCode.FAILURE
    return ExitCode.SUCCESS


if __name__ == "__main__":
    raise SystemExit(main())
