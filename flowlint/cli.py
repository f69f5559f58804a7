# flowlint/cli.py
from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Optional

from .completeness import CompletenessReport, check_completeness
from .constants import VALIDATOR_TIMEOUT_DEFAULT
from .errors import FlowlintError, ValidatorError
from .fixer import apply_fixes
from .io import read_text
from .issues import Issue
from .lint import LintConfig, count_by_severity, lint_diagram
from .manifest import load_manifest
from .mermaid_fmt import extract_block
from .mmdc import ValidatorConfig, validate_syntax
from .parser import parse_mermaid
from .report import format_completeness, format_coverage_line, format_issue, format_issues
from .writer import write_diagram


def _codes(raw: str) -> set[str]:
    return {c.strip() for c in raw.split(",") if c.strip()}


def _lint_config(args: argparse.Namespace) -> LintConfig:
    return LintConfig(ignore=_codes(args.ignore), escalate=_codes(args.escalate))


def _failed(issues: list[Issue], strict: bool) -> bool:
    errors, warnings = count_by_severity(issues)
    return bool(errors or (strict and warnings))


def _emit(lines: list[str]) -> None:
    for line in lines:
        print(line)


def _warn_skipped(skipped: int) -> None:
    if skipped:
        print(f"warning: {skipped} fix(es) could not be applied; edit those by hand", file=sys.stderr)


def _run_validator(code: str, timeout: float) -> bool:
    try:
        validate_syntax(code, ValidatorConfig.from_env(timeout=timeout))
    except ValidatorError as e:
        print(f"error: {e}", file=sys.stderr)
        if e.output:
            print(e.output.rstrip("\n"), file=sys.stderr)
        return False
    print("Mermaid syntax is valid")
    return True


def cmd_validate(args: argparse.Namespace) -> int:
    code = extract_block(read_text(args.diagram))
    return 0 if _run_validator(code, args.timeout) else 1


def cmd_lint(args: argparse.Namespace) -> int:
    document = read_text(args.diagram)
    code = extract_block(document)
    cfg = _lint_config(args)

    issues = lint_diagram(parse_mermaid(code), cfg)
    _emit(format_issues(issues))

    if not args.fix:
        failed = _failed(issues, args.strict)
        if failed and any(iss.fixable for iss in issues):
            print("(use --fix to auto-fix)")
        return 1 if failed else 0

    result = apply_fixes(code, issues)
    output_path: Path = args.output or args.diagram
    write_diagram(output_path, document, result.code)
    print(f"Applied {result.applied} automatic fixes")
    _warn_skipped(result.skipped)
    print(f"Written to {output_path}")

    remaining = lint_diagram(parse_mermaid(result.code), cfg)
    errors, warnings = count_by_severity(remaining)
    print(f"After fixes: {errors} errors, {warnings} warnings")
    for issue in remaining:
        if issue.is_error:
            _emit(format_issue(issue))
    return 1 if _failed(remaining, args.strict) else 0


def cmd_check(args: argparse.Namespace) -> int:
    code = extract_block(read_text(args.diagram))
    manifest = load_manifest(args.dependencies)

    print("Checking diagram completeness...")
    print()
    report = check_completeness(parse_mermaid(code), manifest)
    _emit(format_completeness(report))
    return 0 if report.complete else 1


def _print_stage(title: str) -> None:
    print(title)
    print("-" * len(title))


def cmd_refine(args: argparse.Namespace) -> int:
    document = read_text(args.diagram)
    code = extract_block(document)
    manifest = load_manifest(args.dependencies)
    cfg = _lint_config(args)

    _print_stage("Step 1: Syntax Validation")
    if args.skip_validate:
        print("Skipped (--skip-validate)")
    elif not _run_validator(code, args.timeout):
        return 1
    print()

    _print_stage("Step 2: Style Linting")
    issues = lint_diagram(parse_mermaid(code), cfg)
    _emit(format_issues(issues))
    result = apply_fixes(code, issues)
    if result.applied:
        print(f"Applied {result.applied} automatic fixes")
    _warn_skipped(result.skipped)
    diagram = parse_mermaid(result.code)
    remaining = lint_diagram(diagram, cfg)
    print()

    _print_stage("Step 3: Completeness Check")
    report: CompletenessReport = check_completeness(diagram, manifest)
    print(format_coverage_line(report))
    if report.missing:
        print(f"Missing {len(report.missing)} items:")
        for item in report.missing:
            print(f"  - {item.describe()}")
    else:
        print("All dependencies represented")
    print()

    output_path: Path = args.output or args.diagram
    write_diagram(output_path, document, result.code)

    print("=" * 50)
    errors, warnings = count_by_severity(remaining)
    failed = _failed(remaining, args.strict) or not report.complete
    if not failed:
        print("Refinement complete - diagram is ready")
    else:
        print("Refinement complete with issues")
        if errors:
            print(f"  {errors} style errors remain (manual fix required)")
        if args.strict and warnings:
            print(f"  {warnings} style warnings remain (--strict)")
        if report.missing:
            print(f"  {len(report.missing)} missing items (regenerate diagram)")
    print(f"Output: {output_path}")
    return 1 if failed else 0


def _add_lint_controls(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Fail on style warnings as well as errors.",
    )
    parser.add_argument(
        "--ignore",
        type=str,
        default="",
        help="Comma-separated issue codes to suppress (e.g. W_ORPHAN_NODE).",
    )
    parser.add_argument(
        "--escalate",
        type=str,
        default="",
        help="Comma-separated warning codes to report as errors.",
    )


def _add_timeout(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--timeout",
        type=float,
        default=VALIDATOR_TIMEOUT_DEFAULT,
        help="Seconds to wait for mermaid-cli before giving up.",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="flowlint",
        description="Lint and check Mermaid service-architecture diagrams in Markdown.",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("validate", help="Validate Mermaid syntax using mermaid-cli")
    p.add_argument("diagram", type=Path, help="Markdown file with a ```mermaid block")
    _add_timeout(p)
    p.set_defaults(func=cmd_validate)

    p = sub.add_parser("lint", help="Check the diagram against the style guide")
    p.add_argument("diagram", type=Path, help="Markdown file with a ```mermaid block")
    p.add_argument("--fix", action="store_true", help="Automatically fix issues")
    p.add_argument(
        "-o",
        "--output",
        type=Path,
        default=None,
        help="Output file for the fixed diagram (default: overwrite the input)",
    )
    _add_lint_controls(p)
    p.set_defaults(func=cmd_lint)

    p = sub.add_parser("check", help="Verify diagram completeness against dependencies")
    p.add_argument("diagram", type=Path, help="Markdown file with a ```mermaid block")
    p.add_argument("dependencies", type=Path, help="dependencies.yaml manifest")
    p.set_defaults(func=cmd_check)

    p = sub.add_parser(
        "refine",
        help="Run validate, lint --fix and check in sequence",
        description=(
            "Runs syntax validation, style linting with auto-fix, then the "
            "completeness check. Use --skip-validate if mermaid-cli is not "
            "installed."
        ),
    )
    p.add_argument("diagram", type=Path, help="Markdown file with a ```mermaid block")
    p.add_argument("dependencies", type=Path, help="dependencies.yaml manifest")
    p.add_argument(
        "--skip-validate", action="store_true", help="Skip mermaid-cli validation"
    )
    p.add_argument(
        "-o",
        "--output",
        type=Path,
        default=None,
        help="Output file for the refined diagram (default: overwrite the input)",
    )
    _add_lint_controls(p)
    _add_timeout(p)
    p.set_defaults(func=cmd_refine)

    return parser


def run(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        return args.func(args)
    except (OSError, UnicodeDecodeError, FlowlintError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 1


def main() -> None:
    """CLI entrypoint."""
    raise SystemExit(run())
