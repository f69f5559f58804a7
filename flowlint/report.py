from __future__ import annotations

from .completeness import CompletenessReport, CoverageItem
from .issues import Issue
from .lint import count_by_severity


def format_issue(issue: Issue) -> list[str]:
    where = f"line {issue.line}: " if issue.line > 0 else ""
    lines = [f"{issue.severity}: {where}{issue.message} [{issue.code}]"]
    if issue.context:
        lines.append(f"  context: {issue.context}")
    if issue.suggestion:
        lines.append(f"  suggestion: {issue.suggestion}")
    return lines


def format_issues(issues: list[Issue]) -> list[str]:
    if not issues:
        return ["No style issues found"]
    out: list[str] = []
    for issue in issues:
        out.extend(format_issue(issue))
    errors, warnings = count_by_severity(issues)
    out.append(f"Found {errors} errors, {warnings} warnings")
    return out


def _item_line(item: CoverageItem) -> str:
    mark = "✓" if item.found else "✗"
    text = f"    {mark} {item.name}"
    if item.direction:
        text += f" ({item.direction})"
    if not item.found:
        text += " (MISSING)"
    return text


def format_coverage_line(report: CompletenessReport) -> str:
    if not report.total:
        return "Coverage: 0/0 (no dependencies)"
    return f"Coverage: {report.found}/{report.total} ({report.percent:.0f}%)"


def format_completeness(report: CompletenessReport) -> list[str]:
    out: list[str] = []
    for svc in report.services:
        out.append(f"Service: {svc.name}")
        out.append("-" * 40)
        for section in svc.sections:
            out.append(f"  {section.heading}:")
            out.extend(_item_line(item) for item in section.items)
        out.append("")

    out.append("=" * 50)
    out.append(format_coverage_line(report))
    missing = report.missing
    if missing:
        out.append("")
        out.append("Missing items:")
        out.extend(f"  - {item.describe()}" for item in missing)
    else:
        out.append("Diagram is complete")
    return out
