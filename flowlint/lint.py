from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from typing import Optional

from .issues import Issue
from .model import Diagram
from .rules.registry import RULES


@dataclass(frozen=True)
class LintConfig:
    """Rule controls.

    `ignore` drops issues by code; `escalate` turns matching warnings into
    errors. Both are empty by default.
    """

    ignore: set[str] = field(default_factory=set)
    escalate: set[str] = field(default_factory=set)


def lint_diagram(diagram: Diagram, cfg: Optional[LintConfig] = None) -> list[Issue]:
    """Run every rule in catalog order and return the concatenated issues."""

    cfg = cfg or LintConfig()
    issues: list[Issue] = []

    for rule in RULES:
        for issue in rule.check(diagram):
            if issue.code in cfg.ignore:
                continue
            if issue.severity == "warning" and issue.code in cfg.escalate:
                issue = dataclasses.replace(issue, severity="error")
            issues.append(issue)

    return issues


def count_by_severity(issues: list[Issue]) -> tuple[int, int]:
    """Return (errors, warnings)."""
    errors = sum(1 for iss in issues if iss.is_error)
    return errors, len(issues) - errors
