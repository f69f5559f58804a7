from __future__ import annotations

import re

from ..constants import ABBREVIATIONS
from ..issues import FIX_EDGE_NEWLINE, FIX_NODE_NEWLINE, FIX_SUBGRAPH_NEWLINE, Issue
from ..mermaid_fmt import collapse_label
from ..model import Diagram

ABBREVIATION_RES: tuple[tuple[re.Pattern[str], str], ...] = tuple(
    (re.compile(rf"\b{re.escape(abbr)}\b", re.IGNORECASE), full)
    for abbr, full in ABBREVIATIONS
)


def check_abbreviations(diagram: Diagram) -> list[Issue]:
    """Warn on node labels that use a short form instead of the full word."""
    issues: list[Issue] = []
    for node in diagram.nodes.values():
        for pattern, full in ABBREVIATION_RES:
            if not pattern.search(node.label):
                continue
            issues.append(
                Issue(
                    severity="warning",
                    code="W_LABEL_ABBREVIATION",
                    message=f"Node '{node.label}' may contain abbreviation",
                    line=node.line,
                    context=node.label,
                    suggestion=f"Consider using full word '{full}' instead",
                )
            )
            break
    return issues


def check_label_newlines(diagram: Diagram) -> list[Issue]:
    """Labels and titles must stay on one line."""
    issues: list[Issue] = []

    for node in diagram.nodes.values():
        if "\n" not in node.label:
            continue
        fixed = collapse_label(node.label)
        issues.append(
            Issue(
                severity="error",
                code="E_NODE_LABEL_NEWLINE",
                message=f"Node '{node.id}' contains newline in label",
                line=node.line,
                context=node.label,
                suggestion=f"Change to single line: {node.id}[{fixed}]",
                fix_kind=FIX_NODE_NEWLINE,
                fix_data={"id": node.id, "shape": node.shape, "old": node.label, "new": fixed},
            )
        )

    for edge in diagram.edges:
        if "\n" not in edge.label:
            continue
        fixed = collapse_label(edge.label)
        issues.append(
            Issue(
                severity="error",
                code="E_EDGE_LABEL_NEWLINE",
                message=f"Edge label contains newline: {edge.src} -> {edge.dst}",
                line=edge.line,
                context=edge.label,
                suggestion=f"Change to single line: |{fixed}|",
                fix_kind=FIX_EDGE_NEWLINE,
                fix_data={"from": edge.src, "to": edge.dst, "old": edge.label, "new": fixed},
            )
        )

    for sg in diagram.subgraphs:
        if "\n" not in sg.title:
            continue
        fixed = collapse_label(sg.title)
        issues.append(
            Issue(
                severity="error",
                code="E_SUBGRAPH_TITLE_NEWLINE",
                message=f"Subgraph '{sg.id}' title contains newline",
                line=sg.line,
                context=sg.title,
                suggestion=f'Change to single line: subgraph {sg.id} ["{fixed}"]',
                fix_kind=FIX_SUBGRAPH_NEWLINE,
                fix_data={"id": sg.id, "old": sg.title, "new": fixed},
            )
        )

    return issues
