from __future__ import annotations

from ..issues import QUOTE_SUBGRAPH, Issue
from ..model import Diagram


def check_subgraph_quotes(diagram: Diagram) -> list[Issue]:
    """Subgraph titles must be wrapped in double quotes."""
    issues: list[Issue] = []
    for sg in diagram.subgraphs:
        if sg.quoted or not sg.title:
            continue
        issues.append(
            Issue(
                severity="error",
                code="E_SUBGRAPH_TITLE_UNQUOTED",
                message=f"Subgraph '{sg.id}' title is not quoted",
                line=sg.line,
                context=f"subgraph {sg.id} [{sg.title}]",
                suggestion=f'Change to: subgraph {sg.id} ["{sg.title}"]',
                fix_kind=QUOTE_SUBGRAPH,
                fix_data={"id": sg.id, "title": sg.title},
            )
        )
    return issues
