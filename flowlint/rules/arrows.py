from __future__ import annotations

from typing import Iterable

from ..constants import ASYNC_ARROW, ASYNC_KEYWORDS, SYNC_ARROW, SYNC_KEYWORDS
from ..issues import FIX_ARROW, Issue
from ..model import Diagram, Edge


def _mentions(label: str, keywords: Iterable[str]) -> bool:
    lowered = label.lower()
    return any(keyword in lowered for keyword in keywords)


def _arrow_fix(edge: Edge, new_arrow: str) -> dict[str, str]:
    return {"from": edge.src, "to": edge.dst, "old": edge.arrow, "new": new_arrow}


def check_arrow_styles(diagram: Diagram) -> list[Issue]:
    """Async traffic is drawn with `-.->`, sync calls with `==>`."""
    issues: list[Issue] = []
    for edge in diagram.edges:
        if edge.arrow == SYNC_ARROW and _mentions(edge.label, ASYNC_KEYWORDS):
            issues.append(
                Issue(
                    severity="error",
                    code="E_ASYNC_ON_SYNC_ARROW",
                    message=f"Async call '{edge.label}' using sync arrow ({SYNC_ARROW})",
                    line=edge.line,
                    context=f"{edge.src} {edge.arrow}|{edge.label}| {edge.dst}",
                    suggestion=f"Change {SYNC_ARROW} to {ASYNC_ARROW} for async calls",
                    fix_kind=FIX_ARROW,
                    fix_data=_arrow_fix(edge, ASYNC_ARROW),
                )
            )
        elif edge.arrow == ASYNC_ARROW and _mentions(edge.label, SYNC_KEYWORDS):
            issues.append(
                Issue(
                    severity="warning",
                    code="W_SYNC_ON_ASYNC_ARROW",
                    message=f"Sync call '{edge.label}' using async arrow ({ASYNC_ARROW})",
                    line=edge.line,
                    context=f"{edge.src} {edge.arrow}|{edge.label}| {edge.dst}",
                    suggestion=f"Change {ASYNC_ARROW} to {SYNC_ARROW} for sync calls",
                    fix_kind=FIX_ARROW,
                    fix_data=_arrow_fix(edge, SYNC_ARROW),
                )
            )
    return issues
