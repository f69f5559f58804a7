from __future__ import annotations

from ..constants import (
    FAN_OUT_THRESHOLD,
    HUB_CHECK_MIN_NODES,
    HUB_MIN_CONNECTIONS,
    MAX_EDGE_DENSITY,
    MAX_FAN_OUT_NODES,
    MAX_UNGROUPED_NODES,
    MIN_SUBGRAPHS_FOR_LARGE,
)
from ..issues import Issue
from ..model import Diagram


def check_orphan_nodes(diagram: Diagram) -> list[Issue]:
    return [
        Issue(
            severity="warning",
            code="W_ORPHAN_NODE",
            message=f"Orphan node '{node.id}' has no connections",
            line=node.line,
            context=node.label,
            suggestion="Add connections or remove the node",
        )
        for node in diagram.orphan_nodes()
    ]


def check_undefined_endpoints(diagram: Diagram) -> list[Issue]:
    """Edge endpoints with no node definition are left over from parsing."""
    first_line: dict[str, int] = {}
    for edge in diagram.edges:
        for node_id in (edge.src, edge.dst):
            first_line.setdefault(node_id, edge.line)
    return [
        Issue(
            severity="warning",
            code="W_UNDEFINED_ENDPOINT",
            message=f"Edge endpoint '{node_id}' is never defined as a node",
            line=first_line[node_id],
            context=node_id,
            suggestion=f"Define it on its own line, e.g. {node_id}[Label]",
        )
        for node_id in diagram.undefined_endpoints()
    ]


def spaghetti_reasons(diagram: Diagram) -> list[str]:
    """Return why the diagram looks tangled; empty if it does not.

    Four independent heuristics: too many ungrouped nodes, dense edges,
    several high fan-out nodes, and no dominant hub in a large diagram.
    """
    node_count = len(diagram.nodes)
    edge_count = len(diagram.edges)
    incident = diagram.incident_counts()
    max_connections = max(incident.values(), default=0)
    fan_out = sum(1 for count in diagram.out_degrees().values() if count > FAN_OUT_THRESHOLD)

    reasons: list[str] = []
    if node_count > MAX_UNGROUPED_NODES and len(diagram.subgraphs) < MIN_SUBGRAPHS_FOR_LARGE:
        reasons.append(f"{node_count} nodes without grouping")

    if node_count > 0:
        density = edge_count / node_count
        if density > MAX_EDGE_DENSITY:
            reasons.append(f"high edge density ({density:.1f} edges per node)")

    if fan_out > MAX_FAN_OUT_NODES:
        reasons.append(f"{fan_out} nodes with {FAN_OUT_THRESHOLD + 1}+ outgoing edges")

    if node_count > HUB_CHECK_MIN_NODES and max_connections < node_count // 2:
        reasons.append("no clear hub node - consider linear pipeline")

    return reasons


def check_complexity(diagram: Diagram) -> list[Issue]:
    reasons = spaghetti_reasons(diagram)
    if not reasons:
        return []

    issues = [
        Issue(
            severity="warning",
            code="W_DIAGRAM_SPAGHETTI",
            message=f"Diagram may be spaghetti: {', '.join(reasons)}",
            suggestion="Consider using linear pipeline layout with target service as hub",
        )
    ]

    # Counter.most_common keeps first-seen order among ties.
    hub = diagram.incident_counts().most_common(1)
    if hub and hub[0][1] > HUB_MIN_CONNECTIONS:
        hub_id, connections = hub[0]
        issues.append(
            Issue(
                severity="warning",
                code="W_HUB_CANDIDATE",
                message=f"Node '{hub_id}' has {connections} connections - good hub candidate",
                suggestion="Restructure diagram with this node as central hub",
            )
        )
    return issues
