from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Optional


def as_int(value: Any, default: int = 0) -> int:
    """Convert a value to int, falling back to a default."""
    try:
        return int(value)
    except Exception:
        return default


@dataclass
class Node:
    id: str
    label: str
    shape: str
    line: int
    subgraph: Optional[str] = None
    classes: list[str] = field(default_factory=list)


@dataclass
class Edge:
    src: str
    dst: str
    arrow: str
    label: str = ""
    line: int = 0


@dataclass
class Subgraph:
    id: str
    title: str = ""
    quoted: bool = False
    line: int = 0
    nodes: list[str] = field(default_factory=list)


@dataclass
class Diagram:
    """A parsed flowchart.

    `nodes` keeps first-seen order; a redefined id keeps its slot but takes the
    later definition. `class_assignments` may name ids that were never defined
    as nodes.
    """

    direction: Optional[str] = None
    nodes: dict[str, Node] = field(default_factory=dict)
    edges: list[Edge] = field(default_factory=list)
    subgraphs: list[Subgraph] = field(default_factory=list)
    class_defs: dict[str, str] = field(default_factory=dict)
    class_assignments: dict[str, list[str]] = field(default_factory=dict)

    def has_node_with_label(self, name: str) -> bool:
        """True if some node label equals or contains `name`, ignoring case."""
        needle = name.lower()
        return any(needle in node.label.lower() for node in self.nodes.values())

    def orphan_nodes(self) -> list[Node]:
        connected: set[str] = set()
        for edge in self.edges:
            connected.add(edge.src)
            connected.add(edge.dst)
        return [node for node_id, node in self.nodes.items() if node_id not in connected]

    def undefined_endpoints(self) -> list[str]:
        """Edge endpoints that never got a node definition, in first-seen order."""
        seen: dict[str, None] = {}
        for edge in self.edges:
            for node_id in (edge.src, edge.dst):
                if node_id not in self.nodes:
                    seen.setdefault(node_id, None)
        return list(seen)

    def incident_counts(self) -> Counter[str]:
        """Edges touching each id (a self-loop counts twice)."""
        counts: Counter[str] = Counter()
        for edge in self.edges:
            counts[edge.src] += 1
            counts[edge.dst] += 1
        return counts

    def out_degrees(self) -> Counter[str]:
        return Counter(edge.src for edge in self.edges)
