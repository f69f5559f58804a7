from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

Severity = Literal["error", "warning"]

# Fix kinds understood by the fixer.
QUOTE_SUBGRAPH = "quote_subgraph"
FIX_ARROW = "fix_arrow"
ADD_CLASSDEF = "add_classdef"
FIX_NODE_NEWLINE = "fix_node_newline"
FIX_EDGE_NEWLINE = "fix_edge_newline"
FIX_SUBGRAPH_NEWLINE = "fix_subgraph_newline"


@dataclass(frozen=True)
class Issue:
    """A single lint finding.

    `line` is 0 for diagram-wide findings. Fixable issues carry a `fix_kind`
    and the few strings the fixer needs to locate and rewrite the text in
    `fix_data`.
    """

    severity: Severity
    code: str
    message: str
    line: int = 0
    context: str = ""
    suggestion: str = ""
    fix_kind: str = ""
    fix_data: dict[str, str] = field(default_factory=dict)

    @property
    def fixable(self) -> bool:
        return bool(self.fix_kind)

    @property
    def is_error(self) -> bool:
        return self.severity == "error"
