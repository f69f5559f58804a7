from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from ..issues import Issue
from ..model import Diagram
from .arrows import check_arrow_styles
from .classdefs import check_class_defs
from .labels import check_abbreviations, check_label_newlines
from .subgraphs import check_subgraph_quotes
from .topology import check_complexity, check_orphan_nodes, check_undefined_endpoints

CheckFn = Callable[[Diagram], list[Issue]]


@dataclass(frozen=True)
class RuleSpec:
    rule_id: str
    title: str
    check: CheckFn


# Evaluation order is part of the output contract. Duplicate node ids have no
# rule: the parser keeps only the last definition.
RULES: list[RuleSpec] = [
    RuleSpec(
        rule_id="subgraph_quotes",
        title="Subgraph titles are quoted",
        check=check_subgraph_quotes,
    ),
    RuleSpec(
        rule_id="arrow_styles",
        title="Sync calls use ==>, async calls use -.->",
        check=check_arrow_styles,
    ),
    RuleSpec(
        rule_id="class_defs",
        title="Required classDefs are defined",
        check=check_class_defs,
    ),
    RuleSpec(
        rule_id="orphan_nodes",
        title="Every node is connected",
        check=check_orphan_nodes,
    ),
    RuleSpec(
        rule_id="undefined_endpoints",
        title="Every edge endpoint is a defined node",
        check=check_undefined_endpoints,
    ),
    RuleSpec(
        rule_id="abbreviations",
        title="Node labels avoid abbreviations",
        check=check_abbreviations,
    ),
    RuleSpec(
        rule_id="label_newlines",
        title="Labels stay on one line",
        check=check_label_newlines,
    ),
    RuleSpec(
        rule_id="complexity",
        title="Diagram is not spaghetti",
        check=check_complexity,
    ),
]
