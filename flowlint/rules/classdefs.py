from __future__ import annotations

from ..constants import REQUIRED_CLASSES
from ..issues import ADD_CLASSDEF, Issue
from ..model import Diagram


def check_class_defs(diagram: Diagram) -> list[Issue]:
    issues: list[Issue] = []
    for class_name in REQUIRED_CLASSES:
        if class_name in diagram.class_defs:
            continue
        issues.append(
            Issue(
                severity="warning",
                code="W_CLASSDEF_MISSING",
                message=f"Missing classDef for '{class_name}'",
                suggestion=f"Add: classDef {class_name} fill:#...,stroke:#...,color:#...",
                fix_kind=ADD_CLASSDEF,
                fix_data={"class": class_name},
            )
        )
    return issues
