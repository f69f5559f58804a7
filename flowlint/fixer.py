# flowlint/fixer.py
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, Iterable

from .constants import SHAPES
from .issues import (
    ADD_CLASSDEF,
    FIX_ARROW,
    FIX_EDGE_NEWLINE,
    FIX_NODE_NEWLINE,
    FIX_SUBGRAPH_NEWLINE,
    QUOTE_SUBGRAPH,
    Issue,
)
from .mermaid_fmt import mm_palette_class_def, mm_subgraph_open

SHAPE_DELIMITERS: dict[str, tuple[str, str]] = {shape: (o, c) for o, c, shape in SHAPES}

DEFAULT_INDENT = "    "


@dataclass(frozen=True)
class FixResult:
    code: str
    applied: int
    skipped: int


def _ident(node_id: str) -> str:
    """Regex for `node_id` as a whole identifier."""
    return rf"(?<![A-Za-z0-9_]){re.escape(node_id)}(?![A-Za-z0-9_])"


def _multiline(text: str) -> str:
    """Regex for `text` that also matches it with CRLF line endings."""
    return r"\r?\n".join(re.escape(part) for part in text.split("\n"))


def _sub_once(pattern: str, repl: Callable[[re.Match[str]], str], lines: list[str]) -> bool:
    """Apply `pattern` once across the joined text, updating `lines` in place."""
    text = "\n".join(lines)
    new_text, n = re.subn(pattern, repl, text, count=1)
    if not n:
        return False
    lines[:] = new_text.split("\n")
    return True


def _quote_subgraph(lines: list[str], data: dict[str, str]) -> bool:
    sg_id, title = data["id"], data["title"]
    locator = re.compile(rf"subgraph\s+{re.escape(sg_id)}(?![A-Za-z0-9_-])")
    bracketed = re.compile(rf"subgraph\s+{re.escape(sg_id)}\s*\[([^\]\"]+)\]")
    bare = re.compile(rf"subgraph\s+{re.escape(sg_id)}\s+([^\"\[\]\r]+)(?=\r?$)")
    replacement = mm_subgraph_open(sg_id, title)

    for i, line in enumerate(lines):
        if not locator.search(line) or '"' in line:
            continue
        for pattern in (bracketed, bare):
            if pattern.search(line):
                lines[i] = pattern.sub(lambda _m: replacement, line, count=1)
                return True
        return False
    return False


def _fix_arrow(lines: list[str], data: dict[str, str]) -> bool:
    pattern = (
        rf"({_ident(data['from'])}\s*)"
        + re.escape(data["old"])
        + rf"(\s*(?:\|[^|]*\|)?\s*{_ident(data['to'])})"
    )
    return _sub_once(pattern, lambda m: m.group(1) + data["new"] + m.group(2), lines)


def _add_classdef(lines: list[str], data: dict[str, str]) -> bool:
    definition = mm_palette_class_def(data["class"])
    if definition is None:
        return False

    anchor = -1
    for i, line in enumerate(lines):
        if line.strip().startswith(("flowchart", "classDef")):
            anchor = i
    if anchor < 0:
        return False

    anchor_line = lines[anchor]
    indent = DEFAULT_INDENT
    if anchor_line.strip().startswith("classDef"):
        indent = anchor_line[: len(anchor_line) - len(anchor_line.lstrip())]
    lines.insert(anchor + 1, indent + definition)
    return True


def _fix_node_newline(lines: list[str], data: dict[str, str]) -> bool:
    open_, close = SHAPE_DELIMITERS.get(data.get("shape", ""), ("[", "]"))
    pattern = (
        rf"({_ident(data['id'])}{re.escape(open_)})"
        + _multiline(data["old"])
        + rf"({re.escape(close)})"
    )
    return _sub_once(pattern, lambda m: m.group(1) + data["new"] + m.group(2), lines)


def _fix_edge_newline(lines: list[str], data: dict[str, str]) -> bool:
    pattern = r"\|" + _multiline(data["old"]) + r"\|"
    return _sub_once(pattern, lambda _m: f"|{data['new']}|", lines)


def _fix_subgraph_newline(lines: list[str], data: dict[str, str]) -> bool:
    sg_id = data["id"]
    pattern = (
        rf"subgraph\s+{re.escape(sg_id)}\s*\[?\s*\"?\s*"
        + _multiline(data["old"])
        + r"\s*\"?\s*\]?"
    )
    replacement = mm_subgraph_open(sg_id, data["new"])
    return _sub_once(pattern, lambda _m: replacement, lines)


FIXERS: dict[str, Callable[[list[str], dict[str, str]], bool]] = {
    QUOTE_SUBGRAPH: _quote_subgraph,
    FIX_ARROW: _fix_arrow,
    ADD_CLASSDEF: _add_classdef,
    FIX_NODE_NEWLINE: _fix_node_newline,
    FIX_EDGE_NEWLINE: _fix_edge_newline,
    FIX_SUBGRAPH_NEWLINE: _fix_subgraph_newline,
}


def apply_fixes(code: str, issues: Iterable[Issue]) -> FixResult:
    """Rewrite diagram source for each fixable issue, in issue order.

    Each fix edits the first place its locator matches and leaves every other
    line as it was. Issues without a fix are ignored; fixes whose target can
    no longer be found are counted in `skipped`. A quoting fix for a subgraph
    whose title also gets a newline fix is dropped, since that fix rewrites
    the header quoted.
    """
    issues = list(issues)
    lines = code.split("\n")
    applied = skipped = 0
    rewritten_headers = {
        issue.fix_data.get("id") for issue in issues if issue.fix_kind == FIX_SUBGRAPH_NEWLINE
    }

    for issue in issues:
        if not issue.fixable:
            continue
        if issue.fix_kind == QUOTE_SUBGRAPH and issue.fix_data.get("id") in rewritten_headers:
            continue
        fixer = FIXERS.get(issue.fix_kind)
        if fixer is not None and fixer(lines, issue.fix_data):
            applied += 1
        else:
            skipped += 1

    return FixResult(code="\n".join(lines), applied=applied, skipped=skipped)
