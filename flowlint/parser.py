# flowlint/parser.py
from __future__ import annotations

import re
from typing import Iterator, Optional

from .constants import ARROWS, DIRECTIONS, MAX_CONTINUATION_LINES, SHAPES
from .model import Diagram, Edge, Node, Subgraph

DIRECTION_RE = re.compile(r"^flowchart\s+(" + "|".join(DIRECTIONS) + r")\b")
SUBGRAPH_RE = re.compile(r"^subgraph\s+([A-Za-z0-9_-]+)(.*)$", re.DOTALL)
END_RE = re.compile(r"^end$")
CLASS_DEF_RE = re.compile(r"^classDef\s+([A-Za-z0-9_]+)\s+(.+)$", re.DOTALL)
CLASS_RE = re.compile(r"^class\s+([A-Za-z0-9_,\s]+?)\s+([A-Za-z0-9_]+)\s*;?$")
EDGE_RE = re.compile(
    r"^([A-Za-z0-9_]+)\s*("
    + "|".join(re.escape(arrow) for arrow in ARROWS)
    + r")\s*(?:\|([^|]*)\|)?\s*([A-Za-z0-9_]+)",
    re.DOTALL,
)
NODE_RES: tuple[tuple[re.Pattern[str], str], ...] = tuple(
    (
        re.compile(
            r"^([A-Za-z0-9_]+)"
            + re.escape(open_)
            + r"(.+?)"
            + re.escape(close)
            + r"(?::::([A-Za-z0-9_]+))?",
            re.DOTALL,
        ),
        shape,
    )
    for open_, close, shape in SHAPES
)

# Statements that never wrap; a stray bracket in them must not swallow the
# lines that follow.
_SINGLE_LINE_PREFIXES = ("%%", "flowchart", "classDef", "class ", "style ", "linkStyle", "click ")

QUOTED_RE = re.compile(r'"[^"]*"')


def _is_unbalanced(text: str) -> bool:
    """True if `text` leaves a quote, pipe or bracket open.

    Delimiters inside closed double-quoted spans do not count.
    """
    bare = QUOTED_RE.sub("", text)
    if '"' in bare or bare.count("|") % 2:
        return True
    return any(bare.count(o) > bare.count(c) for o, c in (("[", "]"), ("(", ")"), ("{", "}")))


def _is_complete_statement(line: str) -> bool:
    """True if an edge or node recognizer consumes the whole line."""
    text = line.rstrip(";").rstrip()
    if EDGE_RE.fullmatch(text):
        return True
    return any(node_re.fullmatch(text) for node_re, _ in NODE_RES)


def _logical_lines(code: str) -> Iterator[tuple[int, str]]:
    """Yield (1-based line, statement) pairs, joining labels that wrap lines.

    A statement with an unclosed quote, bracket or pipe absorbs following
    lines until it balances. If it does not balance within
    MAX_CONTINUATION_LINES, or a blank line or the end of input comes first,
    the first line is taken alone.
    """
    raw = code.split("\n")
    i = 0
    while i < len(raw):
        first = raw[i].strip()
        if (
            not first
            or first.startswith(_SINGLE_LINE_PREFIXES)
            or not _is_unbalanced(first)
            or _is_complete_statement(first)
        ):
            yield i + 1, first
            i += 1
            continue

        joined = raw[i].rstrip("\r")
        end: Optional[int] = None
        for j in range(i + 1, min(len(raw), i + 1 + MAX_CONTINUATION_LINES)):
            if not raw[j].strip():
                break
            joined += "\n" + raw[j].rstrip("\r")
            if not _is_unbalanced(joined):
                end = j
                break

        if end is None:
            yield i + 1, first
            i += 1
        else:
            yield i + 1, joined.strip()
            i = end + 1


def _parse_subgraph_title(rest: str) -> tuple[str, bool]:
    """Return (title, quoted) for the text following `subgraph <id>`."""
    inner = rest.strip()
    if inner.startswith("["):
        inner = inner[1:]
        if inner.endswith("]"):
            inner = inner[:-1]
        inner = inner.strip()
    quoted = inner.startswith('"') or inner.endswith('"')
    return inner.strip('"').strip(), quoted


def parse_mermaid(code: str) -> Diagram:
    """Parse flowchart source into a Diagram.

    Unrecognized statements are skipped. Recognizers are tried in order:
    direction, subgraph open, `end`, classDef, class, edge, node.
    """
    diagram = Diagram()
    open_subgraphs: list[Subgraph] = []

    for line_no, line in _logical_lines(code):
        if not line or line.startswith("%%"):
            continue

        m = DIRECTION_RE.match(line)
        if m:
            if diagram.direction is None:
                diagram.direction = m.group(1)
            continue

        m = SUBGRAPH_RE.match(line)
        if m:
            title, quoted = _parse_subgraph_title(m.group(2))
            subgraph = Subgraph(id=m.group(1), title=title, quoted=quoted, line=line_no)
            diagram.subgraphs.append(subgraph)
            open_subgraphs.append(subgraph)
            continue

        if END_RE.match(line):
            if open_subgraphs:
                open_subgraphs.pop()
            continue

        m = CLASS_DEF_RE.match(line)
        if m:
            diagram.class_defs[m.group(1)] = m.group(2)
            continue

        m = CLASS_RE.match(line)
        if m:
            for node_id in m.group(1).split(","):
                node_id = node_id.strip()
                if node_id:
                    _assign_class(diagram, node_id, m.group(2))
            continue

        m = EDGE_RE.match(line)
        if m:
            diagram.edges.append(
                Edge(
                    src=m.group(1),
                    dst=m.group(4),
                    arrow=m.group(2),
                    label=m.group(3) or "",
                    line=line_no,
                )
            )
            continue

        for node_re, shape in NODE_RES:
            m = node_re.match(line)
            if not m:
                continue
            node = Node(id=m.group(1), label=m.group(2), shape=shape, line=line_no)
            if open_subgraphs:
                current = open_subgraphs[-1]
                node.subgraph = current.id
                if node.id not in current.nodes:
                    current.nodes.append(node.id)
            diagram.nodes[node.id] = node
            if m.group(3):
                _assign_class(diagram, node.id, m.group(3))
            break

    for node_id, classes in diagram.class_assignments.items():
        node = diagram.nodes.get(node_id)
        if node is not None:
            node.classes = list(classes)

    return diagram


def _assign_class(diagram: Diagram, node_id: str, class_name: str) -> None:
    classes = diagram.class_assignments.setdefault(node_id, [])
    if class_name not in classes:
        classes.append(class_name)
