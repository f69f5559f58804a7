from __future__ import annotations

import re

from .constants import CLASS_PALETTE
from .errors import DiagramNotFound


# Opening fence carries exactly the `mermaid` info string; the closing fence
# must start its own line.
MERMAID_FENCE_RE = re.compile(
    r"(?P<open>^ {0,3}```mermaid[ \t]*\r?\n)(?P<body>.*?)(?P<close>^ {0,3}```)",
    re.MULTILINE | re.DOTALL,
)


def extract_block(text: str) -> str:
    """Return the body of the first ```mermaid block, outer whitespace trimmed."""
    match = MERMAID_FENCE_RE.search(text)
    if match is None:
        raise DiagramNotFound("no mermaid code block found")
    return match.group("body").strip()


def replace_block(text: str, code: str) -> str:
    """Swap the body of the first ```mermaid block for `code`.

    The fences, the info string, and the whitespace that surrounded the old
    body are kept as they were, so replacing a block with its own extracted
    body is a no-op. Text without a block is returned unchanged.
    """
    match = MERMAID_FENCE_RE.search(text)
    if match is None:
        return text

    body = match.group("body")
    core = body.strip()
    if core:
        lead = body[: len(body) - len(body.lstrip())]
        trail = body[len(body.rstrip()):]
    else:
        lead, trail = "", body

    new_body = lead + code + trail
    if code and not new_body.endswith("\n"):
        new_body += "\n"
    return text[: match.start("body")] + new_body + text[match.end("body"):]


def collapse_label(text: str) -> str:
    """Fold a label onto one line: newlines become spaces, runs of whitespace collapse."""
    return re.sub(r"\s+", " ", str(text).replace("\n", " ")).strip()


def mm_class_def(class_name: str, style: str) -> str:
    return f"classDef {class_name} {style}"


def mm_palette_class_def(class_name: str) -> str | None:
    """Default classDef line for a palette class, or None if it has no default."""
    colors = CLASS_PALETTE.get(class_name)
    if colors is None:
        return None
    fill, stroke, color = colors
    return mm_class_def(class_name, f"fill:{fill},stroke:{stroke},color:{color}")


def mm_subgraph_open(subgraph_id: str, title: str) -> str:
    return f'subgraph {subgraph_id} ["{title}"]'
