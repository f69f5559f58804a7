from __future__ import annotations

from pathlib import Path

from .mermaid_fmt import replace_block


def write_md(path: Path, content: str) -> None:
    """Write a Markdown document, creating parent directories as needed."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")


def write_diagram(path: Path, document: str, code: str) -> str:
    """Put `code` back into the document's Mermaid block, write it, return it."""
    content = replace_block(document, code)
    write_md(path, content)
    return content
