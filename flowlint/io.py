# flowlint/io.py
from __future__ import annotations

import re
import sys
from pathlib import Path
from typing import Any, Optional

import yaml

from .errors import ManifestDecodeError

# Manifest keys whose free-text values authors tend to leave unquoted.
PROSE_KEYS: tuple[str, ...] = ("name", "description", "purpose", "notes", "runbook", "architecture")

PROSE_LINE_RE = re.compile(r"^(\s*(?:-\s*)?(?:" + "|".join(PROSE_KEYS) + r"):\s*)(.+)$")
TRAILING_COMMENT_RE = re.compile(r"^(.*?)(\s+#.*)$")
BARE_COLON_RE = re.compile(r":(?=\s|$)")


def _quote_prose_value(value: str) -> Optional[str]:
    """Double-quote a plain scalar that PyYAML would read as a nested mapping.

    Returns None when the value is already quoted, a block scalar, or safe.
    An inline `# comment` stays outside the quotes.
    """
    if value.startswith(("'", '"', "|", ">")):
        return None
    text, comment = value, ""
    m = TRAILING_COMMENT_RE.match(value)
    if m:
        text, comment = m.group(1), m.group(2)
    if not BARE_COLON_RE.search(text):
        return None
    escaped = text.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"{comment}'


def _sanitize_yaml_for_pyyaml(raw: str) -> tuple[str, list[tuple[int, str, str]]]:
    """Quote prose values such as `description: Orders: create and cancel`.

    Returns the rewritten text and the (line, before, after) edits made.
    """
    changes: list[tuple[int, str, str]] = []
    out_lines: list[str] = []

    for line_no, line in enumerate(raw.splitlines(), start=1):
        m = PROSE_LINE_RE.match(line)
        quoted = _quote_prose_value(m.group(2)) if m else None
        if quoted is None:
            out_lines.append(line)
            continue
        new_line = m.group(1) + quoted
        out_lines.append(new_line)
        changes.append((line_no, line, new_line))

    sanitized = "\n".join(out_lines) + ("\n" if raw.endswith("\n") else "")
    return sanitized, changes


MAX_REPORTED_EDITS = 10


def _report_sanitized(path: Path, changes: list[tuple[int, str, str]]) -> None:
    print(
        f"warning: {path}: quoted {len(changes)} value(s) containing ': ' to parse it; "
        "quote them in the file to silence this",
        file=sys.stderr,
    )
    for line_no, _before, after in changes[:MAX_REPORTED_EDITS]:
        print(f"warning: {path}:{line_no}: now read as {after.strip()}", file=sys.stderr)
    hidden = len(changes) - MAX_REPORTED_EDITS
    if hidden > 0:
        print(f"warning: {path}: {hidden} more not shown", file=sys.stderr)


def load_yaml_mapping(path: Path) -> dict[str, Any]:
    """Load a YAML document whose top level must be a mapping.

    A document PyYAML rejects gets one retry with its prose values quoted.
    """
    raw = read_text(path)

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as first_error:
        sanitized, changes = _sanitize_yaml_for_pyyaml(raw)
        if not changes:
            raise ManifestDecodeError(f"failed to parse YAML {path}: {first_error}") from first_error
        try:
            data = yaml.safe_load(sanitized)
        except yaml.YAMLError as e:
            raise ManifestDecodeError(f"failed to parse YAML {path}: {e}") from e
        _report_sanitized(path, changes)

    if not isinstance(data, dict):
        raise ManifestDecodeError(
            f"top-level YAML must be a mapping in {path}, got {type(data).__name__}"
        )

    return data


def read_text(path: Path) -> str:
    """Read a UTF-8 file; OSError carries the path for the caller to report."""
    return path.read_text(encoding="utf-8")
