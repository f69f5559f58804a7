from __future__ import annotations

import os
import shlex
import shutil
import subprocess
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .constants import MERMAID_CLI_ENV, MERMAID_CLI_PACKAGE, VALIDATOR_TIMEOUT_DEFAULT
from .errors import ValidatorError


@dataclass(frozen=True)
class ValidatorConfig:
    """How to reach the Mermaid CLI renderer.

    `command` replaces discovery entirely when set (it is the argv prefix
    that precedes `-i <in> -o <out>`).
    """

    command: Optional[tuple[str, ...]] = None
    timeout: float = VALIDATOR_TIMEOUT_DEFAULT

    @classmethod
    def from_env(cls, timeout: float = VALIDATOR_TIMEOUT_DEFAULT) -> "ValidatorConfig":
        raw = os.environ.get(MERMAID_CLI_ENV, "").strip()
        command = tuple(shlex.split(raw)) if raw else None
        return cls(command=command, timeout=timeout)


def discover_mmdc(cfg: ValidatorConfig) -> list[str]:
    """Resolve the renderer command.

    Priority:
      1) cfg.command (from the MERMAID_CLI environment variable)
      2) `mmdc` on PATH
      3) `npx -p @mermaid-js/mermaid-cli mmdc`
    """
    if cfg.command:
        return list(cfg.command)
    mmdc_path = shutil.which("mmdc")
    if mmdc_path:
        return [mmdc_path]
    npx_path = shutil.which("npx")
    if npx_path:
        return [npx_path, "-p", MERMAID_CLI_PACKAGE, "mmdc"]
    raise ValidatorError(
        f"neither mmdc nor npx found on PATH; install {MERMAID_CLI_PACKAGE} or Node.js"
    )


def validate_syntax(code: str, cfg: Optional[ValidatorConfig] = None) -> None:
    """Render the diagram to a throwaway SVG; raise ValidatorError if that fails."""
    cfg = cfg or ValidatorConfig.from_env()
    base_cmd = discover_mmdc(cfg)

    with tempfile.TemporaryDirectory(prefix="flowlint-") as td:
        in_file = Path(td) / "diagram.mmd"
        out_file = Path(td) / "diagram.svg"
        in_file.write_text(code, encoding="utf-8")

        cmd = base_cmd + ["-i", str(in_file), "-o", str(out_file), "-q"]
        try:
            proc = subprocess.run(
                cmd, capture_output=True, text=True, timeout=cfg.timeout
            )
        except FileNotFoundError as e:
            raise ValidatorError(f"cannot run {cmd[0]}: {e}") from e
        except subprocess.TimeoutExpired as e:
            raise ValidatorError(
                f"mermaid-cli did not finish within {cfg.timeout:g}s"
            ) from e

    if proc.returncode == 0:
        return

    output = proc.stderr or proc.stdout or ""
    if "Parse error" in output:
        raise ValidatorError("Mermaid syntax error", output=output, syntax_error=True)
    raise ValidatorError(
        f"mermaid-cli validation failed (exit {proc.returncode})", output=output
    )
