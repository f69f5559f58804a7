from __future__ import annotations


class FlowlintError(Exception):
    """Base class for failures the CLI reports and exits on."""


class DiagramNotFound(FlowlintError):
    """The Markdown document has no ```mermaid fenced block."""


class ManifestDecodeError(FlowlintError, ValueError):
    """The dependency manifest is malformed or declares no services."""

    def __init__(self, message: str, path: str = "") -> None:
        self.path = path
        super().__init__(f"{message} (at {path})" if path else message)


class ValidatorError(FlowlintError):
    """The external Mermaid renderer rejected the diagram or could not run."""

    def __init__(self, message: str, output: str = "", syntax_error: bool = False) -> None:
        self.output = output
        self.syntax_error = syntax_error
        super().__init__(message)
