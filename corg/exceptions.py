"""Package-specific exception types."""

from __future__ import annotations


class DocumentNotFoundError(FileNotFoundError):
    """Raised when no file matches a document or script name.

    Args:
        name: Name that was looked up, without extension.
        extension: Extension the lookup was restricted to.
    """

    def __init__(self, name: str, extension: str):
        self.name = name
        self.extension = extension
        super().__init__(self._build_message())

    def _build_message(self) -> str:
        return f"No file matching {self.name}.{self.extension} found"


class ScriptRunError(RuntimeError):
    """Raised when a generated script cannot be started.

    Args:
        command: Command line that failed to start.
        reason: Underlying error message.
    """

    def __init__(self, command: list[str], reason: str):
        self.command = command
        self.reason = reason
        super().__init__(f"Unable to run {' '.join(command)}: {reason}")
