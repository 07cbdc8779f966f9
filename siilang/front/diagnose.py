"""Diagnostics pointing at a position in a source file."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class DiagnoseLevel(Enum):
    """Severity of a diagnostic."""

    ERROR = "Error"
    WARNING = "Warning"
    INFO = "Info"


@dataclass(frozen=True)
class Position:
    """Where a diagnostic starts; lines and columns count from 1."""

    begin_line: int
    begin_column: int


class DiagnosticError(ValueError):
    """An error-level diagnostic."""


class DiagnoseHandler:
    """Formats diagnostics for one source file; errors are raised."""

    def __init__(self, file_name: str, content: str) -> None:
        self.file_name = file_name
        self.content = content
        lines = content.split("\n")
        if lines and lines[-1] == "":
            lines.pop()
        self._lines = lines

    def mismatch(self, level: DiagnoseLevel, position: Position, expected: str, found: str) -> str:
        """Report that ``expected`` was wanted but ``found`` was seen."""
        return self._handle(level, position, f"Expected {expected}, but found {found}")

    def unexpect(self, level: DiagnoseLevel, position: Position, message: str) -> str:
        """Report ``message`` at ``position``."""
        return self._handle(level, position, message)

    def _source_line(self, line: int) -> str:
        if 1 <= line <= len(self._lines):
            return self._lines[line - 1]
        return ""

    def _handle(self, level: DiagnoseLevel, position: Position, message: str) -> str:
        text = (
            f"{level.value}: {message} in {self.file_name}:"
            f"{position.begin_line}:{position.begin_column}\n"
            f"{self._source_line(position.begin_line)}\n"
            f"{' ' * max(position.begin_column - 1, 0)}^\n"
        )
        if level is DiagnoseLevel.ERROR:
            raise DiagnosticError(text)
        return text