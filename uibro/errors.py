"""
UIBro errors - exception hierarchy and the diagnostics sink
"""

import logging
from dataclasses import dataclass
from typing import Iterator, List, Optional

logger = logging.getLogger(__name__)


class UIBroError(Exception):
    """Base class for every failure surfaced to the caller of a script run."""

    def __init__(
        self,
        message: str,
        *,
        line: Optional[int] = None,
        column: Optional[int] = None,
        path: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.line = line
        self.column = column
        self.path = path

    def location(self) -> str:
        if not self.line:
            return self.path or ''
        where = f"line {self.line}"
        if self.column:
            where += f", column {self.column}"
        return f"{self.path}, {where}" if self.path else where

    def format(self) -> str:
        where = self.location()
        if where:
            return f"{self.message} ({where})"
        return self.message


class ToolkitError(UIBroError):
    """Raised when the UI toolkit refuses to create or mutate an object."""


class ScriptLoadError(UIBroError):
    """Raised when script text cannot be read."""


class InterpreterStateError(UIBroError):
    """Raised when an interpreter instance is driven more than once."""


@dataclass(frozen=True)
class Diagnostic:
    stage: str
    message: str
    line: int = 0
    column: int = 0

    def format(self) -> str:
        if self.line:
            return f"{self.stage}: {self.message} at line {self.line}, column {self.column}"
        return f"{self.stage}: {self.message}"


class Diagnostics:
    """Collects the input that the lexer, parser and dispatcher skip over.

    Nothing recorded here changes how a script runs; the sink only makes the
    permissive behaviour observable.
    """

    def __init__(self) -> None:
        self.entries: List[Diagnostic] = []

    def report(self, stage: str, message: str, line: int = 0, column: int = 0) -> Diagnostic:
        diagnostic = Diagnostic(stage, message, line, column)
        self.entries.append(diagnostic)
        logger.debug(diagnostic.format())
        return diagnostic

    def by_stage(self, stage: str) -> List[Diagnostic]:
        return [d for d in self.entries if d.stage == stage]

    def messages(self) -> List[str]:
        return [d.message for d in self.entries]

    def __iter__(self) -> Iterator[Diagnostic]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)
