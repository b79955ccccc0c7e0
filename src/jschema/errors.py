"""
Diagnostics and exceptions raised while loading and using inferred types.
"""

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional


class DiagnosticKind(str, Enum):
    PARSE = "parse"
    IO = "io"
    NAME_COLLISION = "name_collision"
    UNRESOLVED_TYPE = "unresolved_type"


@dataclass(frozen=True)
class Diagnostic:
    """A positioned problem found while producing a type. Line and column are 1-based, 0 when unknown."""
    kind: DiagnosticKind
    message: str
    line: int = 0
    column: int = 0

    def __str__(self) -> str:
        if self.line or self.column:
            return f"{self.message} (line {self.line}, column {self.column})"
        return self.message


def parse_error(message: str, line: int, column: int) -> Diagnostic:
    return Diagnostic(DiagnosticKind.PARSE, message, line, column)


def io_error(message: str) -> Diagnostic:
    return Diagnostic(DiagnosticKind.IO, message)


class JSchemaError(Exception):
    """Base class for all errors raised by jschema."""


class MalformedDocumentError(JSchemaError):
    """Raised when text handed to a ``parse`` method is not valid JSON."""

    def __init__(self, errors: List[Diagnostic], partial: Optional[object] = None):
        self.errors = list(errors)
        self.partial = partial
        detail = "; ".join(str(e) for e in self.errors) or "unknown error"
        super().__init__(f"Malformed JSON document: {detail}")


class TransportError(JSchemaError):
    """Raised when fetching a document over HTTP fails."""

    def __init__(self, url: str, reason: str):
        self.url = url
        self.reason = reason
        super().__init__(f"Could not fetch {url}: {reason}")


class BuildInProgressError(JSchemaError):
    """Raised when a registry build is requested while another one is running."""


class SourceNameError(JSchemaError):
    """Raised when a source file would produce a type without a namespace."""


class UnknownTypeError(JSchemaError, KeyError):
    """Raised when a type name is not present in the registry."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Unknown type: {name}")

    def __str__(self) -> str:
        return self.args[0]
