"""Error taxonomy of the mht parser."""

from __future__ import annotations


class ParseError(Exception):
    """Base class for anything that stops a parse from producing a result."""


class ParseIoError(ParseError):
    """The input stream could not be opened or read."""


class _LineError(ParseError):
    def __init__(self, line: int, message: str) -> None:
        self.line = line
        self.message = message
        super().__init__(f"line {line}: {message}")


class ParseSyntaxError(_LineError):
    """A line failed tokenization or field-count rules."""


class ParseSemanticError(_LineError):
    """A line is well-formed but its content is invalid.

    ``first_line`` is set when the error refers back to an earlier
    definition (duplicate name, conflicting address type).
    """

    def __init__(self, line: int, message: str, first_line: int | None = None) -> None:
        self.first_line = first_line
        super().__init__(line, message)


class ConfigError(ValueError):
    """Invalid parser configuration."""
