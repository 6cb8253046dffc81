"""Exception hierarchy for stache."""

from __future__ import annotations


class StacheError(Exception):
    """Base exception for all stache errors."""


class StacheConfigError(StacheError, ValueError):
    """Raised when a configuration value is invalid."""


class TemplateSyntaxError(StacheError):
    """Raised when a template cannot be lexed or parsed.

    Attributes:
        line: The line number where the error occurred (1-based).
        column: The column number where the error occurred (1-based).
    """

    def __init__(self, message: str, *, line: int | None = None, column: int | None = None) -> None:
        self.line = line
        self.column = column
        if line is not None and column is not None:
            full_message = f'{message} at line {line}, column {column}'
        elif line is not None:
            full_message = f'{message} at line {line}'
        else:
            full_message = message
        super().__init__(full_message)


class LexError(TemplateSyntaxError):
    """Raised when the text at `offset` does not match the expected `pattern`."""

    def __init__(self, offset: int, pattern: str, *, line: int | None = None, column: int | None = None) -> None:
        self.offset = offset
        self.pattern = pattern
        super().__init__(f'Pattern {pattern!r} failed at offset {offset}', line=line, column=column)


class ParseError(TemplateSyntaxError):
    """Raised for unmatched or unclosed sections.

    Attributes:
        expected: The section name that should have been closed, if any.
        found: The name found in the closing tag, if any.
    """

    def __init__(
        self,
        message: str,
        *,
        expected: str | None = None,
        found: str | None = None,
        line: int | None = None,
        column: int | None = None,
    ) -> None:
        self.expected = expected
        self.found = found
        super().__init__(message, line=line, column=column)


class RenderError(StacheError):
    """Raised when an error occurs during template rendering."""


class ResolutionError(RenderError, LookupError):
    """Raised when a name cannot be resolved against the context."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f'Cannot resolve name: {name!r}')


class PartialNotFoundError(RenderError, LookupError):
    """Raised when the partials store has no template under `name`."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f'Partial not found: {name!r}')


class PartialDepthError(RenderError):
    """Raised when partial expansion nests deeper than the configured maximum."""

    def __init__(self, name: str, max_depth: int) -> None:
        self.name = name
        self.max_depth = max_depth
        super().__init__(f'Maximum partial depth of {max_depth} exceeded while expanding {name!r}')
