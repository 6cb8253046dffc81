"""Anchored regex cursor over an immutable source string."""

from __future__ import annotations

import re
from functools import lru_cache

from stache._exceptions import LexError
from stache._utils import line_and_column


@lru_cache(maxsize=256)
def _compile(pattern: str) -> re.Pattern[str]:
    return re.compile(pattern, re.DOTALL)


class Scanner:
    """A cursor over `source` that only ever moves forward.

    All matching is anchored at the current position: a pattern that would
    match further along the string does not count.
    """

    def __init__(self, source: str) -> None:
        self._source = source
        self._pos = 0

    @property
    def source(self) -> str:
        return self._source

    @property
    def position(self) -> int:
        return self._pos

    def has_remaining(self) -> bool:
        return self._pos < len(self._source)

    def at_line_start(self) -> bool:
        """Check if the cursor is at the start of the source or right after a newline."""
        return self._pos == 0 or self._source[self._pos - 1] == '\n'

    def matches(self, pattern: str) -> bool:
        """Check whether `pattern` matches at the cursor without consuming anything."""
        return self._match(pattern) is not None

    def scan(self, pattern: str) -> str:
        """Consume and return the text matching `pattern` at the cursor.

        Raises:
            LexError: If the pattern does not match at the cursor.
        """
        match = self._match(pattern)
        if match is None:
            line, column = line_and_column(self._source, self._pos)
            raise LexError(self._pos, pattern, line=line, column=column)
        text = match.group(0)
        self._pos += len(text)
        return text

    def find(self, literal: str) -> int:
        """Return the offset of the next occurrence of `literal` at or after the cursor, or -1."""
        return self._source.find(literal, self._pos)

    def scan_to(self, offset: int) -> str:
        """Consume and return everything from the cursor up to `offset`."""
        if offset < self._pos:
            raise ValueError(f'Cannot move back from offset {self._pos} to {offset}')
        text = self._source[self._pos : offset]
        self._pos = offset
        return text

    def _match(self, pattern: str) -> re.Match[str] | None:
        return _compile(pattern).match(self._source, self._pos)
