"""Utility functions and classes for stache."""

from __future__ import annotations

import logging

logger = logging.getLogger('stache')

# HTML entity escaping for the default profile
_ESCAPE_MAP: dict[str, str] = {
    '&': '&amp;',
    '<': '&lt;',
    '>': '&gt;',
    '"': '&quot;',
    "'": '&#x27;',
}


class SafeString(str):
    """A string subclass that marks content as safe (no HTML escaping).

    When a SafeString is rendered in a `{{name}}` tag, it will
    NOT be HTML-escaped, even though normal strings would be.
    """


def escape_html(value: str) -> str:
    """Escape `& < > " '` for safe inclusion in HTML.

    Args:
        value: The string to escape.

    Returns:
        The HTML-escaped string.
    """
    result: list[str] = []
    for char in value:
        if char in _ESCAPE_MAP:
            result.append(_ESCAPE_MAP[char])
        else:
            result.append(char)
    return ''.join(result)


def is_blocked_attribute(name: str) -> bool:
    """Check if an attribute name is blocked for security.

    Dunder names are never reachable from templates.

    Args:
        name: The attribute name to check.

    Returns:
        True if the attribute is blocked.
    """
    return name.startswith('__')


def line_and_column(source: str, offset: int) -> tuple[int, int]:
    """Convert a character offset into a 1-based (line, column) pair."""
    line = source.count('\n', 0, offset) + 1
    column = offset - (source.rfind('\n', 0, offset) + 1) + 1
    return line, column
