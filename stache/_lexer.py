"""Lexer for Mustache templates.

Converts a template string into a lossless stream of text and tag tokens.
"""

from __future__ import annotations

import re

from stache._exceptions import LexError
from stache._scanner import Scanner
from stache._tokens import STANDALONE_KINDS, TagKind, TagToken, TokenStream
from stache._utils import line_and_column

DEFAULT_DELIMITERS: tuple[str, str] = ('{{', '}}')

_INDENT = r'[\t ]*'
_INDENT_CHARS = frozenset('\t ')
_NEWLINE = r'\r\n|\n'
_EOL_SPACE = rf'{_INDENT}(?:{_NEWLINE}|\Z)'
_SIGIL = r'[#^/<>=!&{]?'
_PADDING = r' *'
_NAME = r'[\w?!/.-]*'
_REST = r'.*'

# Sigils whose content runs freely up to the closing delimiter
_FREEFORM_SIGILS = frozenset({'!', '='})


def tokenize(source: str) -> TokenStream:
    """Tokenize a Mustache template string.

    Args:
        source: The template string to tokenize.

    Returns:
        The token stream. Its `original_text()` is always equal to `source`.

    Raises:
        LexError: If a tag is malformed.
    """
    return _Lexer(source).tokenize()


class _Lexer:
    """Tokenizes one template, tracking the delimiter pair as it changes."""

    def __init__(self, source: str) -> None:
        self._scanner = Scanner(source)
        self._tokens = TokenStream()
        self._open_tag, self._close_tag = DEFAULT_DELIMITERS

    def tokenize(self) -> TokenStream:
        """Tokenize the entire template."""
        while self._scanner.has_remaining():
            self._read_next()
        assert self._tokens.original_text() == self._scanner.source
        return self._tokens

    def _read_next(self) -> None:
        self._read_text()

        at_line_start = self._scanner.at_line_start()
        indent_offset = self._scanner.position
        indent = self._scanner.scan(_INDENT)

        if self._scanner.matches(self._open_regex()):
            self._read_tag(at_line_start, indent, indent_offset)
        else:
            self._tokens.add_text(indent + self._scanner.scan(_REST), indent_offset)

    def _read_text(self) -> None:
        """Read plain text up to the next possible tag or the end of input."""
        offset = self._scanner.position
        end = self._scanner.find(self._open_tag)
        if end == -1:
            end = len(self._scanner.source)
        else:
            # Indentation before the tag is lexed with the tag
            source = self._scanner.source
            while end > offset and source[end - 1] in _INDENT_CHARS:
                end -= 1
        self._tokens.add_text(self._scanner.scan_to(end), offset)

    def _read_tag(self, at_line_start: bool, indent: str, indent_offset: int) -> None:
        offset = self._scanner.position
        open_tag = self._scanner.scan(self._open_regex())
        sigil = self._scanner.scan(_SIGIL)
        padding_before = self._scanner.scan(_PADDING)
        content = self._scanner.scan(self._content_regex(sigil))
        padding_after = self._scanner.scan(_PADDING)
        close_sigil = self._scanner.scan(self._close_sigil_regex(sigil))
        close_tag = self._scanner.scan(self._close_regex())

        tag = TagToken(
            open_tag=open_tag,
            sigil=sigil,
            padding_before=padding_before,
            content=content,
            padding_after=padding_after,
            close_sigil=close_sigil,
            close_tag=close_tag,
            offset=offset,
        )

        if at_line_start and tag.kind in STANDALONE_KINDS and self._scanner.matches(_EOL_SPACE):
            tag = tag.to_standalone(indent, self._scanner.scan(_EOL_SPACE))
        else:
            self._tokens.add_text(indent, indent_offset)

        if tag.kind is TagKind.DELIMITERS:
            self._change_delimiters(tag)

        self._tokens.add_tag(tag)

    def _change_delimiters(self, tag: TagToken) -> None:
        parts = tag.content.split()
        if len(parts) != 2:
            line, column = line_and_column(self._scanner.source, tag.offset)
            raise LexError(tag.offset, '<open> <close>', line=line, column=column)
        self._open_tag, self._close_tag = parts

    def _open_regex(self) -> str:
        return re.escape(self._open_tag)

    def _close_regex(self) -> str:
        return re.escape(self._close_tag)

    def _close_sigil_regex(self, sigil: str) -> str:
        if not sigil:
            return ''
        if sigil == '{':
            sigil = '}'
        return f'(?:{re.escape(sigil)})?'

    def _content_regex(self, sigil: str) -> str:
        if sigil in _FREEFORM_SIGILS:
            return rf'.*?(?={self._close_sigil_regex(sigil)}{self._close_regex()})'
        return _NAME
