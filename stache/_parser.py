"""Parser for Mustache templates.

Converts a token stream into a tree of nodes.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from stache._ast_nodes import Document, Node, Partial, Section, Text, Variable
from stache._exceptions import ParseError
from stache._lexer import tokenize
from stache._tokens import TagKind, TagToken, TextToken, TokenStream
from stache._utils import line_and_column


def parse(source: str) -> Document:
    """Parse a Mustache template string into a `Document`.

    Args:
        source: The template string to parse.

    Returns:
        The root node.

    Raises:
        LexError: If a tag is malformed.
        ParseError: If sections are mismatched or left open.
    """
    return parse_tokens(tokenize(source), source)


def parse_tokens(tokens: TokenStream, source: str = '') -> Document:
    """Build a `Document` from an existing token stream."""
    return _Parser(tokens, source).parse()


@dataclass(slots=True)
class _Frame:
    """A section whose close tag has not been seen yet."""

    name: str
    inverted: bool
    open_tag: TagToken | None
    children: list[Node] = field(default_factory=list)  # pyright: ignore[reportUnknownVariableType]


class _Parser:
    """Stack-based parser for the flat token stream."""

    def __init__(self, tokens: TokenStream, source: str) -> None:
        self._tokens = tokens
        self._source = source
        self._stack: list[_Frame] = [_Frame(name='', inverted=False, open_tag=None)]

    def parse(self) -> Document:
        for token in self._tokens:
            if isinstance(token, TextToken):
                self._append(Text(token.text))
            else:
                self._parse_tag(token)

        if len(self._stack) > 1:
            frame = self._stack[-1]
            raise ParseError(
                f'Unclosed section {frame.name!r}',
                expected=frame.name,
                **self._position(frame.open_tag),
            )
        return Document(children=tuple(self._stack[0].children))

    def _append(self, node: Node) -> None:
        self._stack[-1].children.append(node)

    def _parse_tag(self, tag: TagToken) -> None:
        kind = tag.kind

        if kind in (TagKind.SECTION, TagKind.INVERTED):
            self._stack.append(_Frame(name=tag.content, inverted=kind is TagKind.INVERTED, open_tag=tag))
        elif kind is TagKind.CLOSE:
            self._close_section(tag)
        elif kind in (TagKind.PARTIAL, TagKind.PARENT_PARTIAL):
            self._append(Partial(name=tag.content, indent=tag.space_before))
        elif kind in (TagKind.COMMENT, TagKind.DELIMITERS):
            # The lexer already applied delimiter changes
            return
        else:
            self._append(Variable(name=tag.content, escaped=kind is TagKind.ESCAPED))

    def _close_section(self, tag: TagToken) -> None:
        if len(self._stack) == 1:
            raise ParseError(
                f'Unexpected closing tag {tag.content!r}',
                found=tag.content,
                **self._position(tag),
            )

        frame = self._stack.pop()
        if frame.name != tag.content:
            raise ParseError(
                f"{frame.name} doesn't match {tag.content}",
                expected=frame.name,
                found=tag.content,
                **self._position(tag),
            )
        self._append(Section(name=frame.name, inverted=frame.inverted, children=tuple(frame.children)))

    def _position(self, tag: TagToken | None) -> dict[str, int]:
        if tag is None or not self._source:
            return {}
        line, column = line_and_column(self._source, tag.offset)
        return {'line': line, 'column': column}
