"""Token types produced by the lexer."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Union


class TagKind(Enum):
    """What a tag does, selected by its sigil."""

    ESCAPED = ''
    UNESCAPED = '&'
    TRIPLE = '{'
    SECTION = '#'
    INVERTED = '^'
    CLOSE = '/'
    PARTIAL = '>'
    PARENT_PARTIAL = '<'
    COMMENT = '!'
    DELIMITERS = '='


# Kinds whose tags are absorbed with their line when they stand alone on it
STANDALONE_KINDS: frozenset[TagKind] = frozenset(
    {
        TagKind.SECTION,
        TagKind.INVERTED,
        TagKind.CLOSE,
        TagKind.PARTIAL,
        TagKind.PARENT_PARTIAL,
        TagKind.COMMENT,
        TagKind.DELIMITERS,
    }
)


@dataclass(frozen=True, slots=True)
class TextToken:
    """A literal span of template text."""

    text: str
    offset: int = 0

    @property
    def original_text(self) -> str:
        return self.text


@dataclass(frozen=True, slots=True)
class TagToken:
    """A single delimited tag, split into the pieces it was written as.

    Attributes:
        open_tag: The open delimiter in effect, e.g. `{{`.
        sigil: The tag type character, or `''` for an escaped variable.
        padding_before: Spaces between the sigil and the content.
        content: The tag name, comment text or delimiter definition.
        padding_after: Spaces between the content and the close sigil.
        close_sigil: The optional closing sigil, e.g. `}` in `{{{name}}}`.
        close_tag: The close delimiter in effect, e.g. `}}`.
        space_before: Indentation absorbed by a standalone tag.
        space_after: Trailing whitespace and newline absorbed by a standalone tag.
        standalone: Whether the tag was alone on its line.
        offset: Offset of `open_tag` in the source.
    """

    open_tag: str
    sigil: str
    padding_before: str
    content: str
    padding_after: str
    close_sigil: str
    close_tag: str
    space_before: str = ''
    space_after: str = ''
    standalone: bool = False
    offset: int = 0

    @property
    def kind(self) -> TagKind:
        return TagKind(self.sigil)

    @property
    def original_text(self) -> str:
        return ''.join(
            (
                self.space_before,
                self.open_tag,
                self.sigil,
                self.padding_before,
                self.content,
                self.padding_after,
                self.close_sigil,
                self.close_tag,
                self.space_after,
            )
        )

    def to_standalone(self, space_before: str, space_after: str) -> TagToken:
        return replace(self, space_before=space_before, space_after=space_after, standalone=True)


Token = Union[TextToken, TagToken]


@dataclass(slots=True)
class TokenStream:
    """The ordered tokens of one template."""

    tokens: list[Token] = field(default_factory=list)  # pyright: ignore[reportUnknownVariableType]

    def add_text(self, text: str, offset: int) -> None:
        if text:
            self.tokens.append(TextToken(text, offset))

    def add_tag(self, tag: TagToken) -> None:
        self.tokens.append(tag)

    def original_text(self) -> str:
        """Concatenate every token's literal text, reproducing the source."""
        return ''.join(token.original_text for token in self.tokens)

    def __iter__(self) -> Iterator[Token]:
        return iter(self.tokens)

    def __len__(self) -> int:
        return len(self.tokens)

    def __getitem__(self, index: int) -> Token:
        return self.tokens[index]
