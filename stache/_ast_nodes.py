"""AST node definitions for the Mustache parser."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Union

if TYPE_CHECKING:
    from stache._partials import PartialStore


class _Renderable:
    __slots__ = ()

    def render(self, context: Any = None, partials: PartialStore | Any = None) -> str:
        """Render this node with the default options.

        Args:
            context: A `Context`, or host data to wrap in one.
            partials: A partial store or a mapping of partial names to text.
        """
        from stache._context import Context
        from stache._renderer import Renderer

        return Renderer(partials).render(self, Context.root(context))  # type: ignore[arg-type]


@dataclass(frozen=True, slots=True)
class Text(_Renderable):
    """Literal template text."""

    text: str


@dataclass(frozen=True, slots=True)
class Variable(_Renderable):
    """An interpolation like `{{name}}`, `{{{name}}}` or `{{&name}}`.

    Attributes:
        name: The bare or dotted name to resolve.
        escaped: Whether the output should be HTML-escaped.
    """

    name: str
    escaped: bool = True


@dataclass(frozen=True, slots=True)
class Section(_Renderable):
    """A `{{#name}}...{{/name}}` or `{{^name}}...{{/name}}` block.

    Attributes:
        name: The bare or dotted name to resolve.
        inverted: Whether the body renders only when the value is empty.
        children: The nodes between the open and close tags.
    """

    name: str
    inverted: bool = False
    children: tuple[Node, ...] = ()


@dataclass(frozen=True, slots=True)
class Partial(_Renderable):
    """A `{{>name}}` inclusion.

    Attributes:
        name: The name to look up in the partials store.
        indent: Indentation of a standalone partial tag, applied to every line.
    """

    name: str
    indent: str = ''


@dataclass(frozen=True, slots=True)
class Document(_Renderable):
    """The root of a parsed template."""

    children: tuple[Node, ...] = field(default=())


Node = Union[Text, Variable, Section, Partial, Document]
