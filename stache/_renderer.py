"""Renderer for Mustache templates.

Walks the node tree and produces output given a context and a partials store.
"""

from __future__ import annotations

import sys
from collections.abc import Callable
from typing import Any, Literal

from stache._ast_nodes import Document, Node, Partial, Section, Text, Variable
from stache._context import Context
from stache._exceptions import PartialDepthError, PartialNotFoundError, ResolutionError
from stache._parser import parse
from stache._partials import as_partial_store
from stache._utils import escape_html, logger
from stache._values import ABSENT, HostValue

MissingPolicy = Literal['empty', 'raise']
"""What to do when a name or partial cannot be found."""

# Maximum nesting of partial expansions
MAX_PARTIAL_DEPTH = 100

# Python frames used per partial level, allowing for one enclosing section and one spare
_FRAMES_PER_LEVEL = 6
# Python frames left for the caller of the renderer
_RESERVED_FRAMES = 200


class Renderer:
    """Renders nodes for a single render call.

    A renderer holds per-render state (the partial nesting depth and the cache of
    parsed partials), so a new one should be created for every render.
    """

    def __init__(
        self,
        partials: Any = None,
        *,
        missing_variables: MissingPolicy = 'empty',
        missing_partials: MissingPolicy = 'empty',
        escape: Callable[[str], str] | None = escape_html,
        max_partial_depth: int = MAX_PARTIAL_DEPTH,
    ) -> None:
        self._partials = as_partial_store(partials)
        self._missing_variables = missing_variables
        self._missing_partials = missing_partials
        self._escape = escape
        self._max_partial_depth = min(max_partial_depth, partial_depth_ceiling())
        self._depth = 0
        self._parsed_partials: dict[tuple[str, str], Document] = {}

    def render(self, node: Node, context: Context) -> str:
        """Render a node with the given context.

        Args:
            node: The node to render, usually a `Document`.
            context: The innermost context frame.

        Returns:
            The rendered string.
        """
        out: list[str] = []
        self._render_nodes((node,), context, out)
        return ''.join(out)

    def _render_nodes(self, nodes: tuple[Node, ...], context: Context, out: list[str]) -> None:
        # Sections and partials recurse through here, so keep the frames per level low
        for node in nodes:
            if isinstance(node, Text):
                out.append(node.text)
            elif isinstance(node, Variable):
                out.append(self._render_variable(node, context))
            elif isinstance(node, Section):
                self._render_section(node, context, out)
            elif isinstance(node, Partial):
                self._render_partial(node, context, out)
            else:
                self._render_nodes(node.children, context, out)

    def _render_variable(self, node: Variable, context: Context) -> str:
        value = self._resolve(node.name, context)
        text = value.to_text()
        if node.escaped and self._escape is not None and not value.is_safe:
            text = self._escape(text)
        return text

    def _render_section(self, node: Section, context: Context, out: list[str]) -> None:
        values = self._resolve(node.name, context).to_list()

        if node.inverted:
            if not values:
                self._render_nodes(node.children, context, out)
            return

        for value in values:
            self._render_nodes(node.children, context.extend(value), out)

    def _render_partial(self, node: Partial, context: Context, out: list[str]) -> None:
        document = self._load_partial(node)
        if document is None:
            return

        try:
            self._depth += 1
            if self._depth > self._max_partial_depth:
                raise PartialDepthError(node.name, self._max_partial_depth)
            self._render_nodes(document.children, context, out)
        finally:
            self._depth -= 1

    def _load_partial(self, node: Partial) -> Document | None:
        key = (node.name, node.indent)
        if key in self._parsed_partials:
            return self._parsed_partials[key]

        try:
            text = self._partials.get(node.name)
        except PartialNotFoundError:
            if self._missing_partials == 'raise':
                raise
            logger.debug('Partial %r not found, rendering it as empty', node.name)
            return None

        document = parse(indent_text(text, node.indent))
        self._parsed_partials[key] = document
        return document

    def _resolve(self, name: str, context: Context) -> HostValue:
        try:
            return context.resolve(name)
        except ResolutionError:
            if self._missing_variables == 'raise':
                raise
            logger.debug('Name %r not found, rendering it as empty', name)
            return ABSENT


def indent_text(text: str, indent: str) -> str:
    """Prefix every line of `text` with `indent`.

    A final empty line (after a trailing newline) is left alone, so the
    indentation never leaks past the end of the partial.
    """
    if not indent:
        return text
    lines = text.split('\n')
    last = len(lines) - 1
    return '\n'.join(line if i == last and line == '' else indent + line for i, line in enumerate(lines))


def partial_depth_ceiling() -> int:
    """The deepest partial nesting the interpreter's recursion limit leaves room for.

    `max_partial_depth` is capped to this, so running out of partial depth raises
    `PartialDepthError` instead of `RecursionError`.
    """
    return max(1, (sys.getrecursionlimit() - _RESERVED_FRAMES) // _FRAMES_PER_LEVEL)
