"""Pure Python implementation of the Mustache template language."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from stache._ast_nodes import Document, Node, Partial, Section, Text, Variable
from stache._context import Context
from stache._environment import StacheEnvironment, Template
from stache._exceptions import (
    LexError,
    ParseError,
    PartialDepthError,
    PartialNotFoundError,
    RenderError,
    ResolutionError,
    StacheConfigError,
    StacheError,
    TemplateSyntaxError,
)
from stache._lexer import tokenize
from stache._parser import parse
from stache._partials import DictPartials, PartialStore
from stache._renderer import Renderer
from stache._tokens import TagKind, TagToken, TextToken, TokenStream
from stache._utils import SafeString, escape_html
from stache._values import HostValue, reflect

__all__ = [
    'compile',
    'render',
    'tokenize',
    'parse',
    'StacheEnvironment',
    'Template',
    'Renderer',
    'Context',
    'HostValue',
    'reflect',
    'PartialStore',
    'DictPartials',
    'SafeString',
    'escape_html',
    'Document',
    'Node',
    'Partial',
    'Section',
    'Text',
    'Variable',
    'TagKind',
    'TagToken',
    'TextToken',
    'TokenStream',
    'StacheError',
    'StacheConfigError',
    'TemplateSyntaxError',
    'LexError',
    'ParseError',
    'RenderError',
    'ResolutionError',
    'PartialNotFoundError',
    'PartialDepthError',
]

_default_env: StacheEnvironment | None = None


def _get_default_env() -> StacheEnvironment:
    # Created lazily so `STACHE_*` variables set after import still apply
    global _default_env
    if _default_env is None:
        _default_env = StacheEnvironment()
    return _default_env


def render(template: str, data: Any = None, partials: Mapping[str, str] | PartialStore | None = None) -> str:
    """Render a Mustache template string with the given data and partials.

    This is a convenience function that uses a default environment.

    Args:
        template: The Mustache template string.
        data: The data for the outermost context frame.
        partials: A mapping of partial names to template text, or a partial store.

    Returns:
        The rendered string.

    Example:
        ```python
        result = render('Hello {{name}}!', {'name': 'World'})
        assert result == 'Hello World!'
        ```
    """
    return _get_default_env().render(template, data, partials)


def compile(template: str) -> Template:
    """Compile a Mustache template string into a reusable `Template`.

    Example:
        ```python
        template = compile('Hello {{name}}!')
        result = template({'name': 'World'})
        assert result == 'Hello World!'
        ```
    """
    return _get_default_env().compile(template)
