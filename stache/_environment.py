"""StacheEnvironment class for managing options and partials."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from pathlib import Path
from typing import Any

from opentelemetry import trace

from stache._ast_nodes import Document
from stache._config_params import ParamManager
from stache._context import Context
from stache._lexer import tokenize
from stache._parser import parse_tokens
from stache._partials import ChainedPartials, DictPartials, PartialStore, as_partial_store
from stache._renderer import Renderer
from stache._tokens import TokenStream
from stache._utils import escape_html, logger


class StacheEnvironment:
    """An environment for compiling and rendering Mustache templates.

    The environment holds the rendering options and a set of partials shared by
    every template it renders.

    Example:
        ```python
        env = StacheEnvironment(partials={'user': '<b>{{name}}</b>'})
        result = env.render('{{#users}}{{> user}}{{/users}}', {'users': [{'name': 'Ann'}]})
        assert result == '<b>Ann</b>'
        ```

    Options left as `None` are read from `STACHE_*` environment variables, then
    from `[tool.stache]` in `pyproject.toml`, then fall back to the defaults.
    """

    def __init__(
        self,
        *,
        partials: Mapping[str, str] | PartialStore | None = None,
        missing_variables: str | None = None,
        missing_partials: str | None = None,
        max_partial_depth: int | None = None,
        escape_html: bool | None = None,
        escape: Callable[[str], str] | None = None,
        tracer_provider: trace.TracerProvider | None = None,
        config_dir: Path | None = None,
    ) -> None:
        params = ParamManager.create(config_dir)
        self.missing_variables = params.load_param('missing_variables', missing_variables)
        self.missing_partials = params.load_param('missing_partials', missing_partials)
        self.max_partial_depth = params.load_param('max_partial_depth', max_partial_depth)
        self.escape_html = params.load_param('escape_html', escape_html)
        self._escape = escape

        self._registered: dict[str, str] = {}
        self._store: PartialStore | None = None
        if isinstance(partials, Mapping):
            self._registered.update(partials)  # pyright: ignore[reportUnknownArgumentType]
        elif partials is not None:
            self._store = as_partial_store(partials)

        self._tracer = trace.get_tracer('stache', tracer_provider=tracer_provider)

    @property
    def escape(self) -> Callable[[str], str] | None:
        """The function applied to `{{name}}` output, or `None` when escaping is off."""
        if not self.escape_html:
            return None
        return self._escape or escape_html

    def register_partial(self, name: str, source: str) -> None:
        """Register a partial template under `name`.

        Args:
            name: The name used in `{{> name}}` tags.
            source: The partial's template text.
        """
        self._registered[name] = source

    def unregister_partial(self, name: str) -> None:
        """Unregister a partial by name.

        Raises:
            KeyError: If the partial is not registered.
        """
        if name not in self._registered:
            raise KeyError(f'Partial not found: {name}')
        del self._registered[name]

    def partials(self, extra: Mapping[str, str] | PartialStore | None = None) -> PartialStore:
        """Build the partial store for one render.

        Partials passed for the render win over registered ones, which win
        over the environment's own store.
        """
        stores: list[PartialStore] = []
        if extra is not None:
            stores.append(as_partial_store(extra))
        stores.append(DictPartials(self._registered))
        if self._store is not None:
            stores.append(self._store)
        return ChainedPartials(*stores)

    def compile(self, source: str) -> Template:
        """Compile a template string into a reusable `Template`.

        Raises:
            LexError: If a tag is malformed.
            ParseError: If sections are mismatched or left open.
        """
        with self._tracer.start_as_current_span('stache.compile', attributes={'stache.template.length': len(source)}):
            tokens = tokenize(source)
            document = parse_tokens(tokens, source)
        logger.debug('Compiled template: %d tokens, %d top-level nodes', len(tokens), len(document.children))
        return Template(source, tokens, document, self)

    def render(
        self,
        source: str,
        data: Any = None,
        partials: Mapping[str, str] | PartialStore | None = None,
    ) -> str:
        """Render a template string with the given data.

        Args:
            source: The Mustache template string.
            data: The data for the outermost context frame.
            partials: Partials for this render, in addition to the registered ones.

        Returns:
            The rendered string.
        """
        return self.compile(source).render(data, partials)

    def _render_document(self, template: Template, data: Any, partials: Any) -> str:
        with self._tracer.start_as_current_span(
            'stache.render', attributes={'stache.template.length': len(template.source)}
        ):
            renderer = Renderer(
                self.partials(partials),
                missing_variables=self.missing_variables,
                missing_partials=self.missing_partials,
                escape=self.escape,
                max_partial_depth=self.max_partial_depth,
            )
            return renderer.render(template.document, Context.root(data if data is not None else {}))


class Template:
    """A compiled template bound to the environment that compiled it."""

    def __init__(self, source: str, tokens: TokenStream, document: Document, environment: StacheEnvironment) -> None:
        self.source = source
        self.tokens = tokens
        self.document = document
        self._environment = environment

    def render(self, data: Any = None, partials: Mapping[str, str] | PartialStore | None = None) -> str:
        """Render the template with the given data and partials."""
        return self._environment._render_document(self, data, partials)  # pyright: ignore[reportPrivateUsage]

    def __call__(self, data: Any = None, partials: Mapping[str, str] | PartialStore | None = None) -> str:
        return self.render(data, partials)

    def __repr__(self) -> str:
        return f'Template({self.source!r})'
