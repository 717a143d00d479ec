"""Page registry and evaluation.

The engine owns the registered pages, the kida environment, and the
tag pool. ``render()`` evaluates a top-level page for a fresh request;
``include()`` evaluates another page within the current request, which
is how layout render tags reach their definitions. ``evaluate_fragment()``
runs a captured body against an existing page, for component overrides.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from kida import Environment

from perch.config import PerchConfig
from perch.context import request_scope
from perch.errors import ConfigurationError, PageNotFoundError
from perch.output import LayoutWriter
from perch.pages.context import PageContext
from perch.pages.pool import TagPool
from perch.pages.types import PageBody, PageSource, SkipPage, Tag
from perch.templating.integration import create_environment

if TYPE_CHECKING:
    from perch.layout.context import LayoutContext

logger = logging.getLogger("perch.pages")

_INHERIT: Any = object()


class PageEngine:
    """Registers pages and evaluates them.

    Usage::

        engine = PageEngine(env=Environment(loader=DictLoader({...})))

        @engine.page("/index.page")
        def index(page):
            page.write_template("<h1>{{ title }}</h1>")

        engine.render("/index.page", title="Home")  # "<h1>Home</h1>"
    """

    def __init__(
        self,
        config: PerchConfig | None = None,
        *,
        env: Environment | None = None,
        filters: dict[str, Callable[..., Any]] | None = None,
        globals_: dict[str, Any] | None = None,
    ) -> None:
        self.config = config or PerchConfig()
        self.env = env if env is not None else create_environment(self.config, filters, globals_)
        self.pool = TagPool(enabled=self.config.pool_tags)
        self._pages: dict[str, PageSource] = {}

    # -- Registration --

    def register(self, path: str, body: PageBody) -> PageSource:
        if path in self._pages:
            msg = f"A page is already registered for {path!r}"
            raise ConfigurationError(msg)
        source = PageSource(path=path, body=body)
        self._pages[path] = source
        return source

    def page(self, path: str) -> Callable[[PageBody], PageBody]:
        """Decorator form of ``register()``."""

        def decorator(body: PageBody) -> PageBody:
            self.register(path, body)
            return body

        return decorator

    def get_page(self, path: str) -> PageSource:
        try:
            return self._pages[path]
        except KeyError:
            raise PageNotFoundError(path) from None

    # -- Evaluation --

    def render(self, path: str, **attributes: Any) -> str:
        """Evaluate *path* for a new request and return its output.

        Keyword arguments seed the request attribute scope.
        """
        source = self.get_page(path)
        out = LayoutWriter()
        with request_scope(**attributes) as request:
            self._evaluate(PageContext(self, source, out, request), source.body)
        return out.getvalue()

    def include(
        self,
        path: str,
        *,
        parent: PageContext,
        out: LayoutWriter | None = None,
        layout_context: LayoutContext | None = _INHERIT,
    ) -> None:
        """Evaluate *path* within *parent*'s request.

        Args:
            path: The page to evaluate.
            parent: The page context the include happens from.
            out: Output target; defaults to *parent*'s writer.
            layout_context: Layout context for the included page;
                defaults to the one *parent* carries.
        """
        source = self.get_page(path)
        if layout_context is _INHERIT:
            layout_context = parent.layout_context
        page = PageContext(
            self,
            source,
            out if out is not None else parent.out,
            parent.request,
            layout_context=layout_context,
        )
        logger.debug("Including %s from %s", path, parent.path)
        self._evaluate(page, source.body)

    def evaluate_fragment(
        self,
        fragment: PageBody,
        *,
        parent: PageContext,
        out: LayoutWriter,
        layout_context: LayoutContext | None,
        enclosing_tag: Tag | None = None,
    ) -> None:
        """Evaluate a captured body against *parent*'s environment.

        The fragment gets its own page scope that falls back to
        *parent*'s, so attributes set while *parent* was evaluated stay
        visible to it. *enclosing_tag* becomes the parent of the fragment's outermost tags.
        """
        page = PageContext(
            self,
            parent.source,
            out,
            parent.request,
            scope_parent=parent,
            layout_context=layout_context,
            enclosing_tag=enclosing_tag,
        )
        self._evaluate(page, fragment)

    def _evaluate(self, page: PageContext, body: PageBody) -> None:
        try:
            body(page)
        except SkipPage:
            logger.debug("Skipped remainder of %s", page.path)

    def __contains__(self, path: object) -> bool:
        return path in self._pages

    def __repr__(self) -> str:
        return f"<PageEngine pages={len(self._pages)}>"
