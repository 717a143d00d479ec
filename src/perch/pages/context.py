"""Per-page evaluation state.

A ``PageContext`` is created for every page evaluation — the top-level
render, each include, and each override fragment a component renderer
runs. It carries the output target, the page and request attribute
scopes, the tag nesting stack, and the ``LayoutContext`` threaded in
by a layout render tag.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from typing import TYPE_CHECKING, Any

from perch.pages.types import EndAction, PageBody, PageSource, Scope, SkipPage, StartAction, Tag
from perch.templating.integration import render_source

if TYPE_CHECKING:
    from perch.context import RequestAttributes
    from perch.layout.context import LayoutContext
    from perch.output import LayoutWriter
    from perch.pages.engine import PageEngine

logger = logging.getLogger("perch.pages")


class PageContext:
    """The evaluation environment of one page.

    Attributes resolve page-first: this page, then the page it was
    evaluated on behalf of (``scope_parent``, when set), then the
    request. Templates rendered with ``write_template`` see the same
    view.

    ``enclosing_tag`` seeds the tag stack for fragments that run on
    behalf of a tag evaluated elsewhere, so tags inside the fragment
    resolve their ancestors as if they were written in place.
    """

    __slots__ = (
        "_attributes",
        "_tags",
        "engine",
        "layout_context",
        "out",
        "request",
        "scope_parent",
        "source",
    )

    def __init__(
        self,
        engine: PageEngine,
        source: PageSource,
        out: LayoutWriter,
        request: RequestAttributes,
        *,
        scope_parent: PageContext | None = None,
        layout_context: LayoutContext | None = None,
        enclosing_tag: Tag | None = None,
    ) -> None:
        self.engine = engine
        self.source = source
        self.out = out
        self.request = request
        self.scope_parent = scope_parent
        self.layout_context = layout_context
        self._attributes: dict[str, Any] = {}
        self._tags: list[Tag] = [enclosing_tag] if enclosing_tag is not None else []

    @property
    def path(self) -> str:
        return self.source.path

    # -- Attributes --

    def get_attribute(self, name: str, scope: Scope = Scope.PAGE) -> Any:
        if scope is Scope.REQUEST:
            return self.request.get(name)
        return self._attributes.get(name)

    def set_attribute(self, name: str, value: Any, scope: Scope = Scope.PAGE) -> None:
        if scope is Scope.REQUEST:
            self.request.set(name, value)
        else:
            self._attributes[name] = value

    def remove_attribute(self, name: str, scope: Scope = Scope.PAGE) -> None:
        if scope is Scope.REQUEST:
            self.request.remove(name)
        else:
            self._attributes.pop(name, None)

    def find_attribute(self, name: str, default: Any = None) -> Any:
        """Resolve *name* through page scopes, then the request."""
        for page in self._scope_chain():
            if name in page._attributes:
                return page._attributes[name]
        return self.request.get(name, default)

    def template_context(self, **extra: Any) -> dict[str, Any]:
        """Flatten every visible attribute into a template context."""
        ctx = self.request.snapshot()
        for page in reversed(list(self._scope_chain())):
            ctx.update(page._attributes)
        ctx.update(extra)
        return ctx

    def _scope_chain(self) -> Iterator[PageContext]:
        page: PageContext | None = self
        while page is not None:
            yield page
            page = page.scope_parent

    # -- Output --

    def write(self, text: str) -> None:
        self.out.write(text)

    def write_template(self, source: str, **extra: Any) -> None:
        """Render an inline kida template against the visible attributes."""
        self.out.write(render_source(self.engine.env, source, self.template_context(**extra)))

    def include_template(self, name: str, **extra: Any) -> None:
        """Render a kida template from the engine's loader."""
        template = self.engine.env.get_template(name)
        self.out.write(template.render(self.template_context(**extra)))

    def include(self, path: str) -> None:
        """Evaluate another page into this page's output."""
        self.engine.include(path, parent=self)

    # -- Tags --

    @property
    def current_tag(self) -> Tag | None:
        """The innermost tag whose body is being evaluated."""
        return self._tags[-1] if self._tags else None

    def find_ancestor_tag(self, tag: Tag, *classes: type) -> Tag | None:
        """Return the nearest tag enclosing *tag* that is an instance of *classes*."""
        ancestor = getattr(tag, "parent", None)
        while ancestor is not None and not isinstance(ancestor, classes):
            ancestor = getattr(ancestor, "parent", None)
        return ancestor

    def invoke(self, tag: Tag | type[Tag], body: PageBody | None = None, **attributes: Any) -> None:
        """Drive *tag* through the start/body/end protocol.

        *tag* may be a handler instance or a handler class; classes are
        acquired from the engine's pool and released afterwards.
        ``do_finally`` runs whenever ``do_start_tag`` succeeded, even if
        the body or the end transition raised.
        Handlers that define ``set_body`` receive *body* before start, for
        tags that capture their body instead of evaluating it inline.
        """
        pooled = isinstance(tag, type)
        if pooled:
            handler = self.engine.pool.acquire(tag, **attributes)
        else:
            handler = tag
            for name, value in attributes.items():
                setattr(handler, name, value)
        handler.parent = self.current_tag  # type: ignore[attr-defined]
        set_body = getattr(handler, "set_body", None)
        if set_body is not None:
            set_body(body)

        self._tags.append(handler)
        try:
            start = handler.do_start_tag(self)
            try:
                if start is StartAction.EVAL_BODY_INCLUDE and body is not None:
                    body(self)
                end = handler.do_end_tag(self)
            finally:
                do_finally = getattr(handler, "do_finally", None)
                if do_finally is not None:
                    do_finally(self)
        finally:
            self._tags.pop()
            if pooled:
                self.engine.pool.release(handler)

        if end is EndAction.SKIP_PAGE:
            logger.debug("%s ended evaluation of %s", type(handler).__name__, self.path)
            raise SkipPage(self.path)

    def __repr__(self) -> str:
        return f"<PageContext {self.path!r} depth={len(self._tags)}>"
