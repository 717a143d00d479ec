"""The layout render tag.

Invokes a layout definition page on behalf of the current page::

    def home(page):
        def overrides(page):
            page.invoke(LayoutComponentTag, lambda p: p.write("<h1>Hi</h1>"), name="header")

        page.invoke(
            LayoutRenderTag,
            overrides,
            name="/layout/default.page",
            parameters={"title": "Home"},
        )

Start creates the ``LayoutContext``; the body registers component
overrides on it; end includes the definition with the context threaded
in explicitly.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from perch.errors import ConfigurationError, LayoutStateError, PageNotFoundError
from perch.layout.context import LayoutContext
from perch.pages.types import EndAction, StartAction

if TYPE_CHECKING:
    from perch.pages.context import PageContext
    from perch.pages.types import Tag

logger = logging.getLogger("perch.layout")


class LayoutRenderTag:
    """Tag handler that renders a layout definition with parameters and overrides."""

    __slots__ = ("_context", "name", "parameters", "parent")

    def __init__(self) -> None:
        self.name = ""
        self.parameters: dict[str, Any] = {}
        self.parent: Tag | None = None
        self._context: LayoutContext | None = None

    @property
    def context(self) -> LayoutContext:
        """The layout context of the evaluation in progress."""
        if self._context is None:
            msg = "layout-render tag has no active layout context"
            raise LayoutStateError(msg)
        return self._context

    def do_start_tag(self, page: PageContext) -> StartAction:
        if not self.name:
            msg = f"The page {page.path} contains a layout-render tag without a layout name."
            raise ConfigurationError(msg)
        if self.name not in page.engine:
            raise PageNotFoundError(self.name)

        self._context = LayoutContext(definition=self.name, parameters=dict(self.parameters))
        return StartAction.EVAL_BODY_INCLUDE

    def do_end_tag(self, page: PageContext) -> EndAction:
        context = self.context
        logger.debug(
            "Rendering layout %s from %s with components %s",
            context.definition,
            page.path,
            list(context.components),
        )
        page.engine.include(context.definition, parent=page, layout_context=context)

        if not context.rendered:
            logger.warning(
                "Layout %s rendered from %s produced no layout-definition output",
                context.definition,
                page.path,
            )
        return EndAction.EVAL_PAGE

    def do_finally(self, page: PageContext) -> None:
        self._context = None

    def release(self) -> None:
        self.name = ""
        self.parameters = {}
        self.parent = None
        self._context = None

    def __repr__(self) -> str:
        return f"<LayoutRenderTag {self.name!r}>"
