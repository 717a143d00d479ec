"""Component override renderers.

A ``LayoutComponentRenderer`` stands for one named component override
captured by a render tag: the body written inside
``<layout-component>`` on the render side. Rendering runs that body
against a page context taken from a stack, with the owning layout
context in component-render phase.

Each definition pass pushes its own page context onto every renderer
and pops it when the definition closes, so a renderer shared by nested
layouts always renders against the innermost definition.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from kida.template import Markup

from perch.errors import LayoutStateError
from perch.output import LayoutWriter

if TYPE_CHECKING:
    from perch.layout.context import LayoutContext
    from perch.pages.context import PageContext
    from perch.pages.types import PageBody, Tag

logger = logging.getLogger("perch.layout")


class LayoutComponentRenderer:
    """Renders one component override on demand."""

    __slots__ = ("_page_contexts", "context", "enclosing_tag", "fragment", "name")

    def __init__(
        self,
        name: str,
        context: LayoutContext,
        fragment: PageBody,
        enclosing_tag: Tag | None = None,
    ) -> None:
        self.name = name
        self.context = context
        self.fragment = fragment
        # Tag around the render tag that captured the fragment
        self.enclosing_tag = enclosing_tag
        self._page_contexts: list[PageContext] = []

    @property
    def page_contexts(self) -> tuple[PageContext, ...]:
        """The environment stack, outermost first."""
        return tuple(self._page_contexts)

    def push_page_context(self, page: PageContext) -> None:
        self._page_contexts.append(page)

    def pop_page_context(self) -> PageContext:
        if not self._page_contexts:
            msg = f"Component {self.name!r} has no page context to pop"
            raise LayoutStateError(msg)
        return self._page_contexts.pop()

    def render(self) -> Markup:
        """Run the captured fragment against the page context on top of the stack."""
        if not self._page_contexts:
            msg = (
                f"Component {self.name!r} of layout {self.context.definition!r} was rendered "
                "outside of its layout definition"
            )
            raise LayoutStateError(msg)

        page = self._page_contexts[-1]
        out = LayoutWriter()
        logger.debug("Rendering component %r against %s", self.name, page.path)
        with self.context.component_phase(self.name):
            page.engine.evaluate_fragment(
                self.fragment,
                parent=page,
                out=out,
                layout_context=self.context,
                enclosing_tag=self.enclosing_tag,
            )
        return Markup(out.getvalue())

    def __html__(self) -> str:
        return self.render()

    def __str__(self) -> str:
        return self.render()

    def __repr__(self) -> str:
        return f"<LayoutComponentRenderer {self.name!r} depth={len(self._page_contexts)}>"
