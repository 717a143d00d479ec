"""The layout component tag.

The same tag plays both sides of a component:

- Inside a ``LayoutRenderTag`` it captures its body as the override for
  the named component and registers a ``LayoutComponentRenderer``.
- Inside a ``LayoutDefinitionTag`` it marks the extension point: the
  registered override is written here, or the tag's own body when the
  render side supplied none.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from perch.errors import ConfigurationError
from perch.layout.definition import LayoutDefinitionTag
from perch.layout.render import LayoutRenderTag
from perch.layout.renderer import LayoutComponentRenderer
from perch.pages.types import EndAction, StartAction

if TYPE_CHECKING:
    from perch.layout.context import LayoutContext
    from perch.pages.context import PageContext
    from perch.pages.types import PageBody, Tag


def _empty(page: PageContext) -> None:
    return None


class LayoutComponentTag:
    """Tag handler for a named layout component."""

    __slots__ = ("_body", "name", "parent")

    def __init__(self) -> None:
        self.name = ""
        self.parent: Tag | None = None
        self._body: PageBody | None = None

    def set_body(self, body: PageBody | None) -> None:
        self._body = body

    def do_start_tag(self, page: PageContext) -> StartAction:
        if not self.name:
            msg = f"The page {page.path} contains a layout-component tag without a name."
            raise ConfigurationError(msg)

        owner = page.find_ancestor_tag(self, LayoutRenderTag, LayoutDefinitionTag)
        if isinstance(owner, LayoutRenderTag):
            return self._register(owner, page)
        if isinstance(owner, LayoutDefinitionTag):
            return self._render(owner.get_context(page), page)

        msg = (
            f"layout-component {self.name!r} in {page.path} must be nested in a "
            "layout-render or layout-definition tag."
        )
        raise ConfigurationError(msg)

    def _register(self, render_tag: LayoutRenderTag, page: PageContext) -> StartAction:
        context = render_tag.context
        if self.name in context.components:
            msg = (
                f"The page {page.path} overrides component {self.name!r} of layout "
                f"{context.definition!r} more than once."
            )
            raise ConfigurationError(msg)
        context.components[self.name] = LayoutComponentRenderer(
            self.name, context, self._body or _empty, enclosing_tag=render_tag.parent
        )
        return StartAction.SKIP_BODY

    def _render(self, context: LayoutContext, page: PageContext) -> StartAction:
        if context.component_render_phase:
            return StartAction.SKIP_BODY
        renderer = context.components.get(self.name)
        if renderer is None:
            return StartAction.EVAL_BODY_INCLUDE
        page.write(renderer.render())
        return StartAction.SKIP_BODY

    def do_end_tag(self, page: PageContext) -> EndAction:
        return EndAction.EVAL_PAGE

    def release(self) -> None:
        self.name = ""
        self.parent = None
        self._body = None

    def __repr__(self) -> str:
        return f"<LayoutComponentTag {self.name!r}>"
