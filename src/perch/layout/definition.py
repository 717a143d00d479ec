"""The layout definition tag.

Wraps the body of a layout definition page. On the surface it marks
where a layout is defined; in practice it is the tag that makes the
definition produce the layout's output.

Protocol, per evaluation::

    start  resolve LayoutContext (ConfigurationError if absent)
           definition pass: publish parameters and component renderers
                            into the request scope, remembering the
                            values they shadow, push this page onto
                            every renderer, mark the context rendered
           save the writer's silent flag, silence it in component phase
           -> EVAL_BODY_INCLUDE
    end    restore the silent flag, pop renderers and put the shadowed
           request attributes back (definition pass)
           -> SKIP_PAGE

Everything acquired at start is registered on an ``ExitStack`` held in
per-evaluation state, so ``do_finally`` can release it when the body
raises before the end transition is reached. A start that fails partway
releases what it had acquired before raising. The state is dropped on
every exit path; pooled handlers never see a previous evaluation.
"""

from __future__ import annotations

import logging
from contextlib import ExitStack
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from perch.errors import ConfigurationError, LayoutStateError
from perch.layout.context import LayoutContext
from perch.pages.types import EndAction, Scope, StartAction

if TYPE_CHECKING:
    from perch.pages.context import PageContext
    from perch.pages.types import Tag

logger = logging.getLogger("perch.layout")

_MISSING: Any = object()


def _restore(page: PageContext, name: str, previous: Any) -> None:
    """Put back a request attribute a definition pass shadowed."""
    if previous is _MISSING:
        page.remove_attribute(name, Scope.REQUEST)
    else:
        page.set_attribute(name, previous, Scope.REQUEST)


@dataclass(slots=True)
class _DefinitionState:
    """What one evaluation of a definition tag holds between start and end."""

    context: LayoutContext
    component_phase: bool
    cleanup: ExitStack = field(default_factory=ExitStack)


class LayoutDefinitionTag:
    """Tag handler for the body of a layout definition page."""

    __slots__ = ("_state", "parent")

    def __init__(self) -> None:
        self.parent: Tag | None = None
        self._state: _DefinitionState | None = None

    @property
    def active(self) -> bool:
        """Whether an evaluation is between start and end."""
        return self._state is not None

    def get_context(self, page: PageContext) -> LayoutContext:
        """Return the layout context for the current evaluation.

        Raises:
            ConfigurationError: If *page* was not reached through a
                layout render tag.
        """
        if self._state is not None:
            return self._state.context
        return self._resolve(page)

    def _resolve(self, page: PageContext) -> LayoutContext:
        context = LayoutContext.lookup(page)
        if context is None:
            msg = (
                f"The page {page.path} contains a layout-definition tag and was invoked "
                "directly. A layout-definition can only be invoked by a page that "
                "contains a layout-render tag."
            )
            raise ConfigurationError(msg)
        return context

    def do_start_tag(self, page: PageContext) -> StartAction:
        if self._state is not None:
            msg = f"Layout definition in {page.path} started again before its previous end"
            raise LayoutStateError(msg)

        context = self._resolve(page)
        state = _DefinitionState(context=context, component_phase=context.component_render_phase)
        try:
            if not state.component_phase:
                self._publish(page, state)
            state.cleanup.enter_context(page.out.silenced(state.component_phase))
        except BaseException:
            state.cleanup.close()
            raise
        self._state = state

        logger.debug(
            "Layout definition %s started (%s)",
            page.path,
            f"component {context.component!r}" if state.component_phase else "definition pass",
        )
        return StartAction.EVAL_BODY_INCLUDE

    def _publish(self, page: PageContext, state: _DefinitionState) -> None:
        context = state.context
        names = [*context.parameters, *context.components]
        # Registered first so the shadowed values come back after the pops
        for name in dict.fromkeys(names):
            previous = page.request.get(name, _MISSING)
            state.cleanup.callback(_restore, page, name, previous)

        for name, value in context.parameters.items():
            page.set_attribute(name, value, Scope.REQUEST)
        for name, renderer in context.components.items():
            renderer.push_page_context(page)
            state.cleanup.callback(renderer.pop_page_context)
            page.set_attribute(name, renderer, Scope.REQUEST)

        # Committed to rendering, though the body has not run yet
        context.rendered = True

    def do_end_tag(self, page: PageContext) -> EndAction:
        state = self._state
        if state is None:
            msg = f"Layout definition in {page.path} reached its end without a matching start"
            raise LayoutStateError(msg)
        try:
            # Restores the silent flag, pops renderers in reverse registration
            # order, then puts back the request attributes start shadowed
            state.cleanup.close()
        finally:
            self._state = None

        logger.debug("Layout definition %s ended", page.path)
        return EndAction.SKIP_PAGE

    def do_finally(self, page: PageContext) -> None:
        """Release whatever start acquired if end was never reached."""
        state, self._state = self._state, None
        if state is not None:
            logger.debug("Layout definition %s aborted; releasing layout state", page.path)
            state.cleanup.close()

    def release(self) -> None:
        self.parent = None
        self._state = None

    def __repr__(self) -> str:
        return f"<LayoutDefinitionTag active={self.active}>"
