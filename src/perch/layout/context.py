"""State shared between a layout render and its definition.

A ``LayoutRenderTag`` creates one ``LayoutContext`` per invocation and
threads it explicitly into the definition page it includes. The
definition reads parameters and component renderers from it; component
renderers flip it into component-render phase while an override body
runs.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from perch.layout.renderer import LayoutComponentRenderer
    from perch.pages.context import PageContext


@dataclass(slots=True, eq=False)
class LayoutContext:
    """One layout render invocation.

    Attributes:
        definition: Path of the layout definition page.
        parameters: Values published to the definition's request scope.
        components: Override renderers by component name, in
            registration order.
        component_render_phase: True while a renderer is producing one
            component's output.
        component: Name of the component being produced in that phase.
        rendered: Set once the definition has started emitting output.
    """

    definition: str
    parameters: dict[str, Any] = field(default_factory=dict)
    components: dict[str, LayoutComponentRenderer] = field(default_factory=dict)
    component_render_phase: bool = False
    component: str | None = None
    rendered: bool = False

    @staticmethod
    def lookup(page: PageContext) -> LayoutContext | None:
        """Return the layout context threaded into *page*, if any."""
        return page.layout_context

    @contextmanager
    def component_phase(self, name: str) -> Iterator[LayoutContext]:
        """Enter component-render phase for *name*, restoring the prior phase on exit."""
        previous = (self.component_render_phase, self.component)
        self.component_render_phase = True
        self.component = name
        try:
            yield self
        finally:
            self.component_render_phase, self.component = previous

    def __repr__(self) -> str:
        phase = f"component={self.component!r}" if self.component_render_phase else "definition"
        return f"<LayoutContext {self.definition!r} {phase} components={list(self.components)}>"
