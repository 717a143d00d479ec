"""Layout composition: one page renders another with overridable components.

A *layout definition* page wraps its body in ``LayoutDefinitionTag`` and
marks extension points with ``LayoutComponentTag``. A *layout render*
page invokes it through ``LayoutRenderTag``, passing parameters and
component overrides::

    @engine.page("/layout/default.page")
    def default_layout(page):
        def skeleton(page):
            page.write_template("<html><title>{{ title }}</title><body>")
            page.invoke(LayoutComponentTag, lambda p: p.write("<h1>Default</h1>"), name="header")
            page.write("</body></html>")

        page.invoke(LayoutDefinitionTag, skeleton)

    @engine.page("/home.page")
    def home(page):
        def overrides(page):
            page.invoke(LayoutComponentTag, lambda p: p.write("<h1>Hi</h1>"), name="header")

        page.invoke(
            LayoutRenderTag, overrides, name="/layout/default.page", parameters={"title": "Home"}
        )
"""

from perch.layout.component import LayoutComponentTag
from perch.layout.context import LayoutContext
from perch.layout.definition import LayoutDefinitionTag
from perch.layout.render import LayoutRenderTag
from perch.layout.renderer import LayoutComponentRenderer

__all__ = [
    "LayoutComponentRenderer",
    "LayoutComponentTag",
    "LayoutContext",
    "LayoutDefinitionTag",
    "LayoutRenderTag",
]
