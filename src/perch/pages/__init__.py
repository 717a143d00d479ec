"""Page evaluation with a tag protocol.

Pages are Python callables registered by path. They write markup —
plain text or kida templates — and invoke tags, which the engine
drives through a start/body/end protocol modeled on servlet tag
handlers.

Usage::

    engine = PageEngine()

    @engine.page("/hello.page")
    def hello(page):
        page.write_template("<p>Hello, {{ name }}!</p>")

    engine.render("/hello.page", name="World")
"""

from perch.pages.context import PageContext
from perch.pages.engine import PageEngine
from perch.pages.pool import TagPool
from perch.pages.types import EndAction, PageBody, PageSource, Scope, SkipPage, StartAction, Tag

__all__ = [
    "EndAction",
    "PageBody",
    "PageContext",
    "PageEngine",
    "PageSource",
    "Scope",
    "SkipPage",
    "StartAction",
    "Tag",
    "TagPool",
]
