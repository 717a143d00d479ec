"""Perch — page evaluation with composable layouts.

Pages are Python callables that write markup (plain text or kida
templates) and invoke tags. Layout tags let one page render another
as its layout, overriding named components along the way.

Basic usage::

    from perch import LayoutDefinitionTag, LayoutRenderTag, PageEngine

    engine = PageEngine()

    @engine.page("/layout/default.page")
    def default_layout(page):
        page.invoke(LayoutDefinitionTag, lambda p: p.write_template("<h1>{{ title }}</h1>"))

    @engine.page("/index.page")
    def index(page):
        page.invoke(LayoutRenderTag, name="/layout/default.page", parameters={"title": "Home"})

    engine.render("/index.page")  # "<h1>Home</h1>"
"""

__version__ = "0.1.0-dev"
__all__ = [
    "ConfigurationError",
    "EndAction",
    "LayoutComponentRenderer",
    "LayoutComponentTag",
    "LayoutContext",
    "LayoutDefinitionTag",
    "LayoutRenderTag",
    "LayoutStateError",
    "LayoutWriter",
    "PageContext",
    "PageEngine",
    "PageNotFoundError",
    "PerchConfig",
    "PerchError",
    "Scope",
    "StartAction",
    "get_request",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import perch`` fast while providing a clean top-level API.
    """
    if name in ("PageEngine", "PageContext", "Scope", "StartAction", "EndAction"):
        from perch import pages as _pages

        return getattr(_pages, name)

    if name == "PerchConfig":
        from perch.config import PerchConfig

        return PerchConfig

    if name == "LayoutWriter":
        from perch.output import LayoutWriter

        return LayoutWriter

    if name == "get_request":
        from perch import context as _ctx

        return getattr(_ctx, name)

    if name in (
        "LayoutComponentRenderer",
        "LayoutComponentTag",
        "LayoutContext",
        "LayoutDefinitionTag",
        "LayoutRenderTag",
    ):
        from perch import layout as _layout

        return getattr(_layout, name)

    if name in ("ConfigurationError", "LayoutStateError", "PageNotFoundError", "PerchError"):
        from perch import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
