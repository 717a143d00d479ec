"""Request-scoped attributes via ContextVar.

Provides:
- ``request_var``: The attribute store of the request being evaluated.
- ``request_scope()``: Opens a fresh store for one top-level page render.

Every page evaluated for a request — the top-level page, included
pages, and override fragments run by component renderers — shares the same
store. Layout definitions publish their parameters and component
renderers into it so nested evaluation can resolve them by name.

Thread safety:
    ``ContextVar`` is task-local under asyncio and thread-local under
    free-threading. No locks needed.
"""

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any


class RequestAttributes:
    """A mutable name/value store scoped to one request.

    Usage::

        with request_scope(user="alice") as attrs:
            attrs.set("title", "Home")
            attrs.get("user")  # "alice"
    """

    __slots__ = ("_store",)

    def __init__(self, initial: dict[str, Any] | None = None) -> None:
        self._store: dict[str, Any] = dict(initial or {})

    def get(self, name: str, default: Any = None) -> Any:
        """Get an attribute with a default value."""
        return self._store.get(name, default)

    def set(self, name: str, value: Any) -> None:
        self._store[name] = value

    def remove(self, name: str) -> None:
        self._store.pop(name, None)

    def snapshot(self) -> dict[str, Any]:
        """Return a shallow copy of every attribute."""
        return dict(self._store)

    def __contains__(self, name: object) -> bool:
        return name in self._store

    def __getitem__(self, name: str) -> Any:
        try:
            return self._store[name]
        except KeyError:
            msg = f"request has no attribute {name!r}"
            raise KeyError(msg) from None

    def __repr__(self) -> str:
        return f"<RequestAttributes {self._store!r}>"


# -- Request context --

request_var: ContextVar[RequestAttributes] = ContextVar("perch_request")
"""The current request's attributes. Set by ``PageEngine.render()``."""


def get_request() -> RequestAttributes:
    """Return the current request's attributes.

    Raises ``LookupError`` if called outside a page render.
    """
    return request_var.get()


@contextmanager
def request_scope(**attributes: Any) -> Iterator[RequestAttributes]:
    """Open a fresh request attribute store, reset on exit."""
    attrs = RequestAttributes(attributes)
    token = request_var.set(attrs)
    try:
        yield attrs
    finally:
        request_var.reset(token)
