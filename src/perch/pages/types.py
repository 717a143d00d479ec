"""Types shared by the page engine and the tags it drives.

A page is a plain callable taking its ``PageContext``. Tags are small
handler objects driven through a fixed protocol by ``PageContext.invoke``::

    start = tag.do_start_tag(page)       # -> StartAction
    if start is StartAction.EVAL_BODY_INCLUDE:
        body(page)                       # same output target
    end = tag.do_end_tag(page)           # -> EndAction
    tag.do_finally(page)                 # always, once start succeeded

Two optional hooks: ``set_body(body)`` hands a handler its body before
start (for tags that capture rather than evaluate it), and
``do_finally(page)`` runs after end or after a failed body.

Handlers may be pooled, so any state set during one evaluation must be
cleared by the time ``do_finally`` returns.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Protocol, TypeAlias, runtime_checkable

if TYPE_CHECKING:
    from perch.pages.context import PageContext

PageBody: TypeAlias = Callable[["PageContext"], None]
"""A page or tag body. Writes to ``page.out`` and invokes tags."""


class Scope(Enum):
    """Where an attribute lives."""

    PAGE = "page"
    REQUEST = "request"


class StartAction(Enum):
    """Returned by ``do_start_tag``."""

    SKIP_BODY = "skip_body"
    EVAL_BODY_INCLUDE = "eval_body_include"


class EndAction(Enum):
    """Returned by ``do_end_tag``."""

    EVAL_PAGE = "eval_page"
    SKIP_PAGE = "skip_page"


@runtime_checkable
class Tag(Protocol):
    """A tag handler the engine can drive."""

    def do_start_tag(self, page: PageContext) -> StartAction: ...

    def do_end_tag(self, page: PageContext) -> EndAction: ...

    def release(self) -> None: ...


class SkipPage(Exception):  # noqa: N818 — control signal, not an error
    """Unwinds the rest of a page after a tag returned ``SKIP_PAGE``.

    Raised by ``PageContext.invoke`` and caught at the boundary of the
    page being evaluated, so it never escapes an include.
    """

    def __init__(self, path: str) -> None:
        super().__init__(path)
        self.path = path


@dataclass(frozen=True, slots=True)
class PageSource:
    """A registered page.

    Attributes:
        path: Path the page is registered under (e.g. ``/layout/default.page``).
        body: The callable evaluated to render the page.
    """

    path: str
    body: PageBody
