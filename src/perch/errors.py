"""Perch exception hierarchy.

Shared across the page engine and the layout tags so every module
raises and catches the same types.
"""

from dataclasses import dataclass


class PerchError(Exception):
    """Base for all perch-specific errors."""


class ConfigurationError(PerchError):
    """Raised when pages or tags are wired together incorrectly.

    Typically a structural misuse: a layout definition navigated to
    directly, a component tag outside any layout tag, or two pages
    registered under the same path.
    """


class LayoutStateError(PerchError):
    """Raised when layout bookkeeping is inconsistent.

    Signals a defect rather than a misuse: an end transition without a
    matching start, or a component renderer asked to pop or render with
    an empty page-context stack.
    """


@dataclass(frozen=True, slots=True)
class PageNotFoundError(ConfigurationError):
    """No page is registered under the requested path."""

    path: str

    def __str__(self) -> str:
        return f"No page registered for {self.path!r}"
