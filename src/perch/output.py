"""Page output sink with a silent mode.

``LayoutWriter`` collects the text a page evaluation writes. While
silent, writes are dropped but the code producing them still runs —
layouts use this to suppress a definition's own markup while a single
component override is being rendered in isolation.

Usage::

    out = LayoutWriter()
    out.write("<p>kept</p>")
    with out.silenced():
        out.write("<p>dropped</p>")
    out.getvalue()  # "<p>kept</p>"
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager


class LayoutWriter:
    """In-memory writer whose output can be switched off and on."""

    __slots__ = ("_chunks", "_silent")

    def __init__(self, *, silent: bool = False) -> None:
        self._chunks: list[str] = []
        self._silent = silent

    @property
    def is_silent(self) -> bool:
        return self._silent

    def set_silent(self, silent: bool) -> None:
        """Toggle silent mode. Applies to every subsequent write."""
        self._silent = silent

    @contextmanager
    def silenced(self, silent: bool = True) -> Iterator[LayoutWriter]:
        """Set the silent flag for the duration of the block.

        The previous flag is restored on exit, including when the block
        raises, so guards nest like a stack.
        """
        previous = self._silent
        self._silent = silent
        try:
            yield self
        finally:
            self._silent = previous

    def write(self, text: str) -> None:
        if not self._silent and text:
            self._chunks.append(text)

    def getvalue(self) -> str:
        return "".join(self._chunks)

    def __repr__(self) -> str:
        state = "silent" if self._silent else "audible"
        return f"<LayoutWriter {state} chunks={len(self._chunks)}>"
