"""Tag handler pooling.

Handlers are reused across evaluations, the way servlet containers
pool tag handlers. A handler returns to the pool after ``release()``
clears its attributes, so the next ``acquire`` starts from a clean
instance.
"""

import logging
import threading
from typing import Any, TypeVar

from perch.pages.types import Tag

logger = logging.getLogger("perch.pages")

T = TypeVar("T", bound=Tag)


class TagPool:
    """Per-class free lists of idle tag handlers."""

    __slots__ = ("_enabled", "_free", "_lock")

    def __init__(self, *, enabled: bool = True) -> None:
        self._enabled = enabled
        self._free: dict[type, list[Any]] = {}
        self._lock = threading.Lock()

    def acquire(self, tag_class: type[T], **attributes: Any) -> T:
        """Return an idle handler of *tag_class* (or a new one) with *attributes* set."""
        tag: T | None = None
        if self._enabled:
            with self._lock:
                free = self._free.get(tag_class)
                if free:
                    tag = free.pop()
        if tag is None:
            tag = tag_class()
        else:
            logger.debug("Reusing pooled %s", tag_class.__name__)
        for name, value in attributes.items():
            setattr(tag, name, value)
        return tag

    def release(self, tag: Tag) -> None:
        """Reset *tag* and return it to its free list."""
        tag.release()
        if not self._enabled:
            return
        with self._lock:
            self._free.setdefault(type(tag), []).append(tag)

    def idle(self, tag_class: type) -> int:
        """Number of idle handlers of *tag_class*."""
        with self._lock:
            return len(self._free.get(tag_class, ()))
