"""Parser call tracing.

Each traced parse function logs ``BEGIN <name>`` on entry and ``END <name>``
on exit at DEBUG level, indented by one tab per nesting level. Enable it with
``Parser(..., trace=True)`` and a logging configuration that lets DEBUG
records from this logger through.
"""

from __future__ import annotations

import functools
import logging

logger = logging.getLogger(__name__)

TRACE_INDENT = "\t"


class Tracer:
    __slots__ = ("enabled", "level")

    def __init__(self, enabled: bool = False):
        self.enabled = enabled
        self.level = 0

    def _print(self, msg: str) -> None:
        logger.debug("%s%s", TRACE_INDENT * (self.level - 1), msg)

    def trace(self, msg: str) -> str:
        self.level += 1
        if self.enabled:
            self._print(f"BEGIN {msg}")
        return msg

    def untrace(self, msg: str) -> None:
        if self.enabled:
            self._print(f"END {msg}")
        self.level -= 1


def traced(fn):
    """Decorate a Parser method so that its entry and exit are traced."""
    name = fn.__name__

    @functools.wraps(fn)
    def wrapper(self, *args, **kwargs):
        msg = self.tracer.trace(name)
        try:
            return fn(self, *args, **kwargs)
        finally:
            self.tracer.untrace(msg)

    return wrapper
