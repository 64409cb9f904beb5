"""Runtime environment for Monkey.

The Environment stores bindings of names to evaluated Monkey values and
supports nested scopes via an `outer` link. Lookup walks outward through the
chain; `set` always binds in the innermost frame (there is no way to
reassign a binding that lives in an enclosing frame).

A frame is shared, not copied: closures created in the same scope hold the
very same Environment object, so recursive and mutually recursive functions
see each other's `let` bindings.
"""

from __future__ import annotations

from io import StringIO
from typing import Optional

from monkey import MonkeyValue


class Environment:
    """Hierarchical mapping from names to Monkey values."""

    __slots__ = ("store", "outer")

    def __init__(self, outer: Optional[Environment] = None):
        self.store: dict[str, MonkeyValue] = {}
        self.outer: Environment | None = outer

    @classmethod
    def new_enclosed(cls, outer: Environment) -> Environment:
        """Create a fresh frame whose enclosing scope is `outer`."""
        return cls(outer=outer)

    def get(self, name: str) -> MonkeyValue | None:
        """Return the value bound to `name` in this frame or an enclosing one, else None."""
        env: Optional[Environment] = self
        while env is not None:
            if name in env.store:
                return env.store[name]
            env = env.outer
        return None

    def set(self, name: str, value: MonkeyValue) -> MonkeyValue:
        """Bind `name` in this frame, silently replacing any local binding."""
        self.store[name] = value
        return value

    def _write_vars(self, buffer: StringIO) -> None:
        """Write this frame's variables into the buffer in a compact form."""
        buffer.write("{")
        first = True
        for k, v in self.store.items():
            if not first:
                buffer.write(", ")
            buffer.write(f"{k}: {v.type()}")
            first = False
        buffer.write("}")

    def __str__(self) -> str:
        """Human-readable single-frame view with an indicator for parent."""
        with StringIO() as buffer:
            self._write_vars(buffer)
            if self.outer is not None:
                buffer.write(" -> ...")  # indicate parent exists
            return buffer.getvalue()

    def __repr__(self) -> str:
        """Chain representation for debugging purposes."""
        chain = []
        env: Optional[Environment] = self
        while env is not None:
            with StringIO() as buffer:
                env._write_vars(buffer)
                chain.append(buffer.getvalue())
            env = env.outer
        return "<Environment chain: " + " -> ".join(chain) + ">"
