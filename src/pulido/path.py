"""AstPath: the current-node accessor handed to every printer.

Printers never recurse into children directly. They ask the path to step
into a field and call the print callback there, so the driver always knows
the chain of ancestors of the node being printed.

Example:
    def print_root(path, opts, print_):
        return join(hardline, path.map(print_, "children"))

Thread Safety:
    An AstPath is mutable (it tracks the walk) and belongs to one print call.
    Never share one between threads.

"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, TypeAlias, TypeVar

PathKey: TypeAlias = str | int

T = TypeVar("T")


class AstPath:
    """Stack of ``node, key, node, key, node...`` from the root to the current node."""

    __slots__ = ("_stack",)

    def __init__(self, root: Any) -> None:
        self._stack: list[Any] = [root]

    @property
    def node(self) -> Any:
        """The value currently being printed."""
        return self._stack[-1]

    @property
    def key(self) -> PathKey | None:
        """Field name or index under which the current value was reached."""
        if len(self._stack) < 2:
            return None
        return self._stack[-2]

    @property
    def parent(self) -> Any:
        """Closest ancestor that is not a tuple (the containing node)."""
        for value in reversed(self._stack[:-1:2]):
            if not isinstance(value, tuple):
                return value
        return None

    @property
    def depth(self) -> int:
        return len(self._stack) // 2

    def call(self, callback: Callable[[AstPath], T], *keys: PathKey) -> T:
        """Step through ``keys`` from the current value and run ``callback`` there.

        Keys are attribute names for nodes and indices for tuples. The path is
        restored afterwards, even if ``callback`` raises.

        """
        size = len(self._stack)
        value = self._stack[-1]
        try:
            for key in keys:
                value = value[key] if isinstance(key, int) else getattr(value, key)
                self._stack.append(key)
                self._stack.append(value)
            return callback(self)
        finally:
            del self._stack[size:]

    def map(self, callback: Callable[[AstPath], T], *keys: PathKey) -> list[T]:
        """Run ``callback`` on every element of the sequence found at ``keys``."""

        def each(path: AstPath) -> list[T]:
            return [path.call(callback, index) for index in range(len(path.node))]

        return self.call(each, *keys)
