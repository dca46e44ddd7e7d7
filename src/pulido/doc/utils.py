"""Doc inspection helpers.

Thread Safety:
    All functions are pure and safe to call from any thread.

"""

from __future__ import annotations

from pulido.doc.builders import (
    Align,
    BreakParent,
    Concat,
    Doc,
    Fill,
    Group,
    IfBreak,
    Indent,
    Line,
    MarkAsRoot,
)
from pulido.errors import DocError


def propagate_breaks(doc: Doc) -> frozenset[int]:
    """Find the groups that must print broken.

    A group breaks when it contains a hard line, a BreakParent, or a group
    that was itself created with ``should_break``. The result holds the
    ``id()`` of every such group; docs are immutable, so the answer is only
    valid while ``doc`` is alive (i.e. for one layout call).

    Args:
        doc: Root of the document

    Returns:
        Ids of groups that must break

    """
    broken: set[int] = set()
    memo: dict[int, bool] = {}

    def visit(node: Doc) -> bool:
        if isinstance(node, str):
            return False
        key = id(node)
        if key in memo:
            return memo[key]

        match node:
            case Concat(parts=parts) | Fill(parts=parts):
                result = False
                for part in parts:
                    result = visit(part) or result
            case Group(contents=contents, should_break=should_break):
                result = visit(contents) or should_break
                if result:
                    broken.add(key)
            case Indent(contents=contents) | Align(contents=contents) | MarkAsRoot(
                contents=contents
            ):
                result = visit(contents)
            case IfBreak(break_contents=break_contents, flat_contents=flat_contents):
                result = visit(break_contents)
                result = visit(flat_contents) or result
            case Line(hard=hard):
                result = hard
            case BreakParent():
                result = True
            case _:
                raise DocError(f"Unexpected doc: {node!r}")

        memo[key] = result
        return result

    visit(doc)
    return frozenset(broken)
