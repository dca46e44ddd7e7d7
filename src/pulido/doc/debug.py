"""Render a doc as the builder calls that would produce it.

Handy when a printer produces an unexpected layout: the output reads like
the code that built the doc.

Example:
    >>> from pulido.doc.builders import concat, group, line
    >>> debug_doc(group(concat(["a", line, "b"])))
    'group(concat(["a", line, "b"]))'

"""

from __future__ import annotations

import json

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


def debug_doc(doc: Doc) -> str:
    """Return builder-call source text for ``doc``."""
    if isinstance(doc, str):
        return json.dumps(doc, ensure_ascii=False)

    match doc:
        case Concat(parts=parts):
            return f"concat([{', '.join(debug_doc(part) for part in parts)}])"
        case Fill(parts=parts):
            return f"fill([{', '.join(debug_doc(part) for part in parts)}])"
        case Group(contents=contents, should_break=True):
            return f"group({debug_doc(contents)}, should_break=True)"
        case Group(contents=contents):
            return f"group({debug_doc(contents)})"
        case Indent(contents=contents):
            return f"indent({debug_doc(contents)})"
        case Align(width=width, contents=contents):
            return f"align({width}, {debug_doc(contents)})"
        case MarkAsRoot(contents=contents):
            return f"mark_as_root({debug_doc(contents)})"
        case IfBreak(break_contents=break_contents, flat_contents=""):
            return f"if_break({debug_doc(break_contents)})"
        case IfBreak(break_contents=break_contents, flat_contents=flat_contents):
            return f"if_break({debug_doc(break_contents)}, {debug_doc(flat_contents)})"
        case Line(hard=True):
            return "hardline"
        case Line(soft=True):
            return "softline"
        case Line():
            return "line"
        case BreakParent():
            return "break_parent"
        case _:
            raise DocError(f"Unexpected doc: {doc!r}")
