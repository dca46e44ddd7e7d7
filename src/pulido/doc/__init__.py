"""Pulido document model.

Printers describe output as a tree of doc primitives; the layout algorithm
turns that tree into text for a given line width.

Available Modules:
- builders: primitives and constructors (concat, group, line, fill, ...)
- printer: print_doc_to_string, the layout algorithm
- utils: propagate_breaks
- debug: debug_doc for troubleshooting

Thread Safety:
Docs are immutable and layout state is local to each call.

"""

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
    align,
    break_parent,
    concat,
    fill,
    group,
    hardline,
    if_break,
    indent,
    join,
    line,
    mark_as_root,
    softline,
    text,
)
from pulido.doc.debug import debug_doc
from pulido.doc.printer import fits, print_doc_to_string
from pulido.doc.utils import propagate_breaks

__all__ = [
    "Align",
    "BreakParent",
    "Concat",
    "Doc",
    "Fill",
    "Group",
    "IfBreak",
    "Indent",
    "Line",
    "MarkAsRoot",
    "align",
    "break_parent",
    "concat",
    "debug_doc",
    "fill",
    "fits",
    "group",
    "hardline",
    "if_break",
    "indent",
    "join",
    "line",
    "mark_as_root",
    "print_doc_to_string",
    "propagate_breaks",
    "softline",
    "text",
]
