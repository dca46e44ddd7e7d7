"""Markup node printers.

One function per markup node kind. Each takes the current path, the print
options and the recursive print callback, and returns a doc. Children are
always printed through the callback.

Tag Header Order:
The header is assembled in a fixed order, which is also the rendered order:
``%name`` -> ``.class`` -> ``#id`` -> ``{attributes}`` -> ``>`` -> ``<`` -> ``/``
-> trailing content (inline value, old-style attribute hash or object ref).

Every class in a space-separated ``class`` attribute becomes shorthand, so
``class="a b"`` prints as ``.a.b`` rather than keeping the second class
in the attribute hash.

Thread Safety:
Printers are pure functions of their inputs.

"""

from __future__ import annotations

from typing import TypeAlias

import textwrap
from collections.abc import Callable

from pulido.config import PrintOptions
from pulido.doc.builders import (
    Doc,
    align,
    concat,
    fill,
    group,
    hardline,
    indent,
    join,
    line,
    mark_as_root,
)
from pulido.nodes import Comment, HamlComment, Plain, Script, SilentScript, Tag, TagValue
from pulido.path import AstPath
from pulido.utils.text import string_width

PrintFn: TypeAlias = Callable[[AstPath], Doc]

DEFAULT_TAG = "div"

# Attributes rendered as shorthand instead of inside the attribute hash
SHORTHAND_ATTRIBUTES = frozenset({"class", "id"})

DOCTYPES: dict[str, str] = {
    "1.1": "1.1",
    "5": "5",
    "basic": "Basic",
    "frameset": "Frameset",
    "mobile": "Mobile",
    "rdfa": "RDFa",
    "strict": "Strict",
    "xml": "XML",
}


def _indented_children(path: AstPath, print_: PrintFn) -> Doc:
    return indent(concat([hardline, join(hardline, path.map(print_, "children"))]))


# =============================================================================
# Tag
# =============================================================================


def _quote(text: str) -> str:
    # Double-quoted Ruby string: escape backslashes, quotes and interpolation
    escaped = text.replace("\\", "\\\\").replace('"', '\\"').replace("#{", "\\#{")
    return f'"{escaped}"'


def attribute_pair(key: str, value: str) -> str:
    return f"{_quote(key)} => {_quote(value)}"


def attributes_hash(header_width: int, value: TagValue) -> Doc:
    """Render non-shorthand attributes as ``{"key" => "value", ...}``.

    Pairs wrap independently (fill), and wrapped lines are aligned one column
    past the header so they start under the first pair.

    """
    pairs = [
        attribute_pair(key, attr)
        for key, attr in value.attributes
        if key not in SHORTHAND_ATTRIBUTES
    ]
    parts: list[Doc] = [pairs[0]]
    for pair in pairs[1:]:
        parts.extend([concat([",", line]), pair])
    return group(concat(["{", align(header_width + 1, fill(parts)), "}"]))


def tag_header(value: TagValue) -> Doc:
    parts: list[Doc] = []
    if value.name != DEFAULT_TAG:
        parts.append(f"%{value.name}")

    class_name = value.attribute("class")
    if class_name:
        parts.append("." + ".".join(class_name.split()))

    id_name = value.attribute("id")
    if id_name:
        parts.append(f"#{id_name}")

    if any(key not in SHORTHAND_ATTRIBUTES for key, _ in value.attributes):
        # Only strings precede the hash, so their length is the header width
        header_width = sum(string_width(part) for part in parts if isinstance(part, str))
        parts.append(attributes_hash(header_width, value))

    if value.nuke_outer_whitespace:
        parts.append(">")
    if value.nuke_inner_whitespace:
        parts.append("<")
    if value.self_closing:
        parts.append("/")

    if value.value:
        prefix = "=" if value.parse else ""
        parts.append(f"{prefix} {value.value}")
    elif value.dynamic_attributes.old:
        parts.append(value.dynamic_attributes.old)
    elif value.object_ref:
        if not parts:
            parts.append(f"%{DEFAULT_TAG}")
        parts.append(value.object_ref)

    # Nothing rendered for a plain div: the marker is the only way to keep it
    if not parts and value.name == DEFAULT_TAG:
        parts.append(f"%{DEFAULT_TAG}")

    return group(concat(parts))


def print_tag(path: AstPath, opts: PrintOptions, print_: PrintFn) -> Doc:
    node: Tag = path.node
    header = tag_header(node.value)
    if not node.children:
        return header
    return group(concat([header, _indented_children(path, print_)]))


# =============================================================================
# Comments and doctype
# =============================================================================


def print_comment(path: AstPath, opts: PrintOptions, print_: PrintFn) -> Doc:
    node: Comment = path.node
    value = node.value
    parts: list[Doc] = ["/"]

    if value.revealed:
        parts.append("!")

    if value.conditional:
        parts.append(value.conditional)
    elif value.text:
        parts.extend([" ", value.text])

    if node.children:
        parts.append(_indented_children(path, print_))

    return group(concat(parts))


def print_doctype(path: AstPath, opts: PrintOptions, print_: PrintFn) -> Doc:
    value = path.node.value
    parts: list[Doc] = ["!!!"]

    if value.type in DOCTYPES:
        parts.append(DOCTYPES[value.type])
    elif value.version in DOCTYPES:
        parts.append(DOCTYPES[value.version])

    if value.encoding:
        parts.append(value.encoding)

    return join(" ", parts)


def print_haml_comment(path: AstPath, opts: PrintOptions, print_: PrintFn) -> Doc:
    """Print ``-#`` comments, keeping the inline or block form the author chose.

    The parser gives the same text for ``-# note`` and for a ``-#`` line
    followed by an indented block, so the form is read off the source line.

    """
    node: HamlComment = path.node
    parts: list[Doc] = ["-#"]
    comment = (node.value.text or "").strip()

    if comment:
        source_line = opts.source_line(node.line)
        if source_line is not None and source_line.strip() == "-#":
            # Drop only the shared indent so nested lines keep their offset
            block = textwrap.dedent(node.value.text or "").strip("\n")
            lines = [text_line.rstrip() for text_line in block.split("\n")]
            parts.append(indent(concat([hardline, join(hardline, lines)])))
        else:
            parts.extend([" ", comment])

    return concat(parts)


# =============================================================================
# Text, scripts and root
# =============================================================================


def print_plain(path: AstPath, opts: PrintOptions, print_: PrintFn) -> Doc:
    node: Plain = path.node
    return node.value.text


def print_root(path: AstPath, opts: PrintOptions, print_: PrintFn) -> Doc:
    return mark_as_root(concat([join(hardline, path.map(print_, "children")), hardline]))


def print_script(path: AstPath, opts: PrintOptions, print_: PrintFn) -> Doc:
    node: Script = path.node
    parts: list[Doc] = [f"={node.value.text}"]
    if node.children:
        parts.append(_indented_children(path, print_))
    return group(concat(parts))


def print_silent_script(path: AstPath, opts: PrintOptions, print_: PrintFn) -> Doc:
    """Print ``- statement`` lines.

    ``case`` children alternate between ``when``/``else`` clauses and their
    bodies: clauses stay flush with the ``case``, bodies are indented.

    """
    node: SilentScript = path.node
    parts: list[Doc] = [f"-{node.value.text}"]

    if node.children:
        children = path.map(print_, "children")
        if node.value.keyword == "case":
            for index, child in enumerate(children):
                child_line = concat([hardline, child])
                parts.append(child_line if index % 2 == 0 else indent(child_line))
        else:
            parts.append(indent(concat([hardline, join(hardline, children)])))

    return group(concat(parts))
