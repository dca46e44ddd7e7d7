"""Document primitives and their builders.

A document ("doc") is a layout-agnostic description of formatted output.
Printers build docs; ``pulido.doc.printer`` lays them out against a width.

All primitives are frozen dataclasses with slots. Plain strings are the text
primitive. Nothing here has side effects: building the same doc twice gives
two equal values.

Primitive Set:
Doc
├── str          literal text
├── Concat       ordered juxtaposition
├── Group        one break decision for everything inside
├── Indent       +1 indentation level for nested breaks
├── Align        +n columns for nested breaks
├── Fill         content/separator pairs wrapped greedily
├── IfBreak      picks a variant by the enclosing group's mode
├── Line         line break variants (line, softline, hardline)
├── BreakParent  forces enclosing groups to break
└── MarkAsRoot   anchors indentation at column 0

Example:
    >>> from pulido.doc.builders import concat, group, indent, line
    >>> doc = group(concat(["{", indent(concat([line, "a: 1"])), line, "}"]))

"""

from __future__ import annotations

from typing import TypeAlias

from collections.abc import Iterable
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Concat:
    """Ordered sequence of docs printed one after another."""

    parts: tuple[Doc, ...]


@dataclass(frozen=True, slots=True)
class Group:
    """Break-decision scope.

    Printed flat when the flattened contents fit the rest of the line,
    otherwise broken. ``should_break`` forces the broken form.

    """

    contents: Doc
    should_break: bool = False


@dataclass(frozen=True, slots=True)
class Indent:
    """Adds one indentation level to breaks inside ``contents``."""

    contents: Doc


@dataclass(frozen=True, slots=True)
class Align:
    """Adds ``width`` columns of indentation to breaks inside ``contents``."""

    width: int
    contents: Doc


@dataclass(frozen=True, slots=True)
class Fill:
    """Greedy wrap layout.

    ``parts`` alternate content and separator: ``[content, sep, content, ...]``.
    Each separator breaks only if the content after it does not fit.

    """

    parts: tuple[Doc, ...]


@dataclass(frozen=True, slots=True)
class IfBreak:
    """Prints ``break_contents`` in a broken group, ``flat_contents`` otherwise."""

    break_contents: Doc
    flat_contents: Doc = ""


@dataclass(frozen=True, slots=True)
class Line:
    """Line break.

    - ``Line()``: a space when flat, a newline when broken
    - ``Line(soft=True)``: nothing when flat, a newline when broken
    - ``Line(hard=True)``: always a newline; breaks every enclosing group

    """

    hard: bool = False
    soft: bool = False


@dataclass(frozen=True, slots=True)
class BreakParent:
    """Forces every enclosing group to break. Prints nothing."""


@dataclass(frozen=True, slots=True)
class MarkAsRoot:
    """Prints ``contents`` with indentation reset to column 0."""

    contents: Doc


Doc: TypeAlias = str | Concat | Group | Indent | Align | Fill | IfBreak | Line | BreakParent | MarkAsRoot

DOC_TYPES: tuple[type, ...] = (
    str,
    Concat,
    Group,
    Indent,
    Align,
    Fill,
    IfBreak,
    Line,
    BreakParent,
    MarkAsRoot,
)

# =============================================================================
# Builders
# =============================================================================

line = Line()
softline = Line(soft=True)
hardline = Line(hard=True)
break_parent = BreakParent()


def text(value: str) -> Doc:
    """Literal text. Must not contain newlines; use hardline instead."""
    if not isinstance(value, str):
        raise TypeError(f"Got {value!r} of type {type(value).__name__}, expected 'str'")
    return value


def concat(parts: Iterable[Doc]) -> Concat:
    return Concat(tuple(parts))


def group(contents: Doc, should_break: bool = False) -> Group:
    return Group(contents, should_break)


def indent(contents: Doc) -> Indent:
    return Indent(contents)


def align(width: int, contents: Doc) -> Align:
    return Align(width, contents)


def fill(parts: Iterable[Doc]) -> Fill:
    return Fill(tuple(parts))


def if_break(break_contents: Doc, flat_contents: Doc = "") -> IfBreak:
    return IfBreak(break_contents, flat_contents)


def join(separator: Doc, parts: Iterable[Doc]) -> Concat:
    """Concatenate ``parts`` with ``separator`` between each pair."""
    joined: list[Doc] = []
    for index, part in enumerate(parts):
        if index > 0:
            joined.append(separator)
        joined.append(part)
    return Concat(tuple(joined))


def mark_as_root(contents: Doc) -> MarkAsRoot:
    return MarkAsRoot(contents)


__all__ = [
    "Align",
    "BreakParent",
    "Concat",
    "DOC_TYPES",
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
    "fill",
    "group",
    "hardline",
    "if_break",
    "indent",
    "join",
    "line",
    "mark_as_root",
    "softline",
    "text",
]
