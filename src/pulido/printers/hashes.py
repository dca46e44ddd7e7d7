"""Hash and association printers.

Covers hash literals, the pair lists inside them, bare pairs (trailing
keyword arguments) and single pairs, including the ``key:`` versus
``:key =>`` decision.

Label Normalization:
With ``prefer_hash_labels`` on, ``:foo => 1`` and ``foo: 1`` both print as
``foo: 1``; with it off, both print as ``:foo => 1``.

"""

from __future__ import annotations

from typing import TypeAlias

from collections.abc import Callable

from pulido.config import PrintOptions
from pulido.doc.builders import Doc, concat, group, if_break, indent, join, line
from pulido.nodes import (
    ArrayLiteral,
    AssocNew,
    DynaSymbol,
    Hash,
    Label,
    StringLiteral,
    SymbolLiteral,
    Token,
    VarRef,
)
from pulido.path import AstPath

PrintFn: TypeAlias = Callable[[AstPath], Doc]

# Values printed on the key's line after a single space. Anything else
# hangs on an indented line of its own when the pair does not fit.
COMPACT_VALUE_TYPES: frozenset[type] = frozenset(
    {
        Token,
        VarRef,
        SymbolLiteral,
        DynaSymbol,
        StringLiteral,
        ArrayLiteral,
        Hash,
    }
)

# Symbol name tokens that can be written as a label
_LABEL_TOKEN_KINDS = frozenset({"@ident", "@const", "@kw"})


def _symbol_is_labelable(node: SymbolLiteral) -> bool:
    name = node.name
    return name.kind in _LABEL_TOKEN_KINDS and not name.value.endswith(("?", "!", "="))


def print_hash_key(path: AstPath, opts: PrintOptions, print_: PrintFn) -> Doc:
    """Print the key of the AssocNew at ``path``, separator included."""
    key = path.node.key
    prefer_labels = opts.config.prefer_hash_labels

    match key:
        case Label():
            if prefer_labels:
                return path.call(print_, "key")
            return f":{key.name} =>"
        case SymbolLiteral():
            if prefer_labels and _symbol_is_labelable(key):
                return concat([path.call(print_, "key", "name"), ":"])
            return concat([path.call(print_, "key"), " =>"])
        case DynaSymbol():
            if prefer_labels and key.is_single_literal:
                content = path.call(print_, "key", "segments", 0)
                return concat([key.quote, content, key.quote, ":"])
            return concat([path.call(print_, "key"), " =>"])
        case _:
            return concat([path.call(print_, "key"), " =>"])


def print_assoc_new(path: AstPath, opts: PrintOptions, print_: PrintFn) -> Doc:
    node: AssocNew = path.node
    parts: list[Doc] = [print_hash_key(path, opts, print_)]
    value = path.call(print_, "value")

    if type(node.value) in COMPACT_VALUE_TYPES:
        parts.extend([" ", value])
    else:
        parts.append(indent(concat([line, value])))

    return group(concat(parts))


def print_assoclist_from_args(path: AstPath, opts: PrintOptions, print_: PrintFn) -> Doc:
    assocs = path.map(print_, "assocs")
    parts: list[Doc] = []

    for index, assoc in enumerate(assocs):
        parts.append(assoc)
        if index != len(assocs) - 1:
            parts.append(concat([",", line]))
        elif opts.config.add_trailing_commas:
            parts.append(if_break(",", ""))

    return group(concat(parts))


def print_bare_assoc_hash(path: AstPath, opts: PrintOptions, print_: PrintFn) -> Doc:
    return group(join(concat([",", line]), path.map(print_, "assocs")))


def print_hash(path: AstPath, opts: PrintOptions, print_: PrintFn) -> Doc:
    node: Hash = path.node
    if node.body is None or not node.body.assocs:
        return "{}"

    return group(
        concat(
            [
                "{",
                indent(concat([line, path.call(print_, "body")])),
                concat([line, "}"]),
            ]
        )
    )
