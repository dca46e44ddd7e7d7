"""Printers for the Ruby values that appear as hash keys and values."""

from __future__ import annotations

from typing import TypeAlias

from collections.abc import Callable

from pulido.config import PrintOptions
from pulido.doc.builders import Doc, concat, group, if_break, indent, join, line, softline
from pulido.nodes import ArrayLiteral, Binary, DynaSymbol, Label, StringLiteral, Token
from pulido.path import AstPath

PrintFn: TypeAlias = Callable[[AstPath], Doc]


def print_token(path: AstPath, opts: PrintOptions, print_: PrintFn) -> Doc:
    node: Token = path.node
    return node.value


def print_var_ref(path: AstPath, opts: PrintOptions, print_: PrintFn) -> Doc:
    return path.call(print_, "token")


def print_label(path: AstPath, opts: PrintOptions, print_: PrintFn) -> Doc:
    node: Label = path.node
    return node.text


def print_symbol_literal(path: AstPath, opts: PrintOptions, print_: PrintFn) -> Doc:
    return concat([":", path.call(print_, "name")])


def print_dyna_symbol(path: AstPath, opts: PrintOptions, print_: PrintFn) -> Doc:
    node: DynaSymbol = path.node
    return concat([":", node.quote, *path.map(print_, "segments"), node.quote])


def print_string_literal(path: AstPath, opts: PrintOptions, print_: PrintFn) -> Doc:
    node: StringLiteral = path.node
    return concat([node.quote, *path.map(print_, "segments"), node.quote])


def print_string_embexpr(path: AstPath, opts: PrintOptions, print_: PrintFn) -> Doc:
    return concat(["#{", path.call(print_, "expression"), "}"])


def print_array(path: AstPath, opts: PrintOptions, print_: PrintFn) -> Doc:
    node: ArrayLiteral = path.node
    if not node.elements:
        return "[]"

    elements = join(concat([",", line]), path.map(print_, "elements"))
    trailing = if_break(",", "") if opts.config.add_trailing_commas else ""
    return group(concat(["[", indent(concat([softline, elements, trailing])), softline, "]"]))


def print_binary(path: AstPath, opts: PrintOptions, print_: PrintFn) -> Doc:
    node: Binary = path.node
    return group(
        concat(
            [
                path.call(print_, "left"),
                " ",
                node.operator,
                indent(concat([line, path.call(print_, "right")])),
            ]
        )
    )
