"""Node printers and the dispatch driver.

``print_node`` maps the node under the path to its printer with one
exhaustive match over the closed node set. ``print_ast`` drives the whole
walk: it hands every printer a callback that prints a child the same way,
so docs are assembled bottom-up.

Available Printers:
- haml: markup nodes (tag, comment, doctype, haml_comment, plain, root,
  script, silent_script)
- hashes: hash, assoclist_from_args, bare_assoc_hash, assoc_new
- ruby: the Ruby values found inside hashes

Thread Safety:
Printers are pure; each print_ast() call owns its AstPath.

"""

from __future__ import annotations

from typing import TypeAlias

from collections.abc import Callable

from pulido.config import PrintOptions
from pulido.doc.builders import Doc
from pulido.errors import UnsupportedNodeError
from pulido.nodes import (
    ArrayLiteral,
    AssocNew,
    AssoclistFromArgs,
    BareAssocHash,
    Binary,
    Comment,
    Doctype,
    DynaSymbol,
    HamlComment,
    Hash,
    Label,
    Node,
    Plain,
    Root,
    Script,
    SilentScript,
    StringEmbexpr,
    StringLiteral,
    SymbolLiteral,
    Tag,
    Token,
    VarRef,
)
from pulido.path import AstPath
from pulido.printers import haml, hashes, ruby
from pulido.utils.logger import get_logger

logger = get_logger(__name__)

PrintFn: TypeAlias = Callable[[AstPath], Doc]


def print_node(path: AstPath, opts: PrintOptions, print_: PrintFn) -> Doc:
    """Print the node at ``path``.

    Args:
        path: Accessor positioned on the node to print
        opts: Active print options
        print_: Callback used by printers to print children

    Returns:
        Doc for the node

    Raises:
        UnsupportedNodeError: If the value is not a known node kind

    """
    node = path.node
    match node:
        # Markup
        case Root():
            return haml.print_root(path, opts, print_)
        case Tag():
            return haml.print_tag(path, opts, print_)
        case Comment():
            return haml.print_comment(path, opts, print_)
        case Doctype():
            return haml.print_doctype(path, opts, print_)
        case HamlComment():
            return haml.print_haml_comment(path, opts, print_)
        case Plain():
            return haml.print_plain(path, opts, print_)
        case Script():
            return haml.print_script(path, opts, print_)
        case SilentScript():
            return haml.print_silent_script(path, opts, print_)
        # Hashes
        case Hash():
            return hashes.print_hash(path, opts, print_)
        case AssoclistFromArgs():
            return hashes.print_assoclist_from_args(path, opts, print_)
        case BareAssocHash():
            return hashes.print_bare_assoc_hash(path, opts, print_)
        case AssocNew():
            return hashes.print_assoc_new(path, opts, print_)
        # Ruby values
        case Token():
            return ruby.print_token(path, opts, print_)
        case VarRef():
            return ruby.print_var_ref(path, opts, print_)
        case Label():
            return ruby.print_label(path, opts, print_)
        case SymbolLiteral():
            return ruby.print_symbol_literal(path, opts, print_)
        case DynaSymbol():
            return ruby.print_dyna_symbol(path, opts, print_)
        case StringLiteral():
            return ruby.print_string_literal(path, opts, print_)
        case StringEmbexpr():
            return ruby.print_string_embexpr(path, opts, print_)
        case ArrayLiteral():
            return ruby.print_array(path, opts, print_)
        case Binary():
            return ruby.print_binary(path, opts, print_)
        case _:
            raise UnsupportedNodeError(getattr(node, "type", type(node).__name__))


def print_ast(node: Node, opts: PrintOptions) -> Doc:
    """Build the doc for a whole syntax tree.

    Args:
        node: Root of the tree (any node kind)
        opts: Print options shared by every printer

    Returns:
        Doc for the tree

    """
    logger.debug("Printing %s tree", type(node).__name__)

    def main_print(path: AstPath) -> Doc:
        return print_node(path, opts, main_print)

    return main_print(AstPath(node))


__all__ = ["haml", "hashes", "print_ast", "print_node", "ruby"]
