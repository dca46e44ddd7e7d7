"""
Pulido: a HAML formatter for Python 3.12+

Turns HAML templates (and the Ruby hashes inside them) into one canonical
layout. Parsing is delegated to an external parser that answers with a JSON
syntax tree; Pulido converts that tree into typed nodes, builds a document
from it and lays the document out against a line width.

Quick Start:
    >>> from pulido import format_haml
    >>> print(format_haml("%a.btn{href: '/x'} Go"), end="")
    %a.btn{"href" => "/x"} Go

    >>> # Or keep a configured formatter around
    >>> from pulido import Formatter, FormatConfig
    >>> fmt = Formatter(config=FormatConfig(print_width=100))
    >>> text = fmt("%p hello")

Formatting an existing tree:
    >>> from pulido import format_tree, from_json
    >>> tree = from_json('{"type": "root", "value": {}, "children": []}')
    >>> format_tree(tree)
    '\\n'

Installation:
    pip install pulido               # zero Python dependencies
    gem install haml                 # needed by the bundled parser script
"""

from collections.abc import Iterable

from pulido.config import (
    FormatConfig,
    PrintOptions,
    format_config_context,
    get_format_config,
    reset_format_config,
    set_format_config,
)
from pulido.doc import Doc, debug_doc, print_doc_to_string
from pulido.errors import (
    DocError,
    ParseError,
    PrintError,
    PulidoError,
    UnsupportedNodeError,
)
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
    HamlNode,
    Hash,
    Label,
    Node,
    Plain,
    Root,
    RubyNode,
    Script,
    SilentScript,
    StringEmbexpr,
    StringLiteral,
    SymbolLiteral,
    Tag,
    Token,
    VarRef,
)
from pulido.parser import DEFAULT_PARSERS, ExternalParser, parse
from pulido.path import AstPath
from pulido.printers import print_ast, print_node
from pulido.serialization import from_dict, from_json, to_dict, to_json
from pulido.utils.logger import get_logger

__version__ = "0.1.0"

logger = get_logger(__name__)


def format_tree(
    node: Node,
    *,
    config: FormatConfig | None = None,
    original_text: str = "",
) -> str:
    """Format an already parsed syntax tree.

    Args:
        node: Root of the tree (usually a Root node)
        config: Format configuration (uses the active context config if None)
        original_text: Source the tree was parsed from. Only needed to keep
            the block form of multi-line ``-#`` comments.

    Returns:
        Formatted text

    Raises:
        UnsupportedNodeError: If the tree holds a value without a printer
        DocError: If a printer produced a malformed document

    Example:
        >>> tree = from_dict({"type": "root", "value": {}, "children": [
        ...     {"type": "plain", "value": {"text": "hi"}, "children": []}]})
        >>> format_tree(tree)
        'hi\\n'
    """
    config = config or get_format_config()
    logger.debug(
        "Formatting %s tree at width %d", type(node).__name__, config.print_width
    )
    doc = print_ast(node, PrintOptions(config=config, original_text=original_text))
    return print_doc_to_string(doc, config)


def format_haml(
    text: str,
    *,
    config: FormatConfig | None = None,
    parser: ExternalParser | None = None,
) -> str:
    """Parse and format HAML source in one call.

    Args:
        text: HAML source
        config: Format configuration (uses the active context config if None)
        parser: Parser to run instead of the one named by ``config.parser``

    Returns:
        Formatted text

    Raises:
        ParseError: If the parser fails; the message is the parser's own
        UnsupportedNodeError: If the tree holds a node kind without a printer
    """
    config = config or get_format_config()
    logger.debug("Formatting %d characters of source", len(text))
    tree = parser.parse(text) if parser is not None else parse(text, options=config)
    return format_tree(tree, config=config, original_text=text)


class Formatter:
    """Reusable formatter holding an immutable configuration.

    Usage:
        >>> fmt = Formatter()
        >>> fmt("%p hello")
        '%p hello\\n'

        >>> # Hash keys as arrows, trailing commas on broken hashes
        >>> fmt = Formatter(config=FormatConfig(
        ...     prefer_hash_labels=False, add_trailing_commas=True))

        >>> # Custom parser command
        >>> fmt = Formatter(parser=ExternalParser(["bundle", "exec", "ruby", "haml.rb"]))

    Thread Safety:
        Uses ContextVar for thread-local configuration. Safe to use multiple
        Formatter instances concurrently from different threads.

    """

    __slots__ = ("_config", "_parser")

    def __init__(
        self,
        *,
        config: FormatConfig | None = None,
        parser: ExternalParser | None = None,
    ) -> None:
        """Initialize formatter.

        Args:
            config: Format configuration (defaults to FormatConfig())
            parser: Parser to use (defaults to the one named by ``config.parser``)
        """
        self._config = config or FormatConfig()
        self._parser = parser

    @property
    def config(self) -> FormatConfig:
        return self._config

    def __call__(self, text: str) -> str:
        """Format HAML source.

        Thread Safety:
            Sets config via ContextVar (thread-local). Safe for concurrent use.

        """
        set_format_config(self._config)
        try:
            return format_haml(text, config=self._config, parser=self._parser)
        finally:
            reset_format_config()

    def format_many(self, texts: Iterable[str]) -> list[str]:
        """Format several sources with one config set/reset.

        Example:
            >>> fmt = Formatter()
            >>> fmt.format_many(["%p a", "%p b"])
            ['%p a\\n', '%p b\\n']
        """
        set_format_config(self._config)
        try:
            return [
                format_haml(text, config=self._config, parser=self._parser)
                for text in texts
            ]
        finally:
            reset_format_config()

    def format_tree(self, node: Node, *, original_text: str = "") -> str:
        """Format an already parsed tree with this formatter's config."""
        return format_tree(node, config=self._config, original_text=original_text)


__all__ = [  # noqa: RUF022 - grouped by category for maintainability
    # Version
    "__version__",
    # Core API
    "parse",
    "print_node",
    "print_ast",
    "format_tree",
    "format_haml",
    # High-level
    "Formatter",
    # Parsers
    "DEFAULT_PARSERS",
    "ExternalParser",
    # Markup nodes
    "Node",
    "HamlNode",
    "Root",
    "Tag",
    "Comment",
    "Doctype",
    "HamlComment",
    "Plain",
    "Script",
    "SilentScript",
    # Ruby nodes
    "RubyNode",
    "ArrayLiteral",
    "AssocNew",
    "AssoclistFromArgs",
    "BareAssocHash",
    "Binary",
    "DynaSymbol",
    "Hash",
    "Label",
    "StringEmbexpr",
    "StringLiteral",
    "SymbolLiteral",
    "Token",
    "VarRef",
    # Traversal
    "AstPath",
    # Documents
    "Doc",
    "debug_doc",
    "print_doc_to_string",
    # Serialization
    "to_dict",
    "from_dict",
    "to_json",
    "from_json",
    # Configuration (ContextVar-based)
    "FormatConfig",
    "PrintOptions",
    "get_format_config",
    "set_format_config",
    "reset_format_config",
    "format_config_context",
    # Errors
    "PulidoError",
    "ParseError",
    "PrintError",
    "UnsupportedNodeError",
    "DocError",
]
