"""Typed syntax-tree nodes for Pulido.

All nodes are frozen dataclasses with slots for:
- Type safety: IDE autocomplete, catch errors at dev time
- Immutability: Safe sharing across threads
- Pattern matching: the print driver dispatches with a single match statement

Trees arrive from the external parser as JSON and are converted by
``pulido.serialization.from_dict``. The node set is closed: a JSON ``type``
without a class here is rejected at conversion time.

Node Hierarchy:
Node (base)
├── HamlNode (markup)
│   ├── Root
│   ├── Tag
│   ├── Comment
│   ├── Doctype
│   ├── HamlComment
│   ├── Plain
│   ├── Script
│   └── SilentScript
└── RubyNode (hash/association family and the values inside it)
    ├── Hash
    ├── AssoclistFromArgs
    ├── BareAssocHash
    ├── AssocNew
    ├── Label
    ├── SymbolLiteral
    ├── DynaSymbol
    ├── StringLiteral
    ├── StringEmbexpr
    ├── Token
    ├── VarRef
    ├── ArrayLiteral
    └── Binary

Thread Safety:
All nodes are frozen (immutable) and safe to share across threads.

"""

from __future__ import annotations

from dataclasses import dataclass, field

# =============================================================================
# Base Node
# =============================================================================


@dataclass(frozen=True, slots=True)
class Node:
    """Base class for all syntax-tree nodes.

    ``line`` is the 1-based source line the parser reported, if any.

    """

    line: int | None = field(default=None, kw_only=True)


@dataclass(frozen=True, slots=True)
class HamlNode(Node):
    """Base class for markup nodes."""


@dataclass(frozen=True, slots=True)
class RubyNode(Node):
    """Base class for Ruby expression nodes."""


# =============================================================================
# Markup Payloads
# =============================================================================


@dataclass(frozen=True, slots=True)
class DynamicAttributes:
    """Attribute hashes that are evaluated at render time.

    ``old`` is the raw ``{...}`` source of a Ruby-style hash, ``new`` the raw
    ``(...)`` source of an HTML-style attribute list.

    """

    old: str | None = None
    new: str | None = None


@dataclass(frozen=True, slots=True)
class TagValue:
    """Everything the parser knows about a ``%tag`` line.

    ``attributes`` keeps the parser's insertion order as ``(name, value)``
    pairs; that order is the rendered order.

    """

    name: str = "div"
    attributes: tuple[tuple[str, str], ...] = ()
    self_closing: bool = False
    nuke_outer_whitespace: bool = False
    nuke_inner_whitespace: bool = False
    value: str | None = None
    parse: bool = False
    dynamic_attributes: DynamicAttributes = DynamicAttributes()
    object_ref: str | None = None

    def attribute(self, name: str) -> str | None:
        for key, value in self.attributes:
            if key == name:
                return value
        return None


@dataclass(frozen=True, slots=True)
class CommentValue:
    revealed: bool = False
    conditional: str | None = None
    text: str | None = None


@dataclass(frozen=True, slots=True)
class DoctypeValue:
    type: str | None = None
    version: str | None = None
    encoding: str | None = None


@dataclass(frozen=True, slots=True)
class HamlCommentValue:
    text: str | None = None


@dataclass(frozen=True, slots=True)
class PlainValue:
    text: str = ""


@dataclass(frozen=True, slots=True)
class ScriptValue:
    text: str = ""


@dataclass(frozen=True, slots=True)
class SilentScriptValue:
    """Payload of a ``- statement`` line.

    ``keyword`` is the leading Ruby keyword (``if``, ``case``, ``when``...)
    when the statement opens a block.

    """

    text: str = ""
    keyword: str | None = None


# =============================================================================
# Markup Nodes
# =============================================================================


@dataclass(frozen=True, slots=True)
class Root(HamlNode):
    """Whole document."""

    children: tuple[HamlNode, ...] = ()


@dataclass(frozen=True, slots=True)
class Tag(HamlNode):
    """Element line.

    HAML: %a.btn#go{href: "/x"} Click
    """

    value: TagValue = TagValue()
    children: tuple[HamlNode, ...] = ()


@dataclass(frozen=True, slots=True)
class Comment(HamlNode):
    """HTML comment.

    HAML: / text, /[if IE], /! revealed
    """

    value: CommentValue = CommentValue()
    children: tuple[HamlNode, ...] = ()


@dataclass(frozen=True, slots=True)
class Doctype(HamlNode):
    """Doctype declaration.

    HAML: !!! 5, !!! XML utf-8
    """

    value: DoctypeValue = DoctypeValue()


@dataclass(frozen=True, slots=True)
class HamlComment(HamlNode):
    """Silent comment, never rendered to HTML.

    HAML: -# text
    """

    value: HamlCommentValue = HamlCommentValue()
    children: tuple[HamlNode, ...] = ()


@dataclass(frozen=True, slots=True)
class Plain(HamlNode):
    """Plain text line, passed through unchanged."""

    value: PlainValue = PlainValue()


@dataclass(frozen=True, slots=True)
class Script(HamlNode):
    """Evaluated expression whose result is output.

    HAML: = link_to "Home", root_path
    """

    value: ScriptValue = ScriptValue()
    children: tuple[HamlNode, ...] = ()


@dataclass(frozen=True, slots=True)
class SilentScript(HamlNode):
    """Statement evaluated for its side effects only.

    HAML: - if user.admin?
    """

    value: SilentScriptValue = SilentScriptValue()
    children: tuple[HamlNode, ...] = ()


# =============================================================================
# Ruby Nodes
# =============================================================================

# Scanner token kinds carried by Token
TOKEN_KINDS: frozenset[str] = frozenset(
    {
        "@int",
        "@float",
        "@rational",
        "@imaginary",
        "@CHAR",
        "@ident",
        "@const",
        "@kw",
        "@ivar",
        "@cvar",
        "@gvar",
        "@backref",
        "@op",
        "@tstring_content",
    }
)


@dataclass(frozen=True, slots=True)
class Token(RubyNode):
    """Single scanner token, e.g. ``@int`` ``42`` or ``@ident`` ``foo``."""

    kind: str
    value: str


@dataclass(frozen=True, slots=True)
class VarRef(RubyNode):
    """Reference to a variable, constant or keyword value (``nil``, ``self``)."""

    token: Token


@dataclass(frozen=True, slots=True)
class Label(RubyNode):
    """Hash label key. ``text`` includes the trailing colon: ``"foo:"``."""

    text: str

    @property
    def name(self) -> str:
        return self.text[:-1] if self.text.endswith(":") else self.text


@dataclass(frozen=True, slots=True)
class SymbolLiteral(RubyNode):
    """Plain symbol: ``:foo``."""

    name: Token


@dataclass(frozen=True, slots=True)
class StringEmbexpr(RubyNode):
    """Interpolated expression inside a string: ``#{expr}``."""

    expression: RubyNode


@dataclass(frozen=True, slots=True)
class DynaSymbol(RubyNode):
    """Quoted symbol: ``:"foo"`` or ``:"foo#{bar}"``.

    ``segments`` are ``@tstring_content`` tokens and StringEmbexpr nodes.

    """

    segments: tuple[RubyNode, ...] = ()
    quote: str = '"'

    @property
    def is_single_literal(self) -> bool:
        return len(self.segments) == 1 and isinstance(self.segments[0], Token)


@dataclass(frozen=True, slots=True)
class StringLiteral(RubyNode):
    """Quoted string: ``"foo"``, ``'foo'`` or ``"foo #{bar}"``."""

    segments: tuple[RubyNode, ...] = ()
    quote: str = '"'


@dataclass(frozen=True, slots=True)
class ArrayLiteral(RubyNode):
    """Array literal. ``elements`` is None for ``[]``."""

    elements: tuple[RubyNode, ...] | None = None


@dataclass(frozen=True, slots=True)
class Binary(RubyNode):
    """Binary operation: ``left operator right``."""

    left: RubyNode
    operator: str
    right: RubyNode


@dataclass(frozen=True, slots=True)
class AssocNew(RubyNode):
    """Single ``key => value`` or ``key: value`` pair."""

    key: RubyNode
    value: RubyNode


@dataclass(frozen=True, slots=True)
class AssoclistFromArgs(RubyNode):
    """Pairs inside hash braces."""

    assocs: tuple[AssocNew, ...] = ()


@dataclass(frozen=True, slots=True)
class BareAssocHash(RubyNode):
    """Pairs without braces, e.g. trailing keyword arguments."""

    assocs: tuple[AssocNew, ...] = ()


@dataclass(frozen=True, slots=True)
class Hash(RubyNode):
    """Hash literal. ``body`` is None for ``{}``."""

    body: AssoclistFromArgs | None = None
