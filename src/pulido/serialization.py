"""Syntax-tree serialization: JSON trees to typed nodes and back.

The external parsers emit two JSON shapes:

- markup nodes: ``{"type": "tag", "value": {...}, "children": [...], "line": 3}``
- Ruby nodes: ``{"type": "assoc_new", "body": [...], "line": 3}``

``from_dict`` converts either shape into the frozen dataclasses of
``pulido.nodes``; ``to_dict`` goes the other way (useful for caching trees
and for debugging). Output of ``to_json`` is deterministic (sorted keys).

Example:
    from pulido.serialization import from_json

    tree = from_json('{"type": "root", "value": {}, "children": []}')

Thread Safety:
    All functions are pure and safe to call from any thread.

"""

import json
from collections.abc import Callable
from typing import Any

from pulido.errors import UnsupportedNodeError
from pulido.nodes import (
    TOKEN_KINDS,
    ArrayLiteral,
    AssocNew,
    AssoclistFromArgs,
    BareAssocHash,
    Binary,
    Comment,
    CommentValue,
    Doctype,
    DoctypeValue,
    DynamicAttributes,
    DynaSymbol,
    HamlComment,
    HamlCommentValue,
    HamlNode,
    Hash,
    Label,
    Node,
    Plain,
    PlainValue,
    Root,
    RubyNode,
    Script,
    ScriptValue,
    SilentScript,
    SilentScriptValue,
    StringEmbexpr,
    StringLiteral,
    SymbolLiteral,
    Tag,
    TagValue,
    Token,
    VarRef,
)

# The haml gem marks "no object reference" with the :nil symbol
_NIL_OBJECT_REF = "nil"


# =============================================================================
# Markup nodes
# =============================================================================


def _children(data: dict[str, Any]) -> tuple[HamlNode, ...]:
    return tuple(_haml_from_dict(child) for child in data.get("children") or ())


def _tag_value(value: dict[str, Any]) -> TagValue:
    dynamic = value.get("dynamic_attributes") or {}
    if not isinstance(dynamic, dict):
        msg = f"Expected an object for tag dynamic_attributes, got {type(dynamic).__name__}"
        raise ValueError(msg)
    object_ref = value.get("object_ref")
    if object_ref == _NIL_OBJECT_REF:
        object_ref = None
    return TagValue(
        name=value.get("name") or "div",
        attributes=tuple(
            (str(key), str(attr)) for key, attr in (value.get("attributes") or {}).items()
        ),
        self_closing=bool(value.get("self_closing")),
        nuke_outer_whitespace=bool(value.get("nuke_outer_whitespace")),
        nuke_inner_whitespace=bool(value.get("nuke_inner_whitespace")),
        value=value.get("value") or None,
        parse=bool(value.get("parse")),
        dynamic_attributes=DynamicAttributes(old=dynamic.get("old"), new=dynamic.get("new")),
        object_ref=object_ref or None,
    )


_HAML_BUILDERS: dict[str, Callable[[dict[str, Any], dict[str, Any]], HamlNode]] = {
    "root": lambda data, value: Root(children=_children(data), line=data.get("line")),
    "tag": lambda data, value: Tag(
        value=_tag_value(value), children=_children(data), line=data.get("line")
    ),
    "comment": lambda data, value: Comment(
        value=CommentValue(
            revealed=bool(value.get("revealed")),
            conditional=value.get("conditional"),
            text=value.get("text"),
        ),
        children=_children(data),
        line=data.get("line"),
    ),
    "doctype": lambda data, value: Doctype(
        value=DoctypeValue(
            type=value.get("type"),
            version=value.get("version"),
            encoding=value.get("encoding"),
        ),
        line=data.get("line"),
    ),
    "haml_comment": lambda data, value: HamlComment(
        value=HamlCommentValue(text=value.get("text")),
        children=_children(data),
        line=data.get("line"),
    ),
    "plain": lambda data, value: Plain(
        value=PlainValue(text=value.get("text") or ""), line=data.get("line")
    ),
    "script": lambda data, value: Script(
        value=ScriptValue(text=value.get("text") or ""),
        children=_children(data),
        line=data.get("line"),
    ),
    "silent_script": lambda data, value: SilentScript(
        value=SilentScriptValue(text=value.get("text") or "", keyword=value.get("keyword")),
        children=_children(data),
        line=data.get("line"),
    ),
}


def _haml_from_dict(data: dict[str, Any]) -> HamlNode:
    node_type = data.get("type")
    builder = _HAML_BUILDERS.get(node_type)  # type: ignore[arg-type]
    if builder is None:
        raise UnsupportedNodeError(str(node_type))
    return builder(data, data.get("value") or {})


# =============================================================================
# Ruby nodes
# =============================================================================


def _token(data: dict[str, Any]) -> Token:
    return Token(kind=data["type"], value=str(data["body"]), line=data.get("line"))


def _unwrap(data: dict[str, Any], wrapper: str) -> dict[str, Any]:
    # symbol_literal wraps a `symbol` node; strings wrap a `string` node
    body = data["body"]
    if body and isinstance(body[0], dict) and body[0].get("type") == wrapper:
        return body[0]
    return data


def _segments(data: dict[str, Any], wrapper: str) -> tuple[RubyNode, ...]:
    return tuple(_ruby_from_dict(part) for part in _unwrap(data, wrapper)["body"])


def _symbol_name(data: dict[str, Any]) -> Token:
    inner = _unwrap(data, "symbol")["body"][0]
    return _token(inner)


def _assocs(data: dict[str, Any]) -> tuple[AssocNew, ...]:
    # Ripper nests the pair list one level deep: body == [[assoc, ...]]
    pairs = data["body"][0] if data["body"] and isinstance(data["body"][0], list) else data["body"]
    result = []
    for pair in pairs:
        node = _ruby_from_dict(pair)
        if not isinstance(node, AssocNew):
            raise UnsupportedNodeError(type(node).__name__)
        result.append(node)
    return tuple(result)


def _hash(data: dict[str, Any]) -> Hash:
    body = data["body"][0] if data["body"] else None
    if body is None:
        return Hash(body=None, line=data.get("line"))
    assoclist = _ruby_from_dict(body)
    if not isinstance(assoclist, AssoclistFromArgs):
        raise UnsupportedNodeError(body.get("type", type(assoclist).__name__))
    return Hash(body=assoclist, line=data.get("line"))


def _array(data: dict[str, Any]) -> ArrayLiteral:
    body = data["body"][0] if data["body"] else None
    if body is None:
        return ArrayLiteral(elements=None, line=data.get("line"))
    return ArrayLiteral(
        elements=tuple(_ruby_from_dict(element) for element in body), line=data.get("line")
    )


_RUBY_BUILDERS: dict[str, Callable[[dict[str, Any]], RubyNode]] = {
    "hash": _hash,
    "assoclist_from_args": lambda data: AssoclistFromArgs(
        assocs=_assocs(data), line=data.get("line")
    ),
    "bare_assoc_hash": lambda data: BareAssocHash(assocs=_assocs(data), line=data.get("line")),
    "assoc_new": lambda data: AssocNew(
        key=_ruby_from_dict(data["body"][0]),
        value=_ruby_from_dict(data["body"][1]),
        line=data.get("line"),
    ),
    "@label": lambda data: Label(text=data["body"], line=data.get("line")),
    "symbol_literal": lambda data: SymbolLiteral(name=_symbol_name(data), line=data.get("line")),
    "dyna_symbol": lambda data: DynaSymbol(
        segments=_segments(data, "xstring"),
        quote=data.get("quote") or '"',
        line=data.get("line"),
    ),
    "string_literal": lambda data: StringLiteral(
        segments=_segments(data, "string"),
        quote=data.get("quote") or '"',
        line=data.get("line"),
    ),
    "string_embexpr": lambda data: StringEmbexpr(
        expression=_ruby_from_dict(data["body"][0]), line=data.get("line")
    ),
    "var_ref": lambda data: VarRef(token=_token(data["body"][0]), line=data.get("line")),
    "array": _array,
    "binary": lambda data: Binary(
        left=_ruby_from_dict(data["body"][0]),
        operator=str(data["body"][1]),
        right=_ruby_from_dict(data["body"][2]),
        line=data.get("line"),
    ),
}


def _ruby_from_dict(data: dict[str, Any]) -> RubyNode:
    node_type = data.get("type")
    if node_type in TOKEN_KINDS:
        return _token(data)
    builder = _RUBY_BUILDERS.get(node_type)  # type: ignore[arg-type]
    if builder is None:
        raise UnsupportedNodeError(str(node_type))
    return builder(data)


# =============================================================================
# Public API
# =============================================================================


def from_dict(data: dict[str, Any]) -> Node:
    """Reconstruct a typed syntax tree from a parser's JSON dict.

    Markup nodes carry a ``value`` payload; everything else is read as a Ruby
    node with a ``body`` list.

    Args:
        data: Dict with a ``type`` discriminator

    Returns:
        Typed syntax-tree node (frozen dataclass)

    Raises:
        ValueError: If ``type`` is missing or a tag payload is malformed
        UnsupportedNodeError: If ``type`` names no known node kind

    """
    node_type = data.get("type")
    if node_type is None:
        msg = "Missing 'type' field in syntax tree node"
        raise ValueError(msg)
    if node_type in _HAML_BUILDERS:
        return _haml_from_dict(data)
    return _ruby_from_dict(data)


def to_dict(node: Node) -> dict[str, Any]:
    """Convert a typed node back to the parser's JSON shape.

    ``from_dict(to_dict(node)) == node`` for every node.

    """
    result = _to_dict(node)
    if node.line is not None:
        result["line"] = node.line
    return result


def _to_dict(node: Node) -> dict[str, Any]:
    match node:
        case Root(children=children):
            return {"type": "root", "value": {}, "children": [to_dict(c) for c in children]}
        case Tag(value=value, children=children):
            return {
                "type": "tag",
                "value": {
                    "name": value.name,
                    "attributes": dict(value.attributes),
                    "self_closing": value.self_closing,
                    "nuke_outer_whitespace": value.nuke_outer_whitespace,
                    "nuke_inner_whitespace": value.nuke_inner_whitespace,
                    "value": value.value,
                    "parse": value.parse,
                    "dynamic_attributes": {
                        "old": value.dynamic_attributes.old,
                        "new": value.dynamic_attributes.new,
                    },
                    "object_ref": value.object_ref,
                },
                "children": [to_dict(c) for c in children],
            }
        case Comment(value=value, children=children):
            return {
                "type": "comment",
                "value": {
                    "revealed": value.revealed,
                    "conditional": value.conditional,
                    "text": value.text,
                },
                "children": [to_dict(c) for c in children],
            }
        case Doctype(value=value):
            return {
                "type": "doctype",
                "value": {
                    "type": value.type,
                    "version": value.version,
                    "encoding": value.encoding,
                },
                "children": [],
            }
        case HamlComment(value=value, children=children):
            return {
                "type": "haml_comment",
                "value": {"text": value.text},
                "children": [to_dict(c) for c in children],
            }
        case Plain(value=value):
            return {"type": "plain", "value": {"text": value.text}, "children": []}
        case Script(value=value, children=children):
            return {
                "type": "script",
                "value": {"text": value.text},
                "children": [to_dict(c) for c in children],
            }
        case SilentScript(value=value, children=children):
            return {
                "type": "silent_script",
                "value": {"text": value.text, "keyword": value.keyword},
                "children": [to_dict(c) for c in children],
            }
        case Token(kind=kind, value=value):
            return {"type": kind, "body": value}
        case VarRef(token=token):
            return {"type": "var_ref", "body": [to_dict(token)]}
        case Label(text=label_text):
            return {"type": "@label", "body": label_text}
        case SymbolLiteral(name=name):
            return {"type": "symbol_literal", "body": [{"type": "symbol", "body": [to_dict(name)]}]}
        case DynaSymbol(segments=segments, quote=quote):
            return {"type": "dyna_symbol", "body": [to_dict(s) for s in segments], "quote": quote}
        case StringLiteral(segments=segments, quote=quote):
            return {
                "type": "string_literal",
                "body": [{"type": "string", "body": [to_dict(s) for s in segments]}],
                "quote": quote,
            }
        case StringEmbexpr(expression=expression):
            return {"type": "string_embexpr", "body": [to_dict(expression)]}
        case ArrayLiteral(elements=elements):
            body = None if elements is None else [to_dict(e) for e in elements]
            return {"type": "array", "body": [body]}
        case Binary(left=left, operator=operator, right=right):
            return {"type": "binary", "body": [to_dict(left), operator, to_dict(right)]}
        case AssocNew(key=key, value=value):
            return {"type": "assoc_new", "body": [to_dict(key), to_dict(value)]}
        case AssoclistFromArgs(assocs=assocs):
            return {"type": "assoclist_from_args", "body": [[to_dict(a) for a in assocs]]}
        case BareAssocHash(assocs=assocs):
            return {"type": "bare_assoc_hash", "body": [[to_dict(a) for a in assocs]]}
        case Hash(body=body):
            return {"type": "hash", "body": [None if body is None else to_dict(body)]}
        case _:
            raise UnsupportedNodeError(type(node).__name__)


def to_json(node: Node, *, indent: int | None = None) -> str:
    """Serialize a syntax tree to a JSON string (sorted keys)."""
    return json.dumps(to_dict(node), sort_keys=True, indent=indent)


def from_json(data: str) -> Node:
    """Deserialize a syntax tree from a JSON string.

    Raises:
        ValueError: If the JSON is not an object with a ``type``

    """
    raw = json.loads(data)
    if not isinstance(raw, dict):
        msg = f"Expected a JSON object, got {type(raw).__name__}"
        raise ValueError(msg)
    return from_dict(raw)
