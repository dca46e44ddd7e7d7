"""Property-based tests for layout and printer invariants using Hypothesis.

These tests verify properties that should hold for any input:
1. Layout is deterministic and never leaves trailing whitespace before a newline
2. Groups break all-or-nothing, fill wraps within the width
3. Hash key styles converge under either label setting
4. Printer rules (doctype table, default div, case alternation) hold for any content
5. Printed tag and hash trees respect the width and reformat unchanged
"""

import json
import string
import sys

from hypothesis import given, settings
from hypothesis import strategies as st

from pulido import FormatConfig, format_haml, format_tree, from_dict, to_dict
from pulido.doc import (
    Doc,
    align,
    concat,
    fill,
    group,
    hardline,
    if_break,
    indent,
    join,
    line,
    mark_as_root,
    print_doc_to_string,
    softline,
)
from pulido.parser import ExternalParser
from pulido.printers.haml import DOCTYPES

words = st.text(alphabet=string.ascii_lowercase, min_size=1, max_size=8)
identifiers = st.from_regex(r"[a-z_][a-z0-9_]{0,10}", fullmatch=True)
class_names = st.from_regex(r"[a-z][a-z0-9-]{0,8}", fullmatch=True)
widths = st.integers(min_value=8, max_value=60)

leaf_docs = st.one_of(
    st.text(alphabet=string.ascii_lowercase, max_size=5),
    st.sampled_from([line, softline, hardline]),
)
docs = st.recursive(
    leaf_docs,
    lambda children: st.one_of(
        st.lists(children, max_size=5).map(concat),
        children.map(group),
        children.map(indent),
        children.map(mark_as_root),
        st.tuples(st.integers(min_value=0, max_value=4), children).map(lambda t: align(*t)),
        st.lists(children, max_size=5).map(fill),
        st.tuples(children, children).map(lambda t: if_break(*t)),
    ),
    max_leaves=30,
)

# Every group separates its children with a line, so only words are unbreakable
breakable_docs = st.recursive(
    words,
    lambda children: st.one_of(
        st.lists(children, min_size=1, max_size=5).map(lambda parts: group(join(line, parts))),
        children.map(indent),
    ),
    max_leaves=25,
)


def render(doc: Doc, width: int) -> str:
    return print_doc_to_string(doc, FormatConfig(print_width=width))


class TestLayoutProperties:
    """Invariants of print_doc_to_string."""

    @given(doc=docs, width=widths)
    @settings(max_examples=200)
    def test_deterministic(self, doc: Doc, width: int) -> None:
        """The same doc and width always give the same text."""
        assert render(doc, width) == render(doc, width)

    @given(doc=docs, width=widths)
    @settings(max_examples=200)
    def test_no_trailing_whitespace_before_newline(self, doc: Doc, width: int) -> None:
        """No emitted line ends in spaces or tabs."""
        lines = render(doc, width).split("\n")
        assert all(not text.endswith((" ", "\t")) for text in lines[:-1])

    @given(items=st.lists(words, min_size=1, max_size=12), width=widths)
    def test_group_is_atomic(self, items: list[str], width: int) -> None:
        """A group prints entirely flat or entirely broken."""
        result = render(group(join(line, items)), width)
        flat = " ".join(items)
        if len(flat) <= width:
            assert result == flat
        else:
            assert result == "\n".join(items)

    @given(doc=breakable_docs, width=widths)
    @settings(max_examples=200)
    def test_width_respected(self, doc: Doc, width: int) -> None:
        """A line only overflows when it holds a single unbreakable word."""
        for text in render(doc, width).split("\n"):
            assert len(text) <= width or " " not in text.strip()

    @given(items=st.lists(words, min_size=1, max_size=30), width=widths)
    def test_fill_respects_width(self, items: list[str], width: int) -> None:
        """Fill never overflows when every word fits on a line by itself."""
        result = render(fill(list(join(line, items).parts)), width)
        assert all(len(text) <= width for text in result.split("\n"))
        assert result.split() == items

    @given(items=st.lists(words, min_size=1, max_size=30), width=widths)
    def test_fill_breaks_only_when_needed(self, items: list[str], width: int) -> None:
        """Each wrapped line could not have taken the next word."""
        lines = render(fill(list(join(line, items).parts)), width).split("\n")
        for current, following in zip(lines, lines[1:], strict=False):
            next_word = following.split(" ")[0]
            assert len(current) + 1 + len(next_word) > width


# =============================================================================
# Printer properties
# =============================================================================


def label(name: str) -> dict:
    return {"type": "@label", "body": f"{name}:"}


def sym(name: str) -> dict:
    return {
        "type": "symbol_literal",
        "body": [{"type": "symbol", "body": [{"type": "@ident", "body": name}]}],
    }


def hash_of(keys: list[dict]) -> dict:
    assocs = [
        {"type": "assoc_new", "body": [key, {"type": "@int", "body": str(n)}]}
        for n, key in enumerate(keys)
    ]
    return {"type": "hash", "body": [{"type": "assoclist_from_args", "body": [assocs]}]}


def root(*children) -> dict:  # type: ignore[no-untyped-def]
    return {"type": "root", "value": {}, "children": list(children)}


class TestPrinterProperties:
    """Invariants of the node printers."""

    @given(
        names=st.lists(identifiers, min_size=1, max_size=6),
        prefer=st.booleans(),
        width=widths,
    )
    def test_label_normalization(self, names: list[str], prefer: bool, width: int) -> None:
        """foo: and :foo => keys format identically."""
        config = FormatConfig(print_width=width, prefer_hash_labels=prefer)
        labels = format_tree(from_dict(hash_of([label(n) for n in names])), config=config)
        symbols = format_tree(from_dict(hash_of([sym(n) for n in names])), config=config)
        assert labels == symbols
        marker = f"{names[0]}:" if prefer else f":{names[0]} =>"
        assert marker in labels

    @given(
        names=st.lists(identifiers, min_size=1, max_size=6),
        trailing=st.booleans(),
        width=widths,
    )
    def test_reserialized_tree_formats_identically(
        self, names: list[str], trailing: bool, width: int
    ) -> None:
        """Formatting survives a to_dict/from_dict round trip unchanged."""
        config = FormatConfig(print_width=width, add_trailing_commas=trailing)
        tree = from_dict(hash_of([sym(n) for n in names]))
        assert format_tree(from_dict(to_dict(tree)), config=config) == format_tree(
            tree, config=config
        )

    @given(
        entry=st.sampled_from(sorted(DOCTYPES.items())),
        encoding=st.sampled_from([None, "utf-8"]),
    )
    def test_doctype_table(self, entry: tuple[str, str], encoding: str | None) -> None:
        key, name = entry
        node = {"type": "doctype", "value": {"type": key, "encoding": encoding}}
        expected = f"!!! {name} {encoding}\n" if encoding else f"!!! {name}\n"
        assert format_tree(from_dict(root(node))) == expected

    @given(classes=st.lists(class_names, min_size=1, max_size=4))
    def test_default_div_uses_shorthand(self, classes: list[str]) -> None:
        """A div with classes never prints %div."""
        value = {"name": "div", "attributes": {"class": " ".join(classes)}}
        node = {"type": "tag", "value": value}
        assert format_tree(from_dict(root(node))) == "." + ".".join(classes) + "\n"

    @given(bodies=st.lists(words, min_size=1, max_size=6))
    def test_case_alternation(self, bodies: list[str]) -> None:
        """Clauses stay at the case's column, bodies are one level deeper."""
        children = []
        for body in bodies:
            children.append(
                {"type": "silent_script", "value": {"text": " when x", "keyword": "when"}}
            )
            children.append({"type": "plain", "value": {"text": body}})
        node = {
            "type": "silent_script",
            "value": {"text": " case y", "keyword": "case"},
            "children": children,
        }
        lines = format_tree(from_dict(root(node))).rstrip("\n").split("\n")
        assert lines[0] == "- case y"
        for index, text in enumerate(lines[1:]):
            if index % 2 == 0:
                assert text == "- when x"
            else:
                assert text == "  " + bodies[index // 2]

    @given(
        keys=st.lists(words, min_size=1, max_size=6, unique=True).filter(
            lambda ks: not {"class", "id"} & set(ks)
        ),
        width=st.integers(min_value=20, max_value=60),
    )
    def test_attribute_hash_wraps_aligned(self, keys: list[str], width: int) -> None:
        """Wrapped attribute lines start one column past the header."""
        attributes = {key: "v" for key in keys}
        node = {"type": "tag", "value": {"name": "p", "attributes": attributes}}
        lines = format_tree(from_dict(root(node)), config=FormatConfig(print_width=width))
        lines = lines.rstrip("\n").split("\n")
        assert lines[0].startswith('%p{"')
        for text in lines[1:]:
            assert text.startswith('   "')
        assert " ".join(text.strip() for text in lines) == (
            "%p{" + ", ".join(f'"{key}" => "v"' for key in keys) + "}"
        )


# =============================================================================
# Width and reformatting of printed trees
# =============================================================================

attribute_keys = words.filter(lambda key: key not in {"class", "id"})


def tag_of(name: str, classes: list[str], attributes: dict, children: list) -> dict:
    if classes:
        attributes = {"class": " ".join(classes), **attributes}
    return {
        "type": "tag",
        "value": {"name": name, "attributes": attributes},
        "children": children,
    }


markup_leaves = st.one_of(
    st.lists(words, min_size=1, max_size=6).map(
        lambda ws: {"type": "plain", "value": {"text": " ".join(ws)}}
    ),
    identifiers.map(lambda name: {"type": "script", "value": {"text": f" {name}"}}),
    st.builds(
        tag_of,
        st.sampled_from(["div", "p", "a", "span", "li"]),
        st.lists(class_names, max_size=2),
        st.dictionaries(attribute_keys, words, max_size=5),
        st.just([]),
    ),
)
markup_nodes = st.recursive(
    markup_leaves,
    lambda children: st.builds(
        tag_of,
        st.sampled_from(["div", "section", "ul", "p"]),
        st.lists(class_names, max_size=2),
        st.dictionaries(attribute_keys, words, max_size=5),
        st.lists(children, min_size=1, max_size=3),
    ),
    max_leaves=10,
)

# A block comment kept on line 1, where re-parsing leaves its line number valid
block_comments = st.lists(
    st.tuples(st.integers(min_value=0, max_value=2), words), min_size=1, max_size=4
).map(
    lambda rows: {
        "type": "haml_comment",
        "value": {"text": "\n".join("  " * depth + word for depth, word in rows)},
        "line": 1,
    }
)


def hash_from_pairs(pairs: list[tuple[str, dict]]) -> dict:
    if not pairs:
        return {"type": "hash", "body": [None]}
    assocs = [{"type": "assoc_new", "body": [label(key), value]} for key, value in pairs]
    return {"type": "hash", "body": [{"type": "assoclist_from_args", "body": [assocs]}]}


int_values = st.integers(min_value=0, max_value=10**6).map(
    lambda n: {"type": "@int", "body": str(n)}
)
hash_values = st.recursive(
    int_values,
    lambda children: st.lists(st.tuples(identifiers, children), max_size=4).map(hash_from_pairs),
    max_leaves=12,
)
hashes = st.lists(st.tuples(identifiers, hash_values), min_size=1, max_size=5).map(
    hash_from_pairs
)


def assert_attribute_lines_fit(output: str, width: int) -> None:
    """Lines past the width hold at most one attribute pair.

    The closing brace and the comma before a break are not measured.
    """
    for text in output.rstrip("\n").split("\n"):
        measured = text.removesuffix("}").removesuffix(",")
        assert len(measured) <= width or measured.count(" => ") <= 1


def stand_in_parser(tree: dict) -> ExternalParser:
    """A parser command that answers with ``tree`` whatever it reads."""
    script = f"import sys\nsys.stdin.read()\nsys.stdout.write({json.dumps(tree)!r})\n"
    return ExternalParser([sys.executable, "-c", script])


class TestPrintedTreeProperties:
    """Width and reformatting of whole printed trees."""

    @given(children=st.lists(markup_nodes, min_size=1, max_size=4), width=widths)
    @settings(max_examples=150)
    def test_markup_width(self, children: list[dict], width: int) -> None:
        output = format_tree(from_dict(root(*children)), config=FormatConfig(print_width=width))
        assert_attribute_lines_fit(output, width)

    @given(tree=hashes, width=widths, trailing=st.booleans())
    @settings(max_examples=150)
    def test_hash_width(self, tree: dict, width: int, trailing: bool) -> None:
        """Overflowing lines never hold a flat pair list or a flat hash."""
        config = FormatConfig(print_width=width, add_trailing_commas=trailing)
        for text in format_tree(from_dict(tree), config=config).split("\n"):
            assert len(text) <= width or (", " not in text and "{ " not in text)

    @given(
        comment=block_comments,
        children=st.lists(markup_nodes, max_size=3),
        width=widths,
    )
    @settings(max_examples=20, deadline=None)
    def test_reformat_is_unchanged(self, comment: dict, children: list[dict], width: int) -> None:
        """Formatting the output again, through a parser, changes nothing."""
        tree = root(comment, *children)
        config = FormatConfig(print_width=width)
        once = format_tree(from_dict(tree), config=config, original_text="-#\n")
        twice = format_haml(once, config=config, parser=stand_in_parser(tree))
        assert twice == once
        assert once.startswith("-#\n")
        assert_attribute_lines_fit(twice, width)
