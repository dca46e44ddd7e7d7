"""Tests for the external parser boundary.

A short Python program run with the current interpreter stands in for the
Ruby parser, so these tests need neither Ruby nor the haml gem.
"""

import logging
import sys

import pytest

from pulido import Formatter, format_haml
from pulido.config import FormatConfig, format_config_context
from pulido.errors import ParseError, PulidoError
from pulido.nodes import Plain, Root
from pulido.parser import DEFAULT_PARSERS, HAML_SCRIPT, ExternalParser, parse

# Every non-blank stdin line becomes a plain node
PLAIN_LINES = """
import json, sys
lines = sys.stdin.buffer.read().decode("utf-8").split("\\n")
children = [
    {"type": "plain", "value": {"text": text.strip()}, "children": [], "line": n + 1}
    for n, text in enumerate(lines)
    if text.strip()
]
print(json.dumps({"type": "root", "value": {}, "children": children}))
"""

# Answers with a single silent comment whatever the input
HAML_COMMENT = """
import json, sys
sys.stdin.read()
comment = {"type": "haml_comment", "value": {"text": "a\\n  b"}, "children": [], "line": 1}
print(json.dumps({"type": "root", "value": {}, "children": [comment]}))
"""

# The tree the bundled haml.rb prints for `%a{href: "/x"} Go`
TAG = """
import json, sys
sys.stdin.read()
tag = {
    "type": "tag",
    "line": 1,
    "value": {
        "name": "a",
        "attributes": {"href": "/x"},
        "object_ref": "nil",
        "nuke_outer_whitespace": False,
        "nuke_inner_whitespace": False,
        "self_closing": False,
        "value": "Go",
        "parse": False,
        "preserve_script": False,
        "preserve_tag": False,
        "escape_html": False,
        "dynamic_attributes": {"old": None, "new": None},
    },
    "children": [],
}
print(json.dumps({"type": "root", "line": 0, "value": None, "children": [tag]}))
"""

# A Ruby Struct written by JSON as its inspect string
STRUCT_AS_STRING = """
import json, sys
sys.stdin.read()
value = {"name": "p", "dynamic_attributes": "#<struct Haml::Parser::DynamicAttributes>"}
tag = {"type": "tag", "value": value, "children": []}
print(json.dumps({"type": "root", "value": {}, "children": [tag]}))
"""

FAILS = """
import sys
sys.stdin.read()
print("{}")
sys.stderr.write("Illegal nesting: nesting within plain text is illegal.")
"""


def fake(script: str, **kwargs) -> ExternalParser:  # type: ignore[no-untyped-def]
    return ExternalParser([sys.executable, "-c", script], **kwargs)


class TestExternalParser:
    """Running a parser command."""

    def test_success(self) -> None:
        tree = fake(PLAIN_LINES).parse("a\n  b\n")
        assert isinstance(tree, Root)
        assert [child.value.text for child in tree.children] == ["a", "b"]
        assert tree.children[1] == Plain(value=tree.children[1].value, line=2)

    def test_source_is_sent_as_utf8(self) -> None:
        tree = fake(PLAIN_LINES).parse("héllo 世界")
        assert tree.children[0].value.text == "héllo 世界"

    def test_stderr_is_surfaced_verbatim(self) -> None:
        """Any stderr output fails the parse, stdout is ignored."""
        with pytest.raises(ParseError) as exc_info:
            fake(FAILS).parse("%p\n  text\n    more")
        assert str(exc_info.value) == "Illegal nesting: nesting within plain text is illegal."
        assert exc_info.value.command == (sys.executable, "-c", FAILS)

    def test_stderr_failure_is_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING, logger="pulido"), pytest.raises(ParseError):
            fake(FAILS).parse("x")
        assert any("reported an error" in record.message for record in caplog.records)

    def test_invalid_json(self) -> None:
        with pytest.raises(ParseError, match="invalid JSON"):
            fake("print('not json')").parse("x")

    def test_non_object_json(self) -> None:
        with pytest.raises(ParseError, match="expected a syntax tree object"):
            fake("print('[1, 2]')").parse("x")

    def test_gem_tag_shape(self) -> None:
        """Tags as the haml gem dumps them are read and printed."""
        assert format_haml('%a{href: "/x"} Go', parser=fake(TAG)) == '%a{"href" => "/x"} Go\n'

    def test_malformed_tree(self) -> None:
        """A payload of the wrong shape is a parse failure, not a crash."""
        with pytest.raises(ParseError, match="malformed syntax tree.*dynamic_attributes"):
            fake(STRUCT_AS_STRING).parse("%p")

    def test_missing_command(self) -> None:
        parser = ExternalParser(["pulido-no-such-parser-command"])
        with pytest.raises(ParseError, match="Parser command not found"):
            parser.parse("x")

    def test_timeout(self) -> None:
        parser = fake("import time; time.sleep(10)", timeout=0.2)
        with pytest.raises(ParseError, match="timed out"):
            parser.parse("x")

    def test_empty_command(self) -> None:
        with pytest.raises(ValueError, match="must not be empty"):
            ExternalParser([])

    def test_parse_error_is_pulido_error(self) -> None:
        with pytest.raises(PulidoError):
            fake(FAILS).parse("x")

    def test_repr(self) -> None:
        assert repr(ExternalParser(["ruby", "haml.rb"])) == "ExternalParser(['ruby', 'haml.rb'])"


class TestParseFunction:
    """parse() parser selection."""

    def test_uses_named_parser(self) -> None:
        tree = parse("a", {"haml": fake(PLAIN_LINES)})
        assert isinstance(tree, Root)

    def test_parser_from_options(self) -> None:
        tree = parse("a", {"lines": fake(PLAIN_LINES)}, FormatConfig(parser="lines"))
        assert tree.children[0].value.text == "a"

    def test_parser_from_context(self) -> None:
        with format_config_context(FormatConfig(parser="lines")):
            tree = parse("a", {"lines": fake(PLAIN_LINES)})
        assert isinstance(tree, Root)

    def test_unknown_parser(self) -> None:
        with pytest.raises(ParseError, match="Unknown parser: slim"):
            parse("a", {}, FormatConfig(parser="slim"))

    def test_default_table(self) -> None:
        assert DEFAULT_PARSERS["haml"].command == ("ruby", str(HAML_SCRIPT))


class TestFormatHaml:
    """Parsing and printing together."""

    def test_format_with_parser(self) -> None:
        assert format_haml("  a\n\n b", parser=fake(PLAIN_LINES)) == "a\nb\n"

    def test_source_reaches_printers(self) -> None:
        """The block form of -# comments is read off the source text."""
        source = "-#\n  a\n    b\n"
        assert format_haml(source, parser=fake(HAML_COMMENT)) == source

    def test_error_aborts(self) -> None:
        with pytest.raises(ParseError, match="Illegal nesting"):
            format_haml("x", parser=fake(FAILS))

    def test_formatter(self) -> None:
        fmt = Formatter(parser=fake(PLAIN_LINES))
        assert fmt("a") == "a\n"
        assert fmt.format_many(["a", "b\nc"]) == ["a\n", "b\nc\n"]

    def test_formatter_uses_named_parser(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setitem(DEFAULT_PARSERS, "lines", fake(PLAIN_LINES))
        fmt = Formatter(config=FormatConfig(parser="lines"))
        assert fmt("x") == "x\n"

    def test_idempotent(self) -> None:
        """Formatting formatted output changes nothing."""
        parser = fake(PLAIN_LINES)
        once = format_haml("  a\n\n\tb  \n c", parser=parser)
        assert format_haml(once, parser=parser) == once
