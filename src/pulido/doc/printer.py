"""Layout algorithm: lay a doc out against a maximum line width.

Walks the doc with an explicit command stack of ``(indentation, mode, doc)``
triples. Every group is printed flat if its flattened contents, followed by
the rest of the current line, fit in the remaining columns; otherwise it is
printed broken and its nested groups are decided again at their own
position. Fill decides each separator on its own.

The result is a pure function of (doc, config): no randomness, no
order-dependent tie breaking.

Thread Safety:
All layout state is local to each print_doc_to_string() call.

"""

from __future__ import annotations

from typing import TypeAlias

from dataclasses import dataclass
from enum import Enum

from pulido.config import FormatConfig, get_format_config
from pulido.doc.builders import (
    Align,
    BreakParent,
    Concat,
    Doc,
    Fill,
    Group,
    IfBreak,
    Indent,
    Line,
    MarkAsRoot,
)
from pulido.doc.utils import propagate_breaks
from pulido.errors import DocError
from pulido.utils.text import string_width, trim_trailing_whitespace


class Mode(Enum):
    BREAK = "break"
    FLAT = "flat"


@dataclass(frozen=True, slots=True)
class Indentation:
    """Indentation prefix emitted after each newline.

    Attributes:
        value: Characters written after the newline
        length: Display width of ``value``

    """

    value: str = ""
    length: int = 0

    def indent(self, config: FormatConfig) -> Indentation:
        if config.use_tabs:
            return Indentation(self.value + "\t", self.length + config.tab_width)
        return Indentation(self.value + " " * config.tab_width, self.length + config.tab_width)

    def align(self, width: int) -> Indentation:
        if width <= 0:
            return self
        return Indentation(self.value + " " * width, self.length + width)


ROOT_INDENTATION = Indentation()

Command: TypeAlias = tuple[Indentation, Mode, Doc]


def fits(
    next_command: Command,
    rest_commands: list[Command],
    width: int,
    broken_groups: frozenset[int] = frozenset(),
    *,
    must_be_flat: bool = False,
) -> bool:
    """Check whether ``next_command`` fits in ``width`` columns.

    Measures up to the first line break that would actually print. When the
    command itself runs out, measurement continues into ``rest_commands``
    (the content that follows on the same line), consumed from the top of
    the stack.

    Args:
        next_command: Command being tested, usually in flat mode
        rest_commands: Pending commands of the caller, top of stack last
        width: Remaining columns on the current line
        broken_groups: Ids of groups that must break (see propagate_breaks)
        must_be_flat: Fail as soon as a forced-broken group is met

    Returns:
        True if the content up to the next newline fits

    """
    rest_index = len(rest_commands)
    commands = [next_command]

    while width >= 0:
        if not commands:
            if rest_index == 0:
                return True
            rest_index -= 1
            commands.append(rest_commands[rest_index])
            continue

        indentation, mode, doc = commands.pop()

        if isinstance(doc, str):
            width -= string_width(doc)
            continue

        match doc:
            case Concat(parts=parts) | Fill(parts=parts):
                commands.extend((indentation, mode, part) for part in reversed(parts))
            case Indent(contents=contents) | Align(contents=contents) | MarkAsRoot(
                contents=contents
            ):
                commands.append((indentation, mode, contents))
            case Group(contents=contents):
                broken = doc.should_break or id(doc) in broken_groups
                if must_be_flat and broken:
                    return False
                commands.append((indentation, Mode.BREAK if broken else mode, contents))
            case IfBreak(break_contents=break_contents, flat_contents=flat_contents):
                chosen = break_contents if mode is Mode.BREAK else flat_contents
                commands.append((indentation, mode, chosen))
            case Line(hard=hard, soft=soft):
                if mode is Mode.BREAK or hard:
                    return True
                if not soft:
                    width -= 1
            case BreakParent():
                pass
            case _:
                raise DocError(f"Unexpected doc: {doc!r}")

    return False


def print_doc_to_string(doc: Doc, config: FormatConfig | None = None) -> str:
    """Render a doc to text.

    Args:
        doc: Document to lay out
        config: Format configuration (uses the active context config if None)

    Returns:
        Laid out text

    Raises:
        DocError: If something other than a doc primitive is found

    Example:
        >>> from pulido.doc.builders import concat, group, line
        >>> print_doc_to_string(group(concat(["a", line, "b"])))
        'a b'

    """
    if config is None:
        config = get_format_config()

    broken_groups = propagate_breaks(doc)
    width = config.print_width
    position = 0
    out: list[str] = []
    commands: list[Command] = [(ROOT_INDENTATION, Mode.BREAK, doc)]

    while commands:
        indentation, mode, current = commands.pop()

        if isinstance(current, str):
            out.append(current)
            position += string_width(current)
            continue

        match current:
            case Concat(parts=parts):
                commands.extend((indentation, mode, part) for part in reversed(parts))

            case Indent(contents=contents):
                commands.append((indentation.indent(config), mode, contents))

            case Align(width=columns, contents=contents):
                commands.append((indentation.align(columns), mode, contents))

            case MarkAsRoot(contents=contents):
                commands.append((ROOT_INDENTATION, mode, contents))

            case Group(contents=contents):
                broken = current.should_break or id(current) in broken_groups
                if mode is Mode.FLAT and not broken:
                    commands.append((indentation, Mode.FLAT, contents))
                    continue
                flat = (indentation, Mode.FLAT, contents)
                if not broken and fits(flat, commands, width - position, broken_groups):
                    commands.append(flat)
                else:
                    commands.append((indentation, Mode.BREAK, contents))

            case Fill(parts=parts):
                commands.extend(
                    _layout_fill(indentation, mode, parts, width - position, broken_groups)
                )

            case IfBreak(break_contents=break_contents, flat_contents=flat_contents):
                chosen = break_contents if mode is Mode.BREAK else flat_contents
                commands.append((indentation, mode, chosen))

            case Line(hard=hard, soft=soft):
                if mode is Mode.FLAT and not hard:
                    if not soft:
                        out.append(" ")
                        position += 1
                    continue
                trim_trailing_whitespace(out)
                out.append("\n" + indentation.value)
                position = indentation.length

            case BreakParent():
                pass

            case _:
                raise DocError(f"Unexpected doc: {current!r}")

    return "".join(out)


def _layout_fill(
    indentation: Indentation,
    mode: Mode,
    parts: tuple[Doc, ...],
    remaining: int,
    broken_groups: frozenset[int],
) -> list[Command]:
    """Decide the first content/separator pair of a fill.

    Returns the commands to push, in stack order (last is printed first).
    The rest of the fill is pushed back as a shorter Fill and decided when
    it reaches the top of the stack, at its own position.
    """
    if not parts:
        return []

    content = parts[0]
    content_flat = (indentation, Mode.FLAT, content)
    content_break = (indentation, Mode.BREAK, content)
    content_fits = fits(content_flat, [], remaining, broken_groups, must_be_flat=True)

    if len(parts) == 1:
        return [content_flat if content_fits else content_break]

    separator = parts[1]
    separator_flat = (indentation, Mode.FLAT, separator)
    separator_break = (indentation, Mode.BREAK, separator)

    if len(parts) == 2:
        if content_fits:
            return [separator_flat, content_flat]
        return [separator_break, content_break]

    rest = (indentation, mode, Fill(parts[2:]))
    pair_flat = (indentation, Mode.FLAT, Concat((content, separator, parts[2])))
    pair_fits = fits(pair_flat, [], remaining, broken_groups, must_be_flat=True)

    if pair_fits:
        return [rest, separator_flat, content_flat]
    if content_fits:
        return [rest, separator_break, content_flat]
    return [rest, separator_break, content_break]
