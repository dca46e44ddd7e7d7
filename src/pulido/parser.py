"""External parser boundary.

Pulido does not parse source text itself. An external program reads the
source on stdin and answers with either:

- a JSON syntax tree on stdout and nothing on stderr (success), or
- a non-empty message on stderr (failure; stdout is ignored).

The default table runs the bundled ``haml.rb`` script with the system Ruby,
which needs the ``haml`` gem.

Example:
    >>> from pulido.parser import ExternalParser, parse
    >>> tree = parse("%p hello")
    >>> custom = ExternalParser(["bundle", "exec", "ruby", "my_parser.rb"])
    >>> tree = parse("%p hello", {"haml": custom})

Thread Safety:
ExternalParser instances are immutable; every call runs its own subprocess.

"""

from __future__ import annotations

import json
import subprocess
from collections.abc import Mapping, Sequence
from pathlib import Path

from pulido.config import FormatConfig, get_format_config
from pulido.errors import ParseError
from pulido.nodes import Node
from pulido.serialization import from_dict
from pulido.utils.logger import get_logger

logger = get_logger(__name__)

HAML_SCRIPT = Path(__file__).with_name("haml.rb")


class ExternalParser:
    """Runs a parser command and converts its JSON answer to typed nodes.

    Usage:
        >>> parser = ExternalParser(["ruby", "haml.rb"])
        >>> tree = parser.parse("%p hello")

    """

    __slots__ = ("_command", "_timeout")

    def __init__(self, command: Sequence[str], *, timeout: float | None = None) -> None:
        """Initialize parser.

        Args:
            command: Program and arguments; the source is written to its stdin
            timeout: Seconds to wait before giving up (None waits forever)
        """
        if not command:
            raise ValueError("Parser command must not be empty")
        self._command = tuple(command)
        self._timeout = timeout

    @property
    def command(self) -> tuple[str, ...]:
        return self._command

    def parse(self, text: str) -> Node:
        """Parse source text into a typed syntax tree.

        Args:
            text: Source text

        Returns:
            Root node of the syntax tree

        Raises:
            ParseError: If the command cannot run, reports an error on stderr,
                or prints something that is not a well-formed JSON syntax tree

        """
        logger.debug("Running parser %s on %d characters", self._command[0], len(text))
        try:
            child = subprocess.run(
                self._command,
                input=text.encode("utf-8"),
                capture_output=True,
                check=False,
                timeout=self._timeout,
            )
        except FileNotFoundError as exc:
            raise ParseError(
                f"Parser command not found: {self._command[0]}", self._command
            ) from exc
        except subprocess.TimeoutExpired as exc:
            raise ParseError(
                f"Parser timed out after {self._timeout} seconds", self._command
            ) from exc

        error = child.stderr.decode("utf-8", errors="replace")
        if error:
            logger.warning("Parser %s reported an error", self._command[0])
            raise ParseError(error, self._command)

        response = child.stdout.decode("utf-8")
        try:
            data = json.loads(response)
        except json.JSONDecodeError as exc:
            raise ParseError(f"Parser returned invalid JSON: {exc}", self._command) from exc
        if not isinstance(data, dict):
            raise ParseError(
                f"Parser returned {type(data).__name__}, expected a syntax tree object",
                self._command,
            )

        logger.debug("Parser %s returned %d bytes", self._command[0], len(child.stdout))
        try:
            return from_dict(data)
        except ValueError as exc:
            msg = f"Parser returned a malformed syntax tree: {exc}"
            raise ParseError(msg, self._command) from exc

    def __repr__(self) -> str:
        return f"ExternalParser({list(self._command)!r})"


DEFAULT_PARSERS: Mapping[str, ExternalParser] = {
    "haml": ExternalParser(("ruby", str(HAML_SCRIPT))),
}


def parse(
    text: str,
    parsers: Mapping[str, ExternalParser] | None = None,
    options: FormatConfig | None = None,
) -> Node:
    """Parse source text with the parser named by ``options.parser``.

    Args:
        text: Source text
        parsers: Parser table (defaults to DEFAULT_PARSERS)
        options: Format configuration (uses the active context config if None)

    Returns:
        Root node of the syntax tree

    Raises:
        ParseError: If the parser is unknown or fails

    """
    config = options or get_format_config()
    table = DEFAULT_PARSERS if parsers is None else parsers
    parser = table.get(config.parser)
    if parser is None:
        raise ParseError(f"Unknown parser: {config.parser}")
    return parser.parse(text)
