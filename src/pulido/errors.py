"""Exception classes for Pulido.

Provides standardized exceptions for error handling throughout Pulido.
Every failure aborts the whole format call; nothing here is recoverable
per node.
"""

from __future__ import annotations

from collections.abc import Sequence


class PulidoError(Exception):
    """Base exception for all Pulido errors.

    Subclass this for specific error categories.
    """

    pass


class ParseError(PulidoError):
    """Error reported by the external parser.

    The message is the parser's own error output, surfaced verbatim so the
    caller sees exactly what the parser said.
    """

    def __init__(
        self,
        message: str,
        command: Sequence[str] | None = None,
    ) -> None:
        """Initialize parse error.

        Args:
            message: Error text written by the parser (kept verbatim)
            command: Parser command line that failed (optional)
        """
        self.message = message
        self.command = tuple(command) if command is not None else None
        super().__init__(message)


class PrintError(PulidoError):
    """Error while building a document from a syntax tree."""

    pass


class UnsupportedNodeError(PrintError):
    """A syntax-tree node kind has no printer.

    Raised both when deserializing a tree containing an unknown ``type`` and
    when the print driver meets an object outside the node set.
    """

    def __init__(self, node_type: str) -> None:
        """Initialize unsupported node error.

        Args:
            node_type: The offending node kind (e.g., "filter")
        """
        self.node_type = node_type
        super().__init__(f"Unsupported node encountered: {node_type}")


class DocError(PulidoError):
    """A malformed document reached the layout algorithm."""

    pass
