"""ContextVar-based format configuration for Pulido.

Provides thread-local configuration using Python's ContextVars (PEP 567).
Config is set once per Formatter call, read by the printers and the layout
algorithm in that context.

Thread Safety:
    ContextVars are thread-local by design. Each thread has independent storage,
    so no locks are needed and race conditions are impossible.

Usage:
    # In Formatter
    fmt = Formatter(config=FormatConfig(print_width=100))
    text = fmt("%p hello")  # Sets config internally via ContextVar

    # Direct usage (advanced)
    from pulido.config import set_format_config, reset_format_config, FormatConfig

    set_format_config(FormatConfig(prefer_hash_labels=False))
    try:
        text = format_tree(tree)
    finally:
        reset_format_config()

    # Or use the context manager
    with format_config_context(FormatConfig(add_trailing_commas=True)):
        text = format_tree(tree)

"""

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field

# Host-style option names accepted by FormatConfig.from_dict
_OPTION_ALIASES: dict[str, str] = {
    "printWidth": "print_width",
    "tabWidth": "tab_width",
    "useTabs": "use_tabs",
    "preferHashLabels": "prefer_hash_labels",
    "addTrailingCommas": "add_trailing_commas",
}


@dataclass(frozen=True, slots=True)
class FormatConfig:
    """Immutable format configuration.

    Frozen dataclass ensures thread-safety (immutable after creation).

    Note: the original source text is intentionally excluded. It is per-call
    state, carried by PrintOptions.

    Attributes:
        print_width: Maximum line width the layout tries to respect
        tab_width: Columns per indentation level
        use_tabs: Indent with a tab character instead of spaces
        prefer_hash_labels: Render symbol keys as ``key:`` instead of ``:key =>``
        add_trailing_commas: Add a trailing comma to broken hashes and arrays
        parser: Name of the external parser to run on source text

    """

    print_width: int = 80
    tab_width: int = 2
    use_tabs: bool = False
    prefer_hash_labels: bool = True
    add_trailing_commas: bool = False
    parser: str = "haml"

    @classmethod
    def from_dict(cls, config_dict: dict) -> "FormatConfig":
        """Create FormatConfig from dictionary.

        Accepts both the snake_case field names and the camelCase option names
        used by editor integrations (``printWidth``, ``preferHashLabels``...).
        Unknown keys are silently ignored.

        Args:
            config_dict: Dictionary with config values.

        Returns:
            New FormatConfig instance with values from dict.

        Example:
            >>> config = FormatConfig.from_dict({
            ...     "printWidth": 100,
            ...     "add_trailing_commas": True,
            ...     "unknown_key": "ignored",
            ... })
            >>> config.print_width
            100

        """
        valid_fields = {f.name for f in cls.__dataclass_fields__.values()}
        filtered = {}
        for key, value in config_dict.items():
            name = _OPTION_ALIASES.get(key, key)
            if name in valid_fields:
                filtered[name] = value
        return cls(**filtered)


@dataclass(frozen=True, slots=True)
class PrintOptions:
    """Options handed to every node printer.

    Bundles the active FormatConfig with the original source text. Only the
    haml_comment printer reads ``original_text``: the parser drops the
    inline-vs-block authoring choice, so it is recovered from the source line.

    Attributes:
        config: Active format configuration
        original_text: Source text the tree was parsed from ("" if unknown)

    """

    config: FormatConfig = field(default_factory=FormatConfig)
    original_text: str = ""

    def source_line(self, lineno: int | None) -> str | None:
        """Return 1-based source line ``lineno`` or None if unavailable."""
        if lineno is None or lineno < 1:
            return None
        lines = self.original_text.split("\n")
        if lineno > len(lines):
            return None
        return lines[lineno - 1]


# Module-level default config (reused, never recreated)
_DEFAULT_CONFIG: FormatConfig = FormatConfig()

# Thread-local configuration via ContextVar
_format_config: ContextVar[FormatConfig] = ContextVar(
    "format_config",
    default=_DEFAULT_CONFIG,
)


def get_format_config() -> FormatConfig:
    """Get current format configuration (thread-local).

    Returns:
        The active FormatConfig for this thread/context.

    """
    return _format_config.get()


def set_format_config(config: FormatConfig) -> None:
    """Set format configuration for current context.

    Args:
        config: FormatConfig instance to use for this context.

    Thread Safety:
        Only affects the current thread's context. Other threads are unaffected.

    """
    _format_config.set(config)


def reset_format_config() -> None:
    """Reset to default configuration.

    Reuses the module-level _DEFAULT_CONFIG singleton, avoiding allocation.

    """
    _format_config.set(_DEFAULT_CONFIG)


@contextmanager
def format_config_context(config: FormatConfig) -> Iterator[None]:
    """Context manager for temporary config changes.

    Useful for tests and isolated format operations.

    Args:
        config: FormatConfig to use within the context.

    Yields:
        None

    Example:
        >>> with format_config_context(FormatConfig(print_width=40)):
        ...     text = format_tree(tree)
        ...     # print_width is 40 here
        >>> # Automatically reset to previous config

    Thread Safety:
        Only affects the current thread's context. Properly restores previous
        config even if an exception is raised.

    """
    previous = _format_config.get()
    _format_config.set(config)
    try:
        yield
    finally:
        _format_config.set(previous)


__all__ = [
    "FormatConfig",
    "PrintOptions",
    "get_format_config",
    "set_format_config",
    "reset_format_config",
    "format_config_context",
]
