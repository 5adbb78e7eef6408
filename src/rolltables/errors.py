"""Exception hierarchy shared by the preprocessor and the CLI."""

from __future__ import annotations


class RollTablesError(Exception):
    """Base class for every error raised by rolltables."""


class ProtocolError(RollTablesError):
    """The host payload is malformed or comes from an unsupported mdBook version."""


class ConfigError(RollTablesError):
    """The ``[preprocessor.rolltables]`` options could not be resolved."""


class TableStructureError(RollTablesError):
    """A table carries the roll marker but cannot be filled in.

    Never escapes the transformer: the table is passed through unchanged.
    """
