"""Plain-text blocks for multi-line log messages.

Log output ends up in the mdBook console next to its own messages, so blocks
are kept narrow and free of markup.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable, Mapping, MutableSequence, Sequence
from textwrap import wrap
from typing import Union

from rich.console import Console
from rich.logging import RichHandler

DEFAULT_WRAP_WIDTH = 100
DEFAULT_LABEL_WIDTH = 20
DEFAULT_INDENT = "  "

LOG_LEVEL_ENV = "ROLLTABLES_LOG_LEVEL"

FieldMapping = Union[Mapping[str, object], Sequence[tuple[str, object]]]


def _coerce_items(fields: FieldMapping) -> list[tuple[str, object]]:
    if isinstance(fields, Mapping):
        return list(fields.items())
    return list(fields)


def _stringify(value: object) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "yes" if value else "no"
    if isinstance(value, str):
        return value.strip()
    if isinstance(value, (list, tuple, set)):
        return ", ".join(_stringify(item) for item in value)
    return str(value)


class LogBlockBuilder:
    def __init__(
        self,
        title: str,
        *,
        wrap_width: int = DEFAULT_WRAP_WIDTH,
        label_width: int = DEFAULT_LABEL_WIDTH,
        indent: str = DEFAULT_INDENT,
        pad_top: bool = True,
    ) -> None:
        self.title = title
        self.wrap_width = wrap_width
        self.label_width = label_width
        self.indent = indent
        self.lines: MutableSequence[str] = []
        if pad_top:
            self.lines.append("")
        self.lines.append(title)

    def add_fields(self, fields: FieldMapping | None) -> None:
        items = _coerce_items(fields or {})
        if not items:
            return

        label_width = min(max(len(str(key)) for key, _ in items), self.label_width)
        value_width = max(self.wrap_width - len(self.indent) - label_width - 2, 24)

        for key, value in items:
            wrapped = wrap(_stringify(value), width=value_width) or [""]
            self.lines.append(f"{self.indent}{str(key):<{label_width}}: {wrapped[0]}")
            for continuation in wrapped[1:]:
                self.lines.append(f"{self.indent}{'':<{label_width}}  {continuation}")

    def add_section(self, heading: str, items: Iterable[str], *, empty_label: str = "(none)") -> None:
        self.lines.append(f"{self.indent}{heading}:")
        materialized = [_stringify(item) for item in items if item is not None]
        if not materialized:
            self.lines.append(f"{self.indent * 2}{empty_label}")
            return
        bullet_width = max(self.wrap_width - len(self.indent) * 2 - 2, 24)
        for item in materialized:
            wrapped = wrap(item, width=bullet_width) or [""]
            self.lines.append(f"{self.indent * 2}- {wrapped[0]}")
            for continuation in wrapped[1:]:
                self.lines.append(f"{self.indent * 2}  {continuation}")

    def render(self) -> str:
        return "\n".join(self.lines).rstrip()


def render_fields_block(title: str, fields: FieldMapping, *, pad_top: bool = True) -> str:
    builder = LogBlockBuilder(title, pad_top=pad_top)
    builder.add_fields(fields)
    return builder.render()


def resolve_log_level(level: str | None, *, verbose: bool = False) -> int:
    if verbose:
        return logging.DEBUG
    name = (level or os.getenv(LOG_LEVEL_ENV) or "INFO").upper()
    resolved = logging.getLevelName(name)
    return resolved if isinstance(resolved, int) else logging.INFO


def configure_logging(level: str | None = None, *, verbose: bool = False, console: Console | None = None) -> None:
    """Send every log record to stderr; stdout belongs to the host."""
    handler = RichHandler(
        console=console or Console(stderr=True),
        show_time=False,
        show_path=verbose,
        markup=False,
        rich_tracebacks=verbose,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))

    root = logging.getLogger()
    for existing in list(root.handlers):
        root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(resolve_log_level(level, verbose=verbose))
