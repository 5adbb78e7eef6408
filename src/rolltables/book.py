"""Walking the mdBook book structure.

The book arrives as the JSON mdBook hands to preprocessors. It is kept as
plain dictionaries so keys this module does not know about (and mdBook
internals such as ``__non_exhaustive``) survive the round trip untouched.
Only chapter ``content`` strings are ever replaced.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, MutableMapping
from dataclasses import dataclass
from typing import Any, Protocol

from .errors import ProtocolError
from .markdown_tables import MarkdownTable, rewrite_tables

LOGGER = logging.getLogger(__name__)

# mdBook 0.4 calls the top-level list "sections", 0.5 renamed it to "items".
_ITEM_LIST_KEYS = ("items", "sections")


@dataclass(frozen=True, slots=True)
class TableLocation:
    """Where a table lives, for diagnostics."""

    line: int
    chapter: str | None = None
    path: str | None = None

    def __str__(self) -> str:
        source = self.path or "<input>"
        if self.chapter:
            return f"chapter '{self.chapter}' ({source}:{self.line})"
        return f"{source}:{self.line}"


class TableVisitor(Protocol):
    def visit(self, table: MarkdownTable, location: TableLocation) -> MarkdownTable | None:
        """Return a same-shaped replacement for ``table`` or ``None`` to keep it."""
        ...


def rewrite_content(
    content: str,
    visitor: TableVisitor,
    *,
    chapter: str | None = None,
    path: str | None = None,
) -> str:
    """Offer every table of a markdown document to ``visitor``."""

    def _visit(table: MarkdownTable) -> MarkdownTable | None:
        location = TableLocation(line=table.line_number, chapter=chapter, path=path)
        return visitor.visit(table, location)

    return rewrite_tables(content, _visit)


def book_items(book: MutableMapping[str, Any]) -> list[Any]:
    for key in _ITEM_LIST_KEYS:
        items = book.get(key)
        if isinstance(items, list):
            return items
    raise ProtocolError("Book has neither 'items' nor 'sections'")


def iter_chapters(items: list[Any]) -> Iterator[MutableMapping[str, Any]]:
    """Yield every chapter dictionary, depth first, in book order.

    Separators (``"Separator"``) and part titles (``{"PartTitle": ...}``)
    are skipped.
    """
    for item in items:
        if not isinstance(item, MutableMapping) or "Chapter" not in item:
            continue
        chapter = item["Chapter"]
        if not isinstance(chapter, MutableMapping):
            raise ProtocolError(f"Malformed chapter entry: {chapter!r}")
        yield chapter
        sub_items = chapter.get("sub_items") or []
        if not isinstance(sub_items, list):
            raise ProtocolError(f"Chapter {chapter.get('name')!r} has malformed sub_items")
        yield from iter_chapters(sub_items)


def walk_book(book: MutableMapping[str, Any], visitor: TableVisitor) -> int:
    """Rewrite the tables of every chapter in place.

    Returns:
        Number of chapters whose content changed.
    """
    changed = 0
    for chapter in iter_chapters(book_items(book)):
        content = chapter.get("content")
        if not isinstance(content, str):
            LOGGER.debug("Skipping chapter %r without text content", chapter.get("name"))
            continue
        path = chapter.get("source_path") or chapter.get("path")
        updated = rewrite_content(content, visitor, chapter=chapter.get("name"), path=path)
        if updated != content:
            chapter["content"] = updated
            changed += 1
    return changed
