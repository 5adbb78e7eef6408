from __future__ import annotations

import logging
from collections.abc import MutableMapping
from typing import Any

from .book import walk_book, rewrite_content
from .config import PREPROCESSOR_NAME, RollTablesConfig, config_from_mapping
from .logging_utils import LogBlockBuilder, render_fields_block
from .protocol import PreprocessorContext
from .transformer import TableTransformer, TransformStats

LOGGER = logging.getLogger(__name__)

# mdBook asks about this renderer name to check the default answer.
UNSUPPORTED_RENDERERS = frozenset({"not-supported"})


class RollTablesPreprocessor:
    """Fills in roll tables across a whole book."""

    name = PREPROCESSOR_NAME

    def __init__(self, config: RollTablesConfig | None = None) -> None:
        self.config = config
        self.stats = TransformStats()

    @staticmethod
    def supports_renderer(renderer: str) -> bool:
        return renderer not in UNSUPPORTED_RENDERERS

    def resolve_config(self, context: PreprocessorContext) -> RollTablesConfig:
        if self.config is not None:
            return self.config
        return config_from_mapping(context.preprocessor_options(self.name))

    def run(self, context: PreprocessorContext, book: MutableMapping[str, Any]) -> MutableMapping[str, Any]:
        """Rewrite every roll table of ``book`` in place and return it.

        Raises:
            ConfigError: If the preprocessor options are invalid.
            ProtocolError: If the book structure is malformed.
        """
        config = self.resolve_config(context)
        LOGGER.debug(
            render_fields_block(
                "Running rolltables",
                {
                    "mdBook": context.mdbook_version,
                    "Renderer": context.renderer,
                    "Separator": repr(config.separator),
                    "Head separator": repr(config.head_separator),
                    "Warn unusual dice": config.warn_unusual_dice,
                    "Max dice": config.max_dice,
                    "Dice": config.dice,
                },
            )
        )

        transformer = TableTransformer(config)
        changed = walk_book(book, transformer)
        self.stats = transformer.stats
        log_run_summary(self.stats, chapters_changed=changed)
        return book

    def process_markdown(self, text: str, *, source: str | None = None) -> str:
        """Rewrite the roll tables of a single markdown document."""
        transformer = TableTransformer(self.config or RollTablesConfig())
        result = rewrite_content(text, transformer, path=source)
        self.stats = transformer.stats
        log_run_summary(self.stats)
        return result


def log_run_summary(stats: TransformStats, *, chapters_changed: int | None = None) -> None:
    builder = LogBlockBuilder("Roll Tables Summary")
    fields: dict[str, object] = {
        "Tables seen": stats.tables_seen,
        "Tables filled": stats.tables_transformed,
        "Warnings": len(stats.warnings),
    }
    if chapters_changed is not None:
        fields["Chapters changed"] = chapters_changed
    if stats.failed:
        fields["Failed"] = stats.failed
    builder.add_fields(fields)
    if stats.transformed:
        builder.add_section(
            "Filled",
            (f"{entry.location}: {entry.rows} rows -> {entry.scheme}" for entry in stats.transformed),
        )
    LOGGER.debug(builder.render())
