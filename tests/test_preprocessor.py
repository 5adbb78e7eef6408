from __future__ import annotations

import logging

import pytest

from rolltables.config import RollTablesConfig
from rolltables.errors import ConfigError
from rolltables.preprocessor import RollTablesPreprocessor
from rolltables.protocol import PreprocessorContext

ROLL_TABLE = "|d|Class|\n|:---:|:---|\n||Warrior|\n||Thief|\n||Wizard|\n"


def _context(options=None) -> PreprocessorContext:
    config = {"book": {"title": "Tables"}}
    if options is not None:
        config["preprocessor"] = {"rolltables": options}
    return PreprocessorContext(root="/book", config=config, renderer="html", mdbook_version="0.4.40")


def _book(content: str) -> dict:
    return {
        "sections": [
            {
                "Chapter": {
                    "name": "Classes",
                    "content": content,
                    "number": [1],
                    "sub_items": [],
                    "path": "classes.md",
                    "source_path": "classes.md",
                    "parent_names": [],
                }
            }
        ],
        "__non_exhaustive": None,
    }


def _content(book: dict) -> str:
    return book["sections"][0]["Chapter"]["content"]


@pytest.mark.parametrize(
    "renderer, expected",
    [("html", True), ("markdown", True), ("epub", True), ("not-supported", False)],
)
def test_supports_renderer(renderer, expected) -> None:
    assert RollTablesPreprocessor.supports_renderer(renderer) is expected


class TestRun:
    def test_uses_book_options(self):
        preprocessor = RollTablesPreprocessor()
        book = preprocessor.run(_context({"separator": ","}), _book(ROLL_TABLE))

        assert _content(book) == "|d6|Class|\n|:---:|:---|\n|1,2|Warrior|\n|3,4|Thief|\n|5,6|Wizard|\n"
        assert preprocessor.stats.tables_transformed == 1

    def test_defaults_without_options(self):
        book = RollTablesPreprocessor().run(_context(), _book(ROLL_TABLE))
        assert "|1-2|Warrior|" in _content(book)

    def test_explicit_config_wins(self):
        preprocessor = RollTablesPreprocessor(RollTablesConfig(separator="/"))
        book = preprocessor.run(_context({"separator": ","}), _book(ROLL_TABLE))
        assert "|1/2|Warrior|" in _content(book)

    def test_invalid_options(self):
        with pytest.raises(ConfigError):
            RollTablesPreprocessor().run(_context({"max-dice": "two"}), _book(ROLL_TABLE))

    def test_book_without_tables_is_untouched(self):
        book = _book("# Classes\n\nPick one.\n")
        RollTablesPreprocessor().run(_context(), book)
        assert _content(book) == "# Classes\n\nPick one.\n"

    def test_logs_summary_at_debug(self, caplog):
        with caplog.at_level(logging.DEBUG, logger="rolltables.preprocessor"):
            RollTablesPreprocessor().run(_context(), _book(ROLL_TABLE))

        assert "Roll Tables Summary" in caplog.text
        assert "chapter 'Classes' (classes.md:1): 3 rows -> d6" in caplog.text


class TestProcessMarkdown:
    def test_single_document(self):
        preprocessor = RollTablesPreprocessor()
        result = preprocessor.process_markdown("Intro\n\n" + ROLL_TABLE, source="notes.md")

        assert result.endswith("|5-6|Wizard|\n")
        assert str(preprocessor.stats.transformed[0].location) == "notes.md:3"

    def test_warning_for_unusual_dice(self, caplog):
        rows = "".join("||x|\n" for _ in range(17))
        with caplog.at_level(logging.WARNING):
            RollTablesPreprocessor().process_markdown("|d|x|\n|-|-|\n" + rows)

        assert "<input>:1 uses unusual dice: d17" in caplog.text
