"""rolltables: an mdBook preprocessor that fills in roll tables.

The package is organized into focused modules:

- **dice**: picking the die or dice combination for a row count
- **labels**: roll ranges and the labels written into the table
- **markdown_tables**: finding and rewriting pipe tables in markdown text
- **transformer**: deciding which tables are roll tables and filling them in
- **book**: walking the chapters of the book mdBook sends over
- **protocol**: the stdin/stdout exchange with mdBook and its version check
- **config** / **validation**: the ``[preprocessor.rolltables]`` options
- **preprocessor**: the orchestration used by the CLI
- **cli**: the ``rolltables`` command

The main entry point for library use is ``RollTablesPreprocessor``.
"""

from .config import RollTablesConfig
from .dice import DieScheme, select_scheme
from .preprocessor import RollTablesPreprocessor
from .transformer import TableTransformer
from .version import __version__

__all__ = [
    "__version__",
    "DieScheme",
    "RollTablesConfig",
    "RollTablesPreprocessor",
    "TableTransformer",
    "select_scheme",
]
