from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Tuple


@dataclass
class CommandHelp:
    """
    Structured help content for a CLI command.

    Provides examples, environment variable documentation, and helpful tips
    for use with the RichHelpFormatter.
    """

    brief_examples: List[Tuple[str, str]] = field(default_factory=list)
    """Brief examples shown in --help (2-3 most common use cases)."""

    extended_examples: List[Tuple[str, str]] = field(default_factory=list)
    """Extended examples shown in --examples."""

    env_vars: List[Tuple[str, str]] = field(default_factory=list)
    """List of (variable_name, description) tuples documenting environment variables."""

    tips: List[str] = field(default_factory=list)


_COMMON_ENV_VARS = [
    ("ROLLTABLES_LOG_LEVEL", "Log level on stderr: CRITICAL, ERROR, WARNING, INFO, DEBUG (default: INFO)"),
]

PREPROCESS_COMMAND_HELP = CommandHelp(
    brief_examples=[
        ("Register the preprocessor in book.toml", "[preprocessor.rolltables]"),
        ("Build the book; mdBook calls rolltables for you", "mdbook build"),
    ],
    extended_examples=[
        ("Register the preprocessor in book.toml", "[preprocessor.rolltables]"),
        ("Write ranges as 1,2 instead of 1-2", 'separator = ","'),
        ("Roll three dice for big tables (d666)", "max-dice = 3"),
        ("Only use the dice you own", "dice = [6, 10, 20]"),
        ("Render the d66 header as d6.6", 'head-separator = "."'),
        ("Silence warnings about d13, d17 and friends", "warn-unusual-dice = false"),
        ("Build the book; mdBook calls rolltables for you", "mdbook build"),
        ("Feed a saved payload by hand", "rolltables < payload.json > book.json"),
    ],
    env_vars=[
        *_COMMON_ENV_VARS,
        ("ROLLTABLES_IGNORE_VERSION", "Set to 1 to warn instead of failing on an unsupported mdBook version"),
    ],
    tips=[
        "Only tables whose first header cell is exactly 'd' and whose first column is empty are touched",
        "Use 'rolltables render' to preview a chapter without building the book",
        "Diagnostics go to stderr; stdout only ever carries the book JSON",
    ],
)

SUPPORTS_COMMAND_HELP = CommandHelp(
    brief_examples=[
        ("Ask whether the html renderer is supported", "rolltables supports html"),
    ],
    extended_examples=[
        ("Ask whether the html renderer is supported", "rolltables supports html"),
        ("Check the answer from a shell script", "rolltables supports epub && echo yes"),
    ],
    tips=[
        "The answer is the exit code: 0 for supported, 1 for unsupported",
    ],
)

RENDER_COMMAND_HELP = CommandHelp(
    brief_examples=[
        ("Preview a chapter on stdout", "rolltables render src/encounters.md"),
        ("Rewrite a file using the options from book.toml", "rolltables render src/loot.md --config book.toml -o out.md"),
    ],
    extended_examples=[
        ("Preview a chapter on stdout", "rolltables render src/encounters.md"),
        ("Rewrite a file using the options from book.toml", "rolltables render src/loot.md --config book.toml -o out.md"),
        ("Read markdown from stdin", "cat table.md | rolltables render -"),
        ("Use a YAML options file", "rolltables render notes.md --config rolltables.yaml"),
        ("Override the range separator", "rolltables render notes.md --separator ."),
        ("Show which dice were picked for each table", "rolltables render notes.md --summary"),
    ],
    env_vars=list(_COMMON_ENV_VARS),
    tips=[
        "Command-line options win over values from --config",
        "The summary table is printed on stderr, so redirecting stdout stays clean",
    ],
)

VALIDATE_CONFIG_COMMAND_HELP = CommandHelp(
    brief_examples=[
        ("Validate the options in book.toml", "rolltables validate-config book.toml"),
    ],
    extended_examples=[
        ("Validate the options in book.toml", "rolltables validate-config book.toml"),
        ("Validate a YAML options file", "rolltables validate-config rolltables.yaml"),
        ("Hide fix suggestions", "rolltables validate-config book.toml --no-suggestions"),
    ],
    env_vars=list(_COMMON_ENV_VARS),
    tips=[
        "Unknown keys are reported as warnings because the preprocessor ignores them",
        "Type errors are fatal: mdbook build fails with the same message",
    ],
)


# Command help registry mapping command names to their help content
COMMAND_HELP: Dict[str, CommandHelp] = {
    "preprocess": PREPROCESS_COMMAND_HELP,
    "supports": SUPPORTS_COMMAND_HELP,
    "render": RENDER_COMMAND_HELP,
    "validate-config": VALIDATE_CONFIG_COMMAND_HELP,
}


def get_command_help(command: str) -> CommandHelp:
    """
    Retrieve help content for a specific command.

    Raises:
        KeyError: If command is not recognized
    """
    return COMMAND_HELP[command]
