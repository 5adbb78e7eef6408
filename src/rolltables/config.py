from __future__ import annotations

import logging
import tomllib
from collections.abc import Mapping
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any

import yaml

from .dice import CONVENTIONAL_DICE, DiePolicy
from .errors import ConfigError
from .labels import DEFAULT_HEAD_SEPARATOR, DEFAULT_SEPARATOR
from .utils import load_yaml_file
from .validation import KNOWN_KEYS, validate_options

LOGGER = logging.getLogger(__name__)

PREPROCESSOR_NAME = "rolltables"


@dataclass(frozen=True, slots=True)
class RollTablesConfig:
    separator: str = DEFAULT_SEPARATOR
    head_separator: str = DEFAULT_HEAD_SEPARATOR
    warn_unusual_dice: bool = True
    max_dice: int = 2
    dice: tuple[int, ...] = CONVENTIONAL_DICE

    @property
    def policy(self) -> DiePolicy:
        return DiePolicy(
            max_dice=self.max_dice,
            conventional=self.dice,
            combine_multi_digit=bool(self.head_separator),
        )

    def with_overrides(self, **overrides: Any) -> "RollTablesConfig":
        """Return a copy with every non-``None`` override applied."""
        return replace(self, **{key: value for key, value in overrides.items() if value is not None})


def config_from_mapping(data: Mapping[str, Any] | None) -> RollTablesConfig:
    """Resolve options from a ``[preprocessor.rolltables]`` table.

    Missing keys fall back to defaults and unknown keys are ignored.

    Raises:
        ConfigError: If a known option has the wrong type or range.
    """
    if data is None:
        return RollTablesConfig()
    if not isinstance(data, Mapping):
        raise ConfigError(f"preprocessor.{PREPROCESSOR_NAME} must be a table, got {type(data).__name__}")

    report = validate_options(data)
    if not report.is_valid:
        details = "; ".join(f"{issue.path}: {issue.message}" for issue in report.errors)
        raise ConfigError(f"Invalid preprocessor.{PREPROCESSOR_NAME} options: {details}")

    ignored = sorted(str(key) for key in data if key not in KNOWN_KEYS)
    if ignored:
        LOGGER.debug("Ignoring unknown rolltables options: %s", ", ".join(ignored))

    warn_unusual_dice = True
    if "warn-unusual-dice" in data:
        warn_unusual_dice = data["warn-unusual-dice"]
    elif "allow-unusual-dice" in data:
        warn_unusual_dice = not data["allow-unusual-dice"]

    return RollTablesConfig(
        separator=data.get("separator", DEFAULT_SEPARATOR),
        head_separator=data.get("head-separator", DEFAULT_HEAD_SEPARATOR),
        warn_unusual_dice=warn_unusual_dice,
        max_dice=data.get("max-dice", 2),
        dice=tuple(data.get("dice", CONVENTIONAL_DICE)),
    )


def options_from_book_config(book_config: Mapping[str, Any] | None) -> Mapping[str, Any] | None:
    """Pick the rolltables table out of a parsed ``book.toml``."""
    if not book_config:
        return None
    preprocessors = book_config.get("preprocessor")
    if preprocessors is None:
        return None
    if not isinstance(preprocessors, Mapping):
        raise ConfigError("'preprocessor' must be a table")
    return preprocessors.get(PREPROCESSOR_NAME)


def load_options_file(path: Path) -> Mapping[str, Any] | None:
    """Read raw options from a ``book.toml`` or a YAML options file.

    YAML files may either hold the options directly or nest them under a
    ``rolltables`` key.

    Raises:
        ConfigError: If the file cannot be read or parsed.
    """
    try:
        if path.suffix.lower() == ".toml":
            with path.open("rb") as handle:
                return options_from_book_config(tomllib.load(handle))
        data = load_yaml_file(path)
    except OSError as exc:
        raise ConfigError(f"Unable to read {path}: {exc}") from exc
    except (tomllib.TOMLDecodeError, yaml.YAMLError) as exc:
        raise ConfigError(f"Unable to parse {path}: {exc}") from exc

    if isinstance(data, Mapping) and isinstance(data.get(PREPROCESSOR_NAME), Mapping):
        return data[PREPROCESSOR_NAME]
    return data


def load_config(path: Path) -> RollTablesConfig:
    return config_from_mapping(load_options_file(path))
