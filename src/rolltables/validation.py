from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from jsonschema import Draft7Validator

from .dice import MAX_COMBINED_DICE


@dataclass(slots=True)
class ValidationIssue:
    """Represents a single validation problem."""

    severity: str
    path: str
    message: str
    code: str
    fix_suggestion: Optional[str] = None


@dataclass(slots=True)
class ValidationReport:
    """Aggregates validation warnings and errors."""

    errors: List[ValidationIssue] = field(default_factory=list)
    warnings: List[ValidationIssue] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors


# Keys mdBook itself reads from every [preprocessor.*] table.
HOST_KEYS = frozenset({"command", "renderers", "before", "after", "optional"})

OPTIONS_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "separator": {"type": "string"},
        "head-separator": {"type": "string"},
        "warn-unusual-dice": {"type": "boolean"},
        "allow-unusual-dice": {"type": "boolean"},
        "max-dice": {"type": "integer", "minimum": 1, "maximum": MAX_COMBINED_DICE},
        "dice": {
            "type": "array",
            "items": {"type": "integer", "minimum": 2},
            "minItems": 1,
            "uniqueItems": True,
        },
    },
    "additionalProperties": True,
}

KNOWN_KEYS = frozenset(OPTIONS_SCHEMA["properties"]) | HOST_KEYS

_FIX_SUGGESTIONS = {
    "type": "Check the value type: separators are quoted strings, flags are true/false.",
    "minimum": f"max-dice must be between 1 and {MAX_COMBINED_DICE}; dice need at least two faces.",
    "maximum": f"max-dice must be between 1 and {MAX_COMBINED_DICE}.",
    "uniqueItems": "List every die size only once.",
    "minItems": "List at least one die size, e.g. dice = [6, 10].",
    "unknown-key": "Remove the key or check its spelling; unknown options are ignored.",
    "legacy-key": "Replace allow-unusual-dice with warn-unusual-dice (inverted meaning).",
    "conflicting-keys": "Keep only warn-unusual-dice.",
}


def _format_jsonschema_path(path: Sequence[Any]) -> str:
    if not path:
        return "<root>"
    return ".".join(str(part) for part in path)


def validate_options(data: Any) -> ValidationReport:
    """Validate a ``[preprocessor.rolltables]`` table.

    Schema violations are errors. Unknown and legacy keys are warnings since
    the preprocessor ignores or translates them.
    """
    report = ValidationReport()

    validator = Draft7Validator(OPTIONS_SCHEMA)
    for error in sorted(validator.iter_errors(data), key=lambda exc: list(exc.path)):
        report.errors.append(
            ValidationIssue(
                severity="error",
                path=_format_jsonschema_path(error.path),
                message=error.message,
                code=str(error.validator),
                fix_suggestion=_FIX_SUGGESTIONS.get(str(error.validator)),
            )
        )

    if not isinstance(data, Mapping):
        return report

    for key in data:
        if key not in KNOWN_KEYS:
            report.warnings.append(
                ValidationIssue(
                    severity="warning",
                    path=str(key),
                    message=f"Unknown option '{key}'",
                    code="unknown-key",
                    fix_suggestion=_FIX_SUGGESTIONS["unknown-key"],
                )
            )

    if "allow-unusual-dice" in data:
        conflicting = "warn-unusual-dice" in data
        report.warnings.append(
            ValidationIssue(
                severity="warning",
                path="allow-unusual-dice",
                message=(
                    "Both allow-unusual-dice and warn-unusual-dice are set; warn-unusual-dice wins"
                    if conflicting
                    else "allow-unusual-dice is deprecated"
                ),
                code="conflicting-keys" if conflicting else "legacy-key",
                fix_suggestion=_FIX_SUGGESTIONS["conflicting-keys" if conflicting else "legacy-key"],
            )
        )

    return report
