from __future__ import annotations

import pytest

from rolltables.validation import (
    KNOWN_KEYS,
    OPTIONS_SCHEMA,
    ValidationIssue,
    ValidationReport,
    _format_jsonschema_path,
    validate_options,
)


# Fixtures


@pytest.fixture
def full_options():
    """Every option set to a valid non-default value."""
    return {
        "command": "mdbook-rolltables",
        "renderers": ["html"],
        "separator": ",",
        "head-separator": ".",
        "warn-unusual-dice": False,
        "max-dice": 3,
        "dice": [6, 10],
    }


class TestValidationReport:
    def test_valid_without_errors(self):
        report = ValidationReport(warnings=[ValidationIssue("warning", "x", "msg", "unknown-key")])
        assert report.is_valid

    def test_invalid_with_errors(self):
        report = ValidationReport(errors=[ValidationIssue("error", "x", "msg", "type")])
        assert not report.is_valid


class TestFormatPath:
    def test_root(self):
        assert _format_jsonschema_path([]) == "<root>"

    def test_nested(self):
        assert _format_jsonschema_path(["dice", 1]) == "dice.1"


class TestValidateOptions:
    def test_empty_options(self):
        report = validate_options({})
        assert report.is_valid
        assert report.warnings == []

    def test_full_options(self, full_options):
        report = validate_options(full_options)
        assert report.is_valid
        assert report.warnings == []

    def test_host_keys_are_known(self):
        assert {"command", "renderers", "before", "after", "optional"} <= KNOWN_KEYS
        assert set(OPTIONS_SCHEMA["properties"]) <= KNOWN_KEYS

    @pytest.mark.parametrize(
        "options, path, code",
        [
            ({"separator": 1}, "separator", "type"),
            ({"head-separator": ["."]}, "head-separator", "type"),
            ({"warn-unusual-dice": "yes"}, "warn-unusual-dice", "type"),
            ({"max-dice": 0}, "max-dice", "minimum"),
            ({"max-dice": 4}, "max-dice", "maximum"),
            ({"max-dice": True}, "max-dice", "type"),
            ({"dice": []}, "dice", "minItems"),
            ({"dice": [6, 6]}, "dice", "uniqueItems"),
            ({"dice": [6, 1]}, "dice.1", "minimum"),
        ],
    )
    def test_schema_errors(self, options, path, code):
        report = validate_options(options)

        assert not report.is_valid
        [issue] = report.errors
        assert issue.severity == "error"
        assert issue.path == path
        assert issue.code == code
        assert issue.fix_suggestion

    def test_not_a_table(self):
        report = validate_options("separator")
        assert not report.is_valid
        assert report.errors[0].path == "<root>"

    def test_unknown_key_is_a_warning(self):
        report = validate_options({"seperator": ","})

        assert report.is_valid
        [warning] = report.warnings
        assert warning.code == "unknown-key"
        assert warning.path == "seperator"

    def test_legacy_key(self):
        report = validate_options({"allow-unusual-dice": True})

        assert report.is_valid
        assert [warning.code for warning in report.warnings] == ["legacy-key"]

    def test_conflicting_keys(self):
        report = validate_options({"allow-unusual-dice": True, "warn-unusual-dice": True})
        assert [warning.code for warning in report.warnings] == ["conflicting-keys"]
