"""Definition Validation — tests for required fields and Y/N flag normalization.

Tests cover:
    - every missing field is listed at once, in declaration order
    - blank strings count as missing
    - flags are trimmed and upper-cased; anything but Y/N is rejected
    - non-flag values pass through untouched, padding included
"""

import pytest

from procgate.core.domain_types import Flag
from procgate.core.errors import ErrorKind, InvalidFlagError, ValidationError
from procgate.core.validate_definition import (
    find_missing_fields,
    normalize_flag,
    validate_definition_fields,
)


def _valid_fields(**overrides) -> dict:
    fields = {
        "project_name": "Compliance",
        "module_name": "Reports",
        "function_name": "List",
        "procedure_name": "usp_ListReports",
        "is_debug_enabled": "n",
        "is_active": " y ",
        "api_description": "Lists reports",
        "app_server_file_path": "/srv/reports",
        "owner": "ops",
        "update_by": "admin",
    }
    fields.update(overrides)
    return fields


def test_valid_fields_are_cleaned():
    cleaned = validate_definition_fields(_valid_fields(owner="  ops  "))
    assert cleaned["is_debug_enabled"] is Flag.NO
    assert cleaned["is_active"] is Flag.YES
    assert cleaned["owner"] == "  ops  "


def test_all_missing_fields_listed_together():
    with pytest.raises(ValidationError) as exc_info:
        validate_definition_fields({"project_name": "P", "owner": "o"})
    err = exc_info.value
    assert err.kind == ErrorKind.VALIDATION
    assert err.missing_fields == [
        "moduleName", "functionName", "procedureName", "isDebugEnabled",
        "isActive", "apiDescription", "appServerFilePath", "updateBy",
    ]
    assert err.message.startswith("Missing required fields: moduleName")
    assert err.to_response()["details"]["missing_fields"] == err.missing_fields


def test_blank_strings_count_as_missing():
    assert find_missing_fields(_valid_fields(owner="   ", module_name="")) == [
        "moduleName", "owner",
    ]


def test_empty_mapping_reports_every_field():
    assert len(find_missing_fields({})) == 10


@pytest.mark.parametrize("raw,expected", [
    ("Y", Flag.YES), ("y", Flag.YES), (" Y\t", Flag.YES),
    ("N", Flag.NO), ("n", Flag.NO), (Flag.NO, Flag.NO),
])
def test_normalize_flag_accepts_y_and_n(raw, expected):
    assert normalize_flag("is_active", raw) is expected


@pytest.mark.parametrize("raw", ["yes", "true", "1", "X", True, 1])
def test_normalize_flag_rejects_other_values(raw):
    with pytest.raises(InvalidFlagError) as exc_info:
        normalize_flag("is_active", raw)
    assert exc_info.value.kind == ErrorKind.INVALID_FLAG
    assert exc_info.value.field_name == "isActive"


def test_invalid_flag_is_reported_after_missing_fields_check():
    with pytest.raises(InvalidFlagError):
        validate_definition_fields(_valid_fields(is_debug_enabled="maybe"))
