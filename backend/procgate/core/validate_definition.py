"""Definition Validation — pure checks applied before an API definition is persisted.

Invariants:
    - Every missing required field is reported at once (not first-failure)
    - A field is missing when absent, None, or blank after trimming
    - Flags are normalized to Flag.YES / Flag.NO (trimmed, case-insensitive)
    - Non-string flag values are rejected, never coerced
    - Non-flag values are stored exactly as supplied (trimming only decides "missing")
"""

from typing import Any

from procgate.core.domain_types import Flag
from procgate.core.errors import InvalidFlagError, ValidationError

# snake_case attribute → camelCase name shown to API callers
REQUIRED_FIELDS: dict[str, str] = {
    "project_name": "projectName",
    "module_name": "moduleName",
    "function_name": "functionName",
    "procedure_name": "procedureName",
    "is_debug_enabled": "isDebugEnabled",
    "is_active": "isActive",
    "api_description": "apiDescription",
    "app_server_file_path": "appServerFilePath",
    "owner": "owner",
    "update_by": "updateBy",
}

FLAG_FIELDS = ("is_debug_enabled", "is_active")


def _is_missing(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False


def find_missing_fields(fields: dict[str, Any]) -> list[str]:
    """camelCase names of required fields that are absent or blank, in declaration order."""
    return [
        label for key, label in REQUIRED_FIELDS.items()
        if _is_missing(fields.get(key))
    ]


def normalize_flag(field_name: str, value: Any) -> Flag:
    """Map "y"/" Y "/"n"... to Flag; raise InvalidFlagError for anything else."""
    if isinstance(value, Flag):
        return value
    if not isinstance(value, str):
        raise InvalidFlagError(REQUIRED_FIELDS.get(field_name, field_name), value)
    try:
        return Flag(value.strip().upper())
    except ValueError as e:
        raise InvalidFlagError(REQUIRED_FIELDS.get(field_name, field_name), value) from e


def validate_definition_fields(fields: dict[str, Any]) -> dict[str, Any]:
    """Copy of the required fields with flags normalized; other values kept as supplied."""
    missing = find_missing_fields(fields)
    if missing:
        raise ValidationError(
            f"Missing required fields: {', '.join(missing)}",
            missing_fields=missing,
        )

    cleaned = {key: fields[key] for key in REQUIRED_FIELDS}
    for key in FLAG_FIELDS:
        cleaned[key] = normalize_flag(key, fields[key])
    return cleaned
