"""Gateway Schemas — Pydantic models for definition registration, execution and login.

Invariants:
    - `api` keys accept camelCase, PascalCase and snake_case spellings
    - Registration fields are all optional here: missing-field reporting belongs to
      core/validate_definition.py so every gap is listed in one error
    - Flag fields are typed Any so non-string flags reach the flag validator uncoerced
    - `data` is untyped: any JSON value, classified by core/normalize_payload.py

Design Decisions:
    - AliasChoices over custom validators: Pydantic handles the spellings natively
"""

from typing import Any

from pydantic import AliasChoices, BaseModel, Field


def _aliases(camel: str, pascal: str, snake: str) -> AliasChoices:
    return AliasChoices(camel, pascal, snake)


class ApiLookup(BaseModel):
    """The `api` object of an execute request."""
    project_name: str | None = Field(
        None, validation_alias=_aliases("projectName", "ProjectName", "project_name"),
    )
    module_name: str | None = Field(
        None, validation_alias=_aliases("moduleName", "ModuleName", "module_name"),
    )
    function_name: str | None = Field(
        None, validation_alias=_aliases("functionName", "FunctionName", "function_name"),
    )


class ExecuteRequest(BaseModel):
    """Gateway request contract: {api: {...}, data: <payload>}."""
    api: ApiLookup
    data: Any = None


class ApiDefinitionCreate(BaseModel):
    """Registration payload for a new API definition."""
    project_name: str | None = Field(
        None, validation_alias=_aliases("projectName", "ProjectName", "project_name"),
    )
    module_name: str | None = Field(
        None, validation_alias=_aliases("moduleName", "ModuleName", "module_name"),
    )
    function_name: str | None = Field(
        None, validation_alias=_aliases("functionName", "FunctionName", "function_name"),
    )
    procedure_name: str | None = Field(
        None, validation_alias=_aliases("procedureName", "ProcedureName", "procedure_name"),
    )
    is_debug_enabled: Any = Field(
        None, validation_alias=_aliases("isDebugEnabled", "IsDebugEnabled", "is_debug_enabled"),
    )
    is_active: Any = Field(
        None, validation_alias=_aliases("isActive", "IsActive", "is_active"),
    )
    api_description: str | None = Field(
        None, validation_alias=AliasChoices(
            "apiDescription", "APIDescription", "description", "api_description",
        ),
    )
    app_server_file_path: str | None = Field(
        None, validation_alias=_aliases(
            "appServerFilePath", "AppServerFilePath", "app_server_file_path",
        ),
    )
    owner: str | None = Field(
        None, validation_alias=_aliases("owner", "Owner", "owner"),
    )
    update_by: str | None = Field(
        None, validation_alias=AliasChoices(
            "updateBy", "UpdateBy", "updatedBy", "update_by",
        ),
    )


class LoginCredentials(BaseModel):
    email: str = Field(min_length=1, max_length=320)
    password: str = Field(min_length=1, max_length=256)


class LoginRequest(BaseModel):
    """Login contract: {api: {...}, data: {email, password}}."""
    api: dict[str, Any]
    data: LoginCredentials
