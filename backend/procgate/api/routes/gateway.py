"""Gateway Routes — API definition registry and stored-procedure execution.

Invariants:
    - Every route in this router runs behind authenticate_request
    - POST /api/definitions → 201 with the stored record
    - POST|GET /api/execute → {success, metadata, data}; GET carries no payload
    - projectName and moduleName are required for execution; functionName is optional

Design Decisions:
    - Routes never contain business logic (delegate to DefinitionRegistry / ProcedureGateway)
    - Errors raised as GatewayError subclasses; api/error_handlers.py picks the status
"""

import logging

from fastapi import APIRouter, Depends, Query, Request, status

from procgate.api.dependencies import (
    authenticate_request, get_gateway, get_registry,
)
from procgate.core.errors import ValidationError
from procgate.schemas.gateway import ApiDefinitionCreate, ApiLookup, ExecuteRequest
from procgate.services.definition_registry import DefinitionRegistry
from procgate.services.procedure_service import ProcedureGateway

logger = logging.getLogger(__name__)
router = APIRouter(
    prefix="/api", tags=["gateway"],
    dependencies=[Depends(authenticate_request)],
)


def _require_lookup(api: ApiLookup) -> ApiLookup:
    if not api.project_name or not api.module_name:
        raise ValidationError(
            "Both ProjectName and ModuleName are required in the api object.",
        )
    return api


@router.post("/definitions", status_code=status.HTTP_201_CREATED)
async def create_definition(
    body: ApiDefinitionCreate,
    registry: DefinitionRegistry = Depends(get_registry),
):
    """Register a new (project, module, function) → procedure mapping."""
    created = await registry.create(body.model_dump())
    return {"success": True, "data": created.to_api_dict()}


@router.get("/definitions")
async def list_definitions(
    project_name: str | None = Query(None, alias="projectName"),
    module_name: str | None = Query(None, alias="moduleName"),
    function_name: str | None = Query(None, alias="functionName"),
    only_active: str | None = Query(None, alias="onlyActive"),
    registry: DefinitionRegistry = Depends(get_registry),
):
    """List definitions, newest first."""
    definitions = await registry.find(
        project_name, module_name, function_name,
        active_only=only_active in ("true", "1"),
    )
    return {"success": True, "data": [d.to_api_dict() for d in definitions]}


@router.post("/execute")
async def execute_procedure(
    body: ExecuteRequest,
    gateway: ProcedureGateway = Depends(get_gateway),
):
    """Resolve the active definition and run its stored procedure with `data`."""
    api = _require_lookup(body.api)
    return await gateway.execute(
        api.project_name, api.module_name, api.function_name, body.data,
    )


@router.get("/execute")
async def execute_procedure_without_payload(
    request: Request,
    gateway: ProcedureGateway = Depends(get_gateway),
):
    """Query-string variant of /execute for procedures that take no parameters.

    Lookup keys accept the same spellings as the POST body (projectName,
    ProjectName, project_name, ...).
    """
    api = _require_lookup(ApiLookup.model_validate(dict(request.query_params)))
    return await gateway.execute(
        api.project_name, api.module_name, api.function_name, None,
    )
