"""Procedure Gateway — resolve a definition, bind the payload, run it, shape the result.

Invariants:
    - Pipeline order: resolve → normalize payload → build call → execute → normalize result
    - Payload and identifier errors are raised before any connection is acquired
    - Debug tracing is driven by the definition's IsDebugEnabled flag, nothing else

Design Decisions:
    - ProcedureRunner injected (Protocol): routes get the real executor, tests a fake
    - Pure steps (core/) wrapped by one thin async orchestrator (ADR: impureim sandwich)
"""

import logging
from typing import Any

from procgate.core.build_call import ProcedureCall, parse_procedure_name
from procgate.core.domain_types import Flag
from procgate.core.normalize_payload import normalize_payload
from procgate.core.normalize_result import normalize_result
from procgate.core.repository_protocols import ProcedureRunner
from procgate.models.api_definition import ApiDefinition
from procgate.services.definition_registry import DefinitionRegistry

logger = logging.getLogger(__name__)


def build_procedure_call(definition: ApiDefinition, data: Any) -> ProcedureCall:
    return ProcedureCall(
        procedure=parse_procedure_name(definition.procedure_name),
        parameters=tuple(normalize_payload(data)),
        debug=definition.is_debug_enabled == Flag.YES.value,
    )


def gateway_metadata(definition: ApiDefinition) -> dict:
    return {
        "projectName": definition.project_name,
        "moduleName": definition.module_name,
        "functionName": definition.function_name,
        "procedureName": definition.procedure_name,
    }


class ProcedureGateway:
    """Runs registered stored procedures on behalf of gateway requests."""

    def __init__(self, registry: DefinitionRegistry, runner: ProcedureRunner):
        self.registry = registry
        self.runner = runner

    async def execute_definition(self, definition: ApiDefinition, data: Any) -> Any:
        call = build_procedure_call(definition, data)
        logger.info(
            "Prepared stored procedure payload.",
            extra={
                "procedure": definition.procedure_name,
                "parameter_count": len(call.parameters),
            },
        )
        raw = await self.runner.execute(call)
        return normalize_result(raw)

    async def execute(
        self,
        project_name: str,
        module_name: str,
        function_name: str | None,
        data: Any,
    ) -> dict:
        """Full gateway call; returns the success envelope."""
        definition = await self.registry.resolve_active(
            project_name, module_name, function_name,
        )
        result = await self.execute_definition(definition, data)
        return {
            "success": True,
            "metadata": gateway_metadata(definition),
            "data": result,
        }
