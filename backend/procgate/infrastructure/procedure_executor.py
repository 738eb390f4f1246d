"""Procedure Executor — runs one CALL statement on a pooled connection and collects every result group.

Invariants:
    - One pooled connection per call, returned to the pool on every path (async with)
    - Parameters are bound by the driver; the statement only carries placeholders
    - Result groups keep execution order: row groups as list[dict], status groups as dict
    - Driver errors surface as ExecutionError(procedure, parameters) — never retried
    - Raw call expressions run without bound values; a supplied payload is logged and dropped
    - Debug-enabled calls log statement + parameters BEFORE execution

Design Decisions:
    - Raw driver cursor over Session.execute: SQLAlchemy results expose a single
      result set, stored procedures may emit many (ADR: nextset() loop)
    - Placeholder chosen from dialect.paramstyle so the builder stays driver-agnostic
    - No retry: procedure side effects are not assumed idempotent
"""

import logging
from typing import Any

from sqlalchemy.ext.asyncio import AsyncEngine

from procgate.core.build_call import ProcedureCall, placeholder_for
from procgate.core.errors import ExecutionError

logger = logging.getLogger(__name__)


def _rows_to_dicts(description: Any, rows: Any) -> list[dict]:
    columns = [column[0] for column in description]
    return [
        dict(row) if isinstance(row, dict) else dict(zip(columns, row))
        for row in rows
    ]


async def collect_result_groups(cursor: Any) -> list:
    """Drain every result set from an executed async DB-API cursor."""
    groups: list = []
    while True:
        if cursor.description:
            rows = await cursor.fetchall()
            groups.append(_rows_to_dicts(cursor.description, rows))
        else:
            groups.append({
                "affected_rows": cursor.rowcount,
                "last_insert_id": cursor.lastrowid,
            })
        nextset = getattr(cursor, "nextset", None)
        if nextset is None or not await nextset():
            return groups


async def _run_statement(driver_connection: Any, statement: str, parameters: list) -> list:
    cursor = await driver_connection.cursor()
    try:
        await cursor.execute(statement, tuple(parameters) if parameters else None)
        return await collect_result_groups(cursor)
    finally:
        await cursor.close()


class ProcedureExecutor:
    """Executes ProcedureCall values against the shared async engine."""

    def __init__(self, engine: AsyncEngine):
        self.engine = engine

    async def execute(self, call: ProcedureCall) -> list:
        parameters = list(call.bound_parameters)
        if call.parameters and not parameters:
            logger.warning(
                f"Ignoring {len(call.parameters)} payload value(s) for raw call expression {call.display_name}",
                extra={"procedure": call.display_name, "parameter_count": len(call.parameters)},
            )
        async with self.engine.connect() as conn:
            statement = call.statement(placeholder_for(conn.dialect.paramstyle))
            if call.debug:
                logger.debug(
                    f"Executing stored procedure: {statement}",
                    extra={
                        "procedure": call.display_name,
                        "parameters": parameters,
                    },
                )

            # TypeError: format-style drivers reject a placeholder/parameter count mismatch
            driver_errors = (conn.dialect.loaded_dbapi.Error, TypeError)
            raw = await conn.get_raw_connection()
            driver_connection = raw.driver_connection
            try:
                groups = await _run_statement(driver_connection, statement, parameters)
                await driver_connection.commit()
            except driver_errors as e:
                await self._rollback(driver_connection, call)
                logger.error(
                    f"Stored procedure {call.display_name} failed: {e}",
                    extra={
                        "procedure": call.display_name,
                        "parameters": parameters,
                    },
                )
                raise ExecutionError(call.display_name, parameters, str(e)) from e
        return groups

    @staticmethod
    async def _rollback(driver_connection: Any, call: ProcedureCall) -> None:
        try:
            await driver_connection.rollback()
        except Exception as e:
            logger.warning(
                f"Rollback after failed call to {call.display_name} also failed: {e}",
                extra={"procedure": call.display_name},
            )
