"""Definition Registry — persists and queries API definitions; resolves the active one for a lookup.

Invariants:
    - create() validates fields and flags before touching the database
    - (project, module, function) uniqueness enforced twice: pre-check for a clean
      error, unique constraint for concurrent creates (IntegrityError → DuplicateDefinitionError)
    - find() results ordered most-recently-registered first (serial_no DESC)
    - resolve_active() returns exactly one active definition or raises

Design Decisions:
    - Registry wraps an AsyncSession supplied by get_db (request-scoped, auto-rollback)
    - Selection rule lives in core/resolve_definition.py (pure, unit-tested without a DB)
"""

import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from procgate.core.domain_types import Flag
from procgate.core.errors import DuplicateDefinitionError, ErrorContext
from procgate.core.resolve_definition import select_single_definition
from procgate.core.validate_definition import validate_definition_fields
from procgate.models.api_definition import ApiDefinition

logger = logging.getLogger(__name__)


class DefinitionRegistry:
    """CRUD-less registry: create, find, resolve_active."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create(self, fields: dict) -> ApiDefinition:
        """Register a new definition; returns the stored row with serial_no and timestamp."""
        cleaned = validate_definition_fields(fields)
        key = (
            cleaned["project_name"], cleaned["module_name"], cleaned["function_name"],
        )

        existing = await self.find(*key)
        if existing:
            raise DuplicateDefinitionError(*key)

        definition = ApiDefinition(
            **{
                name: value.value if isinstance(value, Flag) else value
                for name, value in cleaned.items()
            },
        )
        self.db.add(definition)
        try:
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            logger.warning(
                "Concurrent duplicate definition rejected by unique constraint",
                extra={"project_name": key[0], "module_name": key[1]},
            )
            raise DuplicateDefinitionError(*key) from e
        await self.db.refresh(definition)
        logger.info(
            f"Registered API definition {definition.serial_no} -> {definition.procedure_name}",
            extra={"project_name": key[0], "module_name": key[1]},
        )
        return definition

    async def find(
        self,
        project_name: str | None = None,
        module_name: str | None = None,
        function_name: str | None = None,
        active_only: bool = False,
    ) -> list[ApiDefinition]:
        """Definitions matching every supplied filter, newest first."""
        query = select(ApiDefinition).order_by(ApiDefinition.serial_no.desc())
        if project_name:
            query = query.where(ApiDefinition.project_name == project_name)
        if module_name:
            query = query.where(ApiDefinition.module_name == module_name)
        if function_name:
            query = query.where(ApiDefinition.function_name == function_name)
        if active_only:
            query = query.where(ApiDefinition.is_active == Flag.YES.value)

        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def resolve_active(
        self,
        project_name: str,
        module_name: str,
        function_name: str | None = None,
    ) -> ApiDefinition:
        """The single active definition for the lookup (404/409 errors otherwise)."""
        matches = await self.find(
            project_name, module_name, function_name, active_only=True,
        )
        return select_single_definition(
            matches,
            ErrorContext(
                project_name=project_name,
                module_name=module_name,
                function_name=function_name,
            ),
        )
