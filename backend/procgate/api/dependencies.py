"""API Dependencies — FastAPI providers for the registry, executor, session bridge and caller identity.

Invariants:
    - Process-wide collaborators (executor, session bridge) live on app.state, set by the lifespan
    - authenticate_request runs before any /api route body; an invalid token never reaches the executor
    - request.state.identity is always set (IdentityContext or None) once authentication passes

Design Decisions:
    - Providers are plain functions so tests swap them with app.dependency_overrides
"""

from fastapi import Depends, Header, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from procgate.core.domain_types import IdentityContext
from procgate.core.identity_context import extract_bearer_token
from procgate.core.repository_protocols import ProcedureRunner
from procgate.infrastructure.database import get_db
from procgate.services.definition_registry import DefinitionRegistry
from procgate.services.procedure_service import ProcedureGateway
from procgate.services.session_bridge import SessionBridge


def get_session_bridge(request: Request) -> SessionBridge:
    return request.app.state.session_bridge


def get_procedure_runner(request: Request) -> ProcedureRunner:
    return request.app.state.procedure_executor


def get_registry(db: AsyncSession = Depends(get_db)) -> DefinitionRegistry:
    return DefinitionRegistry(db)


def get_gateway(
    registry: DefinitionRegistry = Depends(get_registry),
    runner: ProcedureRunner = Depends(get_procedure_runner),
) -> ProcedureGateway:
    return ProcedureGateway(registry, runner)


def get_bearer_token(authorization: str | None = Header(default=None)) -> str | None:
    return extract_bearer_token(authorization)


async def authenticate_request(
    request: Request,
    token: str | None = Depends(get_bearer_token),
    x_login_id: str | None = Header(default=None),
    x_login_type: str | None = Header(default=None),
    login_id_query: str | None = Query(default=None, alias="loginID"),
    bridge: SessionBridge = Depends(get_session_bridge),
) -> IdentityContext | None:
    """Resolve and live-verify the caller identity for protected routes."""
    identity = await bridge.authenticate(
        token,
        login_id_hint=x_login_id or login_id_query,
        login_type_hint=x_login_type,
    )
    request.state.identity = identity
    return identity
