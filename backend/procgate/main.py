"""procgate API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly, no auto-discovery
    - Global error handlers map GatewayError → {success: false, ...} responses
    - CORS configured from settings (not hardcoded)
    - Database pool, executor, upstream client and token store created once in lifespan
      and released on shutdown

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - Collaborators on app.state, resolved through api/dependencies.py providers
      (ADR: overridable in tests without monkeypatching modules)
"""

import asyncio
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from procgate.api.error_handlers import register_error_handlers
from procgate.api.routes import auth, gateway, health
from procgate.config import get_settings
from procgate.infrastructure.database import init_db
from procgate.infrastructure.observability import install_fault_handlers, setup_logging
from procgate.infrastructure.procedure_executor import ProcedureExecutor
from procgate.infrastructure.token_session_store import InMemoryTokenSessionStore
from procgate.infrastructure.upstream_auth_client import UpstreamAuthClient
from procgate.services.session_bridge import SessionBridge

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    install_fault_handlers(asyncio.get_running_loop())

    manager = init_db(settings.database_url, **settings.pool_options())
    upstream = UpstreamAuthClient(
        settings.upstream_login_url,
        settings.upstream_verify_url,
        timeout_seconds=settings.upstream_timeout_seconds,
        origin=settings.upstream_origin,
        user_agent=settings.upstream_user_agent,
    )
    app.state.procedure_executor = ProcedureExecutor(manager.engine)
    app.state.session_bridge = SessionBridge(
        InMemoryTokenSessionStore(settings.token_session_ttl_seconds),
        upstream,
        default_login_type=settings.upstream_login_type,
        require_bearer_token=settings.require_bearer_token,
    )
    logger.info("procgate API started")
    yield
    logger.info("procgate API shutting down")
    await upstream.aclose()
    await manager.dispose()


app = FastAPI(title="procgate API", version="1.0.0", lifespan=lifespan)

# CORS origins from settings
settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_error_handlers(app)

# Routes: explicit registration
app.include_router(health.router)
app.include_router(auth.router)
app.include_router(gateway.router)
