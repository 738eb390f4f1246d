"""Auth Routes — upstream login and token-session logout.

Invariants:
    - POST /auth/login returns the upstream bearer token; the gateway mints no tokens of its own
    - Successful login remembers token → identity attributes in the session store
    - POST /auth/logout forgets the remembered attributes (upstream session untouched)
"""

import logging

from fastapi import APIRouter, Depends

from procgate.api.dependencies import get_bearer_token, get_session_bridge
from procgate.schemas.gateway import LoginRequest
from procgate.services.session_bridge import SessionBridge

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/login")
async def login(
    body: LoginRequest,
    bridge: SessionBridge = Depends(get_session_bridge),
):
    """Authenticate against the upstream identity provider."""
    result = await bridge.login(body.data.email, body.data.password)
    return {
        "success": True,
        "token": result.token,
        "project": body.api.get("projectName") or body.api.get("ProjectName") or "Login",
        "module": body.api.get("moduleName") or body.api.get("ModuleName") or "Login",
        "loginId": result.login_id,
        "loginType": result.login_type,
        "upstreamResponse": result.upstream_response,
    }


@router.post("/logout")
async def logout(
    token: str | None = Depends(get_bearer_token),
    bridge: SessionBridge = Depends(get_session_bridge),
):
    """Drop the remembered identity attributes for the caller's bearer token."""
    return {"success": True, "cleared": bridge.logout(token)}
