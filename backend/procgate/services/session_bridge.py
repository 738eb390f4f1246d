"""Session Bridge — maps bearer tokens to upstream identity attributes, verified live per request.

Invariants:
    - login() remembers token → (login_id, login_type) only after upstream success
    - authenticate() calls upstream verify on EVERY request; only attributes are cached
    - Attribute precedence: remembered session → caller hints → default login type
    - No token: None (null identity) unless require_bearer_token is set, then AuthError
    - Invalid/expired token: AuthError (401), raised before any procedure runs

Design Decisions:
    - Store and upstream client injected as Protocols (ADR: no ambient global state)
    - Missing-token policy is a constructor argument, not hardcoded: the access policy
      for anonymous callers is an open decision (see DESIGN.md)
"""

import logging
from dataclasses import dataclass
from typing import Any

from procgate.core.domain_types import BearerToken, IdentityContext
from procgate.core.errors import AuthError, UpstreamError
from procgate.core.identity_context import (
    extract_upstream_identity, resolve_login_attributes,
)
from procgate.core.repository_protocols import TokenSessionStore, UpstreamAuth

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LoginResult:
    token: str
    login_id: str | None
    login_type: str | None
    upstream_response: Any


class SessionBridge:
    """Bridges gateway bearer tokens to the upstream identity provider."""

    def __init__(
        self,
        store: TokenSessionStore,
        upstream: UpstreamAuth,
        default_login_type: str | None = None,
        require_bearer_token: bool = False,
    ):
        self.store = store
        self.upstream = upstream
        self.default_login_type = default_login_type
        self.require_bearer_token = require_bearer_token

    async def login(self, email: str, password: str) -> LoginResult:
        upstream_response = await self.upstream.login(email, password)
        token, login_id, login_type = extract_upstream_identity(upstream_response)
        if not token:
            raise UpstreamError(
                "Upstream authentication failed.",
                details="Upstream response did not include a bearer token.",
            )

        login_type = login_type or self.default_login_type
        self.store.remember(token, login_id, login_type)
        self.store.evict_expired()
        logger.info("Upstream login succeeded", extra={"login_type": login_type})
        return LoginResult(
            token=token,
            login_id=login_id,
            login_type=login_type,
            upstream_response=upstream_response,
        )

    async def authenticate(
        self,
        token: str | None,
        login_id_hint: str | None = None,
        login_type_hint: str | None = None,
    ) -> IdentityContext | None:
        if not token:
            if self.require_bearer_token:
                raise AuthError("Authorization token missing.")
            return None

        login_id, login_type = resolve_login_attributes(
            self.store.get(token),
            login_id_hint,
            login_type_hint,
            self.default_login_type,
        )
        claims = await self.upstream.verify(token, login_id, login_type)
        return IdentityContext(
            token=BearerToken(token),
            login_id=login_id,
            login_type=login_type,
            claims=claims,
        )

    def logout(self, token: str | None) -> bool:
        if not token:
            return False
        return self.store.clear(token)
