"""Boundary Protocols — contracts between core/services and the infrastructure shell.

Invariants:
    - Core NEVER imports from infrastructure — dependency arrows point inward only
    - Session bridge and gateway services depend on these Protocols, not concrete classes
    - Implementations provided by the shell via dependency injection (FastAPI Depends)

Design Decisions:
    - Protocol over ABC: structural subtyping, test fakes need no inheritance
    - TokenSessionStore methods are sync: the in-memory store does no IO and is
      guarded by a lock, so no await point can interleave a read-modify-write
"""

from typing import Any, Protocol

from procgate.core.build_call import ProcedureCall
from procgate.core.domain_types import TokenSession


class TokenSessionStore(Protocol):
    """Token → identity attributes capability (replaces a module-level dict)."""
    def remember(
        self, token: str, login_id: str | None, login_type: str | None,
    ) -> TokenSession | None: ...
    def get(self, token: str) -> TokenSession | None: ...
    def clear(self, token: str) -> bool: ...
    def evict_expired(self) -> int: ...


class UpstreamAuth(Protocol):
    """Contract for the upstream identity provider — implemented by shell."""
    async def login(self, email: str, password: str) -> Any: ...
    async def verify(
        self, token: str, login_id: str | None = None, login_type: str | None = None,
    ) -> Any: ...


class ProcedureRunner(Protocol):
    """Contract for running one stored procedure call — implemented by shell."""
    async def execute(self, call: ProcedureCall) -> list: ...
