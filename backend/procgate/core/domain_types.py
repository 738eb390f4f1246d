"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - Y/N flags are always Flag members once past validation — never raw strings
    - TokenSession and IdentityContext are immutable (frozen dataclasses)

Design Decisions:
    - str Enums: serialize to JSON and compare against DB strings without custom encoders
    - NewType for token/login ids: zero runtime cost, full type-checker support
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, NewType


# ─── Identity Types ──────────────────────────────────────────────

BearerToken = NewType("BearerToken", str)
LoginId = NewType("LoginId", str)


# ─── Enums ───────────────────────────────────────────────────────

class Flag(str, Enum):
    """Two-value flag stored in IsDebugEnabled / IsActive columns."""
    YES = "Y"
    NO = "N"


# ─── Value Objects ───────────────────────────────────────────────

@dataclass(frozen=True)
class TokenSession:
    """Identity attributes remembered for a bearer token after upstream login."""
    login_id: str | None
    login_type: str | None
    stored_at: float


@dataclass(frozen=True)
class IdentityContext:
    """Verified caller identity attached to a protected request."""
    token: BearerToken
    login_id: str | None
    login_type: str | None
    claims: Any = field(default=None, compare=False)
