"""Identity Context — pure helpers for bearer tokens and upstream identity attributes.

Invariants:
    - extract_bearer_token returns None for absent OR malformed headers (never raises)
    - Attribute precedence: remembered session → caller hints → configured default
    - The verify payload is {loginID, loginty} only when both values are known, else {}
    - Token/attribute lookup in upstream payloads checks the top level, then `data`

Design Decisions:
    - Pure functions here, IO in services/session_bridge.py (ADR: ExMA impureim sandwich)
"""

from typing import Any

from procgate.core.domain_types import TokenSession

_TOKEN_KEYS = ("token", "accessToken", "access_token")
_LOGIN_ID_KEYS = ("loginID", "loginId", "login_id", "LoginID")
_LOGIN_TYPE_KEYS = ("loginty", "loginType", "login_type", "LoginType")


def extract_bearer_token(authorization: str | None) -> str | None:
    """`Bearer <token>` → token; anything else → None."""
    if not authorization:
        return None
    parts = authorization.split(" ")
    if len(parts) != 2 or parts[0] != "Bearer" or not parts[1]:
        return None
    return parts[1]


def resolve_login_attributes(
    session: TokenSession | None,
    hinted_login_id: str | None,
    hinted_login_type: str | None,
    default_login_type: str | None,
) -> tuple[str | None, str | None]:
    """(login_id, login_type) for the verify call, by precedence."""
    login_id = (session.login_id if session else None) or hinted_login_id
    login_type = (
        (session.login_type if session else None)
        or hinted_login_type
        or default_login_type
    )
    return login_id, login_type


def build_verify_payload(login_id: str | None, login_type: str | None) -> dict[str, str]:
    if login_id and login_type:
        return {"loginID": str(login_id), "loginty": str(login_type)}
    return {}


def _first_value(payload: Any, keys: tuple[str, ...]) -> Any:
    if not isinstance(payload, dict):
        return None
    for scope in (payload, payload.get("data")):
        if not isinstance(scope, dict):
            continue
        for key in keys:
            value = scope.get(key)
            if value not in (None, ""):
                return value
    return None


def extract_upstream_identity(payload: Any) -> tuple[str | None, str | None, str | None]:
    """(token, login_id, login_type) from an upstream login response."""
    token = _first_value(payload, _TOKEN_KEYS)
    login_id = _first_value(payload, _LOGIN_ID_KEYS)
    login_type = _first_value(payload, _LOGIN_TYPE_KEYS)
    return (
        str(token) if token is not None else None,
        str(login_id) if login_id is not None else None,
        str(login_type) if login_type is not None else None,
    )
