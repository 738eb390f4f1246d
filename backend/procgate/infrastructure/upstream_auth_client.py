"""Upstream Auth Client — wraps httpx.AsyncClient for the external identity provider.

Invariants:
    - Every request carries the fixed header set and the configured timeout (10 s default)
    - Non-2xx and non-JSON responses are failures; nothing is retried
    - verify(): 401/403 from upstream → AuthError; any other failure → UpstreamError
    - login(): every failure → UpstreamError carrying the upstream status when there is one

Design Decisions:
    - Wrapper over raw client: isolates header/timeout/error mapping from the session bridge
      (ADR: single responsibility)
    - One shared AsyncClient per process (connection reuse); closed from the lifespan
    - transport argument exists for httpx.MockTransport in tests
"""

import logging
from typing import Any

import httpx

from procgate.core.errors import AuthError, UpstreamError
from procgate.core.identity_context import build_verify_payload

logger = logging.getLogger(__name__)

_REJECTED_TOKEN_STATUSES = (401, 403)
_MAX_LOGGED_BODY = 500


def _response_details(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return response.text[:_MAX_LOGGED_BODY]


class UpstreamAuthClient:
    """Login and token verification against the upstream identity provider."""

    def __init__(
        self,
        login_url: str,
        verify_url: str,
        timeout_seconds: float = 10.0,
        origin: str | None = None,
        user_agent: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.login_url = login_url
        self.verify_url = verify_url
        headers = {
            "Content-Type": "application/json",
            "Accept": "application/json, text/plain, */*",
        }
        if origin:
            headers["Origin"] = origin
            headers["Referer"] = origin.rstrip("/") + "/"
        if user_agent:
            headers["User-Agent"] = user_agent
        self.client = httpx.AsyncClient(
            headers=headers, timeout=timeout_seconds, transport=transport,
        )

    async def login(self, email: str, password: str) -> Any:
        """POST credentials upstream; return the decoded identity payload."""
        try:
            response = await self.client.post(
                self.login_url, json={"email": email, "password": password},
            )
        except httpx.HTTPError as e:
            logger.warning(f"Upstream login failed: {e}")
            raise UpstreamError("Upstream authentication failed.", details=str(e)) from e

        if not response.is_success:
            details = _response_details(response)
            logger.warning(
                "Upstream login failed.",
                extra={"status": response.status_code},
            )
            raise UpstreamError(
                "Upstream authentication failed.",
                upstream_status=response.status_code,
                details=details,
            )
        return self._decode(response, "Upstream authentication failed.")

    async def verify(
        self, token: str, login_id: str | None = None, login_type: str | None = None,
    ) -> Any:
        """Live verification of a bearer token; returns upstream identity attributes."""
        if not token:
            raise AuthError("Authorization token missing.")

        try:
            response = await self.client.post(
                self.verify_url,
                json=build_verify_payload(login_id, login_type),
                headers={"Authorization": f"Bearer {token}"},
            )
        except httpx.HTTPError as e:
            logger.warning(f"Upstream token verification failed: {e}")
            raise UpstreamError(
                "Upstream token verification failed.", details=str(e),
            ) from e

        if response.status_code in _REJECTED_TOKEN_STATUSES:
            logger.warning(
                "Upstream rejected bearer token.",
                extra={"status": response.status_code, "login_type": login_type},
            )
            raise AuthError()
        if not response.is_success:
            logger.warning(
                "Upstream token verification failed.",
                extra={"status": response.status_code, "login_type": login_type},
            )
            raise UpstreamError(
                "Upstream token verification failed.",
                upstream_status=response.status_code,
                details=_response_details(response),
            )
        return self._decode(response, "Upstream token verification failed.")

    async def aclose(self) -> None:
        await self.client.aclose()

    @staticmethod
    def _decode(response: httpx.Response, message: str) -> Any:
        try:
            return response.json()
        except ValueError as e:
            raise UpstreamError(
                message,
                upstream_status=response.status_code,
                details="Upstream returned a non-JSON body.",
            ) from e
