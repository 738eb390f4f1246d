"""Session Bridge — login bookkeeping and per-request live verification.

Invariants:
    - Login remembers attributes only when upstream returned a token
    - Upstream verify runs on every authenticate() call, cached session or not
    - Attribute precedence: session → hints → default login type
"""

import pytest

from procgate.core.errors import AuthError, UpstreamError
from procgate.services.session_bridge import SessionBridge
from tests.services.fakes import FakeUpstream


async def test_login_remembers_token_session(session_bridge, token_store, fake_upstream):
    result = await session_bridge.login("ada@example.com", "secret")

    assert result.token == "tok-123"
    assert result.login_id == "42"
    assert result.login_type == "ADMIN"
    assert result.upstream_response == fake_upstream.login_response
    assert fake_upstream.login_calls == [("ada@example.com", "secret")]
    assert token_store.get("tok-123").login_id == "42"


async def test_login_reads_identity_nested_under_data(token_store):
    upstream = FakeUpstream(login_response={
        "data": {"accessToken": "tok-9", "loginId": 7},
    })
    bridge = SessionBridge(token_store, upstream, default_login_type="USER")

    result = await bridge.login("a@b.c", "pw")

    assert result.token == "tok-9"
    assert result.login_id == "7"
    assert result.login_type == "USER"
    assert token_store.get("tok-9").login_type == "USER"


async def test_login_without_token_is_upstream_error(token_store):
    upstream = FakeUpstream(login_response={"message": "welcome"})
    bridge = SessionBridge(token_store, upstream)

    with pytest.raises(UpstreamError):
        await bridge.login("a@b.c", "pw")
    assert len(token_store) == 0


async def test_authenticate_uses_remembered_attributes(session_bridge, fake_upstream):
    await session_bridge.login("ada@example.com", "secret")

    identity = await session_bridge.authenticate(
        "tok-123", login_id_hint="999", login_type_hint="GUEST",
    )

    assert identity.login_id == "42"
    assert identity.login_type == "ADMIN"
    assert identity.claims == {"user": "ada"}
    assert fake_upstream.verify_calls[-1] == {
        "token": "tok-123", "login_id": "42", "login_type": "ADMIN",
    }


async def test_authenticate_falls_back_to_hints_then_default(session_bridge, fake_upstream):
    identity = await session_bridge.authenticate("tok-123", login_id_hint="5")

    assert identity.login_id == "5"
    assert identity.login_type == "USER"


async def test_authenticate_verifies_on_every_call(session_bridge, fake_upstream):
    await session_bridge.login("ada@example.com", "secret")

    await session_bridge.authenticate("tok-123")
    await session_bridge.authenticate("tok-123")

    assert len(fake_upstream.verify_calls) == 2


async def test_rejected_token_raises_auth_error(session_bridge):
    with pytest.raises(AuthError):
        await session_bridge.authenticate("stale-token")


async def test_missing_token_gives_null_identity(session_bridge, fake_upstream):
    assert await session_bridge.authenticate(None) is None
    assert fake_upstream.verify_calls == []


async def test_missing_token_rejected_when_required(token_store, fake_upstream):
    bridge = SessionBridge(token_store, fake_upstream, require_bearer_token=True)

    with pytest.raises(AuthError):
        await bridge.authenticate(None)


async def test_logout_clears_session(session_bridge, token_store):
    await session_bridge.login("ada@example.com", "secret")

    assert session_bridge.logout("tok-123") is True
    assert token_store.get("tok-123") is None
    assert session_bridge.logout("tok-123") is False
    assert session_bridge.logout(None) is False
