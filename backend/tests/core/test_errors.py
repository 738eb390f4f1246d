"""Error Hierarchy — tests for kinds, codes and client envelopes."""

from procgate.core.errors import (
    AuthError,
    DuplicateDefinitionError,
    ErrorKind,
    ExecutionError,
    GatewayError,
    InvalidPayloadError,
    UpstreamError,
)


def test_every_error_is_a_gateway_error_with_kind():
    for err in (
        AuthError(),
        InvalidPayloadError("str"),
        DuplicateDefinitionError("P", "M", "F"),
        UpstreamError("down"),
    ):
        assert isinstance(err, GatewayError)
        assert isinstance(err.kind, ErrorKind)


def test_failure_envelope_shape():
    body = DuplicateDefinitionError("P", "M", "F").to_response()
    assert body["success"] is False
    assert body["code"] == "DUPLICATE_DEFINITION"
    assert body["message"] == "API definition already exists."
    assert body["details"]["functionName"] == "F"


def test_envelope_omits_details_when_absent():
    assert "details" not in AuthError().to_response()


def test_execution_error_keeps_diagnostics_but_sanitizes_response():
    err = ExecutionError("usp_Save", [1, "secret"], "Table 'x' doesn't exist")
    assert err.procedure_name == "usp_Save"
    assert err.parameters == [1, "secret"]
    assert "doesn't exist" in err.message
    body = err.to_response()
    assert "doesn't exist" not in body["message"]
    assert "secret" not in str(body)
    assert body["details"] == {"procedure": "usp_Save"}


def test_upstream_error_carries_upstream_status():
    assert UpstreamError("bad creds", upstream_status=401).upstream_status == 401
