"""Error Hierarchy — typed, kind-tagged exceptions for every gateway failure mode.

Invariants:
    - Every error carries a code (str), a kind (ErrorKind) and a severity (ErrorSeverity)
    - The HTTP status is never stored on the error; api/error_handlers.py switches on kind
    - Client-facing messages never include driver internals (ExecutionError keeps
      procedure name and parameters for logs, not for the response)

Design Decisions:
    - Single hierarchy with GatewayError base: one FastAPI handler catches all (ADR: uniform error shape)
    - ErrorKind enum over message matching: status mapping survives message rewording
    - ErrorContext as dataclass: rich observability without coupling to logging framework
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any
from datetime import datetime, timezone


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorKind(str, Enum):
    """Failure kinds — the boundary maps each one to exactly one HTTP status."""
    VALIDATION = "validation"
    INVALID_FLAG = "invalid_flag"
    INVALID_IDENTIFIER = "invalid_identifier"
    INVALID_PAYLOAD = "invalid_payload"
    DUPLICATE = "duplicate"
    AMBIGUOUS = "ambiguous"
    NOT_FOUND = "not_found"
    AUTH = "auth"
    UPSTREAM = "upstream"
    EXECUTION = "execution"
    DATABASE = "database"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    project_name: str | None = None
    module_name: str | None = None
    function_name: str | None = None
    procedure_name: str | None = None
    debug_info: dict[str, Any] | None = None


class GatewayError(Exception):
    """Base exception for all gateway errors."""

    def __init__(
        self,
        message: str,
        code: str,
        kind: ErrorKind,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
        details: Any = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.kind = kind
        self.severity = severity
        self.context = context or ErrorContext()
        self.details = details

    def to_response(self) -> dict:
        """Convert to the gateway failure envelope."""
        body: dict[str, Any] = {
            "success": False,
            "code": self.code,
            "message": self.message,
        }
        if self.details is not None:
            body["details"] = self.details
        return body


# ─── Client Errors (400-level) ──────────────────────────────────

class ValidationError(GatewayError):
    """Request input is malformed or incomplete."""
    def __init__(
        self,
        message: str,
        missing_fields: list[str] | None = None,
        context: ErrorContext | None = None,
    ):
        super().__init__(
            message, "VALIDATION_ERROR", ErrorKind.VALIDATION,
            ErrorSeverity.ERROR, context,
            details={"missing_fields": missing_fields} if missing_fields else None,
        )
        self.missing_fields = missing_fields or []


class InvalidFlagError(GatewayError):
    """A Y/N flag field holds something other than Y or N."""
    def __init__(self, field_name: str, value: Any, context: ErrorContext | None = None):
        super().__init__(
            f'Flag values must be either "Y" or "N" ({field_name}={value!r}).',
            "INVALID_FLAG", ErrorKind.INVALID_FLAG,
            ErrorSeverity.ERROR, context,
        )
        self.field_name = field_name
        self.value = value


class InvalidIdentifierError(GatewayError):
    """Procedure name cannot be turned into a safe call statement."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "INVALID_IDENTIFIER", ErrorKind.INVALID_IDENTIFIER,
            ErrorSeverity.ERROR, context,
        )


class InvalidPayloadError(GatewayError):
    """Data payload is neither empty, a sequence, nor a mapping."""
    def __init__(self, received_type: str, context: ErrorContext | None = None):
        super().__init__(
            "Invalid data payload. Expected an object or array.",
            "INVALID_PAYLOAD", ErrorKind.INVALID_PAYLOAD,
            ErrorSeverity.ERROR, context,
            details={"received_type": received_type},
        )
        self.received_type = received_type


class DuplicateDefinitionError(GatewayError):
    """(project, module, function) is already registered."""
    def __init__(
        self, project_name: str, module_name: str, function_name: str,
        context: ErrorContext | None = None,
    ):
        super().__init__(
            "API definition already exists.",
            "DUPLICATE_DEFINITION", ErrorKind.DUPLICATE,
            ErrorSeverity.WARNING, context,
            details={
                "projectName": project_name,
                "moduleName": module_name,
                "functionName": function_name,
            },
        )


class AmbiguousDefinitionError(GatewayError):
    """More than one active definition matches the lookup."""
    def __init__(self, match_count: int, context: ErrorContext | None = None):
        super().__init__(
            "Multiple API definitions found. Please specify a unique FunctionName.",
            "AMBIGUOUS_DEFINITION", ErrorKind.AMBIGUOUS,
            ErrorSeverity.WARNING, context,
            details={"matches": match_count},
        )
        self.match_count = match_count


class DefinitionNotFoundError(GatewayError):
    """No active definition matches the lookup."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "Active API definition not found.",
            "DEFINITION_NOT_FOUND", ErrorKind.NOT_FOUND,
            ErrorSeverity.WARNING, context,
        )


class AuthError(GatewayError):
    """Bearer token missing, invalid or expired."""
    def __init__(
        self,
        message: str = "Invalid or expired authorization token.",
        context: ErrorContext | None = None,
    ):
        super().__init__(
            message, "AUTH_ERROR", ErrorKind.AUTH,
            ErrorSeverity.WARNING, context,
        )


# ─── Infrastructure Errors (500-level) ──────────────────────────

class UpstreamError(GatewayError):
    """Upstream identity provider call failed.

    upstream_status is the provider's own HTTP status when it answered at all;
    the boundary forwards it when it is a more specific 4xx.
    """
    def __init__(
        self,
        message: str,
        upstream_status: int | None = None,
        details: Any = None,
        context: ErrorContext | None = None,
    ):
        super().__init__(
            message, "UPSTREAM_ERROR", ErrorKind.UPSTREAM,
            ErrorSeverity.ERROR, context, details=details,
        )
        self.upstream_status = upstream_status


class ExecutionError(GatewayError):
    """Stored procedure call failed in the database or driver. Never retried."""
    def __init__(
        self,
        procedure_name: str,
        parameters: list[Any],
        cause: str,
        context: ErrorContext | None = None,
    ):
        ctx = context or ErrorContext()
        ctx.procedure_name = procedure_name
        super().__init__(
            f"Stored procedure '{procedure_name}' failed: {cause}",
            "EXECUTION_ERROR", ErrorKind.EXECUTION,
            ErrorSeverity.CRITICAL, ctx,
        )
        self.procedure_name = procedure_name
        self.parameters = parameters
        self.cause = cause

    def to_response(self) -> dict:
        """Sanitized envelope — driver message and parameters stay in the logs."""
        return {
            "success": False,
            "code": self.code,
            "message": "Stored procedure execution failed.",
            "details": {"procedure": self.procedure_name},
        }


class DatabaseError(GatewayError):
    """Registry database operation failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorKind.DATABASE,
            ErrorSeverity.CRITICAL, context,
        )
        self.operation = operation
