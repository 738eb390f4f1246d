"""Call Builder — turns a procedure name and parameter count into a safe CALL statement.

Invariants:
    - Simple names are limited to [A-Za-z0-9_.] after trimming; anything else raises InvalidIdentifierError
    - A name containing "(" must read name(arg, ...) with literal-safe arguments
      ([A-Za-z0-9_.,] and spaces); it is then emitted verbatim as a raw call expression
    - A raw call expression binds no parameters: its argument list is fixed in the text
    - ProcedureCall owns its parameters as a tuple (no caller can mutate them)
    - Simple names are backtick-quoted per dot-separated segment
    - Parameter values never reach statement text — only placeholder tokens do

Design Decisions:
    - Tagged variant (SimpleName | RawCallExpression) over a re-inspected string:
      the decision "raw or simple" is made once, in parse_procedure_name
    - Placeholder token is an argument: "?" by default, "%s" for format-style drivers
      (ADR: the executor picks it from the dialect paramstyle)
"""

import re
from dataclasses import dataclass
from typing import Any

from procgate.core.errors import InvalidIdentifierError

_SIMPLE_NAME = re.compile(r"^[A-Za-z0-9_.]+$")
_RAW_CALL = re.compile(r"^[A-Za-z0-9_.]+\([A-Za-z0-9_.,\s]*\)$")

_PLACEHOLDERS = {
    "qmark": "?",
    "format": "%s",
    "pyformat": "%s",
}


@dataclass(frozen=True)
class SimpleName:
    """schema.name or bare name — quoted and given one placeholder per parameter."""
    name: str
    schema: str | None = None

    def render(self, parameter_count: int, placeholder: str = "?") -> str:
        segments = [self.schema, self.name] if self.schema else [self.name]
        quoted = ".".join(f"`{segment}`" for segment in segments)
        placeholders = ", ".join([placeholder] * parameter_count)
        return f"CALL {quoted}({placeholders})"


@dataclass(frozen=True)
class RawCallExpression:
    """Fully-formed call expression such as myProc(1,2) — emitted as-is."""
    text: str

    def render(self, parameter_count: int, placeholder: str = "?") -> str:
        return f"CALL {self.text}"


ProcedureName = SimpleName | RawCallExpression


@dataclass(frozen=True)
class ProcedureCall:
    """Immutable call request: parsed name, sanitized parameters, debug flag."""
    procedure: ProcedureName
    parameters: tuple[Any, ...] = ()
    debug: bool = False

    @property
    def display_name(self) -> str:
        if isinstance(self.procedure, RawCallExpression):
            return self.procedure.text
        if self.procedure.schema:
            return f"{self.procedure.schema}.{self.procedure.name}"
        return self.procedure.name

    @property
    def bound_parameters(self) -> tuple[Any, ...]:
        """Values handed to the driver; a raw call expression carries its own arguments."""
        if isinstance(self.procedure, RawCallExpression):
            return ()
        return self.parameters

    def statement(self, placeholder: str = "?") -> str:
        return self.procedure.render(len(self.parameters), placeholder)


def parse_procedure_name(raw: Any) -> ProcedureName:
    """Validate a stored procedure name and classify it."""
    if not raw or not isinstance(raw, str):
        raise InvalidIdentifierError("Invalid procedure name provided.")

    trimmed = raw.strip()
    if not trimmed:
        raise InvalidIdentifierError("Invalid procedure name provided.")
    if "(" in trimmed:
        if not _RAW_CALL.match(trimmed):
            raise InvalidIdentifierError("Procedure name contains unsupported characters.")
        return RawCallExpression(trimmed)
    if not _SIMPLE_NAME.match(trimmed):
        raise InvalidIdentifierError("Procedure name contains unsupported characters.")

    segments = trimmed.split(".")
    if any(not segment for segment in segments):
        raise InvalidIdentifierError("Procedure name contains an empty segment.")
    if len(segments) == 1:
        return SimpleName(segments[0])
    if len(segments) == 2:
        return SimpleName(segments[1], schema=segments[0])
    raise InvalidIdentifierError("Procedure name must be <name> or <schema>.<name>.")


def placeholder_for(paramstyle: str | None) -> str:
    """Placeholder token for a DB-API paramstyle (unknown styles fall back to "?")."""
    return _PLACEHOLDERS.get(paramstyle or "qmark", "?")


def build_call(procedure_name: Any, parameter_count: int, placeholder: str = "?") -> str:
    """Build `CALL ...` text for procedure_name with parameter_count placeholders."""
    if parameter_count < 0:
        raise ValueError("parameter_count must be non-negative")
    return parse_procedure_name(procedure_name).render(parameter_count, placeholder)
