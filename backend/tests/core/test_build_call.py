"""Call Builder — tests for identifier sanitizing and CALL statement rendering.

Tests cover:
    - simple and schema-qualified names are backtick-quoted per segment
    - one placeholder per parameter, empty parentheses for zero
    - raw call expressions pass through verbatim
    - rejected names: missing, non-string, blank, bad characters, empty segments
    - ProcedureCall renders with the driver placeholder and never embeds values
"""

import pytest

from procgate.core.build_call import (
    ProcedureCall,
    RawCallExpression,
    SimpleName,
    build_call,
    parse_procedure_name,
    placeholder_for,
)
from procgate.core.errors import ErrorKind, InvalidIdentifierError


# ─── build_call ──────────────────────────────────────────────────

def test_simple_name_gets_one_placeholder_per_parameter():
    assert build_call("myProc", 3) == "CALL `myProc`(?, ?, ?)"


def test_schema_qualified_name_with_zero_parameters():
    assert build_call("schema.myProc", 0) == "CALL `schema`.`myProc`()"


@pytest.mark.parametrize("count", [0, 2, 5])
def test_raw_call_expression_passes_through_verbatim(count):
    assert build_call("myProc(1,2)", count) == "CALL myProc(1,2)"


def test_raw_call_expression_may_contain_spaces_and_qualified_name():
    assert build_call("sales.usp_Report(1, 2, abc)", 0) == "CALL sales.usp_Report(1, 2, abc)"


@pytest.mark.parametrize(
    "name",
    ["p(1);DROP TABLE x", "p(`x`)", "p(1)) OR (1", "p('1')", "p(1", "(1,2)", "p(1)x"],
)
def test_raw_call_expressions_with_unsafe_text_are_rejected(name):
    with pytest.raises(InvalidIdentifierError):
        build_call(name, 0)


def test_surrounding_whitespace_is_trimmed():
    assert build_call("  usp_GetUsers \n", 1) == "CALL `usp_GetUsers`(?)"


def test_custom_placeholder_token():
    assert build_call("db.proc", 2, placeholder="%s") == "CALL `db`.`proc`(%s, %s)"


def test_negative_parameter_count_is_a_programming_error():
    with pytest.raises(ValueError):
        build_call("myProc", -1)


@pytest.mark.parametrize(
    "name",
    ["bad name!", "proc;DROP TABLE x", "proc`", "proc-name", "proc'1'", "p/*x*/"],
)
def test_names_with_unsupported_characters_are_rejected(name):
    with pytest.raises(InvalidIdentifierError) as exc_info:
        build_call(name, 0)
    assert exc_info.value.kind == ErrorKind.INVALID_IDENTIFIER


@pytest.mark.parametrize("name", [None, "", "   ", 42, ["proc"]])
def test_missing_blank_or_non_string_names_are_rejected(name):
    with pytest.raises(InvalidIdentifierError):
        build_call(name, 0)


@pytest.mark.parametrize("name", [".proc", "schema.", "a..b"])
def test_empty_segments_are_rejected(name):
    with pytest.raises(InvalidIdentifierError):
        build_call(name, 0)


def test_more_than_schema_and_name_is_rejected():
    with pytest.raises(InvalidIdentifierError):
        build_call("a.b.c", 0)


# ─── parse_procedure_name ────────────────────────────────────────

def test_parse_bare_name():
    assert parse_procedure_name("proc") == SimpleName("proc")


def test_parse_schema_name():
    assert parse_procedure_name("sales.proc") == SimpleName("proc", schema="sales")


def test_parse_raw_expression():
    assert parse_procedure_name(" sales.proc(1) ") == RawCallExpression("sales.proc(1)")


# ─── placeholder_for ─────────────────────────────────────────────

def test_placeholder_for_known_paramstyles():
    assert placeholder_for("qmark") == "?"
    assert placeholder_for("format") == "%s"
    assert placeholder_for("pyformat") == "%s"


def test_placeholder_for_unknown_or_missing_paramstyle_defaults_to_qmark():
    assert placeholder_for(None) == "?"
    assert placeholder_for("numeric") == "?"


# ─── ProcedureCall ───────────────────────────────────────────────

def test_procedure_call_statement_contains_no_parameter_values():
    call = ProcedureCall(
        SimpleName("proc"), ("'; DROP TABLE users; --", 7), debug=False,
    )
    statement = call.statement("%s")
    assert statement == "CALL `proc`(%s, %s)"
    assert "DROP" not in statement


def test_procedure_call_display_name():
    assert ProcedureCall(SimpleName("p", schema="s")).display_name == "s.p"
    assert ProcedureCall(SimpleName("p")).display_name == "p"
    assert ProcedureCall(RawCallExpression("p(1)")).display_name == "p(1)"


def test_procedure_call_is_immutable():
    call = ProcedureCall(SimpleName("p"), (1,))
    with pytest.raises(AttributeError):
        call.debug = True


def test_raw_call_expression_binds_no_parameters():
    call = ProcedureCall(RawCallExpression("p(1)"), ("x", 2))
    assert call.bound_parameters == ()
    assert call.statement("%s") == "CALL p(1)"


def test_simple_name_binds_every_parameter():
    call = ProcedureCall(SimpleName("p"), ("x", 2))
    assert call.bound_parameters == ("x", 2)
