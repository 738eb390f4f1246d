"""Procedure Gateway — payload binding, debug flag and result shaping."""

import pytest

from procgate.core.build_call import RawCallExpression, SimpleName
from procgate.core.errors import InvalidIdentifierError, InvalidPayloadError
from procgate.models.api_definition import ApiDefinition
from procgate.services.definition_registry import DefinitionRegistry
from procgate.services.procedure_service import ProcedureGateway, build_procedure_call
from tests.services.fakes import FakeRunner


def make_definition(**overrides) -> ApiDefinition:
    fields = {
        "project_name": "Shop",
        "module_name": "Orders",
        "function_name": "Save",
        "procedure_name": "sales.usp_SaveOrder",
        "is_debug_enabled": "N",
        "is_active": "Y",
    }
    fields.update(overrides)
    return ApiDefinition(**fields)


def test_sequence_payload_binds_positionally():
    call = build_procedure_call(make_definition(), [1, "two", {"three": 3}])

    assert call.procedure == SimpleName("usp_SaveOrder", schema="sales")
    assert call.parameters == (1, "two", '{"three": 3}')
    assert call.statement("%s") == "CALL `sales`.`usp_SaveOrder`(%s, %s, %s)"
    assert call.debug is False


def test_mapping_payload_is_one_json_parameter():
    call = build_procedure_call(make_definition(), {"id": 5, "name": "Ünï"})
    assert call.parameters == ('{"id": 5, "name": "Ünï"}',)


def test_empty_payload_gives_zero_argument_call():
    call = build_procedure_call(make_definition(), None)
    assert call.parameters == ()
    assert call.statement() == "CALL `sales`.`usp_SaveOrder`()"


def test_debug_flag_enables_tracing():
    call = build_procedure_call(make_definition(is_debug_enabled="Y"), None)
    assert call.debug is True


def test_raw_call_expression_is_used_verbatim():
    call = build_procedure_call(
        make_definition(procedure_name="usp_Report(1)"), None,
    )
    assert isinstance(call.procedure, RawCallExpression)
    assert call.statement() == "CALL usp_Report(1)"


def test_scalar_payload_rejected():
    with pytest.raises(InvalidPayloadError):
        build_procedure_call(make_definition(), 42)


def test_bad_procedure_name_rejected():
    with pytest.raises(InvalidIdentifierError):
        build_procedure_call(make_definition(procedure_name="usp; DROP TABLE x"), None)


async def test_execute_returns_envelope_with_normalized_data(test_db):
    registry = DefinitionRegistry(test_db)
    await registry.create({
        "project_name": "Shop", "module_name": "Orders", "function_name": "List",
        "procedure_name": "usp_ListOrders", "is_debug_enabled": "n", "is_active": "y",
        "api_description": "List orders", "app_server_file_path": "/srv/orders.py",
        "owner": "ada", "update_by": "ada",
    })
    runner = FakeRunner(result=[[{"id": 1}, {"id": 2}], {"affected_rows": 0}])
    gateway = ProcedureGateway(registry, runner)

    response = await gateway.execute("Shop", "Orders", None, [10])

    assert response == {
        "success": True,
        "metadata": {
            "projectName": "Shop",
            "moduleName": "Orders",
            "functionName": "List",
            "procedureName": "usp_ListOrders",
        },
        "data": [{"id": 1}, {"id": 2}],
    }
    assert runner.calls[0].parameters == (10,)


async def test_payload_error_raised_before_runner(test_db):
    registry = DefinitionRegistry(test_db)
    await registry.create({
        "project_name": "Shop", "module_name": "Orders", "function_name": "List",
        "procedure_name": "usp_ListOrders", "is_debug_enabled": "N", "is_active": "Y",
        "api_description": "List orders", "app_server_file_path": "/srv/orders.py",
        "owner": "ada", "update_by": "ada",
    })
    runner = FakeRunner()
    gateway = ProcedureGateway(registry, runner)

    with pytest.raises(InvalidPayloadError):
        await gateway.execute("Shop", "Orders", "List", "just a string")
    assert runner.calls == []
