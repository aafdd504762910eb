import asyncio
import json
from unittest.mock import MagicMock

import pytest
from pydantic import ValidationError

from sandbox.executor import ExecutionResult, SandboxExecutor
from sandbox.failures import FailureType
from workshop.config import WorkshopConfig
from workshop.schemas import QueryFailure, QueryRequest, QuerySuccess
from workshop.service import CourseNotPermitted, WorkshopService, to_response


def test_sql_course_success_shape() -> None:
    service = WorkshopService()
    response = service.execute(
        {"query": "SELECT name FROM departments WHERE location = 'Stark Tower'", "course": "sql"}
    )

    assert isinstance(response, QuerySuccess)
    payload = response.to_dict()
    assert list(payload.keys()) == ["success", "results", "executionTime", "rowCount"]
    assert payload["success"] is True
    assert payload["results"] == [{"name": "Management"}, {"name": "Security"}]
    assert payload["rowCount"] == 2


def test_failure_shape() -> None:
    service = WorkshopService()
    response = service.execute(QueryRequest(query="DROP TABLE employees", course="sql"))

    assert isinstance(response, QueryFailure)
    payload = response.to_dict()
    assert payload["success"] is False
    assert payload["results"] is None
    assert "Security protocol" in str(payload["error"])


def test_other_course_never_reaches_sandbox() -> None:
    executor = MagicMock(spec=SandboxExecutor)
    service = WorkshopService(executor=executor)

    with pytest.raises(CourseNotPermitted) as excinfo:
        _ = service.execute({"query": "SELECT 1", "course": "python"})

    assert excinfo.value.course == "python"
    executor.run.assert_not_called()


def test_configured_course_is_honoured() -> None:
    service = WorkshopService(WorkshopConfig(course="databases"))
    assert isinstance(service.execute({"query": "SELECT 1", "course": "databases"}), QuerySuccess)
    with pytest.raises(CourseNotPermitted):
        _ = service.execute({"query": "SELECT 1", "course": "sql"})


def test_config_timeout_reaches_executor() -> None:
    service = WorkshopService(WorkshopConfig(timeout_ms=1234))
    assert service.executor.timeout_ms == 1234


def test_malformed_request_is_a_validation_error() -> None:
    with pytest.raises(ValidationError):
        _ = WorkshopService().execute({"course": "sql"})


def test_execute_async() -> None:
    service = WorkshopService()
    response = asyncio.run(
        service.execute_async({"query": "SELECT COUNT(*) AS n FROM employees", "course": "sql"})
    )
    assert isinstance(response, QuerySuccess)
    assert response.results == [{"n": 9}]


def test_execute_async_checks_course() -> None:
    with pytest.raises(CourseNotPermitted):
        _ = asyncio.run(WorkshopService().execute_async({"query": "SELECT 1", "course": "react"}))


def test_run_many_gives_each_query_its_own_fixture() -> None:
    service = WorkshopService(WorkshopConfig(max_workers=4))
    results = service.run_many(["SELECT * FROM products ORDER BY id"] * 8)
    assert len(results) == 8
    assert all(result.success for result in results)
    assert all(result.rows == results[0].rows for result in results)


def test_schema_wire_shape() -> None:
    schema = WorkshopService().schema()
    assert sorted(schema) == ["departments", "employees", "orders", "products"]
    assert schema["orders"][2] == {
        "name": "product_id",
        "type": "INTEGER",
        "isPrimaryKey": False,
        "isNotNull": True,
    }


def test_to_response_success_shape() -> None:
    result = ExecutionResult(success=True, rows=[{"one": 1}], row_count=1, elapsed_ms=3)
    assert to_response(result).to_dict() == {
        "success": True,
        "results": [{"one": 1}],
        "executionTime": 3,
        "rowCount": 1,
    }


def test_to_response_failure_shape() -> None:
    result = ExecutionResult.failed(FailureType.ENGINE_ERROR, "SQL error detected - boom")
    assert to_response(result).to_dict() == {
        "success": False,
        "error": "SQL error detected - boom",
        "results": None,
    }


def test_blob_values_serialize_to_json() -> None:
    response = WorkshopService().execute({"query": "SELECT X'FF' AS b, 'x' AS s", "course": "sql"})

    assert isinstance(response, QuerySuccess)
    assert response.results == [{"b": b"\xff", "s": "x"}]
    payload = json.loads(response.to_json())
    assert payload["results"] == [{"b": "ff", "s": "x"}]
    assert payload["rowCount"] == 1
