"""Unit tests for the shared error response handlers."""

from __future__ import annotations

import logging

from fastapi import Depends
import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from starlette.exceptions import HTTPException as StarletteHTTPException

from service_common.core.errors import register_error_handlers
from service_common.core.exceptions import MediaTypeNotSupportedError
from service_common.core.exceptions import NotFoundError
from service_common.core.exceptions import ServiceError
from service_common.core.media_types import require_accept
from service_common.metadata.deployment import DeploymentContext
from service_common.validation.validators import BindingResult
from service_common.validation.validators import BindingResultError

EXPECTED_RESOURCE = {
    "datacenter": "MyOwn",
    "environment": "prod",
    "region": "us-east-1",
    "name": "svc",
    "version": "1.0",
}


def _deployment() -> DeploymentContext:
    return DeploymentContext(
        name="svc",
        version="1.0",
        datacenter="MyOwn",
        environ={"CLOUD_ENVIRONMENT": "prod", "EC2_REGION": "us-east-1"},
    )


def _build_client() -> TestClient:
    app = FastAPI()
    register_error_handlers(app, _deployment())

    @app.get("/query")
    def query(limit: int) -> dict[str, int]:
        return {"limit": limit}

    @app.get("/not-found")
    def not_found() -> None:
        raise NotFoundError("Pipeline not found", error_code="PIPELINE_NOT_FOUND")

    @app.get("/domain")
    def domain_error() -> None:
        error = ServiceError("Invalid run payload", http_status=400, error_code="INVALID_RUN")
        error.add_field_error("status", "Unsupported value", code="ENUM")
        raise error

    @app.get("/binding")
    def binding_error() -> None:
        result = BindingResult("runCreate")
        result.reject_value("status", "must not be null")
        raise BindingResultError(result)

    @app.get("/http")
    def http_error() -> None:
        raise StarletteHTTPException(status_code=409, detail="Client already exists")

    @app.get("/media", dependencies=[Depends(require_accept("application/json"))])
    def media() -> dict[str, str]:
        return {"ok": "yes"}

    @app.post("/upload")
    def upload() -> None:
        raise MediaTypeNotSupportedError("Content type 'text/plain' not supported")

    @app.get("/boom")
    def boom() -> None:
        raise RuntimeError("database password is hunter2")

    return TestClient(app, raise_server_exceptions=False)


def test_request_validation_errors_are_normalized_to_error_response() -> None:
    client = _build_client()

    response = client.get("/query", headers={"X-B3-TraceId": "abc123"})

    assert response.status_code == 400
    payload = response.json()
    assert payload["status"] == 400
    assert payload["code"] == "99999"
    assert payload["message"] == "Bad Request"
    assert payload["requestId"] == "abc123"
    assert payload["requestPath"] == "/query"
    assert payload["details"] == "Validation failed for 'query'. Error count: 1"
    assert payload["fieldErrors"][0]["field"] == "limit"
    assert "code" not in payload["fieldErrors"][0]


def test_domain_errors_use_shared_error_response() -> None:
    client = _build_client()

    response = client.get("/domain")

    assert response.status_code == 400
    payload = response.json()
    assert payload.pop("timestamp").endswith(" UTC")
    assert payload == {
        "status": 400,
        "code": "INVALID_RUN",
        "resource": EXPECTED_RESOURCE,
        "requestId": "UNKNOWN",
        "requestPath": "/domain",
        "message": "Bad Request",
        "details": "Invalid run payload",
        "fieldErrors": [{"field": "status", "code": "ENUM", "message": "Unsupported value"}],
    }


def test_not_found_errors_omit_empty_field_errors() -> None:
    client = _build_client()

    response = client.get("/not-found")

    assert response.status_code == 404
    payload = response.json()
    assert payload["code"] == "PIPELINE_NOT_FOUND"
    assert payload["message"] == "Not Found"
    assert payload["details"] == "Pipeline not found"
    assert "fieldErrors" not in payload


def test_binding_result_errors_use_validation_summary() -> None:
    client = _build_client()

    response = client.get("/binding")

    assert response.status_code == 400
    payload = response.json()
    assert payload["details"] == "Validation failed for 'runCreate'. Error count: 1"
    assert payload["fieldErrors"] == [{"field": "status", "message": "must not be null"}]


def test_http_errors_keep_their_status() -> None:
    client = _build_client()

    response = client.get("/http")

    assert response.status_code == 409
    payload = response.json()
    assert payload["code"] == "UNKNOWN"
    assert payload["message"] == "Conflict"
    assert payload["details"] == "Client already exists"


def test_unknown_routes_return_not_found_error_response() -> None:
    client = _build_client()

    response = client.get("/missing")

    assert response.status_code == 404
    assert response.json()["message"] == "Not Found"
    assert response.json()["requestPath"] == "/missing"


def test_media_type_not_acceptable_returns_406() -> None:
    client = _build_client()

    response = client.get("/media", headers={"Accept": "application/xml"})

    assert response.status_code == 406
    payload = response.json()
    assert payload["message"] == "Not Acceptable"
    assert payload["details"] == "Could not find acceptable representation"


def test_media_type_not_supported_returns_405() -> None:
    client = _build_client()

    response = client.post("/upload")

    assert response.status_code == 405
    assert response.json()["details"] == "Content type 'text/plain' not supported"


def test_unhandled_errors_do_not_leak_details() -> None:
    client = _build_client()

    response = client.get("/boom", headers={"traceparent": "00-4bf92f3577b34da6a3ce929d0e0e4736-00f067aa0ba902b7-01"})

    assert response.status_code == 500
    payload = response.json()
    assert payload["code"] == "99999"
    assert payload["message"] == "Internal Server Error"
    assert payload["requestId"] == "4bf92f3577b34da6a3ce929d0e0e4736"
    assert "details" not in payload
    assert "hunter2" not in response.text


def test_unhandled_errors_are_logged_once_without_traceback(caplog: pytest.LogCaptureFixture) -> None:
    client = _build_client()

    with caplog.at_level(logging.ERROR, logger="service_common.core.errors"):
        client.get("/boom")

    records = [record for record in caplog.records if record.name == "service_common.core.errors"]
    assert len(records) == 1
    assert records[0].exc_info is None
    assert records[0].getMessage() == "An error was caught by the default error handler on /boom: RuntimeError"
