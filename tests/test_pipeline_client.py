import pytest
import requests

from core.db import (
    PipelineError,
    ProtocolError,
    StatementError,
    TransportError,
    build_pipeline_body,
    execute_pipeline,
    parse_pipeline_response,
)
from tests.helpers import make_response


def _execute_payload(result):
    return {
        "results": [
            {"type": "ok", "response": {"type": "execute", "result": result}},
            {"type": "ok", "response": {"type": "close"}},
        ]
    }


def test_body_without_params_has_no_args() -> None:
    body = build_pipeline_body("SELECT 1", [])
    assert body == {
        "requests": [
            {"type": "execute", "stmt": {"sql": "SELECT 1"}},
            {"type": "close"},
        ]
    }
    assert "args" not in build_pipeline_body("SELECT 1")["requests"][0]["stmt"]


def test_body_with_params_encodes_args_in_order() -> None:
    body = build_pipeline_body("INSERT INTO t VALUES (?, ?, ?, ?)", ["Acme", 3, 2.5, None])
    assert body["requests"][0]["stmt"]["args"] == [
        {"type": "text", "value": "Acme"},
        {"type": "integer", "value": "3"},
        {"type": "float", "value": "2.5"},
        {"type": "null"},
    ]
    assert body["requests"][-1] == {"type": "close"}


def test_body_rejects_empty_sql() -> None:
    with pytest.raises(ValueError):
        build_pipeline_body("   ")


def test_request_is_single_authenticated_post(config, monkeypatch) -> None:
    calls = []

    def fake_post(url, headers=None, json=None, timeout=None):
        calls.append((url, headers, json, timeout))
        return make_response(_execute_payload({"cols": [], "rows": []}))

    monkeypatch.setattr(requests, "post", fake_post)
    execute_pipeline("DELETE FROM jobs", None, config)

    assert len(calls) == 1
    url, headers, body, timeout = calls[0]
    assert url == "https://test-db.turso.io/v2/pipeline"
    assert headers == {"Authorization": "Bearer secret-token", "Content-Type": "application/json"}
    assert body["requests"][0]["stmt"] == {"sql": "DELETE FROM jobs"}
    assert timeout == 5


def test_http_error_status_is_transport_error(config, monkeypatch) -> None:
    monkeypatch.setattr(
        requests, "post", lambda *a, **kw: make_response(None, status=401, raw="unauthorized")
    )
    with pytest.raises(TransportError) as exc_info:
        execute_pipeline("SELECT 1", None, config)
    assert exc_info.value.status_code == 401
    assert exc_info.value.detail == "unauthorized"


@pytest.mark.parametrize("exc", [requests.ConnectionError("refused"), requests.Timeout("slow")])
def test_network_failure_is_transport_error(config, monkeypatch, exc) -> None:
    def fake_post(*args, **kwargs):
        raise exc

    monkeypatch.setattr(requests, "post", fake_post)
    with pytest.raises(TransportError) as exc_info:
        execute_pipeline("SELECT 1", None, config)
    assert exc_info.value.status_code is None
    assert exc_info.value.__cause__ is exc


def test_non_json_body_is_protocol_error(config, monkeypatch) -> None:
    monkeypatch.setattr(requests, "post", lambda *a, **kw: make_response(None, raw="<html>"))
    with pytest.raises(ProtocolError):
        execute_pipeline("SELECT 1", None, config)


@pytest.mark.parametrize(
    "payload",
    [
        {},
        {"results": []},
        {"results": "nope"},
        {"results": [{"type": "ok"}]},
        {"results": [{"type": "ok", "response": {}}]},
    ],
)
def test_missing_envelope_is_protocol_error(payload) -> None:
    with pytest.raises(ProtocolError):
        parse_pipeline_response(payload)


def test_protocol_and_transport_errors_are_distinct() -> None:
    assert not issubclass(ProtocolError, TransportError)
    assert not issubclass(TransportError, ProtocolError)
    assert issubclass(ProtocolError, PipelineError)
    assert issubclass(TransportError, PipelineError)


def test_remote_error_result_raises_statement_error() -> None:
    payload = {
        "results": [
            {"type": "error", "error": {"message": "no such table: jobs", "code": "SQLITE_ERROR"}},
            {"type": "ok", "response": {"type": "close"}},
        ]
    }
    with pytest.raises(StatementError) as exc_info:
        parse_pipeline_response(payload)
    assert exc_info.value.code == "SQLITE_ERROR"
    assert "no such table" in str(exc_info.value)


def test_non_execute_response_is_soft_empty_result() -> None:
    payload = {"results": [{"type": "ok", "response": {"type": "error"}}]}
    result = parse_pipeline_response(payload)
    assert result.records == []
    assert result.affected == 0
    assert result.last_insert_id is None
    assert not result.executed
    assert result.remote_type == "error"


def test_execute_response_is_materialized() -> None:
    payload = _execute_payload(
        {
            "cols": [{"name": "n"}],
            "rows": [[{"type": "integer", "value": "0"}]],
            "affected_row_count": 0,
            "last_insert_rowid": None,
        }
    )
    result = parse_pipeline_response(payload)
    assert result.records == [{"n": 0}]
    assert result.executed
