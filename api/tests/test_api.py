from datetime import datetime

import httpx
import pytest
from fastapi.testclient import TestClient

from slack_send.main import app
from slack_send.routers.actions import get_dispatcher

WEBHOOK_CONTEXT = {"environment": {"ADDRESS": "https://hooks.slack.com/services/T000/B000/XXXX"}}


@pytest.fixture
def client_for(make_dispatcher):
    def factory(*responses: httpx.Response):
        dispatcher, slack = make_dispatcher(*responses)
        app.dependency_overrides[get_dispatcher] = lambda: dispatcher
        return TestClient(app), slack

    yield factory
    app.dependency_overrides.clear()


def test_invoke_webhook(client_for) -> None:
    client, slack = client_for(httpx.Response(200, text="ok"))

    resp = client.post(
        "/v1/invoke",
        json={"params": {"text": "Hello", "isWebhook": True}, "context": WEBHOOK_CONTEXT},
    )

    assert resp.status_code == 200
    assert resp.json() == {"status": "success", "text": "Hello", "ok": True, "mode": "webhook"}
    assert len(slack.requests) == 1


def test_invoke_validation_error(client_for) -> None:
    client, slack = client_for()

    resp = client.post("/v1/invoke", json={"params": {"text": "  ", "channel": "#general"}})

    assert resp.status_code == 422
    assert resp.json() == {
        "error": {
            "code": 422,
            "type": "ValidationError",
            "message": "text parameter is required and cannot be empty",
        }
    }
    assert slack.requests == []


def test_invoke_transport_error(client_for) -> None:
    client, _ = client_for(httpx.Response(503))

    resp = client.post(
        "/v1/invoke",
        json={"params": {"text": "Hello", "isWebhook": True}, "context": WEBHOOK_CONTEXT},
    )

    assert resp.status_code == 502
    assert resp.json()["error"]["message"] == "Webhook request failed: 503 Service Unavailable"


def test_malformed_body_is_rejected(client_for) -> None:
    client, _ = client_for()

    resp = client.post("/v1/error", json={"params": {"text": "Hello"}})

    assert resp.status_code == 422
    assert resp.json()["error"]["message"] == "Validation error"


def test_error_endpoint_requests_retry(client_for) -> None:
    client, _ = client_for()

    resp = client.post("/v1/error", json={"error": {"message": "Server error: 503"}})

    assert resp.status_code == 200
    assert resp.json() == {"status": "retry_requested"}


def test_error_endpoint_reraises_fatal(client_for) -> None:
    client, _ = client_for()

    resp = client.post(
        "/v1/error", json={"error": {"message": "Authentication failed: 401 Unauthorized"}}
    )

    assert resp.status_code == 400
    assert resp.json()["error"]["message"] == "Authentication failed: 401 Unauthorized"


def test_error_endpoint_retries_rate_limit(client_for) -> None:
    client, slack = client_for(httpx.Response(200, text="ok"))

    resp = client.post(
        "/v1/error",
        json={
            "params": {"text": "Hello", "isWebhook": True},
            "context": WEBHOOK_CONTEXT,
            "error": {"message": "Rate limited: 429"},
        },
    )

    assert resp.status_code == 200
    assert resp.json()["status"] == "success"
    assert len(slack.requests) == 1


def test_halt(client_for) -> None:
    client, _ = client_for()

    resp = client.post("/v1/halt", json={"reason": "timeout"})

    body = resp.json()
    assert resp.status_code == 200
    assert body["status"] == "halted"
    assert body["reason"] == "timeout"
    datetime.fromisoformat(body["halted_at"].replace("Z", "+00:00"))


def test_health(client_for) -> None:
    client, _ = client_for()

    resp = client.get("/health")

    assert resp.status_code == 200
    assert resp.json()["status"] == "healthy"


def test_configuration_error_stays_fatal_when_handed_back(client_for) -> None:
    client, slack = client_for()
    params = {"text": "Hello", "channel": "#general"}
    context = {"environment": {"ADDRESS": "https://slack.com"}}

    failed = client.post("/v1/invoke", json={"params": params, "context": context})
    assert failed.status_code == 400
    error = failed.json()["error"]
    assert error["type"] == "ConfigurationError"

    resp = client.post("/v1/error", json={"params": params, "context": context, "error": error})

    assert resp.status_code == 400
    assert resp.json()["error"]["type"] == "ConfigurationError"
    assert resp.json()["error"]["message"] == error["message"]
    assert slack.requests == []


def test_oversized_text_stays_fatal_when_handed_back(client_for) -> None:
    client, _ = client_for()
    params = {"text": "x" * 4001, "isWebhook": True}

    failed = client.post("/v1/invoke", json={"params": params, "context": WEBHOOK_CONTEXT})
    error = failed.json()["error"]

    resp = client.post("/v1/error", json={"params": params, "context": WEBHOOK_CONTEXT, "error": error})

    assert resp.status_code == 422
    assert resp.json()["error"]["type"] == "ValidationError"


def test_platform_error_envelope_carries_slack_code(client_for) -> None:
    client, _ = client_for(httpx.Response(200, json={"ok": False, "error": "channel_not_found"}))
    params = {"text": "Hello", "channel": "#nope"}
    context = {"environment": {"ADDRESS": "https://slack.com"}, "secrets": {"BEARER_AUTH_TOKEN": "xoxb-1"}}

    failed = client.post("/v1/invoke", json={"params": params, "context": context})
    error = failed.json()["error"]
    assert error["platform_code"] == "channel_not_found"

    resp = client.post("/v1/error", json={"params": params, "context": context, "error": error})

    assert resp.status_code == 502
    assert resp.json()["error"]["type"] == "PlatformError"


def test_transport_error_envelope_carries_status(client_for) -> None:
    client, slack = client_for(httpx.Response(503))
    params = {"text": "Hello", "isWebhook": True}

    failed = client.post("/v1/invoke", json={"params": params, "context": WEBHOOK_CONTEXT})
    error = failed.json()["error"]
    assert error["status"] == 503

    resp = client.post("/v1/error", json={"params": params, "context": WEBHOOK_CONTEXT, "error": error})

    assert resp.json() == {"status": "retry_requested"}
    assert len(slack.requests) == 1


def test_unknown_route_uses_error_envelope(client_for) -> None:
    client, _ = client_for()

    resp = client.get("/v1/nope")

    assert resp.status_code == 404
    assert resp.json() == {"error": {"code": 404, "message": "Not Found"}}
