import base64
import json
from unittest.mock import patch

import httpx
import pytest

from lead_capture.infrastructure.external_apis import MakeWebhookClient
from lead_capture.lambda_handlers import kajabi_tag_handler, webhook_proxy_handler
from lead_capture.services.relay import WebhookRelayService


def rest_event(method: str, body: str | None = None, **extra) -> dict:
    """API Gateway REST (v1) proxy event."""
    return {"httpMethod": method, "path": "/", "body": body, **extra}


def http_api_event(method: str, body: str | None = None) -> dict:
    """API Gateway HTTP API (v2) proxy event."""
    return {
        "version": "2.0",
        "requestContext": {"http": {"method": method, "path": "/"}},
        "body": body,
    }


@pytest.fixture
def relay_upstream():
    seen: list[httpx.Request] = []

    def upstream(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"received": True})

    def make_service() -> WebhookRelayService:
        return WebhookRelayService(
            client=MakeWebhookClient(transport=httpx.MockTransport(upstream))
        )

    with patch("lead_capture.webhooks.handlers.WebhookRelayService", make_service):
        yield seen


class TestWebhookProxyLambda:
    """Test the Lambda adapter for the relay."""

    def test_options_has_empty_body(self) -> None:
        response = webhook_proxy_handler(rest_event("OPTIONS"), None)

        assert response["statusCode"] == 200
        assert response["body"] == ""
        assert response["headers"]["Access-Control-Allow-Origin"] == "*"
        assert "Content-Type" not in response["headers"]

    def test_http_api_method(self) -> None:
        response = webhook_proxy_handler(http_api_event("GET"), None)

        assert response["statusCode"] == 405
        assert json.loads(response["body"]) == {"error": "Method not allowed"}

    def test_post_relays(self, relay_upstream) -> None:
        response = webhook_proxy_handler(rest_event("POST", '{"lead": 1}'), None)

        assert response["statusCode"] == 200
        assert response["headers"]["Content-Type"] == "application/json"
        assert json.loads(response["body"]) == {"received": True}
        assert json.loads(relay_upstream[0].content) == {"lead": 1}

    def test_base64_body(self, relay_upstream) -> None:
        encoded = base64.b64encode(b'{"lead": 2}').decode()

        webhook_proxy_handler(rest_event("POST", encoded, isBase64Encoded=True), None)

        assert json.loads(relay_upstream[0].content) == {"lead": 2}

    def test_non_standard_json_is_absent(self, relay_upstream) -> None:
        webhook_proxy_handler(rest_event("POST", '{"lead": Infinity}'), None)

        assert relay_upstream[0].content == b"null"

    def test_overflowing_number_reply_stays_valid_json(self) -> None:
        reply = '{"score": 1e999}'

        def make_service() -> WebhookRelayService:
            return WebhookRelayService(
                client=MakeWebhookClient(
                    transport=httpx.MockTransport(lambda request: httpx.Response(200, text=reply))
                )
            )

        with patch("lead_capture.webhooks.handlers.WebhookRelayService", make_service):
            response = webhook_proxy_handler(rest_event("POST", '{"lead": 1}'), None)

        assert response["statusCode"] == 200
        assert "Infinity" not in response["body"]
        assert json.loads(response["body"]) == {"message": reply}


class TestKajabiTagLambda:
    """Test the Lambda adapter for tagging."""

    def test_invalid_email(self, kajabi_env) -> None:
        response = kajabi_tag_handler(rest_event("POST", '{"tag": "diy"}'), None)

        assert response["statusCode"] == 400
        assert json.loads(response["body"]) == {"ok": False, "error": "Valid email required"}

    def test_undecodable_body_is_absent(self, kajabi_env) -> None:
        response = kajabi_tag_handler(http_api_event("POST", "email=a@x.com"), None)

        assert response["statusCode"] == 400

    def test_put_not_allowed(self, kajabi_env) -> None:
        response = kajabi_tag_handler(rest_event("PUT"), None)

        assert response["statusCode"] == 405
        assert json.loads(response["body"]) == {"ok": False, "error": "Method not allowed"}
