"""
AWS Lambda handlers for API Gateway proxy events.
"""

import base64
from typing import Any

from loguru import logger

from lead_capture.utils.json_utils import loads_strict
from lead_capture.utils.logging import ensure_logging


def _event_method(event: dict[str, Any]) -> str:
    """HTTP method from a REST (v1) or HTTP API (v2) proxy event."""
    method = event.get("httpMethod")
    if not method:
        method = event.get("requestContext", {}).get("http", {}).get("method", "")
    return method.upper()


def _event_body(event: dict[str, Any]) -> Any:
    """Decode the JSON body; an empty or undecodable body is treated as absent."""
    raw = event.get("body")
    if not raw:
        return None

    try:
        if event.get("isBase64Encoded"):
            raw = base64.b64decode(raw).decode("utf-8")
        return loads_strict(raw)
    except (ValueError, UnicodeDecodeError) as e:
        logger.warning(f"Request body is not valid JSON; treating it as absent: {e}")
        return None


def _to_proxy_response(result) -> dict[str, Any]:
    headers = dict(result.headers)
    if not result.empty:
        headers["Content-Type"] = "application/json"

    return {
        "statusCode": result.status_code,
        "headers": headers,
        "body": result.json_body(),
    }


def _run(handler, event: dict[str, Any]) -> dict[str, Any]:
    # Import inside handler for Lambda
    import asyncio

    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)

    try:
        result = loop.run_until_complete(
            handler(_event_method(event), _event_body(event))
        )
    finally:
        loop.close()

    return _to_proxy_response(result)


def webhook_proxy_handler(event: dict[str, Any], context: Any) -> dict[str, Any]:
    """
    Lambda handler for the Make.com webhook relay.
    """
    ensure_logging("webhook-proxy")

    from lead_capture.webhooks.handlers import handle_webhook_proxy

    logger.info(f"webhook-proxy: {_event_method(event)}")
    return _run(handle_webhook_proxy, event)


def kajabi_tag_handler(event: dict[str, Any], context: Any) -> dict[str, Any]:
    """
    Lambda handler for Kajabi contact tagging.
    """
    ensure_logging("kajabi-tag")

    from lead_capture.webhooks.handlers import handle_kajabi_tag

    logger.info(f"kajabi-tag: {_event_method(event)}")
    return _run(handle_kajabi_tag, event)
