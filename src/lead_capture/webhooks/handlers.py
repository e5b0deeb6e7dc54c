"""
Request handlers for the relay and tagging functions.

Both handlers take the HTTP method and the parsed JSON body and return a
HandlerResponse; the FastAPI app and the Lambda adapters only translate.
"""

from typing import Any

from loguru import logger

from lead_capture.config.settings import TAG_NAMES, get_kajabi_settings
from lead_capture.core.exceptions import ValidationError
from lead_capture.services.relay import WebhookRelayService
from lead_capture.services.tagging import TaggingService
from lead_capture.utils.logging import logged_as
from .models import HandlerResponse, TagRequest


def _preflight_or_reject(method: str, method_not_allowed_body: dict[str, Any]) -> HandlerResponse | None:
    """Answer OPTIONS and non-POST methods; None means carry on with POST."""
    method = method.upper()
    if method == "OPTIONS":
        return HandlerResponse(status_code=200, empty=True)
    if method != "POST":
        return HandlerResponse(status_code=405, body=method_not_allowed_body)
    return None


@logged_as("webhook-proxy")
async def handle_webhook_proxy(
    method: str,
    body: Any,
    service: WebhookRelayService | None = None,
) -> HandlerResponse:
    """Forward a POSTed payload to Make.com and relay the reply."""
    early = _preflight_or_reject(method, {"error": "Method not allowed"})
    if early is not None:
        return early

    try:
        service = service or WebhookRelayService()
        result = await service.relay(body)
        return HandlerResponse(status_code=200, body=result.body)

    except Exception as e:
        logger.error(f"Proxy error: {e!r}")
        return HandlerResponse(
            status_code=500,
            body={"error": "Failed to connect to Make.com", "details": str(e)},
        )


@logged_as("kajabi-tag")
async def handle_kajabi_tag(
    method: str,
    body: Any,
    service: TaggingService | None = None,
) -> HandlerResponse:
    """Validate an ``{email, tag}`` body and tag the matching Kajabi contact."""
    early = _preflight_or_reject(method, {"ok": False, "error": "Method not allowed"})
    if early is not None:
        return early

    try:
        request = TagRequest.from_body(body, get_kajabi_settings().tag_map())
    except ValidationError as e:
        tag = body.get("tag") if isinstance(body, dict) else None
        if e.details.get("field") == "tag" and tag in TAG_NAMES:
            logger.warning(f"No Kajabi tag id configured for '{tag}'")
        logger.info(f"Rejected tag request: {e.message}")
        return HandlerResponse(status_code=400, body={"ok": False, "error": e.message})

    try:
        service = service or TaggingService()
        await service.tag_contact(request.email, request.tag_id)
        return HandlerResponse(status_code=200, body={"ok": True})

    except Exception as e:
        logger.error(f"Kajabi API error: {e}")
        return HandlerResponse(status_code=500, body={"ok": False, "error": "Server error"})
