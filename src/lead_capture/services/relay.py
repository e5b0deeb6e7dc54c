"""
Relay of inbound payloads to the Make.com automation webhook.
"""

from typing import Any

from loguru import logger

from lead_capture.config.settings import get_settings
from lead_capture.infrastructure.external_apis import MakeWebhookClient
from lead_capture.utils.json_utils import loads_strict
from lead_capture.webhooks.models import RelayResult


def interpret_upstream_body(text: str) -> tuple[Any, bool]:
    """Parse upstream text as JSON, wrapping anything else as ``{"message": text}``."""
    try:
        return loads_strict(text), True
    except ValueError:
        return {"message": text}, False


class WebhookRelayService:
    """Forwards payloads verbatim and interprets the reply."""

    def __init__(self, client: MakeWebhookClient | None = None):
        if client is None:
            app_settings = get_settings()
            client = MakeWebhookClient(
                timeout=app_settings.upstream_timeout,
                max_attempts=app_settings.upstream_max_attempts,
            )
        self.client = client

    async def relay(self, payload: Any) -> RelayResult:
        """
        Forward ``payload`` and return the interpreted upstream reply.

        The upstream status code is recorded but does not affect the result
        body; network failures propagate.
        """
        status_code, text = await self.client.forward(payload)
        body, was_json = interpret_upstream_body(text)

        if status_code >= 400:
            logger.warning(f"Relay target answered HTTP {status_code}; relaying body as-is")
        else:
            logger.info(f"Relay target answered HTTP {status_code}")

        return RelayResult(upstream_status=status_code, body=body, was_json=was_json)
