"""
External API clients with async support.
Uses httpx for the Kajabi REST API and the Make.com webhook.
"""

import json
from dataclasses import dataclass
from typing import Any

import httpx
from loguru import logger

from lead_capture.config.settings import (
    KAJABI_API_BASE_URL,
    KAJABI_TOKEN_PATH,
    MAKE_WEBHOOK_URL,
)
from lead_capture.core.exceptions import (
    create_authentication_error,
    create_external_api_error,
)
from lead_capture.utils.retry import call_with_retry
from lead_capture.models.contact_models import Contact

JSON_API_CONTENT_TYPE = "application/vnd.api+json"


@dataclass
class APIConfig:
    """Configuration for external API clients."""

    base_url: str
    timeout: float | None = None
    max_attempts: int = 1


class KajabiAPIClient:
    """
    Async Kajabi API client.
    Covers the OAuth token exchange and the contact/tag calls the tagger needs.
    """

    def __init__(
        self,
        base_url: str = KAJABI_API_BASE_URL,
        timeout: float | None = None,
        max_attempts: int = 1,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        Initialize Kajabi API client.

        Args:
            base_url: Base URL for the Kajabi API
            timeout: Request timeout in seconds, None for no client-side limit
            max_attempts: Attempts per call for transport failures
            transport: Optional httpx transport (tests)
        """
        self.config = APIConfig(
            base_url=base_url, timeout=timeout, max_attempts=max_attempts
        )
        self._transport = transport
        self._client: httpx.AsyncClient | None = None
        # Open "async with" blocks; the last one to exit closes the client
        self._users = 0

    async def __aenter__(self):
        """Async context manager entry."""
        self._users += 1
        if not self._client:
            self._client = httpx.AsyncClient(
                base_url=self.config.base_url,
                headers={"User-Agent": "lead-capture/1.0"},
                timeout=httpx.Timeout(self.config.timeout),
                transport=self._transport,
            )

        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        self._users = max(0, self._users - 1)
        if self._client and self._users == 0:
            client, self._client = self._client, None
            await client.aclose()

    def _require_client(self) -> httpx.AsyncClient:
        if not self._client:
            raise RuntimeError(
                "Client not initialized. Use 'async with' context manager."
            )
        return self._client

    async def _send(self, method: str, url: str, **kwargs) -> httpx.Response:
        client = self._require_client()
        return await call_with_retry(
            lambda: client.request(method, url, **kwargs),
            self.config.max_attempts,
        )

    @staticmethod
    def _auth_headers(token: str) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {token}",
            "Content-Type": JSON_API_CONTENT_TYPE,
        }

    async def request_access_token(
        self, client_id: str, client_secret: str
    ) -> tuple[str, float]:
        """
        Exchange client credentials for a bearer token.

        Returns:
            The token and its upstream-reported lifetime in seconds

        Raises:
            AuthenticationError: If the exchange is rejected or malformed
        """
        response = await self._send(
            "POST",
            KAJABI_TOKEN_PATH,
            data={
                "client_id": client_id,
                "client_secret": client_secret,
                "grant_type": "client_credentials",
            },
        )

        if not response.is_success:
            logger.error(f"Kajabi token exchange failed: HTTP {response.status_code}")
            raise create_authentication_error(response.status_code, response.text)

        try:
            data = response.json()
            token = data["access_token"]
        except (ValueError, KeyError, TypeError) as e:
            raise create_authentication_error(
                response.status_code, f"malformed token response: {e}"
            ) from e

        try:
            expires_in = float(data.get("expires_in"))
        except (TypeError, ValueError):
            # No usable lifetime: the token is used once and never reused
            logger.warning("Kajabi token response carried no expires_in")
            expires_in = 0.0

        return token, expires_in

    async def find_contact_by_email(
        self, token: str, site_id: str, email: str
    ) -> Contact | None:
        """
        Find the contact whose email exactly matches ``email``.

        Kajabi's search filter is fuzzy, so the exact case-insensitive match
        is done here over the returned page.

        Returns:
            Matching contact, or None if no exact match exists
        """
        response = await self._send(
            "GET",
            "/v1/contacts",
            params={"filter[site_id]": site_id, "filter[search]": email},
            headers=self._auth_headers(token),
        )

        if not response.is_success:
            logger.error(f"Kajabi contact search failed: HTTP {response.status_code}")
            raise create_external_api_error(
                "kajabi.contacts.search", response.status_code, "Failed to search contacts"
            )

        records = response.json().get("data") or []
        logger.debug(f"Contact search returned {len(records)} candidate(s)")

        for record in records:
            contact = Contact.from_record(record)
            if contact.matches_email(email):
                return contact

        return None

    async def create_contact(self, token: str, site_id: str, email: str) -> Contact:
        """Create a subscribed contact on the given site."""
        payload = {
            "data": {
                "type": "contacts",
                "attributes": {
                    "email": email,
                    "subscribed": True,
                },
                "relationships": {
                    "site": {
                        "data": {"type": "sites", "id": site_id},
                    },
                },
            },
        }

        response = await self._send(
            "POST",
            "/v1/contacts",
            content=json.dumps(payload),
            headers=self._auth_headers(token),
        )

        if not response.is_success:
            logger.error(f"Kajabi contact create failed: HTTP {response.status_code}")
            raise create_external_api_error(
                "kajabi.contacts.create",
                response.status_code,
                f"Failed to create contact: {response.text}",
            )

        return Contact.from_record(response.json()["data"])

    async def add_tag_to_contact(
        self, token: str, contact_id: str, tag_id: str
    ) -> dict[str, Any]:
        """Attach a tag to a contact through the tags relationship endpoint."""
        payload = {"data": [{"type": "contact_tags", "id": tag_id}]}

        response = await self._send(
            "POST",
            f"/v1/contacts/{contact_id}/relationships/tags",
            content=json.dumps(payload),
            headers=self._auth_headers(token),
        )

        if not response.is_success:
            logger.error(f"Kajabi tag attach failed: HTTP {response.status_code}")
            raise create_external_api_error(
                "kajabi.contacts.tags",
                response.status_code,
                f"Failed to add tag: {response.text}",
            )

        if not response.content:
            return {}
        try:
            return response.json()
        except ValueError:
            return {}


class MakeWebhookClient:
    """Posts JSON payloads to the Make.com automation webhook."""

    def __init__(
        self,
        url: str = MAKE_WEBHOOK_URL,
        timeout: float | None = None,
        max_attempts: int = 1,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.url = url
        self.timeout = timeout
        self.max_attempts = max_attempts
        self._transport = transport

    async def forward(self, payload: Any) -> tuple[int, str]:
        """
        POST ``payload`` re-encoded as JSON.

        Returns:
            Upstream status code and raw response text

        Raises:
            httpx.HTTPError: On network failure
        """
        async with httpx.AsyncClient(
            timeout=httpx.Timeout(self.timeout), transport=self._transport
        ) as client:
            response = await call_with_retry(
                lambda: client.post(
                    self.url,
                    content=json.dumps(payload),
                    headers={"Content-Type": "application/json"},
                ),
                self.max_attempts,
            )

        return response.status_code, response.text
