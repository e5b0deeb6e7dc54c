"""
Kajabi tagging workflow: token -> find-or-create contact -> attach tag.
"""

from loguru import logger

from lead_capture.config.settings import KajabiSettings, get_kajabi_settings, get_settings
from lead_capture.core.exceptions import ConfigurationError
from lead_capture.infrastructure.external_apis import KajabiAPIClient
from lead_capture.infrastructure.token_cache import TokenCache, get_token_cache
from lead_capture.models.contact_models import Contact


class TokenProvider:
    """Read-through access to the Kajabi bearer token."""

    def __init__(
        self,
        client: KajabiAPIClient,
        cache: TokenCache,
        settings: KajabiSettings,
    ):
        self.client = client
        self.cache = cache
        self.settings = settings

    async def get_access_token(self) -> str:
        """
        Return a cached token, or exchange client credentials for a new one.

        Raises:
            ConfigurationError: If client credentials are not configured
            AuthenticationError: If the exchange fails
        """
        token = self.cache.get()
        if token is not None:
            logger.debug("Using cached Kajabi access token")
            return token

        if not self.settings.has_credentials:
            raise ConfigurationError(
                message="Kajabi client credentials are not configured",
                error_code="MISSING_CREDENTIALS",
            )

        logger.info("Requesting new Kajabi access token")
        token, expires_in = await self.client.request_access_token(
            self.settings.client_id, self.settings.client_secret
        )
        self.cache.set(token, expires_in)
        return token


class ContactResolver:
    """Find-or-create for contacts keyed by email."""

    def __init__(self, client: KajabiAPIClient, site_id: str):
        self.client = client
        self.site_id = site_id

    async def resolve(self, token: str, email: str) -> Contact:
        contact = await self.client.find_contact_by_email(token, self.site_id, email)
        if contact is not None:
            logger.info(f"Found existing contact {contact.id}")
            return contact

        contact = await self.client.create_contact(token, self.site_id, email)
        logger.info(f"Created contact {contact.id}")
        return contact


class TaggingService:
    """
    Tags a contact identified by email.

    Steps run strictly in order; the first failure propagates and nothing
    already done upstream is rolled back.
    """

    def __init__(
        self,
        client: KajabiAPIClient | None = None,
        cache: TokenCache | None = None,
        settings: KajabiSettings | None = None,
    ):
        if client is None:
            app_settings = get_settings()
            client = KajabiAPIClient(
                timeout=app_settings.upstream_timeout,
                max_attempts=app_settings.upstream_max_attempts,
            )
        self.client = client
        self.settings = settings or get_kajabi_settings()
        self.token_provider = TokenProvider(
            self.client, cache or get_token_cache(), self.settings
        )

    async def tag_contact(self, email: str, tag_id: str) -> Contact:
        """
        Attach ``tag_id`` to the contact for ``email``, creating it if needed.

        Returns:
            The contact that was tagged
        """
        if not self.settings.site_id:
            raise ConfigurationError(
                message="Kajabi site id is not configured",
                error_code="MISSING_SITE_ID",
            )

        async with self.client:
            token = await self.token_provider.get_access_token()
            resolver = ContactResolver(self.client, self.settings.site_id)
            contact = await resolver.resolve(token, email)
            await self.client.add_tag_to_contact(token, contact.id, tag_id)

        logger.info(f"Attached tag {tag_id} to contact {contact.id}")
        return contact
