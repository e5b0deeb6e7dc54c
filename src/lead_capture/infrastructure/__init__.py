"""
Infrastructure package for external integrations.
Handles the Kajabi and Make.com clients and the access-token cache.
"""

from .external_apis import KajabiAPIClient, MakeWebhookClient
from .token_cache import AccessToken, TokenCache, get_token_cache

__all__ = ["KajabiAPIClient", "MakeWebhookClient", "AccessToken", "TokenCache", "get_token_cache"]
