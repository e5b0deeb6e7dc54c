"""
Single-slot cache for the Kajabi bearer token.

Holds at most one token with its expiry instant. The cache is process-wide
and unlocked: concurrent misses may each fetch a token, last writer wins.
"""

import time
from collections.abc import Callable
from dataclasses import dataclass

from loguru import logger

from lead_capture.config.settings import TOKEN_EXPIRY_MARGIN_SECONDS


@dataclass(frozen=True)
class AccessToken:
    """Opaque bearer credential and the instant (epoch seconds) it stops being reused."""

    value: str
    expires_at: float

    def is_valid(self, now: float) -> bool:
        return now < self.expires_at


class TokenCache:
    """
    Read-through token slot with an explicit clock.

    Args:
        clock: Returns the current time in epoch seconds
        expiry_margin: Seconds subtracted from the upstream lifetime
    """

    def __init__(
        self,
        clock: Callable[[], float] = time.time,
        expiry_margin: float = TOKEN_EXPIRY_MARGIN_SECONDS,
    ):
        self.clock = clock
        self.expiry_margin = expiry_margin
        self._token: AccessToken | None = None

    def get(self) -> str | None:
        """Return the cached token value, or None if absent or expired."""
        token = self._token
        if token is not None and token.is_valid(self.clock()):
            return token.value
        return None

    def set(self, value: str, lifetime_seconds: float) -> AccessToken:
        """Store a token issued now with the given upstream lifetime."""
        token = AccessToken(
            value=value,
            expires_at=self.clock() + (lifetime_seconds - self.expiry_margin),
        )
        self._token = token
        logger.debug(f"Cached access token until {token.expires_at:.0f}")
        return token

    def clear(self) -> None:
        self._token = None

    @property
    def token(self) -> AccessToken | None:
        return self._token


_token_cache: TokenCache | None = None


def get_token_cache() -> TokenCache:
    """Get or create the process-wide token cache."""
    global _token_cache
    if _token_cache is None:
        _token_cache = TokenCache()
    return _token_cache
