"""
Business services for the lead capture functions.
"""

from .relay import WebhookRelayService
from .tagging import ContactResolver, TaggingService, TokenProvider

__all__ = ["WebhookRelayService", "TaggingService", "TokenProvider", "ContactResolver"]
