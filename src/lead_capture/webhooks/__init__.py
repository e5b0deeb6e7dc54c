"""
Webhook handling package for the lead capture functions.
Framework-independent handlers plus their request/response models.
"""

from .models import ContactTag, HandlerResponse, TagRequest

__all__ = ["ContactTag", "HandlerResponse", "TagRequest"]
