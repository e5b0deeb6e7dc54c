"""
Pydantic models for records returned by the upstream APIs.
"""

from .contact_models import Contact

__all__ = ["Contact"]
