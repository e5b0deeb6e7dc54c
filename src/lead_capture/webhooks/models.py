"""
Pydantic models for the relay and tagging handlers.
"""

import json
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from lead_capture.core.exceptions import create_validation_error

EMAIL_REQUIRED_MESSAGE = "Valid email required"
INVALID_TAG_MESSAGE = "Invalid tag. Must be: contractor, diy, or waitlist"

CORS_HEADERS: dict[str, str] = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}


class ContactTag(str, Enum):
    """Tags a visitor can be labelled with."""

    CONTRACTOR = "contractor"
    DIY = "diy"
    WAITLIST = "waitlist"


class TagRequest(BaseModel):
    """Validated body of a tagging request."""

    model_config = ConfigDict(frozen=True, use_enum_values=False)

    email: str = Field(..., description="Contact email address")
    tag: ContactTag = Field(..., description="Tag to attach")
    tag_id: str = Field(..., description="Kajabi tag id the tag resolves to")

    @classmethod
    def from_body(cls, body: Any, tag_map: dict[str, str | None]) -> "TagRequest":
        """
        Validate a raw request body against the configured tag map.

        The email check runs first; a tag whose id is not configured is
        rejected like an unknown tag.

        Raises:
            ValidationError: With the client-facing message
        """
        data = body if isinstance(body, dict) else {}

        email = data.get("email")
        if not isinstance(email, str) or not email or "@" not in email:
            raise create_validation_error(EMAIL_REQUIRED_MESSAGE, field="email")

        tag = data.get("tag")
        tag_id = tag_map.get(tag) if isinstance(tag, str) else None
        if not tag_id:
            raise create_validation_error(INVALID_TAG_MESSAGE, field="tag")

        return cls(email=email, tag=ContactTag(tag), tag_id=tag_id)


class RelayResult(BaseModel):
    """Interpreted response from the relay target."""

    upstream_status: int
    body: Any = None
    was_json: bool = True


class HandlerResponse(BaseModel):
    """
    Framework-independent HTTP response.

    ``empty`` responses carry no body at all; otherwise ``body`` is sent as
    JSON, including a literal ``null``.
    """

    status_code: int
    body: Any = None
    empty: bool = False
    headers: dict[str, str] = Field(default_factory=lambda: dict(CORS_HEADERS))

    def json_body(self) -> str:
        return "" if self.empty else json.dumps(self.body)
