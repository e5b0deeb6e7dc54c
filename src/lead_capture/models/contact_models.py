"""
Kajabi contact model.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict


class Contact(BaseModel):
    """A Kajabi contact record, reduced to what the tagger needs."""

    model_config = ConfigDict(extra="ignore")

    id: str
    email: str | None = None

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> "Contact":
        """Build from a JSON:API resource object."""
        attributes = record.get("attributes") or {}
        return cls(id=str(record["id"]), email=attributes.get("email"))

    def matches_email(self, email: str) -> bool:
        """Exact, case-insensitive email comparison."""
        return self.email is not None and self.email.lower() == email.lower()
