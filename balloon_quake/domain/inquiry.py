"""Free-text inquiries submitted from the dashboard."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from balloon_quake.foundation.clock import utc_now
from balloon_quake.foundation.identifiers import new_id


class InquiryValidationError(ValueError):
    """Raised when a submission is missing its message or contact."""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(reason)


class Inquiry(BaseModel):
    """An acknowledged question, stored with a generated id."""

    inquiry_id: str = Field(default_factory=new_id, min_length=1)
    message: str = Field(..., min_length=1)
    contact: str = Field(..., min_length=1)
    received_at: datetime = Field(default_factory=utc_now)

    model_config = {"frozen": True}

    @classmethod
    def from_submission(cls, message: Any, contact: Any) -> Inquiry:
        """Validate raw submission fields and build an Inquiry.

        Raises:
            InquiryValidationError: If either field is missing, not text,
                or blank once stripped.
        """
        if not isinstance(message, str) or not message.strip():
            raise InquiryValidationError('Missing question text in "message"')
        if not isinstance(contact, str) or not contact.strip():
            raise InquiryValidationError('Please include contact info in "contact"')
        return cls(message=message.strip(), contact=contact.strip())
