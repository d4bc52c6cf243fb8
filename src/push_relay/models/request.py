"""
Module: request.py
Description: API request models for the Push Relay.

Key Components:
- CreateMessageRequest: Model for POST /messages requests

Dependencies: pydantic, typing
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from push_relay.models.message import Notification, stringify_data


class CreateMessageRequest(BaseModel):
    """
    Request model for creating trigger documents.

    Attributes:
        token: Device delivery token (required)
        notification: Visible notification content (optional)
        data: Data payload (optional, values stringified)
    """

    model_config = ConfigDict(
        str_strip_whitespace=True,
        validate_assignment=True
    )

    token: str = Field(
        ...,
        min_length=1,
        max_length=4096,
        description="Device delivery token"
    )
    notification: Optional[Notification] = Field(
        default=None,
        description="Visible notification content"
    )
    data: Optional[Dict[str, str]] = Field(
        default=None,
        description="Data payload"
    )

    @field_validator('data', mode='before')
    @classmethod
    def coerce_data(cls, v: Any) -> Optional[Dict[str, str]]:
        """Stringify data values the same way stored documents are."""
        return stringify_data(v)

    @model_validator(mode='after')
    def require_payload(self) -> 'CreateMessageRequest':
        """Reject messages with nothing to deliver."""
        if self.notification is None and not self.data:
            raise ValueError("message must include a notification or data")
        return self
